"""Map provider payloads onto the canonical restaurant models.

All functions here are pure: no I/O and no randomness. Every optional
canonical field gets a default, and records that cannot be placed on a map
(missing or non-finite coordinates) are dropped rather than zero-filled.
"""

import logging
import math
from collections.abc import Iterable
from datetime import datetime, timezone

from foodfinder.exceptions import ProviderError
from foodfinder.models import (
    GoogleDetail,
    GooglePlace,
    Location,
    RawDetail,
    RawResult,
    Restaurant,
    RestaurantDetail,
    Review,
    YelpBusiness,
    YelpDetail,
)
from foodfinder.models.raw import GoogleReview, YelpOpenSlot, YelpReview

logger = logging.getLogger(__name__)

DEFAULT_CUISINE = "Restaurant"
DEFAULT_PRICE_RANGE = 2

_WEEKDAYS = ["Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun"]

# Google place types that say nothing about the cuisine
_GENERIC_GOOGLE_TYPES = {"restaurant", "food", "point_of_interest", "establishment"}


def price_from_symbols(price: str | None) -> int:
    """Count the ``$`` symbols of a Yelp price string ("$$$" -> 3)."""
    if not price or not price.strip():
        return DEFAULT_PRICE_RANGE
    return max(1, min(len(price.strip()), 4))


def price_from_level(level: int | None) -> int:
    """Map a Google ``price_level`` (0-4) onto the 1-4 scale."""
    if level is None:
        return DEFAULT_PRICE_RANGE
    return max(1, min(int(level), 4))


def clamp_rating(rating: float | None) -> float:
    if rating is None or not math.isfinite(rating):
        return 0.0
    return max(0.0, min(float(rating), 5.0))


def make_location(lat: float | None, lng: float | None) -> Location | None:
    """Build a Location, or None if either coordinate is missing or invalid."""
    if lat is None or lng is None:
        return None
    if not (math.isfinite(lat) and math.isfinite(lng)):
        return None
    if not (-90 <= lat <= 90 and -180 <= lng <= 180):
        return None
    return Location(lat=lat, lng=lng)


def join_address(*parts: str | None) -> str:
    """Join address components with ", ", skipping empty ones."""
    return ", ".join(part.strip() for part in parts if part and part.strip())


def _fallback_description(name: str) -> str:
    return f"{name} - A local favorite restaurant."


# Yelp


def _yelp_location(business: YelpBusiness) -> Location | None:
    coords = business.coordinates
    if coords is None:
        return None
    return make_location(coords.latitude, coords.longitude)


def _yelp_titles(business: YelpBusiness) -> list[str]:
    return [c.title for c in business.categories if c.title]


def _yelp_fields(business: YelpBusiness, location: Location) -> dict:
    titles = _yelp_titles(business)
    return {
        "id": business.id,
        "name": business.name,
        "cuisine": titles[0] if titles else DEFAULT_CUISINE,
        "description": ", ".join(titles) or _fallback_description(business.name),
        "website": business.url,
        "price_range": price_from_symbols(business.price),
        "rating": clamp_rating(business.rating),
        "location": location,
        "image": business.image_url,
    }


def _format_yelp_slot(slot: YelpOpenSlot) -> str:
    def _fmt(t: str) -> str:
        t = t.zfill(4)
        return f"{t[:2]}:{t[2:]}"

    day = _WEEKDAYS[slot.day] if 0 <= slot.day < len(_WEEKDAYS) else str(slot.day)
    return f"{day} {_fmt(slot.start)}-{_fmt(slot.end)}"


def _yelp_review(review: YelpReview) -> Review:
    return Review(
        id=review.id,
        rating=clamp_rating(review.rating),
        text=review.text or "",
        time=review.time_created or "",
        username=(review.user.name if review.user else None) or "",
    )


def _normalize_yelp(business: YelpBusiness) -> Restaurant | None:
    location = _yelp_location(business)
    if location is None:
        return None

    address = business.location
    return Restaurant(
        **_yelp_fields(business, location),
        address=join_address(address.address1, address.city) if address else "",
        phone=business.phone or business.display_phone,
    )


def _normalize_yelp_detail(detail: YelpDetail) -> RestaurantDetail:
    business = detail.business
    location = _yelp_location(business)
    if location is None:
        raise ProviderError(f"yelp business {business.id} has no coordinates", "yelp")

    address = ""
    if business.location:
        loc = business.location
        region = " ".join(p for p in (loc.state, loc.zip_code) if p)
        address = join_address(loc.address1, loc.city, region)

    hours = business.hours[0].open if business.hours else []
    return RestaurantDetail(
        **_yelp_fields(business, location),
        address=address,
        phone=business.display_phone or business.phone,
        review_count=business.review_count or 0,
        photos=business.photos,
        hours=[_format_yelp_slot(slot) for slot in hours],
        reviews=[_yelp_review(r) for r in detail.reviews],
    )


# Google Places


def _google_location(place: GooglePlace) -> Location | None:
    if place.geometry is None or place.geometry.location is None:
        return None
    point = place.geometry.location
    return make_location(point.lat, point.lng)


def _humanize_type(place_type: str) -> str:
    return place_type.replace("_", " ").title()


def _google_cuisine(place: GooglePlace) -> str:
    for place_type in place.types:
        if place_type.endswith("_restaurant"):
            return _humanize_type(place_type.removesuffix("_restaurant"))
    return DEFAULT_CUISINE


def _google_description(place: GooglePlace) -> str:
    if place.editorial_summary and place.editorial_summary.overview:
        return place.editorial_summary.overview
    specific = [t for t in place.types if t not in _GENERIC_GOOGLE_TYPES]
    if specific:
        return ", ".join(_humanize_type(t) for t in specific)
    return _fallback_description(place.name)


def _google_fields(place: GooglePlace, location: Location) -> dict:
    photo_urls = [p.url for p in place.photos if p.url]
    return {
        "id": place.place_id,
        "name": place.name,
        "cuisine": _google_cuisine(place),
        "description": _google_description(place),
        "phone": place.formatted_phone_number or place.international_phone_number,
        "website": place.website,
        "price_range": price_from_level(place.price_level),
        "rating": clamp_rating(place.rating),
        "location": location,
        "image": photo_urls[0] if photo_urls else None,
    }


def _google_review(place_id: str, index: int, review: GoogleReview) -> Review:
    time = ""
    if review.time is not None:
        time = datetime.fromtimestamp(review.time, tz=timezone.utc).isoformat()
    return Review(
        id=f"{place_id}-review-{index + 1}",
        rating=clamp_rating(review.rating),
        text=review.text or "",
        time=time,
        username=review.author_name or "",
    )


def _normalize_google(place: GooglePlace) -> Restaurant | None:
    location = _google_location(place)
    if location is None:
        return None

    return Restaurant(
        **_google_fields(place, location),
        address=place.vicinity or place.formatted_address or "",
    )


def _normalize_google_detail(detail: GoogleDetail) -> RestaurantDetail:
    place = detail.place
    location = _google_location(place)
    if location is None:
        raise ProviderError(
            f"google place {place.place_id} has no coordinates", "google"
        )

    return RestaurantDetail(
        **_google_fields(place, location),
        address=place.formatted_address or place.vicinity or "",
        review_count=place.user_ratings_total or 0,
        photos=[p.url for p in place.photos if p.url],
        hours=place.opening_hours.weekday_text if place.opening_hours else [],
        reviews=[
            _google_review(place.place_id, i, r) for i, r in enumerate(detail.reviews)
        ],
    )


# Public API


def normalize(raw: RawResult) -> Restaurant | None:
    """Map one raw search result to a Restaurant.

    Returns:
        The canonical restaurant, or None if the record has no usable
        coordinates and must be left out of the results
    """
    if isinstance(raw, YelpBusiness):
        return _normalize_yelp(raw)
    if isinstance(raw, GooglePlace):
        return _normalize_google(raw)
    raise TypeError(f"Unsupported raw result type: {type(raw).__name__}")


def normalize_all(raws: Iterable[RawResult]) -> list[Restaurant]:
    """Normalize a batch, preserving order and dropping unplaceable records."""
    restaurants = []
    dropped = 0
    for raw in raws:
        restaurant = normalize(raw)
        if restaurant is None:
            logger.debug(f"Dropping {raw.provider} record {raw.name!r}: no coordinates")
            dropped += 1
            continue
        restaurants.append(restaurant)

    if dropped:
        logger.info(f"Dropped {dropped} record(s) without coordinates")
    return restaurants


def normalize_detail(raw: RawDetail) -> RestaurantDetail:
    """Map a raw details payload to a RestaurantDetail.

    Raises:
        ProviderError: If the provider returned a place without coordinates
    """
    if isinstance(raw, YelpDetail):
        return _normalize_yelp_detail(raw)
    if isinstance(raw, GoogleDetail):
        return _normalize_google_detail(raw)
    raise TypeError(f"Unsupported raw detail type: {type(raw).__name__}")
