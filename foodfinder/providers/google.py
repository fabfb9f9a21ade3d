"""Google Places provider client."""

import logging
from urllib.parse import quote

from foodfinder.exceptions import NotFoundError, ProviderError
from foodfinder.models import GoogleDetail, GooglePlace, Location
from foodfinder.models.raw import GoogleReview
from foodfinder.providers.base import DEFAULT_LIMIT, ProviderClient, parse_records

logger = logging.getLogger(__name__)

GOOGLE_MAPS_API_URL = "https://maps.googleapis.com/maps/api"

GOOGLE_MAX_RADIUS = 50000
# Nearby Search returns at most 20 results per page
GOOGLE_PAGE_SIZE = 20
PHOTO_MAX_WIDTH = 400
# Server route that proxies Place Photos so the key never reaches clients
PHOTO_ROUTE = "/api/photos"

DETAIL_FIELDS = ",".join(
    [
        "place_id",
        "name",
        "rating",
        "user_ratings_total",
        "formatted_address",
        "formatted_phone_number",
        "website",
        "geometry",
        "photos",
        "price_level",
        "types",
        "opening_hours",
        "editorial_summary",
        "reviews",
    ]
)

_OK_STATUSES = {"OK", "ZERO_RESULTS"}
_NOT_FOUND_STATUSES = {"NOT_FOUND", "INVALID_REQUEST", "ZERO_RESULTS"}


class GooglePlacesClient(ProviderClient):
    """Google Places Nearby Search / Place Details / Geocoding, API-key auth."""

    kind = "google"
    max_radius = GOOGLE_MAX_RADIUS

    def __init__(
        self,
        api_key: str | None,
        base_url: str = GOOGLE_MAPS_API_URL,
        photo_route: str = PHOTO_ROUTE,
        **kwargs,
    ):
        super().__init__(api_key, **kwargs)
        self.base_url = base_url.rstrip("/")
        self.photo_route = photo_route.rstrip("/")

    def _photo_url(self, photo_reference: str) -> str:
        # Points at the server's photo route; the API key is added upstream only
        return f"{self.photo_route}/{quote(photo_reference, safe='')}"

    def _attach_photo_urls(self, place: GooglePlace) -> None:
        for photo in place.photos:
            if photo.photo_reference and not photo.url:
                photo.url = self._photo_url(photo.photo_reference)

    def _check_status(self, data: dict, *, what: str) -> str:
        status = data.get("status")
        if status not in _OK_STATUSES:
            detail = data.get("error_message") or status or "missing status"
            raise ProviderError(f"google {what} failed: {detail}", provider=self.kind)
        return status

    async def search(
        self,
        center: Location,
        radius_m: int | None = None,
        keyword: str | None = None,
        limit: int | None = None,
    ) -> list[GooglePlace]:
        """Run a Nearby Search for restaurants.

        Google has no limit parameter, so the first page is truncated locally.
        """
        params: dict = {
            "location": f"{center.lat},{center.lng}",
            "radius": self.clamp_radius(radius_m),
            "type": "restaurant",
            "key": self._require_key(),
        }
        if keyword:
            params["keyword"] = keyword

        data = await self._get_json(
            f"{self.base_url}/place/nearbysearch/json", params=params
        )
        if self._check_status(data, what="nearby search") == "ZERO_RESULTS":
            return []

        places = parse_records(self.kind, GooglePlace, data.get("results"))
        for place in places:
            self._attach_photo_urls(place)

        return places[: max(1, min(limit or DEFAULT_LIMIT, GOOGLE_PAGE_SIZE))]

    async def get_details(self, restaurant_id: str) -> GoogleDetail:
        """Fetch Place Details for one place id."""
        params = {
            "place_id": restaurant_id,
            "fields": DETAIL_FIELDS,
            "key": self._require_key(),
        }
        data = await self._get_json(
            f"{self.base_url}/place/details/json", params=params
        )

        status = data.get("status")
        if status in _NOT_FOUND_STATUSES or (status == "OK" and not data.get("result")):
            raise NotFoundError(f"Restaurant {restaurant_id} not found")
        self._check_status(data, what="place details")

        result = data["result"]
        places = parse_records(self.kind, GooglePlace, [result])
        if not places:
            raise ProviderError(
                f"google returned a malformed place for {restaurant_id}",
                provider=self.kind,
            )
        place = places[0]
        self._attach_photo_urls(place)

        reviews = parse_records(self.kind, GoogleReview, result.get("reviews") or [])
        return GoogleDetail(place=place, reviews=reviews)

    async def geocode(self, address: str) -> Location:
        """Resolve a free-text address to coordinates via the Geocoding API.

        Raises:
            NotFoundError: If Google finds no match
            ProviderError: On any other failure
        """
        params = {"address": address, "key": self._require_key()}
        data = await self._get_json(f"{self.base_url}/geocode/json", params=params)

        if self._check_status(data, what="geocoding") == "ZERO_RESULTS":
            raise NotFoundError(f"No location found for '{address}'")

        try:
            point = data["results"][0]["geometry"]["location"]
            return Location(lat=point["lat"], lng=point["lng"])
        except (KeyError, IndexError, TypeError, ValueError) as e:
            raise ProviderError(
                "google geocoding returned a malformed result",
                provider=self.kind,
                cause=e,
            ) from e

    async def fetch_photo(
        self, photo_reference: str, max_width: int = PHOTO_MAX_WIDTH
    ) -> tuple[bytes, str]:
        """Download a Place Photo on behalf of a client.

        Google answers with a redirect to the image, which is followed here.

        Returns:
            The image bytes and their content type

        Raises:
            NotFoundError: If Google has no photo for the reference
            ProviderError: On any other failure
        """
        params = {
            "maxwidth": max_width,
            "photo_reference": photo_reference,
            "key": self._require_key(),
        }
        response = await self._get(
            f"{self.base_url}/place/photo", params=params, follow_redirects=True
        )
        content_type = response.headers.get("content-type", "image/jpeg")
        if not content_type.startswith("image/"):
            raise ProviderError(
                f"google photo {photo_reference} is not an image", provider=self.kind
            )
        return response.content, content_type
