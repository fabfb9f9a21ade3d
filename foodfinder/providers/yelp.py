"""Yelp Fusion provider client."""

import logging
from urllib.parse import quote

from foodfinder.exceptions import NotFoundError, ProviderError
from foodfinder.models import Location, YelpBusiness, YelpDetail
from foodfinder.models.raw import YelpReview
from foodfinder.providers.base import (
    DEFAULT_LIMIT,
    ProviderClient,
    parse_records,
)

logger = logging.getLogger(__name__)

YELP_API_URL = "https://api.yelp.com/v3"

# Yelp rejects larger values with HTTP 400
YELP_MAX_RADIUS = 40000
YELP_MAX_LIMIT = 50


class YelpClient(ProviderClient):
    """Yelp Businesses Search / Details / Reviews, bearer-token auth."""

    kind = "yelp"
    max_radius = YELP_MAX_RADIUS

    def __init__(self, api_key: str | None, base_url: str = YELP_API_URL, **kwargs):
        super().__init__(api_key, **kwargs)
        self.base_url = base_url.rstrip("/")

    def _headers(self) -> dict[str, str]:
        return {"Authorization": f"Bearer {self._require_key()}"}

    async def search(
        self,
        center: Location,
        radius_m: int | None = None,
        keyword: str | None = None,
        limit: int | None = None,
    ) -> list[YelpBusiness]:
        """Search businesses around a point.

        Args:
            center: Search center
            radius_m: Radius in meters, clamped to 1..40000
            keyword: Free-text term passed through unchanged
            limit: Maximum results, clamped to 1..50

        Returns:
            Parsed businesses in provider order
        """
        headers = self._headers()
        params: dict = {
            "latitude": center.lat,
            "longitude": center.lng,
            "radius": self.clamp_radius(radius_m),
            "limit": max(1, min(limit or DEFAULT_LIMIT, YELP_MAX_LIMIT)),
            "categories": "restaurants,food",
            "sort_by": "distance",
        }
        if keyword:
            params["term"] = keyword

        logger.debug(
            f"Yelp search at ({center.lat}, {center.lng}) radius={params['radius']}"
        )
        data = await self._get_json(
            f"{self.base_url}/businesses/search", params=params, headers=headers
        )
        return parse_records(self.kind, YelpBusiness, data.get("businesses"))

    async def get_details(self, restaurant_id: str) -> YelpDetail:
        """Fetch a business and its reviews.

        Reviews are best effort: if that second call fails the details are
        still returned without them.
        """
        headers = self._headers()
        path = f"{self.base_url}/businesses/{quote(restaurant_id, safe='')}"

        data = await self._get_json(path, headers=headers)
        business = parse_records(self.kind, YelpBusiness, [data])
        if not business:
            raise ProviderError(
                f"yelp returned a malformed business for {restaurant_id}",
                provider=self.kind,
            )

        reviews: list[YelpReview] = []
        try:
            review_data = await self._get_json(f"{path}/reviews", headers=headers)
            reviews = parse_records(self.kind, YelpReview, review_data.get("reviews"))
        except (ProviderError, NotFoundError) as e:
            logger.warning(f"Could not load Yelp reviews for {restaurant_id}: {e}")

        return YelpDetail(business=business[0], reviews=reviews)
