"""Restaurant search orchestration: provider -> normalizer -> enricher."""

import logging
import re

from pydantic import BaseModel, ConfigDict, Field, model_validator
from pydantic.alias_generators import to_camel

from foodfinder import filters
from foodfinder.config import Config, get_config
from foodfinder.enricher import Enricher
from foodfinder.exceptions import NotFoundError, ProviderError, ValidationError
from foodfinder.mock_data import get_mock_restaurant, get_mock_restaurants
from foodfinder.models import Location, MenuCategory, Restaurant, RestaurantDetail
from foodfinder.normalizer import normalize_all, normalize_detail
from foodfinder.providers import GooglePlacesClient, ProviderClient

logger = logging.getLogger(__name__)

FALLBACK_MESSAGE = "Failed to load live data, showing sample restaurants."
MENU_ITEMS_PER_CATEGORY = (2, 6)

_RESTAURANT_ID_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,255}$")
# Google photo references are long opaque tokens
_PHOTO_REFERENCE_PATTERN = re.compile(r"^[A-Za-z0-9_-]{1,2048}$")


class SearchQuery(BaseModel):
    """Search parameters; every field is optional."""

    model_config = ConfigDict(
        frozen=True,
        populate_by_name=True,
        alias_generator=to_camel,
        allow_inf_nan=False,
    )

    lat: float | None = Field(None, ge=-90, le=90)
    lng: float | None = Field(None, ge=-180, le=180)
    address: str | None = Field(None, description="Geocoded when lat/lng are absent")
    radius: int | None = Field(None, gt=0, description="Radius in meters")
    keyword: str | None = Field(None, description="Free text passed to the provider")
    limit: int | None = Field(None, gt=0, le=50)
    min_price: int | None = Field(None, ge=1, le=4)
    max_price: int | None = Field(None, ge=1, le=4)
    rating: float | None = Field(None, ge=0, le=5, description="Minimum rating")
    cuisines: list[str] = Field(default_factory=list)
    open_now: bool = False

    @model_validator(mode="after")
    def _check_pairs(self) -> "SearchQuery":
        if (self.lat is None) != (self.lng is None):
            raise ValueError("lat and lng must be given together")
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise ValueError("minPrice cannot exceed maxPrice")
        return self

    def has_filters(self) -> bool:
        return bool(
            self.min_price is not None
            or self.max_price is not None
            or self.rating
            or self.cuisines
            or self.open_now
        )

    def to_filter_spec(self) -> filters.FilterSpec:
        """Express the server-side filters as a FilterSpec (input order kept)."""
        return filters.FilterSpec(
            price_range=(self.min_price or 1, self.max_price or 4),
            min_rating=self.rating or 0.0,
            cuisines=frozenset(self.cuisines),
            open_now=self.open_now,
        )


class SearchResult(BaseModel):
    """Restaurants plus how they were obtained."""

    model_config = ConfigDict(populate_by_name=True, alias_generator=to_camel)

    restaurants: list[Restaurant]
    location: Location
    fallback: bool = False
    message: str | None = None


def validate_restaurant_id(restaurant_id: str) -> str:
    """Reject ids that cannot be a provider identifier.

    Raises:
        ValidationError: If the id is empty or contains unexpected characters
    """
    if not restaurant_id or not _RESTAURANT_ID_PATTERN.match(restaurant_id):
        raise ValidationError(f"Invalid restaurant id: {restaurant_id!r}")
    return restaurant_id


class SearchService:
    """Provider-agnostic restaurant search.

    Per request: resolve the location, call the provider once, then normalize,
    filter, truncate and enrich. If the provider call fails the fixed sample
    set is returned instead and the failure is logged; the caller never sees
    the provider error on the search path.
    """

    def __init__(
        self,
        provider: ProviderClient,
        enricher: Enricher | None = None,
        config: Config | None = None,
        geocoder: GooglePlacesClient | None = None,
    ) -> None:
        """Initialize the search service.

        Args:
            provider: Upstream provider client
            enricher: Enricher for delivery fields (seeded from config if omitted)
            config: Configuration with search defaults
            geocoder: Optional client used to geocode free-text addresses
        """
        self.config = config or get_config()
        self.provider = provider
        self.enricher = enricher or Enricher.seeded(self.config.random_seed)
        self.geocoder = geocoder

    @property
    def default_location(self) -> Location:
        return Location(lat=self.config.default_lat, lng=self.config.default_lng)

    async def resolve_location(self, query: SearchQuery) -> Location:
        """Pick the search center: explicit coordinates, geocoded address, default."""
        if query.lat is not None and query.lng is not None:
            return Location(lat=query.lat, lng=query.lng)

        if query.address and self.geocoder is not None:
            try:
                return await self.geocoder.geocode(query.address)
            except (ProviderError, NotFoundError) as e:
                logger.warning(
                    f"Geocoding '{query.address}' failed, using default location: {e}"
                )

        return self.default_location

    async def search_results(self, query: SearchQuery | None = None) -> SearchResult:
        """Run a search and report whether live or sample data was used."""
        query = query or SearchQuery()
        center = await self.resolve_location(query)
        limit = query.limit or self.config.default_limit
        radius = query.radius or self.config.default_radius

        try:
            raws = await self.provider.search(
                center, radius_m=radius, keyword=query.keyword, limit=limit
            )
        except (ProviderError, NotFoundError) as e:
            logger.warning(
                f"Provider '{self.provider.kind}' search failed, serving sample "
                f"restaurants: {e}"
            )
            return self._fallback(center, limit)
        except Exception:
            logger.exception(
                f"Unexpected error from provider '{self.provider.kind}', "
                "serving sample restaurants"
            )
            return self._fallback(center, limit)

        restaurants = normalize_all(raws)
        if query.has_filters():
            restaurants = filters.apply(restaurants, query.to_filter_spec())

        restaurants = [self.enricher.enrich(r) for r in restaurants[:limit]]
        logger.info(
            f"Search at ({center.lat}, {center.lng}) returned "
            f"{len(restaurants)} restaurant(s) from {self.provider.kind}"
        )
        return SearchResult(restaurants=restaurants, location=center)

    async def search(self, query: SearchQuery | None = None) -> list[Restaurant]:
        """Search restaurants; never raises on provider failure."""
        result = await self.search_results(query)
        return result.restaurants

    def _fallback(self, center: Location, limit: int) -> SearchResult:
        return SearchResult(
            restaurants=get_mock_restaurants()[:limit],
            location=center,
            fallback=True,
            message=FALLBACK_MESSAGE,
        )

    async def get_details(self, restaurant_id: str) -> RestaurantDetail:
        """Fetch, normalize and enrich one restaurant, including a menu.

        Sample restaurant ids resolve to the sample set when the provider
        cannot answer for them, so fallback results stay browsable.

        Raises:
            ValidationError: If the id is malformed
            NotFoundError: If the provider has no such restaurant
            ProviderError: If the provider failed
        """
        validate_restaurant_id(restaurant_id)

        try:
            raw = await self.provider.get_details(restaurant_id)
        except (ProviderError, NotFoundError) as e:
            sample = get_mock_restaurant(restaurant_id)
            if sample is None:
                raise
            logger.info(f"Serving sample restaurant {restaurant_id}: {e}")
            return self._with_menu(sample)

        return self._with_menu(normalize_detail(raw))

    def _with_menu(self, detail: RestaurantDetail) -> RestaurantDetail:
        detail = self.enricher.enrich(detail)
        if detail.menu is not None:
            return detail
        return detail.model_copy(
            update={"menu": self._generate_menu(detail.id, detail.cuisine)}
        )

    def _generate_menu(
        self, restaurant_id: str, cuisine: str | None
    ) -> list[MenuCategory]:
        return self.enricher.generate_menu(
            cuisine,
            items_per_category=MENU_ITEMS_PER_CATEGORY,
            id_prefix=restaurant_id,
        )

    def get_menu(
        self, restaurant_id: str, cuisine: str | None = None
    ) -> list[MenuCategory]:
        """Generate a menu for a restaurant.

        Menus from this call and from ``get_details`` share one shape: item
        counts per category and ids prefixed by the restaurant id.

        Args:
            restaurant_id: Restaurant id, used as the item id prefix
            cuisine: Cuisine hint; sample restaurants supply their own
        """
        validate_restaurant_id(restaurant_id)

        if cuisine is None:
            sample = get_mock_restaurant(restaurant_id)
            cuisine = sample.cuisine if sample else None

        return self._generate_menu(restaurant_id, cuisine)

    async def get_photo(self, photo_reference: str) -> tuple[bytes, str]:
        """Fetch a provider photo so clients never need the provider key.

        Raises:
            ValidationError: If the reference is malformed
            NotFoundError: If the active provider serves no photos
            ProviderError: If the provider failed
        """
        if not _PHOTO_REFERENCE_PATTERN.match(photo_reference):
            raise ValidationError(f"Invalid photo reference: {photo_reference!r}")
        if not isinstance(self.provider, GooglePlacesClient):
            raise NotFoundError(f"Provider '{self.provider.kind}' serves no photos")
        return await self.provider.fetch_photo(photo_reference)
