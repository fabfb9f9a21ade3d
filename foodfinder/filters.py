"""Client-side narrowing and ordering of a restaurant result set.

Pure functions over in-memory data; nothing here re-queries a provider.
"""

import math
from collections.abc import Callable, Iterable
from datetime import datetime
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from foodfinder.models import Restaurant

# Coarse "open now" window in local clock hours, [open, close)
OPEN_HOURS = (8, 22)


class SortBy(str, Enum):
    """Available result orderings."""

    DISTANCE = "distance"
    RATING = "rating"
    DELIVERY_TIME = "deliveryTime"
    PRICE_ASC = "priceAsc"
    PRICE_DESC = "priceDesc"


class FilterSpec(BaseModel):
    """User-selected filters and sort order."""

    model_config = ConfigDict(
        frozen=True, populate_by_name=True, alias_generator=to_camel
    )

    keyword: str | None = Field(None, description="Matches name, cuisine, description")
    price_range: tuple[int, int] = Field(default=(1, 4), description="Inclusive range")
    min_rating: float = Field(default=0.0, ge=0, le=5)
    cuisines: frozenset[str] = Field(
        default_factory=frozenset, description="Empty means any cuisine"
    )
    open_now: bool = False
    delivery_only: bool = False
    sort_by: SortBy = SortBy.DISTANCE

    @field_validator("price_range")
    @classmethod
    def _check_price_range(cls, value: tuple[int, int]) -> tuple[int, int]:
        low, high = value
        if not (1 <= low <= high <= 4):
            raise ValueError("price_range must satisfy 1 <= min <= max <= 4")
        return value


def is_open_hour(hour: int) -> bool:
    """Approximate opening check used in place of real per-restaurant hours."""
    return OPEN_HOURS[0] <= hour < OPEN_HOURS[1]


def _matches_keyword(restaurant: Restaurant, term: str) -> bool:
    return any(
        term in field.lower()
        for field in (restaurant.name, restaurant.cuisine, restaurant.description)
        if field
    )


def _sort(
    restaurants: list[Restaurant],
    sort_by: SortBy,
    distance_key: Callable[[Restaurant], float] | None,
) -> list[Restaurant]:
    if sort_by == SortBy.RATING:
        return sorted(restaurants, key=lambda r: -r.rating)
    if sort_by == SortBy.DELIVERY_TIME:
        return sorted(
            restaurants,
            key=lambda r: r.delivery_time if r.delivery_time is not None else math.inf,
        )
    if sort_by == SortBy.PRICE_ASC:
        return sorted(restaurants, key=lambda r: r.price_range)
    if sort_by == SortBy.PRICE_DESC:
        return sorted(restaurants, key=lambda r: -r.price_range)
    # Distance needs a reference point; without one the input order stands
    if distance_key is not None:
        return sorted(restaurants, key=distance_key)
    return restaurants


def apply(
    restaurants: Iterable[Restaurant],
    spec: FilterSpec,
    *,
    now: datetime | None = None,
    distance_key: Callable[[Restaurant], float] | None = None,
) -> list[Restaurant]:
    """Filter and sort restaurants for display.

    Applying the same spec twice yields the same list as applying it once.

    Args:
        restaurants: Normalized restaurants
        spec: Filters and sort order
        now: Clock used for the open-now check (defaults to local time)
        distance_key: Optional key for ``SortBy.DISTANCE``, see ``geo.distance_from``

    Returns:
        A new list; the input is not modified
    """
    results = list(restaurants)

    term = (spec.keyword or "").strip().lower()
    if term:
        results = [r for r in results if _matches_keyword(r, term)]

    low, high = spec.price_range
    results = [r for r in results if low <= r.price_range <= high]

    if spec.min_rating > 0:
        results = [r for r in results if r.rating >= spec.min_rating]

    if spec.cuisines:
        results = [r for r in results if r.cuisine in spec.cuisines]

    if spec.open_now and not is_open_hour((now or datetime.now()).hour):
        results = []

    if spec.delivery_only:
        results = [r for r in results if r.accepting_orders]

    return _sort(results, spec.sort_by, distance_key)
