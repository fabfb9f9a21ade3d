"""Data models for the FoodFinder system."""

from foodfinder.models.raw import (
    GoogleDetail,
    GooglePlace,
    ProviderKind,
    RawDetail,
    RawResult,
    YelpBusiness,
    YelpDetail,
)
from foodfinder.models.restaurant import (
    Location,
    MenuCategory,
    MenuItem,
    Restaurant,
    RestaurantDetail,
    Review,
)

__all__ = [
    "GoogleDetail",
    "GooglePlace",
    "Location",
    "MenuCategory",
    "MenuItem",
    "ProviderKind",
    "RawDetail",
    "RawResult",
    "Restaurant",
    "RestaurantDetail",
    "Review",
    "YelpBusiness",
    "YelpDetail",
]
