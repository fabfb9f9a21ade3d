"""Canonical restaurant data models."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

_CANONICAL_CONFIG = ConfigDict(
    frozen=True,
    populate_by_name=True,
    alias_generator=to_camel,
    allow_inf_nan=False,
)


class Location(BaseModel):
    """Geographic coordinates."""

    model_config = _CANONICAL_CONFIG

    lat: float = Field(..., ge=-90, le=90, description="Latitude")
    lng: float = Field(..., ge=-180, le=180, description="Longitude")


class MenuItem(BaseModel):
    """A single dish on a menu."""

    model_config = _CANONICAL_CONFIG

    id: str = Field(..., description="Item identifier")
    name: str = Field(..., description="Dish name")
    description: str = Field(default="", description="Dish description")
    price: Decimal = Field(..., ge=0, decimal_places=2, description="Price in dollars")
    category: str = Field(..., description="Menu category name")
    image: str | None = Field(None, description="Image URL")
    popular: bool = False
    vegetarian: bool = False
    spicy: bool = False


class MenuCategory(BaseModel):
    """A named group of menu items."""

    model_config = _CANONICAL_CONFIG

    id: str
    name: str
    items: list[MenuItem] = Field(default_factory=list)


class Review(BaseModel):
    """A user review of a restaurant."""

    model_config = _CANONICAL_CONFIG

    id: str
    rating: float = Field(default=0.0, ge=0, le=5)
    text: str = ""
    time: str = ""
    username: str = ""


class Restaurant(BaseModel):
    """Provider-agnostic restaurant used in list views."""

    model_config = _CANONICAL_CONFIG

    id: str = Field(..., min_length=1, description="Opaque upstream identifier")
    name: str = Field(..., min_length=1, description="Restaurant name")
    cuisine: str = Field(default="Restaurant", description="Primary cuisine")
    description: str = Field(default="", description="Short description")
    address: str = Field(default="", description="Single-line address")
    phone: str | None = Field(None, description="Phone number")
    website: str | None = Field(None, description="Website URL")
    price_range: int = Field(default=2, ge=1, le=4, description="Price tier 1-4")
    rating: float = Field(default=0.0, ge=0, le=5, description="Rating 0-5")
    location: Location = Field(..., description="Coordinates")
    image: str | None = Field(None, description="Cover image URL")

    # Delivery operational fields, synthesized by the Enricher when absent
    delivery_time: int | None = Field(None, ge=0, description="Minutes")
    delivery_fee: Decimal | None = Field(None, ge=0, decimal_places=2)
    accepting_orders: bool | None = None
    menu: list[MenuCategory] | None = None


class RestaurantDetail(Restaurant):
    """Restaurant with the extra fields returned by a details lookup."""

    review_count: int = Field(default=0, ge=0)
    photos: list[str] = Field(default_factory=list)
    hours: list[str] = Field(default_factory=list)
    reviews: list[Review] = Field(default_factory=list)
