"""Provider-specific payload shapes.

Each upstream provider gets its own set of models, tagged with a literal
``provider`` field so that ``RawResult`` / ``RawDetail`` form a discriminated
union. Every field is optional except identity and name; unknown fields are
ignored so that upstream schema drift does not break parsing.
"""

from typing import Annotated, Literal

from pydantic import BaseModel, ConfigDict, Field

ProviderKind = Literal["yelp", "google"]

_RAW_CONFIG = ConfigDict(extra="ignore")


# Yelp Fusion


class YelpCategory(BaseModel):
    model_config = _RAW_CONFIG

    alias: str | None = None
    title: str | None = None


class YelpCoordinates(BaseModel):
    model_config = _RAW_CONFIG

    latitude: float | None = None
    longitude: float | None = None


class YelpAddress(BaseModel):
    model_config = _RAW_CONFIG

    address1: str | None = None
    address2: str | None = None
    city: str | None = None
    state: str | None = None
    zip_code: str | None = None
    country: str | None = None


class YelpOpenSlot(BaseModel):
    """One opening window; ``start``/``end`` are "HHMM", ``day`` 0 is Monday."""

    model_config = _RAW_CONFIG

    day: int
    start: str
    end: str
    is_overnight: bool = False


class YelpHours(BaseModel):
    model_config = _RAW_CONFIG

    open: list[YelpOpenSlot] = Field(default_factory=list)
    hours_type: str | None = None
    is_open_now: bool | None = None


class YelpUser(BaseModel):
    model_config = _RAW_CONFIG

    name: str | None = None


class YelpReview(BaseModel):
    model_config = _RAW_CONFIG

    id: str
    rating: float | None = None
    text: str | None = None
    time_created: str | None = None
    user: YelpUser | None = None


class YelpBusiness(BaseModel):
    """A business from ``/v3/businesses/search`` or ``/v3/businesses/{id}``."""

    model_config = _RAW_CONFIG

    provider: Literal["yelp"] = "yelp"
    id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    alias: str | None = None
    categories: list[YelpCategory] = Field(default_factory=list)
    price: str | None = None
    rating: float | None = None
    review_count: int | None = None
    coordinates: YelpCoordinates | None = None
    location: YelpAddress | None = None
    phone: str | None = None
    display_phone: str | None = None
    url: str | None = None
    image_url: str | None = None
    photos: list[str] = Field(default_factory=list)
    hours: list[YelpHours] = Field(default_factory=list)
    is_closed: bool | None = None


class YelpDetail(BaseModel):
    """Business details plus the separately fetched reviews."""

    model_config = _RAW_CONFIG

    provider: Literal["yelp"] = "yelp"
    business: YelpBusiness
    reviews: list[YelpReview] = Field(default_factory=list)


# Google Places


class GoogleLatLng(BaseModel):
    model_config = _RAW_CONFIG

    lat: float | None = None
    lng: float | None = None


class GoogleGeometry(BaseModel):
    model_config = _RAW_CONFIG

    location: GoogleLatLng | None = None


class GooglePhoto(BaseModel):
    """Photo reference; ``url`` is filled in by the client that owns the key."""

    model_config = _RAW_CONFIG

    photo_reference: str | None = None
    width: int | None = None
    height: int | None = None
    url: str | None = None


class GoogleOpeningHours(BaseModel):
    model_config = _RAW_CONFIG

    open_now: bool | None = None
    weekday_text: list[str] = Field(default_factory=list)


class GoogleEditorialSummary(BaseModel):
    model_config = _RAW_CONFIG

    overview: str | None = None


class GoogleReview(BaseModel):
    model_config = _RAW_CONFIG

    author_name: str | None = None
    rating: float | None = None
    text: str | None = None
    time: int | None = None
    relative_time_description: str | None = None


class GooglePlace(BaseModel):
    """A place from Nearby Search or Place Details."""

    model_config = _RAW_CONFIG

    provider: Literal["google"] = "google"
    place_id: str = Field(..., min_length=1)
    name: str = Field(..., min_length=1)
    types: list[str] = Field(default_factory=list)
    price_level: int | None = None
    rating: float | None = None
    user_ratings_total: int | None = None
    geometry: GoogleGeometry | None = None
    vicinity: str | None = None
    formatted_address: str | None = None
    formatted_phone_number: str | None = None
    international_phone_number: str | None = None
    website: str | None = None
    photos: list[GooglePhoto] = Field(default_factory=list)
    opening_hours: GoogleOpeningHours | None = None
    editorial_summary: GoogleEditorialSummary | None = None


class GoogleDetail(BaseModel):
    model_config = _RAW_CONFIG

    provider: Literal["google"] = "google"
    place: GooglePlace
    reviews: list[GoogleReview] = Field(default_factory=list)


RawResult = Annotated[YelpBusiness | GooglePlace, Field(discriminator="provider")]
RawDetail = Annotated[YelpDetail | GoogleDetail, Field(discriminator="provider")]
