"""Great-circle distance helpers."""

import math
from collections.abc import Callable

from foodfinder.models import Location, Restaurant

EARTH_RADIUS_MILES = 3958.8
EARTH_RADIUS_KM = 6371.0


def _haversine(a: Location, b: Location, radius: float) -> float:
    lat1, lat2 = math.radians(a.lat), math.radians(b.lat)
    d_lat = lat2 - lat1
    d_lng = math.radians(b.lng - a.lng)
    h = (
        math.sin(d_lat / 2) ** 2
        + math.cos(lat1) * math.cos(lat2) * math.sin(d_lng / 2) ** 2
    )
    return 2 * radius * math.atan2(math.sqrt(h), math.sqrt(1 - h))


def haversine_miles(a: Location, b: Location) -> float:
    """Great-circle distance between two points in miles."""
    return _haversine(a, b, EARTH_RADIUS_MILES)


def haversine_km(a: Location, b: Location) -> float:
    """Great-circle distance between two points in kilometers."""
    return _haversine(a, b, EARTH_RADIUS_KM)


def distance_from(origin: Location) -> Callable[[Restaurant], float]:
    """Sort key giving each restaurant's distance (miles) from ``origin``."""

    def key(restaurant: Restaurant) -> float:
        return haversine_miles(origin, restaurant.location)

    return key
