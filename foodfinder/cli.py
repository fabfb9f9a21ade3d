"""Command-line client for FoodFinder - queries the server API and filters locally."""

import argparse
import logging
import sys

import httpx
from pydantic import ValidationError as PydanticValidationError

from foodfinder import filters
from foodfinder.config import get_config, setup_logging
from foodfinder.geo import distance_from, haversine_miles
from foodfinder.models import Location, Restaurant

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="foodfinder", description="Find restaurants that deliver near you."
    )
    parser.add_argument("--lat", type=float, help="Latitude (default: server default)")
    parser.add_argument("--lng", type=float, help="Longitude (default: server default)")
    parser.add_argument("--address", help="Address to search around")
    parser.add_argument("--radius", type=int, help="Search radius in meters")
    parser.add_argument("--limit", type=int, help="Maximum results from the server")
    parser.add_argument("-k", "--keyword", help="Match name, cuisine or description")
    parser.add_argument("--min-price", type=int, default=1, choices=range(1, 5))
    parser.add_argument("--max-price", type=int, default=4, choices=range(1, 5))
    parser.add_argument("--min-rating", type=float, default=0.0)
    parser.add_argument(
        "-c", "--cuisine", action="append", default=[], help="Repeatable"
    )
    parser.add_argument("--open-now", action="store_true")
    parser.add_argument("--delivery-only", action="store_true")
    parser.add_argument(
        "--sort-by",
        default=filters.SortBy.DISTANCE.value,
        choices=[s.value for s in filters.SortBy],
    )
    return parser


def format_restaurant(restaurant: Restaurant, origin: Location | None = None) -> str:
    """One display line for a restaurant."""
    parts = [
        restaurant.name,
        restaurant.cuisine,
        "$" * restaurant.price_range,
        f"{restaurant.rating:.1f}★",
    ]
    if restaurant.delivery_time is not None:
        parts.append(f"{restaurant.delivery_time} min")
    if restaurant.delivery_fee is not None:
        parts.append(f"${restaurant.delivery_fee} delivery")
    if restaurant.accepting_orders is False:
        parts.append("not accepting orders")
    if origin is not None:
        parts.append(f"{haversine_miles(origin, restaurant.location):.1f} mi")
    return " · ".join(parts)


class FoodFinderCLI:
    """Command-line interface for FoodFinder - HTTP client."""

    def __init__(self, args: argparse.Namespace) -> None:
        """Initialize the CLI."""
        self.args = args
        self.config = get_config()
        setup_logging(self.config)

    def filter_spec(self) -> filters.FilterSpec:
        """Build the local filter spec from command-line flags."""
        return filters.FilterSpec(
            keyword=self.args.keyword,
            price_range=(self.args.min_price, self.args.max_price),
            min_rating=self.args.min_rating,
            cuisines=frozenset(self.args.cuisine),
            open_now=self.args.open_now,
            delivery_only=self.args.delivery_only,
            sort_by=filters.SortBy(self.args.sort_by),
        )

    def _params(self) -> dict:
        params = {
            "lat": self.args.lat,
            "lng": self.args.lng,
            "address": self.args.address,
            "radius": self.args.radius,
            "limit": self.args.limit,
            "term": self.args.keyword,
        }
        return {k: v for k, v in params.items() if v is not None}

    def fetch(self) -> dict:
        """Fetch the search envelope from the server."""
        with httpx.Client(timeout=self.config.http_timeout * 2) as client:
            response = client.get(
                f"{self.config.server_url}/api/restaurants", params=self._params()
            )
            response.raise_for_status()
            return response.json()

    def run(self) -> int:
        """Run one search and print the filtered results.

        Returns:
            Process exit code
        """
        try:
            spec = self.filter_spec()
        except PydanticValidationError as e:
            print(f"\n⚠ Invalid filters: {e.errors(include_url=False)[0]['msg']}")
            return 2

        try:
            payload = self.fetch()
        except httpx.TimeoutException:
            logger.exception("Request timed out")
            print("\n⚠ Request timed out. Please try again.")
            return 1
        except httpx.ConnectError:
            logger.exception("Cannot connect to server")
            print(f"\n⚠ Cannot connect to server at {self.config.server_url}")
            print("Make sure the server is running:")
            print("  python -m foodfinder.server")
            return 1
        except httpx.HTTPStatusError as e:
            print(f"\n⚠ Server error (status {e.response.status_code})")
            return 1

        restaurants = [Restaurant.model_validate(item) for item in payload["data"]]
        origin = Location.model_validate(payload["location"])

        if payload.get("fallback"):
            print(f"\n⚠ {payload.get('message')}\n")

        results = filters.apply(restaurants, spec, distance_key=distance_from(origin))

        noun = "restaurant" if len(results) == 1 else "restaurants"
        print(f"{len(results)} {noun} found\n")
        for restaurant in results:
            print(f"  {format_restaurant(restaurant, origin)}")
        if not results:
            print("Try adjusting your filters or search terms to see more results.")
        return 0


def main(argv: list[str] | None = None) -> None:
    """Main entry point for the CLI."""
    args = build_parser().parse_args(argv)

    try:
        # Validate configuration by attempting to load it
        get_config()
    except PydanticValidationError as e:
        print(f"Configuration error: {e}")
        sys.exit(1)

    sys.exit(FoodFinderCLI(args).run())


if __name__ == "__main__":
    main()
