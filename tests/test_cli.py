"""Tests for the command-line client."""

from decimal import Decimal

import httpx
import pytest

from foodfinder import cli
from foodfinder import config as config_module
from foodfinder.cli import FoodFinderCLI, build_parser, format_restaurant
from foodfinder.config import Config
from foodfinder.filters import SortBy
from foodfinder.models import Location, Restaurant

PAYLOAD = {
    "success": True,
    "count": 3,
    "fallback": False,
    "message": None,
    "location": {"lat": 37.7749, "lng": -122.4194},
    "data": [
        {
            "id": "far",
            "name": "Far Sushi",
            "cuisine": "Japanese",
            "priceRange": 3,
            "rating": 4.8,
            "location": {"lat": 37.80, "lng": -122.40},
            "deliveryTime": 30,
            "deliveryFee": "2.99",
            "acceptingOrders": True,
        },
        {
            "id": "near",
            "name": "Near Pasta",
            "cuisine": "Italian",
            "priceRange": 2,
            "rating": 4.2,
            "location": {"lat": 37.775, "lng": -122.42},
            "deliveryTime": 20,
            "deliveryFee": "1.99",
            "acceptingOrders": True,
        },
        {
            "id": "closed",
            "name": "Closed Tacos",
            "cuisine": "Mexican",
            "priceRange": 1,
            "rating": 3.9,
            "location": {"lat": 37.76, "lng": -122.41},
            "deliveryTime": 25,
            "deliveryFee": "3.49",
            "acceptingOrders": False,
        },
    ],
}


@pytest.fixture(autouse=True)
def cli_config(monkeypatch):
    """Pin the configuration used by the CLI."""
    monkeypatch.setattr(
        config_module, "config", Config(_env_file=None, yelp_api_key="test")
    )


def run_cli(monkeypatch, argv, payload=None, error=None):
    """Run the CLI with ``fetch`` answering ``payload`` or raising ``error``."""

    def fake_fetch(self):
        if error is not None:
            raise error
        return payload

    monkeypatch.setattr(FoodFinderCLI, "fetch", fake_fetch)
    return FoodFinderCLI(build_parser().parse_args(argv)).run()


class TestParser:
    """Tests for argument parsing."""

    def test_defaults(self):
        """Test the default flag values."""
        args = build_parser().parse_args([])

        assert args.min_price == 1
        assert args.max_price == 4
        assert args.cuisine == []
        assert args.sort_by == "distance"

    def test_filter_spec(self):
        """Test that flags become a FilterSpec."""
        args = build_parser().parse_args(
            ["-k", "sushi", "-c", "Japanese", "-c", "Thai", "--sort-by", "rating"]
        )

        spec = FoodFinderCLI(args).filter_spec()

        assert spec.keyword == "sushi"
        assert spec.cuisines == frozenset({"Japanese", "Thai"})
        assert spec.sort_by == SortBy.RATING


class TestRun:
    """Tests for FoodFinderCLI.run."""

    def test_sorted_by_distance(self, monkeypatch, capsys):
        """Test that results print nearest first."""
        code = run_cli(monkeypatch, [], payload=PAYLOAD)

        output = capsys.readouterr().out
        assert code == 0
        assert "3 restaurants found" in output
        assert output.index("Near Pasta") < output.index("Closed Tacos")
        assert output.index("Closed Tacos") < output.index("Far Sushi")

    def test_local_filters(self, monkeypatch, capsys):
        """Test that filters apply to the fetched set."""
        code = run_cli(
            monkeypatch, ["--delivery-only", "--min-price", "2"], payload=PAYLOAD
        )

        output = capsys.readouterr().out
        assert code == 0
        assert "2 restaurants found" in output
        assert "Closed Tacos" not in output

    def test_no_results(self, monkeypatch, capsys):
        """Test the hint printed when nothing matches."""
        run_cli(monkeypatch, ["-k", "burgers"], payload=PAYLOAD)

        output = capsys.readouterr().out
        assert "0 restaurants found" in output
        assert "Try adjusting your filters" in output

    def test_fallback_banner(self, monkeypatch, capsys):
        """Test that the fallback message is shown."""
        payload = dict(
            PAYLOAD, fallback=True, message="Failed to load live data, showing sample."
        )

        run_cli(monkeypatch, [], payload=payload)

        assert "Failed to load live data" in capsys.readouterr().out

    def test_connection_error(self, monkeypatch, capsys):
        """Test the exit code when the server is unreachable."""
        code = run_cli(monkeypatch, [], error=httpx.ConnectError("refused"))

        assert code == 1
        assert "Cannot connect to server" in capsys.readouterr().out

    def test_invalid_price_range(self, monkeypatch, capsys):
        """Test that an inverted price range is reported without a request."""
        code = run_cli(
            monkeypatch, ["--min-price", "4", "--max-price", "1"], payload=PAYLOAD
        )

        assert code == 2
        assert "Invalid filters" in capsys.readouterr().out


def test_format_restaurant():
    """Test the single-line display format."""
    restaurant = Restaurant(
        id="x",
        name="Joe's",
        cuisine="Italian",
        price_range=2,
        rating=4.5,
        location=Location(lat=37.7749, lng=-122.4194),
        delivery_time=25,
        delivery_fee=Decimal("3.99"),
        accepting_orders=False,
    )

    line = format_restaurant(restaurant, Location(lat=37.7749, lng=-122.4194))

    assert line == (
        "Joe's · Italian · $$ · 4.5★ · 25 min · $3.99 delivery"
        " · not accepting orders · 0.0 mi"
    )


def test_main_exit_code(monkeypatch):
    """Test that main exits with the run result."""
    monkeypatch.setattr(FoodFinderCLI, "run", lambda self: 0)

    with pytest.raises(SystemExit) as exc_info:
        cli.main([])

    assert exc_info.value.code == 0
