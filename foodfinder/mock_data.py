"""Fixed sample restaurants served when the live provider is unavailable."""

from decimal import Decimal

from foodfinder.models import Location, Restaurant, RestaurantDetail

MOCK_RESTAURANTS: tuple[Restaurant, ...] = (
    Restaurant(
        id="1",
        name="Pasta Paradise",
        cuisine="Italian",
        description="Homemade pasta and wood-fired pizzas, Italian style.",
        address="123 Main St, San Francisco, CA",
        phone="(415) 555-1234",
        website="https://example.com/pasta-paradise",
        price_range=2,
        rating=4.5,
        location=Location(lat=37.7749, lng=-122.4194),
        image="https://source.unsplash.com/random/800x600/?italian-food",
        delivery_time=25,
        delivery_fee=Decimal("3.99"),
        accepting_orders=True,
    ),
    Restaurant(
        id="2",
        name="Sushi Dreams",
        cuisine="Japanese",
        description="Fresh sushi and sashimi prepared by master chefs.",
        address="456 Market St, San Francisco, CA",
        phone="(415) 555-5678",
        website="https://example.com/sushi-dreams",
        price_range=3,
        rating=4.8,
        location=Location(lat=37.7775, lng=-122.4164),
        image="https://source.unsplash.com/random/800x600/?sushi",
        delivery_time=35,
        delivery_fee=Decimal("4.99"),
        accepting_orders=True,
    ),
    Restaurant(
        id="3",
        name="Taco Town",
        cuisine="Mexican",
        description="Authentic Mexican street food and margaritas.",
        address="789 Mission St, San Francisco, CA",
        phone="(415) 555-9012",
        website="https://example.com/taco-town",
        price_range=1,
        rating=4.2,
        location=Location(lat=37.7830, lng=-122.4075),
        image="https://source.unsplash.com/random/800x600/?tacos",
        delivery_time=20,
        delivery_fee=Decimal("2.99"),
        accepting_orders=True,
    ),
    Restaurant(
        id="4",
        name="Curry House",
        cuisine="Indian",
        description="Flavorful curries and tandoori specialties.",
        address="101 Powell St, San Francisco, CA",
        phone="(415) 555-3456",
        website="https://example.com/curry-house",
        price_range=2,
        rating=4.0,
        location=Location(lat=37.7851, lng=-122.4071),
        image="https://source.unsplash.com/random/800x600/?curry",
        delivery_time=40,
        delivery_fee=Decimal("3.49"),
        accepting_orders=True,
    ),
    Restaurant(
        id="5",
        name="Burger Joint",
        cuisine="American",
        description="Smash burgers, hand-cut fries and thick shakes.",
        address="222 Mission St, San Francisco, CA",
        phone="(415) 555-7890",
        website="https://example.com/burger-joint",
        price_range=2,
        rating=4.3,
        location=Location(lat=37.7875, lng=-122.4324),
        image="https://source.unsplash.com/random/800x600/?burger",
        delivery_time=30,
        delivery_fee=Decimal("1.99"),
        accepting_orders=True,
    ),
    Restaurant(
        id="6",
        name="Golden Dragon",
        cuisine="Chinese",
        description="Dim sum and Cantonese classics for the whole family.",
        address="101 Market St, San Francisco, CA",
        phone="(415) 555-2468",
        website="https://example.com/golden-dragon",
        price_range=2,
        rating=4.0,
        location=Location(lat=37.7730, lng=-122.4190),
        image="https://source.unsplash.com/random/800x600/?dim-sum",
        delivery_time=45,
        delivery_fee=Decimal("5.49"),
        accepting_orders=False,
    ),
)

_BY_ID = {restaurant.id: restaurant for restaurant in MOCK_RESTAURANTS}


def get_mock_restaurants() -> list[Restaurant]:
    """Return the sample set in its fixed order."""
    return list(MOCK_RESTAURANTS)


def get_mock_restaurant(restaurant_id: str) -> RestaurantDetail | None:
    """Return a sample restaurant as a detail record, or None if unknown."""
    restaurant = _BY_ID.get(restaurant_id)
    if restaurant is None:
        return None
    return RestaurantDetail(**restaurant.model_dump(), hours=["Daily 11:00-22:00"])
