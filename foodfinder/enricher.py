"""Synthesized delivery data for restaurants the providers know nothing about.

Providers return listings, not delivery operations, so delivery time, fee,
the accepting-orders flag and the menu are drawn from fixed ranges. The
random source is injected so tests (and ``RANDOM_SEED``) can pin outcomes.
"""

import logging
import random
import re
from decimal import Decimal
from typing import Protocol, Sequence, TypeVar

from foodfinder.models import MenuCategory, MenuItem, Restaurant

logger = logging.getLogger(__name__)

T = TypeVar("T")

DELIVERY_TIME_RANGE = (15, 45)
DELIVERY_FEE_RANGE = (Decimal("1.00"), Decimal("6.00"))
ACCEPTING_ORDERS_PROBABILITY = 0.9
DEFAULT_ITEMS_PER_CATEGORY = (3, 8)
FLAG_THRESHOLD = 0.7

_CENTS = Decimal("0.01")

GENERIC_CATEGORIES = ["Appetizers", "Main Courses", "Desserts", "Beverages"]

# Matched in order against the lowercased cuisine string
CUISINE_KEYWORDS: list[tuple[tuple[str, ...], str]] = [
    (("italian", "pizza", "pasta"), "Italian"),
    (("japanese", "sushi", "ramen"), "Japanese"),
    (("chinese", "dim sum", "cantonese", "szechuan"), "Chinese"),
    (("mexican", "taco", "burrito"), "Mexican"),
    (("indian", "curry", "tandoor"), "Indian"),
    (("thai",), "Thai"),
    (("american", "burger", "diner", "bbq"), "American"),
    (("french", "bistro"), "French"),
    (("mediterranean", "greek", "middle eastern"), "Mediterranean"),
    (("korean",), "Korean"),
]

CUISINE_CATEGORIES: dict[str, list[str]] = {
    "Italian": ["Antipasti", "Pasta", "Pizza", "Desserts"],
    "Japanese": ["Sushi", "Ramen", "Tempura", "Donburi"],
    "Chinese": ["Dim Sum", "Noodles", "Rice Dishes", "Soups"],
    "Mexican": ["Tacos", "Burritos", "Enchiladas", "Quesadillas"],
    "Indian": ["Curry", "Tandoor", "Biryani", "Bread"],
    "Thai": ["Curries", "Noodles", "Stir Fry", "Soups"],
    "American": ["Burgers", "Sandwiches", "Grill", "Sides"],
    "French": ["Entrées", "Plats Principaux", "Fromages", "Desserts"],
    "Mediterranean": ["Mezze", "Grill", "Seafood", "Sides"],
    "Korean": ["BBQ", "Stews", "Rice Bowls", "Banchan"],
}

DISH_NAMES: dict[str, dict[str, list[str]]] = {
    "Italian": {
        "Pasta": [
            "Spaghetti Carbonara",
            "Fettuccine Alfredo",
            "Lasagna",
            "Penne Arrabbiata",
            "Ravioli",
        ],
        "Pizza": [
            "Margherita",
            "Quattro Formaggi",
            "Pepperoni",
            "Prosciutto",
            "Diavola",
        ],
        "Antipasti": ["Bruschetta", "Caprese Salad", "Arancini", "Prosciutto e Melone"],
        "Desserts": ["Tiramisu", "Panna Cotta", "Cannoli", "Gelato"],
    },
    "Japanese": {
        "Sushi": ["California Roll", "Spicy Tuna Roll", "Salmon Nigiri", "Dragon Roll"],
        "Ramen": ["Tonkotsu Ramen", "Shoyu Ramen", "Miso Ramen", "Spicy Ramen"],
        "Tempura": ["Shrimp Tempura", "Vegetable Tempura", "Tempura Udon"],
        "Donburi": ["Katsu Don", "Gyudon", "Oyakodon", "Unadon"],
    },
    "Mexican": {
        "Tacos": [
            "Carne Asada Tacos",
            "Al Pastor Tacos",
            "Fish Tacos",
            "Carnitas Tacos",
        ],
        "Burritos": ["Chicken Burrito", "Vegetarian Burrito", "Carne Asada Burrito"],
        "Enchiladas": ["Chicken Enchiladas", "Cheese Enchiladas", "Enchiladas Verdes"],
        "Quesadillas": [
            "Cheese Quesadilla",
            "Chicken Quesadilla",
            "Mushroom Quesadilla",
        ],
    },
    "Indian": {
        "Curry": [
            "Chicken Tikka Masala",
            "Palak Paneer",
            "Lamb Rogan Josh",
            "Chana Masala",
        ],
        "Tandoor": ["Tandoori Chicken", "Seekh Kebab", "Paneer Tikka"],
        "Biryani": ["Chicken Biryani", "Vegetable Biryani", "Lamb Biryani"],
        "Bread": ["Garlic Naan", "Butter Naan", "Roti", "Paratha"],
    },
}

DEFAULT_DISH_NAMES: dict[str, list[str]] = {
    "Appetizers": [
        "Spring Rolls",
        "Nachos",
        "Fried Calamari",
        "Hummus",
        "Chicken Wings",
    ],
    "Main Courses": [
        "Grilled Salmon",
        "Chicken Curry",
        "Beef Stew",
        "Vegetable Stir-Fry",
        "Mushroom Risotto",
    ],
    "Desserts": [
        "Chocolate Cake",
        "Ice Cream",
        "Cheesecake",
        "Apple Pie",
        "Crème Brûlée",
    ],
    "Beverages": ["Iced Tea", "Coffee", "Lemonade", "Soda", "Milkshake"],
}

DESCRIPTIONS = [
    "A delicious and flavorful dish prepared with fresh ingredients",
    "Our chef's special recipe, loved by our customers",
    "A traditional favorite with a modern twist",
    "Made with locally sourced ingredients for authentic flavor",
    "A perfect blend of flavors to satisfy your cravings",
    "Prepared fresh daily using our secret family recipe",
]

# Price bounds in dollars by category; everything else is priced as a main
PRICE_BOUNDS: dict[str, tuple[float, float]] = {
    "Beverages": (2.0, 6.0),
    "Desserts": (5.0, 10.0),
    "Appetizers": (5.0, 13.0),
    "Antipasti": (6.0, 14.0),
    "Mezze": (5.0, 12.0),
    "Sides": (3.0, 8.0),
    "Banchan": (3.0, 8.0),
    "Bread": (3.0, 7.0),
    "Soups": (4.0, 10.0),
}
MAIN_PRICE_BOUNDS = (9.0, 25.0)


class RandomSource(Protocol):
    """The subset of ``random.Random`` the Enricher draws from."""

    def randint(self, a: int, b: int) -> int: ...

    def uniform(self, a: float, b: float) -> float: ...

    def random(self) -> float: ...

    def choice(self, seq: Sequence[T]) -> T: ...


def _slug(text: str) -> str:
    return re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-") or "item"


def match_cuisine(cuisine: str | None) -> str | None:
    """Return the menu cuisine whose keywords appear in ``cuisine``."""
    lowered = (cuisine or "").lower()
    for keywords, name in CUISINE_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return name
    return None


def menu_categories(cuisine: str | None) -> list[str]:
    """Category names for a cuisine, or the generic set if nothing matches."""
    matched = match_cuisine(cuisine)
    if matched is None:
        return list(GENERIC_CATEGORIES)
    return list(CUISINE_CATEGORIES[matched])


class Enricher:
    """Fill in delivery fields and menus that providers do not supply."""

    def __init__(self, rng: RandomSource | None = None) -> None:
        self.rng = rng if rng is not None else random.Random()

    @classmethod
    def seeded(cls, seed: int | None) -> "Enricher":
        """Create an enricher over ``random.Random(seed)``."""
        return cls(random.Random(seed))

    def delivery_time(self) -> int:
        return self.rng.randint(*DELIVERY_TIME_RANGE)

    def delivery_fee(self) -> Decimal:
        low, high = DELIVERY_FEE_RANGE
        fee = Decimal(str(self.rng.uniform(float(low), float(high)))).quantize(_CENTS)
        return max(low, min(fee, high))

    def accepting_orders(self) -> bool:
        return self.rng.random() < ACCEPTING_ORDERS_PROBABILITY

    def enrich(self, restaurant: Restaurant, with_menu: bool = False) -> Restaurant:
        """Return a copy with missing delivery fields synthesized.

        Fields the provider (or the mock set) already supplies are kept.

        Args:
            restaurant: Normalized restaurant
            with_menu: Also generate a menu when the restaurant has none

        Returns:
            The enriched restaurant (same type as the input)
        """
        update: dict = {}
        if restaurant.delivery_time is None:
            update["delivery_time"] = self.delivery_time()
        if restaurant.delivery_fee is None:
            update["delivery_fee"] = self.delivery_fee()
        if restaurant.accepting_orders is None:
            update["accepting_orders"] = self.accepting_orders()
        if with_menu and restaurant.menu is None:
            update["menu"] = self.generate_menu(
                restaurant.cuisine, id_prefix=restaurant.id
            )

        if not update:
            return restaurant
        return restaurant.model_copy(update=update)

    def generate_menu(
        self,
        cuisine: str | None,
        items_per_category: tuple[int, int] = DEFAULT_ITEMS_PER_CATEGORY,
        id_prefix: str = "",
    ) -> list[MenuCategory]:
        """Generate a synthetic menu for a cuisine.

        Categories are chosen deterministically by cuisine keyword; item
        counts, dish names, prices and flags are drawn from the random source.

        Args:
            cuisine: Free-text cuisine, e.g. "Italian" or "Sushi Bars"
            items_per_category: Inclusive (min, max) number of items per category
            id_prefix: Prefix for category and item ids (e.g. the restaurant id)

        Raises:
            ValueError: If the item range is empty or below 1
        """
        low, high = items_per_category
        if low < 1 or low > high:
            raise ValueError(f"Invalid items_per_category range: {items_per_category}")

        matched = match_cuisine(cuisine)
        label = cuisine or "Various"
        prefix = f"{id_prefix}-" if id_prefix else ""

        menu = []
        for index, category in enumerate(menu_categories(cuisine), start=1):
            category_slug = _slug(category)
            items = [
                self._menu_item(
                    f"{prefix}{category_slug}-{n}", label, matched, category
                )
                for n in range(1, self.rng.randint(low, high) + 1)
            ]
            menu.append(
                MenuCategory(id=f"{prefix}category-{index}", name=category, items=items)
            )

        logger.debug(f"Generated {len(menu)} menu categories for cuisine {label!r}")
        return menu

    def _dish_name(self, label: str, matched: str | None, category: str) -> str:
        names = DISH_NAMES.get(matched or "", {}).get(category)
        if not names:
            names = DEFAULT_DISH_NAMES.get(category)
        if not names:
            return f"{label} {category} Dish"
        return self.rng.choice(names)

    def _price(self, category: str) -> Decimal:
        low, high = PRICE_BOUNDS.get(category, MAIN_PRICE_BOUNDS)
        price = Decimal(str(self.rng.uniform(low, high))).quantize(_CENTS)
        return max(Decimal(str(low)), min(price, Decimal(str(high))))

    def _menu_item(
        self, item_id: str, label: str, matched: str | None, category: str
    ) -> MenuItem:
        return MenuItem(
            id=item_id,
            name=self._dish_name(label, matched, category),
            description=self.rng.choice(DESCRIPTIONS),
            price=self._price(category),
            category=category,
            image=(
                "https://source.unsplash.com/random/300x200/"
                f"?{_slug(label)},{_slug(category)}"
            ),
            popular=self.rng.random() > FLAG_THRESHOLD,
            vegetarian=self.rng.random() > FLAG_THRESHOLD,
            spicy=self.rng.random() > FLAG_THRESHOLD,
        )
