"""FoodFinder - restaurant discovery backend for food delivery."""

__version__ = "0.1.0"
