"""Service layer for FoodFinder."""

from foodfinder.services.search_service import (
    FALLBACK_MESSAGE,
    SearchQuery,
    SearchResult,
    SearchService,
)

__all__ = ["FALLBACK_MESSAGE", "SearchQuery", "SearchResult", "SearchService"]
