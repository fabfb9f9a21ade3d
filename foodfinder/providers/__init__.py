"""Upstream restaurant data providers."""

import httpx

from foodfinder.config import Config
from foodfinder.providers.base import ProviderClient
from foodfinder.providers.google import GooglePlacesClient
from foodfinder.providers.yelp import YelpClient


def create_provider(
    config: Config, client: httpx.AsyncClient | None = None
) -> ProviderClient:
    """Build the provider client selected by configuration."""
    if config.provider == "google":
        return GooglePlacesClient(
            config.google_maps_api_key, timeout=config.http_timeout, client=client
        )
    return YelpClient(config.yelp_api_key, timeout=config.http_timeout, client=client)


__all__ = ["GooglePlacesClient", "ProviderClient", "YelpClient", "create_provider"]
