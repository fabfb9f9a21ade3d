"""Configuration management for FoodFinder using Pydantic."""

import logging
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Config(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # Provider Configuration
    provider: Literal["yelp", "google"] = Field(
        default="yelp", description="Upstream restaurant data provider"
    )
    yelp_api_key: str | None = Field(None, description="Yelp Fusion API key")
    google_maps_api_key: str | None = Field(
        None, description="Google Maps / Places API key"
    )
    http_timeout: float = Field(
        default=8.0, gt=0, description="Upstream HTTP timeout in seconds"
    )

    # Search Defaults
    default_lat: float = Field(default=37.7749, ge=-90, le=90)
    default_lng: float = Field(default=-122.4194, ge=-180, le=180)
    default_radius: int = Field(
        default=1500, gt=0, description="Default search radius in meters"
    )
    default_limit: int = Field(
        default=20, gt=0, description="Default number of results"
    )

    # Enrichment Configuration
    random_seed: int | None = Field(
        None, description="Seed for synthesized delivery data (unseeded if unset)"
    )

    # Server Configuration
    server_host: str = Field(default="0.0.0.0", description="Server host")
    server_port: int = Field(default=8080, description="Server port")
    server_url: str = Field(
        default="http://localhost:8080",
        description="Server URL for CLI to connect to API",
    )

    # Logging Configuration
    log_level: str = Field(default="INFO", description="Logging level")

    def has_provider_credentials(self) -> bool:
        """Check if the selected provider has an API key."""
        if self.provider == "google":
            return bool(self.google_maps_api_key)
        return bool(self.yelp_api_key)

    def model_post_init(self, __context) -> None:
        """Validate configuration after initialization."""
        if not self.has_provider_credentials():
            logger.warning(
                f"No API key set for provider '{self.provider}' - "
                "searches will fall back to sample restaurants"
            )


# Global config instance
config: Config | None = None


def get_config() -> Config:
    """Get or create the global configuration instance."""
    global config
    if config is None:
        config = Config()
    return config


def setup_logging(cfg: Config | None = None) -> None:
    """Configure logging for the application."""
    if cfg is None:
        cfg = get_config()

    log_level = getattr(logging, cfg.log_level.upper(), logging.INFO)

    logging.basicConfig(
        level=log_level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )

    # Reduce noise from external libraries
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
