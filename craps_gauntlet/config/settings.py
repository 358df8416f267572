"""
Craps Gauntlet - Application Settings

Loads runtime configuration from environment variables (prefix
CRAPS_GAUNTLET_) or a .env file using Pydantic Settings. Game rules are
not configurable here; they live in craps_gauntlet.engine.constants.
"""

import logging
from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Application
    debug: bool = False
    log_level: str = "INFO"

    # Gameplay
    roll_delay_seconds: float = Field(default=0.0, ge=0.0)
    seed: int | None = None

    model_config = {
        "env_prefix": "CRAPS_GAUNTLET_",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Cached singleton settings instance."""
    return Settings()


def configure_logging(settings: Settings | None = None) -> None:
    """Configure root logging from settings; debug forces DEBUG level."""
    settings = settings or get_settings()
    level = logging.DEBUG if settings.debug else getattr(logging, settings.log_level.upper(), logging.INFO)
    logging.basicConfig(
        level=level,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
    )
    logging.getLogger().setLevel(level)
