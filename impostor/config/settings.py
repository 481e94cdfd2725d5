"""
Application settings.
"""

import logging
from dataclasses import dataclass
from typing import Optional

CATALOG_API_KEY_ENV = "CLASH_ROYALE_API_KEY"


@dataclass
class Settings:
    """Configuration for the card sources, round defaults and the web server."""

    # Card catalog
    catalog_base_url: str = "https://proxy.royaleapi.dev/v1"
    catalog_api_key: Optional[str] = None  # Falls back to $CLASH_ROYALE_API_KEY
    catalog_timeout: float = 10.0  # seconds

    # Custom cards
    custom_cards_path: str = "custom_cards.json"
    storage_quota_bytes: int = 5 * 1024 * 1024

    # Round defaults
    default_players: int = 4
    default_impostors: int = 1
    default_mode: str = "CLASSIC"
    card_source: str = "CATALOG"  # CATALOG, CUSTOM or MIXED

    # Relampago timing overrides (None keeps the built-in 3s / 90s)
    reveal_seconds: Optional[int] = None
    round_seconds: Optional[int] = None

    # Misc
    log_level: str = "INFO"
    random_seed: Optional[int] = None  # Random seed for reproducible rounds

    # Web server
    host: str = "127.0.0.1"
    port: int = 5000


# Default settings instance
default_settings = Settings()


def configure_logging(level: str = "INFO") -> None:
    """Apply a log level to the root logger."""
    logging.basicConfig(
        level=getattr(logging, str(level).upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
