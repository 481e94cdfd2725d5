"""
Exceptions raised while setting up rounds and managing cards.
"""

from typing import Optional


class ImpostorGameError(Exception):
    """Base class for every error scoped to a round or a save operation."""

    def __init__(self, message: str):
        self.message = message
        super().__init__(message)


class InvalidConfig(ImpostorGameError):
    """Raised for bad player/impostor counts or an unknown game mode."""


class InsufficientCards(ImpostorGameError):
    """Raised when the card pool is too small for the chosen mode."""

    def __init__(self, mode: str, required: int, available: int, message: str = ""):
        self.mode = mode
        self.required = required
        self.available = available
        super().__init__(
            message
            or f"Mode {mode} needs at least {required} distinct card(s), pool has {available}"
        )


class InvalidCard(ImpostorGameError):
    """Raised when a custom card edit is rejected."""


class CatalogError(ImpostorGameError):
    """Base class for card catalog failures."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.status_code = status_code
        super().__init__(message)


class CatalogUnavailable(CatalogError):
    """Catalog could not be reached or answered with something unusable."""


class AuthError(CatalogError):
    """Catalog rejected the API key (missing, invalid or IP not allowed)."""


class RateLimited(CatalogError):
    """Catalog throttled the request."""


class StorageFull(ImpostorGameError):
    """Custom cards could not be persisted."""


class CustomCardsUnreadable(ImpostorGameError):
    """Stored custom cards exist but cannot be decoded."""
