"""
Card sources: the remote catalog, the custom card store and pool resolution.
"""

from .provider import ClashRoyaleCatalog, StaticCatalog, DEFAULT_CATALOG_URL
from .custom_store import (
    InMemoryCustomCardStore, JsonFileCustomCardStore,
    new_custom_card, add_custom_card, update_custom_card, remove_custom_card,
    is_valid_image_url, DEFAULT_EMOJI, SUGGESTED_EMOJIS,
)
from .card_source import CardSource, resolve_card_pool

__all__ = [
    'ClashRoyaleCatalog',
    'StaticCatalog',
    'DEFAULT_CATALOG_URL',
    'InMemoryCustomCardStore',
    'JsonFileCustomCardStore',
    'new_custom_card',
    'add_custom_card',
    'update_custom_card',
    'remove_custom_card',
    'is_valid_image_url',
    'DEFAULT_EMOJI',
    'SUGGESTED_EMOJIS',
    'CardSource',
    'resolve_card_pool',
]
