"""
Resolves the card pool for a round from the catalog, custom cards or both.
"""

import logging
from enum import Enum
from typing import List, Union

from ..core import Card
from ..exceptions import CatalogError, CustomCardsUnreadable, InvalidConfig

logger = logging.getLogger(__name__)


class CardSource(Enum):
    """Where a round's cards come from."""
    CATALOG = "CATALOG"
    CUSTOM = "CUSTOM"
    MIXED = "MIXED"

    @classmethod
    def parse(cls, value: Union[str, "CardSource"]) -> "CardSource":
        """
        Accepts the enum names plus the historical aliases CLASH and BOTH.

        Raises:
            InvalidConfig: If the value names no known source
        """
        if isinstance(value, CardSource):
            return value
        if isinstance(value, str):
            name = value.strip().upper()
            name = _ALIASES.get(name, name)
            try:
                return cls[name]
            except KeyError:
                pass
        valid = ", ".join(s.value for s in cls)
        raise InvalidConfig(f"Unknown card source: {value!r}. Must be one of: {valid}")


_ALIASES = {"CLASH": "CATALOG", "BOTH": "MIXED"}


def resolve_card_pool(source: Union[str, CardSource], catalog, store) -> List[Card]:
    """
    Build the card pool for ``source``.

    CATALOG and CUSTOM propagate their collaborator's error. MIXED concatenates
    catalog and custom cards (no dedup); if only one half fails the other half
    is used alone, if both fail the catalog error is raised.
    """
    source = CardSource.parse(source)

    if source is CardSource.CATALOG:
        return catalog.fetch_cards()
    if source is CardSource.CUSTOM:
        return store.load_custom_cards()

    catalog_error = None
    try:
        catalog_cards = catalog.fetch_cards()
    except CatalogError as e:
        catalog_error = e
        catalog_cards = []

    try:
        custom_cards = store.load_custom_cards()
    except CustomCardsUnreadable as e:
        if catalog_error is not None:
            raise catalog_error
        logger.warning("Custom cards unavailable, using catalog cards only: %s", e)
        return catalog_cards

    if catalog_error is not None:
        logger.warning("Card catalog unavailable, using custom cards only: %s", catalog_error)
        return custom_cards

    return catalog_cards + custom_cards
