"""
Card model shared by the catalog, the custom card store and the allocator.
"""

from dataclasses import dataclass
from typing import Any, Dict, Sequence


@dataclass(frozen=True, eq=False)
class Card:
    """
    A card of the pool.

    Identity is the ``id``: two cards are the same card iff their ids match,
    whatever their name or display data say. ``display_ref`` is an emoji glyph
    or an image URL and is only used for rendering.
    """
    id: int
    name: str
    display_ref: str = ""
    is_custom: bool = False

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Card):
            return NotImplemented
        return self.id == other.id

    def __hash__(self) -> int:
        return hash(self.id)

    def __str__(self) -> str:
        return self.name

    @property
    def has_image(self) -> bool:
        """True when the display reference is an image URL rather than a glyph."""
        return self.display_ref.startswith("http")

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "displayRef": self.display_ref,
            "isCustom": self.is_custom,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Card":
        """Build a card from its stored form (see ``to_dict``)."""
        return cls(
            id=int(data["id"]),
            name=str(data["name"]),
            display_ref=str(data.get("displayRef", "")),
            is_custom=bool(data.get("isCustom", False)),
        )

    @classmethod
    def from_catalog_item(cls, item: Dict[str, Any]) -> "Card":
        """Build a card from a remote catalog item (``{id, name, iconUrls: {medium}}``)."""
        icon_urls = item.get("iconUrls") or {}
        return cls(
            id=int(item["id"]),
            name=str(item["name"]),
            display_ref=str(icon_urls.get("medium", "")),
            is_custom=False,
        )


def count_distinct(pool: Sequence[Card]) -> int:
    """Number of distinct card ids in the pool."""
    return len({card.id for card in pool})
