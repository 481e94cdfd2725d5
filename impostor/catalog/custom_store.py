"""
Custom card persistence and editing.
"""

import errno
import json
import logging
import time
from pathlib import Path
from threading import Lock
from typing import Any, Callable, List, Optional, Sequence
from urllib.parse import urlparse

from ..core import Card
from ..exceptions import CustomCardsUnreadable, InvalidCard, StorageFull

logger = logging.getLogger(__name__)

_NO_SPACE_ERRNOS = (errno.ENOSPC, getattr(errno, "EDQUOT", errno.ENOSPC))

DEFAULT_EMOJI = "🎴"
SUGGESTED_EMOJIS = [
    "🎴", "⭐", "🔥", "💎", "🎯", "🏆", "👑", "⚡", "🌟", "💀",
    "🐉", "🦁", "🐺", "🦅", "🎪", "🎭", "🎨", "🎸", "🚀", "💫",
]


class InMemoryCustomCardStore:
    """Custom card store kept in memory."""

    def __init__(self, cards: Optional[Sequence[Card]] = None, max_cards: Optional[int] = None):
        self._cards = list(cards or [])
        self.max_cards = max_cards

    def load_custom_cards(self) -> List[Card]:
        return list(self._cards)

    def save_custom_cards(self, cards: Sequence[Card]) -> None:
        if self.max_cards is not None and len(cards) > self.max_cards:
            raise StorageFull(f"Cannot store more than {self.max_cards} custom cards")
        self._cards = list(cards)


class JsonFileCustomCardStore:
    """
    Custom cards saved as a JSON list in a single file.

    The payload is capped at ``quota_bytes``; going over it, or the filesystem
    refusing the write, raises StorageFull. Saves are atomic (temp file, then
    rename), so a failed save leaves the previous cards intact.
    """

    def __init__(self, path: str, quota_bytes: Optional[int] = 5 * 1024 * 1024):
        self.path = Path(path)
        self.quota_bytes = quota_bytes
        self._lock = Lock()

    def load_custom_cards(self) -> List[Card]:
        """
        Returns:
            The stored cards, or an empty list if nothing was saved yet

        Raises:
            CustomCardsUnreadable: If the file exists but cannot be decoded
        """
        if not self.path.exists():
            return []

        try:
            with open(self.path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, ValueError) as e:
            logger.error("Could not read custom cards from %s: %s", self.path, e)
            raise CustomCardsUnreadable(f"Could not load custom cards: {e}") from e

        if not isinstance(data, list):
            raise CustomCardsUnreadable("Custom cards file does not contain a list")

        try:
            return [_stored_card(item) for item in data]
        except (KeyError, TypeError, ValueError) as e:
            raise CustomCardsUnreadable(f"Malformed custom card entry: {e}") from e

    def save_custom_cards(self, cards: Sequence[Card]) -> None:
        """
        Raises:
            StorageFull: If the cards don't fit in the quota or cannot be written
        """
        payload = json.dumps([card.to_dict() for card in cards], ensure_ascii=False)
        size = len(payload.encode('utf-8'))
        if self.quota_bytes is not None and size > self.quota_bytes:
            raise StorageFull(
                f"Custom cards need {size} bytes, storage quota is {self.quota_bytes} bytes"
            )

        tmp_path = self.path.with_name(self.path.name + ".tmp")
        with self._lock:
            try:
                self.path.parent.mkdir(parents=True, exist_ok=True)
                with open(tmp_path, 'w', encoding='utf-8') as f:
                    f.write(payload)
                tmp_path.replace(self.path)
            except OSError as e:
                try:
                    tmp_path.unlink()
                except OSError:
                    # Never created, or already renamed away
                    pass
                if e.errno in _NO_SPACE_ERRNOS:
                    reason = "no space left"
                else:
                    reason = e.strerror or str(e)
                logger.error("Could not save custom cards to %s: %s", self.path, reason)
                raise StorageFull(f"Could not save custom cards: {reason}") from e

        logger.debug("Saved %d custom cards to %s", len(cards), self.path)


def _stored_card(item: Any) -> Card:
    card = Card.from_dict(item)
    if not card.is_custom:
        card = Card(id=card.id, name=card.name, display_ref=card.display_ref, is_custom=True)
    return card


# ----------------------------------------------------------------------
# Editing helpers. Each returns a new list; persisting it is up to the caller.

def is_valid_image_url(url: str) -> bool:
    """Empty is valid (no image); otherwise it must be an http(s) URL."""
    if not url.strip():
        return True
    parsed = urlparse(url.strip())
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def _display_ref(emoji: Optional[str], image_url: Optional[str]) -> str:
    image_url = (image_url or "").strip()
    if image_url:
        if not is_valid_image_url(image_url):
            raise InvalidCard(f"Image URL must start with http:// or https://: {image_url}")
        return image_url
    return (emoji or "").strip() or DEFAULT_EMOJI


def _clean_name(name: Optional[str]) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise InvalidCard("Card name cannot be empty")
    return cleaned


def new_custom_card(name: str, emoji: str = DEFAULT_EMOJI, image_url: Optional[str] = None,
                    existing: Sequence[Card] = (),
                    clock: Callable[[], float] = time.time) -> Card:
    """
    Create a custom card. The id is the current time in milliseconds, bumped
    past any id already used in ``existing``.

    Raises:
        InvalidCard: If the name is blank or the image URL is not http(s)
    """
    card_id = int(clock() * 1000)
    used = {card.id for card in existing}
    while card_id in used:
        card_id += 1
    return Card(id=card_id, name=_clean_name(name),
                display_ref=_display_ref(emoji, image_url), is_custom=True)


def add_custom_card(cards: Sequence[Card], name: str, emoji: str = DEFAULT_EMOJI,
                    image_url: Optional[str] = None,
                    clock: Callable[[], float] = time.time) -> List[Card]:
    return list(cards) + [new_custom_card(name, emoji, image_url, existing=cards, clock=clock)]


def update_custom_card(cards: Sequence[Card], card_id: int, name: str,
                       emoji: str = DEFAULT_EMOJI, image_url: Optional[str] = None) -> List[Card]:
    """
    Replace the name and display of the card with ``card_id``.

    Raises:
        InvalidCard: If no such card exists, the name is blank or the URL is invalid
    """
    if not any(card.id == card_id for card in cards):
        raise InvalidCard(f"No custom card with id {card_id}")
    updated = Card(id=card_id, name=_clean_name(name),
                   display_ref=_display_ref(emoji, image_url), is_custom=True)
    return [updated if card.id == card_id else card for card in cards]


def remove_custom_card(cards: Sequence[Card], card_id: int) -> List[Card]:
    return [card for card in cards if card.id != card_id]
