"""
Tests for custom card persistence and the editing helpers.
"""

import errno
import json
from pathlib import Path

import pytest

from impostor.catalog import (
    DEFAULT_EMOJI, InMemoryCustomCardStore, JsonFileCustomCardStore,
    add_custom_card, is_valid_image_url, new_custom_card, remove_custom_card, update_custom_card,
)
from impostor.core import Card
from impostor.exceptions import CustomCardsUnreadable, InvalidCard, StorageFull


def fixed_clock(seconds):
    return lambda: seconds


def test_file_store_round_trip(tmp_path):
    """Saved cards load back identical, non-ASCII names included."""
    store = JsonFileCustomCardStore(str(tmp_path / "cards" / "custom.json"))
    cards = [
        Card(id=1700000000000, name="Tía Marta", display_ref="🎂", is_custom=True),
        Card(id=1700000000001, name="Robot", display_ref="https://img.example/robot.png", is_custom=True),
    ]
    store.save_custom_cards(cards)

    loaded = store.load_custom_cards()
    assert [card.to_dict() for card in loaded] == [card.to_dict() for card in cards]
    assert "Tía Marta" in (tmp_path / "cards" / "custom.json").read_text(encoding="utf-8")


def test_missing_file_is_empty(tmp_path):
    assert JsonFileCustomCardStore(str(tmp_path / "nothing.json")).load_custom_cards() == []


@pytest.mark.parametrize("content", ["{not json", '{"id": 1}', '[{"name": "no id"}]'])
def test_unreadable_file(tmp_path, content):
    path = tmp_path / "custom.json"
    path.write_text(content, encoding="utf-8")
    with pytest.raises(CustomCardsUnreadable):
        JsonFileCustomCardStore(str(path)).load_custom_cards()


def test_loaded_cards_are_custom(tmp_path):
    path = tmp_path / "custom.json"
    path.write_text(json.dumps([{"id": 5, "name": "Kettle", "displayRef": "🫖"}]), encoding="utf-8")
    [card] = JsonFileCustomCardStore(str(path)).load_custom_cards()
    assert card.is_custom


def test_quota_exceeded_keeps_previous_cards(tmp_path):
    """A refused save leaves the stored cards untouched."""
    path = tmp_path / "custom.json"
    store = JsonFileCustomCardStore(str(path), quota_bytes=200)
    store.save_custom_cards([Card(id=1, name="Small", display_ref="🎴", is_custom=True)])
    before = path.read_text(encoding="utf-8")

    big = [Card(id=n, name="x" * 50, display_ref="🎴", is_custom=True) for n in range(10)]
    with pytest.raises(StorageFull):
        store.save_custom_cards(big)

    assert path.read_text(encoding="utf-8") == before
    assert [card.name for card in store.load_custom_cards()] == ["Small"]


def test_unwritable_path_is_storage_full(tmp_path):
    """A path that cannot be written (here: a directory) reports StorageFull."""
    target = tmp_path / "custom.json"
    target.mkdir()
    with pytest.raises(StorageFull):
        JsonFileCustomCardStore(str(target)).save_custom_cards([Card(id=1, name="A", is_custom=True)])


def test_failed_write_leaves_no_temp_file(tmp_path, monkeypatch):
    """A disk-full error mid-save reports StorageFull and cleans up the temp file."""
    path = tmp_path / "custom.json"
    store = JsonFileCustomCardStore(str(path))
    store.save_custom_cards([Card(id=1, name="Kept", is_custom=True)])

    def disk_full(self, target):
        raise OSError(errno.ENOSPC, "No space left on device")

    monkeypatch.setattr(Path, "replace", disk_full)
    with pytest.raises(StorageFull) as exc_info:
        store.save_custom_cards([Card(id=2, name="Lost", is_custom=True)])

    assert "no space left" in exc_info.value.message
    assert sorted(p.name for p in tmp_path.iterdir()) == ["custom.json"]
    assert [card.name for card in store.load_custom_cards()] == ["Kept"]


def test_memory_store_limit():
    store = InMemoryCustomCardStore(max_cards=1)
    store.save_custom_cards([Card(id=1, name="A", is_custom=True)])
    with pytest.raises(StorageFull):
        store.save_custom_cards([Card(id=1, name="A", is_custom=True), Card(id=2, name="B", is_custom=True)])
    assert len(store.load_custom_cards()) == 1


def test_new_card_ids_come_from_the_clock():
    """Ids are milliseconds since the epoch, bumped past ids already taken."""
    card = new_custom_card("Toaster", clock=fixed_clock(1700000000.5))
    assert card.id == 1700000000500
    assert card.is_custom
    assert card.display_ref == DEFAULT_EMOJI

    taken = [Card(id=1700000000500, name="x"), Card(id=1700000000501, name="y")]
    assert new_custom_card("Toaster", existing=taken, clock=fixed_clock(1700000000.5)).id == 1700000000502


def test_add_keeps_existing_cards():
    first = add_custom_card([], "Sofa", "🛋️", clock=fixed_clock(1))
    both = add_custom_card(first, "Lamp", "💡", clock=fixed_clock(1))
    assert [card.name for card in both] == ["Sofa", "Lamp"]
    assert both[0].id != both[1].id


@pytest.mark.parametrize("name", ["", "   ", None])
def test_blank_names_rejected(name):
    with pytest.raises(InvalidCard):
        new_custom_card(name)


def test_image_url_takes_precedence_over_emoji():
    card = new_custom_card("  Cat  ", emoji="🐱", image_url=" https://img.example/cat.png ")
    assert card.name == "Cat"
    assert card.display_ref == "https://img.example/cat.png"
    assert card.has_image


@pytest.mark.parametrize("url,valid", [
    ("", True),
    ("http://img.example/a.png", True),
    ("https://img.example/a.png", True),
    ("ftp://img.example/a.png", False),
    ("javascript:alert(1)", False),
    ("img.example/a.png", False),
])
def test_image_url_validation(url, valid):
    assert is_valid_image_url(url) is valid


def test_invalid_image_url_rejected():
    with pytest.raises(InvalidCard):
        new_custom_card("Dog", image_url="ftp://img.example/dog.png")


def test_update_and_remove(custom_store):
    cards = custom_store.load_custom_cards()
    target = cards[0].id

    updated = update_custom_card(cards, target, "Grandpa's Cake", "🍰")
    assert updated[0].name == "Grandpa's Cake"
    assert updated[0].display_ref == "🍰"
    assert updated[1] is cards[1]

    with pytest.raises(InvalidCard):
        update_custom_card(cards, 42, "Ghost")

    remaining = remove_custom_card(updated, target)
    assert [card.id for card in remaining] == [cards[1].id]
    assert remove_custom_card(remaining, 42) == remaining
