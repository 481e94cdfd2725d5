"""
Game controller: the single entry point the presentation layer talks to.
"""

import logging
from threading import Lock
from typing import Any, Dict, List, Optional, Union

from .catalog import (
    CardSource, JsonFileCustomCardStore, ClashRoyaleCatalog,
    add_custom_card, remove_custom_card, resolve_card_pool, update_custom_card,
)
from .config import GameMode, Settings, default_settings, validate_counts
from .core import Card, GameSession, RandomSource, build_session
from .phases import PhaseState, TurnPhaseMachine
from .web.event_emitter import EventEmitter

logger = logging.getLogger(__name__)


class ImpostorGame:
    """
    Wires settings, card sources, the random source and the phase machine.

    User actions (``ready``, ``seen``, ``reveal_impostors``, ``abort``,
    ``start_session``) come in here; the machine owns every state change.
    """

    def __init__(self, settings: Optional[Settings] = None, catalog=None, store=None,
                 rng: Optional[RandomSource] = None,
                 event_emitter: Optional[EventEmitter] = None):
        self.settings = settings or default_settings
        self.catalog = catalog or ClashRoyaleCatalog(
            api_key=self.settings.catalog_api_key,
            base_url=self.settings.catalog_base_url,
            timeout=self.settings.catalog_timeout,
        )
        self.store = store or JsonFileCustomCardStore(
            self.settings.custom_cards_path,
            quota_bytes=self.settings.storage_quota_bytes,
        )
        self.rng = rng or RandomSource(seed=self.settings.random_seed)
        self.event_emitter = event_emitter or EventEmitter()
        self.machine = TurnPhaseMachine(event_emitter=self.event_emitter)
        # Serialises load -> edit -> save of the custom cards
        self._cards_lock = Lock()

    @property
    def phase(self) -> PhaseState:
        return self.machine.phase

    @property
    def session(self) -> Optional[GameSession]:
        return self.machine.session

    # ------------------------------------------------------------------
    # Round lifecycle

    def select_mode(self, mode: Union[str, GameMode]) -> bool:
        return self.machine.select_mode(mode)

    def back_to_mode_select(self) -> bool:
        return self.machine.back_to_mode_select()

    def start_session(self, players_count: int, impostors_count: int,
                      mode: Union[str, GameMode, None] = None,
                      card_source: Union[str, CardSource, None] = None) -> GameSession:
        """
        Build a session and hand it to the phase machine.

        Validation happens before any card is fetched, so a bad request never
        hits the catalog. An in-progress round is only discarded once the new
        session has been built.

        Raises:
            InvalidConfig: Bad counts, mode or card source
            InsufficientCards: The resolved pool is too small for the mode
            CatalogError: The catalog failed (not raised for a degradable MIXED source)
            CustomCardsUnreadable: Stored custom cards could not be read
        """
        return self.begin_session(self.prepare_session(players_count, impostors_count, mode, card_source))

    def prepare_session(self, players_count: int, impostors_count: int,
                        mode: Union[str, GameMode, None] = None,
                        card_source: Union[str, CardSource, None] = None) -> GameSession:
        """
        Resolve the card pool and build a session without touching the
        round in progress. This is the part that may wait on the catalog.
        """
        game_mode = GameMode.parse(mode if mode is not None else self.machine.selected_mode)
        source = CardSource.parse(card_source if card_source is not None else self.settings.card_source)
        # Fail fast on the counts before touching the network
        validate_counts(players_count, impostors_count)

        card_pool = resolve_card_pool(source, self.catalog, self.store)
        return build_session(
            card_pool, players_count, impostors_count, game_mode, rng=self.rng,
            reveal_seconds=self.settings.reveal_seconds,
            round_seconds=self.settings.round_seconds,
        )

    def begin_session(self, session: GameSession) -> GameSession:
        """Hand a prepared session to the phase machine, discarding any round in progress."""
        if self.machine.phase not in (PhaseState.MODE_SELECT, PhaseState.START):
            self.machine.abort()
        self.machine.start_session(session)
        return session

    def ready(self) -> bool:
        return self.machine.ready()

    def seen(self) -> bool:
        return self.machine.seen()

    def reveal_impostors(self) -> bool:
        return self.machine.reveal_impostors()

    def abort(self) -> bool:
        return self.machine.abort()

    def play_again(self) -> bool:
        return self.machine.play_again()

    def tick(self, seconds: int = 1) -> bool:
        return self.machine.tick(seconds)

    def snapshot(self) -> Dict[str, Any]:
        return self.machine.snapshot()

    # ------------------------------------------------------------------
    # Cards

    def fetch_catalog_cards(self) -> List[Card]:
        return self.catalog.fetch_cards()

    def list_custom_cards(self) -> List[Card]:
        return self.store.load_custom_cards()

    def add_custom_card(self, name: str, emoji: Optional[str] = None,
                        image_url: Optional[str] = None) -> Card:
        """
        Create and persist a custom card.

        Raises:
            InvalidCard: Blank name or bad image URL
            StorageFull: The store refused the save (an ongoing round is unaffected)
        """
        with self._cards_lock:
            cards = self.store.load_custom_cards()
            updated = add_custom_card(cards, name, emoji or "", image_url)
            self.store.save_custom_cards(updated)
        logger.info("Added custom card %r", updated[-1].name)
        return updated[-1]

    def update_custom_card(self, card_id: int, name: str, emoji: Optional[str] = None,
                           image_url: Optional[str] = None) -> Card:
        with self._cards_lock:
            cards = update_custom_card(self.store.load_custom_cards(), card_id, name, emoji or "", image_url)
            self.store.save_custom_cards(cards)
        return next(card for card in cards if card.id == card_id)

    def remove_custom_card(self, card_id: int) -> bool:
        """Returns False if no card had that id."""
        with self._cards_lock:
            cards = self.store.load_custom_cards()
            remaining = remove_custom_card(cards, card_id)
            if len(remaining) == len(cards):
                return False
            self.store.save_custom_cards(remaining)
        return True
