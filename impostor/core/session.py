"""
Session builder: composes roles, cards and mode configuration into one
immutable round.
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

from ..config.game_config import GameConfig, GameMode, config_for_mode
from .allocator import allocate_cards
from .cards import Card
from .player import Player
from .rng import RandomSource
from .roles import assign_roles

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GameSession:
    """
    One round: its configuration, the card(s) in play and every seat.

    Never mutated once built; phase changes only move the cursor of the
    phase machine.
    """
    config: GameConfig
    secret_card: Card
    secondary_card: Optional[Card]
    players: Tuple[Player, ...]

    @property
    def mode(self) -> GameMode:
        return self.config.mode

    @property
    def players_count(self) -> int:
        return len(self.players)

    def get_player(self, seat_number: int) -> Optional[Player]:
        """Get player by seat number."""
        if 1 <= seat_number <= len(self.players):
            return self.players[seat_number - 1]
        return None

    def get_impostors(self) -> List[Player]:
        return [p for p in self.players if p.is_impostor]

    def get_impostor_seats(self) -> List[int]:
        return [p.seat_number for p in self.get_impostors()]

    def to_dict(self) -> Dict[str, Any]:
        """Full round record, secrets included."""
        return {
            "config": self.config.to_dict(),
            "secretCard": self.secret_card.to_dict(),
            "secondaryCard": self.secondary_card.to_dict() if self.secondary_card else None,
            "players": [p.to_dict() for p in self.players],
        }


def build_session(card_pool: Sequence[Card], players_count: int, impostors_count: int,
                  mode: Union[str, GameMode], rng: Optional[RandomSource] = None,
                  reveal_seconds: Optional[int] = None,
                  round_seconds: Optional[int] = None) -> GameSession:
    """
    Build a new round.

    Deterministic for a deterministic ``rng``: roles are drawn first, then the
    cards, always in the same order.

    Raises:
        InvalidConfig: If the counts are out of range or the mode is unknown
        InsufficientCards: If the pool is too small for the mode
    """
    rng = rng or RandomSource()
    config = config_for_mode(mode, players_count, impostors_count,
                             reveal_seconds=reveal_seconds, round_seconds=round_seconds)

    roles = assign_roles(config.players_count, config.impostors_count, rng)
    allocation = allocate_cards(card_pool, roles, config.mode, rng)

    players = tuple(
        Player(seat_number=seat, role=role, assigned_card=allocation.card_for_seat(seat))
        for seat, role in enumerate(roles, start=1)
    )
    session = GameSession(
        config=config,
        secret_card=allocation.secret_card,
        secondary_card=allocation.secondary_card,
        players=players,
    )
    logger.info(
        "Built %s session: %d players, %d impostor(s), pool of %d card(s)",
        config.mode.value, config.players_count, config.impostors_count, len(card_pool),
    )
    return session
