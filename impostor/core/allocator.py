"""
Card allocation: picks the round's card(s) and decides which card each seat sees.
"""

import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional, Sequence, Tuple

from ..config.game_config import GameMode
from ..exceptions import InsufficientCards
from .cards import Card, count_distinct
from .rng import RandomSource
from .roles import Role

SeatCards = Tuple[Optional[Card], ...]


@dataclass(frozen=True)
class CardAllocation:
    """
    Result of an allocation.

    ``per_seat_cards[i]`` is the card shown to seat ``i + 1``, or None when that
    seat gets no card.
    """
    secret_card: Card
    secondary_card: Optional[Card]
    per_seat_cards: SeatCards

    def card_for_seat(self, seat_number: int) -> Optional[Card]:
        return self.per_seat_cards[seat_number - 1]


def check_pool(card_pool: Sequence[Card], mode: GameMode) -> None:
    """
    Raises:
        InsufficientCards: If the pool holds fewer distinct ids than the mode needs
    """
    available = count_distinct(card_pool)
    if available < mode.min_distinct_cards:
        raise InsufficientCards(mode.value, mode.min_distinct_cards, available)


def draw_card(card_pool: Sequence[Card], rng: RandomSource) -> Card:
    return rng.choice(card_pool)


def draw_other_card(card_pool: Sequence[Card], excluded: Card, rng: RandomSource) -> Card:
    """Draw uniformly among the cards whose id differs from ``excluded``."""
    candidates = [card for card in card_pool if card.id != excluded.id]
    if not candidates:
        raise InsufficientCards("", 2, 1, "Pool has no card distinct from the secret card")
    return rng.choice(candidates)


def _allocate_classic(card_pool: Sequence[Card], roles: Sequence[Role],
                      rng: RandomSource) -> CardAllocation:
    # Impostors bluff blind: they never get a card
    secret = draw_card(card_pool, rng)
    per_seat = tuple(None if role.is_impostor else secret for role in roles)
    return CardAllocation(secret_card=secret, secondary_card=None, per_seat_cards=per_seat)


def _allocate_spy(card_pool: Sequence[Card], roles: Sequence[Role],
                  rng: RandomSource) -> CardAllocation:
    secret = draw_card(card_pool, rng)
    decoy = draw_other_card(card_pool, secret, rng)
    per_seat = tuple(decoy if role.is_impostor else secret for role in roles)
    return CardAllocation(secret_card=secret, secondary_card=decoy, per_seat_cards=per_seat)


def _allocate_double_trouble(card_pool: Sequence[Card], roles: Sequence[Role],
                             rng: RandomSource) -> CardAllocation:
    card_a = draw_card(card_pool, rng)
    card_b = draw_other_card(card_pool, card_a, rng)

    crew_seats = [index for index, role in enumerate(roles) if not role.is_impostor]
    first_half = math.ceil(len(crew_seats) / 2)
    crew_cards: List[Card] = [card_a] * first_half + [card_b] * (len(crew_seats) - first_half)
    rng.shuffle(crew_cards)

    per_seat: List[Optional[Card]] = [None] * len(roles)
    for seat_index, card in zip(crew_seats, crew_cards):
        per_seat[seat_index] = card
    return CardAllocation(secret_card=card_a, secondary_card=card_b, per_seat_cards=tuple(per_seat))


_ALLOCATORS: Dict[GameMode, Callable[[Sequence[Card], Sequence[Role], RandomSource], CardAllocation]] = {
    GameMode.CLASSIC: _allocate_classic,
    GameMode.SPY: _allocate_spy,
    GameMode.DOUBLE_TROUBLE: _allocate_double_trouble,
    GameMode.RELAMPAGO: _allocate_classic,
}


def allocate_cards(card_pool: Sequence[Card], roles: Sequence[Role], mode: GameMode,
                   rng: Optional[RandomSource] = None) -> CardAllocation:
    """
    Pick the secret card(s) for ``mode`` and map each seat to the card it sees.

    - CLASSIC / RELAMPAGO: crew seats see the secret card, impostors see nothing.
    - SPY: crew seats see the secret card, impostors see a different card and
      are not told it is the wrong one.
    - DOUBLE_TROUBLE: crew seats are split ceil/floor between two distinct
      cards in shuffled order, impostors see nothing.

    Raises:
        InsufficientCards: If the pool is too small for the mode
    """
    check_pool(card_pool, mode)
    return _ALLOCATORS[mode](card_pool, roles, rng or RandomSource())
