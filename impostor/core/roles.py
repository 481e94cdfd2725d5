"""
Role definitions and the role distributor.
"""

from enum import Enum
from typing import List, Optional

from ..exceptions import InvalidConfig
from .rng import RandomSource


class Role(Enum):
    """Player role for one round."""
    IMPOSTOR = "IMPOSTOR"
    NOT_IMPOSTOR = "NOT_IMPOSTOR"

    @property
    def is_impostor(self) -> bool:
        return self is Role.IMPOSTOR


def get_role_distribution(players_count: int, impostors_count: int) -> List[Role]:
    """
    Get the canonical (unshuffled) role multiset: all impostors first,
    then everyone else.
    """
    if impostors_count < 1:
        raise InvalidConfig("There must be at least 1 impostor")
    if impostors_count >= players_count:
        raise InvalidConfig("Impostors must be fewer than players")
    return [Role.IMPOSTOR] * impostors_count + [Role.NOT_IMPOSTOR] * (players_count - impostors_count)


def assign_roles(players_count: int, impostors_count: int,
                 rng: Optional[RandomSource] = None) -> List[Role]:
    """
    Assign one role per seat.

    Returns a list of length ``players_count`` with exactly ``impostors_count``
    impostors, uniformly shuffled so a seat number says nothing about its role.

    Raises:
        InvalidConfig: If impostors_count < 1 or impostors_count >= players_count
    """
    roles = get_role_distribution(players_count, impostors_count)
    (rng or RandomSource()).shuffle(roles)
    return roles
