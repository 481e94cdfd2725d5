"""
Core session engine: randomness, cards, roles, card allocation and session building.
"""

from .rng import RandomSource
from .cards import Card, count_distinct
from .roles import Role, assign_roles, get_role_distribution
from .allocator import CardAllocation, allocate_cards, check_pool
from .player import Player
from .session import GameSession, build_session

__all__ = [
    'RandomSource',
    'Card',
    'count_distinct',
    'Role',
    'assign_roles',
    'get_role_distribution',
    'CardAllocation',
    'allocate_cards',
    'check_pool',
    'Player',
    'GameSession',
    'build_session',
]
