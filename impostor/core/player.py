"""
Player (seat) of a round.
"""

from dataclasses import dataclass
from typing import Any, Dict, Optional

from .cards import Card
from .roles import Role


@dataclass(frozen=True)
class Player:
    """A seat of the round, its role and the card it is shown."""
    seat_number: int
    role: Role
    assigned_card: Optional[Card] = None

    def __str__(self) -> str:
        return f"Player {self.seat_number}"

    @property
    def is_impostor(self) -> bool:
        return self.role.is_impostor

    def to_dict(self) -> Dict[str, Any]:
        """Full record, roles included. Only meant for the end-of-round reveal."""
        return {
            "seatNumber": self.seat_number,
            "role": self.role.value,
            "assignedCard": self.assigned_card.to_dict() if self.assigned_card else None,
        }
