"""
What the device shows the seat currently holding it.
"""

from typing import Any, Dict

from ..core import GameSession, Player


def reveal_view(player: Player) -> Dict[str, Any]:
    """
    Private reveal payload for one seat.

    A seat with a card sees only the card, never its role: in Spy mode the
    impostor must not be able to tell its card is the decoy. A seat without
    a card is told it is the impostor.
    """
    if player.assigned_card is not None:
        return {
            "seatNumber": player.seat_number,
            "isImpostor": None,
            "card": player.assigned_card.to_dict(),
            "message": player.assigned_card.name,
        }
    return {
        "seatNumber": player.seat_number,
        "isImpostor": True,
        "card": None,
        "message": "You are the impostor! Find out the secret card.",
    }


def end_of_round_view(session: GameSession) -> Dict[str, Any]:
    """Everything revealed once the round is over."""
    impostors = session.get_impostor_seats()
    return {
        "mode": session.mode.value,
        "impostorSeats": impostors,
        "headline": "The impostors were:" if len(impostors) > 1 else "The impostor was:",
        "secretCard": session.secret_card.to_dict(),
        "secondaryCard": session.secondary_card.to_dict() if session.secondary_card else None,
        "players": [p.to_dict() for p in session.players],
    }


def format_clock(seconds: int) -> str:
    """Render seconds as mm:ss."""
    minutes, secs = divmod(max(0, int(seconds)), 60)
    return f"{minutes:02d}:{secs:02d}"
