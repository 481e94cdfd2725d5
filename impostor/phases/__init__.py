"""
Turn/phase state machine, timers and reveal views.
"""

from .timer import CountdownTimer
from .reveal import reveal_view, end_of_round_view, format_clock
from .phase_machine import PhaseState, PhaseCursor, TurnPhaseMachine

__all__ = [
    'CountdownTimer',
    'reveal_view',
    'end_of_round_view',
    'format_clock',
    'PhaseState',
    'PhaseCursor',
    'TurnPhaseMachine',
]
