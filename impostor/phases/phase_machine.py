"""
Turn/phase state machine driving one shared device through a round.

MODE_SELECT -> START -> (PASS -> REVEAL) x players -> PLAYING -> GAME_END
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Callable, Dict, Optional, Tuple, Union, TYPE_CHECKING

from ..config.game_config import GameMode, RelampagoConfig
from ..core import GameSession, Player
from .reveal import end_of_round_view, format_clock, reveal_view
from .timer import CountdownTimer

if TYPE_CHECKING:
    from ..web.event_emitter import EventEmitter

logger = logging.getLogger(__name__)

# (duration in seconds or None, expiry callback, name)
TimerSpec = Tuple[Optional[int], Callable[[], None], str]


class PhaseState(Enum):
    """Current phase of the shared device."""
    MODE_SELECT = "MODE_SELECT"
    START = "START"
    PASS = "PASS"
    REVEAL = "REVEAL"
    PLAYING = "PLAYING"
    GAME_END = "GAME_END"


@dataclass
class PhaseCursor:
    """Which seat holds the device and how long the current timed phase has run."""
    phase: PhaseState = PhaseState.MODE_SELECT
    current_seat_index: int = 0
    elapsed_seconds: int = 0


class TurnPhaseMachine:
    """
    Owns the current session, the phase cursor and the single active timer.

    Actions issued in the wrong phase are ignored and return False. At most one
    timer exists at a time, and every phase change invalidates it, so a timer
    started for one phase can never move the cursor once that phase is left.
    """

    def __init__(self, event_emitter: Optional['EventEmitter'] = None):
        self.event_emitter = event_emitter
        self.cursor = PhaseCursor()
        self.session: Optional[GameSession] = None
        self.selected_mode = GameMode.CLASSIC
        self._timer: Optional[CountdownTimer] = None
        self._generation = 0

    @property
    def phase(self) -> PhaseState:
        return self.cursor.phase

    @property
    def timer(self) -> Optional[CountdownTimer]:
        """The active timer, if any."""
        if self._timer is not None and self._timer.active:
            return self._timer
        return None

    @property
    def current_player(self) -> Optional[Player]:
        if self.session is None or self.phase not in (PhaseState.PASS, PhaseState.REVEAL):
            return None
        return self.session.players[self.cursor.current_seat_index]

    @property
    def is_timed(self) -> bool:
        return self.session is not None and self.session.config.is_timed

    # ------------------------------------------------------------------
    # Configuration phases

    def select_mode(self, mode: Union[str, GameMode]) -> bool:
        """MODE_SELECT/START -> START with the chosen mode."""
        if self.phase not in (PhaseState.MODE_SELECT, PhaseState.START):
            return self._ignored("select_mode")
        self.selected_mode = GameMode.parse(mode)
        self._enter(PhaseState.START)
        return True

    def back_to_mode_select(self) -> bool:
        if self.phase != PhaseState.START:
            return self._ignored("back_to_mode_select")
        self._enter(PhaseState.MODE_SELECT)
        return True

    def start_session(self, session: GameSession) -> bool:
        """START -> PASS for seat 1 with a freshly built session."""
        if self.phase not in (PhaseState.MODE_SELECT, PhaseState.START):
            return self._ignored("start_session")
        self.session = session
        self.selected_mode = session.mode
        self._enter(PhaseState.PASS, seat_index=0)
        if self.event_emitter:
            self.event_emitter.emit_session_started(session.config.to_dict())
        return True

    # ------------------------------------------------------------------
    # Round phases

    def ready(self) -> bool:
        """PASS -> REVEAL. In the timed mode the reveal closes on its own."""
        if self.phase != PhaseState.PASS:
            return self._ignored("ready")
        config = self.session.config
        timer = None
        if isinstance(config, RelampagoConfig):
            timer = (config.reveal_seconds, self._advance_seat, "reveal timer")
        self._enter(PhaseState.REVEAL, seat_index=self.cursor.current_seat_index, timer=timer)
        return True

    def seen(self) -> bool:
        """REVEAL -> PASS for the next seat, or PLAYING after the last one."""
        if self.phase != PhaseState.REVEAL:
            return self._ignored("seen")
        self._advance_seat()
        return True

    def reveal_impostors(self) -> bool:
        """PLAYING -> GAME_END."""
        if self.phase != PhaseState.PLAYING:
            return self._ignored("reveal_impostors")
        self._finish_round()
        return True

    def abort(self) -> bool:
        """Discard the session and go back to mode selection, from any phase."""
        had_session = self.session is not None
        self.session = None
        self.selected_mode = GameMode.CLASSIC
        self._enter(PhaseState.MODE_SELECT)
        if self.event_emitter and had_session:
            self.event_emitter.emit_aborted()
        logger.info("Round aborted")
        return True

    def play_again(self) -> bool:
        """GAME_END -> MODE_SELECT for a new round."""
        if self.phase != PhaseState.GAME_END:
            return self._ignored("play_again")
        return self.abort()

    def tick(self, seconds: int = 1) -> bool:
        """
        Feed elapsed time to the active timer.

        Returns True if the tick caused a phase transition.
        """
        timer = self.timer
        if timer is None:
            return False
        return timer.tick(seconds)

    # ------------------------------------------------------------------
    # Presentation

    @property
    def remaining_seconds(self) -> Optional[int]:
        timer = self.timer
        return timer.remaining_seconds if timer else None

    def snapshot(self) -> Dict[str, Any]:
        """
        State for the presentation layer.

        Only the seat currently in REVEAL sees its private view; roles and
        cards of everyone else stay hidden until GAME_END.
        """
        data: Dict[str, Any] = {
            "phase": self.phase.value,
            "mode": self.selected_mode.value,
            "currentSeatIndex": self.cursor.current_seat_index,
            "currentSeatNumber": None,
            "playersCount": None,
            "elapsedSeconds": self.cursor.elapsed_seconds,
            "remainingSeconds": self.remaining_seconds,
            "clock": format_clock(self.cursor.elapsed_seconds),
            "config": None,
            "reveal": None,
            "result": None,
        }
        if self.session is not None:
            data["config"] = self.session.config.to_dict()
            data["playersCount"] = self.session.players_count
        player = self.current_player
        if player is not None:
            data["currentSeatNumber"] = player.seat_number
        if self.phase == PhaseState.REVEAL and player is not None:
            data["reveal"] = reveal_view(player)
        if self.phase == PhaseState.GAME_END and self.session is not None:
            data["result"] = end_of_round_view(self.session)
        return data

    # ------------------------------------------------------------------
    # Internals

    def _ignored(self, action: str) -> bool:
        logger.debug("Ignoring %s in phase %s", action, self.phase.value)
        return False

    def _advance_seat(self) -> None:
        next_index = self.cursor.current_seat_index + 1
        if next_index < self.session.players_count:
            self._enter(PhaseState.PASS, seat_index=next_index)
            return

        config = self.session.config
        round_seconds = config.round_seconds if isinstance(config, RelampagoConfig) else None
        self._enter(PhaseState.PLAYING, seat_index=self.cursor.current_seat_index,
                    timer=(round_seconds, self._finish_round, "round timer"))

    def _finish_round(self) -> None:
        self._enter(PhaseState.GAME_END, seat_index=self.cursor.current_seat_index)
        if self.event_emitter:
            self.event_emitter.emit_round_end(end_of_round_view(self.session))

    def _enter(self, phase: PhaseState, seat_index: int = 0,
               timer: Optional[TimerSpec] = None) -> None:
        """Switch phase, replacing whatever timer the old phase owned."""
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

        previous = self.cursor.phase
        self.cursor.phase = phase
        self.cursor.current_seat_index = seat_index
        self.cursor.elapsed_seconds = 0
        if timer is not None:
            self._start_timer(*timer)
        logger.debug("Phase %s -> %s (seat index %d)", previous.value, phase.value, seat_index)

        if self.event_emitter:
            self.event_emitter.emit_phase_change(self.snapshot())

    def _start_timer(self, duration_seconds: Optional[int],
                     on_expire: Callable[[], None], name: str) -> None:
        generation = self._generation

        def handle_tick(elapsed: int) -> None:
            if generation != self._generation:
                return
            self.cursor.elapsed_seconds = elapsed
            if self.event_emitter:
                self.event_emitter.emit_timer_tick(self.snapshot())

        def handle_expire() -> None:
            if generation != self._generation:
                return
            logger.info("%s fired in %s", name.capitalize(), self.phase.value)
            on_expire()

        self._timer = CountdownTimer(duration_seconds, on_expire=handle_expire,
                                     on_tick=handle_tick, name=name)
