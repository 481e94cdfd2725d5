"""
Event emitter fanning phase updates out to the presentation layer.
"""

import logging
from threading import Lock
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)

Listener = Callable[[str, Dict[str, Any]], None]


class EventEmitter:
    """
    Dispatches round events to registered listeners.

    Payloads come from the phase machine snapshot, so they never carry the
    secrets of seats other than the one currently revealing.
    """

    def __init__(self):
        self._listeners: List[Listener] = []
        self._lock = Lock()

    def register_listener(self, listener: Listener) -> None:
        with self._lock:
            self._listeners.append(listener)

    def unregister_listener(self, listener: Listener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    def _emit(self, event_type: str, data: Dict[str, Any]) -> None:
        """Send an event to every listener."""
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(event_type, data)
            except Exception:
                # Don't let a broken listener break the round
                logger.exception("Listener failed on '%s' event", event_type)

    def emit_session_started(self, config: Dict[str, Any]) -> None:
        """Emit session start event (configuration only, no roles or cards)."""
        self._emit("session_started", {"config": config})

    def emit_phase_change(self, snapshot: Dict[str, Any]) -> None:
        self._emit("phase_change", snapshot)

    def emit_timer_tick(self, snapshot: Dict[str, Any]) -> None:
        self._emit("timer_tick", snapshot)

    def emit_round_end(self, result: Dict[str, Any]) -> None:
        """Emit end of round with impostors and cards revealed."""
        self._emit("round_end", result)

    def emit_aborted(self) -> None:
        self._emit("aborted", {})
