"""
Cooperative countdown timer driven by explicit ticks.
"""

import logging
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class CountdownTimer:
    """
    Counts elapsed seconds as it is ticked and fires ``on_expire`` once the
    duration is reached.

    A ``None`` duration never expires (stopwatch). Once cancelled or expired
    the timer ignores further ticks.
    """

    def __init__(self, duration_seconds: Optional[int],
                 on_expire: Optional[Callable[[], None]] = None,
                 on_tick: Optional[Callable[[int], None]] = None,
                 name: str = "timer"):
        self.duration_seconds = duration_seconds
        self.on_expire = on_expire
        self.on_tick = on_tick
        self.name = name
        self.elapsed_seconds = 0
        self.cancelled = False
        self.expired = False

    @property
    def active(self) -> bool:
        return not (self.cancelled or self.expired)

    @property
    def remaining_seconds(self) -> Optional[int]:
        if self.duration_seconds is None:
            return None
        return max(0, self.duration_seconds - self.elapsed_seconds)

    def cancel(self) -> None:
        if self.active:
            logger.debug("Cancelled %s at %ss", self.name, self.elapsed_seconds)
        self.cancelled = True

    def tick(self, seconds: int = 1) -> bool:
        """
        Advance the timer.

        Returns True if this tick made the timer expire.
        """
        if not self.active or seconds <= 0:
            return False

        self.elapsed_seconds += seconds
        if self.on_tick:
            self.on_tick(self.elapsed_seconds)

        # on_tick may have cancelled us
        if not self.active:
            return False

        if self.duration_seconds is not None and self.elapsed_seconds >= self.duration_seconds:
            self.expired = True
            logger.debug("%s expired after %ss", self.name, self.elapsed_seconds)
            if self.on_expire:
                self.on_expire()
            return True
        return False
