"""
Tests for the cooperative countdown timer.
"""

from impostor.phases import CountdownTimer


def test_countdown_fires_once():
    fired = []
    timer = CountdownTimer(3, on_expire=lambda: fired.append(True))

    assert not timer.tick()
    assert not timer.tick()
    assert timer.remaining_seconds == 1
    assert timer.tick()
    assert fired == [True]

    # Expired timers ignore further ticks
    assert not timer.tick()
    assert fired == [True]
    assert timer.elapsed_seconds == 3


def test_cancelled_timer_never_fires():
    fired = []
    timer = CountdownTimer(2, on_expire=lambda: fired.append(True))
    timer.tick()
    timer.cancel()

    assert not timer.tick(10)
    assert fired == []
    assert not timer.active


def test_stopwatch_counts_without_expiring():
    ticks = []
    timer = CountdownTimer(None, on_tick=ticks.append)
    for _ in range(5):
        assert not timer.tick()
    assert ticks == [1, 2, 3, 4, 5]
    assert timer.remaining_seconds is None
    assert timer.active


def test_tick_cancelled_from_on_tick_does_not_expire():
    fired = []
    timer = CountdownTimer(1, on_expire=lambda: fired.append(True))
    timer.on_tick = lambda elapsed: timer.cancel()
    assert not timer.tick()
    assert fired == []


def test_zero_tick_is_ignored():
    timer = CountdownTimer(1)
    assert not timer.tick(0)
    assert timer.elapsed_seconds == 0
