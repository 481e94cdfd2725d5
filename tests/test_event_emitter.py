"""
Tests for the event emitter.
"""

from impostor.web import EventEmitter

from .conftest import RecordingListener


def test_broken_listener_does_not_stop_others(caplog):
    """A listener that raises is logged and the rest still get the event."""
    emitter = EventEmitter()

    def broken(event_type, data):
        raise RuntimeError("boom")

    listener = RecordingListener()
    emitter.register_listener(broken)
    emitter.register_listener(listener)

    emitter.emit_round_end({"impostorSeats": [2]})

    assert listener.events == [("round_end", {"impostorSeats": [2]})]
    assert "round_end" in caplog.text


def test_unregistered_listener_gets_nothing():
    emitter = EventEmitter()
    listener = RecordingListener()
    emitter.register_listener(listener)
    emitter.emit_aborted()
    emitter.unregister_listener(listener)
    emitter.unregister_listener(listener)
    emitter.emit_aborted()

    assert listener.types == ["aborted"]
