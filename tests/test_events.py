# tests/test_events.py
import json
from unittest.mock import MagicMock

from voiceskill.events.event_interface import ErrorEvent, Event, EventType


def test_event_type_from_string():
    assert EventType.from_string("request.received") == EventType.REQUEST_RECEIVED
    assert EventType.from_string("no.such.event") == EventType.UNKNOWN


def test_event_serialization():
    event = ErrorEvent(EventType.ERROR, data={"intent": "X"}, error={"message": "boom"})

    data = json.loads(event.to_json())

    assert data["type"] == "error"
    assert data["data"] == {"intent": "X"}
    assert data["error"] == {"message": "boom"}


def test_emit_to_specific_and_wildcard_handlers(emitter):
    specific = MagicMock()
    wildcard = MagicMock()
    other = MagicMock()
    emitter.on(EventType.RESPONSE_SENT, specific)
    emitter.on("request.received", other)
    emitter.on_any(wildcard)

    event = Event(EventType.RESPONSE_SENT, {"speech": "Hi"})
    emitter.emit(event)

    specific.assert_called_once_with(event)
    wildcard.assert_called_once_with(event)
    other.assert_not_called()


def test_failing_handler_does_not_stop_others(emitter):
    failing = MagicMock(side_effect=RuntimeError("boom"))
    working = MagicMock()
    emitter.on(EventType.ERROR, failing)
    emitter.on(EventType.ERROR, working)

    emitter.emit(Event(EventType.ERROR))

    failing.assert_called_once()
    working.assert_called_once()


def test_off_removes_handlers(emitter):
    handler = MagicMock()
    wildcard = MagicMock()
    emitter.on(EventType.USER_SAVED, handler)
    emitter.on_any(wildcard)

    emitter.off(EventType.USER_SAVED, handler)
    emitter.off_any(wildcard)
    emitter.emit(Event(EventType.USER_SAVED))

    handler.assert_not_called()
    wildcard.assert_not_called()

    # Removing an unknown handler only logs a warning
    emitter.off(EventType.USER_SAVED, handler)
    emitter.off_any(wildcard)
