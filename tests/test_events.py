import dataclasses

import pytest

from brickgame.game.events import EventBus, EventRecorder, EventType, GameEvent, Move


def test_listeners_called_in_subscription_order():
    bus = EventBus()
    calls = []
    bus.subscribe(lambda e: calls.append(("a", e.type)))
    bus.subscribe(lambda e: calls.append(("b", e.type)))
    bus.emit(EventType.GAME_STARTED)
    assert calls == [("a", EventType.GAME_STARTED), ("b", EventType.GAME_STARTED)]


def test_subscribe_twice_delivers_once():
    bus = EventBus()
    recorder = EventRecorder()
    bus.subscribe(recorder)
    bus.subscribe(recorder)
    bus.emit(EventType.LEVEL_UP, 2)
    assert recorder.events == [GameEvent(EventType.LEVEL_UP, 2)]


def test_unsubscribe_stops_delivery():
    bus = EventBus()
    recorder = EventRecorder()
    bus.subscribe(recorder)
    bus.unsubscribe(recorder)
    bus.unsubscribe(recorder)
    bus.emit(EventType.GAME_OVER)
    assert recorder.events == []


def test_listener_may_unsubscribe_itself():
    bus = EventBus()
    seen = []

    def once(event):
        seen.append(event)
        bus.unsubscribe(once)

    later = EventRecorder()
    bus.subscribe(once)
    bus.subscribe(later)
    bus.emit(EventType.PIECE_SPAWNED)
    bus.emit(EventType.PIECE_SPAWNED)
    assert len(seen) == 1
    assert len(later.events) == 2


def test_events_are_immutable():
    event = GameEvent(EventType.PIECE_MOVED, Move.LEFT)
    with pytest.raises(dataclasses.FrozenInstanceError):
        event.value = Move.RIGHT


def test_recorder_filters_by_type():
    recorder = EventRecorder()
    recorder(GameEvent(EventType.LINES_CLEARED, 2))
    recorder(GameEvent(EventType.LEVEL_UP, 2))
    recorder(GameEvent(EventType.LINES_CLEARED, 1))
    assert [e.value for e in recorder.of_type(EventType.LINES_CLEARED)] == [2, 1]
    recorder.clear()
    assert recorder.events == []
