"""
Notifications raised by the game for the presentation layer.

Listeners receive immutable ``GameEvent`` records. They are called
synchronously, in subscription order, and must only read game state.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Callable


class EventType(enum.Enum):
    GAME_STARTED = "game_started"
    PIECE_SPAWNED = "piece_spawned"
    PIECE_MOVED = "piece_moved"
    LINES_CLEARED = "lines_cleared"
    LEVEL_UP = "level_up"
    GAME_OVER = "game_over"


class Move(enum.Enum):
    """Payload of PIECE_MOVED: which way the piece went."""
    LEFT = "left"
    RIGHT = "right"
    DOWN = "down"
    ROTATE = "rotate"


@dataclass(frozen=True)
class GameEvent:
    """A single notification.

    Attributes:
        type: What happened.
        value: Event payload: a ``Move`` for PIECE_MOVED, the row count for
            LINES_CLEARED, the new level for LEVEL_UP, otherwise None.
    """

    type: EventType
    value: object = None


Listener = Callable[[GameEvent], None]


class EventBus:
    """Fan-out of game events to subscribed listeners."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []

    def subscribe(self, listener: Listener) -> None:
        if listener not in self._listeners:
            self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def emit(self, event_type: EventType, value: object = None) -> GameEvent:
        event = GameEvent(event_type, value)
        # Copy so a listener may unsubscribe itself while being notified
        for listener in list(self._listeners):
            listener(event)
        return event


class EventRecorder:
    """Listener that keeps every event it receives, in order."""

    def __init__(self) -> None:
        self.events: list[GameEvent] = []

    def __call__(self, event: GameEvent) -> None:
        self.events.append(event)

    def of_type(self, event_type: EventType) -> list[GameEvent]:
        return [e for e in self.events if e.type == event_type]

    def clear(self) -> None:
        self.events.clear()
