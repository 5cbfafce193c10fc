"""
Prioritized sound effects for the game.

Sounds are split into three priorities. While a sound is playing the board
is "busy" until its nominal duration has passed, and new requests are
filtered against it:

  - if nothing is playing, any sound plays,
  - HIGH always plays (start jingle, game over),
  - MEDIUM plays over a LOW sound, or when the current MEDIUM sound has at
    most half a line-clear left,
  - LOW (piece movement) is dropped while anything else is playing.

Requests made during one frame are queued and resolved together on the next
``update()``, highest priority first.
"""

from __future__ import annotations

import enum
import heapq
import pathlib
import time
from dataclasses import dataclass
from typing import Callable

try:
    import pygame
except ImportError:
    pygame = None  # type: ignore[assignment]

from brickgame.game.events import EventType, GameEvent, Move


class Priority(enum.IntEnum):
    LOW = 0
    MEDIUM = 1
    HIGH = 2


@dataclass(frozen=True)
class SoundSpec:
    filename: str
    duration_ms: int
    priority: Priority


SOUNDS: dict[str, SoundSpec] = {
    "start": SoundSpec("mr_9999_00.wav", 12000, Priority.HIGH),
    "move": SoundSpec("mr_9999_14.wav", 500, Priority.LOW),
    "level_up": SoundSpec("mr_9999_02.wav", 2000, Priority.MEDIUM),
    "line_clear": SoundSpec("mr_9999_15.wav", 600, Priority.MEDIUM),
    "game_over": SoundSpec("mr_9999_04.wav", 2000, Priority.HIGH),
}

# A MEDIUM sound may cut in once the active one has this much left or less
MEDIUM_CUT_IN_MS = SOUNDS["line_clear"].duration_ms // 2


def monotonic_ms() -> int:
    return int(time.monotonic() * 1000)


class SoundScheduler:
    """Decides which requested sounds actually play, and when the board is free.

    Attributes:
        busy_until: Timestamp (ms) when the last started sound ends.
        active_priority: Priority of the last started sound, or None.
    """

    def __init__(
        self,
        specs: dict[str, SoundSpec] | None = None,
        clock: Callable[[], int] = monotonic_ms,
    ) -> None:
        self.specs = specs if specs is not None else SOUNDS
        self.clock = clock
        self.busy_until: int = 0
        self.active_priority: Priority | None = None
        self._pending: list[tuple[int, int, int, str]] = []
        self._seq = 0

    def request(self, name: str) -> None:
        """Queue a sound by name for the next pump()."""
        spec = self.specs[name]
        # Highest priority first; among equals the longer cue wins
        heapq.heappush(
            self._pending, (-spec.priority, -spec.duration_ms, self._seq, name)
        )
        self._seq += 1

    def should_play(self, priority: Priority, now: int) -> bool:
        if now >= self.busy_until:
            return True
        if priority == Priority.HIGH:
            return True
        if priority == Priority.MEDIUM:
            if self.active_priority is not None and self.active_priority < Priority.MEDIUM:
                return True
            if self.active_priority == Priority.MEDIUM:
                return self.busy_until - now <= MEDIUM_CUT_IN_MS
        return False

    def pump(self, now: int | None = None) -> list[str]:
        """Resolve all queued requests.

        Returns:
            Names of the sounds to start now, in the order to start them.
        """
        if now is None:
            now = self.clock()
        started = []
        while self._pending:
            _, _, _, name = heapq.heappop(self._pending)
            spec = self.specs[name]
            if not self.should_play(spec.priority, now):
                continue
            self.busy_until = now + spec.duration_ms
            self.active_priority = spec.priority
            started.append(name)
        return started

    def reset(self) -> None:
        self._pending.clear()
        self.busy_until = 0
        self.active_priority = None


class SoundBoard:
    """Plays game sounds through pygame.mixer in response to game events.

    Subscribe an instance to a game's EventBus and call update() once per
    frame. If the mixer or any sound file is unavailable, sound is disabled
    for the rest of the run and the game carries on silently.

    Attributes:
        enabled: Whether sounds are played at all.
        game_active: Movement sounds only play while a game is running.
    """

    def __init__(
        self,
        sound_dir: str | pathlib.Path = "assets",
        enabled: bool = True,
        scheduler: SoundScheduler | None = None,
    ) -> None:
        self.sound_dir = pathlib.Path(sound_dir)
        self.enabled = enabled
        self.scheduler = scheduler if scheduler is not None else SoundScheduler()
        self.game_active = False
        self._clips: dict = {}

    def load(self) -> bool:
        """Initialize the mixer and load every sound file.

        Returns:
            True if sounds are ready to play.
        """
        if not self.enabled:
            return False
        if pygame is None:
            raise ImportError("pygame is required for sound. Install it: pip install pygame")
        try:
            if not pygame.mixer.get_init():
                pygame.mixer.init()
            self._clips = {
                name: pygame.mixer.Sound(str(self.sound_dir / spec.filename))
                for name, spec in self.scheduler.specs.items()
            }
        except (FileNotFoundError, pygame.error):
            print("Audio files not found - sounds disabled")
            self.enabled = False
            self._clips = {}
        return self.enabled

    def play(self, name: str) -> None:
        if self.enabled:
            self.scheduler.request(name)

    def __call__(self, event: GameEvent) -> None:
        """EventBus listener: translate game events into sound requests."""
        if event.type == EventType.GAME_STARTED:
            self.game_active = True
        elif event.type == EventType.PIECE_SPAWNED:
            if self.game_active:
                self.play("move")
        elif event.type == EventType.PIECE_MOVED:
            if self.game_active and event.value == Move.DOWN:
                self.play("move")
        elif event.type == EventType.LINES_CLEARED:
            self.play("line_clear")
        elif event.type == EventType.LEVEL_UP:
            self.play("level_up")
        elif event.type == EventType.GAME_OVER:
            self.game_active = False
            self.play("game_over")

    def update(self, now: int | None = None) -> list[str]:
        """Start whatever the scheduler lets through this frame."""
        started = self.scheduler.pump(now)
        for name in started:
            clip = self._clips.get(name)
            if clip is not None:
                clip.stop()
                clip.play()
        return started

    def close(self) -> None:
        if self._clips and pygame is not None:
            pygame.mixer.stop()
        self._clips = {}
        self.scheduler.reset()
