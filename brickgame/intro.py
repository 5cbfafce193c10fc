"""
Timeline of the start-up animation played between the menu and the game.

The animation is a pure function of elapsed time so it can be drawn by any
renderer and tested without a display:

  - colored blocks appear in an expanding square around the board center,
    each spinning at a speed that grows with its distance from the center,
  - a solid block in the middle grows from nothing to 4x4 cells and rotates,
  - "BRICK GAME" fades in after 30% progress and "TETRIS" after 60%.

The game starts once the full duration (the length of the start jingle) has
elapsed.
"""

from __future__ import annotations

from typing import Iterator

from brickgame.game.pieces import BOARD_HEIGHT, BOARD_WIDTH, NUM_COLORS

INTRO_DURATION_MS = 12000
FRAME_MS = 16
# Each animation step advances progress by this much of the duration
PROGRESS_PER_STEP_MS = 30
ROTATION_MS_PER_DEGREE = 20
CENTER_MAX_CELLS = 4
TITLE_AT = 0.3
SUBTITLE_AT = 0.6
FADE_SPAN = 0.2


class IntroAnimation:
    """Clock-driven intro sequence.

    Attributes:
        duration_ms: Total length of the intro.
        started_at: Timestamp (ms) passed to begin(), or None when idle.
    """

    def __init__(
        self,
        duration_ms: int = INTRO_DURATION_MS,
        board_width: int = BOARD_WIDTH,
        board_height: int = BOARD_HEIGHT,
    ) -> None:
        self.duration_ms = duration_ms
        self.board_width = board_width
        self.board_height = board_height
        self.started_at: int | None = None

    @property
    def running(self) -> bool:
        return self.started_at is not None

    def begin(self, now: int) -> None:
        self.started_at = now

    def cancel(self) -> None:
        self.started_at = None

    def elapsed(self, now: int) -> int:
        if self.started_at is None:
            return 0
        return max(0, now - self.started_at)

    def finished(self, now: int) -> bool:
        return self.running and self.elapsed(now) >= self.duration_ms

    def animation_step(self, now: int) -> int:
        return self.elapsed(now) // FRAME_MS

    def progress(self, now: int) -> float:
        """Visual progress in [0, 1]; reaches 1 well before the intro ends."""
        if self.duration_ms <= 0:
            return 1.0
        return min(1.0, self.animation_step(now) * PROGRESS_PER_STEP_MS / self.duration_ms)

    def rotation_angle(self, now: int) -> int:
        return self.elapsed(now) // ROTATION_MS_PER_DEGREE

    def visible_radius(self, now: int) -> int:
        """Chebyshev distance from the center up to which blocks are shown."""
        max_dist = max(self.board_width, self.board_height) // 2
        return int(self.progress(now) * max_dist)

    def center_size(self, now: int) -> int:
        return int(self.progress(now) * CENTER_MAX_CELLS)

    def title_alpha(self, now: int) -> float:
        return _fade(self.progress(now), TITLE_AT)

    def subtitle_alpha(self, now: int) -> float:
        return _fade(self.progress(now), SUBTITLE_AT)

    def blocks(self, now: int) -> Iterator[tuple[int, int, int, int]]:
        """Yield (col, row, color_id, angle) for every block visible at ``now``."""
        radius = self.visible_radius(now)
        step = self.animation_step(now)
        angle = self.rotation_angle(now)
        cx = self.board_width // 2
        cy = self.board_height // 2
        for row in range(self.board_height):
            for col in range(self.board_width):
                distance = max(abs(col - cx), abs(row - cy))
                if distance > radius:
                    continue
                color = 1 + (col + row + step // 3) % NUM_COLORS
                yield col, row, color, angle * (distance + 1) // 2


def _fade(progress: float, start: float) -> float:
    if progress <= start:
        return 0.0
    return min(1.0, (progress - start) / FADE_SPAN)
