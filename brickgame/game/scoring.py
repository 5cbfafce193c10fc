"""
Score table and level/speed curve.

  1 line  = 100 * level
  2 lines = 300 * level
  3 lines = 500 * level
  4 lines = 800 * level

Level goes up by one every 10 lines, starting at 1. The tick interval starts
at 500 ms, drops 40 ms per level and never goes below 100 ms.
"""

from __future__ import annotations

# Index = lines cleared by a single lock (1-4)
SCORE_TABLE: dict[int, int] = {
    1: 100,
    2: 300,
    3: 500,
    4: 800,
}

LINES_PER_LEVEL = 10
START_LEVEL = 1
START_SPEED_MS = 500
SPEED_STEP_MS = 40
MIN_SPEED_MS = 100


def score_for_clear(lines: int, level: int) -> int:
    """Return the points for clearing ``lines`` rows at ``level``.

    Anything outside 1-4 scores nothing.
    """
    return SCORE_TABLE.get(lines, 0) * level


def level_for_lines(total_lines: int) -> int:
    return START_LEVEL + total_lines // LINES_PER_LEVEL


def speed_for_level(level: int) -> int:
    """Tick interval in milliseconds for ``level``."""
    return max(MIN_SPEED_MS, START_SPEED_MS - level * SPEED_STEP_MS)
