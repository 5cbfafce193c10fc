"""
Tetromino catalog, rotation, spawning and the random piece policy.

Shapes are stored in their spawn orientation as read-only 2D numpy arrays
(1 = filled, 0 = empty) using the smallest bounding box that fits the piece.

Coordinate convention:
  - On the board, row 0 is the top and row increases downward.
  - Column 0 is the left edge and column increases rightward.
  - A piece's (x, y) is the board position of its bounding box's top-left
    corner.
"""

from __future__ import annotations

import random
from dataclasses import dataclass

import numpy as np

BOARD_WIDTH = 10
BOARD_HEIGHT = 20

# =============================================================================
# Block colors: Brick Game palette (RGB), indexed by color id
# =============================================================================

COLOR_EMPTY  = (0, 0, 0)
COLOR_RED    = (255, 50, 50)
COLOR_BLUE   = (50, 50, 255)
COLOR_GREEN  = (50, 200, 50)
COLOR_YELLOW = (255, 255, 50)
COLOR_PURPLE = (180, 50, 180)
COLOR_CYAN   = (50, 200, 200)
COLOR_ORANGE = (255, 150, 50)

COLORS: list[tuple[int, int, int]] = [
    COLOR_EMPTY,
    COLOR_RED,
    COLOR_BLUE,
    COLOR_GREEN,
    COLOR_YELLOW,
    COLOR_PURPLE,
    COLOR_CYAN,
    COLOR_ORANGE,
]

# Color ids 1-7; 0 is reserved for empty cells.
NUM_COLORS = len(COLORS) - 1


def _shape(rows: list[list[int]]) -> np.ndarray:
    """Build a read-only int8 shape matrix."""
    arr = np.array(rows, dtype=np.int8)
    arr.flags.writeable = False
    return arr


# =============================================================================
# Tetromino Definitions
# =============================================================================

I_SHAPE = _shape([
    [1, 1, 1, 1],
])

O_SHAPE = _shape([
    [1, 1],
    [1, 1],
])

T_SHAPE = _shape([
    [1, 1, 1],
    [0, 1, 0],
])

L_SHAPE = _shape([
    [1, 1, 1],
    [1, 0, 0],
])

J_SHAPE = _shape([
    [1, 1, 1],
    [0, 0, 1],
])

Z_SHAPE = _shape([
    [1, 1, 0],
    [0, 1, 1],
])

S_SHAPE = _shape([
    [0, 1, 1],
    [1, 1, 0],
])

SHAPES: dict[str, np.ndarray] = {
    "I": I_SHAPE,
    "O": O_SHAPE,
    "T": T_SHAPE,
    "L": L_SHAPE,
    "J": J_SHAPE,
    "Z": Z_SHAPE,
    "S": S_SHAPE,
}

SHAPE_NAMES: list[str] = list(SHAPES)


@dataclass
class ActivePiece:
    """The falling piece: shape matrix, top-left board position and color.

    Attributes:
        shape: Read-only shape matrix in its current orientation.
        x: Column of the bounding box's left edge.
        y: Row of the bounding box's top edge.
        color: Color id (1-7) written into the grid when the piece locks.
        name: Catalog name of the tetromino (e.g. "T").
    """

    shape: np.ndarray
    x: int
    y: int
    color: int
    name: str = ""

    @property
    def width(self) -> int:
        return int(self.shape.shape[1])

    @property
    def height(self) -> int:
        return int(self.shape.shape[0])


@dataclass(frozen=True)
class NextPiece:
    """Lookahead piece waiting to be spawned."""

    name: str
    shape: np.ndarray
    color: int


def rotate(shape: np.ndarray) -> np.ndarray:
    """Return a new shape rotated 90 degrees clockwise.

    For an R x C shape the result is C x R with
    ``result[x][R - 1 - y] == shape[y][x]``. The input is never modified.

    Args:
        shape: 2D shape matrix.

    Returns:
        A new read-only shape matrix.
    """
    rotated = np.ascontiguousarray(np.rot90(shape, k=-1))
    rotated.flags.writeable = False
    return rotated


def spawn(next_piece: NextPiece, board_width: int = BOARD_WIDTH) -> ActivePiece:
    """Place a lookahead piece at the top-center of the board.

    The piece starts at ``x = board_width // 2 - shape_width // 2`` and
    ``y = 0``. The caller must test for collision right away: a collision
    here means the stack has reached the top.
    """
    shape_width = next_piece.shape.shape[1]
    return ActivePiece(
        shape=next_piece.shape,
        x=board_width // 2 - shape_width // 2,
        y=0,
        color=next_piece.color,
        name=next_piece.name,
    )


class PieceGenerator:
    """Uniform random piece policy.

    Shape and color are independent draws: a shape is picked uniformly from
    the 7 tetrominoes and a color uniformly from ids 1-7.
    """

    def __init__(self, rng: random.Random | None = None) -> None:
        self.rng = rng if rng is not None else random.Random()

    def next(self) -> NextPiece:
        name = SHAPE_NAMES[self.rng.randrange(len(SHAPE_NAMES))]
        color = 1 + self.rng.randrange(NUM_COLORS)
        return NextPiece(name=name, shape=SHAPES[name], color=color)
