"""
Board logic for a 10x20 Tetris grid.

The board is a 2D numpy array (height x width) of int8 values:
  - 0 = empty cell
  - 1-7 = color id of a locked block

Pieces enter from row 0. While a piece is still entering, cells above the
top edge (row < 0) are allowed and only checked against the side walls.
"""

from __future__ import annotations

import numpy as np

from brickgame.game.pieces import BOARD_HEIGHT, BOARD_WIDTH


class Board:
    """Tetris board with collision detection, merging and line clearing.

    Attributes:
        width: Number of columns (default 10).
        height: Number of rows (default 20).
        grid: 2D numpy array of shape (height, width), dtype int8.
    """

    def __init__(self, width: int = BOARD_WIDTH, height: int = BOARD_HEIGHT) -> None:
        self.width = width
        self.height = height
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)

    def collision(self, shape: np.ndarray, x: int, y: int) -> bool:
        """Check whether a shape placed at (x, y) hits a wall, the floor or a block.

        A filled cell collides if its column is outside [0, width), if its
        row is at or below the floor (row >= height), or if it lands on a
        non-empty grid cell. Cells above the board (row < 0) are exempt from
        the overlap check but not from the side walls.

        Args:
            shape: 2D shape matrix (non-zero = filled).
            x: Column offset of the shape's top-left corner.
            y: Row offset of the shape's top-left corner.

        Returns:
            True if the position is blocked, False if the shape fits.
        """
        rows, cols = shape.shape
        for r in range(rows):
            for c in range(cols):
                if shape[r, c] == 0:
                    continue
                board_row = y + r
                board_col = x + c
                if board_col < 0 or board_col >= self.width or board_row >= self.height:
                    return True
                if board_row >= 0 and self.grid[board_row, board_col] != 0:
                    return True
        return False

    def merge(self, shape: np.ndarray, x: int, y: int, color: int) -> None:
        """Lock a shape onto the board at the given position.

        Writes ``color`` into the grid at each filled cell. Does NOT check
        validity first; the caller must have verified there is no collision.
        Cells above the top edge are discarded.
        """
        rows, cols = shape.shape
        for r in range(rows):
            for c in range(cols):
                if shape[r, c] != 0 and y + r >= 0:
                    self.grid[y + r, x + c] = color

    def is_full_row(self, row: int) -> bool:
        return bool(np.all(self.grid[row] != 0))

    def clear_full_lines(self) -> int:
        """Remove every full row, shifting the rows above it down.

        Rows are scanned from the bottom up. When a row is removed, every row
        above it moves down by one, a fresh empty row is inserted at the top,
        and the same row index is checked again so that stacked full rows
        are all removed in one call.

        Returns:
            The number of rows removed (0-4 in normal play).
        """
        removed = 0
        row = self.height - 1
        while row >= 0:
            if self.is_full_row(row):
                self.grid[1:row + 1] = self.grid[0:row].copy()
                self.grid[0] = 0
                removed += 1
            else:
                row -= 1
        return removed

    def filled_cells(self) -> int:
        """Return the number of non-empty cells on the board."""
        return int(np.count_nonzero(self.grid))

    def get_grid(self) -> np.ndarray:
        """Return a copy of the board grid.

        Returns:
            A numpy array of shape (height, width), dtype int8.
        """
        return self.grid.copy()

    def reset(self) -> None:
        """Clear the entire board, setting all cells to 0."""
        self.grid = np.zeros((self.height, self.width), dtype=np.int8)
