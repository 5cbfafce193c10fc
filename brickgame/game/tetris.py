"""
Game orchestrator: state machine, movement, locking, scoring and levels.

This module ties the Board, the piece catalog and the scoring policy into a
playable session. It is driven from outside by two kinds of input, both of
which must arrive on the same thread:

  - ``tick()`` pulses from a TickSource (gravity), and
  - player commands (start, move, rotate, soft drop, pause, acknowledge).

The presentation layer reads ``get_state()`` snapshots and subscribes to the
session's EventBus; it never mutates the session.
"""

from __future__ import annotations

import enum
import random
from typing import Any

from brickgame.game.board import Board
from brickgame.game.events import EventBus, EventType, Move
from brickgame.game.pieces import (
    BOARD_HEIGHT,
    BOARD_WIDTH,
    ActivePiece,
    NextPiece,
    PieceGenerator,
    rotate,
    spawn,
)
from brickgame.game.scoring import (
    START_LEVEL,
    START_SPEED_MS,
    level_for_lines,
    score_for_clear,
    speed_for_level,
)
from brickgame.game.ticker import ManualTicker, TickSource


class GameState(enum.Enum):
    MENU = "menu"
    PLAYING = "playing"
    PAUSED = "paused"
    GAME_OVER = "game_over"


class Action(enum.IntEnum):
    """Commands accepted from input handling."""
    START = 0
    LEFT = 1
    RIGHT = 2
    SOFT_DROP = 3
    ROTATE = 4
    PAUSE = 5
    ACKNOWLEDGE = 6
    TICK = 7


SOFT_DROP_MODES = (1, 2)


class TetrisGame:
    """One game session: board, falling piece, lookahead, score and state.

    Attributes:
        board: The game board.
        state: Current GameState.
        score: Current score.
        level: Current level (starts at 1).
        lines_cleared: Total lines cleared since the game started.
        game_speed: Tick interval in milliseconds.
        current_piece: The falling piece, or None outside of play.
        next_piece: Lookahead piece shown in the preview.
        events: EventBus the presentation subscribes to.
        ticker: TickSource controlled by the session.
        soft_drop_steps: Move-down attempts per soft drop (1 or 2).
    """

    def __init__(
        self,
        board_width: int = BOARD_WIDTH,
        board_height: int = BOARD_HEIGHT,
        rng: random.Random | None = None,
        ticker: TickSource | None = None,
        events: EventBus | None = None,
        soft_drop_steps: int = 2,
    ) -> None:
        """Create a session sitting in the menu.

        Args:
            board_width: Board width in columns.
            board_height: Board height in rows.
            rng: Random source for piece selection (seed it for replays).
            ticker: Tick source to start, stop and re-time.
            events: Event bus to publish on.
            soft_drop_steps: 2 tries to move down twice per soft drop,
                1 tries once.

        Raises:
            ValueError: If soft_drop_steps is not 1 or 2.
        """
        if soft_drop_steps not in SOFT_DROP_MODES:
            raise ValueError(
                f"soft_drop_steps must be one of {SOFT_DROP_MODES}, got {soft_drop_steps!r}"
            )
        self.board = Board(board_width, board_height)
        self.generator = PieceGenerator(rng)
        self.ticker = ticker if ticker is not None else ManualTicker(START_SPEED_MS)
        self.events = events if events is not None else EventBus()
        self.soft_drop_steps = soft_drop_steps

        self.state = GameState.MENU
        self.score: int = 0
        self.level: int = START_LEVEL
        self.lines_cleared: int = 0
        self.game_speed: int = START_SPEED_MS
        self.current_piece: ActivePiece | None = None
        self.next_piece: NextPiece | None = None

    # ── State machine ────────────────────────────────────────────────────

    @property
    def is_active(self) -> bool:
        """True while a game is in progress, paused or not."""
        return self.state in (GameState.PLAYING, GameState.PAUSED)

    def start(self) -> bool:
        """Start a fresh game from the menu.

        Resets the board and counters, fills the lookahead, spawns the first
        piece and starts the tick source.

        Returns:
            True if a game was started, False if not in the menu.
        """
        if self.state != GameState.MENU:
            return False

        self.board.reset()
        self.score = 0
        self.lines_cleared = 0
        self.level = START_LEVEL
        self.game_speed = START_SPEED_MS
        self.current_piece = None
        self.next_piece = self.generator.next()

        self.state = GameState.PLAYING
        self.ticker.set_interval(self.game_speed)
        self.ticker.start()
        self.events.emit(EventType.GAME_STARTED)
        self._spawn_piece()
        return True

    def toggle_pause(self) -> bool:
        """Pause or resume the game.

        Returns:
            True if the state changed.
        """
        if self.state == GameState.PLAYING:
            self.state = GameState.PAUSED
            self.ticker.stop()
            return True
        if self.state == GameState.PAUSED:
            self.state = GameState.PLAYING
            self.ticker.start()
            return True
        return False

    def acknowledge_game_over(self) -> bool:
        """Return to the menu after a game over.

        The board and score are left as they were; they are reset by the
        next ``start()``.
        """
        if self.state != GameState.GAME_OVER:
            return False
        self.state = GameState.MENU
        return True

    # ── Commands ─────────────────────────────────────────────────────────

    def step(self, action: int) -> dict[str, Any]:
        """Apply one command and return the resulting state snapshot.

        Args:
            action: An Action enum value.

        Returns:
            State dict from get_state().
        """
        if action == Action.START:
            self.start()
        elif action == Action.LEFT:
            self.move_left()
        elif action == Action.RIGHT:
            self.move_right()
        elif action == Action.SOFT_DROP:
            self.soft_drop()
        elif action == Action.ROTATE:
            self.rotate()
        elif action == Action.PAUSE:
            self.toggle_pause()
        elif action == Action.ACKNOWLEDGE:
            self.acknowledge_game_over()
        elif action == Action.TICK:
            self.tick()
        return self.get_state()

    def tick(self) -> None:
        """Gravity pulse: move the piece down one row, locking it if it can't."""
        if self.state != GameState.PLAYING:
            return
        if not self.move_down():
            self._lock_piece()

    def move_left(self) -> bool:
        return self._move(-1, 0, Move.LEFT)

    def move_right(self) -> bool:
        return self._move(1, 0, Move.RIGHT)

    def move_down(self) -> bool:
        """Try to move the piece one row down.

        Returns:
            True if the piece moved, False if it has landed.
        """
        return self._move(0, 1, Move.DOWN)

    def soft_drop(self) -> bool:
        """Player-requested accelerated drop.

        In the two-step mode the piece tries to move down twice. If the first
        attempt fails the piece locks at once; if only the second fails the
        piece has moved one row and stays live. In the one-step mode a single
        failed attempt locks the piece.

        Returns:
            True if the piece moved at least one row.
        """
        if self.state != GameState.PLAYING:
            return False
        if not self.move_down():
            self._lock_piece()
            return False
        if self.soft_drop_steps == 2:
            self.move_down()
        return True

    def rotate(self) -> bool:
        """Rotate the piece clockwise in place.

        No wall kicks: if the rotated shape collides at the current position
        the rotation is rejected and the piece is left untouched.

        Returns:
            True if the rotation was applied.
        """
        if self.state != GameState.PLAYING or self.current_piece is None:
            return False
        piece = self.current_piece
        rotated = rotate(piece.shape)
        if self.board.collision(rotated, piece.x, piece.y):
            return False
        piece.shape = rotated
        self.events.emit(EventType.PIECE_MOVED, Move.ROTATE)
        return True

    # ── Snapshot ─────────────────────────────────────────────────────────

    def get_state(self) -> dict[str, Any]:
        """Return a dict describing the full observable game state.

        Returns:
            Dict with keys:
              - board_grid: np.ndarray copy (height x width, int8)
              - current_shape: shape matrix or None
              - current_x: int or None
              - current_y: int or None
              - current_color: int or None
              - next_shape: shape matrix or None
              - next_color: int or None
              - score: int
              - level: int
              - lines_cleared: int
              - game_speed: int (ms)
              - state: GameState
              - paused: bool
        """
        piece = self.current_piece
        nxt = self.next_piece
        return {
            "board_grid": self.board.get_grid(),
            "current_shape": piece.shape if piece else None,
            "current_x": piece.x if piece else None,
            "current_y": piece.y if piece else None,
            "current_color": piece.color if piece else None,
            "next_shape": nxt.shape if nxt else None,
            "next_color": nxt.color if nxt else None,
            "score": self.score,
            "level": self.level,
            "lines_cleared": self.lines_cleared,
            "game_speed": self.game_speed,
            "state": self.state,
            "paused": self.state == GameState.PAUSED,
        }

    # ── Internals ────────────────────────────────────────────────────────

    def _move(self, dx: int, dy: int, kind: Move) -> bool:
        """Try to shift the current piece by (dx, dy).

        Returns:
            True if the move succeeded, False if blocked.
        """
        if self.state != GameState.PLAYING or self.current_piece is None:
            return False
        piece = self.current_piece
        if self.board.collision(piece.shape, piece.x + dx, piece.y + dy):
            return False
        piece.x += dx
        piece.y += dy
        self.events.emit(EventType.PIECE_MOVED, kind)
        return True

    def _spawn_piece(self) -> bool:
        """Promote the lookahead piece to the board and draw a new lookahead.

        Returns:
            True if the piece fits, False if it collides (game over).
        """
        self.current_piece = spawn(self.next_piece, self.board.width)
        self.next_piece = self.generator.next()
        self.events.emit(EventType.PIECE_SPAWNED)

        piece = self.current_piece
        if self.board.collision(piece.shape, piece.x, piece.y):
            self._game_over()
            return False
        return True

    def _lock_piece(self) -> int:
        """Merge the piece into the grid, clear rows, score, and spawn the next one.

        Returns:
            Number of lines cleared by this lock.
        """
        piece = self.current_piece
        if piece is None:
            return 0
        self.board.merge(piece.shape, piece.x, piece.y, piece.color)
        self.current_piece = None

        lines = self.board.clear_full_lines()
        if lines > 0:
            self._apply_clear(lines)
        self._spawn_piece()
        return lines

    def _apply_clear(self, lines: int) -> None:
        """Update score, totals, level and speed after ``lines`` rows cleared."""
        self.score += score_for_clear(lines, self.level)
        self.lines_cleared += lines
        self.events.emit(EventType.LINES_CLEARED, lines)

        new_level = level_for_lines(self.lines_cleared)
        if new_level > self.level:
            self.level = new_level
            self.game_speed = speed_for_level(new_level)
            self.ticker.set_interval(self.game_speed)
            self.events.emit(EventType.LEVEL_UP, new_level)

    def _game_over(self) -> None:
        self.ticker.stop()
        self.current_piece = None
        self.state = GameState.GAME_OVER
        self.events.emit(EventType.GAME_OVER)
