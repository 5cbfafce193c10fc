"""
Pygame renderer for the Brick Game.

Draws the board grid with beveled blocks, the falling piece, a sidebar with
the next piece preview, score / level / speed / lines and control help, and
the menu, pause and game-over overlays. While the intro runs it draws the
intro animation instead of the board.
"""

from __future__ import annotations

try:
    import pygame
except ImportError:
    pygame = None  # type: ignore[assignment]

from brickgame.game.pieces import COLORS, COLOR_ORANGE
from brickgame.game.scoring import START_SPEED_MS
from brickgame.game.tetris import GameState, TetrisGame
from brickgame.intro import IntroAnimation


# ── Color constants ───────────────────────────────────────────────────────
BACKGROUND_COLOR = (220, 220, 220)
BOARD_COLOR = (255, 255, 255)
GRID_LINE_COLOR = (200, 200, 200)
BORDER_COLOR = (0, 0, 0)
SIDEBAR_BG_COLOR = (240, 240, 240)
TEXT_COLOR = (0, 0, 0)
OVERLAY_TEXT_COLOR = (255, 255, 255)
OVERLAY_ALPHA = 150

MARGIN = 10

CONTROLS_HELP = [
    "← → : Move",
    "↑ : Rotate",
    "↓ : Drop",
    "P : Pause",
]


def brighter(color: tuple[int, int, int], amount: int = 60) -> tuple[int, int, int]:
    return tuple(min(255, c + amount) for c in color)


def darker(color: tuple[int, int, int], amount: int = 60) -> tuple[int, int, int]:
    return tuple(max(0, c - amount) for c in color)


class TetrisRenderer:
    """Pygame-based renderer for a TetrisGame.

    The window is divided into:
      - Left: the board, (cell_size * width) x (cell_size * height)
      - Right: sidebar with title, next piece, stats and control help

    Attributes:
        game: Reference to the TetrisGame being rendered.
        intro: Intro animation drawn instead of the board while it runs.
        cell_size: Pixel size of each grid cell.
        board_pixel_width: Pixel width of the board area.
        board_pixel_height: Pixel height of the board area.
        sidebar_width: Pixel width of the sidebar.
        window_width: Total window width.
        window_height: Total window height.
        screen: Pygame display surface (created on first render).
    """

    SIDEBAR_WIDTH_CELLS: int = 4

    def __init__(
        self,
        game: TetrisGame,
        intro: IntroAnimation | None = None,
        cell_size: int = 25,
    ) -> None:
        """Initialize the renderer.

        Does NOT create the Pygame window yet; that happens on the first
        call to render().

        Args:
            game: The TetrisGame instance to render.
            intro: Optional intro animation.
            cell_size: Size of each grid cell in pixels.
        """
        if pygame is None:
            raise ImportError("pygame is required for rendering. Install it: pip install pygame")

        self.game = game
        self.intro = intro
        self.cell_size = cell_size

        self.board_pixel_width = cell_size * game.board.width
        self.board_pixel_height = cell_size * game.board.height
        self.sidebar_x = MARGIN * 2 + self.board_pixel_width
        self.sidebar_width = cell_size * self.SIDEBAR_WIDTH_CELLS
        self.window_width = self.sidebar_x + self.sidebar_width + MARGIN
        self.window_height = self.board_pixel_height + MARGIN * 2

        self.screen: pygame.Surface | None = None
        self._clock: pygame.time.Clock | None = None
        self._initialized: bool = False

    def render(self, fps: int = 60, now: int = 0) -> None:
        """Draw the current frame and flip the display.

        Args:
            fps: Target frames per second for the display clock.
            now: Current time in ms, used to place the intro animation.
        """
        if not self._initialized:
            self._init_pygame()

        self.screen.fill(BACKGROUND_COLOR)
        if self.intro is not None and self.intro.running:
            self._draw_intro(now)
        else:
            self._draw_board()
            self._draw_current_piece()
            self._draw_sidebar()
            self._draw_overlay()

        pygame.display.flip()
        self._clock.tick(fps)

    def _init_pygame(self) -> None:
        """Initialize Pygame display, clock, and fonts."""
        pygame.init()
        self.screen = pygame.display.set_mode((self.window_width, self.window_height))
        pygame.display.set_caption("BRICK GAME 9999-in-1 - TETRIS")
        self._clock = pygame.time.Clock()
        self._fonts = {
            "title": pygame.font.SysFont("arial", 24, bold=True),
            "subtitle": pygame.font.SysFont("arial", 16, bold=True),
            "big": pygame.font.SysFont("arial", 36, bold=True),
            "label": pygame.font.SysFont("arial", 13, bold=True),
            "body": pygame.font.SysFont("arial", 14),
            "small": pygame.font.SysFont("arial", 10),
        }
        self._initialized = True

    # ── Board ────────────────────────────────────────────────────────────

    def _cell_rect(self, col: int, row: int) -> tuple[int, int, int, int]:
        return (
            MARGIN + col * self.cell_size,
            MARGIN + row * self.cell_size,
            self.cell_size,
            self.cell_size,
        )

    def _draw_board(self) -> None:
        """Draw the board frame, grid lines and locked blocks."""
        pygame.draw.rect(
            self.screen,
            BORDER_COLOR,
            (MARGIN // 2, MARGIN // 2, self.board_pixel_width + MARGIN, self.board_pixel_height + MARGIN),
            1,
        )
        pygame.draw.rect(
            self.screen,
            BOARD_COLOR,
            (MARGIN, MARGIN, self.board_pixel_width, self.board_pixel_height),
        )

        for col in range(self.game.board.width + 1):
            x = MARGIN + col * self.cell_size
            pygame.draw.line(
                self.screen, GRID_LINE_COLOR, (x, MARGIN), (x, MARGIN + self.board_pixel_height)
            )
        for row in range(self.game.board.height + 1):
            y = MARGIN + row * self.cell_size
            pygame.draw.line(
                self.screen, GRID_LINE_COLOR, (MARGIN, y), (MARGIN + self.board_pixel_width, y)
            )

        grid = self.game.board.grid
        for row in range(self.game.board.height):
            for col in range(self.game.board.width):
                cell_value = int(grid[row, col])
                if cell_value != 0:
                    self._draw_block(self._cell_rect(col, row), COLORS[cell_value])

    def _draw_current_piece(self) -> None:
        """Draw the falling piece while a game is in progress."""
        piece = self.game.current_piece
        if piece is None or not self.game.is_active:
            return
        rows, cols = piece.shape.shape
        for r in range(rows):
            for c in range(cols):
                if piece.shape[r, c] != 0 and piece.y + r >= 0:
                    self._draw_block(self._cell_rect(piece.x + c, piece.y + r), COLORS[piece.color])

    def _draw_block(
        self,
        rect: tuple[int, int, int, int],
        color: tuple[int, int, int],
        target: pygame.Surface | None = None,
    ) -> None:
        """Fill a cell and give it a highlight/shadow bevel."""
        target = target if target is not None else self.screen
        x, y, w, h = rect
        pygame.draw.rect(target, color, rect)
        light = brighter(color)
        shade = darker(color)
        pygame.draw.line(target, light, (x, y), (x + w - 1, y))
        pygame.draw.line(target, light, (x, y), (x, y + h - 1))
        pygame.draw.line(target, shade, (x + w - 1, y), (x + w - 1, y + h - 1))
        pygame.draw.line(target, shade, (x, y + h - 1), (x + w - 1, y + h - 1))

    # ── Sidebar ──────────────────────────────────────────────────────────

    def _draw_sidebar(self) -> None:
        """Draw title, next piece, score, level, speed, lines and controls."""
        sidebar_rect = (self.sidebar_x, MARGIN, self.sidebar_width, self.board_pixel_height)
        pygame.draw.rect(self.screen, SIDEBAR_BG_COLOR, sidebar_rect)
        pygame.draw.rect(self.screen, BORDER_COLOR, sidebar_rect, 1)

        x = self.sidebar_x + MARGIN
        y = MARGIN * 2
        y = self._draw_text("BRICK GAME", x, y, "label")
        y = self._draw_text("9999-in-1", x + 5, y, "label") + MARGIN

        y = self._draw_text("NEXT:", x, y, "label")
        y = self._draw_next_preview(x, y) + MARGIN

        speed = START_SPEED_MS - self.game.game_speed
        for label, value in (
            ("SCORE:", str(self.game.score)),
            ("LEVEL:", str(self.game.level)),
            ("SPEED:", f"{speed}x"),
            ("LINES:", str(self.game.lines_cleared)),
        ):
            y = self._draw_text(label, x, y, "label")
            y = self._draw_text(value, x, y, "label") + MARGIN

        y = self._draw_text("CONTROLS:", x, y + MARGIN, "small")
        for line in CONTROLS_HELP:
            y = self._draw_text(line, x, y + 4, "small")

    def _draw_next_preview(self, x: int, y: int) -> int:
        """Draw the lookahead piece at half cell size; return the y below it."""
        nxt = self.game.next_piece
        preview_cell = self.cell_size // 2
        box_height = preview_cell * 4
        if nxt is None:
            return y + box_height
        rows, cols = nxt.shape.shape
        offset_x = x + (self.sidebar_width - MARGIN * 2 - cols * preview_cell) // 2
        for r in range(rows):
            for c in range(cols):
                if nxt.shape[r, c] != 0:
                    rect = (offset_x + c * preview_cell, y + r * preview_cell, preview_cell, preview_cell)
                    self._draw_block(rect, COLORS[nxt.color])
        return y + box_height

    def _draw_text(
        self,
        text: str,
        x: int,
        y: int,
        font: str = "body",
        color: tuple[int, int, int] = TEXT_COLOR,
    ) -> int:
        """Render text at (x, y) and return the y just below it."""
        surface = self._fonts[font].render(text, True, color)
        self.screen.blit(surface, (x, y))
        return y + surface.get_height()

    def _draw_centered(
        self,
        text: str,
        y: int,
        font: str,
        color: tuple[int, int, int] = OVERLAY_TEXT_COLOR,
        alpha: float = 1.0,
    ) -> None:
        surface = self._fonts[font].render(text, True, color)
        if alpha < 1.0:
            surface.set_alpha(int(alpha * 255))
        cx = MARGIN + self.board_pixel_width // 2
        self.screen.blit(surface, (cx - surface.get_width() // 2, y))

    # ── Overlays ─────────────────────────────────────────────────────────

    def _draw_overlay(self) -> None:
        """Dim the board and print the menu, pause or game-over text."""
        state = self.game.state
        if state == GameState.PLAYING:
            return

        overlay = pygame.Surface(
            (self.board_pixel_width, self.board_pixel_height), pygame.SRCALPHA
        )
        overlay.fill((0, 0, 0, OVERLAY_ALPHA))
        self.screen.blit(overlay, (MARGIN, MARGIN))

        unit = self.board_pixel_height // 20
        if state == GameState.MENU:
            self._draw_centered("BRICK GAME", unit * 4, "title")
            self._draw_centered("9999-in-1", unit * 5, "subtitle")
            self._draw_centered("TETRIS", unit * 7, "subtitle")
            self._draw_centered("Press ENTER to start", unit * 10, "body")
        elif state == GameState.PAUSED:
            self._draw_centered("PAUSED", unit * 8, "title")
            self._draw_centered("Press P to resume", unit * 10, "body")
        elif state == GameState.GAME_OVER:
            self._draw_centered("GAME OVER", unit * 6, "title")
            self._draw_centered(f"Score: {self.game.score}", unit * 8, "body")
            self._draw_centered("Press ENTER for menu", unit * 10, "body")

    # ── Intro ────────────────────────────────────────────────────────────

    def _draw_intro(self, now: int) -> None:
        """Draw one frame of the intro animation."""
        intro = self.intro
        for col, row, color_id, angle in intro.blocks(now):
            block = pygame.Surface((self.cell_size, self.cell_size), pygame.SRCALPHA)
            self._draw_block((0, 0, self.cell_size, self.cell_size), COLORS[color_id], block)
            self._blit_rotated(block, angle, self._cell_center(col, row))

        size = intro.center_size(now)
        if size > 0:
            side = size * self.cell_size
            center = pygame.Surface((side, side), pygame.SRCALPHA)
            center.fill(COLOR_ORANGE)
            board_center = (
                MARGIN + self.board_pixel_width // 2,
                MARGIN + self.board_pixel_height // 2,
            )
            self._blit_rotated(center, intro.rotation_angle(now), board_center)

        title_alpha = intro.title_alpha(now)
        if title_alpha > 0:
            self._draw_centered("BRICK GAME", self.board_pixel_height // 3, "title", alpha=title_alpha)
        subtitle_alpha = intro.subtitle_alpha(now)
        if subtitle_alpha > 0:
            self._draw_centered("TETRIS", self.board_pixel_height * 2 // 3, "big", alpha=subtitle_alpha)

    def _cell_center(self, col: int, row: int) -> tuple[int, int]:
        x, y, w, h = self._cell_rect(col, row)
        return x + w // 2, y + h // 2

    def _blit_rotated(self, surface: pygame.Surface, angle: int, center: tuple[int, int]) -> None:
        # pygame rotates counter-clockwise for positive angles
        rotated = pygame.transform.rotate(surface, -angle)
        self.screen.blit(rotated, rotated.get_rect(center=center))

    def close(self) -> None:
        """Shut down Pygame and close the window."""
        if self._initialized:
            pygame.quit()
            self._initialized = False
