"""
Record a demo GIF of the game being played by a random policy.

Renders the board to images using PIL (no pygame or display needed), then
saves them as an animated GIF. Time is simulated with a ManualTicker, so a
recording is fully reproducible from its seed.
"""

from __future__ import annotations

import pathlib
import random
from typing import Any

from PIL import Image, ImageDraw, ImageFont

from brickgame.game.events import EventRecorder, EventType
from brickgame.game.pieces import COLORS
from brickgame.game.scoring import START_SPEED_MS
from brickgame.game.tetris import Action, GameState, TetrisGame
from brickgame.game.ticker import ManualTicker

# ---------------------------------------------------------------------------
# Visual settings
# ---------------------------------------------------------------------------
CELL_SIZE = 24
SIDEBAR_WIDTH = 120
MARGIN = 2

BG_COLOR = (220, 220, 220)
BOARD_COLOR = (255, 255, 255)
GRID_LINE_COLOR = (200, 200, 200)
SIDEBAR_BG = (240, 240, 240)
BORDER_COLOR = (0, 0, 0)
TEXT_COLOR = (0, 0, 0)
LABEL_COLOR = (90, 90, 90)

# Random policy: relative weights of the commands issued each frame
POLICY_WEIGHTS: dict[Action | None, int] = {
    None: 6,
    Action.LEFT: 2,
    Action.RIGHT: 2,
    Action.ROTATE: 1,
    Action.SOFT_DROP: 1,
}

FREEZE_FRAMES = 12


def darken(color, amount=60):
    return tuple(max(0, c - amount) for c in color)


def lighten(color, amount=60):
    return tuple(min(255, c + amount) for c in color)


def try_load_font(size):
    """Try to load a TrueType font, fall back to PIL's default."""
    font_paths = [
        "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf",
        "/usr/share/fonts/truetype/liberation/LiberationSans-Bold.ttf",
        "/usr/share/fonts/truetype/freefont/FreeSansBold.ttf",
    ]
    for fp in font_paths:
        try:
            return ImageFont.truetype(fp, size)
        except OSError:
            continue
    return ImageFont.load_default()


def draw_cell(draw, x, y, color, size=CELL_SIZE):
    """Draw a single filled cell with highlight/shadow bevel."""
    draw.rectangle([x, y, x + size - 1, y + size - 1], fill=color)
    highlight = lighten(color)
    draw.line([(x, y), (x + size - 1, y)], fill=highlight, width=1)
    draw.line([(x, y), (x, y + size - 1)], fill=highlight, width=1)
    shadow = darken(color)
    draw.line([(x + size - 1, y), (x + size - 1, y + size - 1)], fill=shadow, width=1)
    draw.line([(x, y + size - 1), (x + size - 1, y + size - 1)], fill=shadow, width=1)


def frame_size(game: TetrisGame, cell_size: int = CELL_SIZE) -> tuple[int, int]:
    """Pixel (width, height) of a frame rendered for ``game``."""
    return (
        game.board.width * cell_size + SIDEBAR_WIDTH,
        game.board.height * cell_size,
    )


def render_frame(game: TetrisGame, cell_size: int = CELL_SIZE, font=None) -> Image.Image:
    """Render the current game state as a PIL Image."""
    font = font if font is not None else try_load_font(12)
    width, height = frame_size(game, cell_size)
    board_w = game.board.width * cell_size
    img = Image.new("RGB", (width, height), BG_COLOR)
    draw = ImageDraw.Draw(img)

    # --- Board ---
    grid = game.board.get_grid()
    for row in range(game.board.height):
        for col in range(game.board.width):
            x = col * cell_size
            y = row * cell_size
            value = int(grid[row, col])
            if value != 0:
                draw_cell(draw, x, y, COLORS[value], cell_size)
            else:
                draw.rectangle(
                    [x, y, x + cell_size - 1, y + cell_size - 1],
                    fill=BOARD_COLOR,
                    outline=GRID_LINE_COLOR,
                )

    piece = game.current_piece
    if piece is not None:
        rows, cols = piece.shape.shape
        for r in range(rows):
            for c in range(cols):
                if piece.shape[r, c] != 0 and piece.y + r >= 0:
                    draw_cell(
                        draw,
                        (piece.x + c) * cell_size,
                        (piece.y + r) * cell_size,
                        COLORS[piece.color],
                        cell_size,
                    )

    draw.rectangle([0, 0, board_w - 1, height - 1], outline=BORDER_COLOR, width=MARGIN)

    # --- Sidebar ---
    sx = board_w
    draw.rectangle([sx, 0, width - 1, height - 1], fill=SIDEBAR_BG)
    draw.line([(sx, 0), (sx, height)], fill=BORDER_COLOR, width=MARGIN)

    cx = sx + 10
    cy = 10
    draw.text((cx, cy), "NEXT", fill=LABEL_COLOR, font=font)
    cy += 18
    nxt = game.next_piece
    preview_cell = cell_size // 2
    if nxt is not None:
        rows, cols = nxt.shape.shape
        for r in range(rows):
            for c in range(cols):
                if nxt.shape[r, c] != 0:
                    draw_cell(
                        draw,
                        cx + c * preview_cell,
                        cy + r * preview_cell,
                        COLORS[nxt.color],
                        preview_cell,
                    )
    cy += preview_cell * 4

    stats = [
        ("SCORE", str(game.score)),
        ("LEVEL", str(game.level)),
        ("SPEED", f"{START_SPEED_MS - game.game_speed}x"),
        ("LINES", str(game.lines_cleared)),
    ]
    for label, value in stats:
        draw.text((cx, cy), label, fill=LABEL_COLOR, font=font)
        cy += 15
        draw.text((cx, cy), value, fill=TEXT_COLOR, font=font)
        cy += 22

    if game.state == GameState.GAME_OVER:
        draw.text((10, height // 2), "GAME OVER", fill=(255, 50, 50), font=font)
    return img


class RandomPolicy:
    """Picks a command (or nothing) per frame with fixed weights."""

    def __init__(self, rng: random.Random, weights: dict | None = None) -> None:
        weights = weights if weights is not None else POLICY_WEIGHTS
        self.rng = rng
        self.actions = list(weights)
        self.weights = list(weights.values())

    def choose(self) -> Action | None:
        return self.rng.choices(self.actions, weights=self.weights, k=1)[0]


def simulate(
    num_frames: int,
    seed: int | None = 0,
    frame_ms: int = 100,
    soft_drop_steps: int = 2,
    cell_size: int = CELL_SIZE,
) -> tuple[list[Image.Image], dict[str, int]]:
    """Play games with the random policy and capture one image per frame.

    A game over adds a short freeze, then the game goes back through the
    menu and restarts until ``num_frames`` frames have been captured.

    Returns:
        (frames, stats) where stats has games, lines and best_score.
    """
    rng = random.Random(seed)
    ticker = ManualTicker()
    game = TetrisGame(rng=rng, ticker=ticker, soft_drop_steps=soft_drop_steps)
    recorder = EventRecorder()
    game.events.subscribe(recorder)
    policy = RandomPolicy(random.Random(rng.random()))
    font = try_load_font(12)

    frames: list[Image.Image] = []
    best_score = 0
    game.start()
    while len(frames) < num_frames:
        action = policy.choose()
        if action is not None:
            game.step(action)
        for _ in range(ticker.advance(frame_ms)):
            game.tick()
        frames.append(render_frame(game, cell_size, font))

        if game.state == GameState.GAME_OVER:
            best_score = max(best_score, game.score)
            frames.extend(frames[-1].copy() for _ in range(FREEZE_FRAMES))
            game.acknowledge_game_over()
            game.start()

    best_score = max(best_score, game.score)
    stats = {
        "games": len(recorder.of_type(EventType.GAME_STARTED)),
        "lines": sum(e.value for e in recorder.of_type(EventType.LINES_CLEARED)),
        "best_score": best_score,
    }
    return frames[:num_frames], stats


def save_gif(frames: list[Image.Image], path: str | pathlib.Path, frame_ms: int = 100) -> pathlib.Path:
    """Quantize frames and write them as a looping GIF.

    Raises:
        ValueError: If there are no frames to save.
    """
    if not frames:
        raise ValueError("No frames to save")
    path = pathlib.Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    quantized = [f.quantize(colors=64, method=Image.Quantize.MEDIANCUT) for f in frames]
    quantized[0].save(
        str(path),
        save_all=True,
        append_images=quantized[1:],
        duration=frame_ms,
        loop=0,
        optimize=True,
    )
    return path


def record_demo(config: dict[str, Any]) -> pathlib.Path:
    """Record a demo GIF using settings from the config dict.

    Args:
        config: Config dict loaded from game.yaml.

    Returns:
        Path of the written GIF.
    """
    output = config.get("record_output", "assets/demo.gif")
    num_frames = config.get("record_frames", 300)
    frame_ms = config.get("record_frame_ms", 100)
    seed = config.get("seed")

    print("Recording demo GIF...")
    print(f"  Output: {output}")
    print(f"  Frames: {num_frames} @ {frame_ms} ms")
    print(f"  Seed: {seed}")

    frames, stats = simulate(
        num_frames,
        seed=seed,
        frame_ms=frame_ms,
        soft_drop_steps=config.get("soft_drop_steps", 2),
        cell_size=config.get("cell_size", CELL_SIZE),
    )
    print(
        f"Recording complete: {len(frames)} frames across {stats['games']} games"
        f" | Lines: {stats['lines']} | Best score: {stats['best_score']}"
    )

    path = save_gif(frames, output, frame_ms)
    file_size_kb = path.stat().st_size / 1024
    print(f"GIF saved: {path} ({file_size_kb:.1f} KB)")
    return path
