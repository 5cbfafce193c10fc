"""
Interactive play mode.

Wires the keyboard and a pygame timer to the game's command API, forwards
game events to the sound board, runs the intro between the menu and the
first tick, and renders every frame with TetrisRenderer.

Everything that mutates the game happens on the pygame event loop, so timer
ticks and key presses are naturally serialized.
"""

from __future__ import annotations

import random
from typing import Any

try:
    import pygame
except ImportError:
    pygame = None  # type: ignore[assignment]

from brickgame.game.tetris import Action, GameState, TetrisGame
from brickgame.game.ticker import TickSource
from brickgame.intro import IntroAnimation
from brickgame.sound import SoundBoard


# ── Keyboard mapping ─────────────────────────────────────────────────────
# Arrow keys to move and rotate, P to pause. Enter is handled separately
# because its meaning depends on the game state.
KEY_MAP: dict[int, Action] = {}
TICK_EVENT: int = 0
if pygame is not None:
    KEY_MAP = {
        pygame.K_LEFT: Action.LEFT,
        pygame.K_RIGHT: Action.RIGHT,
        pygame.K_DOWN: Action.SOFT_DROP,
        pygame.K_UP: Action.ROTATE,
        pygame.K_p: Action.PAUSE,
    }
    TICK_EVENT = pygame.USEREVENT + 1


class PygameTicker(TickSource):
    """Tick source backed by ``pygame.time.set_timer``.

    While running, a TICK_EVENT is posted every ``interval`` milliseconds.
    Changing the interval re-arms the timer.
    """

    def __init__(self, interval: int = 500, event_type: int | None = None) -> None:
        super().__init__(interval)
        self.event_type = event_type if event_type is not None else TICK_EVENT

    def _apply(self) -> None:
        pygame.time.set_timer(self.event_type, self.interval if self.running else 0)


class BrickGameApp:
    """Glue between the game, the intro and the sound board.

    Attributes:
        game: The game session.
        intro: Intro animation, or None to start games immediately.
        sound: Sound board subscribed to the game's events.
    """

    def __init__(
        self,
        game: TetrisGame,
        intro: IntroAnimation | None = None,
        sound: SoundBoard | None = None,
    ) -> None:
        self.game = game
        self.intro = intro
        self.sound = sound
        if sound is not None:
            game.events.subscribe(sound)

    def press_enter(self, now: int) -> None:
        """Start (menu), or go back to the menu (game over)."""
        state = self.game.state
        if state == GameState.MENU:
            if self.intro is not None and self.intro.running:
                return
            if self.sound is not None:
                self.sound.play("start")
            # The intro only plays over the start jingle
            if self.intro is not None and self.sound is not None and self.sound.enabled:
                self.intro.begin(now)
            else:
                self.game.start()
        elif state == GameState.GAME_OVER:
            self.game.step(Action.ACKNOWLEDGE)

    def press(self, action: Action) -> None:
        """Forward a gameplay key; ignored while the intro is running."""
        if self.intro is not None and self.intro.running:
            return
        self.game.step(action)

    def update(self, now: int) -> None:
        """Per-frame housekeeping: finish the intro and flush sounds."""
        if self.intro is not None and self.intro.finished(now):
            self.intro.cancel()
            self.game.start()
        if self.sound is not None:
            self.sound.update(now)


def play_manual(config: dict[str, Any]) -> None:
    """Run the game in interactive mode.

    Controls:
      - Enter: start from the menu / return to the menu after game over
      - Left/Right arrow: move piece
      - Down arrow: soft drop
      - Up arrow: rotate clockwise
      - P: pause / resume
      - Escape / close window: quit

    Args:
        config: Config dict loaded from game.yaml.
    """
    if pygame is None:
        raise ImportError("pygame is required for play mode. Install it: pip install pygame")

    # Imported here so the renderer's pygame setup only happens in play mode
    from brickgame.renderer import TetrisRenderer

    fps = config.get("fps", 60)
    seed = config.get("seed")

    game = TetrisGame(
        rng=random.Random(seed),
        ticker=PygameTicker(),
        soft_drop_steps=config.get("soft_drop_steps", 2),
    )
    intro = None
    if config.get("intro_enabled", True):
        intro = IntroAnimation(config.get("intro_duration_ms", 12000))

    renderer = TetrisRenderer(game, intro, cell_size=config.get("cell_size", 25))
    # Force renderer init before the event loop (pygame must be initialized)
    renderer.render(fps)

    sound = SoundBoard(
        config.get("sound_dir", "assets"),
        enabled=config.get("sounds_enabled", True),
    )
    sound.load()
    app = BrickGameApp(game, intro, sound)

    running = True
    try:
        while running:
            now = pygame.time.get_ticks()
            for event in pygame.event.get():
                if event.type == pygame.QUIT:
                    running = False
                    break
                elif event.type == TICK_EVENT:
                    game.tick()
                elif event.type == pygame.KEYDOWN:
                    if event.key == pygame.K_ESCAPE:
                        running = False
                        break
                    if event.key in (pygame.K_RETURN, pygame.K_KP_ENTER):
                        app.press_enter(now)
                    elif event.key in KEY_MAP:
                        app.press(KEY_MAP[event.key])

            if not running:
                break

            app.update(now)
            renderer.render(fps, now)
    finally:
        if game.ticker.running:
            game.ticker.stop()
        sound.close()
        renderer.close()
