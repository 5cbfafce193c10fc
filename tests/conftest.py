from __future__ import annotations

import random

import pytest

from brickgame.game.events import EventRecorder
from brickgame.game.pieces import SHAPES, ActivePiece, rotate
from brickgame.game.tetris import TetrisGame
from brickgame.game.ticker import ManualTicker


@pytest.fixture
def recorder() -> EventRecorder:
    return EventRecorder()


@pytest.fixture
def game(recorder: EventRecorder) -> TetrisGame:
    g = TetrisGame(rng=random.Random(1234), ticker=ManualTicker())
    g.events.subscribe(recorder)
    return g


@pytest.fixture
def playing(game: TetrisGame, recorder: EventRecorder) -> TetrisGame:
    """A started game with the start-up events already discarded."""
    game.start()
    recorder.clear()
    return game


def _place(game: TetrisGame, name: str, x: int, y: int, color: int = 1, turns: int = 0) -> ActivePiece:
    """Replace the falling piece with a known one."""
    shape = SHAPES[name]
    for _ in range(turns):
        shape = rotate(shape)
    game.current_piece = ActivePiece(shape=shape, x=x, y=y, color=color, name=name)
    return game.current_piece


@pytest.fixture
def place():
    return _place
