"""Game logic: board, pieces, scoring, events, and game orchestrator."""

from brickgame.game.pieces import SHAPES, ActivePiece, NextPiece, PieceGenerator, rotate, spawn
from brickgame.game.board import Board
from brickgame.game.events import EventBus, EventType, GameEvent, Move
from brickgame.game.ticker import ManualTicker, TickSource
from brickgame.game.tetris import TetrisGame, GameState, Action

__all__ = [
    "SHAPES",
    "ActivePiece",
    "NextPiece",
    "PieceGenerator",
    "rotate",
    "spawn",
    "Board",
    "EventBus",
    "EventType",
    "GameEvent",
    "Move",
    "ManualTicker",
    "TickSource",
    "TetrisGame",
    "GameState",
    "Action",
]
