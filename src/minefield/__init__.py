"""
Minesweeper rules engine.

Provides board state, mine placement, cascading reveal, flagging,
win/loss detection and the event contract around them.
"""
from .cell import Cell, CellState, CellView
from .board import (
    Board,
    BoardConfig,
    GamePhase,
    InvalidConfigError,
    RevealOutcome,
    RevealResult,
    new_game,
    BEGINNER,
    INTERMEDIATE,
    EXPERT,
    PRESETS,
)
from .events import EventType, GameEvent
from .session import GameSession
from .environment import MinesweeperEnv

__all__ = [
    "Cell",
    "CellState",
    "CellView",
    "Board",
    "BoardConfig",
    "GamePhase",
    "InvalidConfigError",
    "RevealOutcome",
    "RevealResult",
    "new_game",
    "BEGINNER",
    "INTERMEDIATE",
    "EXPERT",
    "PRESETS",
    "EventType",
    "GameEvent",
    "GameSession",
    "MinesweeperEnv",
]
