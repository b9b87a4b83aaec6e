"""
Event records emitted by a game session.

Each command produces zero or more events that a presentation layer
maps onto one-shot cues (sounds, flashes).
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Optional, Tuple


class EventType(Enum):
    """Discrete transitions a session reports."""

    CELL_REVEALED = auto()
    MINE_EXPLODED = auto()
    FLAG_TOGGLED = auto()
    GAME_LOST = auto()
    GAME_WON = auto()


@dataclass(frozen=True)
class GameEvent:
    """
    A single transition produced by a command.

    Attributes:
        type: Kind of transition.
        position: (row, col) the event refers to, None for game-level events.
        flagged: New flag value, set only for FLAG_TOGGLED.
    """

    type: EventType
    position: Optional[Tuple[int, int]] = None
    flagged: Optional[bool] = None

    @property
    def name(self) -> str:
        return self.type.name
