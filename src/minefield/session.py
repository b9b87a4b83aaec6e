"""
Game session module.

Wraps a Board, mediates player commands and translates board outcomes
into the discrete events a presentation layer turns into cues.
"""
import logging
import random
import threading
from typing import Callable, Iterable, List, Optional

from .board import (
    Board,
    BoardConfig,
    GamePhase,
    Position,
    RevealOutcome,
    RevealResult,
)
from .cell import CellView
from .events import EventType, GameEvent

logger = logging.getLogger(__name__)

EventListener = Callable[[GameEvent], None]


# ============================================================================
# Game Session
# ============================================================================

class GameSession:
    """
    Owns the current board and turns commands into events.

    Every command returns the events it produced, in order. A safe cell
    opened by a reveal, cascade or chord yields one CELL_REVEALED each;
    MINE_EXPLODED/GAME_LOST and GAME_WON are emitted once per game since
    the board ignores commands after it ends.
    """

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        rng: Optional[random.Random] = None,
        mine_positions: Optional[Iterable[Position]] = None,
    ) -> None:
        """
        Start a session with a first game already generated.

        Args:
            config: Board configuration (default: 9x9 with 10 mines).
            rng: Random source used for every game of this session.
            mine_positions: Explicit layout for the first game.
        """
        self._lock = threading.RLock()
        self._listeners: List[EventListener] = []
        self._rng = rng
        self._config = config or BoardConfig()
        self._phase = GamePhase.SETUP
        self._events: List[GameEvent] = []
        self._board: Optional[Board] = None
        self.new_game(self._config, mine_positions=mine_positions)

    # ========================================================================
    # Listener Registration
    # ========================================================================

    def register_listener(self, listener: EventListener) -> None:
        """Call ``listener`` with every event, in emission order."""
        with self._lock:
            if listener not in self._listeners:
                self._listeners.append(listener)

    def unregister_listener(self, listener: EventListener) -> None:
        with self._lock:
            if listener in self._listeners:
                self._listeners.remove(listener)

    # ========================================================================
    # Commands
    # ========================================================================

    def new_game(
        self,
        config: Optional[BoardConfig] = None,
        rng: Optional[random.Random] = None,
        mine_positions: Optional[Iterable[Position]] = None,
    ) -> None:
        """
        Replace the board with a freshly mined one.

        Args:
            config: New configuration; keeps the current one when omitted.
            rng: Replaces the session random source from this game on.
            mine_positions: Explicit (row, col) mine layout, mostly for tests.

        Raises:
            InvalidConfigError: The current game is left untouched.
        """
        with self._lock:
            config = config or self._config
            rng = rng or self._rng
            board = Board(config, rng=rng, mine_positions=mine_positions)
            self._config = config
            self._rng = rng
            self._board = board
            self._phase = board.phase
            self._events = []
            logger.debug("Session started a new game")

    def handle_reveal(self, row: int, col: int) -> List[GameEvent]:
        """Reveal a cell and report what happened."""
        with self._lock:
            outcome = self._board.reveal(row, col)
            return self._dispatch(self._outcome_events(outcome))

    def handle_chord(self, row: int, col: int) -> List[GameEvent]:
        """Open the unflagged neighbors of a satisfied number."""
        with self._lock:
            outcome = self._board.chord(row, col)
            return self._dispatch(self._outcome_events(outcome))

    def handle_flag_toggle(self, row: int, col: int) -> List[GameEvent]:
        """Toggle a flag; yields FLAG_TOGGLED only if the flag changed."""
        with self._lock:
            cell = self._board.get_cell(row, col)
            before = cell.flagged if cell is not None else False
            after = self._board.toggle_flag(row, col)
            if cell is None or after == before:
                return []
            event = GameEvent(EventType.FLAG_TOGGLED, (row, col), flagged=after)
            return self._dispatch([event])

    # ========================================================================
    # Event Translation
    # ========================================================================

    def _outcome_events(self, outcome: RevealOutcome) -> List[GameEvent]:
        """Map a reveal outcome to the ordered events it implies."""
        events = [
            GameEvent(EventType.CELL_REVEALED, position)
            for position in outcome.revealed
        ]
        if outcome.result == RevealResult.EXPLODED:
            events.append(GameEvent(EventType.MINE_EXPLODED, outcome.position))
            events.append(GameEvent(EventType.GAME_LOST))
        elif self._phase == GamePhase.PLAYING and self._board.is_won:
            events.append(GameEvent(EventType.GAME_WON))
        self._phase = self._board.phase
        return events

    def _dispatch(self, events: List[GameEvent]) -> List[GameEvent]:
        self._events.extend(events)
        for event in events:
            for listener in list(self._listeners):
                listener(event)
        return events

    # ========================================================================
    # State Accessors
    # ========================================================================

    @property
    def phase(self) -> GamePhase:
        return self._phase

    @property
    def board(self) -> Board:
        return self._board

    @property
    def config(self) -> BoardConfig:
        return self._config

    @property
    def events(self) -> List[GameEvent]:
        """Events emitted since the current game started."""
        return list(self._events)

    def cell_view(self, row: int, col: int) -> Optional[CellView]:
        return self._board.get_cell_view(row, col)

    def cell_views(self) -> List[List[CellView]]:
        return self._board.cell_views()
