"""
Board module for the Minesweeper rules engine.

Implements the game board with mine placement, adjacency counting,
cascading reveal, flagging and win/lose determination.
"""
import logging
import random
from collections import deque
from dataclasses import dataclass, field, InitVar
from enum import Enum, auto
from typing import Dict, Iterable, List, Optional, Tuple

import numpy as np

from .cell import Cell, CellView

logger = logging.getLogger(__name__)

Position = Tuple[int, int]


# ============================================================================
# Constants
# ============================================================================

class GamePhase(Enum):
    """Possible phases of a game."""

    SETUP = auto()
    PLAYING = auto()
    WON = auto()
    LOST = auto()


class RevealResult(Enum):
    """Kind of outcome a reveal-type action produced."""

    UNCHANGED = auto()
    REVEALED = auto()
    EXPLODED = auto()


class InvalidConfigError(ValueError):
    """Raised when a board cannot be built from the given parameters."""


@dataclass(frozen=True)
class BoardConfig:
    """
    Configuration for a Minesweeper board.

    Attributes:
        rows: Number of rows.
        cols: Number of columns.
        num_mines: Total mines to place.
    """

    rows: int = 9
    cols: int = 9
    num_mines: int = 10

    def __post_init__(self) -> None:
        """Validate configuration after initialization."""
        self._validate()

    def _validate(self) -> None:
        """Ensure configuration values are valid."""
        if self.rows < 1 or self.cols < 1:
            raise InvalidConfigError("Board dimensions must be positive")
        if self.num_mines < 1:
            raise InvalidConfigError("Board needs at least one mine")
        max_mines = self.rows * self.cols - 1
        if self.num_mines > max_mines:
            raise InvalidConfigError(f"Too many mines (max {max_mines})")

    @property
    def total_cells(self) -> int:
        return self.rows * self.cols

    @property
    def safe_cells(self) -> int:
        """Number of cells without a mine."""
        return self.total_cells - self.num_mines

    @classmethod
    def from_preset(cls, name: str) -> "BoardConfig":
        """Look up a named difficulty, e.g. ``"beginner"``."""
        try:
            preset = PRESETS[name.lower()]
        except KeyError:
            raise InvalidConfigError(f"Unknown preset: {name}") from None
        return cls(preset.rows, preset.cols, preset.num_mines)


# Preset difficulty levels
BEGINNER = BoardConfig(9, 9, 10)
INTERMEDIATE = BoardConfig(16, 16, 40)
EXPERT = BoardConfig(16, 30, 99)

PRESETS: Dict[str, BoardConfig] = {
    "beginner": BEGINNER,
    "intermediate": INTERMEDIATE,
    "expert": EXPERT,
}


@dataclass(frozen=True)
class RevealOutcome:
    """
    Result of a reveal or chord action.

    Attributes:
        result: UNCHANGED, REVEALED or EXPLODED.
        position: Cell the action targeted, or the mine that exploded.
        revealed: Safe cells newly opened by this action, in reveal order.
    """

    result: RevealResult
    position: Position
    revealed: Tuple[Position, ...] = ()

    @property
    def count(self) -> int:
        """Number of safe cells newly revealed."""
        return len(self.revealed)

    @property
    def changed(self) -> bool:
        return self.result != RevealResult.UNCHANGED


# ============================================================================
# Board Class
# ============================================================================

@dataclass
class Board:
    """
    Minesweeper game board.

    Cells live in a single flat list indexed by ``row * cols + col``.
    Mines are placed once, at construction, from ``rng`` (a fresh
    ``random.Random`` when omitted) or from explicit ``mine_positions``.
    """

    config: BoardConfig = field(default_factory=BoardConfig)
    rng: InitVar[Optional[random.Random]] = None
    mine_positions: InitVar[Optional[Iterable[Position]]] = None
    _cells: List[Cell] = field(default_factory=list, init=False, repr=False)
    _phase: GamePhase = field(default=GamePhase.SETUP, init=False)
    _safe_revealed: int = field(default=0, init=False)
    _flag_count: int = field(default=0, init=False)

    def __post_init__(
        self,
        rng: Optional[random.Random],
        mine_positions: Optional[Iterable[Position]],
    ) -> None:
        """Validate the mine layout, then build the grid."""
        if mine_positions is not None:
            mine_indices = self._resolve_mine_positions(mine_positions)
        else:
            mine_indices = self._sample_mine_indices(rng or random.Random())

        self._init_grid()
        self._place_mines(mine_indices)
        self._calculate_adjacent_mines()
        self._phase = GamePhase.PLAYING
        logger.debug(
            "New %dx%d board with %d mines",
            self.config.rows, self.config.cols, self.config.num_mines,
        )

    # ========================================================================
    # Grid Initialization (Low-level)
    # ========================================================================

    def _init_grid(self) -> None:
        """Create empty grid of cells."""
        self._cells = [Cell() for _ in range(self.config.total_cells)]

    def _sample_mine_indices(self, rng: random.Random) -> List[int]:
        """Draw distinct flat indices uniformly without replacement."""
        return rng.sample(range(self.config.total_cells), self.config.num_mines)

    def _resolve_mine_positions(
        self, positions: Iterable[Position]
    ) -> List[int]:
        """Convert explicit (row, col) mine positions to flat indices."""
        indices = set()
        for position in positions:
            try:
                row, col = position
            except (TypeError, ValueError):
                raise InvalidConfigError(
                    f"Mine position {position!r} is not a (row, col) pair"
                ) from None
            if not self._is_valid_position(row, col):
                raise InvalidConfigError(
                    f"Mine position ({row}, {col}) is off the board"
                )
            indices.add(self._index(row, col))
        if len(indices) != self.config.num_mines:
            raise InvalidConfigError(
                f"Expected {self.config.num_mines} distinct mine positions, "
                f"got {len(indices)}"
            )
        return sorted(indices)

    def _place_mines(self, indices: Iterable[int]) -> None:
        for index in indices:
            self._cells[index].has_mine = True

    def _calculate_adjacent_mines(self) -> None:
        """Calculate adjacent mine counts for all safe cells."""
        for row in range(self.config.rows):
            for col in range(self.config.cols):
                cell = self._cell_at(row, col)
                if not cell.has_mine:
                    cell.nearby_mine_count = self._count_adjacent_mines(row, col)

    def _count_adjacent_mines(self, row: int, col: int) -> int:
        """Count mines adjacent to a specific cell."""
        count = 0
        for neighbor_row, neighbor_col in self._get_neighbors(row, col):
            if self._cell_at(neighbor_row, neighbor_col).has_mine:
                count += 1
        return count

    # ========================================================================
    # Neighbor Utilities (Low-level)
    # ========================================================================

    def _get_neighbors(self, row: int, col: int) -> List[Position]:
        """
        Get valid neighboring cell positions in row-major order.

        Args:
            row: Row index of center cell.
            col: Column index of center cell.

        Returns:
            List of (row, col) tuples for valid neighbors.
        """
        neighbors = []
        for delta_row in (-1, 0, 1):
            for delta_col in (-1, 0, 1):
                if delta_row == 0 and delta_col == 0:
                    continue
                new_row = row + delta_row
                new_col = col + delta_col
                if self._is_valid_position(new_row, new_col):
                    neighbors.append((new_row, new_col))
        return neighbors

    def _is_valid_position(self, row: int, col: int) -> bool:
        """Check if position is within board bounds."""
        return 0 <= row < self.config.rows and 0 <= col < self.config.cols

    def _index(self, row: int, col: int) -> int:
        return row * self.config.cols + col

    def _cell_at(self, row: int, col: int) -> Cell:
        return self._cells[self._index(row, col)]

    # ========================================================================
    # Game Actions (Mid-level)
    # ========================================================================

    def reveal(self, row: int, col: int) -> RevealOutcome:
        """
        Reveal a cell at the given position.

        If the cell is empty (0 adjacent mines), its connected empty
        region and that region's numbered border are revealed as well.
        If the cell is a mine, the game is lost and every mine is shown.

        Args:
            row: Row index to reveal.
            col: Column index to reveal.

        Returns:
            UNCHANGED for out-of-bounds, revealed or flagged cells and
            after the game has ended; otherwise REVEALED or EXPLODED.
        """
        if not self._can_reveal(row, col):
            return RevealOutcome(RevealResult.UNCHANGED, (row, col))
        return self._open_cells([(row, col)], (row, col))

    def _can_reveal(self, row: int, col: int) -> bool:
        """Check if a cell can be revealed."""
        if self._phase != GamePhase.PLAYING:
            return False
        if not self._is_valid_position(row, col):
            return False
        return self._cell_at(row, col).is_hidden

    def _open_cells(
        self, targets: Iterable[Position], origin: Position
    ) -> RevealOutcome:
        """Reveal each target in turn, stopping at the first mine."""
        revealed: List[Position] = []
        for row, col in targets:
            cell = self._cell_at(row, col)
            if not cell.reveal():
                continue

            if cell.has_mine:
                self._explode(row, col)
                return RevealOutcome(
                    RevealResult.EXPLODED, (row, col), tuple(revealed)
                )

            self._safe_revealed += 1
            revealed.append((row, col))
            if cell.nearby_mine_count == 0:
                revealed.extend(self._cascade(row, col))

        if not revealed:
            return RevealOutcome(RevealResult.UNCHANGED, origin)

        logger.debug("Revealed %d cell(s) from %s", len(revealed), origin)
        if self.check_win_condition():
            self._phase = GamePhase.WON
            logger.info("Board cleared, game won")
        return RevealOutcome(RevealResult.REVEALED, origin, tuple(revealed))

    def _cascade(self, row: int, col: int) -> List[Position]:
        """
        Flood-fill outward from an empty cell.

        Uses a FIFO worklist; a cell is enqueued only at the moment it is
        revealed, so each cell is expanded at most once.
        """
        opened: List[Position] = []
        worklist = deque([(row, col)])
        while worklist:
            current_row, current_col = worklist.popleft()
            for neighbor_row, neighbor_col in self._get_neighbors(
                current_row, current_col
            ):
                neighbor = self._cell_at(neighbor_row, neighbor_col)
                if neighbor.has_mine or not neighbor.reveal():
                    continue
                self._safe_revealed += 1
                opened.append((neighbor_row, neighbor_col))
                if neighbor.nearby_mine_count == 0:
                    worklist.append((neighbor_row, neighbor_col))
        return opened

    def _explode(self, row: int, col: int) -> None:
        self._phase = GamePhase.LOST
        self.reveal_all_mines()
        logger.info("Mine hit at (%d, %d), game lost", row, col)

    def reveal_all_mines(self) -> None:
        """Mark every mine revealed; flags and safe cells are untouched."""
        for cell in self._cells:
            if cell.has_mine:
                cell.revealed = True

    def check_win_condition(self) -> bool:
        """Check if all non-mine cells are revealed."""
        return self._safe_revealed == self.config.safe_cells

    def toggle_flag(self, row: int, col: int) -> bool:
        """
        Toggle flag on a cell.

        Args:
            row: Row index.
            col: Column index.

        Returns:
            The cell's flagged value after the call. Unchanged when the
            cell is revealed or the game is over; False out of bounds.
        """
        cell = self.get_cell(row, col)
        if cell is None:
            return False
        if self._phase != GamePhase.PLAYING or not cell.toggle_flag():
            return cell.flagged

        self._flag_count += 1 if cell.flagged else -1
        logger.debug("Flag at (%d, %d) set to %s", row, col, cell.flagged)
        return cell.flagged

    def chord(self, row: int, col: int) -> RevealOutcome:
        """
        Chord action: reveal all unflagged neighbors if flag count matches.

        Args:
            row: Row index.
            col: Column index.

        Returns:
            Outcome of revealing the neighbors; UNCHANGED if the chord
            is not allowed or nothing was left to reveal.
        """
        if not self._can_chord(row, col):
            return RevealOutcome(RevealResult.UNCHANGED, (row, col))

        targets = [
            (neighbor_row, neighbor_col)
            for neighbor_row, neighbor_col in self._get_neighbors(row, col)
            if self._cell_at(neighbor_row, neighbor_col).is_hidden
        ]
        return self._open_cells(targets, (row, col))

    def _can_chord(self, row: int, col: int) -> bool:
        """Check if chord action is valid."""
        if self._phase != GamePhase.PLAYING:
            return False
        if not self._is_valid_position(row, col):
            return False
        cell = self._cell_at(row, col)
        if not cell.revealed or cell.has_mine or cell.nearby_mine_count == 0:
            return False
        flag_count = self._count_adjacent_flags(row, col)
        return flag_count == cell.nearby_mine_count

    def _count_adjacent_flags(self, row: int, col: int) -> int:
        """Count flagged cells adjacent to position."""
        count = 0
        for neighbor_row, neighbor_col in self._get_neighbors(row, col):
            if self._cell_at(neighbor_row, neighbor_col).flagged:
                count += 1
        return count

    # ========================================================================
    # State Accessors (High-level)
    # ========================================================================

    @property
    def rows(self) -> int:
        return self.config.rows

    @property
    def cols(self) -> int:
        return self.config.cols

    @property
    def phase(self) -> GamePhase:
        """Get current game phase."""
        return self._phase

    @property
    def is_playing(self) -> bool:
        """Check if game is still in progress."""
        return self._phase == GamePhase.PLAYING

    @property
    def is_won(self) -> bool:
        """Check if game was won."""
        return self._phase == GamePhase.WON

    @property
    def is_lost(self) -> bool:
        """Check if game was lost."""
        return self._phase == GamePhase.LOST

    @property
    def revealed_safe_count(self) -> int:
        return self._safe_revealed

    @property
    def flag_count(self) -> int:
        return self._flag_count

    @property
    def flags_remaining(self) -> int:
        """Mines minus placed flags; negative when over-flagged."""
        return self.config.num_mines - self._flag_count

    def get_cell(self, row: int, col: int) -> Optional[Cell]:
        """Get cell at position, or None if invalid."""
        if not self._is_valid_position(row, col):
            return None
        return self._cell_at(row, col)

    def get_cell_view(self, row: int, col: int) -> Optional[CellView]:
        """Get a read-only snapshot of a cell, or None if invalid."""
        cell = self.get_cell(row, col)
        return cell.view() if cell is not None else None

    def cell_views(self) -> List[List[CellView]]:
        """Snapshot every cell, one list per row."""
        return [
            [self._cell_at(row, col).view() for col in range(self.config.cols)]
            for row in range(self.config.rows)
        ]

    def get_mine_positions(self) -> List[Position]:
        """All mined positions in row-major order."""
        return [
            divmod(index, self.config.cols)
            for index, cell in enumerate(self._cells)
            if cell.has_mine
        ]

    def get_valid_actions(self) -> List[Position]:
        """
        Get list of cells that a reveal would currently act on.

        Returns:
            List of hidden, unflagged (row, col) positions.
        """
        if self._phase != GamePhase.PLAYING:
            return []
        return [
            divmod(index, self.config.cols)
            for index, cell in enumerate(self._cells)
            if cell.is_hidden
        ]

    def get_observation(self) -> np.ndarray:
        """
        Get board state as a numpy array.

        Returns:
            2D int8 array where:
                -1 = hidden
                -2 = flagged
                0-8 = revealed with adjacent count
                9 = revealed mine
        """
        obs = np.fromiter(
            (cell.to_observation() for cell in self._cells),
            dtype=np.int8,
            count=self.config.total_cells,
        )
        return obs.reshape(self.config.rows, self.config.cols)

    def adjacency_grid(self) -> np.ndarray:
        """Adjacent mine counts as a 2D int8 array (0 on mine cells)."""
        counts = np.fromiter(
            (cell.nearby_mine_count for cell in self._cells),
            dtype=np.int8,
            count=self.config.total_cells,
        )
        return counts.reshape(self.config.rows, self.config.cols)

    def mine_mask(self) -> np.ndarray:
        """Boolean 2D array, True where a mine sits."""
        mask = np.fromiter(
            (cell.has_mine for cell in self._cells),
            dtype=bool,
            count=self.config.total_cells,
        )
        return mask.reshape(self.config.rows, self.config.cols)


def new_game(
    rows: int = 9,
    cols: int = 9,
    mine_count: int = 10,
    rng: Optional[random.Random] = None,
) -> Board:
    """
    Build a freshly mined board ready to play.

    Raises:
        InvalidConfigError: If the dimensions or mine count are invalid.
            Nothing is allocated in that case.
    """
    return Board(BoardConfig(rows, cols, mine_count), rng=rng)
