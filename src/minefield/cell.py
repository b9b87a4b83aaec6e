"""
Cell module for the Minesweeper rules engine.

Represents individual grid positions with their mine content,
reveal/flag markers and adjacent mine count.
"""
from enum import Enum, auto
from dataclasses import dataclass


# ============================================================================
# Constants
# ============================================================================

class CellState(Enum):
    """Possible visual states of a cell."""

    HIDDEN = auto()
    REVEALED = auto()
    FLAGGED = auto()


HIDDEN_CODE = -1
FLAGGED_CODE = -2
MINE_CODE = 9


# ============================================================================
# Cell Data Class
# ============================================================================

@dataclass
class Cell:
    """
    Represents a single cell in the Minesweeper grid.

    Attributes:
        has_mine: Whether this cell contains a mine.
        nearby_mine_count: Count of mines in neighboring cells (0-8).
        revealed: Whether the cell has been opened. Never reverts.
        flagged: Player marker, only changes while the cell is hidden.
    """

    has_mine: bool = False
    nearby_mine_count: int = 0
    revealed: bool = False
    flagged: bool = False

    def reveal(self) -> bool:
        """
        Reveal this cell.

        Returns:
            True if cell was successfully revealed, False if already
            revealed or flagged.
        """
        if self.revealed or self.flagged:
            return False
        self.revealed = True
        return True

    def toggle_flag(self) -> bool:
        """
        Toggle flag on this cell.

        Returns:
            True if flag was toggled, False if cell is revealed.
        """
        if self.revealed:
            return False
        self.flagged = not self.flagged
        return True

    @property
    def state(self) -> CellState:
        """Visual state; a revealed mine keeps its flag but shows as revealed."""
        if self.revealed:
            return CellState.REVEALED
        if self.flagged:
            return CellState.FLAGGED
        return CellState.HIDDEN

    @property
    def is_hidden(self) -> bool:
        """Check if cell is hidden and unflagged."""
        return self.state == CellState.HIDDEN

    @property
    def is_safe(self) -> bool:
        return not self.has_mine

    def view(self) -> "CellView":
        """Take an immutable snapshot of this cell."""
        return CellView(
            revealed=self.revealed,
            has_mine=self.has_mine,
            flagged=self.flagged,
            nearby_mine_count=self.nearby_mine_count,
        )

    def to_observation(self) -> int:
        """
        Convert cell to an integer code for array consumers.

        Returns:
            -1: Hidden cell
            -2: Flagged cell
            0-8: Revealed cell with adjacent mine count
            9: Revealed mine (game over state)
        """
        state = self.state
        if state == CellState.HIDDEN:
            return HIDDEN_CODE
        if state == CellState.FLAGGED:
            return FLAGGED_CODE
        if self.has_mine:
            return MINE_CODE
        return self.nearby_mine_count


@dataclass(frozen=True)
class CellView:
    """Read-only per-cell render state."""

    revealed: bool
    has_mine: bool
    flagged: bool
    nearby_mine_count: int
