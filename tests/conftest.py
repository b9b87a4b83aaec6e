"""
Pytest configuration and shared fixtures.
"""
import random
import sys
from pathlib import Path
from typing import List, Tuple

import numpy as np
import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minefield import Board, BoardConfig, Cell, GameSession


# ============================================================================
# Reference Layouts
# ============================================================================

# 9x9, 10 mines. Top-left corner sits in a mine-free pocket.
FIXED_MINES: List[Tuple[int, int]] = [
    (0, 6), (1, 8), (2, 4), (3, 1), (4, 7),
    (5, 4), (6, 0), (6, 8), (7, 3), (8, 6),
]

# Hand-computed adjacent mine counts for FIXED_MINES (-1 marks a mine).
FIXED_COUNTS: List[List[int]] = [
    [0, 0, 0, 0, 0, 1, -1, 2, 1],
    [0, 0, 0, 1, 1, 2, 1, 2, -1],
    [1, 1, 1, 1, -1, 1, 0, 1, 1],
    [1, -1, 1, 1, 1, 1, 1, 1, 1],
    [1, 1, 1, 1, 1, 1, 1, -1, 1],
    [1, 1, 0, 1, -1, 1, 1, 2, 2],
    [-1, 1, 1, 2, 2, 1, 0, 1, -1],
    [1, 1, 1, -1, 1, 1, 1, 2, 1],
    [0, 0, 1, 1, 1, 1, -1, 1, 0],
]


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def default_board() -> Board:
    """Create a default 9x9 board with 10 mines."""
    return Board(rng=random.Random(1234))


@pytest.fixture
def fixed_board() -> Board:
    """Create the 9x9 reference board with a known mine layout."""
    return Board(BoardConfig(9, 9, 10), mine_positions=FIXED_MINES)


@pytest.fixture
def small_board() -> Board:
    """Create a 3x3 board with a single mine in the top-left corner."""
    return Board(BoardConfig(3, 3, 1), mine_positions=[(0, 0)])


@pytest.fixture
def tiny_board() -> Board:
    """Create a 2x2 board with one mine; every safe cell shows 1."""
    return Board(BoardConfig(2, 2, 1), mine_positions=[(0, 0)])


@pytest.fixture
def fixed_mines() -> List[Tuple[int, int]]:
    return list(FIXED_MINES)


@pytest.fixture
def fixed_counts() -> np.ndarray:
    """Reference count grid with mines reported as 0."""
    counts = np.array(FIXED_COUNTS, dtype=np.int8)
    counts[counts < 0] = 0
    return counts


# ============================================================================
# Session Fixtures
# ============================================================================

@pytest.fixture
def fixed_session() -> GameSession:
    """Session whose first game uses the reference layout."""
    return GameSession(BoardConfig(9, 9, 10), mine_positions=FIXED_MINES)


@pytest.fixture
def recorded_events(fixed_session: GameSession) -> list:
    """Events delivered to a listener on the fixed session."""
    received = []
    fixed_session.register_listener(received.append)
    return received


# ============================================================================
# Cell Fixtures
# ============================================================================

@pytest.fixture
def hidden_cell() -> Cell:
    """Create a hidden cell."""
    return Cell()


@pytest.fixture
def mine_cell() -> Cell:
    """Create a cell containing a mine."""
    return Cell(has_mine=True)
