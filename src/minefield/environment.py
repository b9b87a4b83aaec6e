"""
Gymnasium environment wrapper for the Minesweeper rules engine.

Exposes a GameSession through the standard reset/step interface so
scripted or learning agents can drive it as an input source.
"""
import random
from typing import Any, Dict, List, Optional, Tuple, SupportsFloat

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import BoardConfig, GamePhase
from .events import EventType, GameEvent
from .session import GameSession


REVEAL_REWARD = 1.0
WIN_REWARD = 10.0
LOSS_REWARD = -10.0
UNCHANGED_PENALTY = -0.1


# ============================================================================
# Minesweeper Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for Minesweeper.

    Observation:
        2D array where:
        - -1 = hidden cell
        - -2 = flagged cell
        - 0-8 = revealed cell with adjacent mine count
        - 9 = revealed mine

    Actions:
        Discrete action space of size 2 * rows * cols.
        Action i < rows * cols reveals cell (i // cols, i % cols);
        the second half toggles the flag on the same cells.

    Rewards:
        - +1 per safe cell revealed (cascades count every cell)
        - +10 for winning the game
        - -10 for hitting a mine
        - -0.1 for an action that changed nothing
    """

    metadata = {"render_modes": []}

    def __init__(self, config: Optional[BoardConfig] = None) -> None:
        """
        Initialize the Minesweeper environment.

        Args:
            config: Board configuration (default: 9x9 with 10 mines).
        """
        super().__init__()

        self.config = config or BoardConfig()
        self.session = GameSession(self.config)
        self._num_cells = self.config.total_cells

        self.observation_space = spaces.Box(
            low=-2,
            high=9,
            shape=(self.config.rows, self.config.cols),
            dtype=np.int8,
        )
        self.action_space = spaces.Discrete(2 * self._num_cells)

        self._steps = 0

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Start a new game.

        Args:
            seed: Random seed; the same seed yields the same mine layout.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        board_seed = int(self.np_random.integers(2**32))
        self.session.new_game(rng=random.Random(board_seed))
        self._steps = 0

        return self.session.board.get_observation(), self._get_info([])

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: Reveal or flag action index (see class docstring).
                Indices outside the action space change nothing.

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        self._steps += 1

        events: List[GameEvent] = []
        if self.action_space.contains(action):
            is_flag, row, col = self._decode_action(action)
            if is_flag:
                events = self.session.handle_flag_toggle(row, col)
            else:
                events = self.session.handle_reveal(row, col)

        reward = self._calculate_reward(events)
        observation = self.session.board.get_observation()
        terminated = self.session.phase in (GamePhase.WON, GamePhase.LOST)

        return observation, reward, terminated, False, self._get_info(events)

    def _decode_action(self, action: int) -> Tuple[bool, int, int]:
        """Split an action index into (is_flag, row, col)."""
        is_flag = action >= self._num_cells
        row, col = divmod(action % self._num_cells, self.config.cols)
        return is_flag, row, col

    def _calculate_reward(self, events: List[GameEvent]) -> float:
        """
        Calculate reward from the events an action produced.

        Args:
            events: Events returned by the session.

        Returns:
            Reward value.
        """
        if not events:
            return UNCHANGED_PENALTY

        reward = 0.0
        for event in events:
            if event.type == EventType.CELL_REVEALED:
                reward += REVEAL_REWARD
            elif event.type == EventType.GAME_WON:
                reward += WIN_REWARD
            elif event.type == EventType.GAME_LOST:
                reward += LOSS_REWARD
        return reward

    def _get_info(self, events: List[GameEvent]) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        board = self.session.board
        return {
            "steps": self._steps,
            "revealed": board.revealed_safe_count,
            "total_safe": self.config.safe_cells,
            "flags_remaining": board.flags_remaining,
            "game_state": self.session.phase.name,
            "events": [event.name for event in events],
        }

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of valid actions.

        Returns:
            Boolean array where True = the action would change the board.
        """
        mask = np.zeros(self.action_space.n, dtype=bool)
        if self.session.phase != GamePhase.PLAYING:
            return mask

        observation = self.session.board.get_observation().flatten()
        hidden = observation == -1
        mask[: self._num_cells] = hidden
        mask[self._num_cells :] = hidden | (observation == -2)
        return mask
