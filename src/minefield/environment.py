"""
Gymnasium environment wrapper for Minesweeper.

Drives a lazily initialised board through the board contract, so the
first reveal of every episode lands in a mine-free clearing.
"""
from functools import partial
from typing import Any, Dict, Optional, SupportsFloat, Tuple

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from .board import BoardConfig, GameBoard
from .errors import BombHitError, UnopenableError
from .lazy import LazyGameBoard


# ============================================================================
# Minesweeper Environment
# ============================================================================

class MinesweeperEnv(gym.Env):
    """
    Gymnasium environment for Minesweeper.

    Observation:
        2D array where:
        - -1 = closed tile
        - -2 = flagged tile
        - 0-8 = open tile with neighbouring bomb count
        - 9 = open bomb

    Actions:
        Discrete action space of size width * height.
        Action i opens the tile at row i // width, column i % width.

    Rewards:
        - +1 for opening a safe tile
        - +10 for winning the game
        - -10 for hitting a mine
        - -0.1 for invalid action (already open or flagged)
    """

    metadata = {"render_modes": ["human", "ansi"], "render_fps": 4}

    def __init__(
        self,
        config: Optional[BoardConfig] = None,
        render_mode: Optional[str] = None,
    ) -> None:
        """
        Initialize the Minesweeper environment.

        Args:
            config: Board configuration (default: 9x9 with 10 mines).
            render_mode: How to render the environment.
        """
        super().__init__()

        self.config = config or BoardConfig()
        self.render_mode = render_mode
        self.board = self._new_board()

        self.observation_space = spaces.Box(
            low=-2,
            high=9,
            shape=(self.config.height, self.config.width),
            dtype=np.int8,
        )

        # One action per tile
        self.action_space = spaces.Discrete(self.config.area)

        self._steps = 0
        self._total_safe_cells = self.config.area - self.config.num_mines

    def _new_board(self) -> LazyGameBoard:
        factory = partial(GameBoard.with_clearing, rng=self.np_random)
        return LazyGameBoard.new_uninit(
            self.config.width,
            self.config.height,
            self.config.num_mines,
            factory=factory,
        )

    def reset(
        self,
        *,
        seed: Optional[int] = None,
        options: Optional[Dict[str, Any]] = None,
    ) -> Tuple[np.ndarray, Dict[str, Any]]:
        """
        Reset the environment for a new episode.

        Args:
            seed: Random seed for reproducibility.
            options: Additional options (unused).

        Returns:
            Tuple of (observation, info dict).
        """
        super().reset(seed=seed)
        self.board = self._new_board()
        self._steps = 0

        return self.board.observation(), self._get_info()

    def step(
        self, action: int
    ) -> Tuple[np.ndarray, SupportsFloat, bool, bool, Dict[str, Any]]:
        """
        Execute one action in the environment.

        Args:
            action: Tile index to open (row * width + col).

        Returns:
            Tuple of (observation, reward, terminated, truncated, info).
        """
        x, y = self._action_to_position(action)
        self._steps += 1

        reward = self._calculate_reward(x, y)
        observation = self.board.observation()
        terminated = not self.board.is_playing

        return observation, reward, terminated, False, self._get_info()

    def _action_to_position(self, action: int) -> Tuple[int, int]:
        """Convert flat action index to (x, y) board coordinates."""
        return int(action) % self.config.width, int(action) // self.config.width

    def _calculate_reward(self, x: int, y: int) -> float:
        """
        Open a tile and score the result.

        Args:
            x: Column index.
            y: Row index.

        Returns:
            Reward value.
        """
        tile = self.board.get_board_tile(x, y)
        if tile is None or not tile.is_hidden:
            return -0.1

        try:
            self.board.open_tile(x, y)
        except BombHitError:
            self.board.lose_game()
            return -10.0
        except UnopenableError:
            return -0.1

        if self.board.tiles_left == 0:
            self.board.win_game()
            return 10.0
        return 1.0

    def _get_info(self) -> Dict[str, Any]:
        """Get info dictionary for current state."""
        return {
            "steps": self._steps,
            "revealed": self.board.opened,
            "total_safe": self._total_safe_cells,
            "game_state": self.board.game_state.name,
            "valid_actions": int(self.get_action_mask().sum()),
        }

    def render(self) -> Optional[str]:
        """Render the current board state."""
        if self.render_mode == "ansi":
            return self._render_ansi()
        if self.render_mode == "human":
            print(self._render_ansi())
        return None

    def _render_ansi(self) -> str:
        """Render board as ASCII string."""
        lines = []
        for row in self.board.render().rows():
            cells = []
            for tile in row:
                if tile.is_flagged:
                    cells.append("F")
                elif tile.is_hidden:
                    cells.append(".")
                else:
                    cells.append(tile.tile.as_str_count())
            lines.append(" ".join(cells) + " ")
        return "\n".join(lines)

    def get_action_mask(self) -> np.ndarray:
        """
        Get mask of valid actions.

        Returns:
            Boolean array where True = closed tile that can be opened.
        """
        return self.board.observation().flatten() == -1


# ============================================================================
# Vectorized Environment Factory
# ============================================================================

def make_vec_env(
    n_envs: int = 4,
    config: Optional[BoardConfig] = None,
) -> gym.vector.VectorEnv:
    """
    Create vectorized environment for parallel training.

    Args:
        n_envs: Number of parallel environments.
        config: Board configuration.

    Returns:
        Vectorized environment.
    """
    def make_env() -> MinesweeperEnv:
        return MinesweeperEnv(config=config)

    return gym.vector.AsyncVectorEnv([make_env for _ in range(n_envs)])
