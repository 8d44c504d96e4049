"""
Pytest configuration and shared fixtures.
"""
import itertools
import pytest
import sys
from functools import partial
from pathlib import Path
from typing import Callable, List

import numpy as np

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from minefield import BoardConfig, GameBoard, LazyGameBoard, LoggedGameBoard, BoardTile


def parse_layout(*rows: str) -> List[List[bool]]:
    """Turn rows like "..*" into a bomb layout (True where '*')."""
    return [[char == "*" for char in row] for row in rows]


# Bomb in the bottom-right corner only.
CORNER_MINE = parse_layout(
    ".....",
    ".....",
    ".....",
    ".....",
    "....*",
)

# A wall of bombs down the middle column splits the board in two.
WALL = parse_layout(
    "..*..",
    "..*..",
    "..*..",
    "..*..",
    "..*..",
)

# Hints:
#   * 1 0
#   1 2 1
#   0 1 *
DIAGONAL = parse_layout(
    "*..",
    "...",
    "..*",
)


# ============================================================================
# Board Fixtures
# ============================================================================

@pytest.fixture
def rng() -> np.random.Generator:
    """Seeded random generator for reproducible placement."""
    return np.random.default_rng(1234)


@pytest.fixture
def corner_board() -> GameBoard:
    """5x5 board with a single bomb at (4, 4)."""
    return GameBoard.from_layout(CORNER_MINE)


@pytest.fixture
def wall_board() -> GameBoard:
    """5x5 board with bombs filling column x=2."""
    return GameBoard.from_layout(WALL)


@pytest.fixture
def diagonal_board() -> GameBoard:
    """3x3 board with bombs at (0, 0) and (2, 2)."""
    return GameBoard.from_layout(DIAGONAL)


@pytest.fixture
def beginner_board(rng: np.random.Generator) -> GameBoard:
    """Beginner board with a clearing around the center."""
    return GameBoard.with_clearing(9, 9, 10, 4, 4, rng=rng)


@pytest.fixture
def pending_board() -> LazyGameBoard:
    """Lazy 9x9 board with 10 mines, not yet built."""
    return LazyGameBoard.new_uninit(9, 9, 10)


@pytest.fixture
def fake_clock() -> Callable[[], int]:
    """Clock that advances 5ms (5000us) on every read."""
    return partial(next, itertools.count(0, 5_000_000))


@pytest.fixture
def logged_wall_board(fake_clock: Callable[[], int]) -> LoggedGameBoard:
    """Logged wall board whose opening move was played at (0, 0)."""
    return LoggedGameBoard.start_new(
        5, 5, 5, 0, 0,
        factory=lambda *_: GameBoard.from_layout(WALL),
        clock=fake_clock,
    )


# ============================================================================
# Tile Fixtures
# ============================================================================

@pytest.fixture
def hidden_tile() -> BoardTile:
    """Create a closed tile."""
    return BoardTile()


# ============================================================================
# Configuration Fixtures
# ============================================================================

@pytest.fixture
def valid_config() -> BoardConfig:
    """Create a valid board configuration."""
    return BoardConfig(9, 9, 10)


@pytest.fixture
def small_config() -> BoardConfig:
    """4x4 board with the most mines that still leave a clearing."""
    return BoardConfig(4, 4, 7)
