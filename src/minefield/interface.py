"""
Board contract for Minesweeper.

Defines the abstract interface that every board variant implements
(plain engine, lazily initialised, logged), so they compose freely.
"""
from abc import ABC, abstractmethod
from enum import Enum, auto
from typing import Optional, Tuple

import numpy as np

from .errors import OutOfBoundsError
from .events import GameBoardEvent, InputKind, KeyEvent
from .grid import FlatGrid
from .tiles import NOT_VISIBLE, VisibleTile


class GameState(Enum):
    """Possible states of the game."""

    PLAYING = auto()
    WON = auto()
    LOST = auto()


# ============================================================================
# Event Dispatch
# ============================================================================

def dispatch_event(
    board: "BaseGameBoard", event: KeyEvent
) -> Optional[GameBoardEvent]:
    """
    Route a pointer input to the matching board command.

    Primary input opens a closed tile and chords an open one; secondary
    input toggles the flag on a closed or flagged tile. Primary input on a
    flagged tile, secondary input on an open tile and control inputs are
    ignored.

    Args:
        board: Board receiving the input.
        event: Input to process.

    Returns:
        The move record, or None if the input was ignored.

    Raises:
        OutOfBoundsError: If the input targets a tile off the board.
        UnopenableError: Whatever the routed command raises.
    """
    if not event.kind.is_pointer:
        return None

    tile = board.get_board_tile(event.x, event.y)
    if tile is None:
        raise OutOfBoundsError()

    if event.kind == InputKind.PRIMARY:
        if tile.is_hidden:
            return board.open_tile(event.x, event.y)
        if tile.is_open:
            return board.open_around(event.x, event.y)
        return None

    if tile.is_open:
        return None
    return board.flag_tile(event.x, event.y)


# ============================================================================
# Base Board Interface
# ============================================================================

class BaseGameBoard(ABC):
    """
    Abstract base class for Minesweeper boards.

    Coordinates are (x, y): x is the column, y is the row. Commands return
    a move record that ``undo_move`` accepts, and raise on failure.
    """

    # ------------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------------

    @classmethod
    @abstractmethod
    def with_clearing(
        cls, width: int, height: int, mines: int, clear_x: int, clear_y: int
    ) -> "BaseGameBoard":
        """Build a board whose 3x3 region around (clear_x, clear_y) is mine-free."""

    # ------------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------------

    @property
    @abstractmethod
    def dimensions(self) -> Tuple[int, int]:
        """(width, height) of the board."""

    @property
    @abstractmethod
    def bomb_count(self) -> int:
        """Number of bombs on the board."""

    @property
    @abstractmethod
    def opened(self) -> int:
        """Number of open tiles."""

    @property
    @abstractmethod
    def flagged(self) -> int:
        """Number of flagged tiles."""

    @property
    @abstractmethod
    def game_state(self) -> GameState:
        """Current state of the game."""

    @abstractmethod
    def get_board_tile(self, x: int, y: int) -> Optional[VisibleTile]:
        """Return the public view of a tile, or None if out of range."""

    # ------------------------------------------------------------------------
    # Commands
    # ------------------------------------------------------------------------

    @abstractmethod
    def open_tile(self, x: int, y: int) -> GameBoardEvent:
        """Open a closed tile and flood-fill from it."""

    @abstractmethod
    def open_around(self, x: int, y: int) -> GameBoardEvent:
        """Open the neighbours of a tile whose flag count matches its hint."""

    @abstractmethod
    def flag_tile(self, x: int, y: int) -> GameBoardEvent:
        """Flag or unflag a closed tile."""

    @abstractmethod
    def undo_move(self, event: GameBoardEvent) -> None:
        """Reverse a move record produced by this board."""

    @abstractmethod
    def lose_game(self) -> None:
        """End the game as lost."""

    @abstractmethod
    def win_game(self) -> None:
        """
        End the game as won.

        Raises:
            GameNotFinishedError: If safe tiles remain closed.
        """

    def opening_move(self) -> Optional[GameBoardEvent]:
        """Move this board played while being constructed, if any."""
        return None

    def do_event(self, event: KeyEvent) -> Optional[GameBoardEvent]:
        """Process an input; pointer inputs are routed by dispatch_event."""
        return dispatch_event(self, event)

    # ------------------------------------------------------------------------
    # Derived Helpers
    # ------------------------------------------------------------------------

    @property
    def width(self) -> int:
        return self.dimensions[0]

    @property
    def height(self) -> int:
        return self.dimensions[1]

    @property
    def area(self) -> int:
        """Total number of tiles."""
        width, height = self.dimensions
        return width * height

    @property
    def bomb_density(self) -> float:
        """Fraction of tiles holding a bomb, in [0, 1]."""
        return self.bomb_count / self.area

    @property
    def tiles_left(self) -> int:
        """Safe tiles still closed; 0 once every safe tile is open."""
        return self.area - self.bomb_count - self.opened

    @property
    def unflagged_bombs(self) -> int:
        """Bombs not yet accounted for by a flag (negative if over-flagged)."""
        return self.bomb_count - self.flagged

    @property
    def is_playing(self) -> bool:
        return self.game_state == GameState.PLAYING

    def render(self) -> FlatGrid[VisibleTile]:
        """
        Snapshot of every tile as a grid indexed [y, x].

        Returns:
            FlatGrid of VisibleTile with the board's dimensions.
        """
        width, height = self.dimensions
        board = FlatGrid(height, width, NOT_VISIBLE)
        for y in range(height):
            for x in range(width):
                board[y, x] = self.get_board_tile(x, y)
        return board

    def observation(self) -> np.ndarray:
        """
        Get board state as numpy array.

        Returns:
            2D int8 array of shape (height, width) where:
                -1 = closed
                -2 = flagged
                0-8 = open with neighbouring bomb count
                9 = open bomb
        """
        return self.render().to_array(VisibleTile.to_observation)
