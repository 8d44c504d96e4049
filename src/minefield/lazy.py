"""
Lazily initialised game board.

Wraps a board that can only be built once the first move is known, so the
first move always lands in a mine-free clearing.
"""
import logging
from dataclasses import dataclass
from typing import Callable, Optional, Tuple, Union

from .board import GameBoard, validate_board
from .errors import (
    AlreadyClosedError,
    GameNotFinishedError,
    NewBoardError,
    OutOfBoundsError,
)
from .events import GameBoardEvent, KeyEvent
from .grid import FlatGrid
from .interface import BaseGameBoard, GameState, dispatch_event
from .tiles import NOT_VISIBLE, VisibleTile

logger = logging.getLogger(__name__)

BoardFactory = Callable[[int, int, int, int, int], BaseGameBoard]


@dataclass(frozen=True)
class PendingBoard:
    """Configuration of a board that has not been built yet."""

    width: int
    height: int
    mines: int

    def contains(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height


class LazyGameBoard(BaseGameBoard):
    """
    Board that is built on the first move played against it.

    The state is either a PendingBoard or the live board, never both. The
    first open/flag command builds the live board with that command's tile
    as the clearing origin, then runs the command on it.
    """

    def __init__(
        self,
        state: Union[PendingBoard, BaseGameBoard],
        factory: BoardFactory = GameBoard.with_clearing,
    ) -> None:
        self._state = state
        self._factory = factory

    @classmethod
    def new_uninit(
        cls,
        width: int,
        height: int,
        mines: int,
        factory: BoardFactory = GameBoard.with_clearing,
    ) -> "LazyGameBoard":
        """
        Create a pending board.

        The configuration is validated as if a clearing were already
        requested, so building it on the first move cannot fail.

        Raises:
            NewBoardError: If the configuration is invalid.
        """
        validate_board(width, height, mines, has_clearing=True)
        return cls(PendingBoard(width, height, mines), factory)

    @classmethod
    def with_clearing(
        cls,
        width: int,
        height: int,
        mines: int,
        clear_x: int,
        clear_y: int,
        factory: BoardFactory = GameBoard.with_clearing,
    ) -> "LazyGameBoard":
        """Create an already initialised board."""
        return cls(factory(width, height, mines, clear_x, clear_y), factory)

    # ========================================================================
    # State
    # ========================================================================

    @property
    def state(self) -> Union[PendingBoard, BaseGameBoard]:
        return self._state

    @property
    def is_initialized(self) -> bool:
        return not isinstance(self._state, PendingBoard)

    def _init_with(self, x: int, y: int) -> Tuple[BaseGameBoard, bool]:
        """
        Return the live board, building it around (x, y) if still pending.

        Returns:
            (board, built) where built is True if this call built it.

        Raises:
            OutOfBoundsError: If the board is pending and (x, y) is off it.
        """
        state = self._state
        if not isinstance(state, PendingBoard):
            return state, False
        if not state.contains(x, y):
            raise OutOfBoundsError(f"tile ({x}, {y}) is out of bounds")

        try:
            board = self._factory(state.width, state.height, state.mines, x, y)
        except NewBoardError as exc:
            raise RuntimeError(
                f"validated board {state} could not be built around ({x}, {y})"
            ) from exc

        logger.debug("Initialised %dx%d board around (%d, %d)",
                     state.width, state.height, x, y)
        self._state = board
        return board, True

    # ========================================================================
    # Commands
    # ========================================================================

    def open_tile(self, x: int, y: int) -> GameBoardEvent:
        board, built = self._init_with(x, y)
        if built:
            opening = board.opening_move()
            if opening is not None:
                return opening
        return board.open_tile(x, y)

    def open_around(self, x: int, y: int) -> GameBoardEvent:
        board, _ = self._init_with(x, y)
        return board.open_around(x, y)

    def flag_tile(self, x: int, y: int) -> GameBoardEvent:
        board, _ = self._init_with(x, y)
        return board.flag_tile(x, y)

    def undo_move(self, event: GameBoardEvent) -> None:
        if isinstance(self._state, PendingBoard):
            raise AlreadyClosedError("board has not been initialised")
        self._state.undo_move(event)

    def lose_game(self) -> None:
        if not isinstance(self._state, PendingBoard):
            self._state.lose_game()

    def win_game(self) -> None:
        if isinstance(self._state, PendingBoard):
            raise GameNotFinishedError(self.tiles_left)
        self._state.win_game()

    def do_event(self, event: KeyEvent) -> Optional[GameBoardEvent]:
        if isinstance(self._state, PendingBoard):
            return dispatch_event(self, event)
        return self._state.do_event(event)

    def opening_move(self) -> Optional[GameBoardEvent]:
        if isinstance(self._state, PendingBoard):
            return None
        return self._state.opening_move()

    # ========================================================================
    # Queries
    # ========================================================================

    @property
    def dimensions(self) -> Tuple[int, int]:
        if isinstance(self._state, PendingBoard):
            return self._state.width, self._state.height
        return self._state.dimensions

    @property
    def bomb_count(self) -> int:
        if isinstance(self._state, PendingBoard):
            return self._state.mines
        return self._state.bomb_count

    @property
    def opened(self) -> int:
        if isinstance(self._state, PendingBoard):
            return 0
        return self._state.opened

    @property
    def flagged(self) -> int:
        if isinstance(self._state, PendingBoard):
            return 0
        return self._state.flagged

    @property
    def game_state(self) -> GameState:
        if isinstance(self._state, PendingBoard):
            return GameState.PLAYING
        return self._state.game_state

    def get_board_tile(self, x: int, y: int) -> Optional[VisibleTile]:
        if isinstance(self._state, PendingBoard):
            return NOT_VISIBLE if self._state.contains(x, y) else None
        return self._state.get_board_tile(x, y)

    def render(self) -> FlatGrid[VisibleTile]:
        if isinstance(self._state, PendingBoard):
            return FlatGrid(self._state.height, self._state.width, NOT_VISIBLE)
        return self._state.render()

    def __repr__(self) -> str:
        return f"LazyGameBoard({self._state!r})"
