"""
Logged game board.

Wraps a board and records every successful move, with the time it was
played relative to the start of the game, in an append-only log.
"""
import logging
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Iterator, List, Optional, Tuple

from .board import GameBoard
from .events import GameBoardEvent, InputKind, KeyEvent
from .grid import FlatGrid
from .interface import BaseGameBoard, GameState, dispatch_event
from .tiles import VisibleTile

logger = logging.getLogger(__name__)

BoardFactory = Callable[[int, int, int, int, int], BaseGameBoard]


# ============================================================================
# Log Entries
# ============================================================================

@dataclass(frozen=True)
class KeyEventEffect:
    """
    An input together with the effect it had on the board.

    Pointer and undo inputs carry the move record; control inputs
    (pause, unpause, idle) carry neither coordinates nor a record.
    """

    kind: InputKind
    x: Optional[int] = None
    y: Optional[int] = None
    event: Optional[GameBoardEvent] = None

    @property
    def is_control(self) -> bool:
        return self.kind.is_control


@dataclass(frozen=True)
class LogFrame:
    """One entry of the move log."""

    time_offset_micros: int
    trace: KeyEventEffect


# ============================================================================
# Logged Board
# ============================================================================

class LoggedGameBoard(BaseGameBoard):
    """
    Board that logs every move played against an inner board.

    Boards built with start_new log their opening move as the first frame.
    Inner board errors propagate unchanged and are never logged.
    """

    def __init__(
        self,
        board: BaseGameBoard,
        clock: Callable[[], int] = time.monotonic_ns,
    ) -> None:
        """
        Wrap an existing board without playing an opening move.

        Args:
            board: Board to delegate to.
            clock: Monotonic clock in nanoseconds.
        """
        self.start_time = datetime.now(timezone.utc)
        self._clock = clock
        self._start_ns = clock()
        self._board = board
        self._frames: List[LogFrame] = []
        self._opening: Optional[GameBoardEvent] = None

    @classmethod
    def start_new(
        cls,
        width: int,
        height: int,
        mines: int,
        opening_x: int,
        opening_y: int,
        factory: BoardFactory = GameBoard.with_clearing,
        clock: Callable[[], int] = time.monotonic_ns,
    ) -> "LoggedGameBoard":
        """
        Build a board with a clearing and play the opening move.

        Args:
            width: Number of columns.
            height: Number of rows.
            mines: Number of bombs.
            opening_x: Column of the opening move.
            opening_y: Row of the opening move.
            factory: Builds the inner board around the opening.
            clock: Monotonic clock in nanoseconds.

        Raises:
            NewBoardError: If the configuration is invalid.
        """
        board = cls(factory(width, height, mines, opening_x, opening_y), clock)
        board._opening = board.open_tile(opening_x, opening_y)
        return board

    @classmethod
    def with_clearing(
        cls,
        width: int,
        height: int,
        mines: int,
        clear_x: int,
        clear_y: int,
    ) -> "LoggedGameBoard":
        return cls.start_new(width, height, mines, clear_x, clear_y)

    # ========================================================================
    # Log
    # ========================================================================

    def elapsed_micros(self) -> int:
        """Microseconds since the log started."""
        return (self._clock() - self._start_ns) // 1000

    def _record(
        self,
        kind: InputKind,
        x: Optional[int] = None,
        y: Optional[int] = None,
        event: Optional[GameBoardEvent] = None,
    ) -> None:
        frame = LogFrame(self.elapsed_micros(), KeyEventEffect(kind, x, y, event))
        self._frames.append(frame)
        logger.debug("Logged %s at %d us", kind.name, frame.time_offset_micros)

    @property
    def frames(self) -> Tuple[LogFrame, ...]:
        return tuple(self._frames)

    @property
    def board(self) -> BaseGameBoard:
        return self._board

    def moves(self) -> Iterator[Tuple[InputKind, GameBoardEvent]]:
        """
        Iterate over the moves in the log, oldest first.

        Yields:
            (kind, record) pairs. An UNDO kind means the record was undone,
            so replaying the pairs in order rebuilds the board.
        """
        for frame in self._frames:
            if frame.trace.event is not None:
                yield frame.trace.kind, frame.trace.event

    def opening_move(self) -> Optional[GameBoardEvent]:
        return self._opening

    # ========================================================================
    # Commands
    # ========================================================================

    def open_tile(self, x: int, y: int) -> GameBoardEvent:
        event = self._board.open_tile(x, y)
        self._record(InputKind.PRIMARY, x, y, event)
        return event

    def open_around(self, x: int, y: int) -> GameBoardEvent:
        event = self._board.open_around(x, y)
        self._record(InputKind.PRIMARY, x, y, event)
        return event

    def flag_tile(self, x: int, y: int) -> GameBoardEvent:
        event = self._board.flag_tile(x, y)
        self._record(InputKind.SECONDARY, x, y, event)
        return event

    def undo_move(self, event: GameBoardEvent) -> None:
        self._board.undo_move(event)
        self._record(InputKind.UNDO, event=event)

    def lose_game(self) -> None:
        self._board.lose_game()

    def win_game(self) -> None:
        self._board.win_game()

    def do_event(self, event: KeyEvent) -> Optional[GameBoardEvent]:
        """
        Process an input, logging control inputs as control frames.

        Pointer inputs go through dispatch_event to this board's commands,
        which log them when they succeed.
        """
        if event.kind.is_control:
            self._record(event.kind)
            return None
        return dispatch_event(self, event)

    # ========================================================================
    # Queries
    # ========================================================================

    @property
    def dimensions(self) -> Tuple[int, int]:
        return self._board.dimensions

    @property
    def bomb_count(self) -> int:
        return self._board.bomb_count

    @property
    def opened(self) -> int:
        return self._board.opened

    @property
    def flagged(self) -> int:
        return self._board.flagged

    @property
    def game_state(self) -> GameState:
        return self._board.game_state

    def get_board_tile(self, x: int, y: int) -> Optional[VisibleTile]:
        return self._board.get_board_tile(x, y)

    def render(self) -> FlatGrid[VisibleTile]:
        return self._board.render()
