"""
Move records and input events.

A move record holds everything needed to reverse one action on a board.
Input events are what a front end feeds into ``BaseGameBoard.do_event``.
"""
from dataclasses import dataclass
from enum import Enum, auto
from typing import Iterable, Optional, Tuple, Union


Coordinate = Tuple[int, int]


# ============================================================================
# Move Records
# ============================================================================

@dataclass(frozen=True)
class OpenCells:
    """
    Tiles opened by one action, as (x, y) coordinates.

    Holds the explicitly opened tiles and every tile the flood fill opened
    after them. Undoing the move closes exactly these tiles.
    """

    cells: Tuple[Coordinate, ...] = ()

    @classmethod
    def from_iterable(cls, cells: Iterable[Coordinate]) -> "OpenCells":
        return cls(tuple(cells))

    def __len__(self) -> int:
        return len(self.cells)

    def __contains__(self, cell: object) -> bool:
        return cell in self.cells


@dataclass(frozen=True)
class ToggleFlag:
    """A flag placed on or removed from the tile at (x, y)."""

    x: int
    y: int


GameBoardEvent = Union[OpenCells, ToggleFlag]


# ============================================================================
# Input Events
# ============================================================================

class InputKind(Enum):
    """
    Classes of input a board can receive.

    UNDO only appears in move logs; boards ignore it as an input.
    """

    PRIMARY = auto()
    SECONDARY = auto()
    PAUSE = auto()
    UNPAUSE = auto()
    IDLE = auto()
    UNDO = auto()

    @property
    def is_pointer(self) -> bool:
        return self in (InputKind.PRIMARY, InputKind.SECONDARY)

    @property
    def is_control(self) -> bool:
        return self in (InputKind.PAUSE, InputKind.UNPAUSE, InputKind.IDLE)


@dataclass(frozen=True)
class KeyEvent:
    """
    One input from a front end.

    Pointer inputs carry the (x, y) tile they target; control inputs
    (pause, unpause, idle) carry no coordinates.
    """

    kind: InputKind
    x: Optional[int] = None
    y: Optional[int] = None

    def __post_init__(self) -> None:
        if self.kind.is_pointer and (self.x is None or self.y is None):
            raise ValueError(f"{self.kind.name} input requires coordinates")

    @classmethod
    def primary(cls, x: int, y: int) -> "KeyEvent":
        return cls(InputKind.PRIMARY, x, y)

    @classmethod
    def secondary(cls, x: int, y: int) -> "KeyEvent":
        return cls(InputKind.SECONDARY, x, y)

    @classmethod
    def pause(cls) -> "KeyEvent":
        return cls(InputKind.PAUSE)

    @classmethod
    def unpause(cls) -> "KeyEvent":
        return cls(InputKind.UNPAUSE)

    @classmethod
    def idle(cls) -> "KeyEvent":
        return cls(InputKind.IDLE)
