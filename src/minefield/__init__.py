"""
Minesweeper board engine.

Provides the board contract and its implementations: the game board
engine, a lazily initialised board and a move-logging board.
"""
import logging

from .grid import FlatGrid
from .tiles import Tile, Visibility, BoardTile, VisibleTile, NOT_VISIBLE, FLAGGED
from .events import OpenCells, ToggleFlag, GameBoardEvent, InputKind, KeyEvent
from .errors import (
    MinefieldError,
    NewBoardError,
    BombOverflowError,
    ClearingOverflowError,
    ZeroDimensionError,
    SizeConstraintError,
    ClearingOutOfBoundsError,
    UnopenableError,
    BombHitError,
    AlreadyOpenError,
    FlaggedTileError,
    NotOpenError,
    OutOfBoundsError,
    FlagCountMismatchError,
    GameOverError,
    UndoError,
    UndoOutOfBoundsError,
    AlreadyClosedError,
    UndoFlagOnOpenError,
    GameNotFinishedError,
)
from .interface import BaseGameBoard, GameState, dispatch_event
from .board import (
    GameBoard,
    BoardConfig,
    validate_board,
    clearing_region,
    BEGINNER,
    INTERMEDIATE,
    EXPERT,
)
from .lazy import LazyGameBoard, PendingBoard
from .logged import LoggedGameBoard, LogFrame, KeyEventEffect
from .environment import MinesweeperEnv, make_vec_env

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "FlatGrid",
    "Tile",
    "Visibility",
    "BoardTile",
    "VisibleTile",
    "NOT_VISIBLE",
    "FLAGGED",
    "OpenCells",
    "ToggleFlag",
    "GameBoardEvent",
    "InputKind",
    "KeyEvent",
    "MinefieldError",
    "NewBoardError",
    "BombOverflowError",
    "ClearingOverflowError",
    "ZeroDimensionError",
    "SizeConstraintError",
    "ClearingOutOfBoundsError",
    "UnopenableError",
    "BombHitError",
    "AlreadyOpenError",
    "FlaggedTileError",
    "NotOpenError",
    "OutOfBoundsError",
    "FlagCountMismatchError",
    "GameOverError",
    "UndoError",
    "UndoOutOfBoundsError",
    "AlreadyClosedError",
    "UndoFlagOnOpenError",
    "GameNotFinishedError",
    "BaseGameBoard",
    "GameState",
    "dispatch_event",
    "GameBoard",
    "BoardConfig",
    "validate_board",
    "clearing_region",
    "BEGINNER",
    "INTERMEDIATE",
    "EXPERT",
    "LazyGameBoard",
    "PendingBoard",
    "LoggedGameBoard",
    "LogFrame",
    "KeyEventEffect",
    "MinesweeperEnv",
    "make_vec_env",
]
