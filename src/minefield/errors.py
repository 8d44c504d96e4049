"""
Errors raised by Minesweeper boards.

Three families: configuration errors when building a board, move errors
returned by open/flag commands, and undo errors when a move record no
longer matches the board.
"""


class MinefieldError(Exception):
    """Base class for every board error."""

    message = "minefield error"

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.message)


# ============================================================================
# Configuration Errors
# ============================================================================

class NewBoardError(MinefieldError, ValueError):
    """Building a new board failed; the configuration must change."""

    message = "invalid board configuration"


class BombOverflowError(NewBoardError):
    message = (
        "the count of bombs was greater than the size of the board, "
        "or was negative"
    )


class ClearingOverflowError(BombOverflowError):
    message = "too many mines for this board to leave a clearing"


class ZeroDimensionError(NewBoardError):
    message = "one or more passed dimensions was zero"


class SizeConstraintError(NewBoardError):
    message = (
        "exceeded one or more dimensional limits "
        "(10k max x/y, 100m max bombs)"
    )


class ClearingOutOfBoundsError(SizeConstraintError):
    message = "clearing zone was out of bounds"


# ============================================================================
# Move Errors
# ============================================================================

class UnopenableError(MinefieldError):
    """A move could not be played. Expected during normal play."""

    message = "this move cannot be played"


class BombHitError(UnopenableError):
    message = "a bomb was under this tile"


class AlreadyOpenError(UnopenableError):
    message = "this tile is already open"


class FlaggedTileError(UnopenableError):
    message = "this tile is flagged"


class NotOpenError(UnopenableError):
    message = "this tile is not open"


class OutOfBoundsError(UnopenableError):
    message = "this tile is out of bounds"


class FlagCountMismatchError(UnopenableError):
    message = "flag count does not match count of tile"


class GameOverError(UnopenableError):
    message = "game has already ended"


# ============================================================================
# Undo Errors
# ============================================================================

class UndoError(MinefieldError):
    """A move record could not be undone; log and board are out of sync."""

    message = "this move cannot be undone"


class UndoOutOfBoundsError(UndoError):
    message = "a tile is out of bounds"


class AlreadyClosedError(UndoError):
    message = "this tile is already closed, cannot unopen"


class UndoFlagOnOpenError(UndoError):
    message = "this tile is open, cannot toggle flag"


# ============================================================================
# Game State Errors
# ============================================================================

class GameNotFinishedError(MinefieldError):
    """Raised when a game is declared won while safe tiles remain closed."""

    message = "safe tiles remain closed"

    def __init__(self, tiles_left: int) -> None:
        super().__init__(f"{tiles_left} safe tiles remain closed")
        self.tiles_left = tiles_left
