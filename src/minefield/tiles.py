"""
Tile module for Minesweeper boards.

Represents the contents of a tile (hint count or bomb), its visibility
(closed/open/flagged), and the read-only view handed to callers.
"""
from dataclasses import dataclass
from enum import Enum, IntEnum, auto
from typing import Optional


# ============================================================================
# Constants
# ============================================================================

class Tile(IntEnum):
    """Contents of a tile: number of neighbouring bombs, or a bomb."""

    ZERO = 0
    ONE = 1
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    BOMB = 9

    @property
    def is_bomb(self) -> bool:
        """Check if tile is a bomb."""
        return self is Tile.BOMB

    def as_count(self) -> Optional[int]:
        """Return the neighbouring bomb count, or None for a bomb."""
        if self.is_bomb:
            return None
        return int(self)

    def as_str_count(self) -> str:
        """Single-width text form; blank for zero, B for a bomb."""
        if self is Tile.ZERO:
            return " "
        if self.is_bomb:
            return "B"
        return str(int(self))

    @classmethod
    def from_count(cls, count: int) -> "Tile":
        """
        Build a hint tile from a neighbour count.

        Raises:
            ValueError: If count is outside 0-8.
        """
        if not 0 <= count <= 8:
            raise ValueError(f"More than 8 bombs surrounding tile ({count})")
        return cls(count)


class Visibility(Enum):
    """Possible visual states of a tile."""

    NOT_VISIBLE = auto()
    VISIBLE = auto()
    FLAGGED = auto()


# ============================================================================
# Board Tile (internal storage)
# ============================================================================

@dataclass
class BoardTile:
    """
    A tile as stored by the board engine.

    Attributes:
        tile: Hint count or bomb, fixed once the board is populated.
        visible: Current visibility.
    """

    tile: Tile = Tile.ZERO
    visible: Visibility = Visibility.NOT_VISIBLE

    def swap_flag(self) -> bool:
        """
        Toggle flag on this tile.

        Returns:
            True if flag was toggled, False if tile is open.
        """
        if self.visible == Visibility.VISIBLE:
            return False
        if self.visible == Visibility.NOT_VISIBLE:
            self.visible = Visibility.FLAGGED
        else:
            self.visible = Visibility.NOT_VISIBLE
        return True

    @property
    def is_hidden(self) -> bool:
        return self.visible == Visibility.NOT_VISIBLE

    @property
    def is_open(self) -> bool:
        return self.visible == Visibility.VISIBLE

    @property
    def is_flagged(self) -> bool:
        return self.visible == Visibility.FLAGGED

    def to_visible(self) -> "VisibleTile":
        """Public view of this tile."""
        if self.visible == Visibility.VISIBLE:
            return VisibleTile.visible(self.tile)
        if self.visible == Visibility.FLAGGED:
            return FLAGGED
        return NOT_VISIBLE


# ============================================================================
# Visible Tile (public view)
# ============================================================================

@dataclass(frozen=True)
class VisibleTile:
    """
    What a player may know about a tile.

    The tile contents are only present once the tile is open.
    """

    visibility: Visibility
    tile: Optional[Tile] = None

    @classmethod
    def visible(cls, tile: Tile) -> "VisibleTile":
        return cls(Visibility.VISIBLE, tile)

    @property
    def is_hidden(self) -> bool:
        return self.visibility == Visibility.NOT_VISIBLE

    @property
    def is_open(self) -> bool:
        return self.visibility == Visibility.VISIBLE

    @property
    def is_flagged(self) -> bool:
        return self.visibility == Visibility.FLAGGED

    def to_observation(self) -> int:
        """
        Convert tile to observation value.

        Returns:
            -1: Closed tile
            -2: Flagged tile
            0-8: Open tile with neighbouring bomb count
            9: Open bomb
        """
        if self.visibility == Visibility.NOT_VISIBLE:
            return -1
        if self.visibility == Visibility.FLAGGED:
            return -2
        return int(self.tile)


NOT_VISIBLE = VisibleTile(Visibility.NOT_VISIBLE)
FLAGGED = VisibleTile(Visibility.FLAGGED)
