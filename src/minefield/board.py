"""
Board module for Minesweeper.

Implements the game board engine: configuration validation, bomb
placement with a guaranteed-safe clearing, tile opening with flood fill,
chorded opens, flagging and undo.
"""
import logging
from collections import deque
from dataclasses import dataclass
from typing import Iterable, List, Optional, Sequence, Tuple

import numpy as np

from .errors import (
    AlreadyClosedError,
    AlreadyOpenError,
    BombHitError,
    BombOverflowError,
    ClearingOutOfBoundsError,
    ClearingOverflowError,
    FlagCountMismatchError,
    FlaggedTileError,
    GameNotFinishedError,
    GameOverError,
    NotOpenError,
    OutOfBoundsError,
    SizeConstraintError,
    UndoFlagOnOpenError,
    UndoOutOfBoundsError,
    ZeroDimensionError,
)
from .events import Coordinate, GameBoardEvent, OpenCells, ToggleFlag
from .grid import FlatGrid
from .interface import BaseGameBoard, GameState
from .tiles import BoardTile, Tile, VisibleTile, Visibility

logger = logging.getLogger(__name__)


# ============================================================================
# Constants
# ============================================================================

MAX_DIMENSION = 10_000
MAX_MINES = 100_000_000


# ============================================================================
# Neighbour Utilities
# ============================================================================

def clearing_region(
    x: int, y: int, width: int, height: int
) -> List[Coordinate]:
    """
    Get the in-bounds neighbours of a tile.

    Args:
        x: Column of center tile.
        y: Row of center tile.
        width: Board width.
        height: Board height.

    Returns:
        List of (x, y) tuples for the up-to-8 neighbours, origin excluded.
    """
    neighbours = []
    for delta_y in (-1, 0, 1):
        for delta_x in (-1, 0, 1):
            if delta_x == 0 and delta_y == 0:
                continue
            new_x = x + delta_x
            new_y = y + delta_y
            if 0 <= new_x < width and 0 <= new_y < height:
                neighbours.append((new_x, new_y))
    return neighbours


def neighbour_counts(mines: np.ndarray) -> np.ndarray:
    """
    Count the bombs around every tile of a boolean layout.

    Args:
        mines: Boolean array of shape (height, width).

    Returns:
        int8 array of the same shape with each tile's neighbour count.
    """
    height, width = mines.shape
    padded = np.pad(mines.astype(np.int8), 1)
    counts = np.zeros((height, width), dtype=np.int8)
    for delta_y in (-1, 0, 1):
        for delta_x in (-1, 0, 1):
            if delta_x == 0 and delta_y == 0:
                continue
            counts += padded[
                1 + delta_y:1 + delta_y + height,
                1 + delta_x:1 + delta_x + width,
            ]
    return counts


# ============================================================================
# Validation
# ============================================================================

def validate_board(
    width: int,
    height: int,
    mines: int,
    has_clearing: bool = False,
    clearing: Optional[Coordinate] = None,
) -> None:
    """
    Check a board configuration before paying for allocation.

    If this returns without raising, constructing a board from the same
    arguments cannot fail.

    Args:
        width: Number of columns.
        height: Number of rows.
        mines: Number of bombs.
        has_clearing: Whether the board must host a mine-free clearing.
        clearing: Known (x, y) origin of the clearing, if any. Without one
            the largest possible clearing is assumed.

    Raises:
        SizeConstraintError: Dimension above 10k or more than 100m bombs.
        BombOverflowError: Negative bomb count or more bombs than tiles.
        ZeroDimensionError: A dimension is zero or negative.
        ClearingOutOfBoundsError: The clearing origin is off the board.
        ClearingOverflowError: Not enough safe tiles to leave a clearing.
    """
    if width > MAX_DIMENSION or height > MAX_DIMENSION or mines > MAX_MINES:
        raise SizeConstraintError()
    if width <= 0 or height <= 0:
        raise ZeroDimensionError()
    area = width * height
    if mines < 0 or mines > area:
        raise BombOverflowError()

    if clearing is not None:
        clear_x, clear_y = clearing
        if not (0 <= clear_x < width and 0 <= clear_y < height):
            raise ClearingOutOfBoundsError()
        protected = len(clearing_region(clear_x, clear_y, width, height)) + 1
    elif has_clearing:
        protected = min(width, 3) * min(height, 3)
    else:
        return

    if area - mines < protected:
        raise ClearingOverflowError()


# ============================================================================
# Configuration
# ============================================================================

@dataclass(frozen=True)
class BoardConfig:
    """
    Configuration for a Minesweeper board.

    Attributes:
        width: Number of columns.
        height: Number of rows.
        num_mines: Total mines to place.
    """

    width: int = 9
    height: int = 9
    num_mines: int = 10

    def __post_init__(self) -> None:
        """Validate configuration; it must leave room for a first-move clearing."""
        validate_board(self.width, self.height, self.num_mines, has_clearing=True)

    @property
    def area(self) -> int:
        return self.width * self.height


# Preset difficulty levels
BEGINNER = BoardConfig(9, 9, 10)
INTERMEDIATE = BoardConfig(16, 16, 40)
EXPERT = BoardConfig(30, 16, 99)


# ============================================================================
# Board Class
# ============================================================================

class GameBoard(BaseGameBoard):
    """
    Minesweeper game board engine.

    Owns a FlatGrid of BoardTile indexed [y, x]. Every command either
    raises without touching the board or applies completely.
    """

    def __init__(
        self,
        width: int,
        height: int,
        mines: int,
        rng: Optional[np.random.Generator] = None,
    ) -> None:
        """
        Create a blank board: every tile a closed zero, bombs not placed.

        Args:
            width: Number of columns.
            height: Number of rows.
            mines: Number of bombs to place when populated.
            rng: Random generator used for placement.
        """
        validate_board(width, height, mines)
        self._bombs = mines
        self._board: FlatGrid[BoardTile] = FlatGrid.build(height, width, BoardTile)
        self._rng = rng if rng is not None else np.random.default_rng()
        self._opened = 0
        self._flagged = 0
        self._game_state = GameState.PLAYING

    # ========================================================================
    # Constructors
    # ========================================================================

    @classmethod
    def blank(cls, width: int, height: int, mines: int) -> "GameBoard":
        """Board with every tile a closed zero and no bombs placed yet."""
        return cls(width, height, mines)

    @classmethod
    def new(
        cls,
        width: int,
        height: int,
        mines: int,
        rng: Optional[np.random.Generator] = None,
    ) -> "GameBoard":
        """Generate a uniformly random board with no guaranteed clearing."""
        board = cls(width, height, mines, rng)
        board.populate()
        return board

    @classmethod
    def with_clearing(
        cls,
        width: int,
        height: int,
        mines: int,
        clear_x: int,
        clear_y: int,
        rng: Optional[np.random.Generator] = None,
    ) -> "GameBoard":
        """Generate a board whose 3x3 region around the clearing is mine-free."""
        validate_board(width, height, mines, True, (clear_x, clear_y))
        board = cls(width, height, mines, rng)
        board.populate_without(clear_x, clear_y)
        return board

    @classmethod
    def with_density(
        cls,
        width: int,
        height: int,
        density: float,
        rng: Optional[np.random.Generator] = None,
    ) -> "GameBoard":
        """
        Generate a board with a bomb density in [0, 1].

        Raises:
            BombOverflowError: If density is outside [0, 1].
        """
        if not 0.0 <= density <= 1.0:
            raise BombOverflowError(f"bomb density {density} is outside [0, 1]")
        mines = int(width * height * density + 0.5)
        return cls.new(width, height, mines, rng)

    @classmethod
    def from_config(
        cls,
        config: BoardConfig,
        clearing: Optional[Coordinate] = None,
        rng: Optional[np.random.Generator] = None,
    ) -> "GameBoard":
        """Build a board from a BoardConfig, with a clearing if one is given."""
        if clearing is None:
            return cls.new(config.width, config.height, config.num_mines, rng)
        return cls.with_clearing(
            config.width, config.height, config.num_mines, *clearing, rng=rng
        )

    @classmethod
    def from_layout(cls, mines: Sequence[Sequence[bool]]) -> "GameBoard":
        """
        Build a board with bombs at fixed positions.

        Args:
            mines: Boolean rows, ``mines[y][x]`` True where a bomb sits.

        Returns:
            Populated board with every tile closed.
        """
        layout = np.asarray(mines, dtype=bool)
        if layout.ndim != 2:
            raise ZeroDimensionError("layout must be a 2D array of rows")
        height, width = layout.shape
        board = cls(width, height, int(layout.sum()))
        board._implant(layout.ravel())
        return board

    # ========================================================================
    # Bomb Placement (Low-level)
    # ========================================================================

    def _flatten(self, x: int, y: int) -> int:
        return y * self._board.width + x

    def _shuffled_bombs(self) -> np.ndarray:
        """Exactly bomb_count True values padded to the area, shuffled."""
        bombs = np.zeros(self.area, dtype=bool)
        bombs[:self._bombs] = True
        self._rng.shuffle(bombs)
        self._rng.shuffle(bombs)
        return bombs

    def _implant(self, bombs: np.ndarray) -> None:
        """Stamp a flat bomb layout onto the grid and compute hints."""
        layout = bombs.reshape(self._board.height, self._board.width)
        counts = neighbour_counts(layout)
        tiles = zip(self._board.iter_backing(), layout.flat, counts.flat)
        for board_tile, is_bomb, count in tiles:
            board_tile.tile = Tile.BOMB if is_bomb else Tile.from_count(int(count))

    def populate(self) -> None:
        """Place bombs uniformly at random and compute hints."""
        self._implant(self._shuffled_bombs())

    def populate_without(
        self, x: int, y: int, max_reroute_passes: Optional[int] = None
    ) -> None:
        """
        Place bombs at random, keeping the 3x3 region around (x, y) clear.

        Bombs landing in the protected region are swapped with a uniformly
        random tile of the whole board, and the region is rescanned until
        a pass finds no bomb in it.

        Args:
            x: Column of the clearing origin.
            y: Row of the clearing origin.
            max_reroute_passes: Optional cap on reroute passes. A layout
                that is clear after the last allowed pass is accepted.

        Raises:
            ClearingOverflowError: If the board cannot hold the clearing.
            RuntimeError: If the region still holds a bomb after the
                allowed passes.
        """
        width, height = self.dimensions
        protected = [
            self._flatten(px, py) for px, py in clearing_region(x, y, width, height)
        ]
        protected.append(self._flatten(x, y))

        if self.area - self._bombs < len(protected):
            raise ClearingOverflowError()

        bombs = self._shuffled_bombs()
        passes = 0
        while bombs[protected].any():
            if max_reroute_passes is not None and passes >= max_reroute_passes:
                raise RuntimeError(
                    f"bomb reroute did not converge after {passes} passes"
                )
            self._reroute(bombs, protected)
            passes += 1

        logger.debug(
            "Placed %d bombs around clearing (%d, %d) after %d reroute passes",
            self._bombs, x, y, passes,
        )
        self._implant(bombs)

    def _reroute(self, bombs: np.ndarray, protected: List[int]) -> None:
        """Swap every protected bomb with a uniformly random tile."""
        for index in protected:
            if bombs[index]:
                target = int(self._rng.integers(self.area))
                bombs[index], bombs[target] = bombs[target], bombs[index]

    # ========================================================================
    # Tile Access
    # ========================================================================

    def clearing(self, x: int, y: int) -> List[Coordinate]:
        """In-bounds neighbours of (x, y)."""
        width, height = self.dimensions
        return clearing_region(x, y, width, height)

    def _tile_or_unopenable(self, x: int, y: int) -> BoardTile:
        tile = self._board.get(y, x)
        if tile is None:
            raise OutOfBoundsError(f"tile ({x}, {y}) is out of bounds")
        return tile

    def _ensure_playing(self) -> None:
        if self._game_state != GameState.PLAYING:
            raise GameOverError()

    def _open(self, x: int, y: int) -> None:
        self._board[y, x].visible = Visibility.VISIBLE
        self._opened += 1

    # ========================================================================
    # Flood Fill
    # ========================================================================

    def _flood_fill(self, seeds: Iterable[Coordinate]) -> List[Coordinate]:
        """
        Open every closed tile reachable through open zero tiles.

        Args:
            seeds: Open tiles to start from.

        Returns:
            Coordinates opened, in the order they were opened.
        """
        frontier = deque(seeds)
        opened: List[Coordinate] = []
        while frontier:
            x, y = frontier.popleft()
            if self._board[y, x].tile != Tile.ZERO:
                continue
            # a zero tile has no bomb neighbours
            for nx, ny in self.clearing(x, y):
                if self._board[ny, nx].is_hidden:
                    self._open(nx, ny)
                    opened.append((nx, ny))
                    frontier.append((nx, ny))
        return opened

    def open_visible(self) -> List[Coordinate]:
        """
        Flood-fill from every open zero tile on the board.

        Returns:
            Coordinates opened; empty when the board is already settled.
        """
        width, height = self.dimensions
        seeds = [
            (x, y)
            for y in range(height)
            for x in range(width)
            if self._board[y, x].is_open and self._board[y, x].tile == Tile.ZERO
        ]
        return self._flood_fill(seeds)

    # ========================================================================
    # Game Actions
    # ========================================================================

    def open_tile(self, x: int, y: int) -> OpenCells:
        """
        Open a closed tile and flood-fill from it.

        Args:
            x: Column to open.
            y: Row to open.

        Returns:
            OpenCells with the tile itself followed by every flood-filled tile.

        Raises:
            GameOverError: The game has ended.
            OutOfBoundsError: The tile is off the board.
            AlreadyOpenError: The tile is open.
            FlaggedTileError: The tile is flagged.
            BombHitError: The tile is a bomb; the board is left unchanged.
        """
        self._ensure_playing()
        tile = self._tile_or_unopenable(x, y)
        if tile.is_open:
            raise AlreadyOpenError()
        if tile.is_flagged:
            raise FlaggedTileError()
        if tile.tile.is_bomb:
            raise BombHitError()

        self._open(x, y)
        opened = [(x, y)]
        opened.extend(self._flood_fill(opened))
        return OpenCells.from_iterable(opened)

    def open_around(self, x: int, y: int) -> OpenCells:
        """
        Chord: open all closed, unflagged neighbours of an open tile.

        The number of flagged neighbours must equal the tile's hint. If any
        tile that would open is a bomb, nothing is opened.

        Args:
            x: Column of the tile.
            y: Row of the tile.

        Returns:
            OpenCells with every newly opened tile (origin excluded).

        Raises:
            GameOverError: The game has ended.
            OutOfBoundsError: The tile is off the board.
            BombHitError: The tile or one of the tiles to open is a bomb.
            FlaggedTileError: The tile is flagged.
            NotOpenError: The tile is closed.
            FlagCountMismatchError: Flag count differs from the hint.
        """
        self._ensure_playing()
        target = self._tile_or_unopenable(x, y)
        count = target.tile.as_count()
        if count is None:
            raise BombHitError()
        # a closed tile's hint is not public
        if target.is_flagged:
            raise FlaggedTileError()
        if target.is_hidden:
            raise NotOpenError()

        neighbours = self.clearing(x, y)
        flags = sum(1 for nx, ny in neighbours if self._board[ny, nx].is_flagged)
        if flags != count:
            raise FlagCountMismatchError(
                f"tile ({x}, {y}) shows {count} but has {flags} flagged neighbours"
            )

        to_open = [(nx, ny) for nx, ny in neighbours if self._board[ny, nx].is_hidden]
        if any(self._board[ny, nx].tile.is_bomb for nx, ny in to_open):
            raise BombHitError()

        for nx, ny in to_open:
            self._open(nx, ny)
        opened = to_open + self._flood_fill(to_open)
        return OpenCells.from_iterable(opened)

    def flag_tile(self, x: int, y: int) -> ToggleFlag:
        """
        Toggle flag on a closed tile.

        Raises:
            GameOverError: The game has ended.
            OutOfBoundsError: The tile is off the board.
            AlreadyOpenError: The tile is open.
        """
        self._ensure_playing()
        tile = self._tile_or_unopenable(x, y)
        was_flagged = tile.is_flagged
        if not tile.swap_flag():
            raise AlreadyOpenError()
        self._flagged += -1 if was_flagged else 1
        return ToggleFlag(x, y)

    def undo_move(self, event: GameBoardEvent) -> None:
        """
        Reverse a move record.

        An OpenCells record is checked in full before any tile closes, so a
        failed undo leaves the board unchanged.

        Raises:
            UndoOutOfBoundsError: A coordinate is off the board.
            UndoFlagOnOpenError: The flagged tile has since been opened.
            AlreadyClosedError: A tile of the record is not open.
        """
        if isinstance(event, ToggleFlag):
            tile = self._board.get(event.y, event.x)
            if tile is None:
                raise UndoOutOfBoundsError()
            was_flagged = tile.is_flagged
            if not tile.swap_flag():
                raise UndoFlagOnOpenError()
            self._flagged += -1 if was_flagged else 1
            return

        if isinstance(event, OpenCells):
            tiles = []
            for x, y in dict.fromkeys(event.cells):
                tile = self._board.get(y, x)
                if tile is None:
                    raise UndoOutOfBoundsError()
                if not tile.is_open:
                    raise AlreadyClosedError(f"tile ({x}, {y}) is not open")
                tiles.append(tile)
            for tile in tiles:
                tile.visible = Visibility.NOT_VISIBLE
            self._opened -= len(tiles)
            return

        raise TypeError(f"cannot undo {event!r}")

    def lose_game(self) -> None:
        self._game_state = GameState.LOST
        logger.info("Game lost with %d safe tiles left", self.tiles_left)

    def win_game(self) -> None:
        if self.tiles_left:
            raise GameNotFinishedError(self.tiles_left)
        self._game_state = GameState.WON
        logger.info("Game won on a %dx%d board", *self.dimensions)

    # ========================================================================
    # State Accessors
    # ========================================================================

    @property
    def dimensions(self) -> Tuple[int, int]:
        return self._board.width, self._board.height

    @property
    def bomb_count(self) -> int:
        return self._bombs

    @property
    def opened(self) -> int:
        return self._opened

    @property
    def flagged(self) -> int:
        return self._flagged

    @property
    def game_state(self) -> GameState:
        return self._game_state

    def get_board_tile(self, x: int, y: int) -> Optional[VisibleTile]:
        """Get the public view of a tile, or None if invalid."""
        tile = self._board.get(y, x)
        if tile is None:
            return None
        return tile.to_visible()

    def render(self) -> FlatGrid[VisibleTile]:
        return self._board.map(BoardTile.to_visible)

    def mine_layout(self) -> np.ndarray:
        """Boolean array of shape (height, width), True where a bomb sits."""
        return self._board.to_array(lambda tile: tile.tile.is_bomb, dtype=bool)

    def __repr__(self) -> str:
        width, height = self.dimensions
        return (
            f"GameBoard(width={width}, height={height}, bombs={self._bombs}, "
            f"state={self._game_state.name})"
        )
