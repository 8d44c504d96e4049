"""
Grid storage module.

Provides a fixed-size, row-major dense container addressed by
(row, col), with bounds-checked accessors for untrusted indices.
"""
import sys
from typing import Callable, Generic, Iterator, List, Optional, Tuple, TypeVar, Union

import numpy as np


T = TypeVar("T")
U = TypeVar("U")


# ============================================================================
# Flat Grid
# ============================================================================

class FlatGrid(Generic[T]):
    """
    Dense 2D grid backed by a single flat list.

    Cell (row, col) lives at index ``row * width + col``. Row views are
    computed on demand and never stored.

    Attributes:
        height: Number of rows.
        width: Number of columns.
    """

    def __init__(self, height: int, width: int, fill: T) -> None:
        """
        Create a grid where every cell holds ``fill``.

        The same object is stored in every cell, so ``fill`` should be
        immutable. Use :meth:`build` for mutable cells.

        Args:
            height: Number of rows.
            width: Number of columns.
            fill: Value stored in every cell.
        """
        self.height = height
        self.width = width
        self._data: List[T] = [fill] * self.array_length(height, width)

    @classmethod
    def build(
        cls, height: int, width: int, factory: Callable[[], T]
    ) -> "FlatGrid[T]":
        """Create a grid calling ``factory`` once per cell."""
        grid = cls.__new__(cls)
        grid.height = height
        grid.width = width
        grid._data = [factory() for _ in range(cls.array_length(height, width))]
        return grid

    @staticmethod
    def array_length(height: int, width: int) -> int:
        """
        Compute the backing length for the given dimensions.

        Raises:
            ValueError: If a dimension is negative.
            OverflowError: If the product cannot be addressed.
        """
        if height < 0 or width < 0:
            raise ValueError(
                f"Grid dimensions cannot be negative ({height}x{width})"
            )
        length = height * width
        if length > sys.maxsize:
            raise OverflowError("array length overflowed the address space")
        return length

    # ========================================================================
    # Checked Access
    # ========================================================================

    def _in_bounds(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def get_row(self, row: int) -> Optional[List[T]]:
        """Return a copy of a row, or None if the row is out of range."""
        if not 0 <= row < self.height:
            return None
        start = row * self.width
        return self._data[start:start + self.width]

    def get(self, row: int, col: int) -> Optional[T]:
        """Return the value at (row, col), or None if out of range."""
        if not self._in_bounds(row, col):
            return None
        return self._data[row * self.width + col]

    # ========================================================================
    # Unchecked Access (programmer errors raise IndexError)
    # ========================================================================

    def _flat_index(self, row: int, col: int) -> int:
        if not self._in_bounds(row, col):
            raise IndexError(
                f"Index ({row}, {col}) out of bounds "
                f"(FlatGrid is {self.height}x{self.width})"
            )
        return row * self.width + col

    def __getitem__(self, key: Union[int, Tuple[int, int]]) -> Union[T, List[T]]:
        if isinstance(key, tuple):
            return self._data[self._flat_index(*key)]
        row = self.get_row(key)
        if row is None:
            raise IndexError(
                f"Row {key} out of bounds (FlatGrid has {self.height} rows)"
            )
        return row

    def __setitem__(self, key: Tuple[int, int], value: T) -> None:
        self._data[self._flat_index(*key)] = value

    # ========================================================================
    # Iteration
    # ========================================================================

    @property
    def dimensions(self) -> Tuple[int, int]:
        """(height, width) of the grid."""
        return self.height, self.width

    def __len__(self) -> int:
        return self.height

    def rows(self) -> Iterator[List[T]]:
        """Iterate over copies of each row in order."""
        for row in range(self.height):
            start = row * self.width
            yield self._data[start:start + self.width]

    def iter_backing(self) -> Iterator[T]:
        """Iterate over every cell in row-major order."""
        return iter(self._data)

    def map(self, func: Callable[[T], U]) -> "FlatGrid[U]":
        """Return a new grid of the same shape with ``func`` applied."""
        grid: FlatGrid[U] = FlatGrid.__new__(FlatGrid)
        grid.height = self.height
        grid.width = self.width
        grid._data = [func(value) for value in self._data]
        return grid

    def to_array(
        self, convert: Callable[[T], int], dtype: type = np.int8
    ) -> np.ndarray:
        """
        Convert the grid to a 2D numpy array.

        Args:
            convert: Maps each cell to a number.
            dtype: Array dtype.

        Returns:
            Array of shape (height, width).
        """
        flat = np.fromiter(
            (convert(value) for value in self._data),
            dtype=dtype,
            count=len(self._data),
        )
        return flat.reshape(self.height, self.width)

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, FlatGrid):
            return NotImplemented
        return self.dimensions == other.dimensions and self._data == other._data

    def __repr__(self) -> str:
        return f"FlatGrid(height={self.height}, width={self.width})"
