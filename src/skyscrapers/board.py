"""Classes and functions for representing the game board."""

from array import array
from functools import lru_cache
from typing import Iterable, Sequence

import numpy as np

MAX_SIZE = 255
"""Largest supported board size (heights must fit in one byte)."""


class Board:
    """Store an N x N grid of heights as a 1D list, in row-major order.

    A cell holds 0 while unassigned, and a height in 1..N otherwise.  Contains support for
    both 1D and 2D (row, col) indexing.
    """

    def __init__(self, data: Iterable[int] | None, size: int) -> None:
        if not 0 <= size <= MAX_SIZE:
            raise ValueError(f"Board size must be between 0 and {MAX_SIZE}, got {size}.")
        self.data = array("B", bytes(size * size) if data is None else data)
        self.size = size
        if len(self.data) != size * size:
            raise ValueError(f"Board data has {len(self.data)} cells, expected {size * size}.")

    @classmethod
    def from_rows(cls, rows: Sequence[Sequence[int]]) -> "Board":
        """Build a board from a list of rows."""
        return cls((height for row in rows for height in row), len(rows))

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Board):
            return NotImplemented
        return self.size == other.size and self.data == other.data

    def __repr__(self) -> str:
        return f"Board.from_rows({self.rows()!r})"

    def __str__(self) -> str:
        """Returns the board as whitespace-separated rows, one row per line."""
        return "".join(" ".join(map(str, row)) + "\n" for row in self.rows())

    def __getitem__(self, idx: int | tuple[int, int]) -> int:
        """Get cell content by 1D (row-major order) or 2D index."""
        if isinstance(idx, int):
            return self.data[idx]
        if isinstance(idx, tuple) and len(idx) == 2:
            row, col = idx
            return self.data[row * self.size + col]
        raise IndexError("Invalid index type for Board.")

    def __setitem__(self, idx: int | tuple[int, int], value: int) -> None:
        """Set cell content by 1D (row-major order) or 2D index."""
        if isinstance(idx, int):
            self.data[idx] = value
            return
        if isinstance(idx, tuple) and len(idx) == 2:
            row, col = idx
            self.data[row * self.size + col] = value
            return
        raise IndexError("Invalid index type for Board.")

    def row_range(self, row: int) -> range:
        """Get the range of 1D indices for a row, left to right."""
        return range(row * self.size, (row + 1) * self.size)

    def col_range(self, col: int) -> range:
        """Get the range of 1D indices for a column, top to bottom."""
        return range(col, self.size * self.size, self.size)

    def rows(self) -> list[list[int]]:
        """Return the board as a list of rows."""
        step = self.size or 1  # Empty board has no rows
        return [list(self.data[start : start + step]) for start in range(0, len(self.data), step)]

    def as_array(self) -> np.ndarray:
        """Return the board as a (size, size) numpy array."""
        return np.frombuffer(self.data.tobytes(), dtype=np.uint8).reshape(self.size, self.size)


@lru_cache(maxsize=32)
def edge_lines(size: int) -> tuple[tuple[int, ...], ...]:
    """Get the 4·N lines of sight of a board, in header order.

    Each line lists the 1D cell indices seen from one edge, nearest cell first.  The lines are
    ordered as the header bands: top (by column), bottom (by column), left (by row) and
    right (by row).
    """
    top = tuple(tuple(range(col, size * size, size)) for col in range(size))
    bottom = tuple(line[::-1] for line in top)
    left = tuple(tuple(range(row * size, (row + 1) * size)) for row in range(size))
    right = tuple(line[::-1] for line in left)
    return top + bottom + left + right
