"""The clue header of a Skyscrapers puzzle: parsing, validation and derivation from a board."""

import re
from enum import Enum
from typing import Iterable, Iterator, NamedTuple

import numpy as np

from skyscrapers.board import MAX_SIZE, Board

VALID_TOKEN_PATTERN = re.compile(r"^\+?[0-9]+$")
"""Regex pattern for validating header tokens (ASCII decimal integers, with an optional `+`)."""

TOKEN_PATTERN = re.compile(rb"\S+")
"""Regex pattern splitting a header line into whitespace-separated tokens."""


class Span(NamedTuple):
    """A half-open range of byte offsets into some source text."""

    start: int
    end: int


class HeaderErrorKind(Enum):
    """Kinds of error that may occur whilst parsing a header."""

    INVALID_INTEGER = "invalid integer found in header"
    INTEGER_OVERFLOW = "views can't exceed 255"
    INVALID_VIEW_COUNT = "invalid number of views (must be a multiple of 4)"
    TOO_MANY_VIEWS = f"it's not possible to solve a size larger than {MAX_SIZE}"
    VIEW_TOO_LARGE = "views can't exceed the size of the board"
    VIEW_ZERO = "views can't be 0"


class HeaderError(ValueError):
    """Exception raised for invalid headers."""

    def __init__(self, kind: HeaderErrorKind, span: Span | None = None) -> None:
        message = kind.value
        if span is not None:
            message += f" (bytes {span.start}..{span.end})"
        super().__init__(message)
        self.kind = kind
        """What went wrong."""
        self.span = span
        """Byte range of the offending token, if a single token is to blame."""


class Header:
    """The 4·N view counts around an N x N board.

    The clues are stored as four contiguous bands of N values: top (indexed by column, looking
    down), bottom (by column, looking up), left (by row, looking right) and right (by row,
    looking left).
    """

    def __init__(self, views: Iterable[int]) -> None:
        self.views: tuple[int, ...] = tuple(views)
        if len(self.views) % 4 != 0:
            raise HeaderError(HeaderErrorKind.INVALID_VIEW_COUNT)
        if len(self.views) > MAX_SIZE * 4:
            raise HeaderError(HeaderErrorKind.TOO_MANY_VIEWS)
        self.size: int = len(self.views) // 4
        """Size N of the board the header describes."""
        if any(view == 0 for view in self.views):
            raise HeaderError(HeaderErrorKind.VIEW_ZERO)
        if any(view > self.size for view in self.views):
            raise HeaderError(HeaderErrorKind.VIEW_TOO_LARGE)

    @classmethod
    def parse(cls, text: str | bytes) -> "Header":
        """Parse a header line: whitespace-separated decimal integers.

        Args:
            text: The header line, as accepted by `solve` and printed by `header-line`.

        Returns:
            The parsed header.  An empty line yields a header of size 0.

        Raises:
            HeaderError: If the line is not a valid header.  Token-level errors carry the byte
                span of the offending token.
        """
        data = text.encode("utf-8") if isinstance(text, str) else text
        views: list[int] = []
        spans: list[Span] = []
        for match in TOKEN_PATTERN.finditer(data):
            span = Span(match.start(), match.end())
            token = match.group().decode("utf-8", errors="replace")
            if not VALID_TOKEN_PATTERN.match(token):
                raise HeaderError(HeaderErrorKind.INVALID_INTEGER, span)
            view = int(token)
            if view > MAX_SIZE:
                raise HeaderError(HeaderErrorKind.INTEGER_OVERFLOW, span)
            if view == 0:
                raise HeaderError(HeaderErrorKind.VIEW_ZERO, span)
            views.append(view)
            spans.append(span)

        if len(views) % 4 != 0:
            raise HeaderError(HeaderErrorKind.INVALID_VIEW_COUNT)
        if len(views) > MAX_SIZE * 4:
            raise HeaderError(HeaderErrorKind.TOO_MANY_VIEWS)
        size = len(views) // 4
        for view, span in zip(views, spans):
            if view > size:
                raise HeaderError(HeaderErrorKind.VIEW_TOO_LARGE, span)

        return cls(views)

    @classmethod
    def of_board(cls, board: Board) -> "Header":
        """Derive the header of a completed board by counting visible cells from every edge."""
        grid = board.as_array().astype(np.int16)
        bands = (
            count_visible(grid.T),  # Top: each column, top to bottom
            count_visible(grid.T[:, ::-1]),  # Bottom: each column, bottom to top
            count_visible(grid),  # Left: each row, left to right
            count_visible(grid[:, ::-1]),  # Right: each row, right to left
        )
        return cls(int(view) for band in bands for view in band)

    @property
    def top(self) -> tuple[int, ...]:
        """Clues seen from the top edge, by column."""
        return self.views[: self.size]

    @property
    def bottom(self) -> tuple[int, ...]:
        """Clues seen from the bottom edge, by column."""
        return self.views[self.size : 2 * self.size]

    @property
    def left(self) -> tuple[int, ...]:
        """Clues seen from the left edge, by row."""
        return self.views[2 * self.size : 3 * self.size]

    @property
    def right(self) -> tuple[int, ...]:
        """Clues seen from the right edge, by row."""
        return self.views[3 * self.size :]

    def __len__(self) -> int:
        return len(self.views)

    def __iter__(self) -> Iterator[int]:
        return iter(self.views)

    def __getitem__(self, idx: int) -> int:
        return self.views[idx]

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, Header):
            return NotImplemented
        return self.views == other.views

    def __hash__(self) -> int:
        return hash(self.views)

    def __repr__(self) -> str:
        return f"Header.parse({str(self)!r})"

    def __str__(self) -> str:
        """The single-line form, readable by `Header.parse`."""
        return " ".join(map(str, self.views))


def count_visible(lines: np.ndarray) -> np.ndarray:
    """Count the visible cells of each line of a 2D array, looking from index 0.

    A cell is visible iff it is strictly taller than every cell before it, i.e. iff it raises
    the running maximum.
    """
    if lines.size == 0:
        return np.zeros(len(lines), dtype=np.int64)
    running_max = np.maximum.accumulate(lines, axis=1)
    rises = np.diff(running_max, axis=1, prepend=0) > 0
    return rises.sum(axis=1)
