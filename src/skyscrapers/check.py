"""Checking of a candidate board against a header.

The board is given as ASCII text: one row per line, cells separated by whitespace.  Every
diagnostic carries the byte spans of the offending cells so that they can be pointed at.
"""

from enum import Enum
from typing import NamedTuple

from skyscrapers.board import Board
from skyscrapers.format import ERROR_COLOR, NOTE_COLOR, paint
from skyscrapers.header import Header, Span

SEPARATORS = frozenset(b" \t\r")
"""Bytes that separate cells within a row."""

DIGITS = frozenset(b"0123456789")


class BoardErrorKind(Enum):
    """Kinds of error that may be found in a board."""

    INVALID_NUMBER = "invalid number"
    UNEXPECTED_CHARACTER = "unexpected character"
    COLUMN_COUNT = "wrong number of cells on a row"
    ROW_COUNT = "wrong number of rows"
    DUPLICATE_IN_ROW = "duplicate height on a row"
    DUPLICATE_IN_COLUMN = "duplicate height on a column"
    TOP_TO_BOTTOM = "invalid view count from the top"
    BOTTOM_TO_TOP = "invalid view count from the bottom"
    LEFT_TO_RIGHT = "invalid view count from the left"
    RIGHT_TO_LEFT = "invalid view count from the right"


class BoardError(Exception):
    """Exception raised for a board which is malformed or does not match its header."""

    def __init__(
        self,
        kind: BoardErrorKind,
        spans: list[Span],
        *,
        expected: int | None = None,
        given: int | None = None,
    ) -> None:
        self.kind = kind
        """What went wrong."""
        self.spans = spans
        """Byte ranges of the offending cells (or rows)."""
        self.expected = expected
        """The count the header (or board size) requires, where relevant."""
        self.given = given
        """The count found in the board, where relevant."""
        super().__init__(self.message)

    @property
    def message(self) -> str:
        """A human-readable description of the error."""
        if self.expected is None:
            return self.kind.value
        return f"{self.kind.value}: expected {self.expected}, found {self.given}"


class BoardCell(NamedTuple):
    """A parsed board cell."""

    value: int
    span: Span


def parse_board(data: bytes, size: int) -> list[BoardCell]:
    """Parse an ASCII board into its cells, in row-major order.

    Args:
        data: The board text.  A missing newline after the last row is accepted.
        size: Board size N; each row must have exactly N cells, and there must be N rows.

    Raises:
        BoardError: If the text is not a well-formed board of the given size.
    """
    cells: list[BoardCell] = []
    line_start = 0
    on_line = 0
    lines = 0
    i = 0

    while i < len(data):
        byte = data[i]
        if byte in SEPARATORS:
            i += 1
        elif byte == ord("\n"):
            if on_line != size:
                raise BoardError(
                    BoardErrorKind.COLUMN_COUNT,
                    [Span(line_start, i)],
                    expected=size,
                    given=on_line,
                )
            i += 1
            on_line = 0
            line_start = i
            lines += 1
        elif byte in DIGITS:
            start = i
            while i < len(data) and data[i] in DIGITS:
                i += 1
            value = int(data[start:i])
            if not 1 <= value <= size:
                raise BoardError(BoardErrorKind.INVALID_NUMBER, [Span(start, i)])
            cells.append(BoardCell(value, Span(start, i)))
            on_line += 1
        else:
            raise BoardError(BoardErrorKind.UNEXPECTED_CHARACTER, [Span(i, i + 1)])

    # An unterminated last row still counts.
    if on_line != 0:
        if on_line != size:
            raise BoardError(
                BoardErrorKind.COLUMN_COUNT,
                [Span(line_start, len(data))],
                expected=size,
                given=on_line,
            )
        lines += 1

    if lines != size:
        raise BoardError(
            BoardErrorKind.ROW_COUNT, [Span(0, len(data))], expected=size, given=lines
        )
    return cells


def count_viewed(heights: list[int]) -> int:
    """Number of cells visible from the start of the line."""
    highest = 0
    count = 0
    for height in heights:
        if height > highest:
            highest = height
            count += 1
    return count


def check(header: Header, data: bytes) -> Board:
    """Check whether an ASCII board is a valid solution for the header.

    Args:
        header: The clues the board must satisfy.
        data: The board text.

    Returns:
        The parsed board, if valid.

    Raises:
        BoardError: The first problem found: a parsing error, then duplicates on rows, then
            on columns, then view-count mismatches (top, bottom, left, right for each index).
    """
    size = header.size
    cells = parse_board(data, size)
    board = Board((cell.value for cell in cells), size)

    for lines, kind in (
        ([board.row_range(k) for k in range(size)], BoardErrorKind.DUPLICATE_IN_ROW),
        ([board.col_range(k) for k in range(size)], BoardErrorKind.DUPLICATE_IN_COLUMN),
    ):
        for line in lines:
            first_seen: dict[int, int] = {}
            for idx in line:
                other = first_seen.setdefault(board[idx], idx)
                if other != idx:
                    raise BoardError(kind, [cells[other].span, cells[idx].span])

    for i in range(size):
        column = list(board.col_range(i))
        row = list(board.row_range(i))
        for view, line, spans_of, kind in (
            (header.top[i], column, column, BoardErrorKind.TOP_TO_BOTTOM),
            (header.bottom[i], column[::-1], column, BoardErrorKind.BOTTOM_TO_TOP),
            (header.left[i], row, row, BoardErrorKind.LEFT_TO_RIGHT),
            (header.right[i], row[::-1], row, BoardErrorKind.RIGHT_TO_LEFT),
        ):
            given = count_viewed([board[idx] for idx in line])
            if given != view:
                raise BoardError(
                    kind,
                    [cells[idx].span for idx in spans_of],
                    expected=view,
                    given=given,
                )

    return board


def render_error(error: BoardError, data: bytes, *, color: bool = False) -> str:
    """Render a board error with the offending lines of the input and carets under the spans."""
    out = [f"{paint('error', ERROR_COLOR, color)}: {error.message}\n"]

    # Group spans by the input line they start on.
    by_line: dict[int, list[Span]] = {}
    for span in error.spans:
        line_start = data.rfind(b"\n", 0, span.start) + 1
        by_line.setdefault(line_start, []).append(span)

    for line_start in sorted(by_line):
        line_end = data.find(b"\n", line_start)
        if line_end == -1:
            line_end = len(data)
        line_no = data.count(b"\n", 0, line_start) + 1
        text = data[line_start:line_end].decode("ascii", errors="replace")
        markers = [" "] * (line_end - line_start)
        for span in by_line[line_start]:
            end = min(max(span.end, span.start + 1), line_end)
            for pos in range(span.start, end):
                markers[pos - line_start] = "^"
        gutter = f"{line_no:>3} | "
        out.append(gutter + text + "\n")
        carets = paint("".join(markers).rstrip(), NOTE_COLOR, color)
        out.append(" " * (len(gutter) - 2) + "| " + carets + "\n")

    return "".join(out)
