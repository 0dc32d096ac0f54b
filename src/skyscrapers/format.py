"""Rendering of boards and headers for the terminal."""

from enum import Enum
from typing import Iterable, TextIO

from skyscrapers.board import Board
from skyscrapers.header import Header

RESET = "\033[0m"
CELL_COLOR = "\033[94m"  # Bright blue
CLUE_COLOR = "\033[33m"  # Yellow
ERROR_COLOR = "\033[31m"  # Red
NOTE_COLOR = "\033[36m"  # Cyan
CLEAR_SCREEN = "\033[H\033[2J"


class OutputFormat(Enum):
    """How a solved board is printed."""

    SOLUTION = "solution"
    """Only print the solution."""
    HEADER = "header"
    """Only print the header, laid out around an empty board."""
    HEADER_LINE = "header-line"
    """Only print the header, on one single line."""
    BOTH = "both"
    """Print both the header and the solution."""


def paint(text: str, code: str, color: bool) -> str:
    """Wrap `text` in an ANSI color code if `color` is enabled."""
    return f"{code}{text}{RESET}" if color and text else text


def cell_width(size: int) -> int:
    """Number of decimal digits needed for the largest height."""
    return len(str(size))


def join_padded(values: Iterable[int], width: int) -> str:
    """Join values with single spaces, each left-aligned in `width` columns (0 = blank)."""
    return " ".join(f"{value:<{width}}" if value else " " * width for value in values)


def format_board(board: Board, header: Header, output: OutputFormat, *, color: bool) -> str:
    """Render a board and its header according to `output`."""
    if output is OutputFormat.SOLUTION:
        width = cell_width(board.size)
        return "".join(
            paint(join_padded(row, width), CELL_COLOR, color) + "\n" for row in board.rows()
        )
    if output is OutputFormat.HEADER_LINE:
        return paint(str(header), CLUE_COLOR, color) + "\n"
    return format_framed(board, header, show_cells=output is OutputFormat.BOTH, color=color)


def format_framed(board: Board, header: Header, *, show_cells: bool, color: bool) -> str:
    """Render the board surrounded by its clues.

    Args:
        board: The board to render.
        header: The clues to print around it.
        show_cells: If False, the board itself is left blank.
        color: Whether to use ANSI colors.
    """
    size = header.size
    width = cell_width(size)
    margin = " " * (width + 1)
    lines = [margin + paint(join_padded(header.top, width), CLUE_COLOR, color) + margin]
    for row, left, right in zip(board.rows(), header.left, header.right):
        cells = join_padded(row, width) if show_cells else " " * (size * (width + 1) - 1)
        lines.append(
            paint(f"{left:<{width}}", CLUE_COLOR, color)
            + " "
            + paint(cells, CELL_COLOR, color)
            + " "
            + paint(f"{right:<{width}}", CLUE_COLOR, color)
        )
    lines.append(margin + paint(join_padded(header.bottom, width), CLUE_COLOR, color) + margin)
    return "".join(line + "\n" for line in lines)


def format_partial(board: Board, *, color: bool) -> str:
    """Render a partially decided board; undecided (0) cells are left blank."""
    width = cell_width(board.size)
    frame = "".join(
        paint(join_padded(row, width), CELL_COLOR, color) + "\n" for row in board.rows()
    )
    # Without color, frames are stacked and separated by a blank line
    return CLEAR_SCREEN + frame if color else frame + "\n"


def print_board(
    w: TextIO, board: Board, header: Header, output: OutputFormat, *, color: bool
) -> None:
    """Write the rendering of `board` to `w`."""
    w.write(format_board(board, header, output, color=color))
    w.flush()
