from skyscrapers.board import Board
from skyscrapers.format import (
    CLEAR_SCREEN,
    CELL_COLOR,
    RESET,
    OutputFormat,
    format_board,
    format_partial,
    join_padded,
)
from skyscrapers.header import Header

BOARD_3 = Board.from_rows([[1, 2, 3], [2, 3, 1], [3, 1, 2]])
HEADER_3 = Header.of_board(BOARD_3)


def test_solution():
    assert format_board(BOARD_3, HEADER_3, OutputFormat.SOLUTION, color=False) == (
        "1 2 3\n2 3 1\n3 1 2\n"
    )


def test_header_line():
    assert format_board(BOARD_3, HEADER_3, OutputFormat.HEADER_LINE, color=False) == (
        "3 2 1 1 2 2 3 2 1 1 2 2\n"
    )


def test_both():
    assert format_board(BOARD_3, HEADER_3, OutputFormat.BOTH, color=False) == (
        "  3 2 1  \n"
        "3 1 2 3 1\n"
        "2 2 3 1 2\n"
        "1 3 1 2 2\n"
        "  1 2 2  \n"
    )


def test_header():
    assert format_board(BOARD_3, HEADER_3, OutputFormat.HEADER, color=False) == (
        "  3 2 1  \n"
        "3       1\n"
        "2       2\n"
        "1       2\n"
        "  1 2 2  \n"
    )


def test_padding():
    assert join_padded([1, 10, 0, 7], 2) == "1  10    7 "


def test_color():
    rendered = format_board(BOARD_3, HEADER_3, OutputFormat.SOLUTION, color=True)
    assert rendered.startswith(f"{CELL_COLOR}1 2 3{RESET}\n")


def test_partial():
    board = Board.from_rows([[1, 0], [0, 0]])
    assert format_partial(board, color=False) == "1  \n   \n\n"
    assert format_partial(board, color=True).startswith(CLEAR_SCREEN)
