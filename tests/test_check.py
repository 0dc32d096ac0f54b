import pytest

from skyscrapers.board import Board
from skyscrapers.check import BoardError, BoardErrorKind, check, parse_board, render_error
from skyscrapers.header import Header, Span

HEADER_3 = Header.parse("3 2 1 1 2 2 3 2 1 1 2 2")
BOARD_3 = b"1 2 3\n2 3 1\n3 1 2\n"


def check_error(header: Header, data: bytes) -> BoardError:
    with pytest.raises(BoardError) as excinfo:
        check(header, data)
    return excinfo.value


def test_valid():
    assert check(HEADER_3, BOARD_3) == Board.from_rows([[1, 2, 3], [2, 3, 1], [3, 1, 2]])


def test_separators():
    assert check(HEADER_3, b"1\t2  3\r\n2 3 1\n3 1 2") == check(HEADER_3, BOARD_3)


def test_size_one():
    assert check(Header.parse("1 1 1 1"), b"1\n") == Board.from_rows([[1]])


def test_duplicate_on_row():
    error = check_error(HEADER_3, b"1 1 2\n2 3 1\n3 1 2\n")
    assert error.kind is BoardErrorKind.DUPLICATE_IN_ROW
    assert error.spans == [Span(0, 1), Span(2, 3)]


def test_duplicate_on_column():
    error = check_error(HEADER_3, b"1 2 3\n2 3 1\n3 2 1\n")
    # Rows are fine, column 1 has two 2s
    assert error.kind is BoardErrorKind.DUPLICATE_IN_COLUMN
    assert error.spans == [Span(2, 3), Span(14, 15)]


def test_view_mismatch_top():
    error = check_error(Header.parse("3 3 1 1 2 2 3 2 1 1 2 2"), BOARD_3)
    assert error.kind is BoardErrorKind.TOP_TO_BOTTOM
    assert (error.expected, error.given) == (3, 2)
    assert error.spans == [Span(2, 3), Span(8, 9), Span(14, 15)]


def test_view_mismatch_left():
    error = check_error(Header.parse("3 2 1 1 2 2 3 2 2 1 2 2"), BOARD_3)
    assert error.kind is BoardErrorKind.LEFT_TO_RIGHT
    assert error.spans == [Span(12, 13), Span(14, 15), Span(16, 17)]


def test_view_mismatch_right():
    error = check_error(Header.parse("3 2 1 1 2 2 3 2 1 2 2 2"), BOARD_3)
    assert error.kind is BoardErrorKind.RIGHT_TO_LEFT
    assert error.spans == [Span(0, 1), Span(2, 3), Span(4, 5)]


@pytest.mark.parametrize(
    "data,kind,span",
    [
        (b"1 2 4\n", BoardErrorKind.INVALID_NUMBER, Span(4, 5)),
        (b"0 2 3\n", BoardErrorKind.INVALID_NUMBER, Span(0, 1)),
        (b"256 2 3\n", BoardErrorKind.INVALID_NUMBER, Span(0, 3)),
        (b"1 2 x\n", BoardErrorKind.UNEXPECTED_CHARACTER, Span(4, 5)),
        (b"1 2\n", BoardErrorKind.COLUMN_COUNT, Span(0, 3)),
        (b"1 2 3\n2 3 1 2\n", BoardErrorKind.COLUMN_COUNT, Span(6, 13)),
        (b"1 2 3\n2 3", BoardErrorKind.COLUMN_COUNT, Span(6, 9)),
    ],
)
def test_parse_errors(data, kind, span):
    with pytest.raises(BoardError) as excinfo:
        parse_board(data, 3)
    assert excinfo.value.kind is kind
    assert excinfo.value.spans == [span]


def test_row_count():
    with pytest.raises(BoardError) as excinfo:
        parse_board(b"1 2 3\n2 3 1\n", 3)
    assert excinfo.value.kind is BoardErrorKind.ROW_COUNT
    assert (excinfo.value.expected, excinfo.value.given) == (3, 2)


def test_render_error():
    data = b"1 1 2\n2 3 1\n3 1 2\n"
    error = check_error(HEADER_3, data)
    assert render_error(error, data) == (
        "error: duplicate height on a row\n"
        "  1 | 1 1 2\n"
        "    | ^ ^\n"
    )


def test_render_error_colored():
    data = b"1 2 3\n2 3 1\n3 2 1\n"
    rendered = render_error(check_error(HEADER_3, data), data, color=True)
    assert rendered.startswith("\033[31merror\033[0m: duplicate height on a column\n")
    assert "  1 | 1 2 3\n" in rendered
    assert "  2 |" not in rendered
    assert "  3 | 3 2 1\n" in rendered
