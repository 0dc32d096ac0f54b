import numpy as np
import pytest

from skyscrapers.board import Board, edge_lines


def test_indexing():
    board = Board.from_rows([[1, 2], [2, 1]])
    assert board.size == 2
    assert board[1] == 2
    assert board[1, 0] == 2
    board[0, 1] = 0
    assert board[1] == 0
    assert list(board.row_range(1)) == [2, 3]
    assert list(board.col_range(1)) == [1, 3]
    with pytest.raises(IndexError):
        board["a"]


def test_invalid_board():
    with pytest.raises(ValueError):
        Board([1, 2, 3], 2)
    with pytest.raises(ValueError):
        Board(None, 256)


def test_str_and_eq():
    board = Board.from_rows([[1, 2, 3], [2, 3, 1], [3, 1, 2]])
    assert str(board) == "1 2 3\n2 3 1\n3 1 2\n"
    assert board == Board(board.data, 3)
    assert board != Board.from_rows([[3, 2, 1], [2, 1, 3], [1, 3, 2]])
    assert repr(board) == "Board.from_rows([[1, 2, 3], [2, 3, 1], [3, 1, 2]])"


def test_rows_and_array():
    board = Board.from_rows([[1, 2], [2, 1]])
    assert board.rows() == [[1, 2], [2, 1]]
    assert np.array_equal(board.as_array(), np.array([[1, 2], [2, 1]]))
    assert Board(None, 0).rows() == []


def test_edge_lines():
    assert edge_lines(2) == (
        (0, 2),
        (1, 3),  # Top
        (2, 0),
        (3, 1),  # Bottom
        (0, 1),
        (2, 3),  # Left
        (1, 0),
        (3, 2),  # Right
    )
    assert len(edge_lines(5)) == 20
