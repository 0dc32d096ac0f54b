"""Random generation of solved Skyscrapers boards."""

import random
from typing import Callable

from bitarray import bitarray
from bitarray.util import zeros

from skyscrapers import sigint
from skyscrapers.board import Board


def generate_solution(
    size: int,
    rng: random.Random,
    *,
    cancelled: Callable[[], bool] = sigint.occurred,
) -> Board | None:
    """Generate a random completed board (a Latin square) of the given size.

    Cells are filled in row-major order.  Each cell draws uniformly among the heights not yet
    used on its row or column; the heights not drawn are kept on a stack, so that a dead end
    resumes at the previous cell with the heights it has not tried yet.

    Args:
        size: Board size N.
        rng: Random number generator; the board is a deterministic function of its state.
        cancelled: Polled before every cell; generation stops once it returns True.

    Returns:
        The completed board, or None if generation was cancelled.
    """
    board = Board(None, size)
    row_used: list[bitarray] = [zeros(size) for _ in range(size)]
    col_used: list[bitarray] = [zeros(size) for _ in range(size)]

    # candidates[i] holds the heights not tried yet for cell i (for cells before `index`).
    candidates: list[list[int]] = []
    index = 0

    while index != size * size:
        if cancelled():
            return None

        row, col = divmod(index, size)
        candidates.append(
            [
                height
                for height in range(1, size + 1)
                if not row_used[row][height - 1] and not col_used[col][height - 1]
            ]
        )

        # No valid height: backtrack until some earlier cell has heights left to try.
        while not candidates[-1]:
            candidates.pop()
            index -= 1
            row, col = divmod(index, size)
            height = board[index]
            row_used[row][height - 1] = False
            col_used[col][height - 1] = False
            board[index] = 0

        options = candidates[-1]
        choice = rng.randrange(len(options))
        options[choice], options[-1] = options[-1], options[choice]
        height = options.pop()

        board[index] = height
        row_used[row][height - 1] = True
        col_used[col][height - 1] = True
        index += 1

    return board
