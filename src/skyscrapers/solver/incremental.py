"""Cell-by-cell search gated by the line of sight of every edge.

Cells are filled in row-major order.  Each cell belongs to four lines of sight: its column
seen from the top and its row seen from the left are filled from the viewer's edge inward,
while its column seen from the bottom and its row seen from the right are filled from the far
edge.  A height is placed only if it is new to its row and column and every one of these four
lines can still reach its clue.

On boards small enough for line tables, each row and column also keeps the permutations that
match its clues and the heights placed on it so far; a height is then only placed if every line
keeps a permutation that its crossing lines can accommodate.
"""

from typing import Callable, TextIO

from bitarray import bitarray
from bitarray.util import zeros

from skyscrapers import sigint
from skyscrapers.board import Board
from skyscrapers.config import SolverConfig
from skyscrapers.config import config as solver_config
from skyscrapers.header import Header
from skyscrapers.solver.lines import Candidates, LineTables, narrow_crossing
from skyscrapers.solver.search import SearchState
from skyscrapers.solver.sight import LineOfSight, ReverseLineOfSight
from skyscrapers.solver.stats import SolverStats, int_comma


class IncrementalSearch:
    """Row-major backtracking fill of the board, with O(1) undo per cell."""

    def __init__(
        self,
        header: Header,
        *,
        settings: SolverConfig | None = None,
        cancelled: Callable[[], bool] = sigint.occurred,
        logf: TextIO | None = None,
    ) -> None:
        size = header.size
        self.header = header
        self.settings = settings or solver_config
        self.cancelled = cancelled
        self.logf = logf

        self.board = Board(None, size)
        """Heights placed so far; cells at or after `index` hold the last height tried."""

        self.index = 0
        """1D index of the next cell to fill."""

        self.top = [LineOfSight(view, size) for view in header.top]
        self.left = [LineOfSight(view, size) for view in header.left]
        self.bottom = [ReverseLineOfSight(view, size) for view in header.bottom]
        self.right = [ReverseLineOfSight(view, size) for view in header.right]

        self.row_used: list[bitarray] = [zeros(size) for _ in range(size)]
        """Bit `h - 1` of `row_used[r]` is set iff height `h` is placed on row `r`."""
        self.col_used: list[bitarray] = [zeros(size) for _ in range(size)]
        """Bit `h - 1` of `col_used[c]` is set iff height `h` is placed on column `c`."""

        self.candidates: Candidates | None = None
        """Permutations of each column, then each row, matching the heights placed on it."""
        if 0 < size <= self.settings.line_table_max_size:
            self.candidates = LineTables(header).candidates

        self._narrowed: list[Candidates] = []
        """Line candidates before each placement, innermost last."""

        self.state = SearchState.SEARCHING if size else SearchState.SOLVED
        self.stats = SolverStats()

    def _fits(self, row: int, col: int, height: int) -> bool:
        """Returns whether `height` may be placed at (row, col)."""
        return (
            not self.row_used[row][height - 1]
            and not self.col_used[col][height - 1]
            and self.left[row].can_push(height)
            and self.top[col].can_push(height)
            and self.right[row].can_push(height)
            and self.bottom[col].can_push(height)
        )

    def _table_heights(self, row: int, col: int) -> set[int] | None:
        """Heights that both the row and the column candidates allow at (row, col)."""
        if self.candidates is None:
            return None
        size = self.header.size
        in_column = self.candidates[col][:, row].tolist()
        in_row = self.candidates[size + row][:, col].tolist()
        return set(in_column).intersection(in_row)

    def _place(self, row: int, col: int, height: int) -> bool:
        """Place `height` at (row, col).

        Returns:
            False if some line is left without a compatible candidate.  The height is placed
            regardless, and must be removed with `_unplace`; the candidates are then unchanged.
        """
        self.board[row, col] = height
        self.row_used[row][height - 1] = True
        self.col_used[col][height - 1] = True
        self.left[row].push(height)
        self.top[col].push(height)
        self.right[row].push(height)
        self.bottom[col].push(height)

        if self.candidates is None:
            return True
        size = self.header.size
        self._narrowed.append(self.candidates)
        candidates = list(self.candidates)
        column, line = candidates[col], candidates[size + row]
        candidates[col] = column[column[:, row] == height]
        candidates[size + row] = line[line[:, col] == height]
        narrowed = narrow_crossing(tuple(candidates), size)
        if narrowed is None:
            return False
        self.candidates = narrowed
        return True

    def _unplace(self, row: int, col: int) -> None:
        height = self.board[row, col]
        self.row_used[row][height - 1] = False
        self.col_used[col][height - 1] = False
        self.left[row].pop()
        self.top[col].pop()
        self.right[row].pop()
        self.bottom[col].pop()

        if self.candidates is not None:
            self.candidates = self._narrowed.pop()

    def step(self) -> SearchState:
        """Fill the next cell, or backtrack if no height fits it."""
        if self.state is not SearchState.SEARCHING:
            return self.state
        if self.cancelled():
            self.state = SearchState.CANCELLED
            return self.state

        size = self.header.size
        row, col = divmod(self.index, size)
        self.stats.record_step(self.index)
        if (
            self.logf is not None
            and self.settings.report_interval > 0
            and self.stats.steps % self.settings.report_interval == 0
        ):
            self.stats.report(self.logf)

        allowed = self._table_heights(row, col)
        # Resume after the last height tried for this cell (0 if the cell is fresh).
        for height in range(self.board[row, col] + 1, size + 1):
            if allowed is not None and height not in allowed:
                continue
            if not self._fits(row, col, height):
                continue
            if not self._place(row, col, height):
                self._unplace(row, col)
                continue
            self.index += 1
            if self.index == size * size:
                self.state = SearchState.SOLVED
            return self.state

        # Out of options for this cell: clear it and undo the previous one.
        self.board[row, col] = 0
        if self.index == 0:
            self.state = SearchState.NO_SOLUTION
            return self.state
        self.index -= 1
        self._unplace(*divmod(self.index, size))
        return self.state

    def run(self) -> SearchState:
        """Step until the search reaches a terminal state."""
        while self.state is SearchState.SEARCHING:
            self.step()
        if self.logf is not None:
            print(
                f"Incremental search finished: {self.state.value}; "
                f"{int_comma(self.stats.steps)} steps.",
                file=self.logf,
                flush=True,
            )
        return self.state

    @property
    def solution(self) -> Board | None:
        """The completed board, once `state` is `SOLVED`."""
        return self.board if self.state is SearchState.SOLVED else None
