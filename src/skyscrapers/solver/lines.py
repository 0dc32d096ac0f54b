"""Candidate permutations of every row and column, filtered by their pair of clues.

A row (or column) of a solved board is a permutation of 1..N whose visible counts from both
ends match the two clues of the line.  For small boards every such permutation can be listed
up front; the solver then keeps, for each line, only the permutations compatible with the
current domains, and forbids every height that no remaining permutation uses at that position.
"""

from functools import lru_cache
from itertools import chain, permutations
from math import factorial

import numpy as np

from skyscrapers.board import edge_lines
from skyscrapers.header import Header, count_visible
from skyscrapers.solver.domains import Domains

Candidates = tuple[np.ndarray, ...]
"""Candidate permutations per line: columns (top to bottom) first, then rows (left to right)."""


@lru_cache(maxsize=2)
def permutation_table(size: int) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """All permutations of 1..N, with their visible counts from the start and from the end.

    Returns:
        A (N!, N) uint8 array of permutations, and two (N!,) arrays of visible counts.
    """
    count = factorial(size)
    heights = range(1, size + 1)
    table = np.fromiter(
        chain.from_iterable(permutations(heights)), dtype=np.uint8, count=count * size
    ).reshape(count, size)
    return table, count_visible(table), count_visible(table[:, ::-1])


@lru_cache(maxsize=1024)
def line_candidates(size: int, near: int, far: int) -> np.ndarray:
    """Permutations of 1..N showing `near` cells from the start and `far` from the end."""
    table, forward, backward = permutation_table(size)
    return table[(forward == near) & (backward == far)]


class LineTables:
    """Narrowing state of the candidate permutations of all 2N lines of a board.

    The candidate arrays are never modified in place, so `candidates` can be saved and restored
    by reference.
    """

    def __init__(self, header: Header) -> None:
        size = header.size
        lines = edge_lines(size)
        self.size = size
        self.cells = [
            np.array(line, dtype=np.intp) for line in lines[:size] + lines[2 * size : 3 * size]
        ]
        """1D cell indices of each line, in candidate order."""
        clues = list(zip(header.top, header.bottom)) + list(zip(header.left, header.right))
        self.candidates: Candidates = tuple(
            line_candidates(size, near, far) for near, far in clues
        )
        """Permutations still compatible with the domains, per line."""

    def narrow(self, domains: Domains) -> list[int] | None:
        """Filter the candidates of every line by the domains, then the domains by the candidates.

        Args:
            domains: The domain store.  Modified in-place.

        Returns:
            The indices of the cells whose domain shrank, or None if some line has no candidate
            left (or some domain became empty).
        """
        size = self.size
        positions = np.arange(size)
        permitted = domains.as_mask()
        candidates = list(self.candidates)
        shrunk: list[int] = []

        for line, cells in enumerate(self.cells):
            allowed = permitted[cells]
            current = candidates[line]
            keep = allowed[positions, current].all(axis=1)
            if not keep.all():
                current = current[keep]
                candidates[line] = current
                if len(current) == 0:
                    self.candidates = tuple(candidates)
                    return None

            supported = np.zeros((size, size + 1), dtype=bool)
            supported[positions, current] = True
            # `permitted` may predate forbids made for earlier lines; forbid() tells.
            for pos, height in zip(*np.nonzero(allowed & ~supported)):
                idx = int(cells[pos])
                if domains.forbid(idx, int(height)):
                    if domains.count(idx) == 0:
                        self.candidates = tuple(candidates)
                        return None
                    shrunk.append(idx)

        self.candidates = tuple(candidates)
        return shrunk


def narrow_crossing(candidates: Candidates, size: int) -> Candidates | None:
    """Keep, for every line, the candidates whose heights their crossing lines can all take.

    Args:
        candidates: Candidate permutations per line, columns first, as in `LineTables`.
        size: Board size N.

    Returns:
        The narrowed candidates, or None if some line has none left.
    """
    positions = np.arange(size)
    masks = np.zeros((2 * size, size, size + 1), dtype=bool)
    for line, current in enumerate(candidates):
        masks[line][positions, current] = True

    # across_rows[r][c]: heights column c can take on row r; across_cols[c][r] likewise.
    across_rows = masks[:size].transpose(1, 0, 2)
    across_cols = masks[size:].transpose(1, 0, 2)
    narrowed = []
    for line, current in enumerate(candidates):
        allowed = across_cols[line] if line < size else across_rows[line - size]
        keep = allowed[positions, current].all(axis=1)
        if not keep.all():
            current = current[keep]
            if len(current) == 0:
                return None
        narrowed.append(current)
    return tuple(narrowed)
