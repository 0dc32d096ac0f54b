"""Constraint propagation over the domain store.

Three kinds of reduction are applied:

- Header pruning, once before search: each clue restricts the heights that may appear at each
  distance from its edge.
- Uniqueness propagation, after every decision: a decided height is forbidden from the rest of
  its row and column, cascading whenever another cell becomes decided.
- View filtering, alongside uniqueness propagation: heights which would leave a clue out of
  the reachable bounds of its line are forbidden.

None raises on contradiction: an emptied domain is reported through the return value, as
it is the normal signal for the search to backtrack.
"""

from collections import deque
from typing import Iterable

from skyscrapers.board import edge_lines
from skyscrapers.header import Header
from skyscrapers.solver import sight
from skyscrapers.solver.domains import Domains
from skyscrapers.solver.lines import LineTables


def propagate(domains: Domains, worklist: Iterable[int]) -> bool:
    """Forbid every decided height from the rest of its row and column, to a fixpoint.

    Args:
        domains: The domain store.  Modified in-place.
        worklist: Indices of cells that have just been decided.

    Returns:
        False if some domain became empty (the store is then inconsistent), else True.
    """
    size = domains.size
    queue = deque(worklist)
    while queue:
        idx = queue.popleft()
        if domains.count(idx) != 1:
            return False  # Emptied after being queued
        height = domains.value(idx)
        row, col = divmod(idx, size)

        for peer in (*range(row * size, (row + 1) * size), *range(col, size * size, size)):
            if peer == idx or not domains.forbid(peer, height):
                continue
            remaining = domains.count(peer)
            if remaining == 0:
                return False
            if remaining == 1:
                queue.append(peer)
    return True


def prune_header(domains: Domains, header: Header) -> list[int] | None:
    """Restrict cell domains according to the clues of the header.

    For a clue `c` and the cell at distance `i` (0-based) from its edge:

    - `c == 1`: the nearest cell is N, and no other cell of the line may be N.
    - `c == N`: the line increases from the edge, so the cell is `i + 1`.
    - otherwise: heights in `[N - c + 2 + i, N]` are forbidden, since too few cells would be
      left to reach `c` visible cells.

    Args:
        domains: The domain store.  Modified in-place.
        header: The header of the puzzle, of the same size as `domains`.

    Returns:
        The indices of the decided cells, to seed `propagate`, or None if a contradiction was
        found.
    """
    size = domains.size
    for view, line in zip(header, edge_lines(size)):
        if view == 1:
            if not domains.fix(line[0], size):
                return None
            for idx in line[1:]:
                domains.forbid(idx, size)
        elif view == size:
            for i, idx in enumerate(line):
                if not domains.fix(idx, i + 1):
                    return None
        else:
            for i, idx in enumerate(line):
                for height in range(size - view + 2 + i, size + 1):
                    domains.forbid(idx, height)

    worklist: list[int] = []
    for idx in range(size * size):
        count = domains.count(idx)
        if count == 0:
            return None
        if count == 1:
            worklist.append(idx)
    return worklist


def decided_run(domains: Domains, line: Iterable[int]) -> list[int]:
    """Heights of the decided cells at the start of `line`, up to the first undecided one."""
    heights: list[int] = []
    for idx in line:
        if domains.count(idx) != 1:
            break
        heights.append(domains.value(idx))
    return heights


def views_consistent(domains: Domains, header: Header) -> bool:
    """Check every line of sight against its clue.

    A line is bounded twice: by the decided cells nearest its edge (`sight.increasing`), and by
    the decided cells at its far end (`sight.decreasing`).

    Returns:
        False if some clue is out of the reachable bounds of its line, else True.
    """
    size = domains.size
    for view, line in zip(header, edge_lines(size)):
        prefix = decided_run(domains, line)
        if not sight.increasing(size, prefix).contains(view):
            return False
        if len(prefix) < size:
            suffix = decided_run(domains, reversed(line))
            if not sight.decreasing(size, suffix).contains(view):
                return False
    return True


def prune_views(domains: Domains, header: Header) -> list[int] | None:
    """Forbid the heights that would push a clue out of its reachable bounds.

    For every line of sight, the first undecided cell after the decided prefix keeps only the
    heights `h` for which `prefix + [h]` can still show the clue, and likewise the last
    undecided cell before the decided suffix at the far end.

    Args:
        domains: The domain store.  Modified in-place.
        header: The header of the puzzle.

    Returns:
        The indices of the cells whose domain shrank, or None if some domain became empty.
    """
    size = domains.size
    shrunk: list[int] = []
    for view, line in zip(header, edge_lines(size)):
        prefix = decided_run(domains, line)
        if len(prefix) == size:
            continue
        suffix = decided_run(domains, reversed(line))

        near = line[len(prefix)]
        for height in domains.permitted(near):
            if not sight.increasing(size, [*prefix, height]).contains(view):
                domains.forbid(near, height)
                shrunk.append(near)

        far = line[size - 1 - len(suffix)]
        for height in domains.permitted(far):
            if not sight.decreasing(size, [*suffix, height]).contains(view):
                domains.forbid(far, height)
                shrunk.append(far)

        if domains.count(near) == 0 or domains.count(far) == 0:
            return None
    return shrunk


def reduce(
    domains: Domains,
    header: Header,
    worklist: Iterable[int],
    lines: LineTables | None,
    *,
    view_filter: bool = True,
) -> bool:
    """Run uniqueness propagation and the view filter to a common fixpoint.

    Args:
        domains: The domain store.  Modified in-place.
        header: The header of the puzzle.
        worklist: Indices of cells that have just been decided.
        lines: Candidate permutations of every line.  If given, they narrow the domains;
            otherwise `prune_views` does, from the bounds of each line.
        view_filter: If False, only uniqueness propagation is run.

    Returns:
        False if the domains turned out to be inconsistent, else True.
    """
    while True:
        if not propagate(domains, worklist):
            return False
        if not view_filter:
            return True
        shrunk = lines.narrow(domains) if lines is not None else prune_views(domains, header)
        if shrunk is None:
            return False
        if not shrunk:
            return True
        worklist = [idx for idx in dict.fromkeys(shrunk) if domains.count(idx) == 1]
