"""Visible-count bounds along a line of sight.

A line is filled either from the viewer's edge inward (`increasing`: the filled cells are the
ones closest to the viewer) or from the far edge inward (`decreasing`: the filled cells are the
ones furthest from the viewer).  In both cases the interval `[min, max]` bounds the number of
visible cells of any duplicate-free completion of the line.
"""

from typing import Iterable, NamedTuple

from bitarray import bitarray
from bitarray.util import zeros


class ViewBounds(NamedTuple):
    """Inclusive interval of visible counts a partially filled line can still produce."""

    min: int
    max: int

    def contains(self, view: int) -> bool:
        """Returns whether `view` is included within this range."""
        return self.min <= view <= self.max


def increasing(size: int, prefix: Iterable[int]) -> ViewBounds:
    """Bounds for a line whose cells nearest to the viewer are filled.

    Args:
        size: Board size N.
        prefix: Heights of the filled cells, nearest to the viewer first.
    """
    highest = 0
    maxes = 0
    for height in prefix:
        if height > highest:
            highest = height
            maxes += 1

    # Once N is placed nothing behind it can be seen; otherwise N itself is still to come,
    # and at most every height above `highest` can appear in increasing order.
    return ViewBounds(maxes + (highest != size), maxes + size - highest)


def decreasing(size: int, suffix: Iterable[int]) -> ViewBounds:
    """Bounds for a line whose cells furthest from the viewer are filled.

    Args:
        size: Board size N.
        suffix: Heights of the filled cells, furthest from the viewer first.
    """
    seen = zeros(size)
    count = 0
    filled = 0
    next_highest = size

    for height in suffix:
        seen[height - 1] = True
        filled += 1
        if height == next_highest:
            # Every cell still to be placed is shorter: this one will always be visible.
            count += 1
            while next_highest > 0 and seen[next_highest - 1]:
                next_highest -= 1

    remaining = size - filled
    return ViewBounds(count + (remaining > 0), count + remaining)


class LineOfSight:
    """Incremental visible-count bounds for a line filled from the viewer's edge inward.

    Keeps the running maxima seen so far, each with the number of hidden cells placed after
    it, so that both `push` and `pop` are O(1).
    """

    def __init__(self, view: int, size: int) -> None:
        self.view = view
        """Expected number of visible cells (the clue)."""
        self.size = size
        """Board size N."""
        self._maxima: list[list[int]] = []
        """Running maxima as [height, hidden_followers] pairs, in placement order."""

    @property
    def visible(self) -> int:
        """Number of cells visible so far."""
        return len(self._maxima)

    @property
    def highest(self) -> int:
        """Tallest height placed so far (0 if empty)."""
        return self._maxima[-1][0] if self._maxima else 0

    def can_push(self, height: int) -> bool:
        """Returns whether placing `height` next keeps the clue within the bounds."""
        highest = self.highest
        visible = self.visible
        if height > highest:
            highest = height
            visible += 1
        return visible + (highest != self.size) <= self.view <= visible + self.size - highest

    def push(self, height: int) -> None:
        """Place `height` in the next cell."""
        if height > self.highest:
            self._maxima.append([height, 0])
        else:
            self._maxima[-1][1] += 1

    def pop(self) -> None:
        """Undo the last `push`."""
        last = self._maxima[-1]
        if last[1]:
            last[1] -= 1
        else:
            self._maxima.pop()


class ReverseLineOfSight:
    """Incremental visible-count bounds for a line filled from the far edge toward the viewer.

    Mirrors `decreasing`, with an undo stack so that `pop` restores the previous state.
    """

    def __init__(self, view: int, size: int) -> None:
        self.view = view
        """Expected number of visible cells (the clue)."""
        self.size = size
        """Board size N."""
        self.seen: bitarray = zeros(size)
        """Bit `h - 1` is set iff height `h` has been placed."""
        self.count = 0
        """Number of placed cells which are certainly visible."""
        self.next_highest = size
        """Tallest height not placed yet (0 once all are placed)."""
        self._undo: list[tuple[int, int, int]] = []
        """(height, count, next_highest) before each push."""

    @property
    def filled(self) -> int:
        """Number of cells placed so far."""
        return len(self._undo)

    def can_push(self, height: int) -> bool:
        """Returns whether placing `height` next keeps the clue within the bounds."""
        count = self.count + (height == self.next_highest)
        remaining = self.size - self.filled - 1
        return count + (remaining > 0) <= self.view <= count + remaining

    def push(self, height: int) -> None:
        """Place `height` in the next cell (one step closer to the viewer)."""
        self._undo.append((height, self.count, self.next_highest))
        self.seen[height - 1] = True
        if height == self.next_highest:
            self.count += 1
            while self.next_highest > 0 and self.seen[self.next_highest - 1]:
                self.next_highest -= 1

    def pop(self) -> None:
        """Undo the last `push`."""
        height, self.count, self.next_highest = self._undo.pop()
        self.seen[height - 1] = False
