"""Backtracking search over the domain store.

The search keeps an explicit stack of frames instead of recursing, so that it can be advanced
one step at a time (which the animation relies on) and polled for cancellation between steps.
Each frame owns an immutable snapshot of the domain store taken when the frame was pushed; a
step restores that snapshot, tries the next permitted height of the frame's branching cell,
and either pushes a new frame, backtracks, or finishes.
"""

import time
from dataclasses import dataclass, field
from enum import Enum
from pprint import pprint
from typing import Callable, TextIO

from sortedcontainers import SortedSet

from skyscrapers import sigint
from skyscrapers.board import Board
from skyscrapers.config import SolverConfig
from skyscrapers.config import config as solver_config
from skyscrapers.format import format_partial
from skyscrapers.header import Header
from skyscrapers.solver.domains import Domains
from skyscrapers.solver.lines import Candidates, LineTables
from skyscrapers.solver.propagate import propagate, prune_header, reduce, views_consistent
from skyscrapers.solver.stats import SolverStats, int_comma


class SearchState(Enum):
    """State of a search.  `SEARCHING` is initial, the others are terminal."""

    SEARCHING = "searching"
    SOLVED = "solved"
    NO_SOLUTION = "no solution"
    CANCELLED = "cancelled"


class NoSolutionError(ValueError):
    """Exception raised when a header cannot be satisfied."""

    pass


@dataclass
class Frame:
    """One branching point of the search."""

    snapshot: bytes
    """Domain store before any height was tried for `cell`."""

    cell: int
    """1D index of the branching cell."""

    values: tuple[int, ...]
    """Heights to try for `cell`, in order."""

    cursor: int = 0
    """Index in `values` of the next height to try."""

    candidates: Candidates = ()
    """Line candidates before any height was tried for `cell` (empty without line tables)."""


@dataclass
class Animation:
    """Displays the board between search steps."""

    writer: TextIO
    """Where frames are written."""

    interval: float
    """Seconds to sleep after each frame."""

    color: bool = False
    """Whether to use ANSI colors (and clear the screen between frames)."""

    sleep: Callable[[float], None] = field(default=time.sleep)
    """Sleep function, injectable for tests."""

    frames: int = 0
    """Number of frames emitted so far."""

    def emit(self, board: Board) -> None:
        """Write one frame, then sleep for the configured interval."""
        self.writer.write(format_partial(board, color=self.color))
        self.writer.flush()
        self.frames += 1
        self.sleep(self.interval)


class Search:
    """Restartable backtracking search for a board matching a header.

    Construction runs header pruning and the initial propagation; `step` then advances the
    search by one tentative assignment, and `run` steps until a terminal state is reached.
    """

    def __init__(
        self,
        header: Header,
        *,
        settings: SolverConfig | None = None,
        cancelled: Callable[[], bool] = sigint.occurred,
        animation: Animation | None = None,
        logf: TextIO | None = None,
    ) -> None:
        """Initialize the search.

        Args:
            header: The clues to satisfy.
            settings: Solver configuration.  Defaults to the global configuration.
            cancelled: Polled before every step and after every animation frame.
            animation: If given, the board is displayed between steps.
            logf: If given, progress is logged to this file object.
        """
        self.header = header
        self.settings = settings or solver_config
        self.cancelled = cancelled
        self.animation = animation
        self.logf = logf

        self.domains = Domains(header.size)
        """Current domains; restored from the top frame's snapshot at each step."""

        self.lines: LineTables | None = None
        """Candidate permutations of every line, if the board is small enough to list them."""
        if self.settings.view_filter and 0 < header.size <= self.settings.line_table_max_size:
            self.lines = LineTables(header)

        self.stack: list[Frame] = []
        """Search frames, innermost last."""

        self.state = SearchState.SEARCHING
        """Current state of the search."""

        self.solution: Board | None = None
        """The completed board, once `state` is `SOLVED`."""

        self.stats = SolverStats()
        """Statistics collected during solving."""

        if self.logf is not None:
            print("Solver config:", file=self.logf, flush=True)
            pprint(self.settings.model_dump(), stream=self.logf, width=120)
            print(f"Header: {header} (size {header.size})", file=self.logf, flush=True)

        self._start()

    def _start(self) -> None:
        """Prune the domains from the header and reduce them to the initial fixpoint."""
        worklist = prune_header(self.domains, self.header)
        if worklist is None:
            self._finish(SearchState.NO_SOLUTION)
            return
        pruned = self.domains.to_board()
        if not propagate(self.domains, worklist):
            self._finish(SearchState.NO_SOLUTION)
            return
        # The pruned cells are only shown once propagation has found them clash-free.
        if self._animate(pruned):
            return

        if not self._reduce([]):
            self._finish(SearchState.NO_SOLUTION)
            return
        if self._animate():
            return

        if self.domains.is_complete():
            self.solution = self.domains.to_board()
            self._finish(SearchState.SOLVED)
            return
        self._push_frame()

    def _animate(self, board: Board | None = None) -> bool:
        """Emit a board (by default, the decided cells of the domains) if animating.

        Returns:
            True if cancellation was requested during the frame (the search is then over).
        """
        if self.animation is None:
            return False
        self.animation.emit(board if board is not None else self.domains.to_board())
        if self.cancelled():
            self._finish(SearchState.CANCELLED)
            return True
        return False

    def _reduce(self, worklist: list[int]) -> bool:
        """Reduce the domains to a fixpoint and check the view counts against the header.

        With the view filter disabled, only a complete board is checked.
        """
        if not reduce(
            self.domains, self.header, worklist, self.lines, view_filter=self.settings.view_filter
        ):
            return False
        if self.settings.view_filter or self.domains.is_complete():
            return views_consistent(self.domains, self.header)
        return True

    def _branch_cell(self) -> int:
        """Choose the undecided cell to branch on, according to the branching setting."""
        counts = [self.domains.count(idx) for idx in range(self.header.size**2)]
        undecided = [idx for idx, count in enumerate(counts) if count >= 2]
        if self.settings.branching == "fewest":
            return min(undecided, key=lambda idx: (counts[idx], idx))
        return undecided[0]

    def _push_frame(self) -> None:
        """Push a frame branching on a new undecided cell."""
        cell = self._branch_cell()
        values = self.domains.permitted(cell)
        ordered = tuple(SortedSet(values)) if self.settings.deterministic else tuple(values)
        candidates = self.lines.candidates if self.lines is not None else ()
        self.stack.append(Frame(self.domains.snapshot(), cell, ordered, candidates=candidates))

    def _finish(self, state: SearchState) -> None:
        self.state = state
        if self.logf is not None:
            print(
                f"Search finished: {state.value} after {int_comma(self.stats.steps)} steps "
                f"(max depth {self.stats.max_depth_reached}).",
                file=self.logf,
                flush=True,
            )

    def step(self) -> SearchState:
        """Advance the search by one tentative assignment (or one backtrack).

        Returns:
            The state of the search after the step.
        """
        if self.state is not SearchState.SEARCHING:
            return self.state
        if self.cancelled():
            self._finish(SearchState.CANCELLED)
            return self.state

        frame = self.stack[-1]
        self.domains.restore(frame.snapshot)
        if self.lines is not None:
            self.lines.candidates = frame.candidates

        # All heights tried for this cell: backtrack to the previous frame.
        if frame.cursor >= len(frame.values):
            self.stack.pop()
            if not self.stack:
                self._finish(SearchState.NO_SOLUTION)
            return self.state

        height = frame.values[frame.cursor]
        frame.cursor += 1

        self.stats.record_step(len(self.stack))
        if (
            self.logf is not None
            and self.settings.report_interval > 0
            and self.stats.steps % self.settings.report_interval == 0
        ):
            self.stats.report(self.logf)

        self.domains.fix(frame.cell, height)
        if not self._reduce([frame.cell]):
            return self.state  # Infeasible; the next step tries the next height

        if self.domains.is_complete():
            self.solution = self.domains.to_board()
            self._finish(SearchState.SOLVED)
            return self.state

        self._push_frame()
        self._animate()
        return self.state

    def run(self) -> SearchState:
        """Step until the search reaches a terminal state."""
        while self.state is SearchState.SEARCHING:
            self.step()
        return self.state
