"""Main solver module for Skyscrapers puzzles."""

from typing import Callable, TextIO

from skyscrapers import sigint
from skyscrapers.board import Board
from skyscrapers.config import SolverConfig
from skyscrapers.config import config as solver_config
from skyscrapers.header import Header
from skyscrapers.solver.incremental import IncrementalSearch
from skyscrapers.solver.search import Animation, NoSolutionError, Search, SearchState


def solve(
    header: Header,
    *,
    settings: SolverConfig | None = None,
    cancelled: Callable[[], bool] = sigint.occurred,
    animation: Animation | None = None,
    logf: TextIO | None = None,
) -> Board | None:
    """Find a board whose view counts match the header.

    The first consistent board found is returned; no attempt is made to prove uniqueness.

    Args:
        header: The clues to satisfy.
        settings: Solver configuration.  Defaults to the global configuration.
        cancelled: Polled between search steps; the search stops once it returns True.
        animation: If given, partial boards are displayed while searching.  Animation always
            uses the domain search, whatever the configured strategy.
        logf: If given, progress is logged to this file object.

    Returns:
        The completed board, or None if the search was cancelled.

    Raises:
        NoSolutionError: If no board matches the header.
    """
    settings = settings or solver_config
    search: Search | IncrementalSearch
    if settings.strategy == "incremental" and animation is None:
        search = IncrementalSearch(header, settings=settings, cancelled=cancelled, logf=logf)
    else:
        search = Search(
            header, settings=settings, cancelled=cancelled, animation=animation, logf=logf
        )

    state = search.run()
    if state is SearchState.CANCELLED:
        return None
    if state is SearchState.NO_SOLUTION:
        raise NoSolutionError(f"No solution found for the header '{header}'.")
    return search.solution
