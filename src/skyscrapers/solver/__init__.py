"""Constraint solver for Skyscrapers headers."""

from skyscrapers.solver.search import Animation, NoSolutionError, Search, SearchState
from skyscrapers.solver.solver import solve

__all__ = ["Animation", "NoSolutionError", "Search", "SearchState", "solve"]
