"""Skyscrapers puzzle generator, solver and checker.

Each puzzle is an N x N board of building heights 1..N, every height appearing once per row
and once per column, surrounded by a header of 4N clues: the number of buildings visible from
each edge, a taller building hiding all shorter ones behind it.
"""

from sys import exit

from .cli import run


def main() -> None:
    """Main entry point for the Skyscrapers command line."""
    exit(run())
