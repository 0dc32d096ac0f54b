"""Skyscrapers solver configuration."""

from typing import Literal

from dotenv import find_dotenv
from pydantic_settings import BaseSettings, SettingsConfigDict

# Determine the environment file path, or None if not found
ENV_FILE = find_dotenv(usecwd=True) or None


class SolverConfig(BaseSettings):
    """Configuration settings for the Skyscrapers solver.

    Every field may be overridden with an environment variable (or `.env` entry) named after
    the field and prefixed with `SKYSCRAPERS_`, e.g. `SKYSCRAPERS_BRANCHING=fewest`.
    """

    deterministic: bool = True
    """Whether to try the permitted heights of a cell in ascending order. Default: True.

    If False, heights are tried in domain-store order, which depends on the removal history.
    """

    branching: Literal["leftmost", "fewest"] = "leftmost"
    """Which undecided cell to branch on.

    "leftmost" (default) picks the first undecided cell in row-major order, "fewest" picks the
    undecided cell with the fewest permitted heights (ties broken by row-major order).
    """

    strategy: Literal["domains", "incremental"] = "domains"
    """Search strategy.

    "domains" (default) runs the frame-stack search over per-cell domains.  "incremental" fills
    the board cell by cell, gated by the line-of-sight state of each edge.
    """

    view_filter: bool = True
    """Whether to narrow the domains by the view counts of every line. Default: True.

    The filter runs to a fixpoint together with uniqueness propagation.  Completed boards are
    always checked against the header, so this is only a pruning aid.
    """

    line_table_max_size: int = 9
    """Largest board size for which every row and column permutation is listed. Default: 9.

    Up to this size, each line keeps the permutations matching its two clues and the current
    domains, and the heights no permutation uses are forbidden.  The table of all N! permutations
    takes N * N! bytes, so raising this much above 9 is not advised.
    """

    animate_interval: float = 0.25
    """Seconds to sleep between two animation frames. Default: 0.25."""

    report_interval: int = 10_000
    """Interval (in number of search steps) at which to report progress. Default: 10,000."""

    verbose: bool = False
    """Whether to log the configuration and search progress to stderr. Default: False."""

    model_config = SettingsConfigDict(
        env_file=ENV_FILE,
        env_file_encoding="utf-8",
        env_prefix="SKYSCRAPERS_",
        extra="ignore",
    )


config = SolverConfig()
