"""Search statistics and progress reporting."""

from dataclasses import dataclass, field
from time import time
from typing import TextIO


def time_str(seconds: float) -> str:
    """Format a duration in seconds as "HH:MM:SS.ss"."""
    hours, rem = divmod(seconds, 3600)
    minutes, secs = divmod(rem, 60)
    return f"{int(hours):02}:{int(minutes):02}:{secs:05.2f}"


def int_comma(n: int) -> str:
    """Format an integer with commas as thousands separators."""
    return f"{n:,}"


@dataclass
class SolverStats:
    """Statistics collected during solving."""

    steps: int = 0
    """Number of search steps (tentative assignments) taken."""

    start_time: float = field(default_factory=time)
    """Timestamp when solving started."""

    depth: int = 0
    """Current depth of the search stack."""

    max_depth_reached: int = 0
    """Maximum depth of the search stack reached during solving."""

    def record_step(self, depth: int) -> None:
        """Account for one search step taken at the given stack depth."""
        self.steps += 1
        self.depth = depth
        self.max_depth_reached = max(self.max_depth_reached, depth)

    def elapsed(self) -> float:
        """Seconds since solving started."""
        return time() - self.start_time

    def report(self, logf: TextIO) -> None:
        """Print a concise progress line."""
        print(
            f"Checked {int_comma(self.steps)} board states after {time_str(self.elapsed())}; "
            f"current depth {self.depth}, max depth {self.max_depth_reached}.",
            file=logf,
            flush=True,
        )
