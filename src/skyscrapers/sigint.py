"""Process-wide CTRL+C flag, polled by long-running operations."""

import signal
from types import FrameType

_occurred = False


def _handler(signum: int, frame: FrameType | None) -> None:
    global _occurred  # noqa: PLW0603
    _occurred = True


def initialize() -> None:
    """Install the SIGINT handler.

    After this call, CTRL+C no longer raises `KeyboardInterrupt`; it sets a flag which the
    solver and generator poll between steps.
    """
    signal.signal(signal.SIGINT, _handler)


def occurred() -> bool:
    """Return whether the interrupt signal has been received."""
    return _occurred


def reset() -> None:
    """Clear the flag."""
    global _occurred  # noqa: PLW0603
    _occurred = False
