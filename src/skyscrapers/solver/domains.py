"""Domain store: the set of heights still permitted for every cell of the board."""

import numpy as np

from skyscrapers.board import Board


class Domains:
    """Per-cell domains of an N x N board, packed into a single bytearray.

    Each cell owns a region of N + 1 bytes.  The first byte is the current domain size k, and
    the next k bytes hold the permitted heights in no particular order.  Removal swaps the last
    permitted height into the freed slot, so the store never allocates after construction.

    Cells are addressed by their 1D (row-major) index, as in `Board`.
    """

    def __init__(self, size: int, data: bytes | bytearray | None = None) -> None:
        self.size = size
        """Board size N."""
        self.stride = size + 1
        """Number of bytes per cell."""
        if data is None:
            full = bytes([size]) + bytes(range(1, size + 1))
            data = full * (size * size)
        expected = size * size * self.stride
        if len(data) != expected:
            raise ValueError(f"Domain data has {len(data)} bytes, expected {expected}.")
        self.data = bytearray(data)
        """Packed cell domains."""

    def count(self, idx: int) -> int:
        """Number of heights still permitted for the cell."""
        return self.data[idx * self.stride]

    def accepts(self, idx: int, height: int) -> bool:
        """Returns whether `height` is still permitted for the cell."""
        start = idx * self.stride + 1
        return self.data.find(height, start, start + self.data[start - 1]) != -1

    def permitted(self, idx: int) -> bytes:
        """The heights still permitted for the cell, in store order."""
        start = idx * self.stride + 1
        return bytes(self.data[start : start + self.data[start - 1]])

    def value(self, idx: int) -> int:
        """The height of a decided cell (one whose domain has exactly one height)."""
        return self.data[idx * self.stride + 1]

    def fix(self, idx: int, height: int) -> bool:
        """Collapse the cell's domain to `height`.

        Returns:
            False (and leaves the cell untouched) if `height` is not permitted, else True.
        """
        if not self.accepts(idx, height):
            return False
        start = idx * self.stride
        self.data[start] = 1
        self.data[start + 1] = height
        return True

    def forbid(self, idx: int, height: int) -> bool:
        """Remove `height` from the cell's domain.

        Returns:
            True if `height` was permitted (and has been removed), else False.
        """
        start = idx * self.stride
        count = self.data[start]
        pos = self.data.find(height, start + 1, start + 1 + count)
        if pos == -1:
            return False
        self.data[pos] = self.data[start + count]
        self.data[start] = count - 1
        return True

    def is_complete(self) -> bool:
        """Returns whether every cell is decided."""
        return all(self.data[start] == 1 for start in range(0, len(self.data), self.stride))

    def snapshot(self) -> bytes:
        """Immutable copy of the whole store, for `restore`."""
        return bytes(self.data)

    def restore(self, snapshot: bytes) -> None:
        """Overwrite the store (in place) with a snapshot taken from a store of the same size."""
        self.data[:] = snapshot

    def as_mask(self) -> np.ndarray:
        """Boolean (N * N, N + 1) array; entry [idx, h] is set iff `h` is permitted for `idx`."""
        size = self.size
        cells = np.frombuffer(bytes(self.data), dtype=np.uint8).reshape(size * size, self.stride)
        listed = np.arange(size) < cells[:, :1]
        mask = np.zeros((size * size, size + 1), dtype=bool)
        mask[np.nonzero(listed)[0], cells[:, 1:][listed]] = True
        return mask

    def to_board(self) -> Board:
        """The board of decided cells; undecided cells are 0."""
        return Board(
            (
                self.data[start + 1] if self.data[start] == 1 else 0
                for start in range(0, len(self.data), self.stride)
            ),
            self.size,
        )
