from __future__ import annotations

import logging

import numpy as np

logger = logging.getLogger(__name__)

MIN_TAPE_SIZE = 30000


class Tape:
    """
    Zero-initialised, growable array of 8-bit cells.

    Reads past the allocation see zero without allocating; a write there
    grows the buffer to max(index + 1, 2 * size, MIN_TAPE_SIZE).
    """

    def __init__(self, size: int = MIN_TAPE_SIZE):
        self.cells = np.zeros(size, dtype=np.uint8)

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, index: int) -> int:
        if index >= len(self.cells):
            return 0
        return int(self.cells[index])

    def __setitem__(self, index: int, value: int) -> None:
        if index >= len(self.cells):
            self.grow(index)
        self.cells[index] = value & 0xFF

    def grow(self, index: int) -> None:
        size = len(self.cells)
        new_size = max(index + 1, 2 * size, MIN_TAPE_SIZE)
        cells = np.zeros(new_size, dtype=np.uint8)
        cells[:size] = self.cells
        self.cells = cells
        logger.debug("tape grown from %d to %d cells", size, new_size)

    def snapshot(self, start: int = 0, stop: int | None = None) -> bytes:
        """Copy of cells[start:stop] as bytes (zero-padded past the allocation)."""
        stop = len(self.cells) if stop is None else stop
        data = self.cells[start:stop].tobytes()
        return data + bytes(max(0, stop - start - len(data)))
