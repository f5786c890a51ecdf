from __future__ import annotations

from dataclasses import dataclass, field
from typing import List

import numpy as np


CELL_DTYPES = {
    8: np.uint8,
    16: np.uint16,
    32: np.uint32,
}


@dataclass
class CellStore:
    """The tape: a fixed number of cells plus a wrapping cell pointer."""

    size: int = 65536
    cell_bits: int = 8
    pointer: int = 0
    memory: np.ndarray = field(init=False, repr=False)

    def __post_init__(self) -> None:
        if self.size < 1:
            raise ValueError(f"Tape size must be positive, got {self.size}")
        if self.cell_bits not in CELL_DTYPES:
            raise ValueError(f"Unsupported cell width: {self.cell_bits} bits")
        self.memory = np.zeros(self.size, dtype=CELL_DTYPES[self.cell_bits])
        self.pointer %= self.size

    @property
    def max_value(self) -> int:
        return (1 << self.cell_bits) - 1

    def increment_pointer(self) -> None:
        self.pointer += 1
        if self.pointer == self.size:
            self.pointer = 0

    def decrement_pointer(self) -> None:
        if self.pointer == 0:
            self.pointer = self.size - 1
        else:
            self.pointer -= 1

    def increment_cell(self) -> None:
        self.memory[self.pointer] = (int(self.memory[self.pointer]) + 1) & self.max_value

    def decrement_cell(self) -> None:
        self.memory[self.pointer] = (int(self.memory[self.pointer]) - 1) & self.max_value

    def read_cell(self) -> int:
        return int(self.memory[self.pointer])

    def write_cell(self, value: int) -> None:
        self.memory[self.pointer] = value & self.max_value

    def window(self, start: int = 0, count: int = 16) -> List[int]:
        """Cell values from ``start`` onwards, wrapping at the end of the tape."""
        return [int(self.memory[(start + i) % self.size]) for i in range(count)]
