#!/usr/bin/env python3
"""Cell store arithmetic: pointer and cell wraparound."""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from bfrepl import CellStore


def test_starts_zeroed():
    cells = CellStore()
    assert cells.size == 65536
    assert cells.pointer == 0
    assert not cells.memory.any()


def test_pointer_wraps_left_and_right():
    cells = CellStore(size=4)
    cells.decrement_pointer()
    assert cells.pointer == 3
    cells.increment_pointer()
    assert cells.pointer == 0

    for _ in range(4):
        cells.increment_pointer()
    assert cells.pointer == 0


def test_cell_wraps_at_byte_boundary():
    cells = CellStore(size=8)
    cells.decrement_cell()
    assert cells.read_cell() == 255
    cells.increment_cell()
    assert cells.read_cell() == 0

    for _ in range(256):
        cells.increment_cell()
    assert cells.read_cell() == 0


def test_write_cell_masks_to_width():
    cells = CellStore(size=8)
    cells.write_cell(0x1FF)
    assert cells.read_cell() == 0xFF

    wide = CellStore(size=8, cell_bits=16)
    wide.write_cell(0x1FF)
    assert wide.read_cell() == 0x1FF
    wide.write_cell(-1)
    assert wide.read_cell() == wide.max_value == 0xFFFF


def test_window_wraps():
    cells = CellStore(size=4)
    cells.decrement_pointer()
    cells.write_cell(7)
    assert cells.window(2, 4) == [0, 7, 0, 0]


@pytest.mark.parametrize("kwargs", [{"size": 0}, {"cell_bits": 12}])
def test_rejects_bad_configuration(kwargs):
    with pytest.raises(ValueError):
        CellStore(**kwargs)


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__]))
