from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import List

import numpy as np
from numba import njit

from .errors import make_io_error
from .lexer import Program
from .state import CellStore
from .streams import ByteSink, ByteSource

logger = logging.getLogger(__name__)

STOP_END = 0
STOP_IO = 1


class EOFPolicy(enum.Enum):
    """What ``,`` stores once the input source is exhausted."""

    UNCHANGED = 'unchanged'
    ZERO = 'zero'
    MAX = 'max'


@dataclass(frozen=True)
class TurnResult:
    pointer: int
    bytes_read: int
    bytes_written: int


@njit(cache=True)
def _run_until_io(code, jumps, memory, ip, pointer, stack, depth, cell_mask):
    """Execute from ``ip`` until the program ends or reaches ``.``/``,``.

    Returns (ip, pointer, depth, stop_reason). On STOP_IO, ``ip`` points at
    the I/O instruction, which the caller performs before resuming at ip + 1.
    """
    tape_len = len(memory)
    code_len = len(code)

    while ip < code_len:
        op = code[ip]

        if op == 62:  # '>'
            pointer += 1
            if pointer == tape_len:
                pointer = 0
        elif op == 60:  # '<'
            if pointer == 0:
                pointer = tape_len - 1
            else:
                pointer -= 1
        elif op == 43:  # '+'
            memory[pointer] = (memory[pointer] + 1) & cell_mask
        elif op == 45:  # '-'
            memory[pointer] = (memory[pointer] - 1) & cell_mask
        elif op == 46 or op == 44:  # '.' or ','
            return ip, pointer, depth, STOP_IO
        elif op == 91:  # '['
            if memory[pointer] == 0:
                ip = jumps[ip]
            else:
                stack[depth] = ip
                depth += 1
        elif op == 93:  # ']'
            depth -= 1
            if memory[pointer] != 0:
                ip = stack[depth]
                continue

        ip += 1

    return ip, pointer, depth, STOP_END


class _Turn:
    def __init__(self, cells: CellStore, source: ByteSource, sink: ByteSink, eof: EOFPolicy):
        self.cells = cells
        self.source = source
        self.sink = sink
        self.eof = eof
        self.bytes_read = 0
        self.bytes_written = 0

    def output(self) -> None:
        try:
            self.sink.write_byte(self.cells.read_cell() & 0xFF)
        except OSError as e:
            raise make_io_error(operation='write', cause=e) from e
        self.bytes_written += 1

    def input(self) -> None:
        try:
            value = self.source.read_byte()
        except OSError as e:
            raise make_io_error(operation='read', cause=e) from e

        if value is not None:
            self.cells.write_cell(value)
            self.bytes_read += 1
        elif self.eof is EOFPolicy.ZERO:
            self.cells.write_cell(0)
        elif self.eof is EOFPolicy.MAX:
            self.cells.write_cell(self.cells.max_value)

    def result(self) -> TurnResult:
        return TurnResult(pointer=self.cells.pointer, bytes_read=self.bytes_read, bytes_written=self.bytes_written)


def run_python(program: Program, turn: _Turn) -> None:
    cells = turn.cells
    source = program.source
    jumps = program.jumps
    stack: List[int] = []
    ip = 0
    length = len(source)

    while ip < length:
        cmd = source[ip]

        if cmd == 62:  # '>'
            cells.increment_pointer()
        elif cmd == 60:  # '<'
            cells.decrement_pointer()
        elif cmd == 43:  # '+'
            cells.increment_cell()
        elif cmd == 45:  # '-'
            cells.decrement_cell()
        elif cmd == 46:  # '.'
            turn.output()
        elif cmd == 44:  # ','
            turn.input()
        elif cmd == 91:  # '['
            if cells.read_cell() == 0:
                ip = int(jumps[ip])
            else:
                stack.append(ip)
        elif cmd == 93:  # ']'
            # a taken jump re-evaluates the '[', which pushes itself again
            top = stack.pop()
            if cells.read_cell() != 0:
                ip = top
                continue

        ip += 1


def run_jit(program: Program, turn: _Turn) -> None:
    cells = turn.cells
    code = program.code
    stack = np.zeros(max(1, int(np.count_nonzero(code == 91))), dtype=np.int64)
    ip, depth = 0, 0

    while True:
        ip, pointer, depth, stop = _run_until_io(
            code, program.jumps, cells.memory, ip, cells.pointer, stack, depth, cells.max_value
        )
        cells.pointer = int(pointer)
        if stop == STOP_END:
            return
        if code[ip] == 46:
            turn.output()
        else:
            turn.input()
        ip += 1


def execute(
    program: Program,
    cells: CellStore,
    source: ByteSource,
    sink: ByteSink,
    *,
    eof: EOFPolicy = EOFPolicy.UNCHANGED,
    jit: bool = True,
) -> TurnResult:
    """Run one turn of ``program`` against ``cells``.

    The cell store is mutated in place and keeps its state for the next turn.
    """
    turn = _Turn(cells, source, sink, eof)
    if jit:
        run_jit(program, turn)
    else:
        run_python(program, turn)

    result = turn.result()
    logger.debug(
        "turn finished (%s): pointer=%d read=%d written=%d",
        'jit' if jit else 'python', result.pointer, result.bytes_read, result.bytes_written,
    )
    return result
