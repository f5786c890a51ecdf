from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Union

from .engine import EOFPolicy, TurnResult, execute
from .lexer import preprocess
from .state import CellStore
from .streams import BufferSink, BufferSource, ByteSink, ByteSource


@dataclass(frozen=True)
class RunOptions:
    tape_size: int = 65536
    cell_bits: int = 8
    eof: EOFPolicy = EOFPolicy.UNCHANGED
    jit: bool = True


class Session:
    """Interpreter state that lives across turns: one tape, one pointer."""

    def __init__(
        self,
        *,
        options: Optional[RunOptions] = None,
        stdin: Optional[ByteSource] = None,
        stdout: Optional[ByteSink] = None,
    ):
        self.options = options or RunOptions()
        self.cells = CellStore(size=self.options.tape_size, cell_bits=self.options.cell_bits)
        self.stdin = stdin if stdin is not None else BufferSource()
        self.stdout = stdout if stdout is not None else BufferSink()
        self.turns = 0

    def run(self, code: Union[str, bytes, bytearray]) -> TurnResult:
        # brackets are resolved before anything touches the tape
        program = preprocess(code)
        self.turns += 1
        return execute(
            program,
            self.cells,
            self.stdin,
            self.stdout,
            eof=self.options.eof,
            jit=self.options.jit,
        )


def run_string(
    code: Union[str, bytes],
    input_data: bytes = b"",
    *,
    options: Optional[RunOptions] = None,
) -> bytes:
    sink = BufferSink()
    session = Session(options=options, stdin=BufferSource(input_data), stdout=sink)
    session.run(code)
    return sink.getvalue()


def run_file(
    path: Union[str, Path],
    input_data: bytes = b"",
    *,
    options: Optional[RunOptions] = None,
) -> bytes:
    return run_string(Path(path).read_bytes(), input_data, options=options)
