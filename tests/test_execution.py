#!/usr/bin/env python3
"""Execution of Brainfuck programs on both engine paths."""

import sys
import os
sys.path.append(os.path.join(os.path.dirname(__file__), '..', 'src'))

import pytest

from bfrepl import (
    BFIOError,
    EOFPolicy,
    RunOptions,
    Session,
    UnbalancedBracketError,
    run_file,
    run_string,
)
from bfrepl.streams import BufferSink, BufferSource

HELLO_WORLD = (
    "++++++++[>++++[>++>+++>+++>+<<<<-]>+>+>->>+[<]<-]"
    ">>.>---.+++++++..+++.>>.<-.<.+++.------.--------.>>+.>++."
)

engines = pytest.mark.parametrize("jit", [True, False], ids=["jit", "python"])


def _session(jit, input_data=b"", **kwargs):
    return Session(
        options=RunOptions(jit=jit, **kwargs),
        stdin=BufferSource(input_data),
        stdout=BufferSink(),
    )


@engines
def test_hello_world(jit):
    assert run_string(HELLO_WORLD, options=RunOptions(jit=jit)) == b"Hello World!\n"


@engines
def test_echo_every_byte(jit):
    session = _session(jit, bytes(range(256)))
    for _ in range(256):
        session.run(",.")
    assert session.stdout.getvalue() == bytes(range(256))


@engines
def test_pointer_wraps_to_last_cell(jit):
    session = _session(jit)
    session.cells.memory[-1] = 42
    session.run("<.")
    assert session.cells.pointer == 65535
    assert session.stdout.getvalue() == bytes([42])


@engines
def test_moving_right_tape_size_times_is_identity(jit):
    session = _session(jit)
    session.run(">>>")
    result = session.run(">" * 65536)
    assert result.pointer == 3

    small = _session(jit, tape_size=5)
    small.run(">" * 5)
    assert small.cells.pointer == 0


@engines
def test_cell_wraps(jit):
    session = _session(jit)
    session.run("+" * 256)
    assert session.cells.read_cell() == 0
    session.run("-" * 256)
    assert session.cells.read_cell() == 0
    session.run("-.")
    assert session.stdout.getvalue() == b"\xff"


@engines
def test_zero_cell_idiom(jit):
    session = _session(jit)
    session.run("+++[-]")
    assert session.cells.read_cell() == 0


@engines
def test_loop_skipped_on_zero_cell(jit):
    session = _session(jit)
    session.run("[-]")
    assert session.cells.read_cell() == 0
    session.run("[+.]")
    assert session.stdout.getvalue() == b""


@engines
def test_copy_by_subtraction(jit):
    session = _session(jit, b"\x05")
    result = session.run(",[>+<-]>.")
    assert session.cells.window(0, 2) == [0, 5]
    assert session.stdout.getvalue() == b"\x05"
    assert (result.pointer, result.bytes_read, result.bytes_written) == (1, 1, 1)


@engines
def test_nested_loops(jit):
    # 3 * 4 * 5
    out = run_string("+++[>++++[>+++++<-]<-]>>.", options=RunOptions(jit=jit))
    assert out == bytes([60])


@engines
def test_comments_are_ignored(jit):
    out = run_string("add three: +++ then print it .", options=RunOptions(jit=jit))
    assert out == b"\x03"


@engines
def test_state_persists_between_turns(jit):
    session = _session(jit)
    session.run("+++")
    session.run(".")
    assert session.stdout.getvalue() == b"\x03"
    assert session.turns == 2


@engines
def test_unbalanced_turn_leaves_tape_untouched(jit):
    session = _session(jit)
    session.run("++>+")
    before = session.cells.memory.copy()

    with pytest.raises(UnbalancedBracketError):
        session.run("[+")
    with pytest.raises(UnbalancedBracketError):
        session.run("+>]")

    assert (session.cells.memory == before).all()
    assert session.cells.pointer == 1


@engines
@pytest.mark.parametrize(
    "policy, expected",
    [(EOFPolicy.UNCHANGED, 3), (EOFPolicy.ZERO, 0), (EOFPolicy.MAX, 255)],
)
def test_eof_policy(jit, policy, expected):
    session = _session(jit, b"", eof=policy)
    result = session.run("+++,.")
    assert session.stdout.getvalue() == bytes([expected])
    assert result.bytes_read == 0


@engines
def test_wide_cells(jit):
    session = _session(jit, cell_bits=16, eof=EOFPolicy.MAX)
    session.run("+" * 300)
    assert session.cells.read_cell() == 300
    session.run(".")
    assert session.stdout.getvalue() == bytes([300 & 0xFF])
    session.run(",")
    assert session.cells.read_cell() == 0xFFFF


class _BrokenSink:
    def write_byte(self, value):
        raise BrokenPipeError(32, "Broken pipe")


class _FailingSource:
    def read_byte(self):
        raise OSError(5, "Input/output error")


@engines
def test_io_failures_are_reported(jit):
    session = Session(options=RunOptions(jit=jit), stdout=_BrokenSink())
    with pytest.raises(BFIOError) as info:
        session.run("+.")
    assert info.value.operation == 'write'

    session = Session(options=RunOptions(jit=jit), stdin=_FailingSource())
    with pytest.raises(BFIOError) as info:
        session.run(",")
    assert info.value.operation == 'read'


def test_engines_agree():
    code = HELLO_WORLD + "[-]>,[.,]<<<-[>+<-----]>."
    data = b"some input bytes"
    eof = EOFPolicy.ZERO
    assert run_string(code, data, options=RunOptions(jit=True, eof=eof)) == run_string(
        code, data, options=RunOptions(jit=False, eof=eof)
    )


def test_run_file(tmp_path):
    path = tmp_path / "echo.bf"
    path.write_bytes(b",[.,]")
    assert run_file(path, b"abc", options=RunOptions(eof=EOFPolicy.ZERO)) == b"abc"


@pytest.mark.parametrize("kwargs", [{"tape_size": 0}, {"cell_bits": 64}])
def test_bad_options_rejected_by_session(kwargs):
    options = RunOptions(**kwargs)
    with pytest.raises(ValueError):
        Session(options=options)


if __name__ == "__main__":
    raise SystemExit(pytest.main([__file__]))
