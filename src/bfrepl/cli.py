from __future__ import annotations

import argparse
import logging
import sys
from typing import List, Optional

from .api import RunOptions, Session
from .engine import EOFPolicy
from .repl import DEFAULT_PROMPT, run_repl, run_source_file
from .state import CELL_DTYPES
from .streams import StreamSink, StreamSource


def _positive_int(text: str) -> int:
    value = int(text)
    if value < 1:
        raise argparse.ArgumentTypeError(f"must be a positive integer, got {value}")
    return value


def _non_negative_int(text: str) -> int:
    value = int(text)
    if value < 0:
        raise argparse.ArgumentTypeError(f"must be zero or a positive integer, got {value}")
    return value


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="bfrepl",
        description="Brainfuck interpreter. Runs FILE once, or starts a REPL whose tape persists between lines.",
    )
    parser.add_argument("file", nargs="?", help="Brainfuck source file (omit for interactive mode)")
    parser.add_argument("--tape-size", type=_positive_int, default=65536, help="Number of cells (default 65536)")
    parser.add_argument("--cell-bits", type=int, choices=sorted(CELL_DTYPES), default=8, help="Cell width in bits (default 8)")
    parser.add_argument(
        "--eof",
        choices=[p.value for p in EOFPolicy],
        default=EOFPolicy.UNCHANGED.value,
        help="What ',' stores when input is exhausted (default: leave the cell unchanged)",
    )
    parser.add_argument("--no-jit", action="store_true", help="Use the pure-Python engine instead of the numba kernel")
    parser.add_argument("--prompt", default=DEFAULT_PROMPT, help=f"REPL prompt (default {DEFAULT_PROMPT!r})")
    parser.add_argument("--dump", type=_non_negative_int, default=0, metavar="N", help="Print the first N cells to stderr after each run")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    options = RunOptions(
        tape_size=args.tape_size,
        cell_bits=args.cell_bits,
        eof=EOFPolicy(args.eof),
        jit=not args.no_jit,
    )
    stdin = sys.stdin.buffer
    stdout = sys.stdout.buffer
    session = Session(options=options, stdin=StreamSource(stdin), stdout=StreamSink(stdout))

    try:
        if args.file:
            return run_source_file(session, args.file, dump=args.dump)
        return run_repl(session, stdin, stdout, prompt=args.prompt, dump=args.dump)
    except KeyboardInterrupt:
        print(file=sys.stderr)
        return 130
    except BrokenPipeError:
        # the prompt could not be written; nobody is listening any more
        return 1
