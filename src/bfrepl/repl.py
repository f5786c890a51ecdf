from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import BinaryIO, Optional, TextIO, Union

from .api import Session
from .errors import BFError
from .state import CellStore

logger = logging.getLogger(__name__)

DEFAULT_PROMPT = "bf> "


def format_cells(cells: CellStore, count: int) -> str:
    """Rows of 8 cell values, with the pointer's cell marked."""
    values = cells.window(0, min(count, cells.size))
    rows = []
    for row_start in range(0, len(values), 8):
        row = []
        for i, v in enumerate(values[row_start:row_start + 8], start=row_start):
            row.append(f"[{v}]" if i == cells.pointer else str(v))
        rows.append(f"{row_start:5d}: " + " ".join(row))
    rows.append(f"ptr = {cells.pointer}")
    return "\n".join(rows)


def _is_sentinel(line: bytes) -> bool:
    return line == b"" or line.rstrip(b"\r\n") == b""


def run_source_file(
    session: Session,
    path: Union[str, Path],
    *,
    err: Optional[TextIO] = None,
    dump: int = 0,
) -> int:
    """Run a whole source file as a single turn. Returns the exit status."""
    err = err or sys.stderr
    try:
        code = Path(path).read_bytes()
    except OSError as e:
        print(f"Couldn't read {path}: {e.strerror or e}", file=err)
        return 1

    try:
        session.run(code)
    except BFError as e:
        print(e, file=err)
        return 1

    if dump:
        print(format_cells(session.cells, dump), file=err)
    return 0


def run_repl(
    session: Session,
    lines: BinaryIO,
    prompt_out: BinaryIO,
    *,
    err: Optional[TextIO] = None,
    prompt: str = DEFAULT_PROMPT,
    dump: int = 0,
) -> int:
    """Read commands line by line until an empty line or end of input.

    The tape survives between lines. Errors end only the current turn.
    """
    err = err or sys.stderr
    prompt_bytes = prompt.encode('utf-8')

    while True:
        prompt_out.write(prompt_bytes)
        prompt_out.flush()

        line = lines.readline()
        if _is_sentinel(line):
            logger.debug("end of session after %d turn(s)", session.turns)
            return 0

        logger.debug("turn %d: %d byte(s)", session.turns + 1, len(line))
        try:
            session.run(line)
        except BFError as e:
            print(e, file=err)
            continue

        if dump:
            print(format_cells(session.cells, dump), file=err)
