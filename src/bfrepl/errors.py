from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple


def _locate(source: bytes, position: int) -> Tuple[int, int]:
    line = source.count(b'\n', 0, position) + 1
    line_start = source.rfind(b'\n', 0, position) + 1
    return line, position - line_start + 1


def _build_context(source: bytes, line_no_1: int, column_1: int, *, context: int = 2) -> str:
    lines = source.decode('utf-8', errors='replace').split('\n')
    idx = max(1, line_no_1)
    start = max(1, idx - context)
    end = min(len(lines), idx + context)

    out: List[str] = []
    for i in range(start, end + 1):
        prefix = '>' if i == idx else ' '
        out.append(f"{prefix} {i:4d} | {lines[i - 1]}")
        if i == idx:
            out.append(f"       | {' ' * (column_1 - 1)}^")
    return "\n".join(out)


def _hint_for(bracket: str) -> Optional[str]:
    if bracket == '[':
        return 'Every "[" needs a "]" later in the same command; loops cannot span REPL lines.'
    if bracket == ']':
        return 'This "]" closes a loop that was never opened. Remove it or add a "[" before it.'
    return None


@dataclass
class BFError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class UnbalancedBracketError(BFError):
    position: int
    line: int
    column: int
    bracket: str
    context: str


@dataclass
class BFIOError(BFError):
    operation: str


def make_bracket_error(*, source: bytes, position: int) -> UnbalancedBracketError:
    bracket = chr(source[position])
    line, column = _locate(source, position)
    ctx = _build_context(source, line, column)
    hint = _hint_for(bracket)
    hint_block = f"\nHint: {hint}" if hint else ""
    return UnbalancedBracketError(
        message=f"BracketError: unmatched '{bracket}' (line {line}, column {column})\n{ctx}{hint_block}",
        position=position,
        line=line,
        column=column,
        bracket=bracket,
        context=ctx,
    )


def make_io_error(*, operation: str, cause: OSError) -> BFIOError:
    return BFIOError(
        message=f"IOError: {operation} failed: {cause}",
        operation=operation,
    )
