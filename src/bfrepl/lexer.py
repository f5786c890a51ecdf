from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, List, Union

import numpy as np

from .errors import make_bracket_error

logger = logging.getLogger(__name__)

OPEN = ord('[')
CLOSE = ord(']')


@dataclass(frozen=True)
class Program:
    source: bytes
    code: np.ndarray
    jumps: np.ndarray

    def __len__(self) -> int:
        return len(self.source)

    def pairs(self) -> Dict[int, int]:
        """Map every ``[`` index to the index of its ``]``."""
        return {i: int(self.jumps[i]) for i in np.flatnonzero(self.code == OPEN).tolist()}


def as_bytes(code: Union[str, bytes, bytearray]) -> bytes:
    if isinstance(code, str):
        return code.encode('utf-8')
    return bytes(code)


def preprocess(code: Union[str, bytes, bytearray]) -> Program:
    """Resolve loop brackets into jump targets.

    The buffer is scanned right to left: each ``]`` is pushed, each ``[``
    pops its partner. Unbalanced input raises ``UnbalancedBracketError``
    before anything has been executed.
    """
    source = as_bytes(code)
    jumps = np.full(len(source), -1, dtype=np.int64)
    stack: List[int] = []

    for i in range(len(source) - 1, -1, -1):
        b = source[i]
        if b == CLOSE:
            stack.append(i)
        elif b == OPEN:
            if not stack:
                raise make_bracket_error(source=source, position=i)
            j = stack.pop()
            jumps[i] = j
            jumps[j] = i

    if stack:
        # the top is the leftmost unmatched ']'
        raise make_bracket_error(source=source, position=stack[-1])

    code_arr = np.frombuffer(source, dtype=np.uint8)
    logger.debug("preprocessed %d bytes, %d loop(s)", len(source), int(np.count_nonzero(code_arr == OPEN)))
    return Program(source=source, code=code_arr, jumps=jumps)
