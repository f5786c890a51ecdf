from __future__ import annotations

from typing import BinaryIO, Optional, Protocol


class ByteSource(Protocol):
    def read_byte(self) -> Optional[int]:
        """Next input byte, or None once the input is exhausted."""


class ByteSink(Protocol):
    def write_byte(self, value: int) -> None:
        ...


class StreamSource:
    """Reads ``,`` input from a binary stream such as ``sys.stdin.buffer``."""

    def __init__(self, stream: BinaryIO):
        self.stream = stream

    def read_byte(self) -> Optional[int]:
        data = self.stream.read(1)
        if not data:
            return None
        return data[0]


class BufferSource:
    def __init__(self, data: bytes = b""):
        self.data = bytes(data)
        self.pos = 0

    def read_byte(self) -> Optional[int]:
        if self.pos >= len(self.data):
            return None
        value = self.data[self.pos]
        self.pos += 1
        return value


class StreamSink:
    """Writes ``.`` output to a binary stream, flushing every byte."""

    def __init__(self, stream: BinaryIO):
        self.stream = stream

    def write_byte(self, value: int) -> None:
        self.stream.write(bytes((value,)))
        self.stream.flush()


class BufferSink:
    def __init__(self):
        self.data = bytearray()

    def write_byte(self, value: int) -> None:
        self.data.append(value)

    def getvalue(self) -> bytes:
        return bytes(self.data)
