"""Byte-level read/write capabilities handed to the engine."""
from __future__ import annotations

import sys
from typing import BinaryIO, Callable, List, Optional

ReadByte = Callable[[], Optional[int]]
WriteByte = Callable[[int], None]


def stream_reader(stream: BinaryIO) -> ReadByte:
    def read_byte() -> Optional[int]:
        data = stream.read(1)
        if not data:
            return None
        return data[0]

    return read_byte


def stream_writer(stream: BinaryIO, *, flush: bool = False) -> WriteByte:
    def write_byte(value: int) -> None:
        stream.write(bytes((value,)))
        if flush:
            stream.flush()

    return write_byte


def stdin_reader() -> ReadByte:
    return stream_reader(sys.stdin.buffer)


def stdout_writer() -> WriteByte:
    # Flushed per byte so interactive programs show prompts before reading.
    return stream_writer(sys.stdout.buffer, flush=True)


class BufferedInput:
    """Serves bytes from memory, then reports end of stream."""

    def __init__(self, data: bytes | str = b""):
        if isinstance(data, str):
            data = data.encode("latin-1")
        self.data = bytes(data)
        self.pos = 0

    def __call__(self) -> Optional[int]:
        if self.pos >= len(self.data):
            return None
        value = self.data[self.pos]
        self.pos += 1
        return value


class CollectedOutput:
    """Records written bytes."""

    def __init__(self):
        self.chunks: List[int] = []

    def __call__(self, value: int) -> None:
        self.chunks.append(value)

    def getvalue(self) -> bytes:
        return bytes(self.chunks)

    def text(self) -> str:
        return self.getvalue().decode("latin-1")
