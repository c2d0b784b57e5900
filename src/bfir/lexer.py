from __future__ import annotations

from dataclasses import dataclass
from typing import List, Union


@dataclass(frozen=True)
class Add:
    delta: int  # 0..255, 255 is a decrement


@dataclass(frozen=True)
class MovePointer:
    delta: int


@dataclass(frozen=True)
class ReadByte:
    pass


@dataclass(frozen=True)
class WriteByte:
    pass


@dataclass(frozen=True)
class LoopStart:
    pass


@dataclass(frozen=True)
class LoopEnd:
    pass


PrimitiveOp = Union[Add, MovePointer, ReadByte, WriteByte, LoopStart, LoopEnd]

# Operations carry no position, so one instance per character is enough.
_TOKENS = {
    '+': Add(1),
    '-': Add(255),
    '>': MovePointer(1),
    '<': MovePointer(-1),
    '[': LoopStart(),
    ']': LoopEnd(),
    '.': WriteByte(),
    ',': ReadByte(),
}


def tokenize(source: str) -> List[PrimitiveOp]:
    """Reduce source text to primitive operations, dropping every other character."""
    return [_TOKENS[ch] for ch in source if ch in _TOKENS]
