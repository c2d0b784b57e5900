from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable, List, Optional, Tuple, Union

from . import lexer
from .errors import NESTING_TOO_DEEP, UNMATCHED_CLOSE, UNMATCHED_OPEN, make_structure_error

# Passes and the engine recurse once per nesting level; this keeps them
# under the interpreter recursion limit.
MAX_LOOP_DEPTH = 500


# ---------------- Tree IR ----------------
@dataclass(frozen=True)
class Add:
    delta: int  # mod 256


@dataclass(frozen=True)
class MovePointer:
    delta: int  # unbounded, signed


@dataclass(frozen=True)
class SetZero:
    value: int = 0  # cell is assigned this value, 0 for a plain clear


@dataclass(frozen=True)
class ReadByte:
    pass


@dataclass(frozen=True)
class WriteByte:
    pass


@dataclass(frozen=True)
class Loop:
    body: Tuple["TreeOp", ...]


TreeOp = Union[Add, MovePointer, SetZero, ReadByte, WriteByte, Loop]


# ---------------- Builder: primitive ops -> tree ----------------
def build_tree(
    ops: Iterable[lexer.PrimitiveOp],
    *,
    source: Optional[str] = None,
    max_depth: int = MAX_LOOP_DEPTH,
) -> Tuple[TreeOp, ...]:
    """
    Rebuild loop nesting from a flat operation stream.

    ``source`` is only used to point at the offending bracket when the
    delimiters do not balance or loops nest deeper than ``max_depth``.
    """
    stack: List[List[TreeOp]] = [[]]

    for op in ops:
        if isinstance(op, lexer.LoopStart):
            if len(stack) > max_depth:
                raise make_structure_error(kind=NESTING_TOO_DEEP, source=source, max_depth=max_depth)
            stack.append([])
        elif isinstance(op, lexer.LoopEnd):
            if len(stack) == 1:
                raise make_structure_error(kind=UNMATCHED_CLOSE, source=source)
            body = stack.pop()
            stack[-1].append(Loop(tuple(body)))
        elif isinstance(op, lexer.Add):
            stack[-1].append(Add(op.delta))
        elif isinstance(op, lexer.MovePointer):
            stack[-1].append(MovePointer(op.delta))
        elif isinstance(op, lexer.ReadByte):
            stack[-1].append(ReadByte())
        elif isinstance(op, lexer.WriteByte):
            stack[-1].append(WriteByte())
        else:
            raise TypeError(f"not a primitive operation: {op!r}")

    if len(stack) != 1:
        raise make_structure_error(kind=UNMATCHED_OPEN, source=source)
    return tuple(stack[0])


def parse(source: str) -> Tuple[TreeOp, ...]:
    return build_tree(lexer.tokenize(source), source=source)
