"""
Offset IR and the passes that produce it.

Every cell-touching operation names its cell as a displacement from a
reference pointer: the pointer at program start or at loop entry. Pointer
moves between loops are folded into those displacements and only flushed
right before a loop (whose condition reads the live pointer) and at the end
of a sequence.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass, replace
from typing import List, Sequence, Tuple, Union

from . import tree

logger = logging.getLogger(__name__)


# ---------------- Offset IR ----------------
@dataclass(frozen=True)
class Add:
    offset: int
    delta: int


@dataclass(frozen=True)
class SetZero:
    offset: int
    value: int = 0


@dataclass(frozen=True)
class MultiplyAdd:
    source: int
    dest: int
    factor: int


@dataclass(frozen=True)
class MovePointer:
    delta: int


@dataclass(frozen=True)
class ReadByte:
    offset: int = 0


@dataclass(frozen=True)
class WriteByte:
    offset: int = 0


@dataclass(frozen=True)
class Loop:
    body: Tuple["OffsetOp", ...]


OffsetOp = Union[Add, SetZero, MultiplyAdd, MovePointer, ReadByte, WriteByte, Loop]


# ---------------- Annotation: tree -> offset IR at offset 0 ----------------
def annotate_offsets(nodes: Sequence[tree.TreeOp]) -> Tuple[OffsetOp, ...]:
    out: List[OffsetOp] = []
    for n in nodes:
        if isinstance(n, tree.Add):
            out.append(Add(0, n.delta))
        elif isinstance(n, tree.MovePointer):
            out.append(MovePointer(n.delta))
        elif isinstance(n, tree.SetZero):
            out.append(SetZero(0, n.value))
        elif isinstance(n, tree.ReadByte):
            out.append(ReadByte(0))
        elif isinstance(n, tree.WriteByte):
            out.append(WriteByte(0))
        elif isinstance(n, tree.Loop):
            out.append(Loop(annotate_offsets(n.body)))
        else:
            raise TypeError(f"not a tree operation: {n!r}")
    return tuple(out)


# ---------------- Deferral: fold pointer moves into offsets ----------------
def defer_moves(ops: Sequence[OffsetOp]) -> Tuple[OffsetOp, ...]:
    """
    Replace pointer moves by a running offset.

    The flush before a loop is emitted even when it is zero;
    remove_zero_moves drops those afterwards.
    """
    offset = 0
    out: List[OffsetOp] = []
    for op in ops:
        if isinstance(op, MovePointer):
            offset += op.delta
        elif isinstance(op, Loop):
            out.append(MovePointer(offset))
            offset = 0
            out.append(Loop(defer_moves(op.body)))
        elif isinstance(op, MultiplyAdd):
            out.append(MultiplyAdd(op.source + offset, op.dest + offset, op.factor))
        elif isinstance(op, (Add, SetZero, ReadByte, WriteByte)):
            out.append(replace(op, offset=op.offset + offset))
        else:
            raise TypeError(f"not an offset operation: {op!r}")
    if offset != 0:
        out.append(MovePointer(offset))
    return tuple(out)


def remove_zero_moves(ops: Sequence[OffsetOp]) -> Tuple[OffsetOp, ...]:
    out: List[OffsetOp] = []
    for op in ops:
        if isinstance(op, MovePointer):
            if op.delta != 0:
                out.append(op)
        elif isinstance(op, Loop):
            out.append(Loop(remove_zero_moves(op.body)))
        else:
            out.append(op)
    return tuple(out)


def lower(nodes: Sequence[tree.TreeOp]) -> Tuple[OffsetOp, ...]:
    """Annotate and defer in one call."""
    ops = defer_moves(annotate_offsets(nodes))
    logger.debug("deferred pointer moves: %d tree nodes -> %d offset ops", len(nodes), len(ops))
    return ops
