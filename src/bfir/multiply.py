from __future__ import annotations

import logging
from typing import List, Optional, Sequence, Tuple

from .offsets import Add, Loop, MultiplyAdd, OffsetOp, SetZero

logger = logging.getLogger(__name__)


def multiply_body(body: Sequence[OffsetOp]) -> Optional[Tuple[OffsetOp, ...]]:
    """
    Closed form of a linear loop, or None if ``body`` is not one.

    A body made only of Adds whose offset-0 deltas sum to -1 (mod 256) runs
    exactly ``n`` times for a counter ``n``, so every other Add(o, d)
    contributes ``n * d`` to cell ``o``.
    """
    counter = 0
    targets: List[Tuple[int, int]] = []
    for op in body:
        if not isinstance(op, Add):
            return None
        if op.offset == 0:
            counter = (counter + op.delta) % 256
        else:
            targets.append((op.offset, op.delta))
    if counter != 255:
        return None

    out: List[OffsetOp] = [MultiplyAdd(0, off, delta) for off, delta in targets]
    out.append(SetZero(0, 0))
    return tuple(out)


def reduce_multiply_loops(ops: Sequence[OffsetOp]) -> Tuple[OffsetOp, ...]:
    """Splice the closed form of every qualifying loop into its parent sequence."""
    out: List[OffsetOp] = []
    for op in ops:
        if isinstance(op, Loop):
            closed = multiply_body(op.body)
            if closed is not None:
                logger.debug("multiply loop of %d ops -> %d ops", len(op.body), len(closed))
                out.extend(closed)
            else:
                out.append(Loop(reduce_multiply_loops(op.body)))
        else:
            out.append(op)
    return tuple(out)
