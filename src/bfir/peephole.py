"""Local rewrites on the tree IR: run coalescing and clear-loop recognition."""
from __future__ import annotations

from typing import List, Sequence, Tuple

from .tree import Add, Loop, MovePointer, SetZero, TreeOp

CLEAR_LOOP_BODY: Tuple[TreeOp, ...] = (Add(255),)


def optimize_tree(nodes: Sequence[TreeOp]) -> Tuple[TreeOp, ...]:
    """
    Combine adjacent Add/Add and Move/Move, fold adds into a preceding
    SetZero, and turn ``[-]`` style loops into SetZero(0).

    Loop bodies are optimized before the enclosing sequence sees them.
    """
    out: List[TreeOp] = []
    for n in nodes:
        last = out[-1] if out else None
        if isinstance(n, Add):
            if isinstance(last, Add):
                out[-1] = Add((last.delta + n.delta) % 256)
            elif isinstance(last, SetZero):
                out[-1] = SetZero((last.value + n.delta) % 256)
            else:
                out.append(Add(n.delta % 256))
        elif isinstance(n, MovePointer):
            if isinstance(last, MovePointer):
                out[-1] = MovePointer(last.delta + n.delta)
            else:
                out.append(n)
        elif isinstance(n, Loop):
            body = optimize_tree(n.body)
            if body == CLEAR_LOOP_BODY:
                out.append(SetZero(0))
            else:
                out.append(Loop(body))
        else:
            out.append(n)
    return tuple(out)
