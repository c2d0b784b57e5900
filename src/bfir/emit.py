from __future__ import annotations

from typing import List, Sequence, Union

from . import lexer, offsets, tree

AnyOp = Union[lexer.PrimitiveOp, tree.TreeOp, offsets.OffsetOp]


# ---------------- Tree IR -> source ----------------
def _emit_add(delta: int) -> str:
    delta %= 256
    return "+" * delta if delta <= 128 else "-" * (256 - delta)


def emit_tree(nodes: Sequence[tree.TreeOp]) -> str:
    out: List[str] = []
    for n in nodes:
        if isinstance(n, tree.Add):
            out.append(_emit_add(n.delta))
        elif isinstance(n, tree.MovePointer):
            out.append((">" * n.delta) if n.delta > 0 else ("<" * (-n.delta)))
        elif isinstance(n, tree.SetZero):
            out.append("[-]" + _emit_add(n.value))
        elif isinstance(n, tree.ReadByte):
            out.append(",")
        elif isinstance(n, tree.WriteByte):
            out.append(".")
        elif isinstance(n, tree.Loop):
            out.append("[" + emit_tree(n.body) + "]")
    return "".join(out)


# ---------------- Counting ----------------
def count_primitive_leaves(ops: Sequence[lexer.PrimitiveOp]) -> int:
    """Add/Move/Read/Write operations in a flat stream (delimiters excluded)."""
    return sum(1 for op in ops if not isinstance(op, (lexer.LoopStart, lexer.LoopEnd)))


def count_leaves(nodes: Sequence[tree.TreeOp]) -> int:
    c = 0
    for n in nodes:
        if isinstance(n, tree.Loop):
            c += count_leaves(n.body)
        else:
            c += 1
    return c


def count_ops(nodes: Sequence[AnyOp]) -> int:
    """Total node count of any IR, loops included."""
    c = 0
    for n in nodes:
        c += 1
        body = getattr(n, "body", None)
        if body is not None:
            c += count_ops(body)
    return c


# ---------------- Offset IR listing ----------------
def _format_op(op: offsets.OffsetOp) -> str:
    if isinstance(op, offsets.Add):
        return f"add     [{op.offset:+d}] {op.delta}"
    if isinstance(op, offsets.SetZero):
        return f"set     [{op.offset:+d}] {op.value}"
    if isinstance(op, offsets.MultiplyAdd):
        return f"muladd  [{op.dest:+d}] += [{op.source:+d}] * {op.factor}"
    if isinstance(op, offsets.MovePointer):
        return f"move    {op.delta:+d}"
    if isinstance(op, offsets.ReadByte):
        return f"read    [{op.offset:+d}]"
    if isinstance(op, offsets.WriteByte):
        return f"write   [{op.offset:+d}]"
    raise TypeError(f"not an offset operation: {op!r}")


def format_ops(ops: Sequence[offsets.OffsetOp], indent: int = 0) -> str:
    lines: List[str] = []
    pad = "  " * indent
    for op in ops:
        if isinstance(op, offsets.Loop):
            lines.append(f"{pad}loop {{")
            body = format_ops(op.body, indent + 1)
            if body:
                lines.append(body)
            lines.append(f"{pad}}}")
        else:
            lines.append(pad + _format_op(op))
    return "\n".join(lines)
