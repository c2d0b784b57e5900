from __future__ import annotations

from dataclasses import dataclass
from typing import List, Optional, Tuple

UNMATCHED_CLOSE = "unmatched ']'"
UNMATCHED_OPEN = "unmatched '['"
NESTING_TOO_DEEP = "loops nested too deeply"


def _build_context(lines: List[str], line_no_1: int, *, context: int = 2) -> str:
    idx = max(1, line_no_1)
    start = max(1, idx - context)
    end = min(len(lines), idx + context)

    out: List[str] = []
    for i in range(start, end + 1):
        prefix = '>' if i == idx else ' '
        out.append(f"{prefix} {i:4d} | {lines[i - 1]}")
    return "\n".join(out)


def _hint_for(kind: str, max_depth: Optional[int] = None) -> Optional[str]:
    if kind == UNMATCHED_CLOSE:
        return 'Every "]" needs an earlier "[" at the same nesting depth. Remove the extra "]" or add its "[".'
    if kind == UNMATCHED_OPEN:
        return 'A "[" is never closed. Add the missing "]" or remove the stray "[".'
    if kind == NESTING_TOO_DEEP:
        return f'Loops may nest at most {max_depth} levels deep. Split the innermost loops out.'
    return None


def locate_bracket(source: str, kind: str, max_depth: Optional[int] = None) -> Optional[int]:
    """Index in ``source`` of the bracket responsible for ``kind``.

    For a stray ``]`` this is the first close bracket with nothing to pop;
    for an unclosed ``[`` it is the outermost open bracket still pending at
    end of input; for excessive nesting it is the first ``[`` opened past
    ``max_depth``.
    """
    open_at: List[int] = []
    for pos, ch in enumerate(source):
        if ch == '[':
            open_at.append(pos)
            if kind == NESTING_TOO_DEEP and max_depth is not None and len(open_at) > max_depth:
                return pos
        elif ch == ']':
            if not open_at:
                return pos if kind == UNMATCHED_CLOSE else None
            open_at.pop()
    if kind == UNMATCHED_OPEN and open_at:
        return open_at[0]
    return None


def _line_col(source: str, pos: int) -> Tuple[int, int]:
    line = source.count('\n', 0, pos) + 1
    col = pos - (source.rfind('\n', 0, pos) + 1) + 1
    return line, col


@dataclass
class BFError(Exception):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass
class BFStructureError(BFError):
    kind: str
    line: int = 0
    column: int = 0
    context: str = ''


@dataclass
class BFRuntimeError(BFError):
    steps: int = 0
    pointer: int = 0


@dataclass
class BFInputError(BFRuntimeError):
    pass


@dataclass
class BFOutputError(BFRuntimeError):
    pass


@dataclass
class BFPointerError(BFRuntimeError):
    address: int = 0


@dataclass
class BFStepLimitError(BFRuntimeError):
    limit: int = 0


def make_structure_error(
    *, kind: str, source: Optional[str] = None, max_depth: Optional[int] = None
) -> BFStructureError:
    hint = _hint_for(kind, max_depth)
    hint_block = f"\nHint: {hint}" if hint else ""
    pos = None if source is None else locate_bracket(source, kind, max_depth)
    if pos is None:
        return BFStructureError(message=f"StructureError: {kind}{hint_block}", kind=kind)

    line, col = _line_col(source, pos)
    ctx = _build_context(source.split('\n'), line)
    return BFStructureError(
        message=f"StructureError: {kind} (line {line}, column {col})\n{ctx}{hint_block}",
        kind=kind,
        line=line,
        column=col,
        context=ctx,
    )
