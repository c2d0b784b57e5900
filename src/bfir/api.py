from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

from .capabilities import ReadByte, WriteByte, stdin_reader, stdout_writer
from .compiler import DEFAULT_OPTIMIZE_LEVEL, BrainFuckCompiler
from .engine import Engine
from .offsets import OffsetOp
from .tape import MIN_TAPE_SIZE
from .tree import TreeOp

# Leading cells copied into RunResult.memory unless CompileOptions says otherwise.
MEMORY_WINDOW = 100


@dataclass(frozen=True)
class CompileOptions:
    optimize_level: int = DEFAULT_OPTIMIZE_LEVEL
    max_steps: Optional[int] = None
    initial_tape_size: int = MIN_TAPE_SIZE
    memory_window: int = MEMORY_WINDOW


@dataclass(frozen=True)
class CompileResult:
    ops: Tuple[OffsetOp, ...]
    tree: Tuple[TreeOp, ...]
    optimized_tree: Tuple[TreeOp, ...]
    token_count: int
    optimize_level: int


@dataclass(frozen=True)
class RunResult:
    compiled: CompileResult
    steps: int
    pointer: int
    tape_size: int
    memory: bytes  # cells[0:options.memory_window]


def compile_string(source: str, *, options: Optional[CompileOptions] = None) -> CompileResult:
    options = options or CompileOptions()
    compiler = BrainFuckCompiler(optimize_level=options.optimize_level)
    ops = compiler.compile(source)
    return CompileResult(
        ops=ops,
        tree=compiler.tree,
        optimized_tree=compiler.optimized_tree,
        token_count=len(compiler.tokens),
        optimize_level=compiler.optimize_level,
    )


def compile_file(path: str | Path, *, options: Optional[CompileOptions] = None, encoding: str = "utf-8") -> CompileResult:
    p = Path(path)
    return compile_string(p.read_text(encoding=encoding, errors="replace"), options=options)


def run_compiled(
    compiled: CompileResult,
    *,
    read_byte: Optional[ReadByte] = None,
    write_byte: Optional[WriteByte] = None,
    options: Optional[CompileOptions] = None,
) -> RunResult:
    options = options or CompileOptions()
    engine = Engine(
        read_byte or stdin_reader(),
        write_byte or stdout_writer(),
        max_steps=options.max_steps,
        tape_size=options.initial_tape_size,
    )
    state = engine.run(compiled.ops)
    return RunResult(
        compiled=compiled,
        steps=state.steps,
        pointer=state.pointer,
        tape_size=len(state.tape),
        memory=state.tape.snapshot(0, options.memory_window),
    )


def run_string(
    source: str,
    *,
    read_byte: Optional[ReadByte] = None,
    write_byte: Optional[WriteByte] = None,
    options: Optional[CompileOptions] = None,
) -> RunResult:
    """Compile and run. Unbalanced brackets raise before anything executes."""
    compiled = compile_string(source, options=options)
    return run_compiled(compiled, read_byte=read_byte, write_byte=write_byte, options=options)


def run_file(
    path: str | Path,
    *,
    read_byte: Optional[ReadByte] = None,
    write_byte: Optional[WriteByte] = None,
    options: Optional[CompileOptions] = None,
    encoding: str = "utf-8",
) -> RunResult:
    compiled = compile_file(path, options=options, encoding=encoding)
    return run_compiled(compiled, read_byte=read_byte, write_byte=write_byte, options=options)
