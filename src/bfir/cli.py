#!/usr/bin/env python3
#
# Command-line runner.
#
#   bfir PROGRAM [-O LEVEL] [--max-steps N] [--dump-ir] [--stats] [-v]
#
# Levels (0..3):
#   0: annotate only, every pointer move executes
#   1: + coalesce runs, clear loops
#   2: + pointer-move deferral
#   3: + multiply-loop reduction (default)
#
# BFIR_OPT_LEVEL and BFIR_MAX_STEPS provide defaults for -O and --max-steps.
#
from __future__ import annotations

import argparse
import logging
import os
import sys
import time
from typing import List, Optional

from .api import CompileOptions, compile_string, run_compiled
from .capabilities import stdin_reader, stdout_writer
from .compiler import DEFAULT_OPTIMIZE_LEVEL, clamp_level
from .emit import count_ops, format_ops
from .errors import BFError

logger = logging.getLogger(__name__)


def _env_int(name: str) -> Optional[int]:
    value = os.environ.get(name)
    if value is None or value.strip() == "":
        return None
    try:
        return int(value)
    except ValueError:
        logger.warning("ignoring %s=%r: not an integer", name, value)
        return None


def build_parser() -> argparse.ArgumentParser:
    env_level = _env_int("BFIR_OPT_LEVEL")
    parser = argparse.ArgumentParser(prog="bfir", description="Optimizing Brainfuck interpreter.")
    parser.add_argument("program", help="path to the Brainfuck source file")
    parser.add_argument(
        "-O", "--level", type=int,
        default=DEFAULT_OPTIMIZE_LEVEL if env_level is None else env_level,
        help="0..3 (higher = more aggressive)",
    )
    parser.add_argument("--max-steps", type=int, default=_env_int("BFIR_MAX_STEPS"),
                        help="abort after this many steps")
    parser.add_argument("--dump-ir", action="store_true", help="print the final IR to stderr and exit")
    parser.add_argument("--stats", action="store_true", help="report timings and step count on stderr")
    parser.add_argument("-v", "--verbose", action="count", default=0, help="log pass details")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(name)s: %(message)s",
    )

    try:
        with open(args.program, "r", encoding="utf-8", errors="replace") as f:
            code = f.read()
    except OSError as exc:
        print(f"Couldn't read {args.program}: {exc.strerror or exc}", file=sys.stderr)
        return 2

    options = CompileOptions(optimize_level=clamp_level(args.level), max_steps=args.max_steps)

    try:
        start = time.perf_counter()
        compiled = compile_string(code, options=options)
        compile_time = time.perf_counter() - start

        if args.dump_ir:
            print(format_ops(compiled.ops), file=sys.stderr)
            return 0

        start = time.perf_counter()
        result = run_compiled(compiled, read_byte=stdin_reader(), write_byte=stdout_writer(), options=options)
        run_time = time.perf_counter() - start
    except BFError as exc:
        print(exc, file=sys.stderr)
        return 1

    if args.stats:
        print(f"Compilation took {compile_time * 1000:.2f} ms "
              f"({compiled.token_count} tokens -> {count_ops(compiled.ops)} ops, level {compiled.optimize_level})",
              file=sys.stderr)
        print(f"Execution took {run_time * 1000:.2f} ms", file=sys.stderr)
        print(f"steps: {result.steps}", file=sys.stderr)
        print(f"pointer: {result.pointer}, tape: {result.tape_size} cells", file=sys.stderr)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
