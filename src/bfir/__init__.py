from .compiler import BrainFuckCompiler
from .lexer import tokenize
from .tree import build_tree
from .engine import Engine, execute
from .errors import (
    BFError,
    BFInputError,
    BFOutputError,
    BFPointerError,
    BFRuntimeError,
    BFStepLimitError,
    BFStructureError,
)
from .api import CompileOptions, CompileResult, RunResult, compile_file, compile_string, run_file, run_string

__all__ = [
    'BrainFuckCompiler',
    'tokenize',
    'build_tree',
    'Engine',
    'execute',
    'BFError',
    'BFStructureError',
    'BFRuntimeError',
    'BFInputError',
    'BFOutputError',
    'BFPointerError',
    'BFStepLimitError',
    'CompileOptions',
    'CompileResult',
    'RunResult',
    'compile_string',
    'compile_file',
    'run_string',
    'run_file',
]
