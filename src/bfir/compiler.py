import logging

from bfir.emit import count_ops
from bfir.lexer import tokenize
from bfir.multiply import reduce_multiply_loops
from bfir.offsets import annotate_offsets, lower, remove_zero_moves
from bfir.peephole import optimize_tree
from bfir.tree import build_tree

logger = logging.getLogger(__name__)

MAX_OPTIMIZE_LEVEL = 3
DEFAULT_OPTIMIZE_LEVEL = MAX_OPTIMIZE_LEVEL


def clamp_level(level):
    return max(0, min(MAX_OPTIMIZE_LEVEL, int(level)))


class BrainFuckCompiler:
    """
    Lowers Brainfuck source to offset IR.

    Pipeline:
    1. tokenize: source text -> primitive operations
    2. build_tree: rebuild loop nesting (unbalanced brackets raise BFStructureError)
    3. optimize_tree: coalesce runs, recognize clear loops        (level >= 1)
    4. annotate_offsets / defer_moves: offset IR                  (deferral at level >= 2)
    5. remove_zero_moves: drop flushes of a zero offset           (level >= 2)
    6. reduce_multiply_loops: closed form of linear loops         (level >= 3)

    The intermediate results of the last compile are kept on the instance
    for inspection.
    """

    def __init__(self, optimize_level=None):
        self.optimize_level = DEFAULT_OPTIMIZE_LEVEL if optimize_level is None else clamp_level(optimize_level)
        self.tokens = []
        self.tree = ()
        self.optimized_tree = ()
        self.ops = ()

    def compile(self, source, optimize_level=None):
        level = self.optimize_level if optimize_level is None else clamp_level(optimize_level)

        self.tokens = tokenize(source)
        self.tree = build_tree(self.tokens, source=source)
        logger.debug("parsed %d tokens into %d tree nodes", len(self.tokens), count_ops(self.tree))

        self.optimized_tree = optimize_tree(self.tree) if level >= 1 else self.tree
        if level >= 2:
            ops = remove_zero_moves(lower(self.optimized_tree))
        else:
            ops = annotate_offsets(self.optimized_tree)
        if level >= 3:
            ops = reduce_multiply_loops(ops)

        logger.debug("level %d: %d tree nodes -> %d offset ops", level, count_ops(self.tree), count_ops(ops))
        self.ops = ops
        return ops
