"""
Core primitives: grammar nodes, the matcher, slots, repair and operators.
"""

from grammergen.core.errors import (
    GrammergenError,
    InvalidArgument,
    PreconditionViolation,
)
from grammergen.core.context import EvaluationContext
from grammergen.core.node import (
    GrammarNode,
    NodeKind,
    LITERAL_SIZE,
    MAX_ARITY,
)
from grammergen.core.tree import (
    Slot,
    walk_tree,
    flatten,
    open_slots,
    random_subtree,
    repair,
    is_consistent,
)
from grammergen.core.mutation import (
    mutate,
    mutate_tree,
    crossover,
)

__all__ = [
    # errors
    "GrammergenError",
    "InvalidArgument",
    "PreconditionViolation",
    # context
    "EvaluationContext",
    # node
    "GrammarNode",
    "NodeKind",
    "LITERAL_SIZE",
    "MAX_ARITY",
    # tree
    "Slot",
    "walk_tree",
    "flatten",
    "open_slots",
    "random_subtree",
    "repair",
    "is_consistent",
    # mutation
    "mutate",
    "mutate_tree",
    "crossover",
]
