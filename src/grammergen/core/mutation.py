"""
Mutation and subtree crossover.

Both operators work on clones; the parents are never modified. The
results may violate the arity invariant until repair() runs.
"""

from __future__ import annotations

import random
from typing import TYPE_CHECKING

from grammergen.core.errors import PreconditionViolation
from grammergen.core.node import GrammarNode
from grammergen.core.tree import Slot, flatten

if TYPE_CHECKING:
    from grammergen.engine.generator import TreeGenerator


def mutate(slot: Slot, generator: "TreeGenerator") -> GrammarNode:
    """
    Replace the node held by slot with a freshly generated one.

    The new node takes over the old node's children. A LITERAL turned
    into a JOIN therefore has empty slots, and a JOIN turned into a
    LITERAL keeps stale children; repair() fixes both.

    Returns:
        The node now held by the slot
    """
    old = slot.node
    replacement = generator.generate_node()
    replacement.children = list(old.children)
    slot.node = replacement
    return replacement


def mutate_tree(tree: GrammarNode, generator: "TreeGenerator") -> GrammarNode:
    """Clone tree and mutate one uniformly chosen slot of the clone."""
    slots = flatten(tree.clone())
    mutate(generator.rng.choice(slots), generator)
    return slots[0].node


def crossover(
    tree_a: GrammarNode | None,
    tree_b: GrammarNode | None,
    rng: random.Random,
) -> tuple[GrammarNode, GrammarNode]:
    """
    Swap one random subtree between clones of two parents.

    Args:
        tree_a, tree_b: Parent trees (left untouched)
        rng: Random source

    Returns:
        Both offspring, in parent order
    """
    if tree_a is None or tree_b is None:
        raise PreconditionViolation("crossover needs two parent trees")

    slots_a = flatten(tree_a.clone())
    slots_b = flatten(tree_b.clone())

    rng.choice(slots_a).swap(rng.choice(slots_b))

    return slots_a[0].node, slots_b[0].node
