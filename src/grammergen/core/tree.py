"""
Tree traversal, child-slot references and arity repair.

Subtrees are addressed through slots: a slot names one position in a
parent's child list (or the root position of a whole tree), so swapping
or replacing a subtree is a plain assignment to the slot.
"""

from __future__ import annotations

import random
from typing import Callable, Iterator

from grammergen.core.node import GrammarNode, MAX_ARITY


class Slot:
    """A mutable reference to one child position."""

    __slots__ = ("container", "index")

    def __init__(self, container: list, index: int):
        self.container = container
        self.index = index

    @classmethod
    def root(cls, tree: GrammarNode) -> "Slot":
        """Wrap a whole tree so its root can be replaced like any child."""
        return cls([tree], 0)

    @property
    def node(self) -> GrammarNode | None:
        return self.container[self.index]

    @node.setter
    def node(self, value: GrammarNode | None):
        self.container[self.index] = value

    def swap(self, other: "Slot"):
        """Exchange the subtrees held by two slots."""
        self.node, other.node = other.node, self.node

    def __repr__(self) -> str:
        return f"Slot({self.node!s}, index={self.index})"


def walk_tree(node: GrammarNode, order: str = "pre") -> Iterator[GrammarNode]:
    """
    Walk tree nodes in specified order.

    Args:
        node: Root node to start from
        order: "pre" for pre-order, "post" for post-order, "bfs" for breadth-first
    """
    if order == "pre":
        yield node
        for child in node.iter_children():
            yield from walk_tree(child, order)
    elif order == "post":
        for child in node.iter_children():
            yield from walk_tree(child, order)
        yield node
    elif order == "bfs":
        queue = [node]
        while queue:
            current = queue.pop(0)
            yield current
            queue.extend(current.iter_children())
    else:
        raise ValueError(f"Unknown order: {order}")


def flatten(tree: GrammarNode) -> list[Slot]:
    """
    List every occupied slot of a tree in pre-order.

    The first slot is always the root slot; read ``slots[0].node`` to get
    the (possibly replaced) root after rewiring.
    """
    slots = []

    def visit(slot: Slot):
        slots.append(slot)
        node = slot.node
        for index, child in enumerate(node.children):
            if child is not None:
                visit(Slot(node.children, index))

    visit(Slot.root(tree))
    return slots


def open_slots(node: GrammarNode) -> list[Slot]:
    """Empty slots of a single node that its arity requires to be filled."""
    return [
        Slot(node.children, index)
        for index in range(node.arity)
        if node.children[index] is None
    ]


def random_subtree(tree: GrammarNode, rng: random.Random) -> Slot:
    """Pick a slot uniformly among all occupied slots of the tree."""
    return rng.choice(flatten(tree))


def repair(node: GrammarNode, fill: Callable[[], GrammarNode] | None = None) -> GrammarNode:
    """
    Restore the arity invariant in place and return the node.

    Slots at or above the arity are cleared. Slots below it are repaired
    recursively; empty ones are filled with fill() when it is given.
    Applying repair twice changes nothing the second time.
    """
    for index in range(MAX_ARITY):
        if index >= node.arity:
            node.children[index] = None
            continue
        if node.children[index] is None and fill is not None:
            node.children[index] = fill()
        if node.children[index] is not None:
            repair(node.children[index], fill)
    return node


def is_consistent(node: GrammarNode) -> bool:
    """True if every node's occupied child count equals its arity."""
    for current in walk_tree(node):
        occupied = [index for index, child in enumerate(current.children) if child is not None]
        if occupied != list(range(current.arity)):
            return False
    return True
