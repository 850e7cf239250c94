"""
Random grammar generation.

All randomness flows through one seedable random.Random owned by the
generator, so a run can be reproduced from its seed.
"""

from __future__ import annotations

import logging
import random

from grammergen.core import GrammarNode, InvalidArgument, NodeKind, open_slots

logger = logging.getLogger(__name__)

KINDS = tuple(NodeKind)
PRINTABLE_MIN = 0x20
PRINTABLE_MAX = 0x7E


class TreeGenerator:
    """
    Builds random nodes and trees.

    Used for the initial population, for mutation (fresh replacement
    nodes) and for closing empty slots during repair.
    """

    def __init__(self, rng: random.Random | None = None):
        self._rng = rng or random.Random()

    @property
    def rng(self) -> random.Random:
        return self._rng

    def set_seed(self, seed: int):
        """Set random seed for reproducibility."""
        self._rng = random.Random(seed)

    def generate_payload(self) -> bytes:
        """One printable byte, rejection-sampled from the full byte range."""
        while True:
            value = self._rng.randint(0, 0xFF)
            if PRINTABLE_MIN <= value <= PRINTABLE_MAX:
                return bytes([value])

    def generate_leaf(self) -> GrammarNode:
        return GrammarNode.literal(self.generate_payload())

    def generate_node(self) -> GrammarNode:
        """A single childless node of a uniformly chosen kind."""
        kind = self._rng.choice(KINDS)
        if kind is NodeKind.LITERAL:
            return self.generate_leaf()
        return GrammarNode(kind)

    def generate_tree(self, node_budget: int) -> GrammarNode:
        """
        Grow a random tree.

        Starting from a random root, up to node_budget - 1 further nodes
        are placed into uniformly chosen open slots. Growth stops early
        once no slot is open. Slots still open when the budget is spent
        are closed with literal leaves.

        Args:
            node_budget: Number of randomly drawn nodes (at least 1)

        Raises:
            InvalidArgument: If node_budget is below 1
        """
        if node_budget < 1:
            raise InvalidArgument(f"node_budget must be greater than zero, got {node_budget}")

        root = self.generate_node()
        frontier = open_slots(root)

        for _ in range(node_budget - 1):
            if not frontier:
                break
            slot = frontier.pop(self._rng.randrange(len(frontier)))
            node = self.generate_node()
            slot.node = node
            frontier.extend(open_slots(node))

        for slot in frontier:
            slot.node = self.generate_leaf()

        logger.debug(f"Generated tree with {root.node_count()} nodes (budget {node_budget})")
        return root
