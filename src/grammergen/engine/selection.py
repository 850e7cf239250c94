"""
Fitness-proportionate (roulette) selection.
"""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import Sequence, TypeVar

from grammergen.core import GrammarNode, PreconditionViolation

T = TypeVar("T")


def select(candidates: Sequence[tuple[T, float]], rng: random.Random) -> T:
    """
    Draw one individual with probability proportional to its weight.

    Candidates are walked in the order given; the first one at which the
    remaining draw reaches zero wins. With a zero total weight every
    candidate is equally likely.

    Args:
        candidates: (individual, weight) pairs
        rng: Random source

    Raises:
        PreconditionViolation: If candidates is empty
    """
    if not candidates:
        raise PreconditionViolation("cannot select from an empty population")

    total = sum(weight for _, weight in candidates)
    if total <= 0:
        return rng.choice(candidates)[0]

    remainder = rng.uniform(0, total)
    for individual, weight in candidates:
        remainder -= weight
        if remainder <= 0:
            return individual

    # Float rounding can leave a tiny positive remainder
    return candidates[-1][0]


@dataclass
class RankedIndividual:
    """A tree with its fitness and rank-based selection weight."""
    tree: GrammarNode
    fitness: float
    weight: float = 0.0
    comparisons: int = 0  # Total comparison cost over the corpus


def weighted(ranking: Sequence[RankedIndividual]) -> list[tuple[GrammarNode, float]]:
    """Turn a ranking into (tree, weight) pairs for select()."""
    return [(individual.tree, individual.weight) for individual in ranking]
