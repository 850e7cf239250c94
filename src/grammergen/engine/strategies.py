"""
Offspring strategies.

Each strategy fills part of the next generation from the current ranking:
- Elitism: carry the top individuals over unchanged
- Mutate: clone a selected parent and regenerate one of its nodes
- Recombine: swap subtrees between clones of two selected parents
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum, auto
from typing import Sequence

from grammergen.core import GrammarNode, crossover, mutate_tree
from grammergen.engine.generator import TreeGenerator
from grammergen.engine.selection import RankedIndividual, select, weighted


class StrategyType(Enum):
    """Ways an individual of the next generation is produced."""
    ELITISM = auto()
    MUTATE = auto()
    RECOMBINE = auto()


@dataclass
class Offspring:
    """An individual of the next generation and where it came from."""
    tree: GrammarNode
    strategy: StrategyType


class Strategy(ABC):
    """Base class for offspring strategies."""

    @property
    @abstractmethod
    def strategy_type(self) -> StrategyType:
        ...

    @abstractmethod
    def produce(self, ranking: Sequence[RankedIndividual], count: int) -> list[Offspring]:
        """Produce exactly count offspring from a ranking (best first)."""
        ...


class ElitismStrategy(Strategy):
    """Unconditional survival of the top-ranked trees."""

    @property
    def strategy_type(self) -> StrategyType:
        return StrategyType.ELITISM

    def produce(self, ranking: Sequence[RankedIndividual], count: int) -> list[Offspring]:
        return [
            Offspring(tree=individual.tree, strategy=self.strategy_type)
            for individual in ranking[:count]
        ]


class MutateStrategy(Strategy):
    """
    Mutation via node regeneration.

    Each offspring is a clone of a rank-selected parent with one random
    node replaced by a freshly generated one.
    """

    def __init__(self, generator: TreeGenerator):
        self.generator = generator

    @property
    def strategy_type(self) -> StrategyType:
        return StrategyType.MUTATE

    def produce(self, ranking: Sequence[RankedIndividual], count: int) -> list[Offspring]:
        candidates = weighted(ranking)
        offspring = []
        for _ in range(count):
            parent = select(candidates, self.generator.rng)
            offspring.append(Offspring(
                tree=mutate_tree(parent, self.generator),
                strategy=self.strategy_type,
            ))
        return offspring


class RecombineStrategy(Strategy):
    """
    Subtree crossover.

    Two parents are selected independently (with replacement). By default
    only the first child of each crossover is kept; with keep_both the
    second child is kept too while there is room for it.
    """

    def __init__(self, generator: TreeGenerator, keep_both: bool = False):
        self.generator = generator
        self.keep_both = keep_both

    @property
    def strategy_type(self) -> StrategyType:
        return StrategyType.RECOMBINE

    def produce(self, ranking: Sequence[RankedIndividual], count: int) -> list[Offspring]:
        candidates = weighted(ranking)
        rng = self.generator.rng
        offspring = []
        while len(offspring) < count:
            parent_a = select(candidates, rng)
            parent_b = select(candidates, rng)
            child_a, child_b = crossover(parent_a, parent_b, rng)

            offspring.append(Offspring(
                tree=child_a,
                strategy=self.strategy_type,
            ))
            if self.keep_both and len(offspring) < count:
                offspring.append(Offspring(
                    tree=child_b,
                    strategy=self.strategy_type,
                ))
        return offspring
