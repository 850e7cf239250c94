"""
Generation engine: random trees, selection and offspring strategies.
"""

from grammergen.engine.generator import TreeGenerator
from grammergen.engine.selection import RankedIndividual, select, weighted
from grammergen.engine.strategies import (
    Strategy,
    StrategyType,
    Offspring,
    ElitismStrategy,
    MutateStrategy,
    RecombineStrategy,
)

__all__ = [
    "TreeGenerator",
    "RankedIndividual",
    "select",
    "weighted",
    "Strategy",
    "StrategyType",
    "Offspring",
    "ElitismStrategy",
    "MutateStrategy",
    "RecombineStrategy",
]
