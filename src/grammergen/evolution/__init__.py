"""
Population evolution, configuration and persistence.
"""

from grammergen.evolution.config import EvolutionConfig
from grammergen.evolution.store import Corpus, Checkpoint
from grammergen.evolution.population import Population

__all__ = [
    "EvolutionConfig",
    "Corpus",
    "Checkpoint",
    "Population",
]
