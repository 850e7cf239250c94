"""
Population controller.

Drives generations: ranks trees by fitness over the corpus, builds the
next generation through elitism, mutation and crossover, and stops the
run once the best fitness has plateaued.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterator, Sequence

from grammergen.core import EvaluationContext, GrammarNode, InvalidArgument, is_consistent, repair
from grammergen.engine import (
    ElitismStrategy,
    MutateStrategy,
    RankedIndividual,
    RecombineStrategy,
    StrategyType,
    TreeGenerator,
)
from grammergen.evolution.config import EvolutionConfig
from grammergen.evolution.store import Checkpoint, Corpus

logger = logging.getLogger(__name__)

Reporter = Callable[[RankedIndividual], None]


class Population:
    """
    A fixed-size population of grammar trees evolving against a corpus.

    The population is replaced wholesale each generation. Surviving elites
    are carried over as-is; every other individual is built from clones,
    so no tree of the previous generation is ever modified.
    """

    def __init__(
        self,
        corpus: Corpus | Sequence[bytes | str],
        trees: Sequence[GrammarNode],
        config: EvolutionConfig | None = None,
        generator: TreeGenerator | None = None,
        reporter: Reporter | None = None,
    ):
        """
        Args:
            corpus: Example strings the grammars should match
            trees: Initial individuals, exactly config.population_size of them
            config: Evolution parameters
            generator: Random source for mutation and selection
            reporter: Called with the best individual on every improvement

        Raises:
            InvalidArgument: If trees is empty or its length differs from
                config.population_size
        """
        if not trees:
            raise InvalidArgument("population must contain at least one tree")

        self.corpus = corpus if isinstance(corpus, Corpus) else Corpus(corpus)
        self.config = config or EvolutionConfig(population_size=len(trees))
        self.generator = generator or TreeGenerator()
        if generator is None and self.config.seed is not None:
            self.generator.set_seed(self.config.seed)
        self.reporter = reporter

        if len(trees) != self.config.population_size:
            raise InvalidArgument(
                f"population_size is {self.config.population_size} but {len(trees)} trees were given"
            )

        # Malformed trees are repaired on copies so the caller's trees stay as given
        self._trees = [
            tree if is_consistent(tree) else repair(tree.clone(), self.generator.generate_leaf)
            for tree in trees
        ]
        self._ranking: list[RankedIndividual] | None = None
        self._generation = 0
        self._history: list[float] = []

        self._elitism = ElitismStrategy()
        self._mutate = MutateStrategy(self.generator)
        self._recombine = RecombineStrategy(
            self.generator,
            keep_both=self.config.keep_both_offspring,
        )

    @classmethod
    def random(
        cls,
        corpus: Corpus | Sequence[bytes | str],
        config: EvolutionConfig | None = None,
        generator: TreeGenerator | None = None,
        reporter: Reporter | None = None,
    ) -> "Population":
        """Create a population of config.population_size random trees."""
        config = config or EvolutionConfig()
        if generator is None:
            generator = TreeGenerator()
            if config.seed is not None:
                generator.set_seed(config.seed)

        trees = [generator.generate_tree(config.node_budget) for _ in range(config.population_size)]
        logger.info(f"Created {len(trees)} random trees (node budget {config.node_budget})")

        return cls(corpus, trees, config=config, generator=generator, reporter=reporter)

    @classmethod
    def from_checkpoint(
        cls,
        checkpoint: Checkpoint,
        corpus: Corpus | Sequence[bytes | str],
        config: EvolutionConfig | None = None,
        generator: TreeGenerator | None = None,
        reporter: Reporter | None = None,
    ) -> "Population":
        """
        Resume from saved trees.

        Saved trees are ranked best first. When config asks for a different
        population size, the worst trees are dropped or random trees are
        added to reach it.
        """
        if config is None:
            config = EvolutionConfig(**{**checkpoint.config, "population_size": len(checkpoint.trees)})
        if generator is None:
            generator = TreeGenerator()
            if config.seed is not None:
                generator.set_seed(config.seed)

        trees = list(checkpoint.trees[:config.population_size])
        missing = config.population_size - len(trees)
        if missing > 0:
            logger.info(f"Adding {missing} random trees to reach population size {config.population_size}")
            trees.extend(generator.generate_tree(config.node_budget) for _ in range(missing))
        elif len(checkpoint.trees) > len(trees):
            logger.info(f"Dropping {len(checkpoint.trees) - len(trees)} saved trees beyond population size")

        population = cls(corpus, trees, config=config, generator=generator, reporter=reporter)
        population._generation = checkpoint.generation
        return population

    def __len__(self) -> int:
        return len(self._trees)

    def __iter__(self) -> Iterator[GrammarNode]:
        return iter(self._trees)

    @property
    def trees(self) -> list[GrammarNode]:
        return list(self._trees)

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def history(self) -> list[float]:
        """Best fitness of each generation ranked so far."""
        return list(self._history)

    @property
    def best(self) -> RankedIndividual:
        return self.rank()[0]

    def fitness(self, tree: GrammarNode) -> tuple[float, int]:
        """
        Score a tree over the whole corpus.

        Returns:
            (fitness, comparisons): summed evaluate() scores and the
            summed comparison cost of all parses
        """
        total = 0.0
        counters = EvaluationContext()
        for example in self.corpus:
            ctx = EvaluationContext()
            total += tree.evaluate(example, ctx)
            counters = counters.merge(ctx)
        return total, counters.comparison_count

    def rank(self) -> list[RankedIndividual]:
        """
        Rank the current trees, best first.

        Ties keep their current order. The selection weight depends on the
        rank only: population size minus rank index.
        """
        if self._ranking is not None:
            return self._ranking

        scored = []
        for tree in self._trees:
            fitness, comparisons = self.fitness(tree)
            scored.append(RankedIndividual(tree=tree, fitness=fitness, comparisons=comparisons))

        scored.sort(key=lambda individual: individual.fitness, reverse=True)
        size = len(scored)
        for index, individual in enumerate(scored):
            individual.weight = size - index

        self._ranking = scored
        self._history.append(scored[0].fitness)

        mean = sum(individual.fitness for individual in scored) / size
        logger.info(
            f"Generation {self._generation}: best={scored[0].fitness:.4f} mean={mean:.4f}"
        )
        logger.debug(
            f"Generation {self._generation}: "
            f"{sum(individual.comparisons for individual in scored)} comparisons"
        )
        return scored

    def update(self) -> float:
        """
        Advance one generation.

        Returns:
            Best fitness of the new generation
        """
        ranking = self.rank()
        size = len(ranking)

        elite_count = min(int(self.config.elite_ratio * size), size)
        mutation_count = min(int(self.config.mutation_ratio * size), size - elite_count)
        crossover_count = size - elite_count - mutation_count

        offspring = []
        offspring.extend(self._elitism.produce(ranking, elite_count))
        offspring.extend(self._mutate.produce(ranking, mutation_count))
        offspring.extend(self._recombine.produce(ranking, crossover_count))

        logger.debug(
            f"Generation {self._generation + 1}: {elite_count} elites, "
            f"{mutation_count} mutants, {crossover_count} crossovers"
        )

        self._trees = [
            child.tree if child.strategy is StrategyType.ELITISM
            else repair(child.tree, self.generator.generate_leaf)
            for child in offspring
        ]
        self._ranking = None
        self._generation += 1

        return self.rank()[0].fitness

    def run(self, max_generations: int | None = None) -> RankedIndividual:
        """
        Evolve until the best fitness plateaus.

        The best fitness of the current population is the baseline. Each
        update() whose best equals the previous one counts toward the
        plateau; the run stops once that count exceeds the patience. A
        strict improvement is reported and resets the count.

        Args:
            max_generations: Optional hard limit on update() calls

        Returns:
            Best individual of the final generation
        """
        best = self.best
        self._report(best)
        previous = best.fitness
        plateau = 0
        updates = 0

        while max_generations is None or updates < max_generations:
            current = self.update()
            updates += 1

            if current == previous:
                plateau += 1
                if plateau > self.config.patience:
                    logger.info(
                        f"Best fitness unchanged for {plateau} generations, stopping "
                        f"at generation {self._generation}"
                    )
                    break
            else:
                if current > previous:
                    self._report(self.best)
                plateau = 0
            previous = current
        else:
            logger.info(f"Reached generation limit of {max_generations}")

        return self.best

    def _report(self, individual: RankedIndividual):
        logger.info(
            f"New best at generation {self._generation} "
            f"(fitness {individual.fitness:.4f}): {individual.tree}"
        )
        if self.reporter is not None:
            self.reporter(individual)

    def dump(self) -> list[str]:
        """Serialized form of every individual, in population order."""
        return [tree.serialize() for tree in self._trees]

    def checkpoint(self) -> Checkpoint:
        """Snapshot of the ranked population."""
        ranking = self.rank()
        return Checkpoint(
            trees=[individual.tree.clone() for individual in ranking],
            generation=self._generation,
            best_fitness=ranking[0].fitness,
            config=self.config.to_dict(),
        )
