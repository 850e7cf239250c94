"""
Main CLI entry point.
"""

import click
import logging

from grammergen import __version__


def _load_checkpoint(path):
    from grammergen.core import GrammergenError
    from grammergen.evolution import Checkpoint

    try:
        return Checkpoint.load(path)
    except GrammergenError as e:
        raise click.ClickException(str(e))


def _setup_logging(verbose: bool):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )


@click.group()
@click.version_option(version=__version__)
def main():
    """Grammergen: evolve approximate grammars from example strings."""
    pass


@main.command()
@click.option("--input", "-i", "input_path", required=True, type=click.Path(exists=True, dir_okay=False), help="Corpus file, one example per line")
@click.option("--config", "-c", "config_path", type=click.Path(exists=True, dir_okay=False), help="TOML file with evolution parameters")
@click.option("--population", "-p", "population_size", type=int, help="Number of trees per generation")
@click.option("--nodes", "-n", "node_budget", type=int, help="Node budget per random tree")
@click.option("--elite-ratio", type=float, help="Share of top trees kept unchanged")
@click.option("--mutation-ratio", type=float, help="Share of mutated offspring")
@click.option("--patience", type=int, help="Unchanged generations tolerated before stopping")
@click.option("--max-generations", type=int, help="Hard limit on generations")
@click.option("--seed", type=int, help="Random seed for reproducibility")
@click.option("--keep-both-offspring/--keep-one-offspring", default=None, help="Keep both children of each crossover")
@click.option("--resume", type=click.Path(exists=True, dir_okay=False), help="Checkpoint to resume from")
@click.option("--output", "-o", type=click.Path(dir_okay=False), help="Write a checkpoint of the final population")
@click.option("--dump", is_flag=True, help="Print the whole final population")
@click.option("-v", "--verbose", is_flag=True, help="Verbose output")
def evolve(input_path, config_path, population_size, node_budget, elite_ratio, mutation_ratio,
           patience, max_generations, seed, keep_both_offspring, resume, output, dump, verbose):
    """Evolve grammars that match the examples of a corpus."""
    from grammergen.core import GrammergenError
    from grammergen.evolution import Corpus, EvolutionConfig, Population

    _setup_logging(verbose)
    logger = logging.getLogger(__name__)

    overrides = {
        "population_size": population_size,
        "node_budget": node_budget,
        "elite_ratio": elite_ratio,
        "mutation_ratio": mutation_ratio,
        "patience": patience,
        "seed": seed,
        "keep_both_offspring": keep_both_offspring,
    }

    def report(individual):
        click.echo(f"{individual.fitness:.4f}\t{individual.tree}")

    try:
        if config_path:
            config = EvolutionConfig.from_file(config_path, **overrides)
        else:
            config = EvolutionConfig(**{k: v for k, v in overrides.items() if v is not None})

        corpus = Corpus.load(input_path)

        if resume:
            logger.info(f"Resuming from checkpoint: {resume}")
            population = Population.from_checkpoint(_load_checkpoint(resume), corpus, config=config, reporter=report)
        else:
            population = Population.random(corpus, config=config, reporter=report)

        best = population.run(max_generations=max_generations)
    except GrammergenError as e:
        raise click.ClickException(str(e))

    logger.info(f"Finished after {population.generation} generations, best fitness {best.fitness:.4f}")

    if dump:
        for line in population.dump():
            click.echo(line)

    if output:
        population.checkpoint().save(output)
        logger.info(f"Checkpoint written to {output}")


@main.command()
@click.argument("checkpoint", type=click.Path(exists=True, dir_okay=False))
@click.option("--top", "-k", type=int, help="Only show the k best trees")
def show(checkpoint, top):
    """Print the trees of a checkpoint, best first."""
    saved = _load_checkpoint(checkpoint)
    click.echo(f"# generation {saved.generation}, best fitness {saved.best_fitness}")
    trees = saved.trees if top is None else saved.trees[:top]
    for tree in trees:
        click.echo(tree.serialize())


@main.command()
@click.argument("checkpoint", type=click.Path(exists=True, dir_okay=False))
@click.argument("strings", nargs=-1, required=True)
def match(checkpoint, strings):
    """Test strings against the best grammar of a checkpoint."""
    best = _load_checkpoint(checkpoint).best
    if best is None:
        raise click.ClickException("checkpoint holds no trees")

    for string in strings:
        matched = best.match(string)
        click.echo(f"{'match' if matched else 'no match'}\t{best.evaluate(string):.4f}\t{string}")


if __name__ == "__main__":
    main()
