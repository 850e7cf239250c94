"""
Corpus loading and population checkpoints.

The corpus is a plain text file, one example per line. Checkpoints are
dill pickles of the ranked trees of a population.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Iterator

import dill

from grammergen.core import GrammarNode, InvalidArgument

logger = logging.getLogger(__name__)


def _strip_newline(line: bytes) -> bytes:
    if line.endswith(b"\r\n"):
        return line[:-2]
    if line.endswith(b"\n"):
        return line[:-1]
    return line


class Corpus:
    """
    Immutable ordered collection of example strings.

    Examples are kept as bytes; matching is byte-oriented.
    """

    def __init__(self, examples: Iterable[bytes | str] = ()):
        self._examples = tuple(
            example.encode("utf-8") if isinstance(example, str) else bytes(example)
            for example in examples
        )

    @classmethod
    def from_lines(cls, lines: Iterable[bytes | str]) -> "Corpus":
        """Build a corpus from lines, stripping one trailing newline each."""
        stripped = []
        for line in lines:
            if isinstance(line, str):
                line = line.encode("utf-8")
            stripped.append(_strip_newline(line))
        return cls(stripped)

    @classmethod
    def load(cls, path: Path | str) -> "Corpus":
        """Read a corpus file, one example per line."""
        path = Path(path)
        with open(path, "rb") as f:
            corpus = cls.from_lines(f)
        logger.info(f"Loaded {len(corpus)} examples from {path}")
        return corpus

    def append(self, example: bytes | str) -> "Corpus":
        """Return a new corpus with one more example."""
        return Corpus(self._examples + (example,))

    def __len__(self) -> int:
        return len(self._examples)

    def __iter__(self) -> Iterator[bytes]:
        return iter(self._examples)

    def __getitem__(self, index: int) -> bytes:
        return self._examples[index]

    def __eq__(self, other) -> bool:
        if not isinstance(other, Corpus):
            return NotImplemented
        return self._examples == other._examples

    def __repr__(self) -> str:
        return f"Corpus({len(self._examples)} examples)"


@dataclass
class Checkpoint:
    """
    Saved state of a population.

    Trees are stored best first, so trees[0] is the best grammar found.
    """
    trees: list[GrammarNode]
    generation: int = 0
    best_fitness: float | None = None
    config: dict = field(default_factory=dict)

    @property
    def best(self) -> GrammarNode | None:
        return self.trees[0] if self.trees else None

    def save(self, path: Path | str):
        """Write the checkpoint to disk."""
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        with open(path, "wb") as f:
            dill.dump(self, f)
        logger.debug(f"Saved checkpoint with {len(self.trees)} trees to {path}")

    @classmethod
    def load(cls, path: Path | str) -> "Checkpoint":
        """
        Read a checkpoint written by save().

        Raises:
            FileNotFoundError: If nothing exists at path
            InvalidArgument: If the file is not a readable checkpoint
        """
        path = Path(path)
        if not path.exists():
            raise FileNotFoundError(f"No checkpoint at {path}")
        try:
            with open(path, "rb") as f:
                checkpoint = dill.load(f)
        except (dill.UnpicklingError, EOFError, ValueError, AttributeError, ImportError) as e:
            raise InvalidArgument(f"Not a readable checkpoint: {path} ({e})") from e
        if not isinstance(checkpoint, cls):
            raise InvalidArgument(f"Not a checkpoint: {path} holds {type(checkpoint).__name__}")
        logger.debug(f"Loaded checkpoint with {len(checkpoint.trees)} trees from {path}")
        return checkpoint
