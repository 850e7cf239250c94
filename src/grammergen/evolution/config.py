"""
Evolution parameters.
"""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass, fields
from pathlib import Path

from grammergen.core import InvalidArgument

logger = logging.getLogger(__name__)


def _is_int(value) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class EvolutionConfig:
    """Configuration for a population run."""

    # Population shape
    population_size: int = 10
    node_budget: int = 100

    # Reproduction
    elite_ratio: float = 0.1
    mutation_ratio: float = 0.3
    keep_both_offspring: bool = False

    # Termination
    patience: int = 10

    # Reproducibility
    seed: int | None = None

    def __post_init__(self):
        self._check_types()
        if self.population_size < 1:
            raise InvalidArgument(f"population_size must be positive, got {self.population_size}")
        if self.node_budget < 1:
            raise InvalidArgument(f"node_budget must be greater than zero, got {self.node_budget}")
        for name in ("elite_ratio", "mutation_ratio"):
            value = getattr(self, name)
            if not 0.0 <= value <= 1.0:
                raise InvalidArgument(f"{name} must be within [0, 1], got {value}")
        if self.patience < 0:
            raise InvalidArgument(f"patience must be non-negative, got {self.patience}")

    def _check_types(self):
        for name in ("population_size", "node_budget", "patience"):
            if not _is_int(getattr(self, name)):
                raise InvalidArgument(f"{name} must be an integer, got {getattr(self, name)!r}")
        for name in ("elite_ratio", "mutation_ratio"):
            value = getattr(self, name)
            if not (_is_int(value) or isinstance(value, float)):
                raise InvalidArgument(f"{name} must be a number, got {value!r}")
        if self.seed is not None and not _is_int(self.seed):
            raise InvalidArgument(f"seed must be an integer, got {self.seed!r}")
        if not isinstance(self.keep_both_offspring, bool):
            raise InvalidArgument(f"keep_both_offspring must be a boolean, got {self.keep_both_offspring!r}")

    @classmethod
    def from_file(cls, path: Path | str, **overrides) -> "EvolutionConfig":
        """
        Load a config from a TOML file.

        Keys are the field names, either at top level or under an
        [evolution] table. Keyword overrides that are not None win over
        file values.
        """
        import tomllib

        path = Path(path)
        with open(path, "rb") as f:
            data = tomllib.load(f)
        data = data.get("evolution", data)

        known = {f.name for f in fields(cls)}
        unknown = set(data) - known
        if unknown:
            raise InvalidArgument(f"Unknown config keys in {path}: {', '.join(sorted(unknown))}")

        data.update({key: value for key, value in overrides.items() if value is not None})
        logger.debug(f"Loaded evolution config from {path}: {data}")
        return cls(**data)

    def to_dict(self) -> dict:
        return asdict(self)
