"""Tunable parameters of a genetic algorithm run and named presets."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict

from genalg.engine.compute_engine import split_counts
from genalg.utils.validation import ConfigurationError, ensure_generation_size, ensure_rate

CROSS_OVER_RATE_DEFAULT = 0.3
MUTATION_RATE_DEFAULT = 0.05
GENERATION_SIZE_DEFAULT = 100


@dataclass(frozen=True)
class EvolutionConfig:
    """Validated, immutable run parameters.

    Attributes:
        cross_over_rate: Fraction of each new generation produced by
            recombination; the rest is filled by selection. In ``[0, 1]``.
        mutation_rate: Fraction of the population size drawn (with
            replacement) for mutation each generation. In ``[0, 1]``.
        generation_size: Number of individuals per generation, at least 2.
    """

    cross_over_rate: float = CROSS_OVER_RATE_DEFAULT
    mutation_rate: float = MUTATION_RATE_DEFAULT
    generation_size: int = GENERATION_SIZE_DEFAULT

    def __post_init__(self) -> None:
        object.__setattr__(self, "cross_over_rate", ensure_rate("cross_over_rate", self.cross_over_rate))
        object.__setattr__(self, "mutation_rate", ensure_rate("mutation_rate", self.mutation_rate))
        object.__setattr__(self, "generation_size", ensure_generation_size(self.generation_size))

    @property
    def selection_count(self) -> int:
        return split_counts(self.generation_size, self.cross_over_rate, self.mutation_rate)[0]

    @property
    def crossover_count(self) -> int:
        return split_counts(self.generation_size, self.cross_over_rate, self.mutation_rate)[1]

    @property
    def mutation_count(self) -> int:
        return split_counts(self.generation_size, self.cross_over_rate, self.mutation_rate)[2]

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Dict[str, Any], *, strict: bool = False) -> "EvolutionConfig":
        """Build a config from a mapping; missing keys take the defaults.

        With ``strict=True`` unknown keys are rejected.
        """
        allowed = {"cross_over_rate", "mutation_rate", "generation_size"}
        extras = set(data.keys()) - allowed
        if extras and strict:
            raise ConfigurationError(
                "unknown_field",
                f"Unknown fields in EvolutionConfig: {sorted(extras)}",
                extras=sorted(extras),
            )
        return cls(**{k: v for k, v in data.items() if k in allowed})


PRESET_MINIMAL = EvolutionConfig(generation_size=10)
PRESET_STANDARD = EvolutionConfig()
PRESET_RESEARCH = EvolutionConfig(cross_over_rate=0.5, mutation_rate=0.02, generation_size=500)


__all__ = [
    "CROSS_OVER_RATE_DEFAULT",
    "MUTATION_RATE_DEFAULT",
    "GENERATION_SIZE_DEFAULT",
    "EvolutionConfig",
    "PRESET_MINIMAL",
    "PRESET_STANDARD",
    "PRESET_RESEARCH",
]
