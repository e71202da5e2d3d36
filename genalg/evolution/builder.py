"""Fluent construction of GeneticAlgorithm instances."""

from __future__ import annotations

import random
from concurrent.futures import Executor
from typing import Any, Dict, Generic, TypeVar

from genalg.config import (
    CROSS_OVER_RATE_DEFAULT,
    GENERATION_SIZE_DEFAULT,
    MUTATION_RATE_DEFAULT,
    EvolutionConfig,
)
from genalg.core.definition import AlgorithmDefinition
from genalg.evolution.genetic_algorithm import GeneticAlgorithm
from genalg.utils.rng_manager import RNGManager
from genalg.utils.validation import ConfigurationError, ensure_generation_size, ensure_rate

H = TypeVar("H")


class GeneticAlgorithmBuilder(Generic[H]):
    """Collects options and builds a GeneticAlgorithm.

    Every ``with_*`` call validates its argument immediately. Options:

    - cross-over rate: split between selection and recombination
    - mutation rate: perturbation intensity
    - generation size: population width
    - random source: reproducibility control (``with_random``/``with_seed``)
    - executor: chooses the worker-pool engine over the serial one
    """

    def __init__(self, definition: AlgorithmDefinition[H]) -> None:
        if definition is None:
            raise ConfigurationError("missing_definition", "An algorithm definition is required")
        self._definition = definition
        self._cross_over_rate = CROSS_OVER_RATE_DEFAULT
        self._mutation_rate = MUTATION_RATE_DEFAULT
        self._generation_size = GENERATION_SIZE_DEFAULT
        self._rng: Any = None
        self._executor: Executor | None = None

    def with_cross_over_rate(self, rate: float) -> "GeneticAlgorithmBuilder[H]":
        self._cross_over_rate = ensure_rate("cross_over_rate", rate)
        return self

    def with_mutation_rate(self, rate: float) -> "GeneticAlgorithmBuilder[H]":
        self._mutation_rate = ensure_rate("mutation_rate", rate)
        return self

    def with_generation_size(self, size: int) -> "GeneticAlgorithmBuilder[H]":
        self._generation_size = ensure_generation_size(size)
        return self

    def with_random(self, rng: random.Random | RNGManager) -> "GeneticAlgorithmBuilder[H]":
        if not isinstance(rng, (random.Random, RNGManager)):
            raise ConfigurationError(
                "invalid_random_source",
                "with_random() needs a random.Random or RNGManager instance",
                type=type(rng).__name__,
            )
        self._rng = rng
        return self

    def with_seed(self, seed: int) -> "GeneticAlgorithmBuilder[H]":
        if isinstance(seed, bool) or not isinstance(seed, int):
            raise ConfigurationError("invalid_seed", "Seed must be an integer", seed=seed)
        self._rng = seed
        return self

    def with_executor(self, executor: Executor) -> "GeneticAlgorithmBuilder[H]":
        if executor is None:
            raise ConfigurationError("missing_executor", "with_executor() needs an executor")
        self._executor = executor
        return self

    def with_config(self, config: EvolutionConfig | Dict[str, Any]) -> "GeneticAlgorithmBuilder[H]":
        if not isinstance(config, EvolutionConfig):
            config = EvolutionConfig.from_dict(dict(config), strict=True)
        self._cross_over_rate = config.cross_over_rate
        self._mutation_rate = config.mutation_rate
        self._generation_size = config.generation_size
        return self

    def config(self) -> EvolutionConfig:
        return EvolutionConfig(
            cross_over_rate=self._cross_over_rate,
            mutation_rate=self._mutation_rate,
            generation_size=self._generation_size,
        )

    def build(self) -> GeneticAlgorithm[H]:
        return GeneticAlgorithm.from_config(
            self._definition,
            self.config(),
            rng=self._rng,
            executor=self._executor,
        )


def build_algorithm(
    definition: AlgorithmDefinition[H],
    config: EvolutionConfig | Dict[str, Any] | None = None,
    *,
    rng: Any = None,
    executor: Executor | None = None,
) -> GeneticAlgorithm[H]:
    """Build a GeneticAlgorithm in one call; ``config`` defaults to PRESET_STANDARD values."""
    builder: GeneticAlgorithmBuilder[H] = GeneticAlgorithmBuilder(definition)
    if config is not None:
        builder.with_config(config)
    if isinstance(rng, (random.Random, RNGManager)):
        builder.with_random(rng)
    elif rng is not None:
        builder.with_seed(rng)
    if executor is not None:
        builder.with_executor(executor)
    return builder.build()


__all__ = ["GeneticAlgorithmBuilder", "build_algorithm"]
