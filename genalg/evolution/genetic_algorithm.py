"""Generational search loop driving a compute engine.

One generation walks the states
INIT -> EVALUATING -> SELECTING -> REPLACING -> MUTATING -> CHECK_CONTINUE,
returning to EVALUATING until the continuation predicate answers False
(TERMINAL). The orchestrator keeps the all-time best handle, which is
replaced only by a strictly fitter one.

A failed run is rolled back: best, generation counter and history are
cleared and the random source is restored to its state before the run,
so no partial result is observable.
"""

from __future__ import annotations

import logging
from concurrent.futures import Executor
from enum import Enum
from typing import Any, Callable, Generic, Sequence, TypeVar

from genalg.config import EvolutionConfig
from genalg.core.definition import AlgorithmDefinition
from genalg.core.handle import Handle
from genalg.engine.compute_engine import ComputeEngine, split_counts
from genalg.engine.executor import ExecutorComputeEngine
from genalg.engine.simple import SimpleComputeEngine
from genalg.evolution.history import GenerationHistory
from genalg.utils.rng_manager import RNGManager
from genalg.utils.validation import CollaboratorError, ConfigurationError, GenalgError

H = TypeVar("H")

_REQUIRED_CAPABILITIES = (
    "initialize",
    "new_random_hypothesis",
    "mutate_hypothesis",
    "cross_over_hypothesis",
    "calculate_fitness",
    "loop",
)


class AlgorithmState(Enum):
    INIT = "init"
    EVALUATING = "evaluating"
    SELECTING = "selecting"
    REPLACING = "replacing"
    MUTATING = "mutating"
    CHECK_CONTINUE = "check_continue"
    TERMINAL = "terminal"


def _check_definition(definition: Any) -> None:
    if definition is None:
        raise ConfigurationError("missing_definition", "An algorithm definition is required")
    missing = [name for name in _REQUIRED_CAPABILITIES if not callable(getattr(definition, name, None))]
    if missing:
        raise ConfigurationError(
            "invalid_definition",
            f"Algorithm definition lacks required operations: {missing}",
            type=type(definition).__name__,
            missing=tuple(missing),
        )


class GeneticAlgorithm(Generic[H]):
    """Evolves hypotheses toward higher fitness until told to stop.

    Args:
        cross_over_rate: Fraction of each generation produced by crossover,
            between 0 and 1. ``0.3`` is a good starting point.
        mutation_rate: Fraction of the generation size that is mutated,
            between 0 and 1. ``0.05`` is a good starting point.
        generation_size: Individuals per generation, at least 2. ``100`` is
            a reasonable start; larger problems want larger populations.
        definition: Collaborator implementing AlgorithmDefinition.
        rng: Random source (``random.Random``, int seed or RNGManager).
            A fresh unseeded generator is used when omitted.
        executor: Worker pool; when given, the worker-pool engine is used.
        compute_engine: Explicit engine, mutually exclusive with ``executor``;
            its random source is used, so ``rng`` must be omitted or be that manager.

    Raises:
        ConfigurationError: If any parameter is out of range or the
            definition is missing an operation. Nothing runs in that case.
    """

    def __init__(
        self,
        cross_over_rate: float,
        mutation_rate: float,
        generation_size: int,
        definition: AlgorithmDefinition[H],
        *,
        rng: Any = None,
        executor: Executor | None = None,
        compute_engine: ComputeEngine[H] | None = None,
    ) -> None:
        self._config = EvolutionConfig(
            cross_over_rate=cross_over_rate,
            mutation_rate=mutation_rate,
            generation_size=generation_size,
        )
        _check_definition(definition)
        if executor is not None and compute_engine is not None:
            raise ConfigurationError(
                "conflicting_engines",
                "Pass either an executor or a compute engine, not both",
            )
        if compute_engine is not None and rng is not None and rng is not compute_engine.rng_manager:
            raise ConfigurationError(
                "conflicting_random_source",
                "A compute engine brings its own random source; do not pass rng as well",
            )
        self._definition = definition

        if compute_engine is not None:
            self._rng = compute_engine.rng_manager
            self._engine = compute_engine
        else:
            self._rng = RNGManager.from_source(rng)
            if executor is not None:
                self._engine = ExecutorComputeEngine(self._rng, definition, executor)
            else:
                self._engine = SimpleComputeEngine(self._rng, definition)

        self._state = AlgorithmState.INIT
        self._generation_number = 0
        self._best: Handle[H] | None = None
        self.history = GenerationHistory()

        try:
            definition.initialize(self._rng.rng)
        except GenalgError:
            raise
        except Exception as exc:
            raise CollaboratorError(
                "collaborator_failed",
                f"initialize raised {type(exc).__name__}: {exc}",
                phase="initialize",
            ) from exc

    @classmethod
    def from_config(
        cls,
        definition: AlgorithmDefinition[H],
        config: EvolutionConfig,
        *,
        rng: Any = None,
        executor: Executor | None = None,
    ) -> "GeneticAlgorithm[H]":
        return cls(
            config.cross_over_rate,
            config.mutation_rate,
            config.generation_size,
            definition,
            rng=rng,
            executor=executor,
        )

    # ---------- accessors ----------

    @property
    def config(self) -> EvolutionConfig:
        return self._config

    @property
    def cross_over_rate(self) -> float:
        return self._config.cross_over_rate

    @property
    def mutation_rate(self) -> float:
        return self._config.mutation_rate

    @property
    def generation_size(self) -> int:
        return self._config.generation_size

    @property
    def generation_number(self) -> int:
        """Number of generations completed by the current or last run."""
        return self._generation_number

    @property
    def best(self) -> Handle[H] | None:
        return self._best

    @property
    def state(self) -> AlgorithmState:
        return self._state

    @property
    def engine(self) -> ComputeEngine[H]:
        return self._engine

    @property
    def definition(self) -> AlgorithmDefinition[H]:
        return self._definition

    @property
    def rng_manager(self) -> RNGManager:
        return self._rng

    # ---------- search ----------

    def find_maximum(self, loop: Callable[[H], bool] | None = None) -> Handle[H] | None:
        """Run generations until the continuation predicate returns False.

        Args:
            loop: Optional predicate used instead of ``definition.loop``.
                Good predicates cap the generation count, cap wall-clock
                time, or check whether the best hypothesis solves the problem.

        Returns:
            The all-time best handle, or None for an empty population.

        Raises:
            CollaboratorError: A collaborator callback failed; the run is
                rolled back.
        """
        predicate = loop if loop is not None else self._definition.loop
        snapshot = self._rng.get_state()
        self._reset_run()
        try:
            return self._run(predicate)
        except BaseException:
            self._rollback(snapshot)
            raise

    def calculate_next_generation(self, hypotheses: Sequence[H]) -> list[H]:
        """Breed one generation from ``hypotheses`` under manual control.

        Every hypothesis is evaluated afresh; the result has exactly
        ``generation_size`` members.
        """
        if not hypotheses:
            raise ConfigurationError("empty_population", "Cannot breed from an empty population")
        try:
            current = [Handle(h) for h in hypotheses]
        except ValueError as exc:
            raise ConfigurationError("null_hypothesis", "Population contains None") from exc
        next_generation = self._engine.calculate_next_generation(
            current,
            self.generation_size,
            self.cross_over_rate,
            self.mutation_rate,
        )
        return [h.hypothesis for h in next_generation]

    def _reset_run(self) -> None:
        self._state = AlgorithmState.INIT
        self._generation_number = 0
        self._best = None
        self.history.clear()

    def _rollback(self, snapshot: Any) -> None:
        logging.info(f"Run failed after {self._generation_number} generation(s); rolling back")
        self._reset_run()
        self._rng.set_state(snapshot)

    def _continue(self, predicate: Callable[[H], bool], hypothesis: H) -> bool:
        try:
            return bool(predicate(hypothesis))
        except GenalgError:
            raise
        except Exception as exc:
            raise CollaboratorError(
                "collaborator_failed",
                f"loop raised {type(exc).__name__}: {exc}",
                phase="loop",
            ) from exc

    def _run(self, predicate: Callable[[H], bool]) -> Handle[H] | None:
        selection_count, crossover_count, mutation_count = split_counts(
            self.generation_size, self.cross_over_rate, self.mutation_rate
        )
        logging.info(
            f"Starting genetic search: generation_size={self.generation_size}, "
            f"cross_over_rate={self.cross_over_rate}, mutation_rate={self.mutation_rate}, "
            f"engine={type(self._engine).__name__}"
        )
        metrics = self._engine.metrics
        population = self._engine.create_random_population(self.generation_size)

        while True:
            self._state = AlgorithmState.EVALUATING
            evaluations_before = metrics.fitness_evaluations
            self._engine.update_fitness(population)
            current_max = self._engine.max(population)
            if current_max is not None and (self._best is None or current_max.fitness > self._best.fitness):
                self._best = current_max
            record = self.history.add_generation(
                self._generation_number,
                population,
                self._best,
                metrics.fitness_evaluations - evaluations_before,
            )

            if population:
                self._state = AlgorithmState.SELECTING
                next_generation: list[Handle[H]] = []
                self._engine.select(population, selection_count, next_generation)
                self._engine.crossover(population, crossover_count, next_generation)

                self._state = AlgorithmState.REPLACING
                population = next_generation

                self._state = AlgorithmState.MUTATING
                self._engine.mutate(population, mutation_count)

            self._state = AlgorithmState.CHECK_CONTINUE
            self._generation_number += 1
            if self._best is None:
                logging.warning("Empty population; stopping without a result")
                self._state = AlgorithmState.TERMINAL
                return None

            logging.debug(
                f"Generation {record.generation}: best={record.best_fitness:.6g} "
                f"all_time_best={record.all_time_best_fitness:.6g} mean={record.mean_fitness:.6g}"
            )
            if not self._continue(predicate, self._best.hypothesis):
                break

        self._state = AlgorithmState.TERMINAL
        logging.info(
            f"Genetic search finished after {self._generation_number} generation(s) "
            f"with fitness {self._best.fitness:.6g}"
        )
        return self._best


__all__ = ["AlgorithmState", "GeneticAlgorithm"]
