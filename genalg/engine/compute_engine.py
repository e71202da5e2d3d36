"""Population-level operations shared by the serial and worker-pool engines.

A compute engine owns no population; the orchestrator hands it lists of
Handles and the engine:

- creates random handles through the collaborator
- caches fitness per handle and derives selection probabilities
- draws survivors and parents by roulette-wheel sampling
- recombines parents into fresh, fitness-invalid handles
- mutates by clone-and-replace at uniformly drawn indices (with replacement)
"""

from __future__ import annotations

import copy
import logging
import math
from abc import ABC, abstractmethod
from dataclasses import asdict, dataclass, fields
from typing import Any, Callable, Generic, Sequence, TypeVar

from genalg.core.definition import AlgorithmDefinition
from genalg.core.handle import Handle
from genalg.utils.rng_manager import RNGManager
from genalg.utils.validation import CollaboratorError, DegeneratePopulationError, GenalgError

H = TypeVar("H")

# Recombination calls allowed per requested offspring before a generation
# step is declared degenerate.
CROSSOVER_ATTEMPT_FACTOR = 10


@dataclass
class EngineMetrics:
    """Counters accumulated over the lifetime of an engine."""

    fitness_evaluations: int = 0
    cache_hits: int = 0
    selections: int = 0
    crossovers: int = 0
    offspring: int = 0
    mutations: int = 0

    def as_dict(self) -> dict[str, int]:
        return asdict(self)

    def reset(self) -> None:
        for f in fields(self):
            setattr(self, f.name, 0)


def split_counts(generation_size: int, cross_over_rate: float, mutation_rate: float) -> tuple[int, int, int]:
    """Return ``(selection_count, crossover_count, mutation_count)`` for one generation.

    Selection takes whatever crossover leaves so the two always add up to
    ``generation_size``.
    """
    crossover_count = int(cross_over_rate * generation_size)
    selection_count = generation_size - crossover_count
    mutation_count = int(mutation_rate * generation_size)
    return selection_count, crossover_count, mutation_count


def crossover_budget(target_count: int) -> int:
    return max(1, int(target_count)) * CROSSOVER_ATTEMPT_FACTOR


def roulette_select(population: Sequence[Handle[H]], point: float) -> Handle[H]:
    """Walk ``population`` accumulating probabilities until ``point`` is reached.

    Returns the first handle whose running sum is >= ``point``; the last
    handle if rounding keeps the sum below ``point``.
    """
    if not population:
        raise ValueError("Cannot select from an empty population")
    running = 0.0
    for handle in population:
        running += handle.probability
        if running >= point:
            return handle
    return population[-1]


class ComputeEngine(ABC, Generic[H]):
    """Strategy executing population operations for a GeneticAlgorithm."""

    def __init__(self, rng_manager: RNGManager, definition: AlgorithmDefinition[H]) -> None:
        self._rng = rng_manager
        self._definition = definition
        self.metrics = EngineMetrics()

    @property
    def rng_manager(self) -> RNGManager:
        return self._rng

    @property
    def definition(self) -> AlgorithmDefinition[H]:
        return self._definition

    # ---------- collaborator calls ----------

    def _invoke(self, phase: str, fn: Callable[..., Any], *args: Any) -> Any:
        try:
            return fn(*args)
        except GenalgError:
            raise
        except Exception as exc:
            raise CollaboratorError(
                "collaborator_failed",
                f"{phase} raised {type(exc).__name__}: {exc}",
                phase=phase,
            ) from exc

    def _new_handle(self, hypothesis: H | None, phase: str) -> Handle[H]:
        if hypothesis is None:
            raise CollaboratorError("null_hypothesis", f"{phase} returned None", phase=phase)
        return Handle(hypothesis)

    def _evaluate(self, hypothesis: H) -> float:
        value = self._invoke("calculate_fitness", self._definition.calculate_fitness, hypothesis)
        try:
            fitness = float(value)
        except (TypeError, ValueError) as exc:
            raise CollaboratorError(
                "invalid_fitness",
                "calculate_fitness returned a non-numeric value",
                phase="calculate_fitness",
                value=value,
            ) from exc
        if not math.isfinite(fitness) or fitness < 0.0:
            raise CollaboratorError(
                "invalid_fitness",
                "calculate_fitness must return a finite, non-negative number",
                phase="calculate_fitness",
                value=fitness,
            )
        return fitness

    def _recombine(self, population: Sequence[Handle[H]], sum_of_probabilities: float) -> list[H]:
        first = self.probabilistic_select(population, sum_of_probabilities)
        second = self.probabilistic_select(population, sum_of_probabilities)
        offspring = self._invoke(
            "cross_over_hypothesis",
            self._definition.cross_over_hypothesis,
            first.hypothesis,
            second.hypothesis,
        )
        if offspring is None or isinstance(offspring, (str, bytes)):
            raise CollaboratorError(
                "invalid_offspring",
                "cross_over_hypothesis must return a sequence of hypotheses",
                phase="cross_over_hypothesis",
            )
        try:
            return list(offspring)
        except TypeError as exc:
            raise CollaboratorError(
                "invalid_offspring",
                "cross_over_hypothesis must return a sequence of hypotheses",
                phase="cross_over_hypothesis",
                type=type(offspring).__name__,
            ) from exc

    def _copy(self, hypothesis: H) -> H:
        """Private copy for mutation: the definition's ``copy_hypothesis`` if it has one, else deepcopy."""
        hook = getattr(self._definition, "copy_hypothesis", None)
        if callable(hook):
            duplicate = self._invoke("copy_hypothesis", hook, hypothesis)
            if duplicate is None:
                raise CollaboratorError("null_hypothesis", "copy_hypothesis returned None", phase="copy_hypothesis")
            return duplicate
        try:
            return copy.deepcopy(hypothesis)
        except Exception as exc:
            raise CollaboratorError(
                "uncopyable_hypothesis",
                f"Hypothesis of type {type(hypothesis).__name__} cannot be deep-copied; "
                "provide copy_hypothesis() on the definition",
                phase="mutate_hypothesis",
            ) from exc

    def _mutated_copy(self, hypothesis: H, times: int = 1) -> H:
        """Mutate a private copy ``times`` times; the original stays untouched."""
        current = self._copy(hypothesis)
        for _ in range(times):
            result = self._invoke("mutate_hypothesis", self._definition.mutate_hypothesis, current)
            if result is not None:
                current = result
        return current

    # ---------- shared population math ----------

    def _assign_probabilities(self, population: Sequence[Handle[H]]) -> float:
        if not population:
            return 0.0
        sum_fitness = 0.0
        for handle in population:
            sum_fitness += handle.fitness
        sum_of_probabilities = 0.0
        if sum_fitness > 0.0:
            for handle in population:
                handle.probability = handle.fitness / sum_fitness
                sum_of_probabilities += handle.probability
        else:
            logging.warning("Population has zero total fitness; using uniform selection probabilities")
            uniform = 1.0 / len(population)
            for handle in population:
                handle.probability = uniform
                sum_of_probabilities += uniform
        return sum_of_probabilities

    @staticmethod
    def sum_of_probabilities(population: Sequence[Handle[H]]) -> float:
        total = 0.0
        for handle in population:
            total += handle.probability
        return total

    def probabilistic_select(
        self,
        population: Sequence[Handle[H]],
        sum_of_probabilities: float | None = None,
    ) -> Handle[H]:
        """Draw one handle with probability proportional to its fitness share."""
        if sum_of_probabilities is None:
            sum_of_probabilities = self.sum_of_probabilities(population)
        point = self._rng.uniform_point(sum_of_probabilities)
        return roulette_select(population, point)

    def max(self, population: Sequence[Handle[H]]) -> Handle[H] | None:
        """Return the first handle with the greatest fitness, or None if empty."""
        result: Handle[H] | None = None
        for handle in population:
            if result is None or handle.fitness > result.fitness:
                result = handle
        return result

    def create_random_population(self, count: int) -> list[Handle[H]]:
        population: list[Handle[H]] = []
        for _ in range(count):
            hypothesis = self._invoke("new_random_hypothesis", self._definition.new_random_hypothesis)
            population.append(self._new_handle(hypothesis, "new_random_hypothesis"))
        return population

    def calculate_next_generation(
        self,
        current: list[Handle[H]],
        generation_size: int,
        cross_over_rate: float,
        mutation_rate: float,
    ) -> list[Handle[H]]:
        """Evaluate ``current`` and breed a new population of ``generation_size``."""
        self.update_fitness(current)
        selection_count, crossover_count, mutation_count = split_counts(
            generation_size, cross_over_rate, mutation_rate
        )
        next_generation: list[Handle[H]] = []
        self.select(current, selection_count, next_generation)
        self.crossover(current, crossover_count, next_generation)
        self.mutate(next_generation, mutation_count)
        return next_generation

    def _degenerate(self, target_count: int, produced: int, attempts: int) -> DegeneratePopulationError:
        return DegeneratePopulationError(
            "crossover_budget_exhausted",
            f"Recombination produced {produced} of {target_count} offspring in {attempts} attempts",
            phase="cross_over_hypothesis",
            target_count=target_count,
            produced=produced,
            attempts=attempts,
        )

    # ---------- strategy-specific operations ----------

    @abstractmethod
    def update_fitness(self, population: list[Handle[H]]) -> float:
        """Compute missing fitness values and probabilities; return the probability sum."""

    @abstractmethod
    def select(self, population: list[Handle[H]], target_count: int, target: list[Handle[H]]) -> None:
        """Append ``target_count`` roulette-wheel draws (with replacement) to ``target``."""

    @abstractmethod
    def crossover(self, population: list[Handle[H]], target_count: int, target: list[Handle[H]]) -> None:
        """Append exactly ``target_count`` offspring handles to ``target``."""

    @abstractmethod
    def mutate(self, population: list[Handle[H]], mutation_count: int) -> None:
        """Replace ``mutation_count`` uniformly drawn members with mutated clones."""


__all__ = [
    "CROSSOVER_ATTEMPT_FACTOR",
    "ComputeEngine",
    "EngineMetrics",
    "crossover_budget",
    "roulette_select",
    "split_counts",
]
