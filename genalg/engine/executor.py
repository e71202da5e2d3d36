"""Compute engine fanning population work out to a worker pool.

Each phase submits its tasks, then blocks until every task has finished
before the next phase starts. Tasks read the population and draw from the
shared random source; their results are merged into the population on the
calling thread after the join. Task completion order makes runs
non-reproducible for a fixed seed, while the distribution of outcomes
matches the serial engine.

The executor must run tasks in the same process (a thread pool): tasks
share the population and the random source with the caller.
"""

from __future__ import annotations

import logging
from collections import Counter
from concurrent.futures import FIRST_EXCEPTION, Executor, Future, wait
from typing import Any, Callable, TypeVar

from genalg.core.definition import AlgorithmDefinition
from genalg.core.handle import Handle
from genalg.engine.compute_engine import ComputeEngine, crossover_budget
from genalg.utils.rng_manager import RNGManager
from genalg.utils.validation import CollaboratorError, ConfigurationError, GenalgError

H = TypeVar("H")


class ExecutorComputeEngine(ComputeEngine[H]):
    """Runs fitness, selection, crossover and mutation tasks on an Executor."""

    def __init__(self, rng_manager: RNGManager, definition: AlgorithmDefinition[H], executor: Executor) -> None:
        if executor is None:
            raise ConfigurationError("missing_executor", "Worker-pool engine requires an executor")
        super().__init__(rng_manager, definition)
        self._executor = executor

    @property
    def executor(self) -> Executor:
        return self._executor

    def _run_phase(self, phase: str, calls: list[tuple[Callable[..., Any], tuple]]) -> list[Any]:
        """Submit ``calls`` and join them all; results keep submission order."""
        futures: list[Future] = []
        try:
            for fn, args in calls:
                futures.append(self._executor.submit(fn, *args))
        except RuntimeError as exc:
            for f in futures:
                f.cancel()
            wait(futures)
            raise GenalgError(
                "executor_unavailable",
                f"Executor rejected {phase} tasks: {exc}",
                phase=phase,
            ) from exc
        return self._join(phase, futures)

    def _join(self, phase: str, futures: list[Future]) -> list[Any]:
        _, not_done = wait(futures, return_when=FIRST_EXCEPTION)
        failed = [f for f in futures if f.done() and not f.cancelled() and f.exception() is not None]
        if not failed:
            return [f.result() for f in futures]

        for f in not_done:
            f.cancel()
        # drain siblings that were already running
        wait(not_done)
        exc = failed[0].exception()
        logging.warning(f"{phase} task failed; {len(not_done)} sibling task(s) cancelled or drained")
        if isinstance(exc, GenalgError):
            raise exc
        raise CollaboratorError(
            "worker_failed",
            f"{phase} task raised {type(exc).__name__}: {exc}",
            phase=phase,
        ) from exc

    def update_fitness(self, population: list[Handle[H]]) -> float:
        pending: list[Handle[H]] = []
        scheduled: set[int] = set()
        for handle in population:
            if handle.has_fitness or id(handle) in scheduled:
                self.metrics.cache_hits += 1
                continue
            scheduled.add(id(handle))
            pending.append(handle)

        if pending:
            results = self._run_phase(
                "calculate_fitness",
                [(self._evaluate, (handle.hypothesis,)) for handle in pending],
            )
            for handle, fitness in zip(pending, results):
                handle.set_fitness(fitness)
            self.metrics.fitness_evaluations += len(pending)
        return self._assign_probabilities(population)

    def select(self, population: list[Handle[H]], target_count: int, target: list[Handle[H]]) -> None:
        if target_count <= 0:
            return
        total = self.sum_of_probabilities(population)
        selected = self._run_phase(
            "select",
            [(self.probabilistic_select, (population, total)) for _ in range(target_count)],
        )
        target.extend(selected)
        self.metrics.selections += target_count

    def crossover(self, population: list[Handle[H]], target_count: int, target: list[Handle[H]]) -> None:
        if target_count <= 0:
            return
        total = self.sum_of_probabilities(population)
        budget = crossover_budget(target_count)
        produced = 0
        attempts = 0
        while produced < target_count:
            remaining = target_count - produced
            # collaborators usually return two children per call
            batch = min(max(1, (remaining + 1) // 2), budget - attempts)
            if batch <= 0:
                raise self._degenerate(target_count, produced, attempts)
            results = self._run_phase(
                "cross_over_hypothesis",
                [(self._recombine, (population, total)) for _ in range(batch)],
            )
            attempts += batch
            for offspring in results:
                # overshoot is trimmed
                for child in offspring[: target_count - produced]:
                    target.append(self._new_handle(child, "cross_over_hypothesis"))
                    produced += 1
        self.metrics.crossovers += attempts
        self.metrics.offspring += produced

    def mutate(self, population: list[Handle[H]], mutation_count: int) -> None:
        if mutation_count <= 0 or not population:
            return
        # Indices are drawn up front; a member drawn k times gets k composed mutations.
        draws = Counter(self._rng.randrange(len(population)) for _ in range(mutation_count))
        indices = list(draws)
        results = self._run_phase(
            "mutate_hypothesis",
            [(self._mutated_copy, (population[index].hypothesis, draws[index])) for index in indices],
        )
        for index, mutated in zip(indices, results):
            population[index] = self._new_handle(mutated, "mutate_hypothesis")
        self.metrics.mutations += mutation_count


__all__ = ["ExecutorComputeEngine"]
