"""Single-threaded compute engine.

All draws come from one random stream in a fixed order, so a fixed seed
reproduces a run exactly.
"""

from __future__ import annotations

from typing import TypeVar

from genalg.core.handle import Handle
from genalg.engine.compute_engine import ComputeEngine, crossover_budget

H = TypeVar("H")


class SimpleComputeEngine(ComputeEngine[H]):
    """Executes every population operation on the calling thread."""

    def update_fitness(self, population: list[Handle[H]]) -> float:
        for handle in population:
            if handle.has_fitness:
                self.metrics.cache_hits += 1
                continue
            handle.set_fitness(self._evaluate(handle.hypothesis))
            self.metrics.fitness_evaluations += 1
        return self._assign_probabilities(population)

    def select(self, population: list[Handle[H]], target_count: int, target: list[Handle[H]]) -> None:
        if target_count <= 0:
            return
        total = self.sum_of_probabilities(population)
        for _ in range(target_count):
            target.append(self.probabilistic_select(population, total))
        self.metrics.selections += target_count

    def crossover(self, population: list[Handle[H]], target_count: int, target: list[Handle[H]]) -> None:
        if target_count <= 0:
            return
        total = self.sum_of_probabilities(population)
        budget = crossover_budget(target_count)
        produced = 0
        attempts = 0
        while produced < target_count:
            if attempts >= budget:
                raise self._degenerate(target_count, produced, attempts)
            attempts += 1
            # overshoot is trimmed
            for child in self._recombine(population, total)[: target_count - produced]:
                target.append(self._new_handle(child, "cross_over_hypothesis"))
                produced += 1
        self.metrics.crossovers += attempts
        self.metrics.offspring += produced

    def mutate(self, population: list[Handle[H]], mutation_count: int) -> None:
        if mutation_count <= 0 or not population:
            return
        for _ in range(mutation_count):
            index = self._rng.randrange(len(population))
            mutated = self._mutated_copy(population[index].hypothesis)
            population[index] = self._new_handle(mutated, "mutate_hypothesis")
        self.metrics.mutations += mutation_count


__all__ = ["SimpleComputeEngine"]
