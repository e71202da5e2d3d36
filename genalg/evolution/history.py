"""Per-generation fitness statistics recorded during a run."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, Sequence

import numpy as np

from genalg.core.handle import Handle


@dataclass(frozen=True)
class GenerationRecord:
    generation: int
    best_fitness: float
    all_time_best_fitness: float
    mean_fitness: float
    std_fitness: float
    min_fitness: float
    fitness_evaluations: int


@dataclass
class GenerationHistory:
    """Tracks how fitness develops from generation to generation."""

    records: list[GenerationRecord] = field(default_factory=list)

    def __len__(self) -> int:
        return len(self.records)

    def add_generation(
        self,
        generation: int,
        population: Sequence[Handle[Any]],
        all_time_best: Handle[Any] | None,
        fitness_evaluations: int,
    ) -> GenerationRecord:
        fitness = np.fromiter((h.fitness for h in population), dtype=np.float64, count=len(population))
        if fitness.size:
            best, mean, std, low = float(fitness.max()), float(fitness.mean()), float(fitness.std()), float(fitness.min())
        else:
            best = mean = std = low = 0.0
        record = GenerationRecord(
            generation=generation,
            best_fitness=best,
            all_time_best_fitness=all_time_best.fitness if all_time_best is not None else best,
            mean_fitness=mean,
            std_fitness=std,
            min_fitness=low,
            fitness_evaluations=int(fitness_evaluations),
        )
        self.records.append(record)
        return record

    def best_fitness_curve(self) -> np.ndarray:
        return np.array([r.all_time_best_fitness for r in self.records], dtype=np.float64)

    def total_evaluations(self) -> int:
        return sum(r.fitness_evaluations for r in self.records)

    def clear(self) -> None:
        self.records.clear()

    def to_rows(self) -> list[dict[str, Any]]:
        return [asdict(r) for r in self.records]


__all__ = ["GenerationRecord", "GenerationHistory"]
