"""Population member record pairing a hypothesis with its cached evaluation."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeVar

H = TypeVar("H")


@dataclass(eq=False)
class Handle(Generic[H]):
    """Wrapper around a hypothesis held in a population.

    Attributes:
        hypothesis: The collaborator-owned candidate solution. Never inspected.
        fitness: Cached fitness; meaningless until ``has_fitness`` is True.
        has_fitness: Whether ``fitness`` holds a computed value.
        probability: Selection probability, valid only between a fitness
            update and the next mutation of the population.

    Handles compare by identity: the same hypothesis may sit in a population
    several times through the same handle after selection with replacement.
    """

    hypothesis: H
    fitness: float = 0.0
    has_fitness: bool = False
    probability: float = 0.0

    def __post_init__(self) -> None:
        if self.hypothesis is None:
            raise ValueError("Handle hypothesis must not be None")

    def set_fitness(self, value: float) -> None:
        self.fitness = float(value)
        self.has_fitness = True

    def invalidate(self) -> None:
        self.has_fitness = False
        self.probability = 0.0


__all__ = ["Handle"]
