"""Integer-array guessing: evolve ``[0, 1, ..., n-1]`` from random arrays.

Hypotheses are lists of ``length`` integers drawn from ``[0, length)``.
A hypothesis scores one point for every position holding its own index.
"""

from __future__ import annotations

import math
import random
from typing import Callable, List, Optional

Genome = List[int]


class IntGuessingDefinition:
    """Collaborator for the integer-array guessing problem.

    Args:
        length: Genome length and value range.
        max_generations: Optional hard stop for the continuation predicate.
        on_generation: Listener called with the best genome after every
            generation, e.g. for rendering progress.
    """

    def __init__(
        self,
        length: int,
        *,
        max_generations: Optional[int] = None,
        on_generation: Optional[Callable[[Genome], None]] = None,
    ) -> None:
        if length < 1:
            raise ValueError(f"Genome length must be positive: {length}")
        self.length = length
        self.max_generations = max_generations
        self.on_generation = on_generation
        self.generations = 0
        self._random: random.Random | None = None

    @property
    def target(self) -> Genome:
        return list(range(self.length))

    def initialize(self, rng: random.Random) -> None:
        self._random = rng

    @property
    def random(self) -> random.Random:
        if self._random is None:
            raise RuntimeError("initialize() has not been called")
        return self._random

    def new_random_hypothesis(self) -> Genome:
        return [self.random.randrange(self.length) for _ in range(self.length)]

    def mutate_hypothesis(self, hypothesis: Genome) -> Genome:
        mutated = list(hypothesis)
        point = self.random.randrange(len(mutated))
        mutated[point] = self.random.randrange(self.length)
        return mutated

    def cross_over_hypothesis(self, first: Genome, second: Genome) -> list[Genome]:
        point = self.random.randrange(len(first))
        offspring_one = [first[i] if i < point else second[i] for i in range(len(first))]
        offspring_two = [second[i] if i < point else first[i] for i in range(len(first))]
        return [offspring_one, offspring_two]

    def calculate_fitness(self, hypothesis: Genome) -> float:
        return float(sum(1 for i, value in enumerate(hypothesis) if value == i))

    def loop(self, hypothesis: Genome) -> bool:
        self.generations += 1
        if self.on_generation is not None:
            self.on_generation(hypothesis)
        if self.max_generations is not None and self.generations >= self.max_generations:
            return False
        return hypothesis != self.target


class WeightedIntGuessingDefinition(IntGuessingDefinition):
    """Scores near misses: +1 per hit, minus the distance per miss, exponentiated."""

    def calculate_fitness(self, hypothesis: Genome) -> float:
        score = 0.0
        for i, value in enumerate(hypothesis):
            if value == i:
                score += 1.0
            else:
                score -= abs(value - i)
        return math.exp(score)


__all__ = ["Genome", "IntGuessingDefinition", "WeightedIntGuessingDefinition"]
