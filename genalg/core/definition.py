"""Capability protocol implemented by problem-specific code."""

from __future__ import annotations

import random
from typing import Protocol, Sequence, TypeVar, runtime_checkable

H = TypeVar("H")


@runtime_checkable
class AlgorithmDefinition(Protocol[H]):
    """Operations the engine invokes on hypotheses it never inspects.

    Any object providing these methods can drive a GeneticAlgorithm; there
    is no base class to inherit from.
    """

    def initialize(self, rng: random.Random) -> None:
        """Called once before the first generation with the shared random source."""

    def new_random_hypothesis(self) -> H:
        """Create one random hypothesis for the initial population."""

    def mutate_hypothesis(self, hypothesis: H) -> H | None:
        """Apply one atomic random change.

        The engine passes a private copy, so implementations may either
        modify it in place (returning it or None) or return a new value.
        The copy comes from an optional ``copy_hypothesis(h)`` method on the
        definition; without one, hypotheses must support ``copy.deepcopy``.
        """

    def cross_over_hypothesis(self, first: H, second: H) -> Sequence[H]:
        """Recombine two parents into at least one offspring, usually two.

        The parents must stay unmodified.
        """

    def calculate_fitness(self, hypothesis: H) -> float:
        """Score a hypothesis; finite and non-negative, bigger is better."""

    def loop(self, hypothesis: H) -> bool:
        """Return True to continue searching after seeing the best-so-far."""


__all__ = ["AlgorithmDefinition"]
