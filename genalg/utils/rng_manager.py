"""Injected source of randomness shared by the engine and its collaborators.

A single ``random.Random`` instance is threaded from the builder through the
orchestrator into the compute engine; nothing in genalg touches the module
level ``random`` functions. Engine-side draws go through a lock so the
worker-pool engine can draw from tasks running on several threads.
"""

from __future__ import annotations

import random
import threading
from typing import Any

from genalg.utils.validation import ConfigurationError


class RNGManager:
    """Owns the pseudorandom generator and serializes engine draws on it."""

    def __init__(self, seed: int | None = None, rng: random.Random | None = None) -> None:
        if rng is not None and seed is not None:
            raise ConfigurationError(
                "ambiguous_random_source",
                "Pass either a seed or a random generator, not both",
                seed=seed,
            )
        if rng is not None and not isinstance(rng, random.Random):
            raise ConfigurationError(
                "invalid_random_source",
                "Random source must be a random.Random instance",
                type=type(rng).__name__,
            )
        self.seed = seed
        self._rng = rng if rng is not None else random.Random(seed)
        self._lock = threading.Lock()

    @classmethod
    def from_source(cls, source: Any = None) -> "RNGManager":
        """Coerce ``None``, an int seed, a ``random.Random`` or a manager."""
        if isinstance(source, RNGManager):
            return source
        if source is None:
            return cls()
        if isinstance(source, random.Random):
            return cls(rng=source)
        if isinstance(source, int) and not isinstance(source, bool):
            return cls(seed=source)
        raise ConfigurationError(
            "invalid_random_source",
            "Random source must be None, an int seed, a random.Random or an RNGManager",
            type=type(source).__name__,
        )

    @property
    def rng(self) -> random.Random:
        """The underlying generator, handed to collaborators on initialize()."""
        return self._rng

    def random(self) -> float:
        with self._lock:
            return self._rng.random()

    def randrange(self, stop: int) -> int:
        with self._lock:
            return self._rng.randrange(stop)

    def uniform_point(self, upper: float) -> float:
        """Draw a point uniformly from ``[0, upper)``."""
        with self._lock:
            return self._rng.random() * upper

    def get_state(self) -> Any:
        with self._lock:
            return self._rng.getstate()

    def set_state(self, state: Any) -> None:
        with self._lock:
            self._rng.setstate(state)


__all__ = ["RNGManager"]
