import random
import threading
from concurrent.futures import ThreadPoolExecutor

import pytest

from genalg.utils.rng_manager import RNGManager


class ListDefinition:
    """List-of-ints collaborator that records every callback it receives.

    Fitness is the number of positions holding their own index, so the
    optimum is ``list(range(length))``.
    """

    def __init__(self, length=4, stop_after=5, children=2):
        self.length = length
        self.stop_after = stop_after
        self.children = children
        self.initialized_with = []
        self.evaluated = []
        self.crossover_calls = 0
        self.mutation_calls = 0
        self.loop_calls = 0
        self.loop_inputs = []
        self._lock = threading.Lock()
        self.rng = None

    def initialize(self, rng):
        self.initialized_with.append(rng)
        self.rng = rng

    def new_random_hypothesis(self):
        return [self.rng.randrange(self.length) for _ in range(self.length)]

    def mutate_hypothesis(self, hypothesis):
        with self._lock:
            self.mutation_calls += 1
        hypothesis[0] = hypothesis[0] + 1
        return None

    def cross_over_hypothesis(self, first, second):
        with self._lock:
            self.crossover_calls += 1
        return [list(first) for _ in range(self.children)]

    def calculate_fitness(self, hypothesis):
        with self._lock:
            self.evaluated.append(hypothesis)
        return float(sum(1 for i, v in enumerate(hypothesis) if v == i))

    def loop(self, hypothesis):
        self.loop_calls += 1
        self.loop_inputs.append(hypothesis)
        return self.loop_calls < self.stop_after


class ConstantFitnessDefinition(ListDefinition):
    def calculate_fitness(self, hypothesis):
        with self._lock:
            self.evaluated.append(hypothesis)
        return 1.0


class FailingDefinition(ListDefinition):
    """Raises from ``fail_in`` after ``fail_after`` successful calls."""

    def __init__(self, fail_in="calculate_fitness", fail_after=0, **kwargs):
        super().__init__(**kwargs)
        self.fail_in = fail_in
        self.fail_after = fail_after
        self.calls = 0

    def _maybe_fail(self):
        with self._lock:
            self.calls += 1
            calls = self.calls
        if calls > self.fail_after:
            raise KeyError("boom")

    def calculate_fitness(self, hypothesis):
        if self.fail_in == "calculate_fitness":
            self._maybe_fail()
        return super().calculate_fitness(hypothesis)

    def cross_over_hypothesis(self, first, second):
        if self.fail_in == "cross_over_hypothesis":
            self._maybe_fail()
        return super().cross_over_hypothesis(first, second)

    def mutate_hypothesis(self, hypothesis):
        if self.fail_in == "mutate_hypothesis":
            self._maybe_fail()
        return super().mutate_hypothesis(hypothesis)

    def loop(self, hypothesis):
        if self.fail_in == "loop":
            self._maybe_fail()
        return super().loop(hypothesis)


class ScriptedRNG(RNGManager):
    """RNGManager replaying queued roulette points and indices."""

    def __init__(self, points=(), indices=()):
        super().__init__(seed=0)
        self.points = list(points)
        self.indices = list(indices)

    def uniform_point(self, upper):
        return self.points.pop(0)

    def randrange(self, stop):
        return self.indices.pop(0)


@pytest.fixture
def definition():
    d = ListDefinition()
    d.initialize(random.Random(7))
    return d


@pytest.fixture
def pool():
    executor = ThreadPoolExecutor(max_workers=4)
    yield executor
    executor.shutdown(wait=True)
