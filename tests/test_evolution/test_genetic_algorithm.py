import random
import threading

import pytest

from conftest import ConstantFitnessDefinition, FailingDefinition, ListDefinition
from genalg.engine.executor import ExecutorComputeEngine
from genalg.engine.simple import SimpleComputeEngine
from genalg.evolution.genetic_algorithm import AlgorithmState, GeneticAlgorithm
from genalg.utils.rng_manager import RNGManager
from genalg.utils.validation import CollaboratorError, ConfigurationError


class _LockHoldingDefinition(ListDefinition):
    """Hypotheses are (values, lock) pairs that copy.deepcopy refuses."""

    def new_random_hypothesis(self):
        return (super().new_random_hypothesis(), threading.Lock())

    def mutate_hypothesis(self, hypothesis):
        hypothesis[0][0] += 1

    def cross_over_hypothesis(self, first, second):
        return [(list(first[0]), threading.Lock()), (list(second[0]), threading.Lock())]

    def calculate_fitness(self, hypothesis):
        return super().calculate_fitness(hypothesis[0])


class _RecordingEngine(SimpleComputeEngine):
    """Serial engine remembering every population size it evaluates."""

    def __init__(self, rng_manager, definition):
        super().__init__(rng_manager, definition)
        self.sizes = []

    def update_fitness(self, population):
        self.sizes.append(len(population))
        return super().update_fitness(population)


@pytest.mark.parametrize(
    "cr,mr,size,code",
    [
        (-0.1, 0.05, 10, "invalid_cross_over_rate"),
        (1.5, 0.05, 10, "invalid_cross_over_rate"),
        (0.3, -0.01, 10, "invalid_mutation_rate"),
        (0.3, 1.01, 10, "invalid_mutation_rate"),
        (0.3, 0.05, 1, "invalid_generation_size"),
        (0.3, 0.05, 0, "invalid_generation_size"),
        (float("nan"), 0.05, 10, "invalid_cross_over_rate"),
    ],
)
def test_out_of_range_parameters_are_rejected(cr, mr, size, code):
    d = ListDefinition()
    with pytest.raises(ConfigurationError) as ei:
        GeneticAlgorithm(cr, mr, size, d)
    assert ei.value.code == code
    assert d.initialized_with == []


@pytest.mark.parametrize("cr,mr,size", [(0.0, 0.0, 2), (1.0, 1.0, 2), (0.3, 0.05, 100)])
def test_boundary_parameters_are_accepted(cr, mr, size):
    algorithm = GeneticAlgorithm(cr, mr, size, ListDefinition(), rng=1)
    assert (algorithm.cross_over_rate, algorithm.mutation_rate, algorithm.generation_size) == (cr, mr, size)
    assert algorithm.state is AlgorithmState.INIT


def test_missing_definition_operations_are_rejected():
    with pytest.raises(ConfigurationError) as ei:
        GeneticAlgorithm(0.3, 0.05, 10, object())
    assert ei.value.code == "invalid_definition"
    with pytest.raises(ConfigurationError) as ei:
        GeneticAlgorithm(0.3, 0.05, 10, None)
    assert ei.value.code == "missing_definition"


def test_executor_and_engine_are_mutually_exclusive(pool):
    d = ListDefinition()
    engine = SimpleComputeEngine(RNGManager(seed=1), d)
    with pytest.raises(ConfigurationError) as ei:
        GeneticAlgorithm(0.3, 0.05, 10, d, executor=pool, compute_engine=engine)
    assert ei.value.code == "conflicting_engines"


def test_initialize_receives_the_injected_generator():
    rng = random.Random(3)
    d = ListDefinition()
    GeneticAlgorithm(0.3, 0.05, 10, d, rng=rng)
    assert d.initialized_with == [rng]


def test_initialize_failure_is_wrapped():
    d = ListDefinition()

    def _broken(rng):
        raise OSError("no data")

    d.initialize = _broken
    with pytest.raises(CollaboratorError) as ei:
        GeneticAlgorithm(0.3, 0.05, 10, d)
    assert ei.value.phase == "initialize"


def test_engine_choice_follows_executor(pool):
    serial = GeneticAlgorithm(0.3, 0.05, 10, ListDefinition(), rng=1)
    parallel = GeneticAlgorithm(0.3, 0.05, 10, ListDefinition(), rng=1, executor=pool)
    assert isinstance(serial.engine, SimpleComputeEngine)
    assert isinstance(parallel.engine, ExecutorComputeEngine)
    assert parallel.engine.executor is pool


def test_run_stops_when_predicate_answers_false():
    d = ListDefinition(stop_after=5)
    algorithm = GeneticAlgorithm(0.3, 0.05, 10, d, rng=2)
    best = algorithm.find_maximum()
    assert d.loop_calls == 5
    assert algorithm.generation_number == 5
    assert algorithm.state is AlgorithmState.TERMINAL
    assert best is algorithm.best
    assert len(algorithm.history) == 5
    assert d.loop_inputs[-1] is best.hypothesis


def test_loop_override_replaces_definition_predicate():
    d = ListDefinition(stop_after=100)
    algorithm = GeneticAlgorithm(0.3, 0.05, 10, d, rng=2)
    seen = []

    def _three_generations(hypothesis):
        seen.append(hypothesis)
        return len(seen) < 3

    algorithm.find_maximum(loop=_three_generations)
    assert len(seen) == 3
    assert d.loop_calls == 0
    assert algorithm.generation_number == 3


def test_population_size_is_constant_across_generations():
    d = ListDefinition(stop_after=6)
    rng = RNGManager(seed=4)
    engine = _RecordingEngine(rng, d)
    algorithm = GeneticAlgorithm(0.33, 0.3, 10, d, compute_engine=engine)
    algorithm.find_maximum()
    assert engine.sizes == [10] * 6
    assert algorithm.rng_manager is rng


def test_best_never_decreases():
    d = ListDefinition(length=6, stop_after=20)
    algorithm = GeneticAlgorithm(0.3, 0.2, 20, d, rng=9)
    algorithm.find_maximum()
    curve = list(algorithm.history.best_fitness_curve())
    assert curve == sorted(curve)
    assert curve[-1] == algorithm.best.fitness
    for record in algorithm.history.records:
        assert record.all_time_best_fitness >= record.best_fitness


def test_equal_fitness_keeps_earlier_best():
    d = ConstantFitnessDefinition(stop_after=4)
    algorithm = GeneticAlgorithm(0.5, 0.5, 6, d, rng=1)
    algorithm.find_maximum()
    first = d.loop_inputs[0]
    assert all(h is first for h in d.loop_inputs)
    assert algorithm.best.hypothesis is first


def test_each_hypothesis_evaluated_at_most_once():
    d = ListDefinition(stop_after=8)
    algorithm = GeneticAlgorithm(0.3, 0.3, 20, d, rng=6)
    algorithm.find_maximum()
    # evaluated keeps every hypothesis alive, so ids cannot be reused
    assert len({id(h) for h in d.evaluated}) == len(d.evaluated)
    assert algorithm.engine.metrics.fitness_evaluations == len(d.evaluated)
    assert algorithm.history.total_evaluations() == len(d.evaluated)


@pytest.mark.parametrize("phase", ["calculate_fitness", "cross_over_hypothesis", "mutate_hypothesis", "loop"])
def test_failed_run_is_rolled_back(phase):
    d = FailingDefinition(fail_in=phase, fail_after=15, stop_after=50)
    rng = random.Random(12)
    algorithm = GeneticAlgorithm(0.5, 0.5, 10, d, rng=rng)
    state_before = rng.getstate()
    with pytest.raises(CollaboratorError) as ei:
        algorithm.find_maximum()
    assert ei.value.phase == phase
    assert isinstance(ei.value.__cause__, KeyError)
    assert algorithm.best is None
    assert algorithm.generation_number == 0
    assert len(algorithm.history) == 0
    assert algorithm.state is AlgorithmState.INIT
    assert rng.getstate() == state_before


def test_rerun_restarts_from_scratch():
    d = ListDefinition(stop_after=3)
    algorithm = GeneticAlgorithm(0.3, 0.05, 10, d, rng=2)
    algorithm.find_maximum()
    d.loop_calls = 0
    algorithm.find_maximum()
    assert algorithm.generation_number == 3
    assert len(algorithm.history) == 3


def test_manual_generation_step_keeps_size():
    d = ListDefinition(children=2)
    algorithm = GeneticAlgorithm(0.3, 0.1, 10, d, rng=3)
    generation = [[0, 0, 0, 0], [0, 1, 2, 3], [3, 2, 1, 0]]
    following = algorithm.calculate_next_generation(generation)
    assert len(following) == 10
    assert len(d.evaluated) == 3
    assert generation == [[0, 0, 0, 0], [0, 1, 2, 3], [3, 2, 1, 0]]


def test_manual_generation_step_validates_input():
    algorithm = GeneticAlgorithm(0.3, 0.1, 10, ListDefinition(), rng=3)
    with pytest.raises(ConfigurationError) as ei:
        algorithm.calculate_next_generation([])
    assert ei.value.code == "empty_population"
    with pytest.raises(ConfigurationError) as ei:
        algorithm.calculate_next_generation([[0], None])
    assert ei.value.code == "null_hypothesis"


def test_uncopyable_hypotheses_fail_the_run_cleanly():
    d = _LockHoldingDefinition(stop_after=20)
    algorithm = GeneticAlgorithm(0.3, 0.5, 10, d, rng=1)
    with pytest.raises(CollaboratorError) as ei:
        algorithm.find_maximum()
    assert ei.value.code == "uncopyable_hypothesis"
    assert algorithm.best is None
    assert algorithm.generation_number == 0


def test_engine_and_foreign_random_source_conflict():
    d = ListDefinition()
    engine = SimpleComputeEngine(RNGManager(seed=5), d)
    with pytest.raises(ConfigurationError) as ei:
        GeneticAlgorithm(0.3, 0.05, 10, d, rng=7, compute_engine=engine)
    assert ei.value.code == "conflicting_random_source"


def test_engine_random_source_is_shared():
    d = ListDefinition()
    manager = RNGManager(seed=5)
    engine = SimpleComputeEngine(manager, d)
    algorithm = GeneticAlgorithm(0.3, 0.05, 10, d, rng=manager, compute_engine=engine)
    assert algorithm.rng_manager is algorithm.engine.rng_manager is manager
    assert d.initialized_with == [manager.rng]
