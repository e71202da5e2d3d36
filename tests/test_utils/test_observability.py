import json

import pytest

from conftest import ListDefinition
from genalg.evolution.builder import GeneticAlgorithmBuilder
from genalg.utils.observability import (
    REPORT_SCHEMA_VERSION,
    assert_determinism_equivalence,
    determinism_signature,
    run_report,
)
from genalg.utils.validation import GenalgError


def _finished_run(seed, generations=6):
    algorithm = (GeneticAlgorithmBuilder(ListDefinition(length=5, stop_after=generations))
                 .with_generation_size(16)
                 .with_mutation_rate(0.2)
                 .with_seed(seed)
                 .build())
    algorithm.find_maximum()
    return algorithm


def test_run_report_contents_are_json_serialisable():
    algorithm = _finished_run(1)
    report = run_report(algorithm)
    assert report["schema_version"] == REPORT_SCHEMA_VERSION
    assert report["engine"] == "SimpleComputeEngine"
    assert report["seed"] == 1
    assert report["state"] == "terminal"
    assert report["generations"] == 6
    assert report["best"]["fitness"] == algorithm.best.fitness
    assert report["metrics"]["fitness_evaluations"] > 0
    assert len(report["history"]) == 6
    json.dumps(report)


def test_run_report_without_history():
    assert "history" not in run_report(_finished_run(1), include_history=False)


def test_equal_seeds_give_equal_signatures():
    reports = [run_report(_finished_run(42)) for _ in range(3)]
    signature = assert_determinism_equivalence(reports)
    assert signature == determinism_signature(reports[0])
    assert len(signature) == 64


def test_signature_ignores_key_order_but_not_values():
    a = {"x": 1.0, "y": [1, 2]}
    b = {"y": [1, 2], "x": 1.0}
    assert determinism_signature(a) == determinism_signature(b)
    assert determinism_signature(a) != determinism_signature({"x": 1.5, "y": [1, 2]})


def test_drift_is_reported():
    with pytest.raises(GenalgError) as ei:
        assert_determinism_equivalence([{"a": 1}, {"a": 2}])
    assert ei.value.code == "determinism_drift"
    with pytest.raises(GenalgError) as ei:
        assert_determinism_equivalence([])
    assert ei.value.code == "no_reports"
