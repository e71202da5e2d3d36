"""Run reports and determinism signatures.

``run_report`` summarises a finished run as JSON-serialisable data;
``determinism_signature`` hashes a canonical form of it so two serial
runs can be compared for bit-identical behaviour.
"""

from __future__ import annotations

import hashlib
import json
from typing import Any, Dict, List

from genalg.utils.validation import GenalgError

REPORT_SCHEMA_VERSION = 1


def _canonicalize(obj: Any, float_precision: int = 12) -> Any:
    """JSON-safe form in which equal reports serialise identically: sorted keys, fixed-precision floats."""
    if obj is None or isinstance(obj, (str, bool, int)):
        return obj
    if isinstance(obj, float):
        return f"{obj:.{float_precision}f}"
    if isinstance(obj, (list, tuple)):
        return [_canonicalize(x, float_precision) for x in obj]
    if isinstance(obj, dict):
        return {str(k): _canonicalize(obj[k], float_precision) for k in sorted(obj.keys(), key=str)}
    return str(obj)


def run_report(algorithm: Any, *, include_history: bool = True) -> Dict[str, Any]:
    """Summarise the state of a GeneticAlgorithm after ``find_maximum``."""
    best = algorithm.best
    report: Dict[str, Any] = {
        "schema_version": REPORT_SCHEMA_VERSION,
        "config": algorithm.config.to_dict(),
        "engine": type(algorithm.engine).__name__,
        "seed": algorithm.rng_manager.seed,
        "state": algorithm.state.value,
        "generations": algorithm.generation_number,
        "best": None if best is None else {
            "fitness": best.fitness,
            "hypothesis": repr(best.hypothesis),
        },
        "metrics": algorithm.engine.metrics.as_dict(),
    }
    if include_history:
        report["history"] = algorithm.history.to_rows()
    return report


def determinism_signature(report: Dict[str, Any], *, float_precision: int = 12) -> str:
    payload = json.dumps(_canonicalize(report, float_precision), sort_keys=True, separators=(",", ":"))
    return hashlib.sha256(payload.encode("utf-8")).hexdigest()


def assert_determinism_equivalence(reports: List[Dict[str, Any]]) -> str:
    """Raise GenalgError unless all reports share one signature; return it."""
    if not reports:
        raise GenalgError("no_reports", "Need at least one report to compare")
    signatures = [determinism_signature(r) for r in reports]
    if len(set(signatures)) != 1:
        raise GenalgError(
            "determinism_drift",
            "Run reports differ under identical conditions",
            signatures=tuple(signatures),
        )
    return signatures[0]


__all__ = [
    "REPORT_SCHEMA_VERSION",
    "assert_determinism_equivalence",
    "determinism_signature",
    "run_report",
]
