"""Shared utilities: random source, errors and run observability."""

from .observability import assert_determinism_equivalence, determinism_signature, run_report
from .rng_manager import RNGManager
from .validation import (
    CollaboratorError,
    ConfigurationError,
    DegeneratePopulationError,
    GenalgError,
)

__all__ = [
    "CollaboratorError",
    "ConfigurationError",
    "DegeneratePopulationError",
    "GenalgError",
    "RNGManager",
    "assert_determinism_equivalence",
    "determinism_signature",
    "run_report",
]
