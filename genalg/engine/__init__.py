"""Compute engines executing population operations serially or on a worker pool."""

from .compute_engine import (
    CROSSOVER_ATTEMPT_FACTOR,
    ComputeEngine,
    EngineMetrics,
    roulette_select,
    split_counts,
)
from .executor import ExecutorComputeEngine
from .simple import SimpleComputeEngine

__all__ = [
    "CROSSOVER_ATTEMPT_FACTOR",
    "ComputeEngine",
    "EngineMetrics",
    "ExecutorComputeEngine",
    "SimpleComputeEngine",
    "roulette_select",
    "split_counts",
]
