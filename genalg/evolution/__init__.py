"""Evolutionary orchestration for genalg."""

from .builder import GeneticAlgorithmBuilder, build_algorithm
from .genetic_algorithm import AlgorithmState, GeneticAlgorithm
from .history import GenerationHistory, GenerationRecord

__all__ = [
    "AlgorithmState",
    "GeneticAlgorithm",
    "GeneticAlgorithmBuilder",
    "GenerationHistory",
    "GenerationRecord",
    "build_algorithm",
]
