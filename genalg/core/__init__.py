"""Core data model for genalg."""

from .definition import AlgorithmDefinition
from .handle import Handle

__all__ = [
    "AlgorithmDefinition",
    "Handle",
]
