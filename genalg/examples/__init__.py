"""Ready-made collaborators used by the demos and tutorials."""

from .int_guessing import IntGuessingDefinition, WeightedIntGuessingDefinition

__all__ = [
    "IntGuessingDefinition",
    "WeightedIntGuessingDefinition",
]
