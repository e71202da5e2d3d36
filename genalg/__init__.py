"""
genalg - Generic Genetic Algorithm Engine

Evolves a population of opaque hypotheses toward higher fitness by
roulette-wheel selection, recombination and mutation, serially or on a
worker pool, until a caller-supplied predicate says stop.
"""

__version__ = "0.1.0"

from .config import (  # noqa: F401
    CROSS_OVER_RATE_DEFAULT,
    GENERATION_SIZE_DEFAULT,
    MUTATION_RATE_DEFAULT,
    PRESET_MINIMAL,
    PRESET_RESEARCH,
    PRESET_STANDARD,
    EvolutionConfig,
)
from .core import *  # noqa: F401,F403
from .engine import *  # noqa: F401,F403
from .evolution import *  # noqa: F401,F403
from .utils import *  # noqa: F401,F403
