"""Error types raised by the evolutionary engine.

Every error carries a short machine-readable ``code`` plus free-form
``context`` so callers and tests can branch on the failure kind without
parsing messages.
"""

from __future__ import annotations

from typing import Any


class GenalgError(Exception):
    """Base error for genalg failures."""

    def __init__(self, code: str, message: str, **context: Any) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.context = dict(context)

    def __str__(self) -> str:
        if not self.context:
            return f"[{self.code}] {self.message}"
        details = ", ".join(f"{k}={v!r}" for k, v in sorted(self.context.items()))
        return f"[{self.code}] {self.message} ({details})"


class ConfigurationError(GenalgError, ValueError):
    """Invalid parameters or collaborator supplied at build time."""


class CollaboratorError(GenalgError, RuntimeError):
    """A collaborator callback failed or broke its contract.

    The original exception, if any, is available as ``__cause__``.
    """

    @property
    def phase(self) -> str | None:
        return self.context.get("phase")


class DegeneratePopulationError(CollaboratorError):
    """Recombination could not produce the requested offspring within its attempt budget."""


def ensure_rate(name: str, value: Any) -> float:
    """Return ``value`` as a float in ``[0, 1]`` or raise ConfigurationError."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigurationError(
            f"invalid_{name}",
            f"{name.replace('_', ' ').capitalize()} must be a number between 0 and 1",
            value=value,
        )
    rate = float(value)
    # NaN fails both comparisons
    if not 0.0 <= rate <= 1.0:
        raise ConfigurationError(
            f"invalid_{name}",
            f"{name.replace('_', ' ').capitalize()} not between 0 and 1: {value}",
            value=value,
        )
    return rate


def ensure_generation_size(value: Any) -> int:
    """Return ``value`` as an int >= 2 or raise ConfigurationError."""
    if isinstance(value, bool) or not isinstance(value, int):
        raise ConfigurationError(
            "invalid_generation_size",
            "Generation size must be an integer",
            value=value,
        )
    if value < 2:
        raise ConfigurationError(
            "invalid_generation_size",
            f"Generation size is < 2: {value}",
            value=value,
        )
    return int(value)


__all__ = [
    "GenalgError",
    "ConfigurationError",
    "CollaboratorError",
    "DegeneratePopulationError",
    "ensure_rate",
    "ensure_generation_size",
]
