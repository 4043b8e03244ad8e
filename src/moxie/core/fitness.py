"""Fitness transforms.

Pure helpers turning raw objective values into selection weights:

    objective_value_fitness(values) -> np.ndarray
        Minimisation objective -> relative fitness (higher is better).

    normalize_fitness(fitness) -> np.ndarray
        Fitness -> probabilities summing to 1.

    geometric_rank_weights(k, p) -> np.ndarray
        Win probabilities for the ranked slots of a tournament.

Inputs are never mutated; every helper returns a fresh float array.
"""

from __future__ import annotations

from collections.abc import Sequence

import numpy as np

from .errors import DegenerateDistributionError, EmptyInputError, InvalidArgumentError

__all__ = [
    "as_fitness_array",
    "geometric_rank_weights",
    "normalize_fitness",
    "objective_value_fitness",
]


def as_fitness_array(values: Sequence[float] | np.ndarray, name: str = "fitness") -> np.ndarray:
    """Return ``values`` as a 1-D float array, rejecting empty input."""
    arr = np.asarray(values, dtype=float)
    if arr.ndim != 1:
        raise InvalidArgumentError(f"{name} must be one-dimensional, got shape {arr.shape}")
    if arr.size == 0:
        raise EmptyInputError(f"{name} must not be empty")
    return arr


def objective_value_fitness(values: Sequence[float] | np.ndarray) -> np.ndarray:
    """Convert objective values (lower is better) to fitness (higher is better).

    Fitness is the distance to the worst (largest) objective value, so every
    entry is non-negative and the worst candidate maps to 0.
    """
    arr = as_fitness_array(values, name="values")
    return arr.max() - arr


def normalize_fitness(fitness: Sequence[float] | np.ndarray) -> np.ndarray:
    """Scale ``fitness`` so that it sums to 1.

    Raises
    ------
    EmptyInputError
        If ``fitness`` is empty.
    DegenerateDistributionError
        If the sum is not finite or not strictly positive.
    """
    arr = as_fitness_array(fitness)
    total = float(np.sum(arr))
    if not np.isfinite(total) or total <= 0.0:
        raise DegenerateDistributionError(f"fitness must sum to a positive finite value, got {total}")
    return arr / total


def geometric_rank_weights(k: int, p: float) -> np.ndarray:
    """Normalised tournament win weights for ranks ``0..k-1``.

    Rank ``j`` gets ``p * (1 - p) ** j`` before normalisation. With ``p == 0``
    every raw term vanishes and the normalised limit (uniform) is returned.
    """
    if k <= 0:
        raise InvalidArgumentError("k must be > 0")
    if not (0.0 <= p <= 1.0):
        raise InvalidArgumentError("p must be in [0, 1]")
    if p == 0.0:
        return np.full(k, 1.0 / k)
    raw = p * (1.0 - p) ** np.arange(k, dtype=float)
    return raw / raw.sum()
