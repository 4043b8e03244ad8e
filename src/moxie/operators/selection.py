"""
moxie.operators.selection
=========================

Selection strategies for evolutionary algorithms. Each strategy picks a set of
*distinct* candidate indices from a fitness vector; the outer loop maps them
back to its own candidates.

Index-level functions (all return ``set[int]``):

    truncate(fitness, n)
    universal_sampling(population, n, rng)
    proportional_selection(fitness, n, rng)
    tournament_selection(fitness, n, k, p, rng)

Ties in fitness are always broken in favour of the lower index.

The strategy classes wrap those functions behind a common interface:

    select_indices(self, fitness, n) -> set[int]
    select(self, population, fitness, n) -> list

Where:
    - population: sequence of candidates of any type, parallel to fitness
    - fitness: one real value per candidate, higher is better
    - n: number of distinct candidates to select
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence, Sized
from typing import TypeVar

import numpy as np

from moxie.core.alias_table import AliasTable
from moxie.core.errors import DegenerateDistributionError, InvalidArgumentError
from moxie.core.fitness import as_fitness_array, geometric_rank_weights, normalize_fitness

T = TypeVar("T")

FitnessLike = Sequence[float] | np.ndarray

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Validation helpers
# ---------------------------------------------------------------------------


def _check_count(n: int, size: int) -> None:
    if n < 0:
        raise InvalidArgumentError("n must be >= 0")
    if n > size:
        raise InvalidArgumentError(f"n ({n}) cannot be larger than population size ({size})")


def _check_tournament(size: int, n: int, k: int, p: float) -> None:
    if not (0.0 <= p <= 1.0):
        raise InvalidArgumentError("p must be in [0, 1]")
    if k <= 0:
        raise InvalidArgumentError("tournament size k must be > 0")
    if k > size:
        raise InvalidArgumentError(f"tournament size k ({k}) cannot be larger than population size ({size})")
    _check_count(n, size)


# ---------------------------------------------------------------------------
# Index-level selection
# ---------------------------------------------------------------------------


def truncate(fitness: FitnessLike, n: int) -> set[int]:
    """Indices of the ``n`` fittest candidates (deterministic, elitist)."""
    arr = as_fitness_array(fitness)
    _check_count(n, arr.size)
    # lexsort sorts by the last key first: descending fitness, then ascending index.
    order = np.lexsort((np.arange(arr.size), -arr))
    return {int(i) for i in order[:n]}


def universal_sampling(population: Sized, n: int, rng: np.random.Generator) -> set[int]:
    """``n`` distinct indices drawn uniformly at random, ignoring fitness."""
    size = len(population)
    _check_count(n, size)
    return {int(i) for i in rng.choice(size, size=n, replace=False)}


def proportional_selection(fitness: FitnessLike, n: int, rng: np.random.Generator) -> set[int]:
    """``n`` distinct indices, each draw proportional to fitness (roulette wheel)."""
    arr = as_fitness_array(fitness)
    _check_count(n, arr.size)
    if np.any(arr < 0.0):
        raise DegenerateDistributionError("proportional selection requires non-negative fitness")
    table = AliasTable(normalize_fitness(arr))
    return table.sample_distinct(rng, n)


def tournament_selection(fitness: FitnessLike, n: int, k: int, p: float, rng: np.random.Generator) -> set[int]:
    """``n`` distinct tournament winners.

    Each tournament gathers ``k`` distinct, not yet selected candidates, ranks
    them by fitness and picks rank ``j`` with probability proportional to
    ``p * (1 - p) ** j``. Once fewer than ``k`` candidates remain unselected,
    the pool shrinks to all of them.
    """
    arr = as_fitness_array(fitness)
    size = arr.size
    _check_tournament(size, n, k, p)

    tables: dict[int, AliasTable] = {}
    selected: set[int] = set()
    while len(selected) < n:
        pool_size = min(k, size - len(selected))
        if pool_size not in tables:
            if pool_size < k:
                logger.debug("tournament pool capped at %d (k=%d)", pool_size, k)
            tables[pool_size] = AliasTable(geometric_rank_weights(pool_size, p))

        pool: set[int] = set()
        while len(pool) < pool_size:
            i = int(rng.integers(size))
            if i not in selected:
                pool.add(i)

        ranked = sorted(pool, key=lambda i: (-arr[i], i))
        selected.add(ranked[tables[pool_size].sample(rng)])
    return selected


def select_members(population: Sequence[T], indices: Iterable[int]) -> list[T]:
    """Members of ``population`` at ``indices``, in ascending index order."""
    return [population[i] for i in sorted(indices)]


# ---------------------------------------------------------------------------
# Strategy classes
# ---------------------------------------------------------------------------


class SelectionStrategy:
    """Base class for all selection strategies."""

    def __init__(self, rng: np.random.Generator | None = None) -> None:
        self.rng = rng if rng is not None else np.random.default_rng()

    def select_indices(self, fitness: FitnessLike, n: int) -> set[int]:  # pragma: no cover (interface)
        raise NotImplementedError("SelectionStrategy must implement select_indices().")

    def select(self, population: Sequence[T], fitness: FitnessLike, n: int) -> list[T]:
        self._validate(population, fitness)
        return select_members(population, self.select_indices(fitness, n))

    # Common input validation helper
    @staticmethod
    def _validate(population: Sequence[T], fitness: FitnessLike) -> None:
        if len(population) != len(fitness):
            raise InvalidArgumentError(
                f"population ({len(population)}) and fitness ({len(fitness)}) must have the same length"
            )


class TruncationSelection(SelectionStrategy):
    """
    Truncation Selection.
    Keeps the ``n`` fittest candidates; never consumes randomness.
    """

    def select_indices(self, fitness: FitnessLike, n: int) -> set[int]:
        return truncate(fitness, n)


class UniformSelection(SelectionStrategy):
    """
    Uniform Selection.
    Pure random survival, no dependence on fitness.
    """

    def select_indices(self, fitness: FitnessLike, n: int) -> set[int]:
        return universal_sampling(fitness, n, self.rng)


class ProportionalSelection(SelectionStrategy):
    """
    Fitness-Proportionate (Roulette Wheel) Selection.
    Each draw picks a candidate with probability proportional to its fitness.
    """

    def select_indices(self, fitness: FitnessLike, n: int) -> set[int]:
        return proportional_selection(fitness, n, self.rng)


class TournamentSelection(SelectionStrategy):
    """
    Tournament Selection.
    Runs tournaments of ``k`` candidates; the fittest wins with probability
    ``p``, the runner-up with ``p * (1 - p)`` and so on (renormalised).
    """

    def __init__(self, k: int = 3, p: float = 0.8, rng: np.random.Generator | None = None) -> None:
        super().__init__(rng)
        if k <= 0:
            raise InvalidArgumentError("k must be > 0")
        if not (0.0 <= p <= 1.0):
            raise InvalidArgumentError("p must be in [0, 1]")
        self.k = k
        self.p = p

    def select_indices(self, fitness: FitnessLike, n: int) -> set[int]:
        return tournament_selection(fitness, n, self.k, self.p, self.rng)
