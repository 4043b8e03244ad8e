"""Alias table for constant-time sampling from a discrete distribution.

Implements Vose's variant of the alias method: O(n) construction, O(1) per
draw. Every bin ``i`` holds a ``threshold`` and an ``alias``; a draw picks a
bin uniformly and keeps it with probability ``threshold[i]``, otherwise it
returns ``alias[i]``.

See https://en.wikipedia.org/wiki/Alias_method
"""

from __future__ import annotations

import logging
from collections.abc import Sequence

import numpy as np

from .errors import DegenerateDistributionError, InvalidArgumentError
from .fitness import as_fitness_array, normalize_fitness

__all__ = ["AliasTable"]

logger = logging.getLogger(__name__)

# Accepted deviation of the probability sum from 1.
SUM_TOLERANCE = 1e-6


class AliasTable:
    """Immutable alias table built from a probability vector.

    Parameters
    ----------
    probabilities : Sequence[float] | np.ndarray
        Non-negative entries summing to 1. Use :meth:`from_weights` for
        unnormalised input.

    Raises
    ------
    EmptyInputError
        If ``probabilities`` is empty.
    DegenerateDistributionError
        If an entry is negative or not finite, or the entries do not sum to 1.
    """

    __slots__ = ("_alias", "_support", "_threshold")

    def __init__(self, probabilities: Sequence[float] | np.ndarray) -> None:
        probs = as_fitness_array(probabilities, name="probabilities")
        if not np.all(np.isfinite(probs)):
            raise DegenerateDistributionError("probabilities must be finite")
        if np.any(probs < 0.0):
            raise DegenerateDistributionError("probabilities must be non-negative")
        total = float(probs.sum())
        if abs(total - 1.0) > SUM_TOLERANCE:
            raise DegenerateDistributionError(f"probabilities must sum to 1, got {total}")

        n = probs.size
        scaled = probs * n
        threshold = np.ones(n, dtype=float)
        alias = np.arange(n, dtype=np.intp)

        small = [i for i in range(n) if scaled[i] < 1.0]
        large = [i for i in range(n) if scaled[i] >= 1.0]

        while small and large:
            s = small.pop()
            l = large.pop()  # noqa: E741
            alias[s] = l
            threshold[s] = scaled[s]
            scaled[l] -= 1.0 - scaled[s]
            if scaled[l] < 1.0:
                small.append(l)
            else:
                large.append(l)

        # Whatever remains is only off 1.0 by rounding; keep those bins outright.
        leftovers = small + large
        if small:
            logger.debug("alias table: %d bin(s) left on the small stack after pairing", len(small))
        for i in leftovers:
            threshold[i] = 1.0
            alias[i] = i

        threshold.setflags(write=False)
        alias.setflags(write=False)
        self._threshold = threshold
        self._alias = alias
        self._support = int(np.count_nonzero(probs > 0.0))

    @classmethod
    def from_weights(cls, weights: Sequence[float] | np.ndarray) -> AliasTable:
        """Build a table from non-negative weights of any positive total."""
        arr = as_fitness_array(weights, name="weights")
        if np.any(arr < 0.0):
            raise DegenerateDistributionError("weights must be non-negative")
        return cls(normalize_fitness(arr))

    # ------------------------------------------------------------------
    # Introspection
    # ------------------------------------------------------------------
    def __len__(self) -> int:
        return int(self._alias.size)

    def __repr__(self) -> str:
        return f"AliasTable(n={len(self)}, support={self._support})"

    @property
    def threshold(self) -> np.ndarray:
        return self._threshold

    @property
    def alias(self) -> np.ndarray:
        return self._alias

    @property
    def support(self) -> int:
        """Number of indices with non-zero probability."""
        return self._support

    def probabilities(self) -> np.ndarray:
        """Reconstruct the distribution encoded by the table."""
        n = len(self)
        redirected = 1.0 - self._threshold
        mass = self._threshold.copy()
        # A bin aliased to itself has threshold 1.0, so it redirects no mass.
        np.add.at(mass, self._alias, redirected)
        return mass / n

    # ------------------------------------------------------------------
    # Sampling
    # ------------------------------------------------------------------
    def sample(self, rng: np.random.Generator) -> int:
        """Draw one index. Consumes one integer and one float from ``rng``."""
        i = int(rng.integers(len(self)))
        if rng.random() < self._threshold[i]:
            return i
        return int(self._alias[i])

    def sample_distinct(self, rng: np.random.Generator, k: int) -> set[int]:
        """Draw ``k`` distinct indices by rejection sampling.

        ``k == len(self)`` returns every index without touching ``rng``.

        Each accepted index follows the table's distribution given the ones
        already taken; no claim is made about uniformity over k-subsets.
        Expected running time grows without bound as ``k`` approaches the
        number of indices that carry almost all of the probability mass.
        The loop is not bounded by a timeout.

        Raises
        ------
        InvalidArgumentError
            If ``k`` is negative or larger than the table.
        DegenerateDistributionError
            If ``k`` exceeds the number of indices with non-zero probability
            (the loop could never finish).
        """
        n = len(self)
        if k < 0:
            raise InvalidArgumentError("k must be >= 0")
        if k > n:
            raise InvalidArgumentError(f"k ({k}) is larger than the number of elements ({n})")
        if k == 0:
            return set()
        if k == n:
            return set(range(n))
        if k > self._support:
            raise DegenerateDistributionError(
                f"cannot draw {k} distinct indices: only {self._support} have non-zero probability"
            )

        taken: set[int] = set()
        while len(taken) < k:
            taken.add(self.sample(rng))
        return taken
