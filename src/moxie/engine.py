from __future__ import annotations

import logging
from collections.abc import Sequence, Sized
from dataclasses import dataclass
from typing import TypeVar

import numpy as np

from moxie.core.errors import InvalidArgumentError
from moxie.core.fitness import objective_value_fitness
from moxie.operators.selection import (
    FitnessLike,
    ProportionalSelection,
    SelectionStrategy,
    TournamentSelection,
    TruncationSelection,
    UniformSelection,
)

T = TypeVar("T")

# ---------------------------------------------------------------------------
# Selection config & stats
# ---------------------------------------------------------------------------

POLICIES = ("truncation", "uniform", "proportional", "tournament")


@dataclass
class SelectionConfig:
    policy: str = "tournament"  # 'truncation' | 'uniform' | 'proportional' | 'tournament'
    tournament_size: int = 3
    win_probability: float = 0.8
    seed: int | None = None

    def __post_init__(self) -> None:
        """Validate configuration parameters early to fail fast.

        Rules
        -----
        - policy in {"truncation", "uniform", "proportional", "tournament"}
        - tournament_size > 0
        - win_probability in [0,1]
        - seed is None or >= 0
        """
        if self.policy not in POLICIES:
            raise InvalidArgumentError(f"policy must be one of {POLICIES}, got {self.policy!r}")
        if self.tournament_size <= 0:
            raise InvalidArgumentError("tournament_size must be > 0")
        if not (0.0 <= self.win_probability <= 1.0):
            raise InvalidArgumentError("win_probability must be in [0,1]")
        if self.seed is not None and self.seed < 0:
            raise InvalidArgumentError("seed must be >= 0 if provided")


@dataclass
class SelectionStats:
    calls: int = 0
    selected: int = 0
    last_size: int = 0


def build_strategy(config: SelectionConfig, rng: np.random.Generator) -> SelectionStrategy:
    """Instantiate the strategy named by ``config.policy`` around ``rng``."""
    if config.policy == "truncation":
        return TruncationSelection(rng=rng)
    if config.policy == "uniform":
        return UniformSelection(rng=rng)
    if config.policy == "proportional":
        return ProportionalSelection(rng=rng)
    return TournamentSelection(k=config.tournament_size, p=config.win_probability, rng=rng)


# ---------------------------------------------------------------------------
# Selector
# ---------------------------------------------------------------------------


class Selector:
    """Per-generation selection facade for an outer evolutionary loop.

    Owns a single generator so repeated calls with the same seed reproduce
    the same selections. Not thread-safe: one caller at a time.
    """

    def __init__(
        self,
        config: SelectionConfig | None = None,
        rng: np.random.Generator | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        self.config = config or SelectionConfig()
        self.rng = rng if rng is not None else np.random.default_rng(self.config.seed)
        self.strategy = build_strategy(self.config, self.rng)
        self.stats = SelectionStats()
        self.logger = logger or logging.getLogger("moxie.selector")
        self.logger.info("Prepared %s (policy=%s)", type(self.strategy).__name__, self.config.policy)

    # -----------------------------
    # Public API
    # -----------------------------

    def select_indices(self, fitness: FitnessLike, n: int) -> set[int]:
        """Select ``n`` distinct indices from ``fitness`` with the configured policy."""
        chosen = self.strategy.select_indices(fitness, n)
        self._record(len(fitness), chosen)
        return chosen

    def select(self, population: Sequence[T], fitness: FitnessLike, n: int) -> list[T]:
        """Select ``n`` distinct members of ``population`` (ascending index order)."""
        chosen = self.strategy.select(population, fitness, n)
        self._record(len(population), chosen)
        return chosen

    def select_minimizing(self, population: Sequence[T], objective_values: FitnessLike, n: int) -> list[T]:
        """Like :meth:`select`, for objectives where lower values are better."""
        return self.select(population, objective_value_fitness(objective_values), n)

    # -----------------------------
    # Internal helpers
    # -----------------------------

    def _record(self, population_size: int, chosen: Sized) -> None:
        self.stats.calls += 1
        self.stats.selected += len(chosen)
        self.stats.last_size = len(chosen)
        self.logger.debug(
            "Selection %d: kept %d of %d (policy=%s)",
            self.stats.calls,
            len(chosen),
            population_size,
            self.config.policy,
        )
