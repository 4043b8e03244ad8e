import numpy as np
import pytest

from moxie.engine import SelectionConfig, Selector

DIMENSIONS = 2
POPULATION_SIZE = 40
DOMAIN = (-10.0, 10.0)


def sphere(x: np.ndarray) -> float:
    return float(np.sum(x**2))


def _evolve(selector: Selector, rng: np.random.Generator, generations: int) -> tuple[float, float]:
    population = [rng.uniform(*DOMAIN, size=DIMENSIONS) for _ in range(POPULATION_SIZE)]
    initial_best = min(sphere(x) for x in population)
    num_survivors = POPULATION_SIZE // 2
    for _ in range(generations):
        objective = [sphere(x) for x in population]
        survivors = selector.select_minimizing(population, objective, num_survivors)
        assert len(survivors) == num_survivors
        children = [np.clip(x + rng.normal(0.0, 0.3, size=DIMENSIONS), *DOMAIN) for x in survivors]
        population = survivors + children
    return initial_best, min(sphere(x) for x in population)


# Run a simple real-valued minimisation loop with elitist survival
def test_truncation_tuner_improves():
    rng = np.random.default_rng(11)
    selector = Selector(SelectionConfig(policy="truncation"))
    initial_best, final_best = _evolve(selector, rng, generations=40)
    assert final_best < initial_best
    assert selector.stats.calls == 40


@pytest.mark.parametrize("policy", ["uniform", "proportional", "tournament"])
def test_stochastic_tuner_runs(policy):
    rng = np.random.default_rng(3)
    selector = Selector(SelectionConfig(policy=policy, tournament_size=4, win_probability=0.7, seed=3))
    _evolve(selector, rng, generations=15)
    assert selector.stats.selected == 15 * (POPULATION_SIZE // 2)
