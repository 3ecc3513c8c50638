"""Shared fixtures for the evoswarm test suite."""

import numpy as np
import pytest

from evoswarm.optimisation.genetic import (
    BitwiseMutation,
    CheckChromoInterval,
    FloatCrossExp,
    KillFitnessNaN,
    LimitPopulation,
    RandomCreator,
    Tournament,
    VecCrossAllGenes,
    VecMutation,
)
from evoswarm.optimisation.problems import FunctionGoal
from evoswarm.optimisation.runners import GeneticOptimizer, ParticleSwarmOptimizer
from evoswarm.optimisation.stopping import CompositeAny, MaxIterations, Threshold
from evoswarm.optimisation.swarm import (
    ConstInertia,
    InertiaVelocityCalculator,
    MaxVelocityAbs,
    MoveToBoundary,
    RandomCoordinatesInitializer,
    ZeroVelocityInitializer,
)


def shifted_parabola(x):
    """(x - 1)^2 summed over genes; minimum 0 at x_i = 1."""
    return float(np.sum((np.asarray(x) - 1.0) ** 2))


@pytest.fixture
def intervals_1d():
    return [(-10.0, 10.0)]


@pytest.fixture
def intervals_2d():
    return [(-10.0, 10.0), (-10.0, 10.0)]


@pytest.fixture
def make_ga(intervals_1d):
    """Factory for the reference 1-D genetic algorithm setup."""

    def _make(seed=42, stop_checker=None, goal=None, **kwargs):
        if stop_checker is None:
            stop_checker = CompositeAny([MaxIterations(200), Threshold(1e-6)])
        return GeneticOptimizer(
            goal=goal if goal is not None else FunctionGoal(shifted_parabola),
            creator=RandomCreator(50, intervals_1d),
            pairing=Tournament(25, rounds_count=2),
            cross=VecCrossAllGenes(FloatCrossExp()),
            mutation=VecMutation(15.0, BitwiseMutation(2)),
            pre_births=[CheckChromoInterval(intervals_1d)],
            selections=[KillFitnessNaN(), LimitPopulation(50)],
            stop_checker=stop_checker,
            seed=seed,
            **kwargs,
        )

    return _make


@pytest.fixture
def make_pso(intervals_2d):
    """Factory for a 2-D particle swarm with standard coefficients."""

    def _make(seed=42, stop_checker=None, goal=None, velocity_calculator=None, **kwargs):
        if velocity_calculator is None:
            velocity_calculator = InertiaVelocityCalculator(1.49618, 1.49618, ConstInertia(0.7298))
        return ParticleSwarmOptimizer(
            goal=goal if goal is not None else FunctionGoal(shifted_parabola),
            coordinates_initializer=RandomCoordinatesInitializer(intervals_2d, 30),
            velocity_initializer=ZeroVelocityInitializer(),
            velocity_calculator=velocity_calculator,
            post_velocity=[MaxVelocityAbs(5.0)],
            post_move=[MoveToBoundary(intervals_2d)],
            stop_checker=stop_checker if stop_checker is not None else MaxIterations(200),
            seed=seed,
            **kwargs,
        )

    return _make


@pytest.fixture
def rng():
    return np.random.default_rng(12345)


@pytest.fixture
def ga_config_dict():
    """Minimal GA configuration dictionary."""
    return {
        "problem": {
            "objective": {"type": "paraboloid", "n_var": 2, "bounds": [-10.0, 10.0]},
        },
        "optimization": {
            "algorithm": {"type": "GA", "pop_size": 30},
            "termination": {"max_generations": 20},
            "monitoring": {"progress_frequency": 5},
        },
        "seed": 3,
    }


@pytest.fixture
def pso_config_dict():
    """Minimal PSO configuration dictionary."""
    return {
        "problem": {
            "objective": {"type": "rastrigin", "n_var": 2},
        },
        "optimization": {
            "algorithm": {
                "type": "PSO",
                "pop_size": 20,
                "inertia_weight": 0.9,
                "inertia_weight_final": 0.4,
                "cognitive_coeff": 1.5,
                "social_coeff": 1.5,
                "max_velocity": 1.0,
            },
            "termination": {"max_generations": 25},
        },
        "seed": 5,
    }


@pytest.fixture
def objective():
    return shifted_parabola
