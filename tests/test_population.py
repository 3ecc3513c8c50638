"""
Tests for the individual, particle and swarm data model.
"""

import math

import numpy as np
import pytest

from evoswarm.optimisation.exceptions import ConfigurationError
from evoswarm.optimisation.population import (
    Individual,
    Particle,
    Swarm,
    find_best,
    find_worst,
    fitness_key,
    is_better,
    validate_intervals,
)


class TestFitnessOrdering:
    """Test that invalid fitness never ranks as an optimum."""

    def test_invalid_fitness_sorts_last(self):
        values = [3.0, math.nan, -1.0, math.inf, 2.0, -math.inf]
        ordered = sorted(values, key=fitness_key)

        assert ordered[:3] == [-1.0, 2.0, 3.0]
        assert all(not math.isfinite(v) for v in ordered[3:])

        print("✅ Invalid fitness sorts after every finite value")

    def test_is_better_is_strict(self):
        assert is_better(1.0, 2.0)
        assert not is_better(2.0, 2.0)
        assert is_better(1e9, math.nan)
        assert not is_better(math.nan, 1e9)
        assert not is_better(-math.inf, 0.0)

        print("✅ is_better is a strict comparison")

    def test_find_best_keeps_first_of_ties(self):
        population = [Individual([float(i)], f) for i, f in enumerate([2.0, 1.0, 1.0, math.nan])]

        assert find_best(population) is population[1]
        assert find_worst(population) is population[3]
        assert find_best([]) is None

        print("✅ find_best returns the first minimal individual")


class TestIntervals:
    """Test interval validation."""

    def test_valid_intervals_are_normalized(self):
        intervals = validate_intervals([[0, 1], (-2.5, 3)])
        assert intervals == [(0.0, 1.0), (-2.5, 3.0)]

    @pytest.mark.parametrize(
        "intervals",
        [[], [(1.0, 1.0)], [(2.0, 1.0)], [(0.0, math.inf)], [(0.0, 1.0, 2.0)]],
    )
    def test_invalid_intervals_raise(self, intervals):
        with pytest.raises(ConfigurationError):
            validate_intervals(intervals)


class TestIndividual:
    """Test immutability of individuals."""

    def test_chromosome_is_read_only_copy(self):
        genes = np.array([1.0, 2.0])
        individual = Individual(genes, 5.0)

        genes[0] = 100.0
        assert individual.chromosome[0] == 1.0

        with pytest.raises(ValueError):
            individual.chromosome[0] = 3.0

        print("✅ Individual chromosome is a read-only copy")

    def test_validity(self):
        assert Individual([0.0], 1.0).is_valid
        assert not Individual([0.0], math.nan).is_valid
        assert not Individual([0.0], math.inf).is_valid


class TestParticle:
    """Test personal best memory of particles."""

    def test_personal_best_starts_at_initial_position(self):
        particle = Particle([1.0, 2.0], [0.0, 0.0], 4.0)

        assert np.array_equal(particle.best_position, [1.0, 2.0])
        assert particle.best_fitness == 4.0
        assert particle.dimension == 2

    def test_move_to_only_keeps_strict_improvements(self):
        particle = Particle([1.0], [0.0], 4.0)

        assert not particle.move_to([2.0], 4.0)
        assert particle.best_position[0] == 1.0

        assert particle.move_to([3.0], 1.0)
        assert particle.best_position[0] == 3.0

        assert not particle.move_to([4.0], math.nan)
        assert particle.best_fitness == 1.0
        assert particle.position[0] == 4.0

        print("✅ Particle personal best only improves")

    def test_personal_worst_tracks_strictly_worse_positions(self):
        particle = Particle([1.0], [0.0], 4.0)

        particle.move_to([2.0], 9.0)
        assert particle.worst_position[0] == 2.0
        assert particle.worst_fitness == 9.0

        particle.move_to([3.0], 9.0)
        assert particle.worst_position[0] == 2.0

        particle.move_to([5.0], math.inf)
        assert particle.worst_position[0] == 5.0
        assert particle.best_fitness == 4.0

    def test_dimension_mismatch_raises(self):
        with pytest.raises(ConfigurationError):
            Particle([1.0, 2.0], [0.0], 1.0)


class TestSwarm:
    """Test global best tracking."""

    def test_global_best_from_personal_bests(self):
        swarm = Swarm([
            Particle([0.0], [0.0], 3.0),
            Particle([1.0], [0.0], math.nan),
            Particle([2.0], [0.0], 1.0),
        ])

        assert swarm.update_global_best()
        assert swarm.best_fitness == 1.0
        assert swarm.best_position[0] == 2.0

        # No change on a second pass
        assert not swarm.update_global_best()
        assert len(swarm) == 3
        assert swarm.current_best() is swarm.particles[2]

    def test_global_worst_from_current_positions(self):
        swarm = Swarm([
            Particle([0.0], [0.0], 3.0),
            Particle([1.0], [0.0], 7.0),
            Particle([2.0], [0.0], 1.0),
        ])

        assert swarm.current_worst() is swarm.particles[1]
        assert swarm.update_global_worst()
        assert swarm.worst_fitness == 7.0
        assert swarm.worst_position[0] == 1.0

        # A better iteration keeps the old global worst
        swarm.particles[1].move_to([1.5], 2.0)
        assert not swarm.update_global_worst()
        assert swarm.worst_fitness == 7.0

        swarm.particles[0].move_to([0.5], math.nan)
        assert swarm.update_global_worst()
        assert swarm.worst_position[0] == 0.5
