"""
Tests for the genetic algorithm operators: creation, pairing, cross,
mutation, pre-birth checks and selection.
"""

import math

import numpy as np
import pytest

from evoswarm.optimisation.exceptions import ConfigurationError
from evoswarm.optimisation.genetic import (
    BitwiseMutation,
    CheckChromoInterval,
    CheckChromoIntervalSelection,
    CrossBitwise,
    CrossMean,
    FloatCrossExp,
    FloatCrossGeometricMean,
    KillFitnessNaN,
    LimitPopulation,
    RandomCreator,
    RandomPairing,
    Tournament,
    VecCrossAllGenes,
    VecMutation,
)
from evoswarm.optimisation.genetic.cross import bits_to_float, cross_bits, float_to_bits
from evoswarm.optimisation.population import Individual


def _population(fitness_values):
    return [Individual([float(i)], value) for i, value in enumerate(fitness_values)]


def _differing_bits(a, b):
    return bin(float_to_bits(a) ^ float_to_bits(b)).count("1")


class TestRandomCreator:
    """Test initial population creation."""

    def test_creates_population_within_intervals(self, rng):
        intervals = [(-1.0, 1.0), (10.0, 20.0), (-500.0, -400.0)]
        creator = RandomCreator(40, intervals)

        chromosomes = creator.create(rng)

        assert len(chromosomes) == 40
        assert creator.chromosome_length == 3
        for chromosome in chromosomes:
            assert chromosome.shape == (3,)
            for gene, (lower, upper) in zip(chromosome, intervals):
                assert lower <= gene <= upper

        print(f"✅ RandomCreator created {len(chromosomes)} chromosomes inside their intervals")

    def test_invalid_configuration_raises(self):
        with pytest.raises(ConfigurationError):
            RandomCreator(0, [(0.0, 1.0)])
        with pytest.raises(ConfigurationError):
            RandomCreator(10, [])


class TestPairing:
    """Test mate selection strategies."""

    def test_random_pairing_family_count(self, rng):
        population = _population([1.0] * 7)
        families = RandomPairing().get_pairs(population, rng)

        assert len(families) == 3
        for family in families:
            assert len(family) == 2
            assert all(0 <= index < 7 for index in family)

    def test_tournament_returns_configured_families(self, rng):
        population = _population(range(10))
        families = Tournament(8, rounds_count=3, partners_count=2).get_pairs(population, rng)

        assert len(families) == 8
        assert all(len(family) == 2 for family in families)

    def test_tournament_prefers_best_fitness(self, rng):
        """With many rounds every partner should be one of the best individuals."""
        population = _population([5.0, 1.0, 1.0, 3.0, 4.0])
        families = Tournament(20, rounds_count=60).get_pairs(population, rng)

        for family in families:
            for index in family:
                assert population[index].fitness == 1.0

        print("✅ Tournament selects minimal fitness")

    def test_tournament_never_prefers_invalid_fitness(self, rng):
        population = _population([math.nan, math.nan, 2.0])
        families = Tournament(10, rounds_count=60).get_pairs(population, rng)

        assert all(index == 2 for family in families for index in family)

    def test_tournament_validation(self):
        with pytest.raises(ConfigurationError):
            Tournament(0)
        with pytest.raises(ConfigurationError):
            Tournament(5, rounds_count=-1)
        with pytest.raises(ConfigurationError):
            Tournament(5, partners_count=0)


class TestCross:
    """Test gene- and chromosome-level crosses."""

    def test_exp_cross_identical_parents(self, rng):
        cross = VecCrossAllGenes(FloatCrossExp(0.5))
        parent = np.array([1.5, -2.0, 7.25])

        for _ in range(20):
            (child,) = cross.cross([parent, parent.copy()], rng)
            assert np.array_equal(child, parent)

        print("✅ Identical parents give an identical child")

    def test_exp_cross_moves_from_first_parent_towards_second(self, rng):
        cross = FloatCrossExp(0.5)
        for _ in range(50):
            (child,) = cross.cross([0.0, 1.0], rng)
            assert child >= 0.0

    def test_mean_crosses(self, rng):
        assert CrossMean().cross([1.0, 3.0], rng) == [2.0]
        assert FloatCrossGeometricMean().cross([2.0, 8.0], rng) == [pytest.approx(4.0)]
        assert math.isnan(FloatCrossGeometricMean().cross([-2.0, 8.0], rng)[0])

    def test_vec_cross_with_three_parents(self, rng):
        parents = [np.array([0.0, 3.0]), np.array([3.0, 6.0]), np.array([6.0, 9.0])]
        (child,) = VecCrossAllGenes(CrossMean()).cross(parents, rng)

        assert np.allclose(child, [3.0, 6.0])

    def test_vec_cross_rejects_mismatched_parents(self, rng):
        with pytest.raises(ValueError):
            VecCrossAllGenes(CrossMean()).cross([np.zeros(2), np.zeros(3)], rng)
        with pytest.raises(ValueError):
            FloatCrossExp().cross([1.0], rng)

    def test_cross_bits(self):
        assert cross_bits(0xFF00, 0x00FF, 8) == 0xFFFF
        assert cross_bits(0xFFFF, 0x0000, 4) == 0xFFF0

    def test_bitwise_cross(self, rng):
        cross = CrossBitwise()
        assert cross.cross([3.5, 3.5], rng) == [3.5]

        # The sign bit always comes from the first parent, the lowest bit from the second
        a, b = -1.0, 5e-324
        for _ in range(20):
            (child,) = cross.cross([a, b], rng)
            child_bits = float_to_bits(child)
            assert child_bits >> 63 == 1
            assert child_bits & 1 == 1

    def test_bits_round_trip(self):
        for value in [0.0, -2.5, 1e-300, math.inf]:
            assert bits_to_float(float_to_bits(value)) == value


class TestMutation:
    """Test bitwise and probability-gated mutation."""

    def test_bitwise_mutation_flips_one_bit(self, rng):
        mutation = BitwiseMutation(1)
        for value in [0.0, 1.0, -3.75, 1e300]:
            assert _differing_bits(value, mutation.mutate(value, rng)) == 1

    def test_zero_probability_never_mutates(self, rng):
        mutation = VecMutation(0.0, BitwiseMutation(3), gene_count=2)
        chromosome = np.array([1.0, 2.0, 3.0])

        for _ in range(100):
            assert np.array_equal(mutation.mutate(chromosome, rng), chromosome)

    def test_full_probability_mutates_requested_genes(self, rng):
        mutation = VecMutation(100.0, BitwiseMutation(1), gene_count=2)
        chromosome = np.array([1.0, 2.0, 3.0, 4.0, 5.0])

        for _ in range(50):
            mutated = mutation.mutate(chromosome, rng)
            changed = [
                _differing_bits(before, after) > 0 for before, after in zip(chromosome, mutated)
            ]
            assert sum(changed) == 2

        # Input is never modified
        assert np.array_equal(chromosome, [1.0, 2.0, 3.0, 4.0, 5.0])
        print("✅ VecMutation mutates exactly gene_count genes")

    def test_probability_is_a_percentage(self, rng):
        mutation = VecMutation(30.0, BitwiseMutation(1))
        chromosome = np.array([1.0])

        mutated = sum(
            not np.array_equal(mutation.mutate(chromosome, rng), chromosome) for _ in range(2000)
        )
        assert 0.25 < mutated / 2000 < 0.35

    def test_validation(self):
        with pytest.raises(ConfigurationError):
            VecMutation(101.0, BitwiseMutation())
        with pytest.raises(ConfigurationError):
            VecMutation(10.0, BitwiseMutation(), gene_count=0)
        with pytest.raises(ConfigurationError):
            BitwiseMutation(0)


class TestPreBirth:
    """Test child filtering before evaluation."""

    def test_check_chromo_interval(self):
        check = CheckChromoInterval([(0.0, 1.0), (-1.0, 1.0)])

        assert check.check(np.array([0.5, 0.0]))
        assert check.check(np.array([1.0, -1.0]))
        assert not check.check(np.array([1.5, 0.0]))
        assert not check.check(np.array([0.5, math.nan]))

        children = [np.array([0.5, 0.5]), np.array([2.0, 0.0]), np.array([0.1, 0.9])]
        admitted = check.pre_birth([], children)
        assert len(admitted) == 2

        print("✅ CheckChromoInterval drops children outside their intervals")

    def test_length_mismatch_raises(self):
        with pytest.raises(ConfigurationError):
            CheckChromoInterval([(0.0, 1.0)]).check(np.array([0.5, 0.5]))


class TestSelection:
    """Test survivor selection."""

    def test_kill_fitness_nan(self):
        population = _population([1.0, math.nan, math.inf, 2.0, -math.inf])
        survivors = KillFitnessNaN().kill(population)

        assert [individual.fitness for individual in survivors] == [1.0, 2.0]

    def test_limit_population_keeps_best_with_stable_ties(self):
        population = _population([1.0, 0.5, 1.0, math.nan, 1.0])
        survivors = LimitPopulation(3).kill(population)

        assert survivors == [population[1], population[0], population[2]]
        assert survivors[1] is population[0]

        print("✅ LimitPopulation is a stable truncation")

    def test_limit_population_smaller_than_limit(self):
        population = _population([3.0, 2.0])
        assert LimitPopulation(10).kill(population) == [population[1], population[0]]

    def test_interval_selection(self):
        population = [Individual([0.5], 1.0), Individual([5.0], 0.0)]
        survivors = CheckChromoIntervalSelection([(0.0, 1.0)]).kill(population)

        assert survivors == [population[0]]

    def test_limit_population_validation(self):
        with pytest.raises(ConfigurationError):
            LimitPopulation(0)
