"""
Survivor selection.

Each selection receives the merged population (survivors plus new children)
and returns the individuals that live on. The driver applies the configured
selections left to right once per generation.
"""

from abc import ABC, abstractmethod
from typing import Sequence

from ..exceptions import ConfigurationError
from ..population import Individual, fitness_key, intervals_to_bounds, validate_intervals
from .pre_birth import within_intervals


class Selection(ABC):
    @abstractmethod
    def kill(self, population: Sequence[Individual]) -> list[Individual]:
        """Return the survivors of ``population``."""


class KillFitnessNaN(Selection):
    """Removes individuals whose fitness is NaN or infinite."""

    def kill(self, population):
        return [individual for individual in population if individual.is_valid]


class LimitPopulation(Selection):
    """
    Keeps the ``max_count`` best individuals.

    The population is sorted ascending by fitness with a stable sort, so
    individuals with equal fitness keep their relative order. Invalid fitness
    sorts last.
    """

    def __init__(self, max_count: int):
        if max_count <= 0:
            raise ConfigurationError(f"max_count must be positive, got {max_count}")
        self.max_count = int(max_count)

    def kill(self, population):
        ranked = sorted(population, key=lambda individual: fitness_key(individual.fitness))
        return ranked[: self.max_count]


class CheckChromoIntervalSelection(Selection):
    """Removes individuals with a gene outside the intervals."""

    def __init__(self, intervals):
        self.intervals = validate_intervals(intervals)
        self._lower, self._upper = intervals_to_bounds(self.intervals)

    def kill(self, population):
        return [
            individual
            for individual in population
            if within_intervals(individual.chromosome, self._lower, self._upper)
        ]
