"""
Initial population creation for the genetic algorithm.
"""

import logging
from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from ..exceptions import ConfigurationError
from ..population import intervals_to_bounds, validate_intervals

logger = logging.getLogger(__name__)


class Creator(ABC):
    """Produces the chromosomes of the starting population."""

    @abstractmethod
    def create(self, rng: np.random.Generator) -> list[np.ndarray]:
        """Return a list of new chromosomes."""


class RandomCreator(Creator):
    """
    Uniformly random chromosomes inside per-gene intervals.

    Args:
        population_size: Number of chromosomes to create. Must be positive.
        intervals: ``(min, max)`` per gene, ``min < max``.

    Raises:
        ConfigurationError: On a non-positive size or invalid intervals.
    """

    def __init__(self, population_size: int, intervals: Sequence[Sequence[float]]):
        if population_size is None or int(population_size) <= 0:
            raise ConfigurationError(
                f"population_size must be positive, got {population_size}"
            )
        self.population_size = int(population_size)
        self.intervals = validate_intervals(intervals)
        self._lower, self._upper = intervals_to_bounds(self.intervals)

    @property
    def chromosome_length(self) -> int:
        return len(self.intervals)

    def create(self, rng: np.random.Generator) -> list[np.ndarray]:
        genes = rng.uniform(
            self._lower, self._upper, size=(self.population_size, self.chromosome_length)
        )
        logger.debug(
            "Created %d chromosomes with %d genes", self.population_size, self.chromosome_length
        )
        return [row.copy() for row in genes]
