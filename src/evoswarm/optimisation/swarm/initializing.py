"""
Starting positions and velocities for the particle swarm.
"""

from abc import ABC, abstractmethod

import numpy as np

from ..exceptions import ConfigurationError
from ..population import intervals_to_bounds, validate_intervals


class CoordinatesInitializer(ABC):
    @abstractmethod
    def get_coordinates(self, rng: np.random.Generator) -> list[np.ndarray]:
        """Return one position per particle."""


class VelocityInitializer(ABC):
    @abstractmethod
    def get_velocity(
        self, coordinates: list[np.ndarray], rng: np.random.Generator
    ) -> list[np.ndarray]:
        """Return one velocity per position in ``coordinates``."""


class RandomCoordinatesInitializer(CoordinatesInitializer):
    """Uniform positions inside ``intervals`` for ``particles_count`` particles."""

    def __init__(self, intervals, particles_count: int):
        if particles_count is None or int(particles_count) <= 0:
            raise ConfigurationError(f"particles_count must be positive, got {particles_count}")
        self.intervals = validate_intervals(intervals)
        self.particles_count = int(particles_count)
        self._lower, self._upper = intervals_to_bounds(self.intervals)

    @property
    def dimension(self) -> int:
        return len(self.intervals)

    def get_coordinates(self, rng):
        positions = rng.uniform(
            self._lower, self._upper, size=(self.particles_count, self.dimension)
        )
        return [row.copy() for row in positions]


class ZeroVelocityInitializer(VelocityInitializer):
    def get_velocity(self, coordinates, rng):
        return [np.zeros_like(np.asarray(position, dtype=np.float64)) for position in coordinates]


class RandomVelocityInitializer(VelocityInitializer):
    """Uniform velocities inside ``intervals`` (one interval per dimension)."""

    def __init__(self, intervals):
        self.intervals = validate_intervals(intervals)
        self._lower, self._upper = intervals_to_bounds(self.intervals)

    def get_velocity(self, coordinates, rng):
        velocities = rng.uniform(self._lower, self._upper, size=(len(coordinates), len(self.intervals)))
        return [row.copy() for row in velocities]
