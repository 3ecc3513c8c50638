"""
Data model shared by the genetic and particle swarm optimizers.

Chromosomes and particle positions are one-dimensional ``float64`` numpy
arrays. An :class:`Individual` pairs a chromosome with its fitness and is
immutable once built; a population is simply a ``list`` of Individuals.
Particles are mutable because they own their velocity and personal-best
memory, while the :class:`Swarm` keeps the global best shared by every
particle during one iteration.

Fitness values may be NaN or infinite. Such values are never treated as a
valid optimum: every comparison in this module ranks them after any finite
value.
"""

import math
from dataclasses import dataclass, field
from typing import Any, Sequence

import numpy as np

from .exceptions import ConfigurationError

Interval = tuple[float, float]


def as_chromosome(values) -> np.ndarray:
    """Return a fresh ``float64`` copy of ``values`` as a 1-D array."""
    return np.array(values, dtype=np.float64).reshape(-1)


def freeze(chromosome: np.ndarray) -> np.ndarray:
    """Return a read-only ``float64`` copy of ``chromosome``."""
    frozen = as_chromosome(chromosome)
    frozen.flags.writeable = False
    return frozen


def is_valid_fitness(value: float) -> bool:
    """True for finite fitness values."""
    return math.isfinite(value)


def fitness_key(value: float) -> tuple[int, float]:
    """
    Sort key that orders fitness ascending with invalid values last.

    Python's sort is stable, so two equal keys keep their original order.
    """
    if is_valid_fitness(value):
        return (0, value)
    return (1, 0.0)


def is_better(candidate: float, incumbent: float) -> bool:
    """True when ``candidate`` is strictly better than ``incumbent`` (minimization)."""
    return fitness_key(candidate) < fitness_key(incumbent)


def validate_intervals(intervals: Sequence[Sequence[float]]) -> list[Interval]:
    """
    Normalize a sequence of ``(min, max)`` pairs.

    Raises:
        ConfigurationError: If the sequence is empty or an interval is not
            a finite pair with ``min < max``.
    """
    if intervals is None or len(intervals) == 0:
        raise ConfigurationError("At least one interval is required")

    result = []
    for index, interval in enumerate(intervals):
        if len(interval) != 2:
            raise ConfigurationError(
                f"Interval {index} must be a (min, max) pair, got {interval!r}"
            )
        lower, upper = float(interval[0]), float(interval[1])
        if not (math.isfinite(lower) and math.isfinite(upper)):
            raise ConfigurationError(f"Interval {index} must be finite, got {interval!r}")
        if lower >= upper:
            raise ConfigurationError(
                f"Interval {index} must satisfy min < max, got ({lower}, {upper})"
            )
        result.append((lower, upper))
    return result


def intervals_to_bounds(intervals: Sequence[Interval]) -> tuple[np.ndarray, np.ndarray]:
    """Split intervals into ``(lower, upper)`` arrays."""
    lower = np.array([interval[0] for interval in intervals], dtype=np.float64)
    upper = np.array([interval[1] for interval in intervals], dtype=np.float64)
    return lower, upper


@dataclass(frozen=True, eq=False)
class Individual:
    """A chromosome together with its evaluated fitness."""

    chromosome: np.ndarray
    fitness: float

    def __post_init__(self):
        object.__setattr__(self, "chromosome", freeze(self.chromosome))
        object.__setattr__(self, "fitness", float(self.fitness))

    @property
    def is_valid(self) -> bool:
        return is_valid_fitness(self.fitness)


def find_best(items: Sequence) -> Any:
    """
    First item with the smallest fitness, or ``None`` when empty.

    Works on anything with a ``fitness`` attribute (individuals or particles).
    """
    best = None
    for item in items:
        if best is None or is_better(item.fitness, best.fitness):
            best = item
    return best


def find_worst(items: Sequence) -> Any:
    """First item with the largest fitness (invalid counts as largest)."""
    worst = None
    for item in items:
        if worst is None or is_better(worst.fitness, item.fitness):
            worst = item
    return worst


@dataclass
class Particle:
    """
    A particle of the swarm.

    The personal best and personal worst start at the initial position.
    :meth:`move_to` replaces the personal best only when the new fitness is
    strictly better, so an invalid fitness never overwrites a valid memory,
    and the personal worst only when it is strictly worse.
    """

    position: np.ndarray
    velocity: np.ndarray
    fitness: float
    best_position: np.ndarray = field(default=None)
    best_fitness: float = field(default=None)
    worst_position: np.ndarray = field(default=None)
    worst_fitness: float = field(default=None)

    def __post_init__(self):
        self.position = as_chromosome(self.position)
        self.velocity = as_chromosome(self.velocity)
        self.fitness = float(self.fitness)
        if self.position.shape != self.velocity.shape:
            raise ConfigurationError(
                f"Position and velocity dimensions differ: "
                f"{self.position.shape[0]} != {self.velocity.shape[0]}"
            )
        if self.best_position is None:
            self.best_position = self.position.copy()
            self.best_fitness = self.fitness
        else:
            self.best_position = as_chromosome(self.best_position)
            self.best_fitness = float(self.best_fitness)
        if self.worst_position is None:
            self.worst_position = self.position.copy()
            self.worst_fitness = self.fitness
        else:
            self.worst_position = as_chromosome(self.worst_position)
            self.worst_fitness = float(self.worst_fitness)

    @property
    def dimension(self) -> int:
        return self.position.shape[0]

    def move_to(self, position: np.ndarray, fitness: float) -> bool:
        """Set a new position and fitness. Returns True if the personal best improved."""
        self.position = as_chromosome(position)
        self.fitness = float(fitness)
        if is_better(self.worst_fitness, self.fitness):
            self.worst_position = self.position.copy()
            self.worst_fitness = self.fitness
        if is_better(self.fitness, self.best_fitness):
            self.best_position = self.position.copy()
            self.best_fitness = self.fitness
            return True
        return False

    def as_individual(self) -> Individual:
        """Read-only view of the current position and fitness."""
        return Individual(self.position, self.fitness)


@dataclass
class Swarm:
    """
    Particles plus the global best and global worst known to all of them.

    The global worst is the worst current position seen in any iteration;
    it only feeds velocity rules with negative reinforcement.
    """

    particles: list[Particle] = field(default_factory=list)
    best_position: np.ndarray | None = None
    best_fitness: float = math.nan
    worst_position: np.ndarray | None = None
    worst_fitness: float = math.nan

    def __len__(self) -> int:
        return len(self.particles)

    def update_global_best(self) -> bool:
        """
        Fold the particles' personal bests into the global best.

        Returns:
            bool: True if the global best changed.
        """
        improved = False
        for particle in self.particles:
            if self.best_position is None or is_better(particle.best_fitness, self.best_fitness):
                self.best_position = particle.best_position.copy()
                self.best_fitness = particle.best_fitness
                improved = True
        return improved

    def update_global_worst(self) -> bool:
        """Replace the global worst when this iteration's worst particle is strictly worse."""
        candidate = self.current_worst()
        if candidate is None:
            return False
        if self.worst_position is None or is_better(self.worst_fitness, candidate.fitness):
            self.worst_position = candidate.position.copy()
            self.worst_fitness = candidate.fitness
            return True
        return False

    def current_best(self) -> Particle | None:
        """Particle with the best current (not personal-best) fitness."""
        return find_best(self.particles)

    def current_worst(self) -> Particle | None:
        """Particle with the worst current fitness."""
        return find_worst(self.particles)
