"""
Mate selection strategies.

A pairing returns *families*: lists of population indices whose chromosomes
are crossed together to produce children. Indices may repeat, both across
families and inside one family.
"""

from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from ..exceptions import ConfigurationError
from ..population import Individual, is_better


class Pairing(ABC):
    """Chooses parent families from the current population."""

    @abstractmethod
    def get_pairs(
        self, population: Sequence[Individual], rng: np.random.Generator
    ) -> list[list[int]]:
        """Return families of population indices."""


class RandomPairing(Pairing):
    """``len(population) // 2`` families of two uniformly drawn indices."""

    def get_pairs(self, population, rng):
        size = len(population)
        families_count = size // 2
        if families_count == 0:
            return []
        indices = rng.integers(0, size, size=(families_count, 2))
        return [[int(first), int(second)] for first, second in indices]


class Tournament(Pairing):
    """
    Tournament mate selection.

    Each partner of a family is chosen by drawing one random index and then
    ``rounds_count`` random challengers. A challenger takes the place of the
    current holder only when its fitness is strictly better, so the first of
    several equal individuals wins. Invalid fitness never beats a valid one.

    Args:
        families_count: Number of families per generation.
        rounds_count: Challengers drawn for each partner (0 means a random pick).
        partners_count: Parents per family.
    """

    def __init__(self, families_count: int, rounds_count: int = 1, partners_count: int = 2):
        if families_count <= 0:
            raise ConfigurationError(f"families_count must be positive, got {families_count}")
        if rounds_count < 0:
            raise ConfigurationError(f"rounds_count must be non-negative, got {rounds_count}")
        if partners_count < 1:
            raise ConfigurationError(f"partners_count must be positive, got {partners_count}")

        self.families_count = int(families_count)
        self.rounds_count = int(rounds_count)
        self.partners_count = int(partners_count)

    def get_pairs(self, population, rng):
        size = len(population)
        if size == 0:
            return []

        families = []
        for _ in range(self.families_count):
            family = []
            for _ in range(self.partners_count):
                holder = int(rng.integers(0, size))
                for _ in range(self.rounds_count):
                    challenger = int(rng.integers(0, size))
                    if is_better(population[challenger].fitness, population[holder].fitness):
                        holder = challenger
                family.append(holder)
            families.append(family)
        return families
