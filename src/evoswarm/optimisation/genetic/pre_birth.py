"""
Offspring validation before evaluation.

Children that fail a check are dropped. Nothing is created in their place, so
a generation may add fewer children than it bred.
"""

from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from ..exceptions import ConfigurationError
from ..population import Individual, intervals_to_bounds, validate_intervals


class PreBirth(ABC):
    """Admit/reject predicate applied to every bred child."""

    @abstractmethod
    def check(self, chromosome: np.ndarray) -> bool:
        """True if the child may be born."""

    def pre_birth(
        self, population: Sequence[Individual], children: Sequence[np.ndarray]
    ) -> list[np.ndarray]:
        return [child for child in children if self.check(child)]


def within_intervals(chromosome: np.ndarray, lower: np.ndarray, upper: np.ndarray) -> bool:
    """True when every gene is finite and inside ``[lower, upper]``."""
    chromosome = np.asarray(chromosome, dtype=np.float64)
    if chromosome.shape != lower.shape:
        raise ConfigurationError(
            f"Chromosome has {chromosome.shape[0]} genes but {lower.shape[0]} intervals "
            f"are configured"
        )
    return bool(
        np.all(np.isfinite(chromosome))
        and np.all(chromosome >= lower)
        and np.all(chromosome <= upper)
    )


class CheckChromoInterval(PreBirth):
    """Rejects children with a non-finite gene or a gene outside its interval."""

    def __init__(self, intervals):
        self.intervals = validate_intervals(intervals)
        self._lower, self._upper = intervals_to_bounds(self.intervals)

    def check(self, chromosome):
        return within_intervals(chromosome, self._lower, self._upper)
