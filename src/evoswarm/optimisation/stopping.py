"""
Termination criteria shared by the genetic and particle swarm optimizers.

The optimizer asks its stop checker once after every completed generation,
passing the generation index, the best fitness found so far and the current
population (a read-only sequence of individuals). Checkers that keep state
across calls clear it in :meth:`StopChecker.reset`, which the optimizer calls
at the start of every run.

Composite checkers nest freely::

    CompositeAny([
        MaxIterations(500),
        CompositeAll([Threshold(1e-6), GoalNotChange(20, 1e-9)]),
    ])
"""

import math
import time
from abc import ABC, abstractmethod
from typing import Sequence

from .exceptions import ConfigurationError
from .population import Individual, is_valid_fitness


class StopChecker(ABC):
    @abstractmethod
    def should_stop(
        self, generation: int, best_fitness: float, population: Sequence[Individual]
    ) -> bool:
        """True when the run should terminate."""

    def reset(self):
        """Forget state from a previous run."""


class MaxIterations(StopChecker):
    """Stops once ``generation >= max_iter``."""

    def __init__(self, max_iter: int):
        if max_iter < 0:
            raise ConfigurationError(f"max_iter must be non-negative, got {max_iter}")
        self.max_iter = int(max_iter)

    def should_stop(self, generation, best_fitness, population):
        return generation >= self.max_iter

    def __repr__(self):
        return f"MaxIterations({self.max_iter})"


class Threshold(StopChecker):
    """Stops when the best fitness is at or below ``threshold``. Invalid fitness never stops."""

    def __init__(self, threshold: float):
        self.threshold = float(threshold)

    def should_stop(self, generation, best_fitness, population):
        return is_valid_fitness(best_fitness) and best_fitness <= self.threshold

    def __repr__(self):
        return f"Threshold({self.threshold})"


class GoalNotChange(StopChecker):
    """
    Stagnation criterion.

    Remembers the last best fitness that moved by more than ``delta`` and the
    generation at which that happened. Stops once more than ``max_iter``
    generations pass without such a move.
    """

    def __init__(self, max_iter: int, delta: float):
        if max_iter < 0:
            raise ConfigurationError(f"max_iter must be non-negative, got {max_iter}")
        if delta < 0:
            raise ConfigurationError(f"delta must be non-negative, got {delta}")
        self.max_iter = int(max_iter)
        self.delta = float(delta)
        self.reset()

    def reset(self):
        self._last_goal = math.inf
        self._change_generation = 0

    def should_stop(self, generation, best_fitness, population):
        if not is_valid_fitness(best_fitness):
            return False

        if not math.isfinite(self._last_goal) or abs(best_fitness - self._last_goal) > self.delta:
            self._last_goal = best_fitness
            self._change_generation = generation

        return generation - self._change_generation > self.max_iter

    def __repr__(self):
        return f"GoalNotChange({self.max_iter}, {self.delta})"


class TimeLimit(StopChecker):
    """Stops at the first generation boundary after ``seconds`` of wall-clock time."""

    def __init__(self, seconds: float):
        if not seconds > 0:
            raise ConfigurationError(f"seconds must be positive, got {seconds}")
        self.seconds = float(seconds)
        self.reset()

    def reset(self):
        self._start = time.perf_counter()

    def should_stop(self, generation, best_fitness, population):
        return time.perf_counter() - self._start >= self.seconds

    def __repr__(self):
        return f"TimeLimit({self.seconds}s)"


class _Composite(StopChecker):
    def __init__(self, checkers: Sequence[StopChecker]):
        checkers = list(checkers)
        if not checkers:
            raise ConfigurationError(f"{type(self).__name__} requires at least one checker")
        self.checkers = checkers

    def reset(self):
        for checker in self.checkers:
            checker.reset()

    def __repr__(self):
        return f"{type(self).__name__}({self.checkers!r})"


class CompositeAny(_Composite):
    """Stops when any child checker stops. Evaluation short-circuits left to right."""

    def should_stop(self, generation, best_fitness, population):
        return any(
            checker.should_stop(generation, best_fitness, population) for checker in self.checkers
        )


class CompositeAll(_Composite):
    """Stops when every child checker stops. Evaluation short-circuits left to right."""

    def should_stop(self, generation, best_fitness, population):
        return all(
            checker.should_stop(generation, best_fitness, population) for checker in self.checkers
        )
