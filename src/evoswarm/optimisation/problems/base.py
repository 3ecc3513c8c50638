"""
Goal functions: the fitness side of every optimization run.

A goal maps a chromosome (1-D float array) to a scalar fitness that the
optimizers minimize. Goals count how many times they were called, which the
statistics layer reports as the evaluation cost of a run. The counter is
protected by a lock because batch evaluation may fan out over a thread pool.

Two concrete goals are provided:

- :class:`FunctionGoal` wraps any plain callable ``chromosome -> float``.
- :class:`GoalFromProblem` adapts a single-objective pymoo ``Problem`` so the
  problems of pymoo's test suite can be used directly.
"""

import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import Executor
from typing import Callable, Sequence

import numpy as np
from pymoo.core.problem import Problem

from ..exceptions import ConfigurationError
from ..population import Interval, freeze, validate_intervals

logger = logging.getLogger(__name__)


class Goal(ABC):
    """
    Abstract fitness function with a thread-safe call counter.

    Subclasses implement :meth:`_evaluate`. Callers use :meth:`evaluate` (or
    call the goal directly), which hands the subclass a read-only copy of the
    chromosome so the fitness can only depend on its content.
    """

    def __init__(self):
        self._call_count = 0
        self._lock = threading.Lock()

    @abstractmethod
    def _evaluate(self, chromosome: np.ndarray) -> float:
        """Compute the fitness of ``chromosome``."""

    def evaluate(self, chromosome) -> float:
        with self._lock:
            self._call_count += 1
        return float(self._evaluate(freeze(chromosome)))

    __call__ = evaluate

    def evaluate_many(
        self, chromosomes: Sequence[np.ndarray], executor: Executor | None = None
    ) -> list[float]:
        """
        Evaluate a batch of chromosomes.

        Args:
            chromosomes: Chromosomes to evaluate.
            executor: Optional ``concurrent.futures`` executor. Results are
                returned in input order either way.

        Returns:
            List of fitness values aligned with ``chromosomes``.
        """
        if executor is None:
            return [self.evaluate(chromosome) for chromosome in chromosomes]
        return list(executor.map(self.evaluate, chromosomes))

    @property
    def call_count(self) -> int:
        with self._lock:
            return self._call_count

    def reset_call_count(self):
        with self._lock:
            self._call_count = 0


class FunctionGoal(Goal):
    """Goal backed by a plain callable."""

    def __init__(self, function: Callable[[np.ndarray], float], name: str | None = None):
        super().__init__()
        if not callable(function):
            raise ConfigurationError(f"Goal function must be callable, got {function!r}")
        self.function = function
        self.name = name or getattr(function, "__name__", type(function).__name__)

    def _evaluate(self, chromosome: np.ndarray) -> float:
        return self.function(chromosome)

    def __repr__(self):
        return f"FunctionGoal({self.name})"


class GoalFromProblem(Goal):
    """
    Adapter exposing a single-objective pymoo problem as a :class:`Goal`.

    Constraints of the problem are ignored; only ``F`` is read.

    Example:
        ```python
        from pymoo.problems import get_problem

        problem = get_problem("rastrigin", n_var=5)
        goal = GoalFromProblem(problem)
        intervals = intervals_from_problem(problem)
        ```
    """

    def __init__(self, problem: Problem):
        super().__init__()
        if problem.n_obj != 1:
            raise ConfigurationError(
                f"Only single-objective problems are supported, got n_obj={problem.n_obj}"
            )
        self.problem = problem
        self.name = type(problem).__name__

    def _evaluate(self, chromosome: np.ndarray) -> float:
        if chromosome.shape[0] != self.problem.n_var:
            raise ValueError(
                f"Chromosome has {chromosome.shape[0]} genes, "
                f"problem expects {self.problem.n_var}"
            )
        values = self.problem.evaluate(np.array(chromosome), return_values_of=["F"])
        return float(np.atleast_1d(values).ravel()[0])

    def __repr__(self):
        return f"GoalFromProblem({self.name})"


def intervals_from_problem(problem: Problem) -> list[Interval]:
    """Read ``(xl, xu)`` bounds of a pymoo problem as a list of intervals."""
    if problem.xl is None or problem.xu is None:
        raise ConfigurationError(f"Problem {type(problem).__name__} has no bounds")
    lower = np.broadcast_to(np.asarray(problem.xl, dtype=np.float64), (problem.n_var,))
    upper = np.broadcast_to(np.asarray(problem.xu, dtype=np.float64), (problem.n_var,))
    return validate_intervals(list(zip(lower.tolist(), upper.tolist())))


def as_goal(objective) -> Goal:
    """Wrap callables and pymoo problems; return goals unchanged."""
    if isinstance(objective, Goal):
        return objective
    if isinstance(objective, Problem):
        return GoalFromProblem(objective)
    return FunctionGoal(objective)
