"""
Shared driver for population-based optimizers.

Both the genetic algorithm and the particle swarm optimizer follow the same
lifecycle, implemented here once:

    CREATED --initialize()--> INITIALIZED --next_iterations()--> RUNNING
            --stop checker fires--> TERMINATED

``run()`` performs both steps. A terminated run can be continued with
``next_iterations()``, typically after installing a looser stop checker with
``set_stop_checker()``; the generation counter, population and best solution
carry over.

GENERATION TAIL:
    After an algorithm-specific generation step the driver always:

    1. increments the generation counter,
    2. updates the best-so-far individual (it never gets worse),
    3. reports anomalies as warnings,
    4. notifies the loggers with a read-only snapshot,
    5. records run statistics,
    6. asks the stop checker, exactly once.

RANDOMNESS:
    The optimizer owns one ``numpy.random.Generator``. Strategies receive it
    on each call and every draw happens on the driver thread in a fixed order,
    so a seeded run is reproducible even when fitness evaluation is spread
    over a thread pool (``n_workers > 1``). The pool is created on first use
    and shut down when the run terminates.
"""

import logging
import math
import time
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Sequence

import numpy as np

from ..exceptions import ConfigurationError
from ..monitoring import GenerationSnapshot, Logger, LoggerCollection, RunStatistics
from ..population import Individual, find_best, is_better, is_valid_fitness
from ..problems.base import as_goal
from ..stopping import StopChecker

logger = logging.getLogger(__name__)


def as_list(value) -> list:
    """Wrap a single strategy (or None) into a list."""
    if value is None:
        return []
    if isinstance(value, (list, tuple)):
        return list(value)
    return [value]


class OptimizerState(Enum):
    CREATED = "created"
    INITIALIZED = "initialized"
    RUNNING = "running"
    TERMINATED = "terminated"


@dataclass
class OptimizationResult:
    """
    Outcome of a single optimization run.

    Attributes:
        best_solution: Chromosome (or particle position) of the best individual
            seen during the run.
        best_objective: Fitness of ``best_solution``. NaN only if no valid
            fitness was ever observed.
        optimization_time: Wall-clock seconds from initialization to termination.
        generations_completed: Value of the generation counter at termination.
        optimization_history: One dictionary per generation (including the
            initial population as generation 0) with ``best_objective``
            (best so far), ``current_best_objective``, ``mean_objective``,
            ``worst_objective``, ``std_objective``, ``population_size`` and
            ``improvement``.
        call_count: Number of goal evaluations made through the goal.
        algorithm_config: Parameters describing the optimizer.
        convergence_info: Summary of recent improvement.
        seed: Seed the optimizer's generator was built from, if known.
        final_population: Individuals alive at termination.
        statistics: Per-generation fitness record used by the statistics layer.
    """

    best_solution: np.ndarray
    best_objective: float
    optimization_time: float
    generations_completed: int
    optimization_history: list[dict[str, Any]] = field(default_factory=list)
    call_count: int = 0
    algorithm_config: dict[str, Any] = field(default_factory=dict)
    convergence_info: dict[str, Any] = field(default_factory=dict)
    seed: Any = None
    final_population: list[Individual] = field(default_factory=list)
    statistics: RunStatistics = field(default_factory=RunStatistics)


def analyze_convergence(history: list[dict[str, Any]], window: int = 5) -> dict[str, Any]:
    """Flag a run as converged when the best fitness barely moved over the last ``window`` generations."""
    if len(history) < window:
        return {"converged": False, "reason": "Insufficient generations"}

    recent_improvement = sum(entry["improvement"] for entry in history[-window:])
    return {
        "converged": abs(recent_improvement) < 1e-6,
        "recent_improvement": recent_improvement,
        "final_generation": history[-1]["generation"],
        "final_objective": history[-1]["best_objective"],
    }


class BaseOptimizer(ABC):
    """
    Iterate-until-stop driver shared by all optimizers.

    Args:
        goal: A :class:`~evoswarm.optimisation.problems.Goal`, a plain callable
            ``chromosome -> float`` or a single-objective pymoo problem.
        stop_checker: Termination criterion asked once per generation.
        loggers: Observer or list of observers.
        seed: Seed for a new ``numpy.random.default_rng``. Ignored when
            ``rng`` is given.
        rng: Generator to use instead of creating one.
        n_workers: Threads used for batch fitness evaluation.
    """

    algorithm_name = "base"

    def __init__(
        self,
        goal,
        stop_checker: StopChecker,
        loggers: Sequence[Logger] | Logger | None = None,
        seed: int | np.random.SeedSequence | None = None,
        rng: np.random.Generator | None = None,
        n_workers: int = 1,
    ):
        if stop_checker is None:
            raise ConfigurationError("A stop checker is required")
        if n_workers < 1:
            raise ConfigurationError(f"n_workers must be at least 1, got {n_workers}")

        self.goal = as_goal(goal)
        self.stop_checker = stop_checker
        self.loggers = loggers if isinstance(loggers, LoggerCollection) else LoggerCollection(loggers)
        self.seed = seed
        self.rng = rng if rng is not None else np.random.default_rng(seed)
        self.n_workers = int(n_workers)

        self.state = OptimizerState.CREATED
        self.generation = 0
        self.best: Individual | None = None
        self.statistics = RunStatistics()
        self._start_time = None
        self._executor: ThreadPoolExecutor | None = None

    # ------------------------------------------------------------------
    # Algorithm-specific hooks
    # ------------------------------------------------------------------

    @abstractmethod
    def _initialize_population(self):
        """Create and evaluate the starting population."""

    @abstractmethod
    def _next_generation(self):
        """Advance the population by one generation."""

    @abstractmethod
    def _individuals(self) -> list[Individual]:
        """Current population as individuals."""

    def _velocities(self) -> list[np.ndarray]:
        return []

    def _current_best(self) -> Individual | None:
        return find_best(self._individuals())

    def _generation_warnings(self) -> list[str]:
        return []

    def get_algorithm_config(self) -> dict[str, Any]:
        return {"algorithm": self.algorithm_name, "n_workers": self.n_workers}

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def set_stop_checker(self, stop_checker: StopChecker):
        """Replace the stop checker, for example before continuing a terminated run."""
        stop_checker.reset()
        self.stop_checker = stop_checker

    def initialize(self):
        """
        Create and evaluate the starting population and record generation 0.

        Resets the generation counter, best individual, run statistics and the
        goal's call counter, so every run reports only its own evaluations.
        """
        logger.info("🚀 Initializing %s optimizer", self.algorithm_name)
        self.stop_checker.reset()
        self.goal.reset_call_count()
        self.statistics = RunStatistics()
        self.best = None
        self.generation = 0
        self._start_time = time.perf_counter()

        try:
            self._initialize_population()
        except Exception:
            self._shutdown_executor()
            raise
        self._update_best()

        snapshot = self.snapshot()
        self.loggers.start(snapshot)
        self.statistics.record(snapshot)
        self.state = OptimizerState.INITIALIZED
        logger.debug(
            "Initial population of %d, best fitness %s",
            snapshot.population_size,
            snapshot.best_fitness,
        )

    def run(self) -> OptimizationResult:
        """Initialize a fresh run and iterate until the stop checker fires."""
        self.initialize()
        return self.next_iterations()

    def next_iterations(self) -> OptimizationResult:
        """
        Iterate from the current state until the stop checker fires.

        Raises:
            RuntimeError: If the optimizer was never initialized.
            PopulationCollapseError: If selection empties the population.
        """
        if self.state is OptimizerState.CREATED:
            raise RuntimeError("Optimizer is not initialized; call run() or initialize() first")

        self.state = OptimizerState.RUNNING
        try:
            while True:
                self._next_generation()
                self.generation += 1
                self._update_best()

                for message in self._generation_warnings():
                    self._warn(message)
                if self.best is None or not is_valid_fitness(self.best.fitness):
                    self._warn("best fitness is not a finite number")

                snapshot = self.snapshot()
                self.loggers.observe(self.generation, snapshot, self.elapsed)
                self.statistics.record(snapshot)

                if self.stop_checker.should_stop(
                    self.generation, snapshot.best_fitness, snapshot.individuals
                ):
                    break
        finally:
            self._shutdown_executor()

        self.state = OptimizerState.TERMINATED
        result = self._build_result()
        logger.info(
            "✅ %s finished: %d generations, best %.6g, %d goal calls",
            self.algorithm_name,
            result.generations_completed,
            result.best_objective,
            result.call_count,
        )
        self.loggers.finish(result)
        return result

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    @property
    def elapsed(self) -> float:
        if self._start_time is None:
            return 0.0
        return time.perf_counter() - self._start_time

    @property
    def best_fitness(self) -> float:
        return self.best.fitness if self.best is not None else math.nan

    def snapshot(self) -> GenerationSnapshot:
        return GenerationSnapshot.build(
            self.generation, self._individuals(), self.best, self._velocities()
        )

    def _evaluate(self, chromosomes: Sequence[np.ndarray]) -> list[float]:
        if self.n_workers > 1 and len(chromosomes) > 1:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(max_workers=self.n_workers)
            return self.goal.evaluate_many(chromosomes, self._executor)
        return self.goal.evaluate_many(chromosomes)

    def _shutdown_executor(self):
        # The pool is reopened on demand if a terminated run is continued.
        if self._executor is not None:
            self._executor.shutdown(wait=True)
            self._executor = None

    def _update_best(self):
        candidate = self._current_best()
        if candidate is None:
            return
        if self.best is None or is_better(candidate.fitness, self.best.fitness):
            self.best = candidate

    def _warn(self, message: str):
        logger.warning("⚠️ Generation %d: %s", self.generation, message)
        self.loggers.warning(self.generation, message)

    def _build_result(self) -> OptimizationResult:
        history = self.statistics.as_history()
        best = self.best
        return OptimizationResult(
            best_solution=np.array(best.chromosome) if best is not None else np.array([]),
            best_objective=best.fitness if best is not None else math.nan,
            optimization_time=self.elapsed,
            generations_completed=self.generation,
            optimization_history=history,
            call_count=self.goal.call_count,
            algorithm_config=self.get_algorithm_config(),
            convergence_info=analyze_convergence(history),
            seed=self.seed,
            final_population=self._individuals(),
            statistics=self.statistics,
        )
