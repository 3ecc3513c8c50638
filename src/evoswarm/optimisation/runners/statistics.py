"""
Repeated independent trials and their statistical summary.

The :class:`StatisticsRunner` builds a fresh optimizer for every trial from a
factory, runs it, and reduces the per-trial results into a
:class:`StatisticsResult`. Trials are independent: each one receives its own
``numpy.random.SeedSequence`` spawned from the runner's seed, so the set of
trials is reproducible for a given seed whether trials run sequentially or on
a thread pool. Results are always reduced in trial order.

CONVERGENCE:
    Each trial contributes its best-so-far fitness per generation, with the
    initial population at index 0. The average convergence curve at
    generation ``g`` is the mean over the trials that reached ``g`` with a
    valid (finite) value there; it is NaN where no trial qualifies.

SUCCESS:
    A trial succeeds when every configured criterion holds:

    - ``success_threshold``: the final best fitness is at or below it;
    - ``known_optimum`` with ``tolerance``: every gene of the final best
      solution is within ``tolerance`` of the optimum.

    With no criterion configured the success rate is ``None``.

Example:
    ```python
    def factory(seed):
        return GeneticOptimizer(..., seed=seed)

    stats = StatisticsRunner(factory, trial_count=20, seed=1).run(
        success_threshold=1e-3, known_optimum=[1.0], tolerance=1e-3
    )
    print(stats.success_rate, stats.average_convergence[:10])
    ```
"""

import logging
import math
import os
import time
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

import numpy as np

from ..exceptions import ConfigurationError
from .base import BaseOptimizer, OptimizationResult

logger = logging.getLogger(__name__)

OptimizerFactory = Callable[[np.random.SeedSequence], BaseOptimizer]


def average_convergence(convergence: Sequence[Sequence[float]]) -> list[float]:
    """Mean of the valid values at each generation index across trials."""
    length = max((len(trial) for trial in convergence), default=0)
    result = []
    for generation in range(length):
        values = [
            trial[generation]
            for trial in convergence
            if generation < len(trial) and math.isfinite(trial[generation])
        ]
        result.append(float(np.mean(values)) if values else math.nan)
    return result


@dataclass
class StatisticsResult:
    """
    Aggregated outcome of repeated trials.

    Attributes:
        results: Completed trials' results, in trial order.
        run_summaries: One lightweight dictionary per completed trial.
        average_convergence: Mean best-so-far fitness per generation.
        final_fitness_mean: Mean of the trials' final best fitness.
        final_fitness_std: Standard deviation of the final best fitness.
        average_solution: Gene-wise mean of the trials' best solutions.
        solution_std: Gene-wise standard deviation of the best solutions.
        success_rate: Fraction of completed trials meeting the success
            criteria, or ``None`` when none were given.
        total_call_count: Goal evaluations summed over trials.
        average_call_count: Goal evaluations per trial.
        statistical_summary: Objective, timing and generation statistics.
        total_time: Wall-clock seconds for all trials.
        failed_trials: ``(trial_index, error message)`` for trials that raised.
    """

    results: list[OptimizationResult]
    run_summaries: list[dict[str, Any]]
    average_convergence: list[float]
    final_fitness_mean: float
    final_fitness_std: float
    average_solution: np.ndarray
    solution_std: np.ndarray
    success_rate: float | None
    total_call_count: int
    average_call_count: float
    statistical_summary: dict[str, Any]
    total_time: float
    failed_trials: list[tuple[int, str]] = field(default_factory=list)

    @property
    def trial_count(self) -> int:
        return len(self.results) + len(self.failed_trials)

    @property
    def best_result(self) -> OptimizationResult:
        """Completed trial with the lowest final fitness (first one on ties)."""
        return min(
            self.results,
            key=lambda r: r.best_objective if math.isfinite(r.best_objective) else math.inf,
        )


class StatisticsRunner:
    """
    Runs ``trial_count`` independent optimizations.

    Args:
        optimizer_factory: Called with a ``SeedSequence`` per trial; must
            return a new optimizer (with its own goal instance if call counts
            should be per trial).
        trial_count: Number of trials. Must be positive.
        seed: Root seed for the trial seed sequences.
        parallel: Run trials on a thread pool. Threads share one interpreter,
            so a pure-Python goal gains little from this; goals that release
            the GIL (numpy kernels, I/O, external solvers) run concurrently.
            Threads also avoid pickling optimizers, goals and loggers.
        max_workers: Thread count when ``parallel`` is set.

    Raises:
        ConfigurationError: If ``trial_count`` is not positive.
    """

    def __init__(
        self,
        optimizer_factory: OptimizerFactory,
        trial_count: int,
        seed: int | None = None,
        parallel: bool = False,
        max_workers: int | None = None,
    ):
        if trial_count is None or int(trial_count) <= 0:
            raise ConfigurationError(f"trial_count must be positive, got {trial_count}")
        self.optimizer_factory = optimizer_factory
        self.trial_count = int(trial_count)
        self.seed = seed
        self.parallel = parallel
        self.max_workers = max_workers

    def _run_trial(self, index: int, seed: np.random.SeedSequence) -> OptimizationResult:
        optimizer = self.optimizer_factory(seed)
        try:
            return optimizer.run()
        except ConfigurationError:
            raise
        except Exception as e:
            raise RuntimeError(f"Trial {index + 1} failed: {e}") from e

    def run(
        self,
        success_threshold: float | None = None,
        known_optimum: Sequence[float] | None = None,
        tolerance: float | None = None,
    ) -> StatisticsResult:
        if known_optimum is not None and tolerance is None:
            raise ConfigurationError("tolerance is required together with known_optimum")

        seeds = np.random.SeedSequence(self.seed).spawn(self.trial_count)
        logger.info("🔄 Starting %d trials%s", self.trial_count, " in parallel" if self.parallel else "")
        start_time = time.perf_counter()

        completed: dict[int, OptimizationResult] = {}
        failed: list[tuple[int, str]] = []

        if self.parallel:
            max_workers = self.max_workers or min(self.trial_count, max(1, (os.cpu_count() or 2) - 1))
            with ThreadPoolExecutor(max_workers=max_workers) as executor:
                futures = {
                    executor.submit(self._run_trial, index, seed): index
                    for index, seed in enumerate(seeds)
                }
                for future in as_completed(futures):
                    index = futures[future]
                    try:
                        completed[index] = future.result()
                    except RuntimeError as e:
                        logger.error("❌ %s", e)
                        failed.append((index, str(e)))
        else:
            for index, seed in enumerate(seeds):
                try:
                    completed[index] = self._run_trial(index, seed)
                except RuntimeError as e:
                    logger.error("❌ %s", e)
                    failed.append((index, str(e)))
                    continue
                logger.info(
                    "✅ Trial %d/%d: objective %.6g",
                    index + 1,
                    self.trial_count,
                    completed[index].best_objective,
                )

        total_time = time.perf_counter() - start_time
        if not completed:
            raise RuntimeError("All optimization trials failed")

        results = [completed[index] for index in sorted(completed)]
        failed.sort()
        stats = self._reduce(results, success_threshold, known_optimum, tolerance, total_time, failed)

        logger.info(
            "🎯 Trials completed: %d/%d in %.1fs, mean objective %.6g (std %.3g)",
            len(results),
            self.trial_count,
            total_time,
            stats.final_fitness_mean,
            stats.final_fitness_std,
        )
        return stats

    def _reduce(self, results, success_threshold, known_optimum, tolerance, total_time, failed):
        objectives = np.array([r.best_objective for r in results], dtype=np.float64)
        valid_objectives = objectives[np.isfinite(objectives)]
        solutions = [r.best_solution for r in results if r.best_solution.size]
        solution_matrix = np.vstack(solutions) if solutions else np.empty((0, 0))

        successes = [self._is_success(r, success_threshold, known_optimum, tolerance) for r in results]
        success_rate = None
        if success_threshold is not None or known_optimum is not None:
            success_rate = sum(successes) / len(results)

        call_counts = [r.call_count for r in results]
        run_summaries = [
            {
                "run_id": index + 1,
                "objective": r.best_objective,
                "generations": r.generations_completed,
                "time": r.optimization_time,
                "call_count": r.call_count,
                "success": successes[index],
            }
            for index, r in enumerate(results)
        ]

        return StatisticsResult(
            results=results,
            run_summaries=run_summaries,
            average_convergence=average_convergence(
                [r.statistics.convergence() for r in results]
            ),
            final_fitness_mean=float(np.mean(valid_objectives)) if valid_objectives.size else math.nan,
            final_fitness_std=float(np.std(valid_objectives)) if valid_objectives.size else math.nan,
            average_solution=np.mean(solution_matrix, axis=0) if solutions else np.array([]),
            solution_std=np.std(solution_matrix, axis=0) if solutions else np.array([]),
            success_rate=success_rate,
            total_call_count=int(sum(call_counts)),
            average_call_count=float(np.mean(call_counts)),
            statistical_summary=generate_statistical_summary(run_summaries),
            total_time=total_time,
            failed_trials=failed,
        )

    @staticmethod
    def _is_success(result, success_threshold, known_optimum, tolerance) -> bool:
        if not math.isfinite(result.best_objective):
            return False
        if success_threshold is not None and not result.best_objective <= success_threshold:
            return False
        if known_optimum is not None:
            optimum = np.asarray(known_optimum, dtype=np.float64)
            if optimum.shape != result.best_solution.shape:
                raise ConfigurationError(
                    f"known_optimum has {optimum.shape[0]} genes, "
                    f"solutions have {result.best_solution.shape[0]}"
                )
            if not np.all(np.abs(result.best_solution - optimum) <= tolerance):
                return False
        return True


def generate_statistical_summary(run_summaries: list[dict]) -> dict[str, Any]:
    """Objective, timing and generation statistics over run summaries."""
    if not run_summaries:
        return {}

    objectives = [s["objective"] for s in run_summaries if math.isfinite(s["objective"])]
    times = [s["time"] for s in run_summaries]
    generations = [s["generations"] for s in run_summaries]

    summary = {
        "num_runs": len(run_summaries),
        "time_mean": float(np.mean(times)),
        "time_std": float(np.std(times)),
        "time_total": float(np.sum(times)),
        "generations_mean": float(np.mean(generations)),
        "generations_std": float(np.std(generations)),
        "success_rate": sum(1 for s in run_summaries if s["success"]) / len(run_summaries),
    }
    if objectives:
        summary.update({
            "objective_mean": float(np.mean(objectives)),
            "objective_std": float(np.std(objectives)),
            "objective_min": float(np.min(objectives)),
            "objective_max": float(np.max(objectives)),
            "objective_median": float(np.median(objectives)),
        })
    return summary
