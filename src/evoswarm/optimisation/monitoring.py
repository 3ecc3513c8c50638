"""
Observation of optimization runs.

The optimizers publish a :class:`GenerationSnapshot` after initialization
(generation 0) and after every completed generation. Snapshots are frozen
dataclasses holding tuples of immutable :class:`Individual` objects and
read-only arrays, so observers cannot change the run they are watching.

LOGGER HOOKS:
    Observers derive from :class:`Logger` and may override any of:

    - ``start(snapshot)``: called once with the initial (generation 0) state
    - ``observe(generation, snapshot, elapsed)``: once per completed generation
    - ``warning(generation, message)``: recoverable anomalies (shrinking
      population, non-finite best fitness)
    - ``finish(result)``: once with the final ``OptimizationResult``

    Several observers are combined with :class:`LoggerCollection`, which
    forwards every hook to each member in order.

RUN STATISTICS:
    :class:`RunStatistics` is not a logger: the optimizer owns one per run
    and records the per-generation best and mean fitness that the statistics
    aggregator later averages across trials.
"""

import logging
import time
from dataclasses import dataclass, field
from typing import Any, Sequence

import numpy as np

from .population import Individual, find_best, fitness_key, freeze

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class GenerationSnapshot:
    """
    Read-only view of an optimizer after one generation.

    Attributes:
        generation: Generation index (0 for the initial population).
        individuals: Current population, or the particles' current positions
            and fitness for the swarm optimizer.
        best: Best individual seen since the run started.
        velocities: Particle velocities (empty for the genetic algorithm).
    """

    generation: int
    individuals: tuple[Individual, ...]
    best: Individual | None
    velocities: tuple[np.ndarray, ...] = ()

    @classmethod
    def build(cls, generation, individuals, best, velocities=()):
        return cls(
            generation=int(generation),
            individuals=tuple(individuals),
            best=best,
            velocities=tuple(freeze(v) for v in velocities),
        )

    @property
    def population_size(self) -> int:
        return len(self.individuals)

    @property
    def fitness(self) -> np.ndarray:
        values = np.array([individual.fitness for individual in self.individuals], dtype=np.float64)
        values.flags.writeable = False
        return values

    @property
    def valid_fitness(self) -> np.ndarray:
        values = self.fitness
        return values[np.isfinite(values)]

    @property
    def best_fitness(self) -> float:
        return self.best.fitness if self.best is not None else float("nan")

    @property
    def current_best(self) -> Individual | None:
        """Best individual of this generation only."""
        return find_best(self.individuals)


@dataclass
class GenerationRecord:
    generation: int
    best_fitness: float
    best_chromosome: np.ndarray | None
    current_best_fitness: float
    mean_fitness: float
    worst_fitness: float
    std_fitness: float
    population_size: int


@dataclass
class RunStatistics:
    """
    Per-generation fitness record of a single run.

    ``best_fitness`` of a record is the best fitness seen so far (so it never
    increases), ``current_best_fitness`` the best of that generation alone.
    Mean, worst and standard deviation are computed over valid fitness values
    and are NaN when the generation has none.
    """

    records: list[GenerationRecord] = field(default_factory=list)

    def record(self, snapshot: GenerationSnapshot):
        valid = snapshot.valid_fitness
        current_best = snapshot.current_best
        has_valid = valid.size > 0
        self.records.append(
            GenerationRecord(
                generation=snapshot.generation,
                best_fitness=snapshot.best_fitness,
                best_chromosome=None if snapshot.best is None else snapshot.best.chromosome,
                current_best_fitness=current_best.fitness if current_best else float("nan"),
                mean_fitness=float(np.mean(valid)) if has_valid else float("nan"),
                worst_fitness=float(np.max(valid)) if has_valid else float("nan"),
                std_fitness=float(np.std(valid)) if has_valid else float("nan"),
                population_size=snapshot.population_size,
            )
        )

    def __len__(self):
        return len(self.records)

    @property
    def best_fitness(self) -> dict[int, float]:
        return {record.generation: record.best_fitness for record in self.records}

    @property
    def mean_fitness(self) -> dict[int, float]:
        return {record.generation: record.mean_fitness for record in self.records}

    def convergence(self) -> list[float]:
        """Best-so-far fitness indexed by generation."""
        return [record.best_fitness for record in self.records]

    def as_history(self) -> list[dict[str, Any]]:
        """Generation-by-generation progress as plain dictionaries."""
        history = []
        for index, record in enumerate(self.records):
            entry = {
                "generation": record.generation,
                "best_objective": record.best_fitness,
                "current_best_objective": record.current_best_fitness,
                "worst_objective": record.worst_fitness,
                "mean_objective": record.mean_fitness,
                "std_objective": record.std_fitness,
                "population_size": record.population_size,
            }
            if index > 0:
                previous = self.records[index - 1].best_fitness
                entry["improvement"] = (
                    previous - record.best_fitness
                    if np.isfinite(previous) and np.isfinite(record.best_fitness)
                    else 0.0
                )
            else:
                entry["improvement"] = 0.0
            history.append(entry)
        return history


class Logger:
    """Base observer. Every hook is a no-op."""

    def start(self, snapshot: GenerationSnapshot):
        pass

    def observe(self, generation: int, snapshot: GenerationSnapshot, elapsed: float):
        pass

    def warning(self, generation: int, message: str):
        pass

    def finish(self, result):
        pass


class LoggerCollection(Logger):
    """
    Forwards every hook to a list of loggers, in order.

    Supports ``len``, iteration and indexing over the wrapped loggers.
    """

    def __init__(self, loggers: Sequence[Logger] | Logger | None = None):
        if loggers is None:
            loggers = []
        elif isinstance(loggers, Logger):
            loggers = [loggers]
        self.loggers = list(loggers)

    def append(self, observer: Logger):
        self.loggers.append(observer)

    def start(self, snapshot):
        for observer in self.loggers:
            observer.start(snapshot)

    def observe(self, generation, snapshot, elapsed):
        for observer in self.loggers:
            observer.observe(generation, snapshot, elapsed)

    def warning(self, generation, message):
        for observer in self.loggers:
            observer.warning(generation, message)

    def finish(self, result):
        for observer in self.loggers:
            observer.finish(result)

    def __len__(self):
        return len(self.loggers)

    def __iter__(self):
        return iter(self.loggers)

    def __getitem__(self, index):
        return self.loggers[index]


class VerboseLogger(Logger):
    """
    Writes progress to a :mod:`logging` logger.

    Args:
        target: Logger to write to. Defaults to this module's logger.
        frequency: Log every ``frequency``-th generation.
        level: Logging level for per-generation lines.
    """

    def __init__(self, target: logging.Logger | None = None, frequency: int = 1, level: int = logging.INFO):
        self.target = target or logger
        self.frequency = max(1, int(frequency))
        self.level = level

    def start(self, snapshot):
        self.target.log(
            self.level,
            "🚀 Initial population: %d individuals, best %.6g",
            snapshot.population_size,
            snapshot.best_fitness,
        )

    def observe(self, generation, snapshot, elapsed):
        if generation % self.frequency != 0:
            return
        valid = snapshot.valid_fitness
        mean = float(np.mean(valid)) if valid.size else float("nan")
        self.target.log(
            self.level,
            "   Gen %d: best=%.6g mean=%.6g size=%d (%.2fs)",
            generation,
            snapshot.best_fitness,
            mean,
            snapshot.population_size,
            elapsed,
        )

    def warning(self, generation, message):
        self.target.warning("⚠️ Gen %d: %s", generation, message)

    def finish(self, result):
        self.target.log(
            self.level,
            "✅ Finished after %d generations: best %.6g at %s",
            result.generations_completed,
            result.best_objective,
            np.array2string(result.best_solution, precision=6),
        )


class ResultOnlyLogger(Logger):
    """Logs only the final result."""

    def __init__(self, target: logging.Logger | None = None):
        self.target = target or logger

    def finish(self, result):
        self.target.info(
            "🏆 Best objective %.6g at %s (%d goal calls)",
            result.best_objective,
            np.array2string(result.best_solution, precision=6),
            result.call_count,
        )


class TimeLogger(Logger):
    """Logs the total wall-clock time of the run."""

    def __init__(self, target: logging.Logger | None = None):
        self.target = target or logger
        self.start_time = None
        self.total_time = None

    def start(self, snapshot):
        self.start_time = time.perf_counter()

    def finish(self, result):
        if self.start_time is None:
            self.total_time = result.optimization_time
        else:
            self.total_time = time.perf_counter() - self.start_time
        self.target.info("⏱️ Optimization time: %.3fs", self.total_time)


class RuntimeLogger(Logger):
    """
    Records timing and warnings of a run.

    Attributes:
        generation_times: Cumulative elapsed seconds at the end of each generation.
        warnings: ``(generation, message)`` pairs received during the run.
    """

    def __init__(self):
        self.generation_times: list[float] = []
        self.warnings: list[tuple[int, str]] = []

    def start(self, snapshot):
        self.generation_times = []
        self.warnings = []

    def observe(self, generation, snapshot, elapsed):
        self.generation_times.append(float(elapsed))

    def warning(self, generation, message):
        self.warnings.append((generation, message))

    def performance_stats(self) -> dict[str, float]:
        count = len(self.generation_times)
        total = self.generation_times[-1] if count else 0.0
        return {
            "total_time": total,
            "num_generations": count,
            "avg_time_per_generation": total / max(1, count),
            "generations_per_second": count / max(0.001, total),
        }


class BestSolutionsTracker(Logger):
    """
    Keeps the best ``max_solutions`` unique solutions seen during a run.

    Each generation contributes at most ``max_solutions`` candidates with a
    valid fitness. A candidate equal (same chromosome and fitness) to a tracked
    solution is ignored. The tracked list stays sorted by fitness, best first.
    """

    def __init__(self, max_solutions: int = 5):
        self.max_solutions = max_solutions
        self.best_solutions: list[dict[str, Any]] = []

    def start(self, snapshot):
        self.best_solutions = []
        self.add_generation_solutions(snapshot)

    def observe(self, generation, snapshot, elapsed):
        self.add_generation_solutions(snapshot)

    def add_generation_solutions(self, snapshot: GenerationSnapshot):
        candidates = [individual for individual in snapshot.individuals if individual.is_valid]
        candidates.sort(key=lambda individual: fitness_key(individual.fitness))

        for individual in candidates[: self.max_solutions]:
            is_duplicate = any(
                existing["objective"] == individual.fitness
                and np.array_equal(existing["solution"], individual.chromosome)
                for existing in self.best_solutions
            )
            if not is_duplicate:
                self.best_solutions.append(
                    {
                        "solution": individual.chromosome,
                        "objective": individual.fitness,
                        "generation_found": snapshot.generation,
                    }
                )

        self.best_solutions.sort(key=lambda solution: solution["objective"])
        del self.best_solutions[self.max_solutions:]

    def get_best_solutions(self) -> list[dict]:
        return [solution.copy() for solution in self.best_solutions]

    def get_count(self) -> int:
        return len(self.best_solutions)
