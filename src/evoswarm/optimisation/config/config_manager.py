"""
Configuration data classes and management for optimization.

This module defines structured configuration classes for the genetic
algorithm and particle swarm optimizers and provides validation, YAML
loading, and factories that turn a configuration into ready-to-run
optimizers.

The configuration system supports:
- Search space definition (objective function, dimension, bounds)
- GA operators (pairing, cross, mutation, interval checks)
- PSO parameters (inertia schedule, coefficients, velocity clamps)
- Termination criteria (generations, target, stagnation, time limits)
- Progress monitoring and logging options
- Multi-run statistical analysis

Example YAML Configuration:
```yaml
problem:
  objective:
    type: "rastrigin"          # built-in name, or source: pymoo
    n_var: 5
    bounds: [-5.12, 5.12]      # or intervals: [[-5.12, 5.12], ...]

optimization:
  algorithm:
    type: "GA"
    pop_size: 100
    pairing:
      type: "tournament"
      families_count: 50
      rounds_count: 2
    cross:
      type: "exp"
      mean: 0.5
    mutation:
      probability: 15.0
      gene_count: 1
      bit_count: 2
  termination:
    max_generations: 500
    target_objective: 1e-6
  monitoring:
    progress_frequency: 10
  multi_run:
    num_runs: 20
    success_threshold: 1e-3

seed: 42
```

Usage:
```python
config_manager = OptimizationConfigManager('config.yaml')
optimizer = config_manager.create_optimizer(seed=42)
result = optimizer.run()
```
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import numpy as np
import yaml
from pymoo.problems import get_problem

from ..exceptions import ConfigurationError
from ..genetic import (
    BitwiseMutation,
    CheckChromoInterval,
    CheckChromoIntervalSelection,
    CrossBitwise,
    CrossMean,
    FloatCrossExp,
    FloatCrossGeometricMean,
    KillFitnessNaN,
    LimitPopulation,
    RandomCreator,
    RandomPairing,
    Tournament,
    VecCrossAllGenes,
    VecMutation,
)
from ..monitoring import BestSolutionsTracker, Logger, RuntimeLogger, VerboseLogger
from ..objectives.functions import BUILTIN_OBJECTIVES, DEFAULT_BOUNDS, get_objective, known_optimum
from ..population import Interval, validate_intervals
from ..problems.base import FunctionGoal, Goal, GoalFromProblem, intervals_from_problem
from ..stopping import CompositeAny, GoalNotChange, MaxIterations, StopChecker, Threshold, TimeLimit
from ..swarm import (
    CanonicalVelocityCalculator,
    ConstInertia,
    InertiaVelocityCalculator,
    LinearInertia,
    MaxVelocityAbs,
    MaxVelocityDimensions,
    MoveToBoundary,
    NegativeReinforcementVelocityCalculator,
    RandomCoordinatesInitializer,
    RandomVelocityInitializer,
    ZeroVelocityInitializer,
)

logger = logging.getLogger(__name__)

SUPPORTED_ALGORITHMS = ("GA", "PSO")


@dataclass
class SearchSpaceConfig:
    """
    Objective function and search space.

    Attributes:
        objective: Name of a built-in objective (``paraboloid``, ``schwefel``,
            ``rastrigin``, ``rosenbrock``) or of a pymoo problem.
        source: ``"builtin"`` or ``"pymoo"``.
        n_var: Number of decision variables. Optional for pymoo problems
            that fix their own dimension.
        intervals: Explicit ``(min, max)`` per variable. When omitted, the
            scalar ``bounds`` (or the objective's conventional bounds) are
            repeated ``n_var`` times. Ignored for pymoo problems, which carry
            their own bounds.
        problem_kwargs: Extra keyword arguments for ``pymoo.problems.get_problem``.
    """

    objective: str
    source: str = "builtin"
    n_var: int | None = None
    intervals: list[Interval] | None = None
    bounds: tuple[float, float] | None = None
    problem_kwargs: dict[str, Any] = field(default_factory=dict)

    def __post_init__(self):
        if self.source not in ("builtin", "pymoo"):
            raise ConfigurationError(f"Objective source must be 'builtin' or 'pymoo', got '{self.source}'")

        if self.source == "builtin":
            if self.objective not in BUILTIN_OBJECTIVES:
                raise ConfigurationError(
                    f"Unknown objective '{self.objective}'. Available: {sorted(BUILTIN_OBJECTIVES)}"
                )
            if self.intervals is None:
                if self.n_var is None or self.n_var < 1:
                    raise ConfigurationError("n_var must be a positive integer when intervals are not given")
                bounds = self.bounds or DEFAULT_BOUNDS[self.objective]
                self.intervals = [tuple(bounds)] * self.n_var
            self.intervals = validate_intervals(self.intervals)
            if self.n_var is None:
                self.n_var = len(self.intervals)
            elif self.n_var != len(self.intervals):
                raise ConfigurationError(
                    f"n_var ({self.n_var}) does not match the number of intervals ({len(self.intervals)})"
                )


@dataclass
class GAConfig:
    """
    Genetic algorithm configuration.

    Attributes:
        pop_size: Target population size kept by ``LimitPopulation``.
        pairing: ``"tournament"`` or ``"random"``.
        families_count: Families per generation (tournament only). Defaults
            to half the population.
        rounds_count: Tournament challengers per partner.
        partners_count: Parents per family.
        cross: ``"exp"``, ``"mean"``, ``"geometric_mean"`` or ``"bitwise"``.
        cross_mean: Mean of the exponential blend factor (``"exp"`` only).
        mutation_probability: Percentage of children mutated.
        mutation_gene_count: Genes mutated per mutated child.
        mutation_bit_count: Bits flipped per mutated gene.
        check_intervals: Reject children and individuals outside the bounds.
    """

    pop_size: int
    pairing: str = "tournament"
    families_count: int | None = None
    rounds_count: int = 2
    partners_count: int = 2
    cross: str = "exp"
    cross_mean: float = 0.5
    mutation_probability: float = 15.0
    mutation_gene_count: int = 1
    mutation_bit_count: int = 2
    check_intervals: bool = True

    def __post_init__(self):
        if self.pop_size < 2:
            raise ConfigurationError("Population size must be at least 2")
        if self.pairing not in ("tournament", "random"):
            raise ConfigurationError(f"Pairing must be 'tournament' or 'random', got '{self.pairing}'")
        if self.families_count is None:
            self.families_count = max(1, self.pop_size // 2)
        if self.families_count < 1:
            raise ConfigurationError("families_count must be positive")
        if self.rounds_count < 0:
            raise ConfigurationError("rounds_count cannot be negative")
        if self.partners_count < 2:
            raise ConfigurationError("partners_count must be at least 2")
        if self.partners_count != 2 and self.cross in ("exp", "bitwise"):
            raise ConfigurationError(f"Cross '{self.cross}' requires exactly two partners")
        if self.cross not in ("exp", "mean", "geometric_mean", "bitwise"):
            raise ConfigurationError(
                f"Cross must be one of 'exp', 'mean', 'geometric_mean', 'bitwise', got '{self.cross}'"
            )
        if self.cross_mean <= 0:
            raise ConfigurationError("cross_mean must be positive")
        if not 0.0 <= self.mutation_probability <= 100.0:
            raise ConfigurationError("Mutation probability must be a percentage in [0, 100]")
        if self.mutation_gene_count < 1 or self.mutation_bit_count < 1:
            raise ConfigurationError("Mutation gene and bit counts must be positive")


PSO_VARIANTS = ("inertia", "canonical", "negative_reinforcement")


@dataclass
class PSOConfig:
    """
    Particle Swarm Optimization configuration.

    INERTIA:
        With only ``inertia_weight`` the weight is constant. Setting
        ``inertia_weight_final`` makes it decrease linearly from
        ``inertia_weight`` to ``inertia_weight_final`` over the configured
        maximum number of generations.

    VARIANTS:
        ``"inertia"`` uses the inertia weight update, ``"canonical"`` the
        constriction factor update driven by ``alpha`` (requires
        ``cognitive_coeff + social_coeff > 4``). ``"negative_reinforcement"``
        adds a pull towards the current best particle and pushes away from
        the personal, current and global worst positions; its constriction
        factor comes from ``alpha`` and the three attraction coefficients
        (their sum must exceed 4).

    Attributes:
        pop_size: Number of particles.
        inertia_weight: Initial or fixed inertia weight.
        inertia_weight_final: Final inertia weight for the linear schedule.
        cognitive_coeff: Attraction to the personal best (c1).
        social_coeff: Attraction to the global best (c2).
        variant: ``"inertia"``, ``"canonical"`` or ``"negative_reinforcement"``.
        alpha: Constriction parameter for the constricted variants.
        current_best_coeff: Attraction to the current best particle.
        worst_personal_coeff: Repulsion from the personal worst.
        worst_current_coeff: Repulsion from the current worst particle.
        worst_global_coeff: Repulsion from the global worst.
        max_velocity: Scalar clamp on the velocity norm, or one clamp per
            dimension.
        move_to_boundary: Clamp positions into the search space.
        initial_velocity: ``"zero"`` or ``"random"``.
    """

    pop_size: int
    inertia_weight: float = 0.9
    inertia_weight_final: float | None = None
    cognitive_coeff: float = 2.0
    social_coeff: float = 2.0
    variant: str = "inertia"
    alpha: float = 0.9
    current_best_coeff: float = 0.0
    worst_personal_coeff: float = 0.0
    worst_current_coeff: float = 0.0
    worst_global_coeff: float = 0.0
    max_velocity: float | list[float] | None = None
    move_to_boundary: bool = True
    initial_velocity: str = "zero"

    def __post_init__(self):
        if self.pop_size < 1:
            raise ConfigurationError("Population size must be positive")
        if not 0.0 <= self.inertia_weight <= 2.0:
            raise ConfigurationError("Inertia weight should be in range [0.0, 2.0]")
        if self.inertia_weight_final is not None and not 0.0 <= self.inertia_weight_final <= self.inertia_weight:
            raise ConfigurationError("Final inertia weight should be in range [0.0, inertia_weight]")
        if not 0.0 <= self.cognitive_coeff <= 5.0:
            raise ConfigurationError("Cognitive coefficient should be in range [0.0, 5.0]")
        if not 0.0 <= self.social_coeff <= 5.0:
            raise ConfigurationError("Social coefficient should be in range [0.0, 5.0]")
        if self.variant not in PSO_VARIANTS:
            raise ConfigurationError(f"PSO variant must be one of {PSO_VARIANTS}, got '{self.variant}'")
        for name in ("current_best_coeff", "worst_personal_coeff", "worst_current_coeff", "worst_global_coeff"):
            if not 0.0 <= getattr(self, name) <= 5.0:
                raise ConfigurationError(f"{name} should be in range [0.0, 5.0]")
        if self.variant != "inertia" and not 0.0 < self.alpha < 1.0:
            raise ConfigurationError("alpha should be in range (0.0, 1.0)")
        if self.variant == "negative_reinforcement" and self.attraction_sum <= 4.0:
            raise ConfigurationError(
                "negative_reinforcement requires cognitive_coeff + current_best_coeff + social_coeff > 4"
            )
        if self.initial_velocity not in ("zero", "random"):
            raise ConfigurationError("initial_velocity must be 'zero' or 'random'")
        if isinstance(self.max_velocity, (int, float)) and self.max_velocity <= 0:
            raise ConfigurationError("max_velocity must be positive")

    @property
    def attraction_sum(self) -> float:
        return self.cognitive_coeff + self.current_best_coeff + self.social_coeff

    @property
    def constriction(self) -> float:
        """``2 * alpha / (phi - 2)`` with ``phi`` the sum of the attraction coefficients."""
        return 2.0 * self.alpha / (self.attraction_sum - 2.0)


@dataclass
class TerminationConfig:
    """
    Termination criteria configuration.

    The optimization stops when the FIRST active criterion is met:
    1. max_generations reached (always active)
    2. target_objective reached (if specified)
    3. best objective moved by less than convergence_tolerance for more
       than convergence_patience generations (if patience is specified)
    4. max_time_minutes exceeded (if specified)
    """

    max_generations: int
    target_objective: float | None = None
    convergence_tolerance: float = 1e-6
    convergence_patience: int | None = None
    max_time_minutes: float | None = None

    def __post_init__(self):
        if self.max_generations < 1:
            raise ConfigurationError("Max generations must be positive")
        if self.max_time_minutes is not None and self.max_time_minutes <= 0:
            raise ConfigurationError("Max time must be positive")
        if self.convergence_tolerance < 0:
            raise ConfigurationError("Convergence tolerance cannot be negative")
        if self.convergence_patience is not None and self.convergence_patience < 1:
            raise ConfigurationError("Convergence patience must be positive")


@dataclass
class MonitoringConfig:
    """Progress reporting options."""

    progress_frequency: int = 10
    save_history: bool = True
    track_best_n: int = 5
    log_level: str = "INFO"

    def __post_init__(self):
        if self.progress_frequency < 1:
            raise ConfigurationError("Progress frequency must be positive")
        if self.track_best_n < 0:
            raise ConfigurationError("track_best_n cannot be negative")
        valid_log_levels = ["DEBUG", "INFO", "WARNING", "ERROR"]
        if self.log_level not in valid_log_levels:
            raise ConfigurationError(f"Log level must be one of {valid_log_levels}")


@dataclass
class MultiRunConfig:
    """
    Repeated-trial configuration.

    Attributes:
        num_runs: Number of independent trials.
        parallel: Run trials on a thread pool.
        success_threshold: A trial succeeds if its best objective is at or
            below this value.
        known_optimum: Location of the optimum, or ``"auto"`` to use the
            built-in objective's known optimum.
        tolerance: Per-gene distance to ``known_optimum`` counted as success.
    """

    num_runs: int = 5
    parallel: bool = False
    success_threshold: float | None = None
    known_optimum: list[float] | str | None = None
    tolerance: float | None = None

    def __post_init__(self):
        if self.num_runs < 1:
            raise ConfigurationError("Number of runs must be positive")
        if self.num_runs > 1000:
            raise ConfigurationError("Number of runs should not exceed 1000")
        if self.known_optimum is not None and self.tolerance is None:
            raise ConfigurationError("tolerance is required together with known_optimum")
        if self.tolerance is not None and self.tolerance < 0:
            raise ConfigurationError("tolerance cannot be negative")


def _as_float(value, name):
    # PyYAML reads "1e-6" (no dot) as a string
    if value is None:
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        raise ConfigurationError(f"'{name}' must be a number, got {value!r}") from None


class OptimizationConfigManager:
    """
    Configuration manager for evoswarm optimizations.

    Loads a configuration from a YAML file or a dictionary, validates it into
    structured dataclasses, and builds the goal, stop checker, loggers and
    optimizer it describes.

    Configuration Structure:
        ```yaml
        problem:
          objective: {...}      # Objective and search space
        optimization:
          algorithm: {...}      # GA or PSO parameters
          termination: {...}    # Stopping criteria
          monitoring: {...}     # Progress reporting
          multi_run: {...}      # Repeated trials
          n_workers: 1          # Threads for fitness evaluation
        seed: 42                # Optional
        ```
    """

    def __init__(self, config_path: str | None = None, config_dict: dict | None = None):
        """
        Initialize configuration manager.

        Args:
            config_path: Path to YAML configuration file
            config_dict: Configuration dictionary (alternative to file)

        Raises:
            FileNotFoundError: If config_path doesn't exist
            ValueError: If both or neither config sources are provided, or
                the configuration is invalid (ConfigurationError)
            yaml.YAMLError: If the YAML file is malformed
        """
        if config_path and config_dict:
            raise ValueError("Provide either config_path or config_dict, not both")

        if not config_path and not config_dict:
            raise ValueError(
                "Configuration is required. Provide either:\n"
                "  - config_path: Path to YAML configuration file\n"
                "  - config_dict: Configuration dictionary\n"
                "Example: OptimizationConfigManager('my_config.yaml')"
            )

        if config_path:
            self.config = self._load_yaml_config(config_path)
        else:
            self.config = config_dict
            logger.info("📋 Using provided configuration dictionary")

        self._validate_config()
        self._setup_structured_configs()

    def _load_yaml_config(self, config_path: str) -> dict[str, Any]:
        """Load configuration from YAML file with error handling."""
        config_file = Path(config_path)

        if not config_file.exists():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            with open(config_file) as f:
                config = yaml.safe_load(f)
        except yaml.YAMLError as e:
            raise yaml.YAMLError(f"Invalid YAML in {config_path}: {e}")

        if not isinstance(config, dict):
            raise ConfigurationError(f"Configuration must be a dictionary, got {type(config)}")

        logger.info(f"📂 Loaded configuration from {config_path}")
        return config

    def _validate_config(self):
        """Validate configuration structure and required fields."""
        for section in ["problem", "optimization"]:
            if section not in self.config:
                raise ConfigurationError(f"Missing required configuration section: '{section}'")

        if "objective" not in self.config["problem"]:
            raise ConfigurationError("Missing 'objective' in problem configuration")

        opt_config = self.config["optimization"]
        if "algorithm" not in opt_config:
            raise ConfigurationError("Missing required optimization section: 'algorithm'")

        algorithm = opt_config["algorithm"].get("type", "GA")
        if algorithm not in SUPPORTED_ALGORITHMS:
            raise ConfigurationError(
                f"Algorithm '{algorithm}' not supported. Choose one of {SUPPORTED_ALGORITHMS}"
            )

    def _setup_structured_configs(self):
        """Setup structured configuration objects with validation."""
        obj_config = self.config["problem"]["objective"]
        if "type" not in obj_config:
            raise ConfigurationError("Missing required parameter 'type' in objective configuration")

        bounds = obj_config.get("bounds")
        self.search_space_config = SearchSpaceConfig(
            objective=obj_config["type"],
            source=obj_config.get("source", "builtin"),
            n_var=obj_config.get("n_var"),
            intervals=obj_config.get("intervals"),
            bounds=tuple(_as_float(b, "bounds") for b in bounds) if bounds else None,
            problem_kwargs=obj_config.get("problem_kwargs", {}),
        )

        opt_config = self.config["optimization"]
        alg_config = opt_config["algorithm"]
        self.algorithm = alg_config.get("type", "GA")

        if "pop_size" not in alg_config:
            raise ConfigurationError(
                "Missing required parameter 'pop_size' in algorithm configuration.\n"
                "Example:\n"
                "optimization:\n"
                "  algorithm:\n"
                "    pop_size: 50"
            )

        self.ga_config = None
        self.pso_config = None
        if self.algorithm == "GA":
            pairing = alg_config.get("pairing", {})
            cross = alg_config.get("cross", {})
            mutation = alg_config.get("mutation", {})
            self.ga_config = GAConfig(
                pop_size=alg_config["pop_size"],
                pairing=pairing.get("type", "tournament"),
                families_count=pairing.get("families_count"),
                rounds_count=pairing.get("rounds_count", 2),
                partners_count=pairing.get("partners_count", 2),
                cross=cross.get("type", "exp"),
                cross_mean=_as_float(cross.get("mean", 0.5), "cross.mean"),
                mutation_probability=_as_float(mutation.get("probability", 15.0), "mutation.probability"),
                mutation_gene_count=mutation.get("gene_count", 1),
                mutation_bit_count=mutation.get("bit_count", 2),
                check_intervals=alg_config.get("check_intervals", True),
            )
        else:
            self.pso_config = PSOConfig(
                pop_size=alg_config["pop_size"],
                inertia_weight=_as_float(alg_config.get("inertia_weight", 0.9), "inertia_weight"),
                inertia_weight_final=_as_float(alg_config.get("inertia_weight_final"), "inertia_weight_final"),
                cognitive_coeff=_as_float(alg_config.get("cognitive_coeff", 2.0), "cognitive_coeff"),
                social_coeff=_as_float(alg_config.get("social_coeff", 2.0), "social_coeff"),
                variant=alg_config.get("variant", "inertia"),
                alpha=_as_float(alg_config.get("alpha", 0.9), "alpha"),
                current_best_coeff=_as_float(alg_config.get("current_best_coeff", 0.0), "current_best_coeff"),
                worst_personal_coeff=_as_float(alg_config.get("worst_personal_coeff", 0.0), "worst_personal_coeff"),
                worst_current_coeff=_as_float(alg_config.get("worst_current_coeff", 0.0), "worst_current_coeff"),
                worst_global_coeff=_as_float(alg_config.get("worst_global_coeff", 0.0), "worst_global_coeff"),
                max_velocity=alg_config.get("max_velocity"),
                move_to_boundary=alg_config.get("move_to_boundary", True),
                initial_velocity=alg_config.get("initial_velocity", "zero"),
            )

        term_config = opt_config.get("termination", {})
        if "max_generations" not in term_config:
            raise ConfigurationError(
                "Missing required parameter 'max_generations' in termination configuration.\n"
                "Example:\n"
                "optimization:\n"
                "  termination:\n"
                "    max_generations: 100"
            )

        self.termination_config = TerminationConfig(
            max_generations=term_config["max_generations"],
            target_objective=_as_float(term_config.get("target_objective"), "target_objective"),
            convergence_tolerance=_as_float(term_config.get("convergence_tolerance", 1e-6), "convergence_tolerance"),
            convergence_patience=term_config.get("convergence_patience"),
            max_time_minutes=_as_float(term_config.get("max_time_minutes"), "max_time_minutes"),
        )

        mon_config = opt_config.get("monitoring", {})
        self.monitoring_config = MonitoringConfig(
            progress_frequency=mon_config.get("progress_frequency", 10),
            save_history=mon_config.get("save_history", True),
            track_best_n=mon_config.get("track_best_n", 5),
            log_level=mon_config.get("log_level", "INFO"),
        )

        multi_config = opt_config.get("multi_run", {})
        self.multi_run_config = MultiRunConfig(
            num_runs=multi_config.get("num_runs", 5),
            parallel=multi_config.get("parallel", False),
            success_threshold=_as_float(multi_config.get("success_threshold"), "success_threshold"),
            known_optimum=multi_config.get("known_optimum"),
            tolerance=_as_float(multi_config.get("tolerance"), "tolerance"),
        )

        self.n_workers = opt_config.get("n_workers", 1)
        if self.n_workers < 1:
            raise ConfigurationError("n_workers must be at least 1")
        self.seed = self.config.get("seed")

        # Bounds of pymoo problems are only known once the problem is built
        self._problem = None
        if self.search_space_config.source == "pymoo":
            self._problem = self._create_pymoo_problem()
            self.search_space_config.intervals = intervals_from_problem(self._problem)
            self.search_space_config.n_var = len(self.search_space_config.intervals)

    # ------------------------------------------------------------------
    # Accessors
    # ------------------------------------------------------------------

    def get_search_space_config(self) -> SearchSpaceConfig:
        return self.search_space_config

    def get_ga_config(self) -> GAConfig | None:
        """Get GA configuration (None for PSO configurations)."""
        return self.ga_config

    def get_pso_config(self) -> PSOConfig | None:
        """Get PSO configuration (None for GA configurations)."""
        return self.pso_config

    def get_termination_config(self) -> TerminationConfig:
        return self.termination_config

    def get_monitoring_config(self) -> MonitoringConfig:
        return self.monitoring_config

    def get_multi_run_config(self) -> MultiRunConfig:
        return self.multi_run_config

    def get_intervals(self) -> list[Interval]:
        return list(self.search_space_config.intervals)

    def get_known_optimum(self) -> np.ndarray | None:
        """Configured optimum location, resolving ``"auto"`` for built-in objectives."""
        optimum = self.multi_run_config.known_optimum
        if optimum is None:
            return None
        if optimum == "auto":
            space = self.search_space_config
            if space.source != "builtin":
                raise ConfigurationError("known_optimum 'auto' is only available for built-in objectives")
            return known_optimum(space.objective, space.n_var)
        optimum = np.asarray(optimum, dtype=np.float64)
        if optimum.shape != (self.search_space_config.n_var,):
            raise ConfigurationError(
                f"known_optimum has {optimum.size} values, expected {self.search_space_config.n_var}"
            )
        return optimum

    def get_full_config(self) -> dict[str, Any]:
        """Get complete configuration dictionary."""
        return self.config.copy()

    # ------------------------------------------------------------------
    # Factories
    # ------------------------------------------------------------------

    def _create_pymoo_problem(self):
        space = self.search_space_config
        kwargs = dict(space.problem_kwargs)
        if space.n_var is not None:
            kwargs.setdefault("n_var", space.n_var)
        try:
            problem = get_problem(space.objective, **kwargs)
        except Exception as e:
            raise ConfigurationError(f"Could not create pymoo problem '{space.objective}': {e}") from e
        if problem.n_obj != 1:
            raise ConfigurationError(f"pymoo problem '{space.objective}' is not single-objective")
        return problem

    def create_goal(self) -> Goal:
        """Build a new goal instance (with its own call counter)."""
        space = self.search_space_config
        if space.source == "pymoo":
            return GoalFromProblem(self._problem)
        return FunctionGoal(get_objective(space.objective), name=space.objective)

    def create_stop_checker(self) -> StopChecker:
        """``CompositeAny`` of the configured criteria; always includes ``MaxIterations``."""
        term = self.termination_config
        checkers = [MaxIterations(term.max_generations)]
        if term.target_objective is not None:
            checkers.append(Threshold(term.target_objective))
        if term.convergence_patience is not None:
            checkers.append(GoalNotChange(term.convergence_patience, term.convergence_tolerance))
        if term.max_time_minutes is not None:
            checkers.append(TimeLimit(term.max_time_minutes * 60.0))
        return CompositeAny(checkers)

    def create_loggers(self, verbose: bool = True) -> list[Logger]:
        monitoring = self.monitoring_config
        loggers = [RuntimeLogger()]
        if monitoring.track_best_n > 0:
            loggers.append(BestSolutionsTracker(monitoring.track_best_n))
        if verbose:
            loggers.append(
                VerboseLogger(
                    logging.getLogger("evoswarm.progress"),
                    frequency=monitoring.progress_frequency,
                )
            )
        return loggers

    def create_optimizer(self, seed=None, loggers: list[Logger] | None = None, verbose: bool = True):
        """
        Build a ready-to-run optimizer.

        Args:
            seed: Seed (int or ``SeedSequence``). Defaults to the top-level
                ``seed`` of the configuration.
            loggers: Observers to attach. Defaults to :meth:`create_loggers`.
            verbose: Include a progress logger when ``loggers`` is not given.
        """
        from ..runners.genetic_runner import GeneticOptimizer
        from ..runners.pso_runner import ParticleSwarmOptimizer

        if seed is None:
            seed = self.seed
        if loggers is None:
            loggers = self.create_loggers(verbose=verbose)

        intervals = self.get_intervals()
        common = dict(
            goal=self.create_goal(),
            stop_checker=self.create_stop_checker(),
            loggers=loggers,
            seed=seed,
            n_workers=self.n_workers,
        )

        if self.algorithm == "GA":
            ga = self.ga_config
            if ga.pairing == "tournament":
                pairing = Tournament(ga.families_count, ga.rounds_count, ga.partners_count)
            else:
                pairing = RandomPairing()

            gene_cross = {
                "exp": lambda: FloatCrossExp(ga.cross_mean),
                "mean": CrossMean,
                "geometric_mean": FloatCrossGeometricMean,
                "bitwise": CrossBitwise,
            }[ga.cross]()

            pre_births = [CheckChromoInterval(intervals)] if ga.check_intervals else []
            selections = [KillFitnessNaN()]
            if ga.check_intervals:
                selections.append(CheckChromoIntervalSelection(intervals))
            selections.append(LimitPopulation(ga.pop_size))

            return GeneticOptimizer(
                creator=RandomCreator(ga.pop_size, intervals),
                pairing=pairing,
                cross=VecCrossAllGenes(gene_cross),
                mutation=VecMutation(
                    ga.mutation_probability,
                    BitwiseMutation(ga.mutation_bit_count),
                    ga.mutation_gene_count,
                ),
                pre_births=pre_births,
                selections=selections,
                **common,
            )

        pso = self.pso_config
        if pso.variant == "canonical":
            velocity_calculator = CanonicalVelocityCalculator(
                pso.cognitive_coeff, pso.social_coeff, pso.alpha
            )
        elif pso.variant == "negative_reinforcement":
            velocity_calculator = NegativeReinforcementVelocityCalculator(
                phi_best_personal=pso.cognitive_coeff,
                phi_best_current=pso.current_best_coeff,
                phi_best_global=pso.social_coeff,
                phi_worst_personal=pso.worst_personal_coeff,
                phi_worst_current=pso.worst_current_coeff,
                phi_worst_global=pso.worst_global_coeff,
                xi=pso.constriction,
            )
        else:
            if pso.inertia_weight_final is not None:
                inertia = LinearInertia(
                    pso.inertia_weight_final,
                    pso.inertia_weight,
                    self.termination_config.max_generations,
                )
            else:
                inertia = ConstInertia(pso.inertia_weight)
            velocity_calculator = InertiaVelocityCalculator(
                pso.cognitive_coeff, pso.social_coeff, inertia
            )

        post_velocity = []
        if isinstance(pso.max_velocity, (list, tuple)):
            if len(pso.max_velocity) != len(intervals):
                raise ConfigurationError(
                    f"max_velocity has {len(pso.max_velocity)} values, expected {len(intervals)}"
                )
            post_velocity.append(MaxVelocityDimensions(pso.max_velocity))
        elif pso.max_velocity is not None:
            post_velocity.append(MaxVelocityAbs(pso.max_velocity))

        if pso.initial_velocity == "random":
            spans = [(upper - lower) for lower, upper in intervals]
            velocity_initializer = RandomVelocityInitializer([(-span, span) for span in spans])
        else:
            velocity_initializer = ZeroVelocityInitializer()

        return ParticleSwarmOptimizer(
            coordinates_initializer=RandomCoordinatesInitializer(intervals, pso.pop_size),
            velocity_initializer=velocity_initializer,
            velocity_calculator=velocity_calculator,
            post_velocity=post_velocity,
            post_move=[MoveToBoundary(intervals)] if pso.move_to_boundary else [],
            **common,
        )

    def print_summary(self):
        """Print configuration summary for verification."""
        space = self.search_space_config
        print("\n📋 OPTIMIZATION CONFIGURATION SUMMARY:")

        print("   🎯 Problem Configuration:")
        print(f"      Objective: {space.objective} ({space.source})")
        print(f"      Variables: {space.n_var}")

        print("   🔄 Algorithm Configuration:")
        print(f"      Type: {self.algorithm}")
        if self.ga_config is not None:
            ga = self.ga_config
            print(f"      Population size: {ga.pop_size}")
            print(f"      Pairing: {ga.pairing} ({ga.families_count} families, {ga.rounds_count} rounds)")
            print(f"      Cross: {ga.cross}")
            print(f"      Mutation: {ga.mutation_probability}% x {ga.mutation_gene_count} gene(s)")
        else:
            pso = self.pso_config
            print(f"      Population size: {pso.pop_size}")
            if pso.inertia_weight_final is not None:
                print(f"      Inertia weight: {pso.inertia_weight} -> {pso.inertia_weight_final} (linear)")
            else:
                print(f"      Inertia weight: {pso.inertia_weight} (fixed)")
            print(f"      Variant: {pso.variant}")
            print(f"      Cognitive/Social coeffs: {pso.cognitive_coeff}/{pso.social_coeff}")

        print("   ⏰ Termination Configuration:")
        print(f"      Max generations: {self.termination_config.max_generations}")
        if self.termination_config.target_objective is not None:
            print(f"      Target objective: {self.termination_config.target_objective}")
        if self.termination_config.max_time_minutes:
            print(f"      Max time: {self.termination_config.max_time_minutes} minutes")

        print("   🔢 Multi-run Configuration:")
        print(f"      Runs: {self.multi_run_config.num_runs}")
        print(f"      Parallel: {self.multi_run_config.parallel}")
        if self.seed is not None:
            print(f"   🎲 Seed: {self.seed}")
