"""
Configuration-driven entry point for single and repeated optimizations.

``OptimizationRunner`` turns an :class:`OptimizationConfigManager` into
finished runs. A single run attaches the configured observers and returns an
:class:`OptimizationResult`; a multi-run hands an optimizer factory to the
:class:`StatisticsRunner` and returns its :class:`StatisticsResult`.

Example:
    ```python
    config_manager = OptimizationConfigManager('config.yaml')
    runner = OptimizationRunner(config_manager)

    result = runner.optimize()
    print(f"Best objective: {result.best_objective:.4f}")

    stats = runner.optimize_multi_run(num_runs=10)
    summary = stats.statistical_summary
    print(f"Mean ± std: {summary['objective_mean']:.4f} ± {summary['objective_std']:.4f}")
    ```
"""

import logging

from ..config.config_manager import OptimizationConfigManager
from ..exceptions import ConfigurationError
from ..monitoring import BestSolutionsTracker, RuntimeLogger
from .base import OptimizationResult
from .statistics import StatisticsResult, StatisticsRunner

logger = logging.getLogger(__name__)


class OptimizationRunner:
    """
    Runs the optimizer described by a configuration manager.

    Attributes:
        config_manager: Source of every optimization parameter.
        best_solutions: Top solutions tracked during the last single run.
        performance_stats: Generation timing summary of the last single run.
    """

    def __init__(self, config_manager: OptimizationConfigManager):
        self.config_manager = config_manager
        self.best_solutions: list[dict] = []
        self.performance_stats: dict[str, float] = {}

    def optimize(self, seed=None, verbose: bool = True) -> OptimizationResult:
        """
        Run one optimization.

        Args:
            seed: Overrides the configuration's top-level seed.
            verbose: Log progress every ``progress_frequency`` generations.
        """
        self._print_optimization_summary()
        loggers = self.config_manager.create_loggers(verbose=verbose)
        optimizer = self.config_manager.create_optimizer(seed=seed, loggers=loggers)
        result = optimizer.run()

        for observer in loggers:
            if isinstance(observer, BestSolutionsTracker):
                self.best_solutions = observer.get_best_solutions()
            elif isinstance(observer, RuntimeLogger):
                self.performance_stats = observer.performance_stats()

        if not self.config_manager.get_monitoring_config().save_history:
            result.optimization_history = []
        return result

    def optimize_multi_run(
        self, num_runs: int | None = None, parallel: bool | None = None, seed=None
    ) -> StatisticsResult:
        """
        Run independent trials and summarize them.

        Args:
            num_runs: Number of trials. Defaults to ``multi_run.num_runs``.
            parallel: Run trials on a thread pool. Defaults to ``multi_run.parallel``.
            seed: Root seed for the trial streams. Defaults to the
                configuration's top-level seed.

        Raises:
            ConfigurationError: If ``num_runs`` is not positive.
            RuntimeError: If every trial fails.
        """
        multi_config = self.config_manager.get_multi_run_config()
        num_runs = multi_config.num_runs if num_runs is None else num_runs
        parallel = multi_config.parallel if parallel is None else parallel
        seed = self.config_manager.seed if seed is None else seed

        if num_runs < 1:
            raise ConfigurationError(f"num_runs must be positive, got {num_runs}")

        logger.info("🔄 Starting multi-run optimization: %d runs", num_runs)
        self._print_optimization_summary()

        statistics_runner = StatisticsRunner(
            lambda trial_seed: self.config_manager.create_optimizer(seed=trial_seed, verbose=False),
            trial_count=num_runs,
            seed=seed,
            parallel=parallel,
        )
        return statistics_runner.run(
            success_threshold=multi_config.success_threshold,
            known_optimum=self.config_manager.get_known_optimum(),
            tolerance=multi_config.tolerance,
        )

    def _print_optimization_summary(self):
        space = self.config_manager.get_search_space_config()
        term = self.config_manager.get_termination_config()
        logger.info(
            "🎯 %s on %s (%d variables), up to %d generations",
            self.config_manager.algorithm,
            space.objective,
            space.n_var,
            term.max_generations,
        )
