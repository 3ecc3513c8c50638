"""Console script for evoswarm."""

from pathlib import Path

import numpy as np
import typer
from rich.console import Console
from rich.table import Table

from evoswarm.logging import setup_logger
from evoswarm.optimisation.config import OptimizationConfigManager
from evoswarm.optimisation.runners import OptimizationRunner

app = typer.Typer()
console = Console()


def _load(config: Path, log_dir: Path | None) -> OptimizationConfigManager:
    config_manager = OptimizationConfigManager(config_path=str(config))
    setup_logger(
        "evoswarm",
        log_dir=str(log_dir) if log_dir is not None else None,
        console_level=config_manager.get_monitoring_config().log_level,
    )
    return config_manager


def _format_solution(solution: np.ndarray) -> str:
    return np.array2string(solution, precision=6, separator=", ", threshold=10)


@app.command()
def run(
    config: Path = typer.Argument(..., exists=True, dir_okay=False, help="YAML configuration file"),
    seed: int | None = typer.Option(None, help="Override the configured seed"),
    log_dir: Path | None = typer.Option(None, help="Also write a log file to this directory"),
    quiet: bool = typer.Option(False, "--quiet", "-q", help="Do not log per-generation progress"),
):
    """Run a single optimization."""
    config_manager = _load(config, log_dir)
    config_manager.print_summary()

    result = OptimizationRunner(config_manager).optimize(seed=seed, verbose=not quiet)

    table = Table(title="Optimization result")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Best objective", f"{result.best_objective:.6g}")
    table.add_row("Best solution", _format_solution(result.best_solution))
    table.add_row("Generations", str(result.generations_completed))
    table.add_row("Goal calls", str(result.call_count))
    table.add_row("Time (s)", f"{result.optimization_time:.2f}")
    console.print(table)


@app.command()
def stats(
    config: Path = typer.Argument(..., exists=True, dir_okay=False, help="YAML configuration file"),
    runs: int | None = typer.Option(None, "--runs", "-n", help="Number of independent trials"),
    parallel: bool | None = typer.Option(None, "--parallel/--sequential", help="Run trials on threads"),
    seed: int | None = typer.Option(None, help="Override the configured seed"),
    log_dir: Path | None = typer.Option(None, help="Also write a log file to this directory"),
):
    """Run repeated trials and print their statistics."""
    config_manager = _load(config, log_dir)
    result = OptimizationRunner(config_manager).optimize_multi_run(
        num_runs=runs, parallel=parallel, seed=seed
    )

    summary = result.statistical_summary
    table = Table(title=f"Statistics over {result.trial_count} trials")
    table.add_column("Metric")
    table.add_column("Value", justify="right")
    table.add_row("Completed trials", str(len(result.results)))
    table.add_row("Failed trials", str(len(result.failed_trials)))
    table.add_row("Objective mean", f"{result.final_fitness_mean:.6g}")
    table.add_row("Objective std", f"{result.final_fitness_std:.6g}")
    if "objective_min" in summary:
        table.add_row("Objective min / max", f"{summary['objective_min']:.6g} / {summary['objective_max']:.6g}")
    if result.success_rate is not None:
        table.add_row("Success rate", f"{result.success_rate:.1%}")
    best = result.best_result
    table.add_row("Best trial objective", f"{best.best_objective:.6g}")
    table.add_row("Best trial solution", _format_solution(best.best_solution))
    table.add_row("Average solution", _format_solution(result.average_solution))
    table.add_row("Average goal calls", f"{result.average_call_count:.1f}")
    table.add_row("Total time (s)", f"{result.total_time:.2f}")
    console.print(table)

    curve = result.average_convergence
    if curve:
        marks = sorted({0, len(curve) // 4, len(curve) // 2, 3 * len(curve) // 4, len(curve) - 1})
        convergence = Table(title="Average convergence")
        convergence.add_column("Generation", justify="right")
        convergence.add_column("Best so far", justify="right")
        for generation in marks:
            convergence.add_row(str(generation), f"{curve[generation]:.6g}")
        console.print(convergence)


if __name__ == "__main__":
    app()
