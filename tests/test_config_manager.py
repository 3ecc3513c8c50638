"""
Basic tests for optimization configuration management.

These tests validate that the configuration system loads realistic GA and
PSO configurations, enforces required parameters, and builds optimizers and
stop checkers that match the configuration.
"""

import tempfile
from pathlib import Path

import numpy as np
import pytest
import yaml

from evoswarm.optimisation.config import (
    GAConfig,
    MultiRunConfig,
    OptimizationConfigManager,
    PSOConfig,
    SearchSpaceConfig,
    TerminationConfig,
)
from evoswarm.optimisation.exceptions import ConfigurationError
from evoswarm.optimisation.runners import GeneticOptimizer, OptimizationRunner, ParticleSwarmOptimizer
from evoswarm.optimisation.stopping import CompositeAny, GoalNotChange, MaxIterations, Threshold, TimeLimit
from evoswarm.optimisation.swarm import (
    LinearInertia,
    MaxVelocityAbs,
    MoveToBoundary,
    NegativeReinforcementVelocityCalculator,
)


class TestConfigDataClasses:
    """Test basic configuration data class creation and validation."""

    def test_pso_config_defaults(self):
        """Test PSOConfig creates with reasonable defaults."""
        config = PSOConfig(pop_size=50)

        assert config.pop_size == 50
        assert config.inertia_weight == 0.9
        assert config.inertia_weight_final is None
        assert config.cognitive_coeff == 2.0
        assert config.social_coeff == 2.0
        assert config.variant == "inertia"

        print(f"✅ PSOConfig defaults: pop_size={config.pop_size}, w={config.inertia_weight}")

    def test_pso_config_validation(self):
        """Test PSOConfig validates parameters reasonably."""
        config = PSOConfig(pop_size=30, inertia_weight=0.7)
        assert config.inertia_weight == 0.7

        with pytest.raises(ValueError):
            PSOConfig(pop_size=0)
        with pytest.raises(ValueError):
            PSOConfig(pop_size=30, inertia_weight=0.5, inertia_weight_final=0.8)
        with pytest.raises(ValueError):
            PSOConfig(pop_size=30, variant="turbo")
        with pytest.raises(ValueError):
            PSOConfig(pop_size=30, variant="negative_reinforcement", cognitive_coeff=1.5, social_coeff=1.5)
        with pytest.raises(ValueError):
            PSOConfig(pop_size=30, variant="canonical", alpha=1.2)
        with pytest.raises(ValueError):
            PSOConfig(pop_size=30, worst_global_coeff=-1.0)

        print("✅ PSOConfig validation works")

    def test_ga_config_defaults(self):
        config = GAConfig(pop_size=40)

        assert config.families_count == 20
        assert config.pairing == "tournament"
        assert config.cross == "exp"
        assert config.mutation_probability == 15.0

    def test_ga_config_validation(self):
        with pytest.raises(ConfigurationError):
            GAConfig(pop_size=40, mutation_probability=150.0)
        with pytest.raises(ConfigurationError):
            GAConfig(pop_size=40, cross="uniform")
        with pytest.raises(ConfigurationError):
            GAConfig(pop_size=40, cross="exp", partners_count=3)

        assert GAConfig(pop_size=40, cross="mean", partners_count=3).partners_count == 3

    def test_termination_config_defaults(self):
        """Test TerminationConfig creates with reasonable defaults."""
        config = TerminationConfig(max_generations=100)

        assert config.max_generations == 100
        assert config.max_time_minutes is None
        assert config.convergence_tolerance == 1e-6
        assert config.convergence_patience is None
        assert config.target_objective is None

        print(f"✅ TerminationConfig defaults: max_gen={config.max_generations}")

    def test_search_space_from_bounds(self):
        config = SearchSpaceConfig(objective="rastrigin", n_var=3)
        assert config.intervals == [(-5.12, 5.12)] * 3

        config = SearchSpaceConfig(objective="paraboloid", intervals=[[0, 1], [2, 3]])
        assert config.n_var == 2

        with pytest.raises(ConfigurationError):
            SearchSpaceConfig(objective="unknown", n_var=2)
        with pytest.raises(ConfigurationError):
            SearchSpaceConfig(objective="paraboloid", n_var=3, intervals=[[0, 1]])

    def test_multi_run_config(self):
        with pytest.raises(ConfigurationError):
            MultiRunConfig(num_runs=0)
        with pytest.raises(ConfigurationError):
            MultiRunConfig(known_optimum=[0.0])


class TestConfigManager:
    """Test OptimizationConfigManager core functionality."""

    def test_yaml_config_loading(self):
        """Test loading configuration from YAML file."""
        test_config = {
            "problem": {"objective": {"type": "rastrigin", "n_var": 4}},
            "optimization": {
                "algorithm": {"type": "PSO", "pop_size": 75, "inertia_weight": 0.8},
                "termination": {"max_generations": 150},
                "monitoring": {"progress_frequency": 20},
            },
        }

        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            yaml.dump(test_config, f)
            temp_path = f.name

        try:
            manager = OptimizationConfigManager(temp_path)

            pso_config = manager.get_pso_config()
            assert pso_config.pop_size == 75
            assert pso_config.inertia_weight == 0.8
            assert manager.get_ga_config() is None

            assert manager.get_termination_config().max_generations == 150
            assert manager.get_monitoring_config().progress_frequency == 20
            assert len(manager.get_intervals()) == 4

            print("✅ YAML config loading works")

        finally:
            Path(temp_path).unlink()

    def test_scientific_notation_strings(self):
        """PyYAML reads 1e-6 without a dot as a string; numbers must still parse."""
        text = """
problem:
  objective:
    type: paraboloid
    n_var: 2
optimization:
  algorithm:
    type: GA
    pop_size: 20
  termination:
    max_generations: 10
    target_objective: 1e-6
"""
        with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
            f.write(text)
            temp_path = f.name

        try:
            manager = OptimizationConfigManager(temp_path)
            assert manager.get_termination_config().target_objective == 1e-6
        finally:
            Path(temp_path).unlink()

    def test_dict_config_loading(self, ga_config_dict):
        """Test loading configuration from dictionary."""
        manager = OptimizationConfigManager(config_dict=ga_config_dict)

        ga_config = manager.get_ga_config()
        assert ga_config.pop_size == 30
        assert manager.get_pso_config() is None
        assert manager.seed == 3
        assert manager.get_full_config() == ga_config_dict

        print("✅ Dictionary config loading works")

    def test_config_sources(self, ga_config_dict):
        with pytest.raises(ValueError, match="Configuration is required"):
            OptimizationConfigManager()
        with pytest.raises(ValueError, match="not both"):
            OptimizationConfigManager(config_path="config.yaml", config_dict=ga_config_dict)
        with pytest.raises(FileNotFoundError):
            OptimizationConfigManager("does/not/exist.yaml")

    def test_config_validation(self):
        """Test configuration validation catches basic errors."""
        bad_config = {"problem": {"objective": {"type": "paraboloid", "n_var": 2}}}

        with pytest.raises(ValueError, match="Missing required configuration section"):
            OptimizationConfigManager(config_dict=bad_config)

        bad_algorithm = {
            "problem": {"objective": {"type": "paraboloid", "n_var": 2}},
            "optimization": {
                "algorithm": {"type": "SimulatedAnnealing", "pop_size": 10},
                "termination": {"max_generations": 10},
            },
        }
        with pytest.raises(ConfigurationError, match="not supported"):
            OptimizationConfigManager(config_dict=bad_algorithm)

        print("✅ Config validation works")

    def test_required_parameters(self, ga_config_dict):
        """Test that required parameters are enforced."""
        no_pop = dict(ga_config_dict)
        no_pop["optimization"] = {
            "algorithm": {"type": "GA"},
            "termination": {"max_generations": 100},
        }
        with pytest.raises(ValueError, match="Missing required parameter 'pop_size'"):
            OptimizationConfigManager(config_dict=no_pop)

        no_gen = dict(ga_config_dict)
        no_gen["optimization"] = {
            "algorithm": {"type": "GA", "pop_size": 50},
            "termination": {},
        }
        with pytest.raises(ValueError, match="Missing required parameter 'max_generations'"):
            OptimizationConfigManager(config_dict=no_gen)

        print("✅ Required parameters properly enforced")

    def test_config_summary_printing(self, pso_config_dict, capsys):
        """Test config summary prints the main settings."""
        OptimizationConfigManager(config_dict=pso_config_dict).print_summary()

        output = capsys.readouterr().out
        assert "OPTIMIZATION CONFIGURATION SUMMARY" in output
        assert "PSO" in output
        assert "0.9 -> 0.4 (linear)" in output


class TestFactories:
    """Test optimizers and stop checkers built from configuration."""

    def test_stop_checker_includes_configured_criteria(self, ga_config_dict):
        ga_config_dict["optimization"]["termination"] = {
            "max_generations": 50,
            "target_objective": 1e-8,
            "convergence_patience": 10,
            "max_time_minutes": 1.5,
        }
        checker = OptimizationConfigManager(config_dict=ga_config_dict).create_stop_checker()

        assert isinstance(checker, CompositeAny)
        types = [type(c) for c in checker.checkers]
        assert types == [MaxIterations, Threshold, GoalNotChange, TimeLimit]
        assert checker.checkers[3].seconds == 90.0

    def test_stop_checker_defaults_to_max_iterations(self, ga_config_dict):
        checker = OptimizationConfigManager(config_dict=ga_config_dict).create_stop_checker()
        assert [type(c) for c in checker.checkers] == [MaxIterations]

    def test_create_ga_optimizer(self, ga_config_dict):
        manager = OptimizationConfigManager(config_dict=ga_config_dict)
        optimizer = manager.create_optimizer(verbose=False)

        assert isinstance(optimizer, GeneticOptimizer)
        result = optimizer.run()
        assert result.generations_completed == 20
        assert len(result.best_solution) == 2
        assert result.seed == 3

        print(f"✅ Configured GA reached {result.best_objective:.4g}")

    def test_create_pso_optimizer(self, pso_config_dict):
        manager = OptimizationConfigManager(config_dict=pso_config_dict)
        optimizer = manager.create_optimizer(seed=11, verbose=False)

        assert isinstance(optimizer, ParticleSwarmOptimizer)
        assert isinstance(optimizer.velocity_calculator.inertia, LinearInertia)
        assert isinstance(optimizer.post_velocity[0], MaxVelocityAbs)
        assert isinstance(optimizer.post_move[0], MoveToBoundary)

        result = optimizer.run()
        assert result.generations_completed == 25
        assert np.all(np.abs(result.best_solution) <= 5.12)

    def test_create_negative_reinforcement_optimizer(self, pso_config_dict):
        algorithm = pso_config_dict["optimization"]["algorithm"]
        algorithm.update({
            "variant": "negative_reinforcement",
            "cognitive_coeff": 2.0,
            "current_best_coeff": 0.6,
            "social_coeff": 2.0,
            "worst_personal_coeff": 0.05,
            "worst_current_coeff": "1e-2",
            "worst_global_coeff": 0.0,
            "alpha": 0.9,
        })
        manager = OptimizationConfigManager(config_dict=pso_config_dict)
        optimizer = manager.create_optimizer(seed=2, verbose=False)

        calculator = optimizer.velocity_calculator
        assert isinstance(calculator, NegativeReinforcementVelocityCalculator)
        assert calculator.phi_best_current == 0.6
        assert calculator.phi_worst_current == 0.01
        assert calculator.xi == pytest.approx(2 * 0.9 / (4.6 - 2.0))

        result = optimizer.run()
        assert result.generations_completed == 25

        print("✅ negative_reinforcement variant builds from configuration")

    def test_same_seed_same_result(self, ga_config_dict):
        manager = OptimizationConfigManager(config_dict=ga_config_dict)

        first = manager.create_optimizer(verbose=False).run()
        second = manager.create_optimizer(verbose=False).run()

        assert np.array_equal(first.best_solution, second.best_solution)
        assert first.call_count == second.call_count

    def test_pymoo_objective(self):
        config = {
            "problem": {"objective": {"type": "sphere", "source": "pymoo", "n_var": 3}},
            "optimization": {
                "algorithm": {"type": "PSO", "pop_size": 10},
                "termination": {"max_generations": 5},
            },
        }
        manager = OptimizationConfigManager(config_dict=config)

        intervals = manager.get_intervals()
        assert len(intervals) == 3
        assert all(lower < upper for lower, upper in intervals)

        result = manager.create_optimizer(seed=1, verbose=False).run()
        assert np.isfinite(result.best_objective)

    def test_auto_known_optimum(self, pso_config_dict):
        pso_config_dict["optimization"]["multi_run"] = {"known_optimum": "auto", "tolerance": 0.1}
        manager = OptimizationConfigManager(config_dict=pso_config_dict)

        assert np.array_equal(manager.get_known_optimum(), np.zeros(2))


class TestOptimizationRunner:
    """Test the configuration-driven runner."""

    def test_single_run(self, ga_config_dict):
        runner = OptimizationRunner(OptimizationConfigManager(config_dict=ga_config_dict))
        result = runner.optimize(verbose=False)

        assert result.generations_completed == 20
        assert len(runner.best_solutions) == 5
        assert runner.best_solutions[0]["objective"] == result.best_objective
        assert runner.performance_stats["num_generations"] == 20

    def test_multi_run(self, ga_config_dict):
        ga_config_dict["optimization"]["multi_run"] = {
            "num_runs": 4,
            "success_threshold": 1e6,
        }
        runner = OptimizationRunner(OptimizationConfigManager(config_dict=ga_config_dict))

        stats = runner.optimize_multi_run()
        assert stats.trial_count == 4
        assert stats.success_rate == 1.0
        assert stats.statistical_summary["num_runs"] == 4

        parallel = runner.optimize_multi_run(num_runs=2, parallel=True)
        assert len(parallel.results) == 2

        print("✅ Multi-run optimization works")

    def test_multi_run_rejects_non_positive_runs(self, ga_config_dict):
        runner = OptimizationRunner(OptimizationConfigManager(config_dict=ga_config_dict))
        with pytest.raises(ConfigurationError):
            runner.optimize_multi_run(num_runs=0)
