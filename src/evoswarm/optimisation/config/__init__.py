"""
Configuration management for evoswarm optimizations.

This module provides structured configuration for the genetic algorithm and
particle swarm optimizers, loaded from YAML files or dictionaries.
"""

from .config_manager import (
    GAConfig,
    MonitoringConfig,
    MultiRunConfig,
    OptimizationConfigManager,
    PSOConfig,
    SearchSpaceConfig,
    TerminationConfig,
)

__all__ = [
    "SearchSpaceConfig",
    "GAConfig",
    "PSOConfig",
    "TerminationConfig",
    "MonitoringConfig",
    "MultiRunConfig",
    "OptimizationConfigManager",
]
