"""
Optimization drivers.

This module provides the genetic and particle swarm optimizers, the
repeated-trial statistics runner, and the configuration-driven runner that
builds all of them from an :class:`OptimizationConfigManager`.
"""

from .base import BaseOptimizer, OptimizationResult, OptimizerState
from .genetic_runner import GeneticOptimizer
from .pso_runner import ParticleSwarmOptimizer
from .runner import OptimizationRunner
from .statistics import StatisticsResult, StatisticsRunner, average_convergence

__all__ = [
    'BaseOptimizer',
    'OptimizationResult',
    'OptimizerState',
    'GeneticOptimizer',
    'ParticleSwarmOptimizer',
    'OptimizationRunner',
    'StatisticsResult',
    'StatisticsRunner',
    'average_convergence',
]
