"""
Genetic algorithm operators.

Every operator is a small strategy object holding only its configuration.
Random draws use the ``numpy.random.Generator`` passed in by the optimizer.
"""

from .creation import Creator, RandomCreator
from .cross import (
    Cross,
    CrossBitwise,
    CrossMean,
    FloatCrossExp,
    FloatCrossGeometricMean,
    VecCrossAllGenes,
)
from .mutation import BitwiseMutation, Mutation, VecMutation
from .pairing import Pairing, RandomPairing, Tournament
from .pre_birth import CheckChromoInterval, PreBirth
from .selection import CheckChromoIntervalSelection, KillFitnessNaN, LimitPopulation, Selection

__all__ = [
    "Creator",
    "RandomCreator",
    "Pairing",
    "RandomPairing",
    "Tournament",
    "Cross",
    "FloatCrossExp",
    "CrossMean",
    "FloatCrossGeometricMean",
    "CrossBitwise",
    "VecCrossAllGenes",
    "Mutation",
    "BitwiseMutation",
    "VecMutation",
    "PreBirth",
    "CheckChromoInterval",
    "Selection",
    "KillFitnessNaN",
    "LimitPopulation",
    "CheckChromoIntervalSelection",
]
