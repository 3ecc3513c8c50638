"""
Particle swarm optimization components.
"""

from .correction import (
    MaxVelocityAbs,
    MaxVelocityDimensions,
    MoveToBoundary,
    PostMove,
    PostVelocityCalc,
)
from .initializing import (
    CoordinatesInitializer,
    RandomCoordinatesInitializer,
    RandomVelocityInitializer,
    VelocityInitializer,
    ZeroVelocityInitializer,
)
from .velocity import (
    CallableInertia,
    CanonicalVelocityCalculator,
    ClassicVelocityCalculator,
    ConstInertia,
    Inertia,
    InertiaVelocityCalculator,
    LinearInertia,
    NegativeReinforcementVelocityCalculator,
    VelocityCalculator,
)

__all__ = [
    "CoordinatesInitializer",
    "RandomCoordinatesInitializer",
    "VelocityInitializer",
    "ZeroVelocityInitializer",
    "RandomVelocityInitializer",
    "Inertia",
    "ConstInertia",
    "LinearInertia",
    "CallableInertia",
    "VelocityCalculator",
    "ClassicVelocityCalculator",
    "InertiaVelocityCalculator",
    "CanonicalVelocityCalculator",
    "NegativeReinforcementVelocityCalculator",
    "PostVelocityCalc",
    "MaxVelocityAbs",
    "MaxVelocityDimensions",
    "PostMove",
    "MoveToBoundary",
]
