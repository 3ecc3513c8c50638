"""
Corrections applied after a particle's velocity or position is computed.
"""

from abc import ABC, abstractmethod

import numpy as np

from ..exceptions import ConfigurationError
from ..population import intervals_to_bounds, validate_intervals


class PostVelocityCalc(ABC):
    @abstractmethod
    def correct_velocity(self, velocity: np.ndarray) -> np.ndarray:
        """Return a corrected copy of ``velocity``."""


class PostMove(ABC):
    @abstractmethod
    def post_move(self, position: np.ndarray) -> np.ndarray:
        """Return a corrected copy of ``position``."""


class MaxVelocityAbs(PostVelocityCalc):
    """Rescales the velocity vector so its Euclidean norm is at most ``max_velocity``."""

    def __init__(self, max_velocity: float):
        if not max_velocity > 0:
            raise ConfigurationError(f"max_velocity must be positive, got {max_velocity}")
        self.max_velocity = float(max_velocity)

    def correct_velocity(self, velocity):
        velocity = np.asarray(velocity, dtype=np.float64)
        norm = float(np.linalg.norm(velocity))
        if norm > self.max_velocity:
            return velocity * (self.max_velocity / norm)
        return velocity.copy()


class MaxVelocityDimensions(PostVelocityCalc):
    """Clamps each velocity component to ``|max_velocity[i]|``, keeping its sign."""

    def __init__(self, max_velocity):
        self.max_velocity = np.abs(np.asarray(max_velocity, dtype=np.float64).reshape(-1))

    def correct_velocity(self, velocity):
        velocity = np.asarray(velocity, dtype=np.float64)
        if velocity.shape != self.max_velocity.shape:
            raise ValueError(
                f"Velocity has {velocity.shape[0]} dimensions, "
                f"{self.max_velocity.shape[0]} limits are configured"
            )
        return np.where(
            np.abs(velocity) <= self.max_velocity,
            velocity,
            self.max_velocity * np.sign(velocity),
        )


class MoveToBoundary(PostMove):
    """Clamps coordinates into their intervals; non-finite coordinates go to the minimum."""

    def __init__(self, intervals):
        self.intervals = validate_intervals(intervals)
        self._lower, self._upper = intervals_to_bounds(self.intervals)

    def post_move(self, position):
        position = np.array(position, dtype=np.float64)
        if position.shape != self._lower.shape:
            raise ValueError(
                f"Position has {position.shape[0]} dimensions, "
                f"{self._lower.shape[0]} intervals are configured"
            )
        position = np.where(np.isfinite(position), position, self._lower)
        return np.clip(position, self._lower, self._upper)
