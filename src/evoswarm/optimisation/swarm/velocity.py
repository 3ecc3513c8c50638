"""
Velocity update rules for particle swarm optimization.

INERTIA SCHEDULES:
    An inertia schedule maps the iteration index to the weight applied to
    the previous velocity. ``ConstInertia`` keeps it fixed, ``LinearInertia``
    decreases it from ``w_max`` to ``w_min`` over ``t_max`` iterations, and
    ``CallableInertia`` wraps any function of the iteration index.

VELOCITY CALCULATORS:
    The classic, inertia and canonical rules draw two uniform vectors
    ``r1, r2`` in ``[0, 1)`` per particle (one value per dimension) and combine
    the pull towards the particle's personal best with the pull towards the
    swarm's global best:

    - ``ClassicVelocityCalculator``:
      ``v' = v + c1*r1*(pbest - x) + c2*r2*(gbest - x)``
    - ``InertiaVelocityCalculator``:
      ``v' = w(t)*v + c1*r1*(pbest - x) + c2*r2*(gbest - x)``
    - ``CanonicalVelocityCalculator`` (constriction factor):
      ``v' = xi*(v + c1*r1*(pbest - x) + c2*r2*(gbest - x))`` where
      ``xi = 2*alpha / (c1 + c2 - 2)``, ``c1 + c2 > 4`` and ``0 < alpha < 1``.
    - ``NegativeReinforcementVelocityCalculator``: constricted update that
      also follows the current best particle and is repelled by the personal,
      current and global worst positions.
"""

from abc import ABC, abstractmethod
from typing import Callable

import numpy as np

from ..exceptions import ConfigurationError
from ..population import Particle, Swarm


class Inertia(ABC):
    @abstractmethod
    def get(self, iteration: int) -> float:
        """Inertia weight for ``iteration``."""


class ConstInertia(Inertia):
    def __init__(self, weight: float):
        self.weight = float(weight)

    def get(self, iteration):
        return self.weight


class LinearInertia(Inertia):
    """``w_max - (w_max - w_min) * t / t_max``, held at ``w_min`` after ``t_max``."""

    def __init__(self, w_min: float, w_max: float, t_max: int):
        if t_max <= 0:
            raise ConfigurationError(f"t_max must be positive, got {t_max}")
        if w_min > w_max:
            raise ConfigurationError(f"w_min ({w_min}) must not exceed w_max ({w_max})")
        self.w_min = float(w_min)
        self.w_max = float(w_max)
        self.t_max = int(t_max)

    def get(self, iteration):
        t = min(iteration, self.t_max)
        return self.w_max - (self.w_max - self.w_min) * t / self.t_max


class CallableInertia(Inertia):
    def __init__(self, function: Callable[[int], float]):
        if not callable(function):
            raise ConfigurationError(f"Inertia function must be callable, got {function!r}")
        self.function = function

    def get(self, iteration):
        return float(self.function(iteration))


class VelocityCalculator(ABC):
    @abstractmethod
    def calc_new_velocity(
        self, swarm: Swarm, particle: Particle, iteration: int, rng: np.random.Generator
    ) -> np.ndarray:
        """Return the next velocity of ``particle``."""


def _attraction(swarm, particle, phi_personal, phi_global, rng):
    r_personal = rng.uniform(0.0, 1.0, size=particle.dimension)
    r_global = rng.uniform(0.0, 1.0, size=particle.dimension)
    return (
        phi_personal * r_personal * (particle.best_position - particle.position)
        + phi_global * r_global * (swarm.best_position - particle.position)
    )


class ClassicVelocityCalculator(VelocityCalculator):
    def __init__(self, phi_personal: float, phi_global: float):
        self.phi_personal = float(phi_personal)
        self.phi_global = float(phi_global)

    def calc_new_velocity(self, swarm, particle, iteration, rng):
        return particle.velocity + _attraction(
            swarm, particle, self.phi_personal, self.phi_global, rng
        )


class InertiaVelocityCalculator(VelocityCalculator):
    """
    Velocity update with an inertia weight on the previous velocity.

    Args:
        phi_personal: Cognitive coefficient ``c1``.
        phi_global: Social coefficient ``c2``.
        inertia: An :class:`Inertia` schedule, or a float for a constant weight.
    """

    def __init__(self, phi_personal: float, phi_global: float, inertia: Inertia | float):
        self.phi_personal = float(phi_personal)
        self.phi_global = float(phi_global)
        if not isinstance(inertia, Inertia):
            inertia = ConstInertia(inertia)
        self.inertia = inertia

    def calc_new_velocity(self, swarm, particle, iteration, rng):
        weight = self.inertia.get(iteration)
        return weight * particle.velocity + _attraction(
            swarm, particle, self.phi_personal, self.phi_global, rng
        )


class CanonicalVelocityCalculator(VelocityCalculator):
    def __init__(self, phi_personal: float, phi_global: float, alpha: float):
        phi = float(phi_personal) + float(phi_global)
        if phi <= 4.0:
            raise ConfigurationError(
                f"phi_personal + phi_global must exceed 4, got {phi}"
            )
        if not 0.0 < alpha < 1.0:
            raise ConfigurationError(f"alpha must be in (0, 1), got {alpha}")

        self.phi_personal = float(phi_personal)
        self.phi_global = float(phi_global)
        self.alpha = float(alpha)
        self.xi = 2.0 * self.alpha / (phi - 2.0)

    def calc_new_velocity(self, swarm, particle, iteration, rng):
        return self.xi * (
            particle.velocity
            + _attraction(swarm, particle, self.phi_personal, self.phi_global, rng)
        )


class NegativeReinforcementVelocityCalculator(VelocityCalculator):
    """
    Constricted velocity update pulled towards good positions and pushed away from bad ones.

    ``v' = xi*(v + attraction - repulsion)`` where the attraction sums the
    pulls towards the personal best, the best particle of the current
    iteration and the global best, and the repulsion sums the same terms for
    the personal worst, the current worst particle and the global worst.
    Every term draws its own uniform vector in ``[0, 1)``.

    Args:
        phi_best_personal: Pull towards the personal best.
        phi_best_current: Pull towards the current best particle.
        phi_best_global: Pull towards the global best.
        phi_worst_personal: Push away from the personal worst.
        phi_worst_current: Push away from the current worst particle.
        phi_worst_global: Push away from the global worst.
        xi: Constriction factor.
    """

    def __init__(
        self,
        phi_best_personal: float,
        phi_best_current: float,
        phi_best_global: float,
        phi_worst_personal: float,
        phi_worst_current: float,
        phi_worst_global: float,
        xi: float,
    ):
        if not xi > 0:
            raise ConfigurationError(f"xi must be positive, got {xi}")
        self.phi_best_personal = float(phi_best_personal)
        self.phi_best_current = float(phi_best_current)
        self.phi_best_global = float(phi_best_global)
        self.phi_worst_personal = float(phi_worst_personal)
        self.phi_worst_current = float(phi_worst_current)
        self.phi_worst_global = float(phi_worst_global)
        self.xi = float(xi)

    def calc_new_velocity(self, swarm, particle, iteration, rng):
        current_best = swarm.current_best()
        current_worst = swarm.current_worst()
        global_worst = swarm.worst_position if swarm.worst_position is not None else current_worst.position
        x = particle.position

        def pull(phi, target):
            return phi * rng.uniform(0.0, 1.0, size=particle.dimension) * (target - x)

        attraction = (
            pull(self.phi_best_personal, particle.best_position)
            + pull(self.phi_best_current, current_best.position)
            + pull(self.phi_best_global, swarm.best_position)
        )
        repulsion = (
            pull(self.phi_worst_personal, particle.worst_position)
            + pull(self.phi_worst_current, current_worst.position)
            + pull(self.phi_worst_global, global_worst)
        )
        return self.xi * (particle.velocity + attraction - repulsion)
