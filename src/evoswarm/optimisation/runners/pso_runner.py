"""
Particle swarm optimization driver.

ITERATION:
    For each particle, in order:

    1. compute the new velocity with the velocity calculator,
    2. apply the velocity corrections (for example ``MaxVelocityAbs``),
    3. move: ``x' = x + v'``,
    4. apply the position corrections (for example ``MoveToBoundary``).

    The new positions are then evaluated as one batch (optionally on a thread
    pool), personal bests are updated where fitness strictly improved, and the
    global best is updated once for the whole swarm. A particle therefore
    never sees a global best discovered earlier in the same iteration.
    Personal worsts and the global worst follow the same rules in the
    opposite direction.

    Invalid fitness (NaN or infinite) ranks after every valid value, so it
    never replaces a personal or global best.
"""

import logging
from typing import Sequence

import numpy as np

from ..exceptions import ConfigurationError
from ..population import Individual, Particle, Swarm
from ..swarm.correction import PostMove, PostVelocityCalc
from ..swarm.initializing import CoordinatesInitializer, VelocityInitializer
from ..swarm.velocity import VelocityCalculator
from .base import BaseOptimizer, as_list

logger = logging.getLogger(__name__)


class ParticleSwarmOptimizer(BaseOptimizer):
    """
    Particle swarm optimizer.

    Args:
        goal: Fitness function to minimize.
        coordinates_initializer: Starting positions.
        velocity_initializer: Starting velocities.
        velocity_calculator: Velocity update rule.
        stop_checker: Termination criterion.
        post_velocity: Velocity corrections, applied in order.
        post_move: Position corrections, applied in order.
        **kwargs: ``loggers``, ``seed``, ``rng`` and ``n_workers``.
    """

    algorithm_name = "PSO"

    def __init__(
        self,
        goal,
        coordinates_initializer: CoordinatesInitializer,
        velocity_initializer: VelocityInitializer,
        velocity_calculator: VelocityCalculator,
        stop_checker,
        post_velocity: Sequence[PostVelocityCalc] | PostVelocityCalc | None = None,
        post_move: Sequence[PostMove] | PostMove | None = None,
        **kwargs,
    ):
        super().__init__(goal, stop_checker, **kwargs)
        self.coordinates_initializer = coordinates_initializer
        self.velocity_initializer = velocity_initializer
        self.velocity_calculator = velocity_calculator
        self.post_velocity = as_list(post_velocity)
        self.post_move = as_list(post_move)

        sizes = {
            type(component).__name__: len(component.intervals)
            for component in [coordinates_initializer, velocity_initializer, *self.post_move]
            if hasattr(component, "intervals")
        }
        if len(set(sizes.values())) > 1:
            raise ConfigurationError(f"Interval dimensions disagree between components: {sizes}")

        self.swarm = Swarm()

    def get_algorithm_config(self):
        config = super().get_algorithm_config()
        config.update({
            "pop_size": getattr(self.coordinates_initializer, "particles_count", len(self.swarm)),
            "velocity_calculator": type(self.velocity_calculator).__name__,
            "post_velocity": [type(item).__name__ for item in self.post_velocity],
            "post_move": [type(item).__name__ for item in self.post_move],
        })
        for name in ("phi_personal", "phi_global", "alpha", "xi"):
            if hasattr(self.velocity_calculator, name):
                config[name] = getattr(self.velocity_calculator, name)
        return config

    def _initialize_population(self):
        positions = self.coordinates_initializer.get_coordinates(self.rng)
        if not positions:
            raise ConfigurationError("Coordinates initializer returned no particles")
        velocities = self.velocity_initializer.get_velocity(positions, self.rng)
        if len(velocities) != len(positions):
            raise ConfigurationError(
                f"Got {len(velocities)} velocities for {len(positions)} particles"
            )

        fitness = self._evaluate(positions)
        self.swarm = Swarm(
            particles=[
                Particle(position, velocity, value)
                for position, velocity, value in zip(positions, velocities, fitness)
            ]
        )
        self.swarm.update_global_best()
        self.swarm.update_global_worst()

    def _next_generation(self):
        iteration = self.generation
        new_positions = []
        for particle in self.swarm.particles:
            velocity = self.velocity_calculator.calc_new_velocity(
                self.swarm, particle, iteration, self.rng
            )
            for correction in self.post_velocity:
                velocity = correction.correct_velocity(velocity)

            position = particle.position + velocity
            for correction in self.post_move:
                position = correction.post_move(position)

            particle.velocity = np.asarray(velocity, dtype=np.float64)
            new_positions.append(position)

        fitness = self._evaluate(new_positions)
        improved = 0
        for particle, position, value in zip(self.swarm.particles, new_positions, fitness):
            if particle.move_to(position, value):
                improved += 1

        if self.swarm.update_global_best():
            logger.debug(
                "Iteration %d: global best improved to %.6g", iteration + 1, self.swarm.best_fitness
            )
        self.swarm.update_global_worst()
        logger.debug("Iteration %d: %d personal bests improved", iteration + 1, improved)

    def _individuals(self):
        return [particle.as_individual() for particle in self.swarm.particles]

    def _velocities(self):
        return [particle.velocity for particle in self.swarm.particles]

    def _current_best(self):
        if self.swarm.best_position is None:
            return None
        return Individual(self.swarm.best_position, self.swarm.best_fitness)
