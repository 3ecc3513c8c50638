"""
Genetic algorithm driver.

One generation runs the configured operators in a fixed order:

    pairing -> cross -> mutation -> pre-birth -> evaluate children
            -> merge with current population -> selections

Selections see the merged population (survivors plus admitted children) and
are applied left to right. Nothing refills a population that selection or
pre-birth filtering leaves below its target size; the run continues with
fewer individuals and reports a warning. A population emptied by selection
is fatal and raises :class:`PopulationCollapseError`.

Example:
    ```python
    intervals = [(-10.0, 10.0)]
    optimizer = GeneticOptimizer(
        goal=lambda x: (x[0] - 1.0) ** 2,
        creator=RandomCreator(50, intervals),
        pairing=Tournament(25, rounds_count=2),
        cross=VecCrossAllGenes(FloatCrossExp()),
        mutation=VecMutation(15.0, BitwiseMutation(2)),
        pre_births=[CheckChromoInterval(intervals)],
        selections=[KillFitnessNaN(), LimitPopulation(50)],
        stop_checker=CompositeAny([MaxIterations(200), Threshold(1e-6)]),
        seed=42,
    )
    result = optimizer.run()
    ```
"""

import logging
from typing import Sequence

from ..exceptions import ConfigurationError, PopulationCollapseError
from ..genetic.creation import Creator
from ..genetic.cross import Cross
from ..genetic.mutation import Mutation
from ..genetic.pairing import Pairing
from ..genetic.pre_birth import PreBirth
from ..genetic.selection import Selection
from ..population import Individual
from .base import BaseOptimizer, as_list

logger = logging.getLogger(__name__)


class GeneticOptimizer(BaseOptimizer):
    """
    Generational genetic algorithm over real-valued chromosomes.

    Args:
        goal: Fitness function to minimize.
        creator: Builds the starting chromosomes.
        pairing: Chooses parent families.
        cross: Turns a family of parent chromosomes into children.
        mutation: Optional mutation applied to every child.
        selections: Selection or list of selections applied each generation.
        stop_checker: Termination criterion.
        pre_births: Optional child filters applied before evaluation.
        population_size: Target size used for shrinkage warnings. Defaults
            to the creator's ``population_size``.
        **kwargs: ``loggers``, ``seed``, ``rng`` and ``n_workers``, passed to
            :class:`BaseOptimizer`.
    """

    algorithm_name = "GA"

    def __init__(
        self,
        goal,
        creator: Creator,
        pairing: Pairing,
        cross: Cross,
        mutation: Mutation | None,
        selections: Sequence[Selection] | Selection,
        stop_checker,
        pre_births: Sequence[PreBirth] | PreBirth | None = None,
        population_size: int | None = None,
        **kwargs,
    ):
        super().__init__(goal, stop_checker, **kwargs)
        self.creator = creator
        self.pairing = pairing
        self.cross = cross
        self.mutation = mutation
        self.selections = as_list(selections)
        self.pre_births = as_list(pre_births)

        if population_size is None:
            population_size = getattr(creator, "population_size", None)
        if population_size is not None and population_size <= 0:
            raise ConfigurationError(f"population_size must be positive, got {population_size}")
        self.population_size = population_size

        self._check_dimensions()

        self.population: list[Individual] = []
        self._children_count = 0

    def _check_dimensions(self):
        sizes = {
            type(component).__name__: len(component.intervals)
            for component in [self.creator, *self.pre_births, *self.selections]
            if hasattr(component, "intervals")
        }
        if len(set(sizes.values())) > 1:
            raise ConfigurationError(f"Interval dimensions disagree between components: {sizes}")

    def get_algorithm_config(self):
        config = super().get_algorithm_config()
        config.update({
            "pop_size": self.population_size,
            "creator": type(self.creator).__name__,
            "pairing": type(self.pairing).__name__,
            "cross": type(self.cross).__name__,
            "mutation": type(self.mutation).__name__ if self.mutation else None,
            "pre_births": [type(item).__name__ for item in self.pre_births],
            "selections": [type(item).__name__ for item in self.selections],
        })
        return config

    def _initialize_population(self):
        chromosomes = self.creator.create(self.rng)
        if not chromosomes:
            raise ConfigurationError("Creator returned an empty population")
        fitness = self._evaluate(chromosomes)
        self.population = [
            Individual(chromosome, value) for chromosome, value in zip(chromosomes, fitness)
        ]

    def _breed(self) -> list:
        children = []
        for family in self.pairing.get_pairs(self.population, self.rng):
            parents = [self.population[index].chromosome for index in family]
            children.extend(self.cross.cross(parents, self.rng))

        if self.mutation is not None:
            children = [self.mutation.mutate(child, self.rng) for child in children]

        for pre_birth in self.pre_births:
            children = pre_birth.pre_birth(self.population, children)
        return children

    def _next_generation(self):
        children = self._breed()
        fitness = self._evaluate(children)
        self._children_count = len(children)

        merged = self.population + [
            Individual(child, value) for child, value in zip(children, fitness)
        ]
        for selection in self.selections:
            merged = selection.kill(merged)

        if not merged:
            raise PopulationCollapseError(
                f"Population is empty after selection in generation {self.generation + 1}"
            )
        self.population = merged
        logger.debug(
            "Generation %d: %d children admitted, %d survivors",
            self.generation + 1,
            self._children_count,
            len(merged),
        )

    def _generation_warnings(self):
        if self.population_size is not None and len(self.population) < self.population_size:
            return [
                f"population shrank to {len(self.population)} of {self.population_size} "
                f"({self._children_count} children admitted)"
            ]
        return []

    def _individuals(self):
        return list(self.population)
