"""
Mutation operators.

:class:`BitwiseMutation` works on one gene. :class:`VecMutation` decides
whether a chromosome is mutated at all and, if so, which genes are passed
through the gene-level operator.
"""

from abc import ABC, abstractmethod

import numpy as np

from ..exceptions import ConfigurationError
from .cross import bits_to_float, float_to_bits

_BITS = 64


class Mutation(ABC):
    """Returns a mutated copy of its input."""

    @abstractmethod
    def mutate(self, value, rng: np.random.Generator):
        """Return the mutated value; the input is never modified."""


class BitwiseMutation(Mutation):
    """Flip ``bit_count`` random bits of a ``float64`` gene (positions may repeat)."""

    def __init__(self, bit_count: int = 1):
        if bit_count < 1:
            raise ConfigurationError(f"bit_count must be at least 1, got {bit_count}")
        self.bit_count = int(bit_count)

    def mutate(self, value, rng):
        bits = float_to_bits(value)
        for position in rng.integers(0, _BITS, size=self.bit_count):
            bits ^= 1 << int(position)
        return bits_to_float(bits)


class VecMutation(Mutation):
    """
    Probability-gated chromosome mutation.

    Args:
        probability: Chance, in percent (0-100), that a chromosome is mutated.
        gene_mutation: Gene-level operator applied to the chosen genes.
        gene_count: Number of distinct genes mutated in a selected chromosome.
            Capped at the chromosome length.
    """

    def __init__(self, probability: float, gene_mutation: Mutation, gene_count: int = 1):
        if not 0.0 <= probability <= 100.0:
            raise ConfigurationError(
                f"probability must be a percentage in [0, 100], got {probability}"
            )
        if gene_count < 1:
            raise ConfigurationError(f"gene_count must be at least 1, got {gene_count}")
        self.probability = float(probability)
        self.gene_mutation = gene_mutation
        self.gene_count = int(gene_count)

    def mutate(self, value, rng):
        chromosome = np.array(value, dtype=np.float64)
        if rng.uniform(0.0, 100.0) >= self.probability:
            return chromosome

        count = min(self.gene_count, chromosome.shape[0])
        for index in rng.choice(chromosome.shape[0], size=count, replace=False):
            chromosome[index] = self.gene_mutation.mutate(chromosome[index], rng)
        return chromosome
