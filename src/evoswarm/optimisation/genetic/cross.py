"""
Crossover operators.

Gene-level crosses combine single float genes taken from each parent and
return a list of child genes. :class:`VecCrossAllGenes` lifts a gene-level
cross to whole chromosomes by applying it to every gene index in turn.
"""

from abc import ABC, abstractmethod
from typing import Sequence

import numpy as np

from ..exceptions import ConfigurationError

_BITS = 64


class Cross(ABC):
    """Combines parents into children."""

    @abstractmethod
    def cross(self, parents: Sequence, rng: np.random.Generator) -> list:
        """Return the children of ``parents``."""


def _require_parents(parents, exact: int | None = None):
    if exact is not None and len(parents) != exact:
        raise ValueError(f"Expected {exact} parents, got {len(parents)}")
    if len(parents) < 2:
        raise ValueError(f"At least two parents are required, got {len(parents)}")


class FloatCrossExp(Cross):
    """
    Exponential blend of two genes.

    ``child = a + beta * (b - a)`` with ``beta`` drawn from an exponential
    distribution of the given mean. Identical parents give the same gene back.
    """

    def __init__(self, mean: float = 0.5):
        if not mean > 0:
            raise ConfigurationError(f"mean must be positive, got {mean}")
        self.mean = float(mean)

    def cross(self, parents, rng):
        _require_parents(parents, exact=2)
        first, second = float(parents[0]), float(parents[1])
        beta = rng.exponential(self.mean)
        return [first + beta * (second - first)]


class CrossMean(Cross):
    """Arithmetic mean of any number of parent genes."""

    def cross(self, parents, rng):
        _require_parents(parents)
        return [float(np.mean(np.asarray(parents, dtype=np.float64)))]


class FloatCrossGeometricMean(Cross):
    """Geometric mean of the parent genes (NaN when the product is negative)."""

    def cross(self, parents, rng):
        _require_parents(parents)
        product = float(np.prod(np.asarray(parents, dtype=np.float64)))
        with np.errstate(invalid="ignore"):
            return [float(np.power(product, 1.0 / len(parents)))]


def cross_bits(first: int, second: int, position: int) -> int:
    """Take bits ``>= position`` from ``first`` and the lower bits from ``second``."""
    mask_high = (~0 << position) & ((1 << _BITS) - 1)
    mask_low = (1 << position) - 1
    return (first & mask_high) | (second & mask_low)


def float_to_bits(value: float) -> int:
    return int(np.array(value, dtype=np.float64).view(np.uint64))


def bits_to_float(bits: int) -> float:
    return float(np.array(bits, dtype=np.uint64).view(np.float64))


class CrossBitwise(Cross):
    """Single-point crossover on the IEEE-754 bit pattern of two genes."""

    def cross(self, parents, rng):
        _require_parents(parents, exact=2)
        position = int(rng.integers(1, _BITS))
        bits = cross_bits(float_to_bits(parents[0]), float_to_bits(parents[1]), position)
        return [bits_to_float(bits)]


class VecCrossAllGenes(Cross):
    """
    Chromosome-level cross built from a gene-level one.

    Takes two or more parent chromosomes of equal length and returns a single
    child whose gene ``i`` comes from ``gene_cross`` applied to gene ``i`` of
    every parent.
    """

    def __init__(self, gene_cross: Cross):
        self.gene_cross = gene_cross

    def cross(self, parents, rng):
        _require_parents(parents)
        chromosomes = [np.asarray(parent, dtype=np.float64) for parent in parents]
        length = chromosomes[0].shape[0]
        if any(chromosome.shape != (length,) for chromosome in chromosomes):
            raise ValueError(
                f"Parent chromosomes differ in length: {[c.shape[0] for c in chromosomes]}"
            )
        child = []
        for genes in zip(*chromosomes):
            child.extend(self.gene_cross.cross(list(genes), rng))
        return [np.array(child, dtype=np.float64)]
