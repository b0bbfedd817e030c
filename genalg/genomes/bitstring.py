"""Bit operations on 63-bit integer genomes.

Every quartet of bits is scored on its own: ``0000`` is worth 5, anything
else is worth its count of ones. Sixteen quartets give a maximum of 80,
reached only by the all-zero genome, which the one-counting reward steers
away from. A deceptive landscape for a genetic algorithm.
"""

from __future__ import annotations

from functools import partial

import numpy as np
from numpy.random import Generator

from genalg.evolution.individual import Operators

GENOME_BITS = 63
QUARTET_OFFSETS = tuple(range(0, GENOME_BITS, 4))
MAX_SCORE = 5 * len(QUARTET_OFFSETS)

# Reward indexed by the number of ones in a quartet.
QUARTET_REWARD = (5, 1, 2, 3, 4)


def cross_bits(a: int, b: int, rng: Generator | None = None) -> int:
    """Single point crossover: bits below the cut from ``b``, the rest from ``a``."""

    generator = rng or np.random.default_rng()
    cross_point = int(generator.integers(GENOME_BITS))
    right_mask = (1 << cross_point) - 1
    left_mask = ~right_mask
    return (a & left_mask) | (b & right_mask)


def mutate_bits(n: int, rng: Generator | None = None) -> int:
    """Flip a random bit."""

    generator = rng or np.random.default_rng()
    return n ^ (1 << int(generator.integers(GENOME_BITS)))


def score_bits(n: int) -> int:
    """Sum the quartet rewards of ``n``."""

    return sum(
        QUARTET_REWARD[((n >> offset) & 0b1111).bit_count()]
        for offset in QUARTET_OFFSETS
    )


def random_genomes(count: int, rng: Generator | None = None) -> list[int]:
    """Return ``count`` uniformly random non-negative 63-bit genomes."""

    generator = rng or np.random.default_rng()
    values = generator.integers(0, 1 << GENOME_BITS, size=count, dtype=np.uint64)
    return [int(v) for v in values]


def make_operators(rng: Generator | None = None) -> Operators[int]:
    """Bundle the bit operators, binding the random ones to ``rng``."""

    generator = rng or np.random.default_rng()
    return Operators(
        fitness=score_bits,
        cross_breed=partial(cross_bits, rng=generator),
        mutate=partial(mutate_bits, rng=generator),
    )
