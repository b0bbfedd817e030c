"""Uniform sampling with replacement from indexable sequences."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from typing import TypeVar

import numpy as np
from numpy.random import Generator

E = TypeVar("E")


def random_elements(
    sequence: Sequence[E], rng: Generator | None = None
) -> Iterator[E]:
    """Return an endless iterator of independent uniform draws.

    Draws are made lazily, one per ``next()``; bound it with
    ``itertools.islice``.
    """

    if len(sequence) == 0:
        raise ValueError("sequence must not be empty")

    generator = rng or np.random.default_rng()
    return _draw_forever(sequence, generator)


def _draw_forever(sequence: Sequence[E], generator: Generator) -> Iterator[E]:
    size = len(sequence)
    while True:
        yield sequence[int(generator.integers(size))]


def spawn_generators(rng: Generator, count: int) -> list[Generator]:
    """Derive ``count`` statistically independent child generators.

    Hand one to each concurrent task so no two tasks share a generator.
    """

    if count < 0:
        raise ValueError("count must be non-negative")
    return rng.spawn(count)
