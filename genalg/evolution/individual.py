"""Value types shared by the evolution machinery."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, Generic, NamedTuple, TypeVar

T = TypeVar("T")

FitnessFn = Callable[[Any], float]
CrossBreedFn = Callable[[Any, Any], Any]
MutationFn = Callable[[Any], Any]


class ScoredIndividual(NamedTuple):
    """An individual paired with the score its fitness function gave it."""

    score: float
    individual: Any


@dataclass(frozen=True)
class Operators(Generic[T]):
    """Bundle of the three caller-supplied genetic operators for genome type T.

    ``fitness`` must be deterministic and side-effect free, since the scorer
    may call it from several workers at once. ``cross_breed`` and ``mutate``
    are always called from the driver thread; random ones should be bound to
    their own generator, e.g. one of ``spawn_generators(rng, n)``.
    """

    fitness: Callable[[T], float]
    cross_breed: Callable[[T, T], T]
    mutate: Callable[[T], T]
