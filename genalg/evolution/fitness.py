"""Fitness scoring of whole populations."""

from __future__ import annotations

from collections.abc import Sequence
from concurrent.futures import (
    Executor,
    ProcessPoolExecutor,
    ThreadPoolExecutor,
    as_completed,
)
from typing import Any

from genalg.evolution.individual import FitnessFn, ScoredIndividual


def make_executor(
    max_workers: int | None, use_processes: bool = False
) -> Executor | None:
    """Return a scoring pool, or None when scoring should stay sequential."""

    if max_workers is None or max_workers <= 1:
        return None
    if use_processes:
        return ProcessPoolExecutor(max_workers=max_workers)
    return ThreadPoolExecutor(max_workers=max_workers)


def score_population(
    fitness_fn: FitnessFn,
    population: Sequence[Any],
    max_workers: int | None = None,
    use_processes: bool = False,
    executor: Executor | None = None,
) -> list[ScoredIndividual]:
    """Pair every individual with its fitness.

    Scoring runs on ``executor`` when one is given; otherwise a pool is built
    for this call from ``max_workers``, and with ``max_workers`` unset or <= 1
    scoring is sequential and the result follows ``population`` order. Pooled
    results arrive in completion order; each pair is still correct. Process
    pools need a picklable ``fitness_fn``. ``fitness_fn`` is pure, so workers
    need no random source; callers parallelizing random work of their own
    should give each task a generator from ``spawn_generators``.

    Returns only after every evaluation has finished. The first exception
    raised by ``fitness_fn`` propagates.
    """

    if executor is not None:
        return _score_on(executor, fitness_fn, population)

    pool = make_executor(max_workers, use_processes)
    if pool is None:
        return [ScoredIndividual(fitness_fn(ind), ind) for ind in population]
    with pool:
        return _score_on(pool, fitness_fn, population)


def _score_on(
    executor: Executor, fitness_fn: FitnessFn, population: Sequence[Any]
) -> list[ScoredIndividual]:
    futures = {executor.submit(fitness_fn, ind): ind for ind in population}
    return [
        ScoredIndividual(future.result(), futures[future])
        for future in as_completed(futures)
    ]


def max_fitness(scored_population: Sequence[ScoredIndividual]) -> float:
    """Return the highest score in the scored population."""

    if len(scored_population) == 0:
        raise ValueError("scored_population must not be empty")
    return max(scored.score for scored in scored_population)


def best_individual(
    scored_population: Sequence[ScoredIndividual],
    top_score: float | None = None,
) -> ScoredIndividual:
    """Return the first pair, in evaluation order, holding the top score."""

    if top_score is None:
        top_score = max_fitness(scored_population)
    return next(
        scored for scored in scored_population if scored.score == top_score
    )
