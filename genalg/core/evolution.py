"""Generational evolution driver.

The driver is a small state machine. ``Running(iteration, population)``
scores its population, reports progress, then either advances to
``Running(iteration + 1, next_population)`` or settles in
``Terminated(result)``. Only the best individual of the final generation is
returned; earlier generations are dropped as soon as their successor exists.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from concurrent.futures import Executor
from dataclasses import dataclass
from typing import Any, NamedTuple

import numpy as np
from numpy.random import Generator

from genalg.config import Config, validate_parameters
from genalg.evolution.fitness import (
    best_individual,
    make_executor,
    max_fitness,
    score_population,
)
from genalg.evolution.individual import (
    CrossBreedFn,
    FitnessFn,
    MutationFn,
    Operators,
    ScoredIndividual,
)
from genalg.evolution.operators import GeneticOperators


class EvolutionResult(NamedTuple):
    """Outcome of a run: fitness evaluations spent and the final best pair."""

    evaluations: int
    best: ScoredIndividual


@dataclass(frozen=True)
class GenerationReport:
    """Progress summary emitted once per scored generation."""

    iteration: int
    best: ScoredIndividual
    evaluations: int
    mean_fitness: float
    min_fitness: float

    @property
    def max_fitness(self) -> float:
        return self.best.score


Reporter = Callable[[GenerationReport], None]


def print_progress(report: GenerationReport) -> None:
    """Print the iteration number and the best pair so far."""
    print(f"Iteration: {report.iteration}")
    print(f"Results: [{report.evaluations}, {report.best}]")


@dataclass(frozen=True)
class Running:
    """A generation waiting to be scored."""

    iteration: int
    population: list[Any]


@dataclass(frozen=True)
class Terminated:
    """Final state holding the run's result."""

    result: EvolutionResult


class EvolutionEngine:
    """Drive generations until the fitness goal or iteration budget is hit."""

    def __init__(
        self,
        operators: Operators,
        first_generation: Sequence[Any],
        mutation_probability: float | None = None,
        good_enough_fitness: float | None = None,
        max_iterations: int | None = None,
        config: type[Config] | None = None,
        rng: Generator | None = None,
        reporter: Reporter | None = None,
        max_workers: int | None = None,
        use_processes: bool = False,
    ) -> None:
        self.config = config or Config
        self.operators = operators
        self.rng = rng or np.random.default_rng()
        self.reporter = reporter
        self.use_processes = use_processes

        self.mutation_probability = (
            self.config.MUTATION_PROBABILITY
            if mutation_probability is None
            else mutation_probability
        )
        self.good_enough_fitness = (
            self.config.GOOD_ENOUGH_FITNESS
            if good_enough_fitness is None
            else good_enough_fitness
        )
        self.max_iterations = (
            self.config.MAX_ITERATIONS if max_iterations is None else max_iterations
        )
        self.max_workers = (
            self.config.NUM_WORKERS if max_workers is None else max_workers
        )
        self.tournament_size = self.config.TOURNAMENT_SIZE
        self.selection_probability = self.config.SELECTION_PROBABILITY
        self.plateau_patience = self.config.PLATEAU_PATIENCE

        validate_parameters(
            first_generation,
            mutation_probability=self.mutation_probability,
            max_iterations=self.max_iterations,
            tournament_size=self.tournament_size,
            selection_probability=self.selection_probability,
            plateau_patience=self.plateau_patience,
        )

        self.population_size = len(first_generation)
        self.state: Running | Terminated = Running(0, list(first_generation))

        # Plateau bookkeeping only; never used to pick the returned individual.
        self._plateau_peak: float | None = None
        self._stale_generations = 0

        # Scoring pool shared by every generation of the run.
        self._executor: Executor | None = None

    @property
    def terminated(self) -> bool:
        return isinstance(self.state, Terminated)

    @property
    def result(self) -> EvolutionResult | None:
        if isinstance(self.state, Terminated):
            return self.state.result
        return None

    def step(self) -> Running | Terminated:
        """Score the current generation and move to the next state."""
        state = self.state
        if isinstance(state, Terminated):
            return state

        if self._executor is None:
            self._executor = make_executor(self.max_workers, self.use_processes)
        scored = score_population(
            self.operators.fitness,
            state.population,
            executor=self._executor,
        )
        top_score = max_fitness(scored)
        best = best_individual(scored, top_score)
        evaluations = (state.iteration + 1) * self.population_size

        if self.reporter is not None:
            scores = [pair.score for pair in scored]
            self.reporter(
                GenerationReport(
                    iteration=state.iteration,
                    best=best,
                    evaluations=evaluations,
                    mean_fitness=float(np.mean(scores)),
                    min_fitness=min(scores),
                )
            )

        if self._should_stop(state.iteration, top_score):
            self.state = Terminated(EvolutionResult(evaluations, best))
            self.close()
        else:
            self.state = Running(
                state.iteration + 1,
                GeneticOperators.next_generation(
                    self.operators.cross_breed,
                    self.operators.mutate,
                    self.mutation_probability,
                    scored,
                    rng=self.rng,
                    tournament_size=self.tournament_size,
                    selection_probability=self.selection_probability,
                    max_rounds=self.config.MAX_TOURNAMENT_ROUNDS,
                ),
            )
        return self.state

    def run(self) -> EvolutionResult:
        """Step until terminated and return the result."""
        try:
            while not isinstance(self.state, Terminated):
                self.step()
        finally:
            self.close()
        return self.state.result

    def close(self) -> None:
        """Shut down the scoring pool, if one was started."""
        if self._executor is not None:
            self._executor.shutdown()
            self._executor = None

    def __enter__(self) -> EvolutionEngine:
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    def _should_stop(self, iteration: int, top_score: float) -> bool:
        if iteration + 1 == self.max_iterations:
            return True
        if self.good_enough_fitness <= top_score:
            return True
        return self._plateaued(top_score)

    def _plateaued(self, top_score: float) -> bool:
        if self.plateau_patience <= 0:
            return False
        if self._plateau_peak is None or top_score > self._plateau_peak:
            self._plateau_peak = top_score
            self._stale_generations = 0
            return False
        self._stale_generations += 1
        return self._stale_generations >= self.plateau_patience


def evolve(
    fitness_fn: FitnessFn,
    cross_breed_fn: CrossBreedFn,
    mutation_fn: MutationFn,
    mutation_probability: float,
    good_enough_fitness: float,
    max_iterations: int,
    first_generation: Sequence[Any],
    *,
    config: type[Config] | None = None,
    rng: Generator | None = None,
    reporter: Reporter | None = print_progress,
    max_workers: int | None = None,
    use_processes: bool = False,
) -> EvolutionResult:
    """Run a genetic algorithm with the supplied operators.

    Args:
        fitness_fn: Scores an individual; higher is better. Must be pure, as it
            may run concurrently when ``max_workers`` > 1.
        cross_breed_fn: Combines two parents into one offspring.
        mutation_fn: Returns a randomly altered copy of its argument.
        mutation_probability: Chance that each offspring is mutated.
        good_enough_fitness: Stop once a generation's best scores at least this.
        max_iterations: Stop after this many generations.
        first_generation: Initial population; its size is kept throughout.
        config: Supplies tournament settings, worker count and plateau rule.
        rng: Generator for selection and mutation draws.
        reporter: Called with a ``GenerationReport`` after every generation;
            prints iteration and best pair by default. None runs silently.
        max_workers: Scoring pool size; None defers to the config.
        use_processes: Score in a process pool instead of threads.

    Returns:
        ``EvolutionResult(evaluations, best)`` where ``evaluations`` is
        generations run times population size and ``best`` is the top pair
        of the last generation.

    Raises:
        ConfigurationError: On parameters that could not yield a finite run.
    """

    engine = EvolutionEngine(
        Operators(fitness_fn, cross_breed_fn, mutation_fn),
        first_generation,
        mutation_probability=mutation_probability,
        good_enough_fitness=good_enough_fitness,
        max_iterations=max_iterations,
        config=config,
        rng=rng,
        reporter=reporter,
        max_workers=max_workers,
        use_processes=use_processes,
    )
    return engine.run()
