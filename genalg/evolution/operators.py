"""Population-level genetic operators: crossbreeding and mutation."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

import numpy as np
from numpy.random import Generator

from genalg.config import Config
from genalg.evolution.individual import CrossBreedFn, MutationFn, ScoredIndividual
from genalg.evolution.selection import Selection


class GeneticOperators:
    """Build successive generations from caller-supplied genome operators."""

    @staticmethod
    def cross_breed(
        cross_breed_fn: CrossBreedFn,
        scored_population: Sequence[ScoredIndividual],
        rng: Generator | None = None,
        tournament_size: int = Config.TOURNAMENT_SIZE,
        selection_probability: float = Config.SELECTION_PROBABILITY,
        max_rounds: int = Config.MAX_TOURNAMENT_ROUNDS,
    ) -> list[Any]:
        """Breed a young generation the same size as ``scored_population``.

        Every offspring has its own pair of tournament-selected parents.
        """

        generator = rng or np.random.default_rng()

        def select() -> Any:
            return Selection.tournament_select(
                scored_population,
                tournament_size=tournament_size,
                selection_probability=selection_probability,
                rng=generator,
                max_rounds=max_rounds,
            ).individual

        offspring: list[Any] = []
        for _ in range(len(scored_population)):
            parent1 = select()
            parent2 = select()
            offspring.append(cross_breed_fn(parent1, parent2))
        return offspring

    @staticmethod
    def mutate(
        mutation_fn: MutationFn,
        mutation_probability: float,
        population: Sequence[Any],
        rng: Generator | None = None,
    ) -> list[Any]:
        """With the given probability, apply ``mutation_fn`` to each member."""

        generator = rng or np.random.default_rng()
        return [
            mutation_fn(individual)
            if generator.random() < mutation_probability
            else individual
            for individual in population
        ]

    @staticmethod
    def next_generation(
        cross_breed_fn: CrossBreedFn,
        mutation_fn: MutationFn,
        mutation_probability: float,
        scored_population: Sequence[ScoredIndividual],
        rng: Generator | None = None,
        tournament_size: int = Config.TOURNAMENT_SIZE,
        selection_probability: float = Config.SELECTION_PROBABILITY,
        max_rounds: int = Config.MAX_TOURNAMENT_ROUNDS,
    ) -> list[Any]:
        """Crossbreed the scored generation, then mutate the offspring."""

        generator = rng or np.random.default_rng()
        young = GeneticOperators.cross_breed(
            cross_breed_fn,
            scored_population,
            rng=generator,
            tournament_size=tournament_size,
            selection_probability=selection_probability,
            max_rounds=max_rounds,
        )
        return GeneticOperators.mutate(
            mutation_fn, mutation_probability, young, rng=generator
        )
