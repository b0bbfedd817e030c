"""Probabilistic tournament selection."""

from __future__ import annotations

from collections.abc import Sequence
from itertools import islice

import numpy as np
from numpy.random import Generator

from genalg.config import Config, validate_selection
from genalg.evolution.individual import ScoredIndividual
from genalg.evolution.sampling import random_elements


class SelectionError(RuntimeError):
    """Raised when a tournament fails to produce a winner within its budget."""


class Selection:
    """Parent selection for generational runs."""

    @staticmethod
    def tournament_select(
        scored_population: Sequence[ScoredIndividual],
        tournament_size: int = Config.TOURNAMENT_SIZE,
        selection_probability: float = Config.SELECTION_PROBABILITY,
        rng: Generator | None = None,
        max_rounds: int = Config.MAX_TOURNAMENT_ROUNDS,
    ) -> ScoredIndividual:
        """Select one scored individual via probabilistic tournament.

        A round draws ``tournament_size`` candidates with replacement, ranks
        them best first (ties keep draw order) and walks down the ranking,
        accepting each candidate with ``selection_probability``. A round in
        which nobody is accepted is discarded and a fresh one is drawn.

        Larger tournaments and higher probabilities favour fitter individuals;
        a tournament of one is plain uniform selection.

        See http://www.fernandolobo.info/p/thesis.pdf for the default 5 / 0.5.
        """

        if len(scored_population) == 0:
            raise ValueError("scored_population must not be empty")
        validate_selection(tournament_size, selection_probability)

        generator = rng or np.random.default_rng()
        draws = random_elements(scored_population, generator)

        for _ in range(max_rounds):
            tournament = sorted(
                islice(draws, tournament_size),
                key=lambda candidate: candidate.score,
                reverse=True,
            )
            for candidate in tournament:
                if generator.random() < selection_probability:
                    return candidate

        raise SelectionError(
            f"no tournament winner after {max_rounds} rounds "
            f"(tournament_size={tournament_size}, "
            f"selection_probability={selection_probability})"
        )
