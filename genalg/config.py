"""Project-wide configuration constants."""

from __future__ import annotations

from collections.abc import Sized
from dataclasses import dataclass
from numbers import Integral
from pathlib import Path
from typing import ClassVar


class ConfigurationError(ValueError):
    """Raised when evolution parameters cannot produce a terminating run."""


@dataclass(frozen=True)
class Config:
    """Central configuration constants for genalg."""

    # Population parameters
    POPULATION_SIZE: ClassVar[int] = 2000  # Individuals per generation
    MAX_ITERATIONS: ClassVar[int] = 1000  # Generation budget
    GOOD_ENOUGH_FITNESS: ClassVar[float] = 80  # Stop once reached

    # Selection parameters (Lobo's thesis: 5 and 0.5 work well)
    TOURNAMENT_SIZE: ClassVar[int] = 5
    SELECTION_PROBABILITY: ClassVar[float] = 0.5
    MAX_TOURNAMENT_ROUNDS: ClassVar[int] = 10_000  # Redraws before giving up

    # Mutation parameters
    MUTATION_PROBABILITY: ClassVar[float] = 0.01

    # Termination
    PLATEAU_PATIENCE: ClassVar[int] = 0  # 0 = never stop on a plateau

    # Execution
    NUM_WORKERS: ClassVar[int] = 0  # 0 or 1 = sequential scoring
    SEED: ClassVar[int] = 42

    # Path parameters
    DATA_DIR: ClassVar[str] = "data"
    ANALYSIS_DIR: ClassVar[str] = "data/analysis"

    @classmethod
    def create_dirs(cls) -> None:
        """Create required data directories."""
        for path in (cls.DATA_DIR, cls.ANALYSIS_DIR):
            Path(path).mkdir(parents=True, exist_ok=True)


def validate_selection(tournament_size: int, selection_probability: float) -> None:
    """Reject tournament settings that would never pick a winner."""

    if not isinstance(tournament_size, Integral) or tournament_size < 1:
        raise ConfigurationError(
            f"tournament_size must be a positive integer, got {tournament_size!r}"
        )
    if not 0.0 < selection_probability <= 1.0:
        raise ConfigurationError(
            "selection_probability must be in (0, 1], "
            f"got {selection_probability!r}"
        )


def validate_parameters(
    population: Sized,
    mutation_probability: float,
    max_iterations: int,
    tournament_size: int,
    selection_probability: float,
    plateau_patience: int = 0,
) -> None:
    """Validate evolution parameters before the first generation runs."""

    if len(population) == 0:
        raise ConfigurationError("first_generation must not be empty")
    if not 0.0 <= mutation_probability <= 1.0:
        raise ConfigurationError(
            f"mutation_probability must be in [0, 1], got {mutation_probability!r}"
        )
    if not isinstance(max_iterations, Integral) or max_iterations < 1:
        raise ConfigurationError(
            f"max_iterations must be a positive integer, got {max_iterations!r}"
        )
    if plateau_patience < 0:
        raise ConfigurationError("plateau_patience must be non-negative")
    validate_selection(tournament_size, selection_probability)
