"""Pluggable generational genetic algorithm."""

from __future__ import annotations

from genalg.config import Config, ConfigurationError
from genalg.core.evolution import EvolutionEngine, EvolutionResult, evolve
from genalg.evolution.individual import Operators, ScoredIndividual
from genalg.evolution.selection import SelectionError

__all__ = [
    "Config",
    "ConfigurationError",
    "EvolutionEngine",
    "EvolutionResult",
    "Operators",
    "ScoredIndividual",
    "SelectionError",
    "evolve",
]
