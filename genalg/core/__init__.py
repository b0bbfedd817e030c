"""Generational evolution driver."""

from __future__ import annotations

from genalg.core.evolution import (
    EvolutionEngine,
    EvolutionResult,
    GenerationReport,
    Running,
    Terminated,
    evolve,
)

__all__ = [
    "EvolutionEngine",
    "EvolutionResult",
    "GenerationReport",
    "Running",
    "Terminated",
    "evolve",
]
