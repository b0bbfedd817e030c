"""Analysis modules."""

from __future__ import annotations

from genalg.analysis.evolution_analysis import EvolutionAnalyzer

__all__ = ["EvolutionAnalyzer"]
