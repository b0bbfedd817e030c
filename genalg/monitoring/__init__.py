"""Progress reporting for evolutionary runs."""

from __future__ import annotations

from genalg.core.evolution import print_progress
from genalg.monitoring.evolution_monitor import EvolutionMonitor

__all__ = ["EvolutionMonitor", "print_progress"]
