"""Per-generation progress reporters."""

from __future__ import annotations

import json
from pathlib import Path

from genalg.config import Config
from genalg.core.evolution import GenerationReport


class EvolutionMonitor:
    """Track fitness statistics for every generation of a run."""

    def __init__(
        self,
        config: type[Config] | None = None,
        verbose: bool = False,
    ) -> None:
        self.config = config or Config
        self.verbose = verbose
        self.history: dict[str, list] = {
            "iteration": [],
            "evaluations": [],
            "best_fitness": [],
            "avg_fitness": [],
            "worst_fitness": [],
        }

    def __call__(self, report: GenerationReport) -> None:
        self.record(report)
        if self.verbose:
            self._print_generation_summary(report)

    def record(self, report: GenerationReport) -> None:
        """Record one generation of statistics."""
        self.history["iteration"].append(report.iteration)
        self.history["evaluations"].append(report.evaluations)
        self.history["best_fitness"].append(float(report.max_fitness))
        self.history["avg_fitness"].append(float(report.mean_fitness))
        self.history["worst_fitness"].append(float(report.min_fitness))

    def save(self, output_dir: str | Path | None = None) -> Path:
        """Save history to JSON."""
        output_dir = Path(output_dir or self.config.ANALYSIS_DIR)
        output_dir.mkdir(parents=True, exist_ok=True)
        path = output_dir / "evolution_history.json"
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.history, f, indent=2)
        return path

    def _print_generation_summary(self, report: GenerationReport) -> None:
        print("\n" + "=" * 60)
        print(f"Generation {report.iteration}")
        print("=" * 60)
        print(f"  Best Fitness:  {report.max_fitness}")
        print(f"  Avg Fitness:   {report.mean_fitness:.2f}")
        print(f"  Worst Fitness: {report.min_fitness}")
        print(f"  Evaluations:   {report.evaluations:,}")
        print(f"  Best:          {report.best.individual!r}")
