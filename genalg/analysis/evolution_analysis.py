"""Analysis utilities for evolutionary runs."""

from __future__ import annotations

import json
from pathlib import Path

import matplotlib.pyplot as plt


class EvolutionAnalyzer:
    """Plot the fitness history written by ``EvolutionMonitor.save``."""

    def __init__(self, history_path: str | Path) -> None:
        self.history_path = Path(history_path)
        self.history: dict[str, list] = {}

    def load(self) -> dict:
        """Load history JSON."""
        with open(self.history_path, "r", encoding="utf-8") as f:
            self.history = json.load(f)
        return self.history

    def plot_fitness_curves(self, output_dir: str | Path) -> Path | None:
        """Plot best, average and worst fitness per generation."""
        if not self.history.get("iteration"):
            return None
        output_dir = Path(output_dir)
        output_dir.mkdir(parents=True, exist_ok=True)
        iterations = self.history["iteration"]
        fig, ax = plt.subplots(figsize=(10, 5))
        ax.plot(iterations, self.history.get("avg_fitness", []), label="Avg")
        ax.plot(iterations, self.history.get("best_fitness", []), label="Best")
        ax.plot(iterations, self.history.get("worst_fitness", []), label="Worst")
        ax.set_xlabel("Generation")
        ax.set_ylabel("Fitness")
        ax.set_title("Fitness Curves")
        ax.legend()
        path = output_dir / "fitness_curves.png"
        plt.tight_layout()
        plt.savefig(path, dpi=150)
        plt.close(fig)
        return path
