"""Evolve 63-bit genomes against the quartet fitness function."""

from __future__ import annotations

import argparse
import time
from pathlib import Path

import numpy as np

from genalg.analysis.evolution_analysis import EvolutionAnalyzer
from genalg.config import Config
from genalg.core.evolution import evolve, print_progress
from genalg.evolution.sampling import spawn_generators
from genalg.genomes import bitstring
from genalg.monitoring.evolution_monitor import EvolutionMonitor


def main() -> None:
    parser = argparse.ArgumentParser(description="Run the bit-string genetic algorithm")
    parser.add_argument("--population", type=int, default=None)
    parser.add_argument("--iterations", type=int, default=None)
    parser.add_argument("--mutation-probability", type=float, default=None)
    parser.add_argument("--good-enough", type=float, default=None)
    parser.add_argument("--tournament-size", type=int, default=None)
    parser.add_argument("--selection-probability", type=float, default=None)
    parser.add_argument("--plateau-patience", type=int, default=None)
    parser.add_argument("--workers", type=int, default=None, help="Scoring workers")
    parser.add_argument(
        "--processes", action="store_true", help="Score in processes, not threads"
    )
    parser.add_argument("--seed", type=int, default=Config.SEED)
    parser.add_argument("--quiet", action="store_true", help="No per-generation output")
    parser.add_argument(
        "--plot", action="store_true", help="Write history and fitness plot"
    )
    parser.add_argument(
        "--plot-dir", type=str, default=None, help="Defaults to Config.ANALYSIS_DIR"
    )
    args = parser.parse_args()

    class RunConfig(Config):
        pass

    overrides = {
        "POPULATION_SIZE": args.population,
        "MAX_ITERATIONS": args.iterations,
        "MUTATION_PROBABILITY": args.mutation_probability,
        "GOOD_ENOUGH_FITNESS": args.good_enough,
        "TOURNAMENT_SIZE": args.tournament_size,
        "SELECTION_PROBABILITY": args.selection_probability,
        "PLATEAU_PATIENCE": args.plateau_patience,
        "NUM_WORKERS": args.workers,
    }
    for name, value in overrides.items():
        if value is not None:
            setattr(RunConfig, name, value)

    # Separate streams for the initial population, the genome operators and
    # the engine's selection draws.
    seed_rng, operator_rng, engine_rng = spawn_generators(
        np.random.default_rng(args.seed), 3
    )
    operators = bitstring.make_operators(operator_rng)
    monitor = EvolutionMonitor(RunConfig)

    def report(generation_report) -> None:
        monitor(generation_report)
        if not args.quiet:
            print_progress(generation_report)

    start = time.perf_counter()
    result = evolve(
        operators.fitness,
        operators.cross_breed,
        operators.mutate,
        RunConfig.MUTATION_PROBABILITY,
        RunConfig.GOOD_ENOUGH_FITNESS,
        RunConfig.MAX_ITERATIONS,
        bitstring.random_genomes(RunConfig.POPULATION_SIZE, seed_rng),
        config=RunConfig,
        rng=engine_rng,
        reporter=report,
        use_processes=args.processes,
    )
    elapsed = time.perf_counter() - start

    print(f"Elapsed time: {elapsed * 1000:.1f} msecs")
    print(f"Evaluations:  {result.evaluations:,}")
    print(f"Best score:   {result.best.score} / {bitstring.MAX_SCORE}")
    print(f"Best genome:  {result.best.individual:063b}")

    if args.plot or args.plot_dir:
        if args.plot_dir:
            output_dir = Path(args.plot_dir)
        else:
            RunConfig.create_dirs()
            output_dir = Path(RunConfig.ANALYSIS_DIR)
        history_path = monitor.save(output_dir)
        analyzer = EvolutionAnalyzer(history_path)
        analyzer.load()
        analyzer.plot_fitness_curves(output_dir)
    print("done")


if __name__ == "__main__":
    main()
