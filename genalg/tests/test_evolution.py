"""Tests for the generational evolution driver."""

from __future__ import annotations

import numpy as np
import pytest
from numpy.random import Generator

from genalg.config import Config, ConfigurationError
from genalg.core.evolution import (
    EvolutionEngine,
    EvolutionResult,
    GenerationReport,
    Running,
    Terminated,
    evolve,
)
from genalg.evolution import fitness as fitness_module
from genalg.evolution.individual import Operators, ScoredIndividual
from genalg.genomes import bitstring
from genalg.monitoring.evolution_monitor import EvolutionMonitor


@pytest.fixture
def rng() -> Generator:
    """Seeded random generator."""

    return np.random.default_rng(seed=42)


def _identity(x):
    return x


class TestTermination:
    """Stop conditions and evaluation counting."""

    def test_all_zero_genomes_stop_immediately(self, rng: Generator) -> None:
        operators = bitstring.make_operators(rng)
        reports: list[GenerationReport] = []
        evaluations, best = evolve(
            operators.fitness,
            operators.cross_breed,
            operators.mutate,
            0.01,
            80,
            1000,
            [0] * 25,
            rng=rng,
            reporter=reports.append,
        )
        assert evaluations == 25
        assert best == ScoredIndividual(80, 0)
        assert [r.iteration for r in reports] == [0]

    def test_single_unmutated_individual_runs_full_budget(
        self, rng: Generator
    ) -> None:
        class SoloConfig(Config):
            TOURNAMENT_SIZE = 1

        genome = 0b1011_0110_1111_0001
        operators = bitstring.make_operators(rng)
        monitor = EvolutionMonitor()
        result = evolve(
            operators.fitness,
            operators.cross_breed,
            operators.mutate,
            0.0,
            bitstring.MAX_SCORE,
            7,
            [genome],
            config=SoloConfig,
            rng=rng,
            reporter=monitor,
        )
        assert result == EvolutionResult(7, ScoredIndividual(bitstring.score_bits(genome), genome))
        assert monitor.history["iteration"] == list(range(7))
        assert set(monitor.history["best_fitness"]) == {float(bitstring.score_bits(genome))}

    @pytest.mark.parametrize(("size", "iterations"), [(1, 1), (3, 4), (10, 12)])
    def test_evaluations_equal_generations_times_size(
        self, rng: Generator, size: int, iterations: int
    ) -> None:
        calls: list[int] = []

        def fitness(x: int) -> int:
            calls.append(x)
            return 0

        result = evolve(
            fitness,
            lambda a, b: a,
            _identity,
            0.5,
            1,
            iterations,
            list(range(size)),
            rng=rng,
        )
        assert result.evaluations == iterations * size
        assert len(calls) == result.evaluations

    def test_good_enough_stops_early(self, rng: Generator) -> None:
        monitor = EvolutionMonitor()
        result = evolve(
            _identity,
            lambda a, b: max(a, b) + 1,
            _identity,
            0.0,
            5,
            100,
            [0, 0, 0, 0],
            rng=rng,
            reporter=monitor,
        )
        assert result.evaluations == 6 * 4
        assert result.best.score == 5
        assert monitor.history["iteration"][-1] == 5

    def test_reaching_goal_on_first_generation(self, rng: Generator) -> None:
        result = evolve(_identity, max, _identity, 0.0, 3, 50, [1, 3, 2], rng=rng)
        assert result == EvolutionResult(3, ScoredIndividual(3, 3))

    def test_returns_best_of_final_generation_only(self, rng: Generator) -> None:
        result = evolve(
            _identity,
            lambda a, b: a - 1,
            _identity,
            0.0,
            1000,
            3,
            [10, 0],
            rng=rng,
        )
        assert result.evaluations == 6
        assert result.best.score < 10

    def test_plateau_stops_run(self, rng: Generator) -> None:
        class PatientConfig(Config):
            PLATEAU_PATIENCE = 3

        result = evolve(
            lambda x: 1,
            lambda a, b: a,
            _identity,
            0.0,
            10,
            100,
            [1, 2],
            config=PatientConfig,
            rng=rng,
        )
        assert result.evaluations == 4 * 2

    def test_plateau_disabled_by_default(self, rng: Generator) -> None:
        result = evolve(
            lambda x: 1, lambda a, b: a, _identity, 0.0, 10, 20, [1, 2], rng=rng
        )
        assert result.evaluations == 20 * 2


class TestValidation:
    """Malformed parameters fail before the first generation."""

    @pytest.mark.parametrize(
        "overrides",
        [
            {"first_generation": []},
            {"mutation_probability": 1.5},
            {"mutation_probability": -0.5},
            {"max_iterations": 0},
        ],
    )
    def test_rejects_bad_arguments(self, rng: Generator, overrides) -> None:
        params = {
            "mutation_probability": 0.1,
            "good_enough_fitness": 10,
            "max_iterations": 5,
            "first_generation": [1, 2, 3],
        }
        params.update(overrides)
        with pytest.raises(ConfigurationError):
            evolve(_identity, max, _identity, rng=rng, **params)

    @pytest.mark.parametrize(
        ("attr", "value"),
        [("TOURNAMENT_SIZE", 0), ("SELECTION_PROBABILITY", 0.0)],
    )
    def test_rejects_non_terminating_tournament(
        self, rng: Generator, attr: str, value
    ) -> None:
        BadConfig = type("BadConfig", (Config,), {attr: value})
        with pytest.raises(ConfigurationError):
            evolve(
                _identity, max, _identity, 0.1, 10, 5, [1, 2], config=BadConfig, rng=rng
            )


class TestErrors:
    """Operator failures abort the run."""

    def test_cross_breed_error_propagates(self, rng: Generator) -> None:
        def broken(a, b):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            evolve(_identity, broken, _identity, 0.1, 100, 5, [1, 2], rng=rng)

    def test_fitness_error_propagates_from_pool(self, rng: Generator) -> None:
        def broken(x):
            raise KeyError(x)

        with pytest.raises(KeyError):
            evolve(
                broken, max, _identity, 0.1, 100, 5, [1, 2], rng=rng, max_workers=2
            )


class TestEngine:
    """State machine stepping."""

    def test_step_transitions(self, rng: Generator) -> None:
        engine = EvolutionEngine(
            Operators(_identity, max, _identity),
            [1, 2],
            mutation_probability=0.0,
            good_enough_fitness=100,
            max_iterations=2,
            rng=rng,
        )
        assert engine.state == Running(0, [1, 2])
        assert engine.result is None

        state = engine.step()
        assert isinstance(state, Running)
        assert state.iteration == 1
        assert len(state.population) == 2

        state = engine.step()
        assert isinstance(state, Terminated)
        assert engine.terminated
        assert engine.result.evaluations == 4
        assert engine.step() is state

    def test_config_supplies_defaults(self, rng: Generator) -> None:
        class ShortConfig(Config):
            MAX_ITERATIONS = 3
            GOOD_ENOUGH_FITNESS = 1000
            MUTATION_PROBABILITY = 0.0

        engine = EvolutionEngine(
            Operators(_identity, max, _identity), [1, 2], config=ShortConfig, rng=rng
        )
        assert engine.run().evaluations == 6


class TestReproducibility:
    """Seeded runs and parallel scoring."""

    def _run(self, seed: int, max_workers: int | None = None):
        rng = np.random.default_rng(seed)
        operators = bitstring.make_operators(rng)
        monitor = EvolutionMonitor()
        result = evolve(
            operators.fitness,
            operators.cross_breed,
            operators.mutate,
            0.05,
            bitstring.MAX_SCORE,
            15,
            bitstring.random_genomes(40, rng),
            rng=rng,
            reporter=monitor,
            max_workers=max_workers,
        )
        return result, monitor.history

    def test_same_seed_same_run(self) -> None:
        assert self._run(123) == self._run(123)

    def test_threaded_scoring_completes(self) -> None:
        result, history = self._run(5, max_workers=4)
        assert result.evaluations == len(history["iteration"]) * 40
        assert result.best.score == bitstring.score_bits(result.best.individual)
        assert result.best.score == history["best_fitness"][-1]

    def test_evolution_improves_on_random_start(self) -> None:
        _, history = self._run(7)
        assert max(history["avg_fitness"]) > history["avg_fitness"][0]


class TestReporting:
    """Progress output."""

    def test_evolve_prints_progress_by_default(self, rng: Generator, capsys) -> None:
        evolve(_identity, max, _identity, 0.0, 1000, 3, [1, 2], rng=rng)
        out = capsys.readouterr().out
        assert [line for line in out.splitlines() if line.startswith("Iteration:")] == [
            "Iteration: 0",
            "Iteration: 1",
            "Iteration: 2",
        ]
        assert "Results: [6, " in out

    def test_no_reporter_is_silent(self, rng: Generator, capsys) -> None:
        evolve(_identity, max, _identity, 0.0, 1000, 3, [1, 2], rng=rng, reporter=None)
        assert capsys.readouterr().out == ""


class TestScoringPool:
    """One scoring pool per run."""

    @pytest.fixture
    def pools(self, monkeypatch) -> list:
        created: list = []
        real_pool = fitness_module.ThreadPoolExecutor

        class CountingPool(real_pool):
            def __init__(self, *args, **kwargs) -> None:
                super().__init__(*args, **kwargs)
                created.append(self)

        monkeypatch.setattr(fitness_module, "ThreadPoolExecutor", CountingPool)
        return created

    def test_pool_reused_across_generations(self, rng: Generator, pools: list) -> None:
        engine = EvolutionEngine(
            Operators(_identity, max, _identity),
            [1, 2, 3, 4],
            mutation_probability=0.0,
            good_enough_fitness=1000,
            max_iterations=6,
            rng=rng,
            max_workers=2,
        )
        assert engine.run().evaluations == 24
        assert len(pools) == 1
        assert pools[0]._shutdown

    def test_pool_shut_down_when_operator_fails(
        self, rng: Generator, pools: list
    ) -> None:
        def broken(a, b):
            raise RuntimeError("boom")

        with pytest.raises(RuntimeError, match="boom"):
            evolve(
                _identity, broken, _identity, 0.1, 100, 5, [1, 2],
                rng=rng, reporter=None, max_workers=2,
            )
        assert len(pools) == 1
        assert pools[0]._shutdown

    def test_sequential_scoring_starts_no_pool(
        self, rng: Generator, pools: list
    ) -> None:
        evolve(_identity, max, _identity, 0.0, 1000, 4, [1, 2], rng=rng, reporter=None)
        assert pools == []

    def test_engine_context_manager_closes_pool(
        self, rng: Generator, pools: list
    ) -> None:
        with EvolutionEngine(
            Operators(_identity, max, _identity),
            [1, 2],
            good_enough_fitness=1000,
            max_iterations=5,
            rng=rng,
            max_workers=2,
        ) as engine:
            engine.step()
            assert len(pools) == 1
            assert not pools[0]._shutdown
        assert pools[0]._shutdown
