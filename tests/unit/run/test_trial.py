"""
Unit tests for nevo.run.trial module.

This module contains tests for the Trial class, which runs the
evaluate / report / terminate / breed loop on a Pool.
"""

import logging
import random

import pytest

from nevo.pool       import Environment, FitnessFunction
from nevo.run.config import Config
from nevo.run.trial  import Trial
from nevo.selection  import Tournament


# ============================================================================
# Helpers
# ============================================================================

class ConcreteTrial(Trial):
    """Trial recording its report calls."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.progress_reports = []
        self.final_report_called = False

    def _report_progress(self):
        self.progress_reports.append(self.generation)

    def _final_report(self):
        self.final_report_called = True


class Alternating(Environment):
    """Fitness 0, 1, 0, 1, ... along each batch."""

    def evaluate_fitness(self, batch):
        for index, network in enumerate(batch):
            network.fitness = float(index % 2)


@pytest.fixture
def small_config():
    return Config(population_size=10, elitism=2, max_number_generations=3)


def constant(value):
    return FitnessFunction(lambda network: value)


# ============================================================================
# Test Termination
# ============================================================================

class TestTermination:

    def test_max_number_generations(self, small_config):
        trial = Trial(small_config, constant(1.0), rng=random.Random(1))
        best = trial.run()

        assert trial.generation == 3
        assert len(trial.history) == 4
        assert trial.failed
        assert best is trial.best
        assert best is not None

    def test_threshold_reached_immediately(self):
        config = Config(population_size=10, elitism=2, fitness_threshold=0.5)
        trial = Trial(config, constant(1.0))
        trial.run()

        assert trial.generation == 0
        assert len(trial.history) == 1
        assert not trial.failed

    def test_threshold_criterion_max(self):
        config = Config(population_size=10, elitism=2, max_number_generations=5,
                        fitness_threshold=0.6, fitness_criterion="max")
        trial = Trial(config, Alternating())
        trial.run()
        assert trial.generation == 0
        assert not trial.failed

    def test_threshold_criterion_mean(self):
        config = Config(population_size=10, elitism=2, max_number_generations=5,
                        fitness_threshold=0.6, fitness_criterion="mean")
        trial = Trial(config, Alternating())
        trial.run()
        assert trial.generation == 5
        assert trial.failed

    def test_custom_terminate(self, small_config):
        class OneShot(Trial):
            def _terminate(self):
                return True

        trial = OneShot(small_config, constant(1.0))
        trial.run()
        assert trial.generation == 0


# ============================================================================
# Test Run Loop
# ============================================================================

class TestRun:

    def test_reports(self, small_config):
        trial = ConcreteTrial(small_config, constant(1.0))
        trial.run()
        assert trial.progress_reports == [0, 1, 2, 3]
        assert trial.final_report_called

    def test_suppress_output(self, small_config):
        trial = ConcreteTrial(small_config, constant(1.0), suppress_output=True)
        trial.run()
        assert trial.progress_reports == []
        assert not trial.final_report_called

    def test_rerun_resets_state(self, small_config):
        trial = Trial(small_config, constant(1.0))
        trial.run()
        first_pool = trial.pool
        trial.run()
        assert len(trial.history) == 4
        assert trial.pool is not first_pool

    def test_selection_is_passed_to_pool(self, small_config):
        select = Tournament(3, 0.5)
        trial = Trial(small_config, constant(1.0), select=select)
        trial.run()
        assert trial.pool.select is select

    def test_best_network(self, small_config):
        environment = FitnessFunction(lambda network: float(len(network.connections)))
        trial = Trial(small_config, environment, rng=random.Random(2))
        best = trial.run()
        assert best.fitness == max(stats["max"] for stats in trial.history)
        best.validate()

    def test_history(self, small_config):
        trial = Trial(small_config, Alternating())
        trial.run()
        assert trial.history[0] == {"max": 1.0, "mean": 0.5, "min": 0.0}

    def test_default_reports_are_logged(self, small_config, caplog):
        caplog.set_level(logging.INFO, logger="nevo.run.trial")
        Trial(small_config, constant(1.0)).run()

        messages = [record.getMessage() for record in caplog.records]
        assert sum(message.startswith("generation") for message in messages) == 4
        assert any("best network" in message for message in messages)
        assert any("trial failed" in message for message in messages)

    def test_environment_error_propagates(self, small_config):
        trial = Trial(small_config, FitnessFunction(lambda network: 1 / 0), suppress_output=True)
        with pytest.raises(ZeroDivisionError):
            trial.run()
