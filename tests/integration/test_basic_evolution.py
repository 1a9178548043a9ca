"""
Integration tests for basic evolution.

These tests run complete trials on the XOR problem and check properties
which hold for every run (monotone best fitness thanks to elitism, valid
networks, reproducibility with a seeded generator) rather than requiring
the problem to be solved.
"""

import random

import pytest

from nevo.pool       import FitnessFunction, Pool
from nevo.run.config import Config
from nevo.run.trial  import Trial
from nevo.selection  import FitnessProportionate, Power, Tournament


def xor_environment(xor_cases):
    def fitness(network):
        network.request_reset()
        error = 0.0
        for inputs, expected in xor_cases:
            error += (network.invoke(inputs)[0] - expected) ** 2
        return 4.0 - error
    return FitnessFunction(fitness)


@pytest.fixture
def xor_config():
    return Config(inputs=2, outputs=1,
                  output_activations="sigmoid",
                  hidden_activations="sigmoid, tanh, relu, linear",
                  population_size=50,
                  elitism=3,
                  max_number_generations=25)


# ============================================================================
# Test Basic Evolution
# ============================================================================

class TestBasicEvolution:

    @pytest.mark.parametrize("select", [Power(5.0), Tournament(5, 0.6), FitnessProportionate()])
    def test_best_fitness_never_decreases(self, xor_config, xor_cases, select):
        trial = Trial(xor_config, xor_environment(xor_cases), select=select,
                      rng=random.Random(42), suppress_output=True)
        best = trial.run()

        maxima = [stats["max"] for stats in trial.history]
        assert len(maxima) == 26
        assert all(later >= earlier for earlier, later in zip(maxima, maxima[1:]))
        best.validate()
        assert len(best.invoke([1.0, 0.0])) == 1

    def test_networks_grow(self, xor_config, xor_cases):
        trial = Trial(xor_config, xor_environment(xor_cases), rng=random.Random(7), suppress_output=True)
        trial.run()
        assert any(network.hidden_count > 0 for network in trial.pool)
        for network in trial.pool:
            network.validate()

    def test_batched_evolution(self, xor_config, xor_cases):
        pool = Pool(xor_config, batch_size=10, rng=random.Random(3))
        environment = xor_environment(xor_cases)
        for _ in range(10):
            pool.evolve(environment)
        assert pool.generation == 10
        assert len(pool) == 50
        for network in pool:
            network.validate()

    def test_reproducible_with_single_batch(self, xor_config, xor_cases):
        """With one batch and a seeded generator, two runs are identical."""
        histories = []
        for _ in range(2):
            trial = Trial(xor_config, xor_environment(xor_cases), rng=random.Random(11), suppress_output=True)
            trial.run()
            histories.append(trial.history)
        assert histories[0] == histories[1]

    def test_threshold_success(self, xor_cases):
        config = Config(inputs=2, outputs=1, population_size=30, elitism=2,
                        max_number_generations=10, fitness_threshold=-20.0)
        trial = Trial(config, xor_environment(xor_cases), suppress_output=True)
        trial.run()
        assert not trial.failed
        assert trial.generation == 0

