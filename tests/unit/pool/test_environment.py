"""
Unit tests for nevo.pool.environment module.
"""

from unittest.mock import Mock

import pytest

from nevo.genotype import Network
from nevo.pool     import Environment, FitnessFunction


class TestEnvironment:

    def test_is_abstract(self):
        with pytest.raises(TypeError):
            Environment()

    def test_subclass(self, config):
        class Constant(Environment):
            def evaluate_fitness(self, batch):
                for network in batch:
                    network.fitness = 2.0

        networks = [Network(config) for _ in range(3)]
        Constant().evaluate_fitness(networks)
        assert [network.fitness for network in networks] == [2.0, 2.0, 2.0]


class TestFitnessFunction:

    def test_call(self, config):
        network = Network(config)
        function = Mock(return_value=1.5)
        assert FitnessFunction(function)(network) == 1.5
        function.assert_called_once_with(network)

    def test_sets_fitness_and_score(self, config):
        networks = [Network(config) for _ in range(4)]
        environment = FitnessFunction(lambda network: float(len(network.connections)))

        environment.evaluate_fitness(networks)

        for network in networks:
            assert network.fitness == 2.0
            assert network.score == 2.0

    def test_errors_propagate(self, config):
        environment = FitnessFunction(Mock(side_effect=RuntimeError("simulation crashed")))
        with pytest.raises(RuntimeError, match="simulation crashed"):
            environment.evaluate_fitness([Network(config)])
