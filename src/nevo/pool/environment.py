"""
Environment Module

This module defines how the outside world assigns fitness to networks.

Classes:
    Environment:     Abstract base class for fitness evaluators
    FitnessFunction: Environment built from a function scoring one network
"""

from abc    import ABC, abstractmethod
from typing import Callable, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from nevo.genotype import Network

class Environment(ABC):
    """
    Assigns a fitness to every network of a batch.

    The Pool calls 'evaluate_fitness' once per batch, concurrently for
    disjoint batches, so implementations must tolerate concurrent calls. An
    implementation may only set the 'fitness' of the networks (and run them);
    it must never change their structure.
    """

    @abstractmethod
    def evaluate_fitness(self, batch: Sequence['Network']) -> None:
        """
        Set the 'fitness' attribute of every network in 'batch'.

        Parameters:
            batch: a read-only sequence of networks
        """
        pass

class FitnessFunction(Environment):
    """
    An Environment which scores each network independently with a function.

    Example:
        >>> def xor_fitness(network):
        ...     return 4.0 - sum((network.invoke(x)[0] - y) ** 2 for x, y in XOR_CASES)
        >>> pool.evolve(FitnessFunction(xor_fitness))
    """

    def __init__(self, function: Callable[['Network'], float]):
        """
        Parameters:
            function: returns the fitness of the network passed to it
        """
        self._function = function

    def __call__(self, network: 'Network') -> float:
        return self._function(network)

    def evaluate_fitness(self, batch: Sequence['Network']) -> None:
        for network in batch:
            network.fitness = self(network)
