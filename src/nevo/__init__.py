"""
nevo - Neuroevolution of network topologies and weights.

This package evolves neural networks with mutation and crossover alone (no
gradient descent): a fixed-size pool of networks is evaluated by an external
environment, ranked by score and bred generation after generation. Networks
may contain recurrent connections, self connections and gated connections.

Main components:
- activations: Activation functions for the nodes of a network
- genotype: Nodes, connections, networks, mutation operators and crossover
- selection: Parent selection strategies
- pool: Population management with batched parallel evaluation and breeding
- run: Configuration and the trial (run loop)

Example:
    >>> from nevo import Config, FitnessFunction, Trial
    >>> config = Config("config.ini")
    >>> def fitness(network):
    ...     # Implement fitness evaluation
    ...     pass
    >>> trial = Trial(config, FitnessFunction(fitness))
    >>> best = trial.run()
"""

__version__ = "0.1.0"

# Import main classes for convenient access
from nevo.genotype  import Network, crossover, offspring
from nevo.pool      import Environment, FitnessFunction, Pool
from nevo.run       import Config, Trial
from nevo.selection import FitnessProportionate, Power, SelectionFunction, Tournament

__all__ = [
    "Config",
    "Trial",
    "Network",
    "crossover",
    "offspring",
    "Environment",
    "FitnessFunction",
    "Pool",
    "SelectionFunction",
    "Power",
    "Tournament",
    "FitnessProportionate",
]
