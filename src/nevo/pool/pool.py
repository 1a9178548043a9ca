"""
Pool Module

This module implements the Pool class, which owns a population of networks
and drives the generational cycle: evaluate the fitness of every network,
then breed the next generation.

Classes:
    Pool: A fixed-size population of networks without speciation
"""

import logging
import random
from joblib     import Parallel, delayed
from statistics import mean
from typing     import Callable, Iterator, Sequence, TYPE_CHECKING

from nevo.genotype         import Network, offspring
from nevo.pool.environment import Environment
from nevo.selection        import SelectionFunction

if TYPE_CHECKING:
    from nevo.run.config import Config

logger = logging.getLogger(__name__)

class Pool:
    """
    A population of networks evolved generation after generation.

    The pool does not use speciation: the whole population competes for
    reproduction. Both fitness evaluation and breeding are split into batches
    of 'batch_size' consecutive networks, processed by one thread per batch.

    Score:
        After evaluation each network's score is its fitness minus a penalty
        for its size:
            score = fitness - hidden_nodes * nodes_growth
                            - connections  * connections_growth
                            - gated_connections * gates_growth

    Breeding:
        The population is sorted by descending score. The first 'elitism'
        networks are kept unchanged; every other position receives a new
        network: with probability 'crossover_chance' the offspring of two
        distinct selected parents, otherwise a mutated copy of one selected
        parent.

    Public Attributes:
        population_size, batch_size, elitism, crossover_chance,
        nodes_growth, connections_growth, gates_growth: see __init__
        select: The default selection strategy

    Public Properties:
        config:     The Config shared by all networks
        generation: Number of generations bred so far
        members:    Snapshot (tuple) of the current population

    Public Methods:
        evolve(environment, select):   evaluate_fitness() followed by breed_new_generation()
        evaluate_fitness(environment): Assign fitness and score to every network
        breed_new_generation(select):  Replace the non-elite networks
        fittest():                     The network with the highest score
        statistics():                  Max, mean and min fitness of the population

    The pool also behaves as a read-only sequence of its networks.
    """

    def __init__(self,
                 config            : 'Config',
                 population_size   : int | None = None,
                 batch_size        : int | None = None,
                 elitism           : int | None = None,
                 crossover_chance  : float | None = None,
                 nodes_growth      : float | None = None,
                 connections_growth: float | None = None,
                 gates_growth      : float | None = None,
                 select            : SelectionFunction | None = None,
                 rng               : random.Random | None = None):
        """
        Create a pool of freshly initialized networks.

        Every parameter left to None is taken from the [POOL] section of the
        config. The default elitism is capped to the population size.

        Parameters:
            config:             Stores configuration parameters
            population_size:    Number of networks in the pool
            batch_size:         Number of networks per batch (default: the whole population)
            elitism:            Number of best networks carried over unchanged
            crossover_chance:   Probability of breeding by crossover instead of mutation
            nodes_growth:       Score penalty per hidden node
            connections_growth: Score penalty per connection
            gates_growth:       Score penalty per gated connection
            select:             Default selection strategy
            rng:                Random number generator (defaults to the 'random' module)

        Raises:
            ValueError: if a parameter is out of range
        """
        def pick(value, default):
            return default if value is None else value

        self._config = config
        self._rng    = rng if rng is not None else random

        self.population_size   : int               = pick(population_size, config.population_size)
        self.batch_size        : int               = pick(batch_size, pick(config.batch_size, self.population_size))
        self.elitism           : int               = pick(elitism, min(config.elitism, self.population_size))
        self.crossover_chance  : float             = pick(crossover_chance, config.crossover_chance)
        self.nodes_growth      : float             = pick(nodes_growth, config.nodes_growth)
        self.connections_growth: float             = pick(connections_growth, config.connections_growth)
        self.gates_growth      : float             = pick(gates_growth, config.gates_growth)
        self.select            : SelectionFunction = pick(select, config.selection)

        if self.population_size < 1:
            raise ValueError("The population size must be at least 1")
        if self.batch_size < 1:
            raise ValueError("The batch size must be at least 1")
        if not 0 <= self.elitism <= self.population_size:
            raise ValueError(f"Elitism must be between 0 and the population size ({self.population_size})")
        if not 0.0 <= self.crossover_chance <= 1.0:
            raise ValueError("The crossover chance must be between 0 and 1")

        self._members   : list[Network] = [Network(config, self._rng) for _ in range(self.population_size)]
        self._generation: int           = 0

    @property
    def config(self) -> 'Config':
        return self._config

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def members(self) -> tuple[Network, ...]:
        return tuple(self._members)

    def __len__(self) -> int:
        return len(self._members)

    def __getitem__(self, index):
        return self._members[index]

    def __iter__(self) -> Iterator[Network]:
        return iter(list(self._members))

    def evolve(self, environment: Environment, select: SelectionFunction | None = None) -> None:
        """
        Run one generational cycle: evaluate every network, then breed.

        If the environment raises, the error propagates and the generation is
        not bred; batches which completed keep their new scores, the others do
        not, so the whole population must be evaluated again before breeding.

        Parameters:
            environment: Assigns fitness to the networks
            select:      Selection strategy for this cycle (default: 'self.select')
        """
        self.evaluate_fitness(environment)
        self.breed_new_generation(select)

    def evaluate_fitness(self, environment: Environment) -> None:
        """
        Evaluate the fitness of every network, one thread per batch, and
        compute the scores (fitness minus complexity penalty).
        """
        def evaluate_batch(batch: tuple[Network, ...]) -> None:
            environment.evaluate_fitness(batch)
            for network in batch:
                network.score = network.fitness - self._penalty(network)

        batches = [tuple(self._members[start:start + self.batch_size])
                   for start in range(0, len(self._members), self.batch_size)]
        self._run_batches(evaluate_batch, batches)

        logger.debug("generation %d: evaluated %d networks in %d batch(es)",
                     self._generation, len(self._members), len(batches))

    def _penalty(self, network: Network) -> float:
        return (network.hidden_count           * self.nodes_growth +
                len(network.connections)       * self.connections_growth +
                len(network.gated_connections) * self.gates_growth)

    def breed_new_generation(self, select: SelectionFunction | None = None) -> None:
        """
        Replace every non-elite network by a newly bred one and increase 'generation'.

        Requires the scores to be up to date (see 'evaluate_fitness').

        Parameters:
            select: Selection strategy for this generation (default: 'self.select')
        """
        select = select if select is not None else self.select

        self._members.sort(key=lambda network: network.score, reverse=True)

        # scores have changed since the strategy last saw this population
        reset = getattr(select, "reset", None)
        if callable(reset):
            reset()

        # every thread only reads this sorted snapshot and only creates new networks
        snapshot = tuple(self._members)
        size     = len(snapshot)

        position_batches = [range(max(start, self.elitism), min(start + self.batch_size, size))
                            for start in range(0, size, self.batch_size)]
        position_batches = [positions for positions in position_batches if len(positions) > 0]

        def breed_batch(positions: range) -> list[Network]:
            return [self._produce_next_member(snapshot, select) for _ in positions]

        new_members = self._run_batches(breed_batch, position_batches)

        for positions, networks in zip(position_batches, new_members):
            for index, network in zip(positions, networks):
                self._members[index] = network

        self._generation += 1
        logger.debug("generation %d: bred %d networks, best score %s",
                     self._generation, size - self.elitism, snapshot[0].score if snapshot else None)

    def _produce_next_member(self, candidates: Sequence[Network], select: SelectionFunction) -> Network:
        if len(candidates) > 1 and self._rng.random() < self.crossover_chance:
            parent1 = select(candidates, self._rng)
            parent2 = select([network for network in candidates if network is not parent1], self._rng)
            return offspring(parent1, parent2, self._rng)

        child = select(candidates, self._rng).clone()
        child.mutate()
        return child

    @staticmethod
    def _run_batches(function: Callable, batches: list) -> list:
        """
        Run 'function' on every batch, one thread per batch, and wait for all of them.
        """
        if not batches:
            return []
        return Parallel(n_jobs=len(batches), backend="threading")(delayed(function)(batch) for batch in batches)

    def fittest(self) -> Network | None:
        """
        Return the network with the highest score, or None if the pool is empty.
        """
        if not self._members:
            return None
        return max(self._members, key=lambda network: network.score)

    def statistics(self) -> dict[str, float]:
        """
        Return the 'max', 'mean' and 'min' fitness of the current population.
        """
        fitness = [network.fitness for network in self._members]
        return {"max": max(fitness), "mean": mean(fitness), "min": min(fitness)}

    def __str__(self):
        return '\n'.join(str(network) for network in self._members)
