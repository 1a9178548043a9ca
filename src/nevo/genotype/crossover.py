"""
Crossover Module

This module implements the recombination of two parent networks.

Functions:
    crossover(parent1, parent2): Create a child network from two parents
    offspring(parent1, parent2): Crossover followed by one round of mutation
"""

import logging
import random

from nevo.genotype.errors  import ConfigurationMismatchError, NetworkInvariantError
from nevo.genotype.network import Network

logger = logging.getLogger(__name__)

def crossover(parent1: Network, parent2: Network, rng: random.Random | None = None) -> Network:
    """
    Create a child network by crossing two parents built from the same Config.

    Rules:
    - Size: the child has as many nodes as the fitter parent; if both parents
      are equally fit, the size is decided by the config's 'crossover_tie_policy'
      ("random": uniform between the two sizes, both included).
    - Nodes before the output block: copied from a random parent when both
      parents have a non-output node at that position, otherwise from the
      parent which has one.
    - Output nodes: the k-th output of the child is a copy of the k-th output
      of a random parent.
    - Connections (identified by source, target and gater positions): a
      connection present in both parents comes from a random one of them; a
      connection present in only one parent is inherited if that parent is at
      least as fit as the other. Connections which refer to nodes beyond the
      child's size are dropped, or raise NetworkInvariantError if the config's
      'crossover_out_of_range' is "raise". Gaters beyond the child's size are
      cleared.

    Parameters:
        parent1: the first parent
        parent2: the second parent
        rng:     random number generator (defaults to the first parent's)

    Returns:
        The child network (its fitness is 0)

    Raises:
        ConfigurationMismatchError: if the parents were built from different Configs
    """
    if parent1.config != parent2.config:
        raise ConfigurationMismatchError("Cannot perform crossover on networks based on different configurations")

    config = parent1.config
    rng    = rng if rng is not None else parent1.rng
    size   = _child_size(parent1, parent2, rng)

    child = Network.empty(config, rng)

    # Nodes
    size1, size2 = len(parent1.nodes), len(parent2.nodes)
    num_outputs  = config.outputs
    for index in range(size):
        if index < size - num_outputs:
            if index >= size1 - num_outputs:
                node = parent2.nodes[index]
            elif index >= size2 - num_outputs:
                node = parent1.nodes[index]
            else:
                node = rng.choice((parent1.nodes[index], parent2.nodes[index]))
        else:
            # output nodes are aligned to the end of each parent
            node = rng.choice((parent1.nodes[size1 - size + index],
                               parent2.nodes[size2 - size + index]))
        child.nodes.append(node.copy())

    # Connections
    conns1 = {conn.key: conn for conn in parent1.connections}
    conns2 = {conn.key: conn for conn in parent2.connections}
    keys   = list(conns1) + [key for key in conns2 if key not in conns1]

    num_dropped = 0
    for key in keys:
        conn1 = conns1.get(key)
        conn2 = conns2.get(key)
        if conn1 is not None and conn2 is not None:
            conn = rng.choice((conn1, conn2))
        elif conn1 is not None and parent1.fitness >= parent2.fitness:
            conn = conn1
        elif conn2 is not None and parent2.fitness >= parent1.fitness:
            conn = conn2
        else:
            continue

        if conn.from_index >= size or conn.to_index >= size:
            if config.crossover_out_of_range == "raise":
                raise NetworkInvariantError(f"Inherited {conn!r} does not fit in a child of {size} nodes")
            num_dropped += 1
            continue

        # the same pair may be inherited twice, with different gaters
        if child._are_connected(conn.from_index, conn.to_index):
            continue

        gater_index = conn.gater_index
        if gater_index is not None and gater_index >= size:
            gater_index = None
        child.add_connection(conn.from_index, conn.to_index, conn.weight, gater_index)

    if num_dropped:
        logger.debug("crossover dropped %d connection(s) outside a child of %d nodes", num_dropped, size)

    child.validate()
    return child

def _child_size(parent1: Network, parent2: Network, rng) -> int:
    size1, size2 = len(parent1.nodes), len(parent2.nodes)

    if parent1.fitness > parent2.fitness:
        return size1
    if parent2.fitness > parent1.fitness:
        return size2

    policy = parent1.config.crossover_tie_policy
    if policy == "smaller":
        return min(size1, size2)
    if policy == "larger":
        return max(size1, size2)
    return rng.randint(min(size1, size2), max(size1, size2))

def offspring(parent1: Network, parent2: Network, rng: random.Random | None = None) -> Network:
    """
    Cross two parents over (see 'crossover') and mutate the child once.

    Raises:
        ConfigurationMismatchError: if the parents were built from different Configs
    """
    child = crossover(parent1, parent2, rng)
    child.mutate()
    return child
