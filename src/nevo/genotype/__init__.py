"""
Genotype Package

This package implements the genome evolved by nevo: a network of nodes and
connections which is mutated, crossed over and executed directly.

Modules:
    node:       NodeRole enumeration and Node class
    connection: ConnectionType enumeration and Connection class
    network:    Network class (forward pass and mutation operators)
    crossover:  crossover() and offspring() functions
    errors:     ConfigurationMismatchError and NetworkInvariantError

Exported Classes:
    NodeRole:       Enumeration for node roles (INPUT, HIDDEN, OUTPUT)
    Node:           A neuron of a network
    ConnectionType: Enumeration for connection types (FORWARD, SELF, RECURRENT)
    Connection:     A weighted, optionally gated, connection between two nodes
    Network:        The complete genome
"""

from nevo.genotype.connection import Connection, ConnectionType
from nevo.genotype.crossover  import crossover, offspring
from nevo.genotype.errors     import ConfigurationMismatchError, NetworkInvariantError
from nevo.genotype.network    import Network, MUTATION_NAMES
from nevo.genotype.node       import Node, NodeRole

__all__ = ['Connection',
           'ConnectionType',
           'ConfigurationMismatchError',
           'NetworkInvariantError',
           'MUTATION_NAMES',
           'Network',
           'Node',
           'NodeRole',
           'crossover',
           'offspring']
