"""
Pool Package

This package implements population management for nevo.

Exported Classes:
    Environment:     Abstract base class for fitness evaluators
    FitnessFunction: Environment scoring each network with a function
    Pool:            A fixed-size population driving the generational cycle
"""

from nevo.pool.environment import Environment, FitnessFunction
from nevo.pool.pool        import Pool

__all__ = ['Environment',
           'FitnessFunction',
           'Pool']
