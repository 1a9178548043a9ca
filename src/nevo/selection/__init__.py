"""
Selection Package

This package implements the strategies used to pick parents from a population
sorted descending by score.

Exported Classes:
    SelectionFunction:    Abstract base class of all strategies
    Power:                Power-law biased selection
    Tournament:           Tournament selection
    FitnessProportionate: Roulette-wheel selection (with a per-collection cache)

Exported Functions:
    parse_selection: Build a strategy from a description such as "tournament(5, 0.5)"
"""

from nevo.selection.selection_functions import (
    SelectionFunction,
    Power,
    Tournament,
    FitnessProportionate,
    selection_functions,
    parse_selection
)

__all__ = ['SelectionFunction',
           'Power',
           'Tournament',
           'FitnessProportionate',
           'selection_functions',
           'parse_selection']
