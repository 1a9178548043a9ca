"""
Activations Package

This package provides the activation functions used by the nodes of a Network.

Exported:
    ActivationFunction: Base class of all activation functions
    activations:        Dictionary mapping activation names to their factories
    activation_codes:   Dictionary mapping activation classes to 3-letter codes
    Activation functions: Sigmoid, Tanh, Sinus, Step, Sign, Random, ReLU, SELU,
                          SiLU, Linear, Identity
    parse_activation, parse_activation_list: build activations from text
"""

from nevo.activations.basic_activations import (
    ActivationFunction,
    activations,
    activation_codes,
    parse_activation,
    parse_activation_list,
    Sigmoid,
    Tanh,
    Sinus,
    Step,
    Sign,
    Random,
    ReLU,
    SELU,
    SiLU,
    Linear,
    Identity
)

__all__ = [
    'ActivationFunction',
    'activations',
    'activation_codes',
    'parse_activation',
    'parse_activation_list',
    'Sigmoid',
    'Tanh',
    'Sinus',
    'Step',
    'Sign',
    'Random',
    'ReLU',
    'SELU',
    'SiLU',
    'Linear',
    'Identity'
]
