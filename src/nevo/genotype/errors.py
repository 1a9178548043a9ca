"""
Exceptions raised by the genotype package.
"""

class ConfigurationMismatchError(ValueError):
    """Raised when crossing over two networks built from different Configs."""

class NetworkInvariantError(RuntimeError):
    """Raised when the structure of a network is found to be inconsistent."""
