"""
Run Package

This package implements the configuration and the evolutionary run loop.

Exported Classes:
    Config: Parameters of an evolutionary run (INI file and keyword overrides)
    Trial:  One independent evolutionary run on a Pool
"""

from nevo.run.config import Config
from nevo.run.trial  import Trial

__all__ = ['Config',
           'Trial']
