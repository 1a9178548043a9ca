"""Pytest configuration and shared fixtures."""

import random
import sys
from pathlib import Path

import numpy as np
import pytest

# Add the source directory to the Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))


@pytest.fixture(autouse=True)
def set_random_seeds():
    """Seed the global generators so that every test is reproducible."""
    np.random.seed(42)
    random.seed(42)
    yield
    np.random.seed(None)
    random.seed(None)


@pytest.fixture
def rng():
    """A dedicated random number generator."""
    return random.Random(1234)


@pytest.fixture
def config():
    """A configuration for 2-input, 1-output networks."""
    from nevo.run.config import Config
    return Config(inputs=2, outputs=1)
