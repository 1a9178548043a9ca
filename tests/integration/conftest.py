"""
Shared fixtures for integration tests.
"""

import pytest


@pytest.fixture
def xor_cases():
    """The four XOR input/output pairs."""
    return [([0.0, 0.0], 0.0),
            ([0.0, 1.0], 1.0),
            ([1.0, 0.0], 1.0),
            ([1.0, 1.0], 0.0)]
