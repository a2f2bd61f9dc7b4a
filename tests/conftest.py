"""Pytest configuration and shared fixtures."""

import pytest
import numpy as np


@pytest.fixture
def rng():
    """Create a seeded NumPy random generator for testing."""
    return np.random.default_rng(42)


@pytest.fixture
def starting_position():
    """Standard starting position."""
    from bgrollout.core.position import STARTING
    return STARTING


@pytest.fixture
def random_evaluator():
    """Seeded random evaluator."""
    from bgrollout.evaluation.evaluator import RandomEvaluator
    return RandomEvaluator(seed=42)
