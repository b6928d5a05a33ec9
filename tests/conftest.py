"""
Shared pytest configuration and fixtures for ranked-orders.

This module provides common test fixtures and utilities used across
all test modules.
"""

import sys
from pathlib import Path

import pytest

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from orders import Tied  # noqa: E402
from orders.config import set_debug_checks  # noqa: E402
from orders.sampling import make_rng  # noqa: E402


@pytest.fixture(autouse=True)
def debug_checks():
    """Run every test with the unchecked fast paths re-validating their input."""
    set_debug_checks(True)
    yield
    set_debug_checks(None)


@pytest.fixture
def rng():
    """Provide a seeded generator so random tests are reproducible."""
    return make_rng(12345)


@pytest.fixture
def sample_tied():
    """Provide the tied order [2, 0 | 1, 3] over four elements."""
    return Tied([2, 0, 1, 3], [True, False, True])


@pytest.fixture
def sample_tied_orders():
    """Provide a few complete tied orders over four elements."""
    return [
        Tied([2, 0, 1, 3], [True, False, True]),
        Tied([0, 1, 2, 3], [False, False, False]),
        Tied([3, 2, 1, 0], [True, True, True]),
    ]


def pytest_configure(config):
    """Configure pytest with custom markers."""
    config.addinivalue_line(
        "markers", "unit: marks tests as unit tests (fast, no external dependencies)"
    )
    config.addinivalue_line(
        "markers",
        "integration: marks tests as integration tests (several modules together)",
    )
    config.addinivalue_line(
        "markers", "invariant: marks tests as mathematical invariant validation"
    )
    config.addinivalue_line(
        "markers", "smoke: marks tests as smoke tests (basic functionality check)"
    )
    config.addinivalue_line(
        "markers", "property: marks tests as hypothesis property-based tests"
    )
