"""
Pytest configuration shared by the beanprops tests.
"""

import pytest

from beanprops.cache import default_cache


@pytest.fixture(autouse=True)
def clear_default_cache():
    """Start every test with an empty process-wide property index cache."""
    default_cache().clear()
    yield
    default_cache().clear()
