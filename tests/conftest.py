"""
Test configuration for shared utilities.
"""

import pytest

from shared.logging import clear_context


@pytest.fixture(autouse=True)
def reset_logging_context():
    """Keep request correlation from leaking between tests."""
    yield
    clear_context()
