"""
Pytest configuration shared by all pyprovision unit tests.
"""

import pytest

from pyprovision.logger import Logger


@pytest.fixture(autouse=True)
def reset_logging():
    """Detach handlers added by a test so the next test starts clean."""
    yield
    Logger.shutdown()
