"""
Pytest configuration and shared fixtures.
"""

import os
import sys
import pytest

sys.path.append(os.path.join(os.getcwd(), "src"))


@pytest.fixture(scope="session", autouse=True)
def setup_test_environment() -> None:
    """Set up test environment variables."""
    os.environ.setdefault("APP_ENV", "test")
    os.environ.setdefault("LOG_LEVEL", "debug")
