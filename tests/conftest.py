"""
pytest configuration for kafka_auth tests.

Adds src directory to Python path for imports and provides shared fixtures.
"""

import logging
import sys
from pathlib import Path

import pytest

# Add src directory to Python path
src_dir = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_dir))

from kafka_auth.client_config import ClientConfiguration  # noqa: E402
from kafka_auth.logging.context import clear_log_context  # noqa: E402


@pytest.fixture
def client_config():
    """Fresh client configuration with a known client id."""
    return ClientConfiguration(client_id="test-client")


@pytest.fixture(autouse=True)
def _reset_log_context():
    yield
    clear_log_context()


@pytest.fixture
def auth_caplog(caplog):
    """caplog capturing DEBUG output from the kafka_auth loggers."""
    caplog.set_level(logging.DEBUG, logger="kafka_auth")
    return caplog
