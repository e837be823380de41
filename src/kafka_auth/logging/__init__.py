"""
Structured logging module.

Provides JSON logging with client context propagation.
"""

from kafka_auth.logging.context import (
    clear_log_context,
    get_log_context,
    set_log_context,
)
from kafka_auth.logging.formatters import ConsoleFormatter, JSONFormatter
from kafka_auth.logging.setup import get_logger, setup_logging
from kafka_auth.logging.utilities import log_exception

__all__ = [
    # Setup
    "setup_logging",
    "get_logger",
    # Formatters
    "JSONFormatter",
    "ConsoleFormatter",
    # Context
    "set_log_context",
    "get_log_context",
    "clear_log_context",
    # Utilities
    "log_exception",
]
