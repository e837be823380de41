"""
Logging setup for processes that embed the authentication layer.

Provides console and optional JSON file output. Libraries only log through
module loggers; calling setup_logging() is the embedding process's choice.
"""

import logging
import sys
from pathlib import Path

from kafka_auth.logging.context import set_log_context
from kafka_auth.logging.formatters import ConsoleFormatter, JSONFormatter

DEFAULT_CONSOLE_LEVEL = logging.INFO
DEFAULT_FILE_LEVEL = logging.DEBUG

# Client libraries that log every connection attempt at INFO
NOISY_LOGGERS = [
    "aiokafka",
    "botocore",
    "boto3",
    "urllib3",
    "gssapi",
]


def setup_logging(
    client_id: str | None = None,
    json_format: bool = False,
    console_level: int = DEFAULT_CONSOLE_LEVEL,
    log_file: Path | None = None,
    file_level: int = DEFAULT_FILE_LEVEL,
    suppress_noisy: bool = True,
) -> logging.Logger:
    """
    Configure root logging with a console handler and an optional file handler.

    Args:
        client_id: Kafka client identifier added to every log line
        json_format: Use JSON format on the console instead of colored text
        console_level: Console handler level (default: INFO)
        log_file: Optional path for a JSON log file
        file_level: File handler level (default: DEBUG)
        suppress_noisy: Quiet down Kafka, AWS SDK and HTTP client loggers

    Returns:
        Configured package logger
    """
    if client_id:
        set_log_context(client_id=client_id)

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)  # Capture all, handlers filter
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(console_level)
    console_handler.setFormatter(JSONFormatter() if json_format else ConsoleFormatter())
    root_logger.addHandler(console_handler)

    if log_file is not None:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding="utf-8")
        file_handler.setLevel(file_level)
        file_handler.setFormatter(JSONFormatter())
        root_logger.addHandler(file_handler)

    if suppress_noisy:
        for logger_name in NOISY_LOGGERS:
            logging.getLogger(logger_name).setLevel(logging.WARNING)

    logger = logging.getLogger("kafka_auth")
    logger.debug(
        "Logging configured",
        extra={"configured": "json" if json_format else "console"},
    )
    return logger


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance.

    Use this instead of logging.getLogger() to ensure consistent naming.
    """
    return logging.getLogger(name)
