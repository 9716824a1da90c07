"""Structured logging configuration."""

import logging
import sys
from datetime import datetime, timezone
from typing import Iterable

# Loggers that report per-row catalog problems
CATALOG_LOGGERS = ("trustbox.catalog",)


class StructuredFormatter(logging.Formatter):
    """Formats records as ``timestamp | level | logger | message``."""

    def format(self, record: logging.LogRecord) -> str:
        timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%dT%H:%M:%S.%f")[:-3] + "Z"
        level = record.levelname.ljust(8)
        message = record.getMessage()

        log_line = f"{timestamp} | {level} | {record.name} | {message}"

        if record.exc_info:
            log_line += "\n" + self.formatException(record.exc_info)

        return log_line


def setup_logging(level: str = "INFO", quiet: Iterable[str] = ()) -> None:
    """Configure root logging for the service and batch jobs.

    Args:
        level: Log level string (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        quiet: Logger names limited to errors, e.g. ``CATALOG_LOGGERS`` to
            hide skipped-row warnings during a batch ranking run
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(numeric_level)
    console_handler.setFormatter(StructuredFormatter())

    root_logger.addHandler(console_handler)

    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)

    for name in quiet:
        logging.getLogger(name).setLevel(logging.ERROR)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance with the given name.

    Args:
        name: Logger name, typically __name__ of the calling module

    Returns:
        Logger instance
    """
    return logging.getLogger(name)
