"""
Structured logging configuration for eventual.

Every record carries a trace_id; engine records use the settlement cell's
label (e.g. "cell-12") so all lines about one eventual value correlate.

Environment Variables:
    EVENTUAL_LOG_LEVEL: Log level (DEBUG, INFO, WARNING, ERROR) - default: WARNING
    EVENTUAL_LOG_FORMAT: Log format (json, text) - default: text

Usage:
    from eventual.logging_config import setup_logging, get_logger

    setup_logging()
    logger = get_logger(__name__, trace_id="selfcheck")
    logger.info("Running scenario")
"""

import logging
import os
import sys
from typing import Optional

from pythonjsonlogger.json import JsonFormatter

LEVELS = {
    "DEBUG": logging.DEBUG,
    "INFO": logging.INFO,
    "WARNING": logging.WARNING,
    "ERROR": logging.ERROR,
    "CRITICAL": logging.CRITICAL,
}


class TraceIDFilter(logging.Filter):
    """
    Logging filter that adds trace_id to all log records.

    Ensures all logs have a trace_id field, even if not set via LoggerAdapter.
    """

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "trace_id"):
            record.trace_id = "N/A"  # type: ignore
        return True


def setup_logging(level: Optional[str] = None, log_format: Optional[str] = None) -> logging.Handler:
    """
    Configure root logger with structured logging.

    Explicit arguments override EVENTUAL_LOG_LEVEL / EVENTUAL_LOG_FORMAT.
    Logs go to stderr so command output on stdout stays parseable.

    Returns:
        The installed handler
    """
    level_name = (level or os.getenv("EVENTUAL_LOG_LEVEL", "WARNING")).upper()
    fmt = (log_format or os.getenv("EVENTUAL_LOG_FORMAT", "text")).lower()
    resolved = LEVELS.get(level_name, logging.WARNING)

    root_logger = logging.getLogger()
    root_logger.setLevel(resolved)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(resolved)
    handler.addFilter(TraceIDFilter())

    if fmt == "json":
        formatter: logging.Formatter = JsonFormatter(
            "%(asctime)s %(name)s %(levelname)s %(message)s %(trace_id)s",
            rename_fields={
                "asctime": "timestamp",
                "name": "logger",
                "levelname": "level",
            },
        )
    else:
        formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s [trace_id=%(trace_id)s]",
            datefmt="%Y-%m-%d %H:%M:%S",
        )

    handler.setFormatter(formatter)
    root_logger.addHandler(handler)
    return handler


def get_logger(name: str, trace_id: Optional[str] = None) -> logging.LoggerAdapter:
    """
    Get a logger with optional trace_id for correlation.

    Example:
        logger = get_logger(__name__, trace_id="selfcheck")
        logger.info("Step passed")
        # Output (JSON): {"timestamp": "...", "level": "INFO", "message": "Step passed", "trace_id": "selfcheck"}
    """
    return logging.LoggerAdapter(logging.getLogger(name), {"trace_id": trace_id or "N/A"})
