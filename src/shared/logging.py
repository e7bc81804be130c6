"""
Logging for the stdio MCP server, with per-request correlation IDs.

stdout carries the JSON-RPC stream, so every record is written to stderr.
Each resource read or tool call logs under a short correlation ID.
"""

import logging
import sys
import uuid

LOG_FORMAT = "%(asctime)s  %(name)-30s  %(levelname)-7s  %(message)s"

# Client libraries that log every request at INFO
QUIET_LOGGERS = ("httpx", "httpcore")


def setup_logging(name: str, level: str = "INFO") -> logging.Logger:
    """
    Configure stderr logging for a server component.

    Args:
        name: Logger name (used as the record prefix).
        level: Log level string (e.g. 'INFO', 'DEBUG').

    Returns:
        Configured logger instance.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=numeric_level, format=LOG_FORMAT, stream=sys.stderr)
    for noisy in QUIET_LOGGERS:
        logging.getLogger(noisy).setLevel(max(numeric_level, logging.WARNING))
    return logging.getLogger(name)


def generate_correlation_id() -> str:
    """Short random ID tying together the log lines of one MCP request."""
    return uuid.uuid4().hex[:12]
