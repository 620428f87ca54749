"""Python logging configuration for the server process.

stdout carries the MCP protocol, so diagnostics must go to stderr only.
"""

import logging
import sys
from typing import TextIO

LOGGER_NAME = "nixmcp"
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def configure_logging(level: str = "INFO", stream: TextIO | None = None) -> logging.Handler:
    """Attach a single stream handler to the package logger.

    Calling this again replaces the handler installed by a previous call
    instead of stacking another one.

    Args:
        level: Level name (DEBUG, INFO, WARNING, ERROR).
        stream: Destination stream. Defaults to sys.stderr.

    Returns:
        The installed handler.
    """
    logger = logging.getLogger(LOGGER_NAME)
    for existing in list(logger.handlers):
        if getattr(existing, "_nixmcp_handler", False):
            logger.removeHandler(existing)

    handler = logging.StreamHandler(stream or sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler._nixmcp_handler = True  # type: ignore[attr-defined]
    logger.addHandler(handler)
    logger.setLevel(level.upper())
    logger.propagate = False
    return handler
