"""
Structured logging setup for bsnmgr.

Logs go to stderr so that stdout stays reserved for tool output (text or JSON).
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Optional

import structlog

ENV_LOG_LEVEL = "BS_LOG_LEVEL"
ENV_LOG_FORMAT = "BS_LOG_FORMAT"

DEFAULT_LOG_LEVEL = "WARNING"
DEFAULT_LOG_FORMAT = "console"

_FORMATS = ("console", "json")


def setup_logging(level: Optional[str] = None, fmt: Optional[str] = None) -> None:
    """
    Configure structlog + stdlib logging.

    Args:
        level: DEBUG/INFO/WARNING/ERROR/CRITICAL. Defaults to BS_LOG_LEVEL,
            then WARNING.
        fmt: "console" or "json". Defaults to BS_LOG_FORMAT, then "console".
    """
    level_name = (level or os.getenv(ENV_LOG_LEVEL) or DEFAULT_LOG_LEVEL).upper()
    numeric_level = getattr(logging, level_name, None)
    if not isinstance(numeric_level, int):
        numeric_level = logging.WARNING

    log_format = (fmt or os.getenv(ENV_LOG_FORMAT) or DEFAULT_LOG_FORMAT).lower()
    if log_format not in _FORMATS:
        log_format = DEFAULT_LOG_FORMAT

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stderr,
        level=numeric_level,
        force=True,
    )
    # urllib3 logs every connection at DEBUG; keep it out unless asked.
    logging.getLogger("urllib3").setLevel(max(numeric_level, logging.INFO))

    processors = [
        structlog.stdlib.filter_by_level,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
        structlog.contextvars.merge_contextvars,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]

    if log_format == "json":
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer(colors=False))

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=False,
    )


def get_logger(name: str) -> structlog.stdlib.BoundLogger:
    """Module loggers: `logger = get_logger(__name__)`."""
    return structlog.get_logger(name)
