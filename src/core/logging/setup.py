"""Logging setup and configuration."""

import logging
import sys

from core.logging.context import set_log_context
from core.logging.formatters import ConsoleFormatter, JSONFormatter

DEFAULT_LEVEL = logging.INFO

# Noisy loggers to suppress
NOISY_LOGGERS = [
    "aiohttp",
    "asyncio",
    "urllib3",
]


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def setup_logging(
    level: int = DEFAULT_LEVEL,
    json_format: bool = False,
    component: str | None = None,
    suppress_noisy: bool = True,
) -> logging.Logger:
    """
    Configure the root logger with a single stderr handler.

    stdout is left to command output so JSON results can be piped.

    Args:
        level: Root handler level (default: INFO)
        json_format: Emit one JSON object per line instead of console text
        component: Value for the "component" log context field
        suppress_noisy: Quiet down HTTP client loggers

    Returns:
        Configured root logger
    """
    if component:
        set_log_context(component=component)

    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(level)
    handler.setFormatter(JSONFormatter() if json_format else ConsoleFormatter())

    root_logger = logging.getLogger()
    root_logger.setLevel(level)
    root_logger.handlers.clear()
    root_logger.addHandler(handler)

    if suppress_noisy:
        for logger_name in NOISY_LOGGERS:
            logging.getLogger(logger_name).setLevel(logging.WARNING)

    return root_logger
