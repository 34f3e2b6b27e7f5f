"""Stdlib logging setup.

The engine itself logs through logfire. This only sets levels for
stdlib loggers (ours and the HTTP stack) and forwards their records to
logfire so a single console shows both.
"""

import logging

import logfire

from pawtalk.config import Settings

# Libraries that log every request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def log_level(settings: Settings) -> int:
    if settings.debug:
        return logging.DEBUG
    if settings.environment == "production":
        return logging.WARNING
    return logging.INFO


def setup_logging(settings: Settings) -> None:
    """Route stdlib logging into logfire at the environment's level.

    Args:
        settings: Application settings
    """
    level = log_level(settings)
    logging.basicConfig(
        level=level,
        handlers=[logfire.LogfireLoggingHandler()],
        force=True,
    )
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))
    logging.getLogger("pawtalk").setLevel(level)
