"""loguru sink setup shared by the CLI commands."""

import sys

from loguru import logger

LOG_LEVELS = {
    "error": "ERROR",
    "warn": "WARNING",
    "warning": "WARNING",
    "info": "INFO",
    "debug": "DEBUG",
    "trace": "TRACE",
}

# uvicorn has no 'off'; 'critical' is the quietest it accepts
UVICORN_LEVELS = {
    "off": "critical",
    "ERROR": "error",
    "WARNING": "warning",
    "INFO": "info",
    "DEBUG": "debug",
    "TRACE": "trace",
}


def setup_logging(verbosity: str) -> str | None:
    """Send loguru output to stderr at 'verbosity'.

    Unknown levels fall back to INFO; 'off' silences logging entirely.
    Returns the loguru level name in use, or None when logging is off.
    """
    logger.remove()
    name = verbosity.strip().lower()
    if name == "off":
        return None
    level = LOG_LEVELS.get(name, "INFO")
    logger.add(sys.stderr, level=level)
    if name not in LOG_LEVELS:
        logger.warning(f"Unknown verbosity {verbosity!r}, using {level}")
    return level


def uvicorn_log_level(level: str | None) -> str:
    return UVICORN_LEVELS["off" if level is None else level]
