"""
Central logging configuration for chamber_events.

Installs a colorized console handler and sets package logger levels. The
engine itself only emits records; nothing here is required to use it as a
library.
"""

import logging
import os
from typing import Optional

from colorlog import ColoredFormatter

# HH:MM:SS  LEVEL   logger.name: message
# Only the level is colorized; level is left-aligned to 7 chars.
LOG_FORMAT = "%(asctime)s %(log_color)s%(levelname)-7s%(reset)s %(name)s: %(message)s"
LOG_DATE_FORMAT = "%H:%M:%S"
LOG_COLORS = {
    "DEBUG": "cyan",
    "INFO": "green",
    "WARNING": "yellow",
    "ERROR": "red",
    "CRITICAL": "bold_red",
}

VALID_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR")

PACKAGE_LOGGERS = [
    "chamber_events",
    "chamber_events.calendar.expander",
    "chamber_events.calendar.recurrence",
    "chamber_events.domain",
    "chamber_events.core",
]


def configure_logging(debug_mode: bool = False, force_debug: Optional[bool] = None) -> None:
    """
    Configure logging for chamber_events.

    A colored stream handler is added only when the root logger has none, so
    an embedding application's handlers are left alone.

    Args:
        debug_mode: Whether to enable debug logging for chamber_events modules
        force_debug: Override debug mode setting (None to use env var detection)

    Environment Variables:
        CHAMBER_EVENTS_DEBUG: Set to '1', 'true', 'yes' to force debug logging
        CHAMBER_EVENTS_LOG_LEVEL: Override root log level (DEBUG, INFO, WARNING, ERROR)
    """
    env_debug = os.getenv("CHAMBER_EVENTS_DEBUG", "").lower() in ("1", "true", "yes")
    env_log_level = os.getenv("CHAMBER_EVENTS_LOG_LEVEL", "").upper()

    if force_debug is not None:
        final_debug = force_debug
    elif env_debug:
        final_debug = True
    else:
        final_debug = debug_mode

    root_level = logging.DEBUG if final_debug else logging.INFO
    if env_log_level in VALID_LEVELS:
        root_level = getattr(logging, env_log_level)

    root_logger = logging.getLogger()
    root_logger.setLevel(root_level)

    if not root_logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            ColoredFormatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT, log_colors=LOG_COLORS)
        )
        root_logger.addHandler(handler)

    package_level = logging.DEBUG if final_debug else root_level
    for name in PACKAGE_LOGGERS:
        logging.getLogger(name).setLevel(package_level)

    if final_debug:
        root_logger.debug("Debug logging enabled for chamber_events modules")


def get_logging_status() -> dict[str, str]:
    """
    Get current logging configuration status.

    Returns:
        Dictionary mapping logger names to their current levels
    """
    status = {"root": logging.getLevelName(logging.getLogger().level)}

    for name in PACKAGE_LOGGERS:
        status[name] = logging.getLevelName(logging.getLogger(name).level)

    return status
