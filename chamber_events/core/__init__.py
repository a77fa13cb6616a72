"""Configuration and timezone policy shared by the engine."""

from .config_manager import ConfigManager, EngineConfig, get_config_value
from .timezone_utils import (
    DEFAULT_SITE_TIMEZONE,
    get_site_timezone,
    now_local,
    to_calendar_datetime,
)

__all__ = [
    "DEFAULT_SITE_TIMEZONE",
    "ConfigManager",
    "EngineConfig",
    "get_config_value",
    "get_site_timezone",
    "now_local",
    "to_calendar_datetime",
]
