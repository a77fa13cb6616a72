"""Configuration management for chamber_events."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional

from ..exceptions import ConfigurationError
from .timezone_utils import TIMEZONE_ENV_VAR, get_site_timezone

logger = logging.getLogger(__name__)

# Hard cap on candidates generated per event in one expansion call
DEFAULT_MAX_ITERATIONS = 600

# Integer settings read from the environment: env var -> config key
_INT_SETTINGS: dict[str, str] = {
    "CHAMBER_EVENTS_MAX_ITERATIONS": "max_iterations",
    "CHAMBER_EVENTS_LISTING_DAYS": "listing_days",
    "CHAMBER_EVENTS_PAST_DAYS": "past_days",
    "CHAMBER_EVENTS_DIGEST_DAYS": "digest_days",
    "CHAMBER_EVENTS_DIGEST_LIMIT": "digest_limit",
}

# Smallest accepted value per key; anything not listed must be positive
_MINIMUMS: dict[str, int] = {"past_days": 0}


class ConfigManager:
    """Manages engine configuration from environment variables and .env files."""

    def __init__(self, env_file_path: Path | None = None):
        """Initialize configuration manager.

        Args:
            env_file_path: Optional path to .env file (defaults to .env in current directory)
        """
        self.env_file_path = env_file_path or Path.cwd() / ".env"

    def load_env_file(self) -> list[str]:
        """Load .env file and set environment variables.

        Only sets variables that are not already in the environment.

        Returns:
            List of environment variable keys that were loaded from .env file
        """
        if not self.env_file_path.exists():
            logger.debug("No .env file found at %s", self.env_file_path)
            return []

        set_keys = []

        try:
            content = self.env_file_path.read_text(encoding="utf-8")
        except OSError:
            logger.debug(
                "Failed to read .env file for defaults (continuing): %s",
                str(self.env_file_path),
                exc_info=True,
            )
            return []

        for raw_line in content.splitlines():
            line = raw_line.strip()

            if not line or line.startswith("#") or "=" not in line:
                continue

            key, val = line.split("=", 1)
            key = key.strip()
            val = val.strip().strip('"').strip("'")

            if key and key not in os.environ:
                os.environ[key] = val
                set_keys.append(key)

        if set_keys:
            logger.debug("Loaded .env defaults for keys: %s", ", ".join(set_keys))

        return set_keys

    def build_config_from_env(self) -> dict[str, Any]:
        """Build configuration dictionary from environment variables.

        Recognizes:
        - CHAMBER_EVENTS_TIMEZONE -> 'timezone' (validated IANA name)
        - CHAMBER_EVENTS_MAX_ITERATIONS -> 'max_iterations' (int)
        - CHAMBER_EVENTS_LISTING_DAYS -> 'listing_days' (int)
        - CHAMBER_EVENTS_PAST_DAYS -> 'past_days' (int)
        - CHAMBER_EVENTS_DIGEST_DAYS -> 'digest_days' (int)
        - CHAMBER_EVENTS_DIGEST_LIMIT -> 'digest_limit' (int)

        Invalid values are logged and ignored so defaults apply.

        Returns:
            Configuration dictionary accepted by ``EngineConfig.from_settings``
        """
        cfg: dict[str, Any] = {}

        if os.environ.get(TIMEZONE_ENV_VAR):
            cfg["timezone"] = get_site_timezone()

        for env_var, key in _INT_SETTINGS.items():
            raw = os.environ.get(env_var)
            if not raw:
                continue
            try:
                value = int(raw)
            except ValueError:
                logger.warning("Invalid %s=%r; ignoring", env_var, raw)
                continue
            if value < _MINIMUMS.get(key, 1):
                logger.warning("Out-of-range %s=%r; ignoring", env_var, raw)
                continue
            cfg[key] = value

        return cfg

    def load_full_config(self) -> dict[str, Any]:
        """Load .env file and build configuration from environment.

        Returns:
            Configuration dictionary
        """
        self.load_env_file()
        return self.build_config_from_env()


def get_config_value(config: Any, key: str, default: Any = None) -> Any:
    """Get configuration value supporting both dict and dataclass-like objects.

    Args:
        config: Configuration object (dict or object with attributes)
        key: Configuration key to retrieve
        default: Default value if key not found

    Returns:
        Configuration value or default
    """
    if config is None:
        return default
    if isinstance(config, dict):
        return config.get(key, default)
    return getattr(config, key, default)


@dataclass
class EngineConfig:
    """Settings for the occurrence engine and its listing/digest callers.

    Consolidates all engine settings with explicit defaults. A missing
    ``timezone`` is resolved once, at construction, from CHAMBER_EVENTS_TIMEZONE
    or the site default; later environment changes do not affect the instance.
    """

    # Expansion
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    timezone: Optional[str] = None

    # Classification and listing windows
    week_days: int = 7
    listing_days: int = 365
    past_days: int = 90

    # Newsletter digest
    digest_days: int = 45
    digest_limit: int = 5

    def __post_init__(self) -> None:
        for name in ("max_iterations", "week_days", "listing_days", "digest_days", "digest_limit"):
            value = getattr(self, name)
            if not isinstance(value, int) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")
        if not isinstance(self.past_days, int) or self.past_days < 0:
            raise ConfigurationError(f"past_days must be a non-negative integer, got {self.past_days!r}")
        if not self.timezone:
            self.timezone = get_site_timezone()

    @classmethod
    def from_settings(cls, settings: Any) -> "EngineConfig":
        """Extract engine configuration from a settings dict or object.

        Args:
            settings: Dict (e.g. from ``ConfigManager.load_full_config``) or
                attribute object; missing keys use defaults

        Returns:
            EngineConfig with values from settings or defaults
        """
        defaults = cls()
        return cls(
            max_iterations=get_config_value(settings, "max_iterations", defaults.max_iterations),
            timezone=get_config_value(settings, "timezone", defaults.timezone),
            week_days=get_config_value(settings, "week_days", defaults.week_days),
            listing_days=get_config_value(settings, "listing_days", defaults.listing_days),
            past_days=get_config_value(settings, "past_days", defaults.past_days),
            digest_days=get_config_value(settings, "digest_days", defaults.digest_days),
            digest_limit=get_config_value(settings, "digest_limit", defaults.digest_limit),
        )

    @classmethod
    def from_env(cls, env_file_path: Path | None = None) -> "EngineConfig":
        """Build configuration from the environment and an optional .env file."""
        return cls.from_settings(ConfigManager(env_file_path).load_full_config())
