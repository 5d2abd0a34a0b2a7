"""Application Settings and Configuration.

This module provides application-wide settings that combine configuration
from the configuration manager with application-specific defaults.
"""

import os
from typing import Optional

from carebill import __version__
from carebill.domain.treatment_cost import Tariff
from carebill.infrastructure.config_manager import ConfigManager

# Application metadata
APP_NAME = "CareBill"
APP_VERSION = __version__

DEFAULT_LOG_LEVEL = "WARNING"


def _env_flag(name: str, default: str) -> bool:
    return os.getenv(name, default).strip().lower() in ("1", "true", "yes", "on")


class Settings:
    """Application settings loaded from configuration manager and environment.

    Environment Variables:
        - CB_APP_NAME: Display name of the application
        - CB_LOG_LEVEL: Root log level (DEBUG, INFO, WARNING, ...)
        - CB_LOG_JSON: Emit JSON log lines ("true"/"false")
        - CB_ISOLATE_OBSERVER_FAILURES: Catch and log observer errors ("true"/"false")
        - CB_CONFIG_FILE: JSON configuration file with a "tariff" object
        - Tariff variables, see ConfigManager.from_environment
    """

    def __init__(self):
        """Initialize settings from environment."""
        self._config_manager: Optional[ConfigManager] = None

        self.app_name = os.getenv("CB_APP_NAME", APP_NAME)
        self.app_version = APP_VERSION

        # Logging
        self.log_level = os.getenv("CB_LOG_LEVEL", DEFAULT_LOG_LEVEL)
        self.log_json = _env_flag("CB_LOG_JSON", "false")

        # Notification bus
        self.isolate_observer_failures = _env_flag("CB_ISOLATE_OBSERVER_FAILURES", "true")

        # Optional JSON configuration file (read by ConfigManager)
        self.config_file = os.getenv("CB_CONFIG_FILE")

    @property
    def config_manager(self) -> ConfigManager:
        """Get configuration manager instance (loaded lazily on first access)."""
        if self._config_manager is None:
            self._config_manager = ConfigManager.from_environment()
        return self._config_manager

    @property
    def tariff(self) -> Tariff:
        """Get the configured tariff."""
        return self.config_manager.get_tariff()


# Global settings instance
settings = Settings()
