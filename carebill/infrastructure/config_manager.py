"""Configuration Manager for Tariff and Runtime Options.

This module loads the fee schedule (Tariff) and other configuration from
environment variables or a JSON file, and validates it before use.

Validation Impact:
    - Every tariff amount is validated by the Tariff model (fail fast)
    - Malformed files raise ValueError with the parse error, not a stack of
      unrelated failures later during billing

Architecture:
    - Follows Hexagonal Architecture: Infrastructure layer isolated from domain
    - Environment variables override file values; unset values keep defaults
    - Supports a .env file in the working directory via python-dotenv
"""

import json
import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

from dotenv import load_dotenv

from carebill.domain.treatment_cost import Tariff

logger = logging.getLogger(__name__)

# Environment variable -> Tariff field
TARIFF_ENV_VARS = {
    "CB_REGULAR_FEE": "regular_fee",
    "CB_EMERGENCY_BASE_FEE": "emergency_base_fee",
    "CB_PER_SEVERITY_UNIT": "per_severity_unit",
    "CB_ICU_DAILY_RATE": "icu_daily_rate",
    "CB_VENTILATOR_DAILY_RATE": "ventilator_daily_rate",
}


class ConfigManager:
    """Configuration manager for the fee schedule and runtime options.

    Example Usage:
        ```python
        # Load from environment variables (and CB_CONFIG_FILE if set)
        config = ConfigManager.from_environment()
        tariff = config.get_tariff()

        # Load from file
        config = ConfigManager.from_file("carebill.json")
        tariff = config.get_tariff()
        ```
    """

    def __init__(self, config_data: Dict[str, Any]):
        """Initialize configuration manager.

        Parameters:
            config_data: Configuration dictionary (a ``tariff`` object plus options)
        """
        self._config_data = config_data
        self._tariff: Optional[Tariff] = None

    @classmethod
    def from_environment(cls, env_file: Optional[str] = None) -> 'ConfigManager':
        """Load configuration from environment variables.

        Environment Variables:
            - CB_CONFIG_FILE: JSON file to load first (optional)
            - CB_REGULAR_FEE, CB_EMERGENCY_BASE_FEE, CB_PER_SEVERITY_UNIT,
              CB_ICU_DAILY_RATE, CB_VENTILATOR_DAILY_RATE: tariff overrides

        Parameters:
            env_file: .env file to load (defaults to ./.env when present)

        Returns:
            ConfigManager instance
        """
        env_path = Path(env_file) if env_file else Path.cwd() / ".env"
        if env_path.exists():
            load_dotenv(env_path)
            logger.debug(f"Loaded environment variables from {env_path}")

        config_file = os.getenv("CB_CONFIG_FILE")
        if config_file:
            config_data = cls.from_file(config_file)._config_data
        else:
            config_data = {}

        tariff_data = dict(config_data.get("tariff", {}))
        for env_var, field_name in TARIFF_ENV_VARS.items():
            value = os.getenv(env_var)
            if value:
                tariff_data[field_name] = value.strip()

        return cls({**config_data, "tariff": tariff_data})

    @classmethod
    def from_file(cls, config_path: str) -> 'ConfigManager':
        """Load configuration from a JSON file.

        Parameters:
            config_path: Path to configuration file

        Returns:
            ConfigManager instance

        Raises:
            FileNotFoundError: If config file doesn't exist
            ValueError: If config file is not a JSON object
        """
        path = Path(config_path)
        if not path.is_file():
            raise FileNotFoundError(f"Configuration file not found: {config_path}")

        try:
            # Amounts are parsed as strings so cents stay exact
            config_data = json.loads(path.read_text(encoding="utf-8"), parse_float=str)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON in configuration file {config_path}: {e}") from e

        if not isinstance(config_data, dict):
            raise ValueError(f"Configuration file must contain a JSON object: {config_path}")

        return cls(config_data)

    def get_tariff(self) -> Tariff:
        """Get the validated tariff.

        Returns:
            Tariff instance (defaults for any field not configured)

        Raises:
            pydantic.ValidationError: If a configured amount is invalid
        """
        if self._tariff is None:
            self._tariff = Tariff(**self._config_data.get("tariff", {}))
        return self._tariff

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a value by dotted path, e.g. ``get("tariff.regular_fee")``."""
        node: Any = self._config_data
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return default if node is None else node
