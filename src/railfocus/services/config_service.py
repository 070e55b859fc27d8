"""Configuration service for RailFocus.

Loads and saves ``config.json`` in the platform config directory, creating
defaults on first run.
"""

from __future__ import annotations

import logging
from functools import lru_cache
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir

from railfocus.models.config_models import AppConfig

logger = logging.getLogger(__name__)

APP_NAME = "railfocus"


class ConfigService:
    """Service for managing application configuration."""

    def __init__(self):
        self.config_dir = Path(user_config_dir(APP_NAME))
        self.config_path = self.config_dir / "config.json"
        self.data_dir = Path(user_data_dir(APP_NAME))

        # Ensure directories exist
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.data_dir.mkdir(parents=True, exist_ok=True)

        self._config: AppConfig | None = None

    @property
    def config(self) -> AppConfig:
        """Get or load the current configuration."""
        if self._config is None:
            self._config = self.load_config()
        return self._config

    @property
    def database_path(self) -> Path:
        """Path of the journey database."""
        if self.config.ledger.database:
            return Path(self.config.ledger.database).expanduser()
        return self.data_dir / "journeys.db"

    def load_config(self) -> AppConfig:
        """Load configuration from storage."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # First run
            logger.info(f"No config at {self.config_path}, writing defaults")
            self._config = AppConfig()
            self.save_config()
        except Exception as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self) -> None:
        """Save the current configuration to storage."""
        if self._config is None:
            raise RuntimeError("No configuration to save")

        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self._config.model_dump_json(indent=4))

            self.config_path.chmod(0o600)
        except Exception as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def get_value(self, key: str) -> Any:
        """
        Get a value by dotted key, e.g. ``timer.default_minutes``.

        Raises:
            KeyError: If the key does not name a setting
        """
        node: Any = self.config.model_dump()
        for part in key.split("."):
            if not isinstance(node, dict) or part not in node:
                raise KeyError(key)
            node = node[part]
        if isinstance(node, dict):
            raise KeyError(key)
        return node

    def set_value(self, key: str, value: Any) -> None:
        """
        Set a value by dotted key and save.

        Strings are coerced by the config models, so "50" sets an int field.

        Raises:
            KeyError: If the key does not name a setting
            ValueError: If the value fails validation; nothing is saved
        """
        self.get_value(key)

        data = self.config.model_dump()
        *sections, field = key.split(".")
        node = data
        for section in sections:
            node = node[section]
        node[field] = value

        self._config = AppConfig.model_validate(data)
        self.save_config()
        logger.info(f"Config {key} set to {value!r}")

    def reset_config(self, key: str | None = None) -> None:
        """Reset one dotted key, or the whole configuration, to defaults."""
        if key is None:
            self._config = AppConfig()
            self.save_config()
            return

        self.get_value(key)
        node: Any = AppConfig().model_dump()
        for part in key.split("."):
            node = node[part]
        self.set_value(key, node)


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Return the process-wide ConfigService."""
    return ConfigService()
