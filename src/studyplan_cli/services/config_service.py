"""Configuration service for managing StudyPlan CLI configuration.

This module provides the ConfigService class, the single source of truth for
configuration management. It handles:

- Loading and saving config.json
- Dotted-key get/set for the CLI ``config`` command
- The session credentials that make a user "authenticated"
"""

from __future__ import annotations

import json
from functools import lru_cache
from json import JSONDecodeError
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir, user_data_dir
from pydantic import BaseModel, ValidationError

from studyplan_cli.models.config_models import AppConfig
from studyplan_cli.utils.logger import get_logger

logger = get_logger("config")


class ConfigService:
    """Service for managing application configuration and credentials."""

    def __init__(self):
        """Initialize the config service."""
        self.config_dir = Path(user_config_dir("studyplan_cli"))
        self.config_path = self.config_dir / "config.json"
        self.credentials_path = self.config_dir / "credentials.json"
        self.data_dir = Path(user_data_dir("studyplan_cli"))

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
    def db_path(self) -> Path:
        """Path of the local vault."""
        if self.config.local.db_path:
            return Path(self.config.local.db_path).expanduser()
        return self.data_dir / "studyplan.db"

    def load_config(self) -> AppConfig:
        """Load configuration from storage."""
        if self._config is not None:
            return self._config

        try:
            with open(self.config_path, encoding="utf-8") as f:
                self._config = AppConfig.model_validate_json(f.read())
        except FileNotFoundError:
            # First run
            self._config = AppConfig()
            self.save_config()
        except (ValidationError, ValueError) as e:
            raise RuntimeError(f"Failed to load config: {e}") from e

        return self._config

    def save_config(self) -> None:
        """Save the current configuration to storage."""
        try:
            self.config_path.parent.mkdir(parents=True, exist_ok=True)
            with open(self.config_path, "w", encoding="utf-8") as f:
                f.write(self.config.model_dump_json(indent=4))
            self.config_path.chmod(0o600)
        except OSError as e:
            raise RuntimeError(f"Failed to save config: {e}") from e

    def get(self, key: str) -> Any:
        """Get a configuration value by dot-separated key."""
        value: Any = self.config
        for k in key.split("."):
            if isinstance(value, BaseModel) and k in type(value).model_fields:
                value = getattr(value, k)
            else:
                raise KeyError(key)
        return value

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value by dot-separated key.

        Raises:
            KeyError: If the key does not exist
            ValueError: If the value does not validate
        """
        self.get(key)
        keys = key.split(".")
        config_dict = self.config.model_dump()

        current = config_dict
        for k in keys[:-1]:
            current = current[k]
        current[keys[-1]] = value

        self._config = AppConfig.model_validate(config_dict)
        self.save_config()

    def reset(self) -> None:
        """Reset configuration to defaults."""
        self._config = AppConfig()
        self.save_config()

    def save_credentials(
        self, access_token: str, user_id: str, email: str | None = None
    ) -> None:
        """Save the session of the signed-in user."""
        cred_data = {"access_token": access_token, "user_id": user_id}
        if email:
            cred_data["email"] = email

        with open(self.credentials_path, "w", encoding="utf-8") as f:
            json.dump(cred_data, f, indent=2)

        self.credentials_path.chmod(0o600)
        logger.info("saved credentials for user %s", user_id)

    def load_credentials(self) -> dict[str, str] | None:
        """Load the stored session, or None when signed out."""
        if not self.credentials_path.exists():
            return None
        try:
            with open(self.credentials_path, encoding="utf-8") as f:
                data = json.load(f)
        except JSONDecodeError:
            logger.warning("ignoring corrupt credentials file")
            return None
        if not data.get("access_token") or not data.get("user_id"):
            return None
        return data

    def clear_credentials(self) -> None:
        """Forget the stored session."""
        if self.credentials_path.exists():
            self.credentials_path.unlink()


@lru_cache(maxsize=1)
def get_config_service() -> ConfigService:
    """Get a cached ConfigService instance."""
    config_service = ConfigService()
    config_service.load_config()
    return config_service
