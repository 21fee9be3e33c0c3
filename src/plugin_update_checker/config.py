"""Settings for the update checker.

Created: 2026-10-13
Changes:
  - 2026-10-16: Environment variables take precedence over config.json.

Settings come from ``~/.plugin-update-checker/config.json`` and from
``PLUGIN_UPDATE_CHECKER_*`` environment variables. Set
``PLUGIN_UPDATE_CHECKER_HOME`` to relocate the config directory.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Literal

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from plugin_update_checker.cache import DAY_IN_SECONDS
from plugin_update_checker.transport import DEFAULT_USER_AGENT

logger = logging.getLogger(__name__)

ENV_PREFIX = "PLUGIN_UPDATE_CHECKER_"
CONFIG_FILENAME = "config.json"


def get_config_dir() -> Path:
    """Return the config directory, creating it if needed."""
    override = os.environ.get(f"{ENV_PREFIX}HOME")
    config_dir = Path(override) if override else Path.home() / ".plugin-update-checker"
    config_dir.mkdir(parents=True, exist_ok=True)
    return config_dir


def get_config_path() -> Path:
    return get_config_dir() / CONFIG_FILENAME


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_prefix=ENV_PREFIX, extra="ignore")

    cache_allowed: bool = Field(
        default=True, description="Serve manifests from the cache while fresh"
    )
    debug_log: bool = Field(default=False, description="Log fetch and decode diagnostics")
    request_timeout: float = Field(default=10.0, gt=0, description="Manifest GET timeout (s)")
    cache_ttl: int = Field(default=DAY_IN_SECONDS, gt=0, description="Cache lifetime (s)")
    cache_key_prefix: str = "update_"
    cache_backend: Literal["file", "memory"] = "file"
    cache_dir: Path | None = None
    log_level: str = "INFO"
    user_agent: str = DEFAULT_USER_AGENT

    def resolved_cache_dir(self) -> Path:
        return self.cache_dir or get_config_dir() / "cache"

    def save(self) -> None:
        """Write settings to config.json."""
        path = get_config_path()
        data = self.model_dump(mode="json", exclude_none=True)
        path.write_text(json.dumps(data, indent=2))
        logger.info("Saved settings to %s", path)

    @classmethod
    def load(cls) -> Settings:
        """Load settings from config.json, letting the environment win."""
        path = get_config_path()
        if not path.exists():
            return cls()
        try:
            data = json.loads(path.read_text())
            if not isinstance(data, dict):
                raise ValueError("config root must be an object")
            data = {
                key: value
                for key, value in data.items()
                if f"{ENV_PREFIX}{key.upper()}" not in os.environ
            }
            return cls(**data)
        except (json.JSONDecodeError, ValidationError, ValueError) as e:
            logger.warning("Failed to load %s, using defaults: %s", path, e)
            return cls()


_settings: Settings | None = None


def get_settings(force_reload: bool = False) -> Settings:
    """Get the process-wide settings, loading them on first use."""
    global _settings
    if _settings is None or force_reload:
        _settings = Settings.load()
    return _settings
