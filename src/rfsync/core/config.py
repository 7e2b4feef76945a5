"""Configuration management for rfml-sync.

This module handles loading and saving configuration to/from a JSON file.
The config directory can be customized via CLI argument. Environment
variables take precedence over the file for the token and API URL.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict, Optional

from .errors import ConfigError
from .http_client import DEFAULT_API_URL

__all__ = ["Config", "KNOWN_KEYS", "TOKEN_ENV", "API_URL_ENV"]

KNOWN_KEYS = ("token", "api_url")
TOKEN_ENV = "RFSYNC_TOKEN"
API_URL_ENV = "RFSYNC_API_URL"


class Config:
    """Manages configuration stored in JSON format.

    Attributes:
        config_dir: Path to the configuration directory
    """

    def __init__(self, config_dir: Optional[Path] = None) -> None:
        """Initialize configuration manager.

        Args:
            config_dir: Custom config directory path. If None, uses ~/.config/rfml-sync/
        """
        if config_dir is None:
            config_dir = Path.home() / ".config" / "rfml-sync"
        self.config_dir = Path(config_dir)
        self.config_dir.mkdir(parents=True, exist_ok=True)
        self.config_data = self.load_config()

    @property
    def config_file(self) -> Path:
        """Get the config file path."""
        return self.config_dir / "config.json"

    def load_config(self) -> Dict[str, Any]:
        """Load configuration, creating an empty file on first use."""
        if not self.config_file.exists():
            self.save_config({})
            return {}

        try:
            with open(self.config_file, encoding="utf-8") as f:
                data = json.load(f)
        except json.JSONDecodeError as e:
            raise ConfigError("config_file", f"{self.config_file} is not valid JSON: {e}") from e

        if not isinstance(data, dict):
            raise ConfigError("config_file", f"{self.config_file} must hold a JSON object")
        return data

    def save_config(self, config: Dict[str, Any]) -> None:
        """Write configuration to disk."""
        with open(self.config_file, "w", encoding="utf-8") as f:
            json.dump(config, f, indent=2)
            f.write("\n")

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value."""
        return self.config_data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value and save to file."""
        if key not in KNOWN_KEYS:
            raise ConfigError(key, f"unknown key (known keys: {', '.join(KNOWN_KEYS)})")
        self.config_data[key] = value
        self.save_config(self.config_data)

    def get_config_dir(self) -> Path:
        """Get the configuration directory path."""
        return self.config_dir

    def get_token(self, override: Optional[str] = None) -> Optional[str]:
        """Resolve the API token: explicit value, then environment, then file."""
        return override or os.environ.get(TOKEN_ENV) or self.get("token")

    def get_api_url(self) -> str:
        """Resolve the API base URL: environment, then file, then default."""
        return os.environ.get(API_URL_ENV) or self.get("api_url") or DEFAULT_API_URL
