"""
================================================================================
Configuration Loader
================================================================================

Suite settings read from one YAML file, overridable per run from the environment.

Features:
    - Single YAML file with suite defaults (config/config.yaml)
    - Environment variable override (APP_BASE_URL overrides app.base_url)
    - Explicit env aliases for the historical variable names (BASE_URL, TEST_EMAIL...)
    - Dot notation path access with default values

================================================================================
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from loguru import logger


DEFAULT_CONFIG_PATH = Path(__file__).parent.parent / "config" / "config.yaml"


class ConfigurationError(Exception):
    """Config file unreadable, malformed, or a required value is unset."""


class ConfigLoader:
    """
    Process-wide settings store.

    Lookup order for get():
        1. Explicit env alias passed to get() (e.g. BASE_URL)
        2. Derived environment variable (APP_BASE_URL for app.base_url)
        3. YAML configuration file
        4. Default value passed to get()

    Usage:
        >>> settings = ConfigLoader()
        >>> settings.get("app.base_url", env="BASE_URL")
        'https://app.stage.anyteam.com'
        >>> settings.get("timeouts.long", 10000)
        10000
    """

    _instance: Optional["ConfigLoader"] = None
    _config: Dict[str, Any] = {}

    def __new__(cls, config_path: Optional[Path] = None) -> "ConfigLoader":
        """Singleton: configuration is loaded once per process."""
        if cls._instance is None:
            cls._instance = super().__new__(cls)
            cls._instance._initialized = False
        return cls._instance

    def __init__(self, config_path: Optional[Path] = None) -> None:
        """
        Args:
            config_path: YAML file to read, DEFAULT_CONFIG_PATH when omitted.
                Ignored once the singleton has been built.
        """
        if getattr(self, "_initialized", False):
            return

        self._config_path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH
        self._load_config()
        self._initialized = True

    def _load_config(self) -> None:
        if not self._config_path.is_file():
            logger.warning(
                f"⚠️ No config file at {self._config_path}, "
                f"falling back to env and call-site defaults"
            )
            self._config = {}
            return

        try:
            loaded = yaml.safe_load(self._config_path.read_text(encoding="utf-8")) or {}
        except yaml.YAMLError as e:
            raise ConfigurationError(f"Cannot parse {self._config_path}: {e}") from e

        if not isinstance(loaded, dict):
            raise ConfigurationError(
                f"Configuration root must be a mapping: {self._config_path}"
            )
        self._config = loaded
        logger.debug(f"Config loaded: {self._config_path}")

    @property
    def config_path(self) -> Path:
        return self._config_path

    def get(self, key: str, default: Any = None, env: Optional[str] = None) -> Any:
        """
        Resolve a dotted key such as "retry.join_attempts".

        Args:
            key: Dot-notation path (e.g., "app.base_url")
            default: Default value if key not found anywhere
            env: Optional environment variable name checked first

        Returns:
            Configuration value or default. Environment values are converted to
            the type of the YAML value (or of `default`).
        """
        value: Any = self._config
        for segment in key.split("."):
            value = value.get(segment) if isinstance(value, dict) else None
            if value is None:
                break

        reference = value if value is not None else default

        for env_key in (env, key.upper().replace(".", "_")):
            if not env_key:
                continue
            raw = os.environ.get(env_key)
            if raw:
                return self._coerce(raw, reference)

        return reference

    def require(self, key: str, env: Optional[str] = None) -> Any:
        """Like get() but raises ConfigurationError for missing/empty values."""
        value = self.get(key, env=env)
        if value is None or value == "":
            hint = f" (set {env})" if env else ""
            raise ConfigurationError(f"Missing required configuration: {key}{hint}")
        return value

    def get_section(self, section: str) -> Dict[str, Any]:
        """Top-level mapping such as "timeouts"; {} when absent. No env overrides."""
        return self._config.get(section, {}) or {}

    def reload(self) -> None:
        """Re-read the YAML file, e.g. after a test rewrote it."""
        self._load_config()
        logger.info(f"Config re-read from {self._config_path}")

    @staticmethod
    def _coerce(raw: str, reference: Any) -> Any:
        """Env values arrive as text; cast them to the type of the YAML value."""
        if isinstance(reference, bool):
            return raw.strip().lower() in ("true", "1", "yes", "on")
        for kind in (int, float):
            if isinstance(reference, kind):
                try:
                    return kind(raw)
                except ValueError:
                    return raw
        return raw

    @classmethod
    def reset(cls) -> None:
        """Reset singleton instance (tests use this to reload settings)."""
        cls._instance = None
        cls._config = {}


__all__ = [
    "ConfigLoader",
    "ConfigurationError",
    "DEFAULT_CONFIG_PATH",
]
