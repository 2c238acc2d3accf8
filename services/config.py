# services/config.py

from pathlib import Path

from pydantic import ValidationError

import services.util as u
import services.logger as log
import services.config_io as config_io
from services.config_schema import AppSettings

l = log.get_logger()

_config_cache: dict | None = None
_settings_cache: AppSettings | None = None


def _load_config() -> dict:
    """Load the first config file found in the data path into the cache."""
    global _config_cache

    if _config_cache is not None:
        return _config_cache

    config_path = config_io.find_config(Path(u.get_data_path()))
    if config_path is None:
        _config_cache = {}
        return _config_cache

    try:
        _config_cache = config_io.load_config(config_path)
    except Exception as e:
        raise RuntimeError(f"Read config failed: {config_path}: {e}") from e
    l.debug(f"Loaded config from: {config_path}")
    return _config_cache


def get(key: str, default=None):
    """
    Return a config value.

    Nested keys are separated by dots, e.g.::

        get("registry.backend")
        get("log_level")

    :param key: config key (dotted for nested keys)
    :param default: returned when the key or any path segment is missing
    """
    try:
        config = _load_config()
    except RuntimeError as e:
        l.warning(f"Failed to load config file! Error: {e}")
        return default

    value = config
    for k in key.split("."):
        if isinstance(value, dict) and k in value:
            value = value[k]
        else:
            return default
    return value


def load_settings() -> AppSettings:
    """Return the validated application settings (defaults when no file exists)."""
    global _settings_cache

    if _settings_cache is not None:
        return _settings_cache

    try:
        settings = AppSettings.model_validate(_load_config())
    except ValidationError as e:
        l.critical(f"Config error:\n{e}")
        raise

    if not settings.registry.path:
        settings.registry.path = str(Path(u.get_data_path()) / "drivers.db")
    _settings_cache = settings
    return settings


def clear_cache() -> None:
    global _config_cache, _settings_cache
    _config_cache = None
    _settings_cache = None


def create_registry(settings: AppSettings | None = None):
    """Build the registry store named by ``registry.backend``."""
    settings = settings or load_settings()
    if settings.registry.backend == "memory":
        from drivers.registry import MemoryDriverRegistry
        return MemoryDriverRegistry()

    from services.db import SqliteDriverRegistry
    return SqliteDriverRegistry(settings.registry.path)
