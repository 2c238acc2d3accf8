import json

import pytest
from pydantic import ValidationError

import services.config as config
import services.config_io as config_io
from drivers.registry import MemoryDriverRegistry
from services.db import SqliteDriverRegistry

SAMPLE = {
    "registry": {"backend": "memory"},
    "log_level": "DEBUG",
    "drivers": [{"name": "redis", "config": {"port": 6379, "tls": False}}],
}


@pytest.mark.parametrize("filename", ["config.json", "config.yaml", "config.toml"])
def test_save_and_load_by_extension(tmp_path, filename):
    path = tmp_path / filename
    config_io.save_config(SAMPLE, path)

    assert config_io.load_config(path) == SAMPLE


def test_toml_drops_none_values(tmp_path):
    path = tmp_path / "config.toml"
    config_io.save_config({"registry": {"backend": "sqlite", "path": None}}, path)

    assert config_io.load_config(path) == {"registry": {"backend": "sqlite"}}


def test_unsupported_extension(tmp_path):
    with pytest.raises(ValueError):
        config_io.load_config(tmp_path / "config.ini")


def test_find_config_prefers_json(tmp_path):
    assert config_io.find_config(tmp_path) is None

    (tmp_path / "config.yaml").write_text("log_level: INFO\n", encoding="utf-8")
    assert config_io.find_config(tmp_path).name == "config.yaml"

    (tmp_path / "config.json").write_text("{}", encoding="utf-8")
    assert config_io.find_config(tmp_path).name == "config.json"


def _write_settings(tmp_path, data, name="config.json"):
    data_dir = tmp_path / "data"
    data_dir.mkdir(parents=True, exist_ok=True)
    config_io.save_config(data, data_dir / name)


def test_settings_defaults_without_file(tmp_path):
    settings = config.load_settings()

    assert settings.registry.backend == "sqlite"
    assert settings.registry.path == str(tmp_path / "data" / "drivers.db")
    assert settings.log_level == "INFO"
    assert settings.verbose is False


def test_settings_from_yaml(tmp_path):
    _write_settings(tmp_path, {"registry": {"backend": "memory"}, "verbose": "yes"}, "config.yaml")

    settings = config.load_settings()

    assert settings.registry.backend == "memory"
    assert settings.verbose is True
    assert config.load_settings() is settings


def test_invalid_settings_raise(tmp_path):
    _write_settings(tmp_path, {"registry": {"backend": "postgres"}})

    with pytest.raises(ValidationError):
        config.load_settings()


def test_get_dotted_keys(tmp_path):
    _write_settings(tmp_path, SAMPLE)

    assert config.get("registry.backend") == "memory"
    assert config.get("registry.path", "fallback") == "fallback"
    assert config.get("log_level.nested", 1) == 1


def test_get_with_unreadable_file_returns_default(tmp_path):
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "config.json").write_text("{not json", encoding="utf-8")

    assert config.get("registry.backend", "default") == "default"


def test_create_registry_by_backend(tmp_path):
    _write_settings(tmp_path, {"registry": {"backend": "memory"}})
    assert isinstance(config.create_registry(), MemoryDriverRegistry)

    config.clear_cache()
    (tmp_path / "data" / "config.json").write_text(
        json.dumps({"registry": {"backend": "sqlite", "path": str(tmp_path / "custom.db")}}),
        encoding="utf-8",
    )
    registry = config.create_registry()
    try:
        assert isinstance(registry, SqliteDriverRegistry)
        assert (tmp_path / "custom.db").is_file()
    finally:
        registry.close()
