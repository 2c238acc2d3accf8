"""Unified config file I/O supporting JSON, YAML, and TOML.

Format is always inferred from the file extension:
  .json        → JSON
  .yaml / .yml → YAML  (pyyaml)
  .toml        → TOML  (read: stdlib tomllib; write: tomli-w)
"""
from __future__ import annotations

import json
import tomllib
from pathlib import Path
from typing import Any

import tomli_w
import yaml

_JSON_EXTS = {".json"}
_YAML_EXTS = {".yaml", ".yml"}
_TOML_EXTS = {".toml"}

_CONFIG_NAMES = ["config.json", "config.yaml", "config.yml", "config.toml"]


def format_of(path: Path) -> str:
    """Return ``"json"``, ``"yaml"`` or ``"toml"`` for *path*; ValueError otherwise."""
    ext = path.suffix.lower()
    if ext in _JSON_EXTS:
        return "json"
    if ext in _YAML_EXTS:
        return "yaml"
    if ext in _TOML_EXTS:
        return "toml"
    raise ValueError(f"Unsupported config format: {path.name}")


def find_config(directory: Path) -> Path | None:
    """Return the first existing config file found in *directory*."""
    for name in _CONFIG_NAMES:
        p = directory / name
        if p.is_file():
            return p
    return None


def load_config(path: Path) -> dict[str, Any]:
    """Load a config file; format is inferred from the file extension."""
    fmt = format_of(path)
    if fmt == "yaml":
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f) or {}
    if fmt == "toml":
        with open(path, "rb") as f:
            return tomllib.load(f)
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def save_config(data: dict[str, Any], path: Path) -> None:
    """Save *data* to *path*; format is inferred from the file extension.

    TOML has no null: keys whose value is None are dropped before writing.
    """
    fmt = format_of(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    if fmt == "yaml":
        with open(path, "w", encoding="utf-8") as f:
            yaml.dump(data, f, allow_unicode=True, sort_keys=False, default_flow_style=False)
        return
    if fmt == "toml":
        with open(path, "wb") as f:
            tomli_w.dump(_drop_none(data), f)
        return
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, ensure_ascii=False, indent=2)


def _drop_none(value: Any) -> Any:
    if isinstance(value, dict):
        return {k: _drop_none(v) for k, v in value.items() if v is not None}
    if isinstance(value, list):
        return [_drop_none(v) for v in value if v is not None]
    return value
