from __future__ import annotations

from pathlib import Path

import yaml

from stream_runtime.config.models import ConfigError


def load_yaml_config(path: Path) -> dict[str, object]:
    # YAML loader; nested mappings are flattened into dotted property keys.
    raw = yaml.safe_load(path.read_text(encoding="utf-8"))
    if raw is None:
        return {}
    if not isinstance(raw, dict):
        raise ConfigError("Config root must be a mapping")
    return flatten_properties(raw)


def flatten_properties(raw: dict[object, object], prefix: str = "") -> dict[str, object]:
    flat: dict[str, object] = {}
    for key, value in raw.items():
        if not isinstance(key, str):
            raise ConfigError(f"Config keys must be strings, got {key!r}")
        name = f"{prefix}.{key}" if prefix else key
        if isinstance(value, dict):
            flat.update(flatten_properties(value, name))
        else:
            flat[name] = value
    return flat
