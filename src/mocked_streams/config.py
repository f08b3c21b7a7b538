from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from types import MappingProxyType

from stream_runtime.config import StreamsConfig, load_streams_config, load_yaml_config
from stream_runtime.timestamps.extractors import DEFAULT_EXTRACTOR_PATH

# Harness defaults; the extractor reads the sequence-stamped record timestamp, never the clock.
DEFAULT_CONFIG: Mapping[str, object] = MappingProxyType(
    {
        "application.id": "mocked-streams",
        "timestamp.extractor": DEFAULT_EXTRACTOR_PATH,
        "default.key.codec": "json",
        "default.value.codec": "json",
    }
)


def merge_config(*overrides: Mapping[str, object], base: Mapping[str, object] | None = None) -> dict[str, object]:
    # Later mappings win key-by-key; the base defaults to DEFAULT_CONFIG.
    # Field names such as "application_id" land on their dotted key.
    merged: dict[str, object] = dict(DEFAULT_CONFIG if base is None else base)
    for override in overrides:
        for key, value in override.items():
            if not isinstance(key, str):
                raise TypeError(f"Config keys must be strings, got {key!r}")
            merged[StreamsConfig.property_key(key)] = value
    return merged


def effective_config(*overrides: Mapping[str, object]) -> StreamsConfig:
    return load_streams_config(merge_config(*overrides))


def config_from_yaml(path: Path | str) -> dict[str, object]:
    # Nested YAML sections become dotted keys: {"timestamp": {"extractor": x}} -> "timestamp.extractor".
    return load_yaml_config(Path(path))
