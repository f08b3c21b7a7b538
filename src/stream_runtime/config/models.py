from __future__ import annotations

from collections.abc import Mapping
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from stream_runtime.serialization.codecs import codec_names
from stream_runtime.timestamps.extractors import DEFAULT_EXTRACTOR_PATH


class ConfigError(ValueError):
    # Raised for invalid runtime configuration (fail fast).
    pass


class StreamsConfig(BaseModel):
    # Typed view of the flat "dotted key" properties a topology runs with.
    # Unknown keys are kept so topologies can read their own settings.
    model_config = ConfigDict(extra="allow", populate_by_name=True, arbitrary_types_allowed=True)

    application_id: str = Field(default="mocked-streams", alias="application.id")
    # Dotted path, extractor class, or extractor instance.
    timestamp_extractor: Any = Field(default=DEFAULT_EXTRACTOR_PATH, alias="timestamp.extractor")
    default_key_codec: str = Field(default="json", alias="default.key.codec")
    default_value_codec: str = Field(default="json", alias="default.value.codec")
    log_sink: Literal["none", "stdout", "jsonl"] = Field(default="none", alias="log.sink")
    log_path: str | None = Field(default=None, alias="log.path")

    @field_validator("application_id")
    @classmethod
    def _non_empty_application_id(cls, value: str) -> str:
        if not value:
            raise ValueError("application.id must be a non-empty string")
        return value

    @field_validator("default_key_codec", "default_value_codec")
    @classmethod
    def _known_codec(cls, value: str) -> str:
        if value not in codec_names():
            raise ValueError(f"unknown codec '{value}', expected one of {codec_names()}")
        return value

    @model_validator(mode="after")
    def _jsonl_needs_path(self) -> StreamsConfig:
        if self.log_sink == "jsonl" and not self.log_path:
            raise ValueError("log.path is required when log.sink is jsonl")
        return self

    @classmethod
    def property_key(cls, key: str) -> str:
        # Field names map to their dotted property key; any other key is returned as is.
        field_info = cls.model_fields.get(key)
        if field_info is None or field_info.alias is None:
            return key
        return field_info.alias

    def extra_properties(self) -> dict[str, object]:
        return dict(self.model_extra or {})


def load_streams_config(raw: Mapping[str, object]) -> StreamsConfig:
    # Validate a merged property mapping; pydantic errors are surfaced as ConfigError.
    properties = {StreamsConfig.property_key(key): value for key, value in raw.items()}
    try:
        return StreamsConfig.model_validate(properties)
    except ValidationError as exc:
        raise ConfigError(f"Invalid streams config: {exc}") from exc
