from __future__ import annotations

import importlib
from typing import Protocol, runtime_checkable

from stream_runtime.records import Record


class InvalidTimestampError(ValueError):
    pass


class ExtractorResolutionError(ValueError):
    # Raised when a configured extractor path cannot be imported or instantiated.
    pass


@runtime_checkable
class TimestampExtractor(Protocol):
    # Returns the logical time of a record; previous is the last extracted timestamp of the run.
    def extract(self, record: Record, previous: int) -> int:
        raise NotImplementedError("TimestampExtractor is a port; use a concrete extractor.")


class RecordTimestampExtractor:
    # Uses the timestamp carried by the record; the driver stamps one from its sequence counter.
    def extract(self, record: Record, previous: int) -> int:
        if record.timestamp is None:
            return previous
        return record.timestamp


DEFAULT_EXTRACTOR_PATH = "stream_runtime.timestamps.extractors.RecordTimestampExtractor"


def resolve_extractor(spec: object) -> TimestampExtractor:
    # Accepts an extractor instance, an extractor class, or a dotted import path.
    if isinstance(spec, str):
        spec = _import_path(spec)
    if isinstance(spec, type):
        try:
            spec = spec()
        except TypeError as exc:
            raise ExtractorResolutionError(f"Cannot instantiate extractor {spec.__name__}: {exc}") from exc
    if not isinstance(spec, TimestampExtractor):
        raise ExtractorResolutionError(f"{spec!r} does not provide extract(record, previous)")
    return spec


def checked_timestamp(extractor: TimestampExtractor, record: Record, previous: int) -> int:
    timestamp = extractor.extract(record, previous)
    if isinstance(timestamp, bool) or not isinstance(timestamp, int):
        raise InvalidTimestampError(f"Extractor returned non-integer timestamp {timestamp!r}")
    if timestamp < 0:
        raise InvalidTimestampError(f"Extractor returned negative timestamp {timestamp} for key {record.key!r}")
    return timestamp


def _import_path(path: str) -> object:
    # Both "pkg.mod.Name" and "pkg.mod:Name" are accepted.
    if ":" in path:
        module_name, _, attr = path.partition(":")
    else:
        module_name, _, attr = path.rpartition(".")
    if not module_name or not attr:
        raise ExtractorResolutionError(f"Invalid extractor path '{path}'")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise ExtractorResolutionError(f"Cannot import module '{module_name}' for extractor '{path}'") from exc
    try:
        return getattr(module, attr)
    except AttributeError:
        raise ExtractorResolutionError(f"Module '{module_name}' has no attribute '{attr}'") from None
