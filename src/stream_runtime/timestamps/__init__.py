from .extractors import (
    DEFAULT_EXTRACTOR_PATH,
    ExtractorResolutionError,
    InvalidTimestampError,
    RecordTimestampExtractor,
    TimestampExtractor,
    checked_timestamp,
    resolve_extractor,
)

__all__ = [
    "DEFAULT_EXTRACTOR_PATH",
    "ExtractorResolutionError",
    "InvalidTimestampError",
    "RecordTimestampExtractor",
    "TimestampExtractor",
    "checked_timestamp",
    "resolve_extractor",
]
