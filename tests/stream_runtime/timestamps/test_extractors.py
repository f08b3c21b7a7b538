from __future__ import annotations

import pytest

from stream_runtime.records import Record
from stream_runtime.timestamps.extractors import (
    DEFAULT_EXTRACTOR_PATH,
    ExtractorResolutionError,
    InvalidTimestampError,
    RecordTimestampExtractor,
    checked_timestamp,
    resolve_extractor,
)


class _ValueExtractor:
    def extract(self, record: Record, previous: int) -> object:
        return record.value


def test_record_extractor_uses_record_timestamp_or_previous() -> None:
    extractor = RecordTimestampExtractor()
    assert extractor.extract(Record("k", "v", 7), previous=3) == 7
    assert extractor.extract(Record("k", "v"), previous=3) == 3


def test_resolve_extractor_from_dotted_and_colon_paths() -> None:
    assert isinstance(resolve_extractor(DEFAULT_EXTRACTOR_PATH), RecordTimestampExtractor)
    colon = "stream_runtime.timestamps.extractors:RecordTimestampExtractor"
    assert isinstance(resolve_extractor(colon), RecordTimestampExtractor)


def test_resolve_extractor_from_class_and_instance() -> None:
    instance = _ValueExtractor()
    assert resolve_extractor(instance) is instance
    assert isinstance(resolve_extractor(_ValueExtractor), _ValueExtractor)


@pytest.mark.parametrize(
    "spec",
    ["no_such_module_xyz.Extractor", "stream_runtime.timestamps.extractors.Missing", "Bare", object()],
)
def test_resolve_extractor_failures(spec: object) -> None:
    with pytest.raises(ExtractorResolutionError):
        resolve_extractor(spec)


def test_checked_timestamp_rejects_negative_and_non_int() -> None:
    extractor = _ValueExtractor()
    assert checked_timestamp(extractor, Record("k", 5), previous=0) == 5
    with pytest.raises(InvalidTimestampError):
        checked_timestamp(extractor, Record("k", -1), previous=0)
    with pytest.raises(InvalidTimestampError):
        checked_timestamp(extractor, Record("k", "late"), previous=0)
