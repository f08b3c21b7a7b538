from __future__ import annotations

from collections.abc import Iterable

from mocked_streams.runner import RunResult
from stream_runtime.integration.kv_store import InvalidStoreTypeError, StoreSnapshot, UnknownStoreError
from stream_runtime.records import WindowKey
from stream_runtime.serialization.codecs import Codec


def read_output(
    result: RunResult,
    channel: str,
    key_codec: Codec,
    value_codec: Codec,
    size: int,
) -> list[tuple[object, object]]:
    # Up to `size` records in emission order; fewer is not an error.
    return [
        (key_codec.deserialize(record.key), value_codec.deserialize(record.value))
        for record in result.output(channel)[:size]
    ]


def read_output_table(
    result: RunResult,
    channel: str,
    key_codec: Codec,
    value_codec: Codec,
    size: int,
) -> dict[object, object]:
    return fold_last_write_wins(read_output(result, channel, key_codec, value_codec, size))


def fold_last_write_wins(pairs: Iterable[tuple[object, object]]) -> dict[object, object]:
    # Changelog read as a table: each key keeps the value of its last occurrence.
    table: dict[object, object] = {}
    for key, value in pairs:
        table[key] = value
    return table


def read_state_table(result: RunResult, store_name: str) -> dict[object, object]:
    snapshot = _snapshot(result, store_name)
    if snapshot.windowed:
        raise InvalidStoreTypeError(f"Store '{store_name}' is windowed; use window_state_table")
    return dict(snapshot.entries)


def read_window_state_table(
    result: RunResult,
    store_name: str,
    key: object,
    time_from: int = 0,
    time_to: int | None = None,
) -> dict[int, object]:
    # Window start -> value for one key, ordered by window start; bounds are inclusive.
    snapshot = _snapshot(result, store_name)
    if not snapshot.windowed:
        raise InvalidStoreTypeError(f"Store '{store_name}' is not windowed; use state_table")
    found: list[tuple[int, object]] = []
    for window_key, value in snapshot.entries.items():
        if not isinstance(window_key, WindowKey) or window_key.key != key:
            continue
        if window_key.window_start < time_from:
            continue
        if time_to is not None and window_key.window_start > time_to:
            continue
        found.append((window_key.window_start, value))
    return dict(sorted(found, key=lambda item: item[0]))


def _snapshot(result: RunResult, store_name: str) -> StoreSnapshot:
    try:
        return result.stores[store_name]
    except KeyError:
        raise UnknownStoreError(
            f"Store '{store_name}' was not declared; pass it to stores(...) before reading it"
        ) from None
