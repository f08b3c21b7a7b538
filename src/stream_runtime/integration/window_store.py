from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from stream_runtime.records import WindowKey


class WindowStore:
    # Window-state port: values are addressed by (window start, key).
    def get(self, key: object, window_start: int) -> object | None:
        raise NotImplementedError("WindowStore.get must be implemented")

    def put(self, key: object, window_start: int, value: object) -> None:
        raise NotImplementedError("WindowStore.put must be implemented")

    def all(self) -> Iterator[tuple[WindowKey, object]]:
        raise NotImplementedError("WindowStore.all must be implemented")

    def close(self) -> None:
        raise NotImplementedError("WindowStore.close must be implemented")


@dataclass
class InMemoryWindowStore(WindowStore):
    # In-memory adapter; windows never expire within a test-sized run.
    name: str = ""
    _windows: dict[WindowKey, object] = field(default_factory=dict)

    def get(self, key: object, window_start: int) -> object | None:
        return self._windows.get(WindowKey(window_start=window_start, key=key))

    def put(self, key: object, window_start: int, value: object) -> None:
        window_key = WindowKey(window_start=window_start, key=key)
        if value is None:
            self._windows.pop(window_key, None)
            return
        self._windows[window_key] = value

    def all(self) -> Iterator[tuple[WindowKey, object]]:
        return iter(sorted(self._windows.items(), key=lambda item: item[0].window_start))

    def close(self) -> None:
        self._windows.clear()
