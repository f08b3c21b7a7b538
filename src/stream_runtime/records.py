from __future__ import annotations

from dataclasses import dataclass, replace


@dataclass(frozen=True, slots=True)
class Record:
    # Keyed record flowing through channels and processor nodes.
    key: object
    value: object
    timestamp: int | None = None

    def with_timestamp(self, timestamp: int) -> Record:
        return replace(self, timestamp=timestamp)

    def with_key_value(self, key: object, value: object) -> Record:
        # Derived records keep the timestamp of the record they came from.
        return Record(key=key, value=value, timestamp=self.timestamp)


@dataclass(frozen=True, slots=True)
class WindowKey:
    # Composite identity of a windowed store entry.
    window_start: int
    key: object
