from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field

from stream_runtime.records import Record


@dataclass(frozen=True, slots=True)
class ChannelRegistry:
    """Ordered input channels and their pending (already encoded) records.

    Channels keep the position of their first registration; later records for
    the same channel are appended to it. This order is the feed order of a run:
    channel by channel, and within a channel in registration order. Records of
    different channels are never interleaved.
    """

    channels: tuple[tuple[str, tuple[Record, ...]], ...] = field(default_factory=tuple)

    def with_records(self, channel: str, records: Iterable[Record]) -> ChannelRegistry:
        if not isinstance(channel, str) or not channel:
            raise ValueError("Channel name must be a non-empty string")
        added = tuple(records)
        updated: list[tuple[str, tuple[Record, ...]]] = []
        found = False
        for name, existing in self.channels:
            if name == channel:
                updated.append((name, existing + added))
                found = True
            else:
                updated.append((name, existing))
        if not found:
            updated.append((channel, added))
        return ChannelRegistry(channels=tuple(updated))

    def items(self) -> Iterator[tuple[str, tuple[Record, ...]]]:
        return iter(self.channels)

    def names(self) -> list[str]:
        return [name for name, _ in self.channels]

    def records(self, channel: str) -> tuple[Record, ...]:
        for name, records in self.channels:
            if name == channel:
                return records
        return ()

    def total_records(self) -> int:
        return sum(len(records) for _, records in self.channels)
