from __future__ import annotations

from stream_runtime.records import Record


class TopicPort:
    # Port for output record channels: sinks publish, the driver drains after the run.
    def publish(self, record: Record) -> None:
        raise NotImplementedError("TopicPort.publish must be implemented")

    def drain(self) -> list[Record]:
        raise NotImplementedError("TopicPort.drain must be implemented")


class InMemoryTopic(TopicPort):
    # In-memory channel; records keep emission order.
    def __init__(self, name: str) -> None:
        self.name = name
        self._records: list[Record] = []

    def publish(self, record: Record) -> None:
        self._records.append(record)

    def drain(self) -> list[Record]:
        drained = self._records
        self._records = []
        return drained
