from __future__ import annotations

from dataclasses import dataclass, field

from stream_runtime.integration.kv_store import InvalidStoreTypeError, KVStore, UnknownStoreError
from stream_runtime.integration.topic import InMemoryTopic
from stream_runtime.integration.window_store import WindowStore
from stream_runtime.observability.domain.logging import LogMessage, LogSink
from stream_runtime.records import Record
from stream_runtime.timestamps.extractors import TimestampExtractor, checked_timestamp


@dataclass(slots=True)
class ExecutionContext:
    # Mutable per-run state shared by every processor node of one topology instance.
    run_id: str
    application_id: str
    extractor: TimestampExtractor
    stores: dict[str, KVStore | WindowStore] = field(default_factory=dict)
    topics: dict[str, InMemoryTopic] = field(default_factory=dict)
    properties: dict[str, object] = field(default_factory=dict)
    log_sink: LogSink | None = None
    # Timestamp of the record currently being processed; -1 before the first record.
    timestamp: int = -1

    def extract_timestamp(self, record: Record) -> int:
        previous = max(self.timestamp, 0)
        self.timestamp = checked_timestamp(self.extractor, record, previous)
        return self.timestamp

    def store(self, name: str) -> KVStore | WindowStore:
        try:
            return self.stores[name]
        except KeyError:
            raise UnknownStoreError(f"Store '{name}' is not defined in this topology") from None

    def kv_store(self, name: str) -> KVStore:
        store = self.store(name)
        if not isinstance(store, KVStore):
            raise InvalidStoreTypeError(f"Store '{name}' is a windowed store, not a key-value store")
        return store

    def window_store(self, name: str) -> WindowStore:
        store = self.store(name)
        if not isinstance(store, WindowStore):
            raise InvalidStoreTypeError(f"Store '{name}' is a key-value store, not a windowed store")
        return store

    def topic(self, name: str) -> InMemoryTopic:
        # Output topics are created on first publish.
        topic = self.topics.get(name)
        if topic is None:
            topic = InMemoryTopic(name)
            self.topics[name] = topic
        return topic

    def log(self, level: str, message: str, **fields: object) -> None:
        if self.log_sink is None:
            return
        self.log_sink.emit(
            LogMessage(level=level, message=message, fields={"run_id": self.run_id, **fields})
        )


@dataclass(slots=True)
class ContextFactory:
    # Owns ExecutionContext creation; run ids are sequential so runs stay reproducible.
    application_id: str
    _runs: int = 0

    def new(
        self,
        *,
        extractor: TimestampExtractor,
        stores: dict[str, KVStore | WindowStore],
        properties: dict[str, object] | None = None,
        log_sink: LogSink | None = None,
    ) -> ExecutionContext:
        self._runs += 1
        return ExecutionContext(
            run_id=f"{self.application_id}-{self._runs}",
            application_id=self.application_id,
            extractor=extractor,
            stores=stores,
            properties={} if properties is None else dict(properties),
            log_sink=log_sink,
        )
