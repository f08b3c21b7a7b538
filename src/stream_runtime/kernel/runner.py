from __future__ import annotations

from collections.abc import Callable, Iterable

from stream_runtime.config.models import StreamsConfig
from stream_runtime.integration.kv_store import InMemoryKvStore, KVStore, StoreSnapshot, UnknownStoreError
from stream_runtime.integration.window_store import InMemoryWindowStore, WindowStore
from stream_runtime.kernel.context import ContextFactory, ExecutionContext
from stream_runtime.kernel.topology import ProcessorNode, Topology, TopologyBuilder
from stream_runtime.observability.adapters.logging import build_log_sink
from stream_runtime.observability.domain.logging import LogSink
from stream_runtime.records import Record
from stream_runtime.serialization.codecs import codec_for
from stream_runtime.timestamps.extractors import resolve_extractor

TopologyDefinition = Callable[[TopologyBuilder], object]


class DriverClosedError(RuntimeError):
    pass


class TopologyDriver:
    """Runs one topology instance synchronously against in-memory channels.

    Each piped record is processed to completion (depth-first through the
    node graph) before ``pipe`` returns. Records that carry no timestamp are
    stamped from the driver's sequence counter, so a run never depends on
    the wall clock. A driver owns its stores and must be closed after use.
    """

    def __init__(
        self,
        definition: TopologyDefinition,
        config: StreamsConfig,
        *,
        log_sink: LogSink | None = None,
        context_factory: ContextFactory | None = None,
    ) -> None:
        builder = TopologyBuilder(
            default_key_codec=codec_for(config.default_key_codec),
            default_value_codec=codec_for(config.default_value_codec),
        )
        definition(builder)
        self.topology: Topology = builder.build()

        self._owned_sink = None
        if log_sink is None:
            log_sink = build_log_sink(config.log_sink, {"path": config.log_path})
            self._owned_sink = log_sink

        stores: dict[str, KVStore | WindowStore] = {}
        for spec in self.topology.stores.values():
            stores[spec.name] = InMemoryWindowStore(name=spec.name) if spec.windowed else InMemoryKvStore(spec.name)

        factory = context_factory or ContextFactory(config.application_id)
        self._ctx: ExecutionContext = factory.new(
            extractor=resolve_extractor(config.timestamp_extractor),
            stores=stores,
            properties=config.extra_properties(),
            log_sink=log_sink,
        )
        self._sequence = 0
        self._closed = False

    @property
    def context(self) -> ExecutionContext:
        return self._ctx

    @property
    def closed(self) -> bool:
        return self._closed

    def pipe(self, topic: str, record: Record) -> None:
        self._ensure_open()
        if record.timestamp is None:
            record = record.with_timestamp(self._sequence)
        self._sequence += 1

        nodes = self.topology.sources.get(topic)
        if not nodes:
            # Nothing reads this topic; the record stays unconsumed.
            self._ctx.log("debug", "record.unconsumed", topic=topic)
            return
        for node in nodes:
            self._process(node, record)

    def pipe_all(self, topic: str, records: Iterable[Record]) -> None:
        for record in records:
            self.pipe(topic, record)

    def drain_outputs(self) -> dict[str, list[Record]]:
        # Emitted records per output topic, in emission order.
        self._ensure_open()
        return {name: topic.drain() for name, topic in self._ctx.topics.items()}

    def snapshot(self, store_names: Iterable[str]) -> dict[str, StoreSnapshot]:
        self._ensure_open()
        snapshots: dict[str, StoreSnapshot] = {}
        for name in store_names:
            spec = self.topology.stores.get(name)
            if spec is None:
                raise UnknownStoreError(f"Store '{name}' is not defined in this topology")
            store = self._ctx.store(name)
            snapshots[name] = StoreSnapshot(name=name, windowed=spec.windowed, entries=dict(store.all()))
        return snapshots

    def close(self) -> None:
        # Safe to call more than once.
        if self._closed:
            return
        self._closed = True
        for store in self._ctx.stores.values():
            store.close()
        self._ctx.topics.clear()
        close = getattr(self._owned_sink, "close", None)
        if close is not None:
            close()

    def _process(self, node: ProcessorNode, record: Record) -> None:
        # Outputs are materialized before forwarding so fan-out order is fixed.
        outputs = list(node.step(record, self._ctx))
        for out in outputs:
            for child in node.children:
                self._process(child, out)

    def _ensure_open(self) -> None:
        if self._closed:
            raise DriverClosedError("TopologyDriver is closed")
