from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import TYPE_CHECKING

from stream_runtime.kernel.dag import Dag, NodeContract, build_dag
from stream_runtime.kernel.step import Filter, FlatMap, Map, Step, Tap
from stream_runtime.records import Record, WindowKey
from stream_runtime.serialization.codecs import Codec

if TYPE_CHECKING:
    from stream_runtime.kernel.context import ExecutionContext


class TopologyError(ValueError):
    # Raised for invalid topology declarations (duplicate stores, bad windows, ...).
    pass


@dataclass(slots=True)
class ProcessorNode:
    # One operator in the graph; outputs are forwarded to children in registration order.
    name: str
    step: Step
    children: list[ProcessorNode] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class StoreSpec:
    name: str
    windowed: bool


@dataclass(frozen=True, slots=True)
class TimeWindows:
    # Fixed-size windows; advance == size gives tumbling windows, advance < size hopping ones.
    size: int
    advance: int

    @classmethod
    def of(cls, size: int) -> TimeWindows:
        if size <= 0:
            raise TopologyError(f"Window size must be positive, got {size}")
        return cls(size=size, advance=size)

    def advance_by(self, advance: int) -> TimeWindows:
        if advance <= 0 or advance > self.size:
            raise TopologyError(f"Window advance must be in (0, {self.size}], got {advance}")
        return TimeWindows(size=self.size, advance=advance)

    def window_starts(self, timestamp: int) -> list[int]:
        # Every window [start, start + size) containing the timestamp, oldest first.
        start = (max(0, timestamp - self.size + self.advance) // self.advance) * self.advance
        starts: list[int] = []
        while start <= timestamp:
            starts.append(start)
            start += self.advance
        return starts


@dataclass(frozen=True, slots=True)
class Topology:
    # Immutable result of TopologyBuilder.build().
    sources: MappingProxyType[str, tuple[ProcessorNode, ...]]
    stores: MappingProxyType[str, StoreSpec]
    dag: Dag

    def source_topics(self) -> list[str]:
        return list(self.sources)

    def describe(self) -> str:
        lines = [f"Topology: sources={self.source_topics()} stores={sorted(self.stores)}"]
        for src, dst in self.dag.edges:
            lines.append(f"  {src} --> {dst}")
        return "\n".join(lines)


class TopologyBuilder:
    """Collects processor nodes declared through the stream DSL.

    Codecs left as None fall back to the builder defaults, which the driver
    fills from the configured default key/value codec names.
    """

    def __init__(self, *, default_key_codec: Codec | None = None, default_value_codec: Codec | None = None) -> None:
        self._default_key_codec = default_key_codec
        self._default_value_codec = default_value_codec
        self._sources: dict[str, list[ProcessorNode]] = {}
        self._stores: dict[str, StoreSpec] = {}
        self._contracts: list[NodeContract] = []
        self._counter = 0

    def stream(self, topic: str, key_codec: Codec | None = None, value_codec: Codec | None = None) -> KStream:
        key_codec, value_codec = self.resolve_codecs(key_codec, value_codec)

        def _decode(record: Record, ctx: ExecutionContext) -> Record:
            decoded = Record(
                key=key_codec.deserialize(record.key),
                value=value_codec.deserialize(record.value),
                timestamp=record.timestamp,
            )
            return decoded.with_timestamp(ctx.extract_timestamp(decoded))

        node = self._new_node("KSTREAM-SOURCE", Map(_decode), consumes=[])
        self._sources.setdefault(topic, []).append(node)
        return KStream(self, node)

    def table(
        self,
        topic: str,
        store_name: str,
        key_codec: Codec | None = None,
        value_codec: Codec | None = None,
    ) -> KTable:
        # A table over a topic keeps the latest value per key; None values delete the key.
        stream = self.stream(topic, key_codec, value_codec)
        self.add_store(store_name, windowed=False)

        def _materialize(record: Record, ctx: ExecutionContext) -> Iterable[Record]:
            if record.key is None:
                return []
            ctx.kv_store(store_name).set(record.key, record.value)
            return [record]

        node = stream._attach("KTABLE-SOURCE", _materialize, emits_store=store_name)
        return KTable(self, node, store_name)

    def add_store(self, name: str, *, windowed: bool) -> StoreSpec:
        if not name:
            raise TopologyError("Store name must be a non-empty string")
        if name in self._stores:
            raise TopologyError(f"Store '{name}' is already defined")
        spec = StoreSpec(name=name, windowed=windowed)
        self._stores[name] = spec
        return spec

    def build(self) -> Topology:
        # Validates the graph; a join against a store no node provides fails here.
        dag = build_dag(self._contracts)
        return Topology(
            sources=MappingProxyType({topic: tuple(nodes) for topic, nodes in self._sources.items()}),
            stores=MappingProxyType(dict(self._stores)),
            dag=dag,
        )

    def _new_node(
        self,
        kind: str,
        step: Step,
        *,
        consumes: list[str],
        emits: list[str] | None = None,
    ) -> ProcessorNode:
        name = f"{kind}-{self._counter:010d}"
        self._counter += 1
        self._contracts.append(NodeContract(name=name, consumes=consumes, emits=[f"node:{name}", *(emits or [])]))
        return ProcessorNode(name=name, step=step)

    def resolve_codecs(self, key_codec: Codec | None, value_codec: Codec | None) -> tuple[Codec, Codec]:
        key_codec = key_codec or self._default_key_codec
        value_codec = value_codec or self._default_value_codec
        if key_codec is None or value_codec is None:
            raise TopologyError("No codec given and no default codec configured")
        return key_codec, value_codec


class KStream:
    # Record stream DSL; every operator returns a new KStream rooted at a fresh node.
    def __init__(self, builder: TopologyBuilder, node: ProcessorNode) -> None:
        self._builder = builder
        self._node = node

    def map(self, fn: Callable[[object, object], tuple[object, object]]) -> KStream:
        def _map(record: Record, ctx: ExecutionContext) -> Record:
            key, value = fn(record.key, record.value)
            return record.with_key_value(key, value)

        return KStream(self._builder, self._attach("KSTREAM-MAP", Map(_map)))

    def map_values(self, fn: Callable[[object], object]) -> KStream:
        def _map_values(record: Record, ctx: ExecutionContext) -> Record:
            return record.with_key_value(record.key, fn(record.value))

        return KStream(self._builder, self._attach("KSTREAM-MAPVALUES", Map(_map_values)))

    def flat_map_values(self, fn: Callable[[object], Iterable[object]]) -> KStream:
        def _flat(record: Record, ctx: ExecutionContext) -> Iterable[Record]:
            return [record.with_key_value(record.key, value) for value in fn(record.value)]

        return KStream(self._builder, self._attach("KSTREAM-FLATMAPVALUES", FlatMap(_flat)))

    def filter(self, pred: Callable[[object, object], bool]) -> KStream:
        return KStream(
            self._builder,
            self._attach("KSTREAM-FILTER", Filter(lambda record, ctx: bool(pred(record.key, record.value)))),
        )

    def filter_not(self, pred: Callable[[object, object], bool]) -> KStream:
        return KStream(
            self._builder,
            self._attach("KSTREAM-FILTER", Filter(lambda record, ctx: not pred(record.key, record.value))),
        )

    def peek(self, fn: Callable[[object, object], None]) -> KStream:
        return KStream(
            self._builder,
            self._attach("KSTREAM-PEEK", Tap(lambda record, ctx: fn(record.key, record.value))),
        )

    def process(self, fn: Callable[[object, object, ExecutionContext], Iterable[tuple[object, object]]]) -> KStream:
        # Low-level operator: fn sees the run context (properties, stores, current timestamp)
        # and returns zero or more (key, value) pairs.
        def _process(record: Record, ctx: ExecutionContext) -> Iterable[Record]:
            return [record.with_key_value(key, value) for key, value in fn(record.key, record.value, ctx)]

        return KStream(self._builder, self._attach("KSTREAM-PROCESSOR", FlatMap(_process)))

    def to(self, topic: str, key_codec: Codec | None = None, value_codec: Codec | None = None) -> None:
        key_codec, value_codec = self._builder.resolve_codecs(key_codec, value_codec)

        def _sink(record: Record, ctx: ExecutionContext) -> Iterable[Record]:
            ctx.topic(topic).publish(
                Record(
                    key=key_codec.serialize(record.key),
                    value=value_codec.serialize(record.value),
                    timestamp=record.timestamp,
                )
            )
            return []

        self._attach("KSTREAM-SINK", _sink, emits_topic=topic)

    def group_by_key(self) -> KGroupedStream:
        return KGroupedStream(self._builder, self)

    def left_join(self, table: KTable, joiner: Callable[[object, object | None], object]) -> KStream:
        # Missing table values reach the joiner as None.
        return self._join(table, joiner, inner=False)

    def join(self, table: KTable, joiner: Callable[[object, object], object]) -> KStream:
        # Records without a table value are dropped.
        return self._join(table, joiner, inner=True)

    def _join(self, table: KTable, joiner: Callable[[object, object], object], *, inner: bool) -> KStream:
        store_name = table.store_name

        def _lookup(record: Record, ctx: ExecutionContext) -> Iterable[Record]:
            if record.key is None:
                return []
            other = ctx.kv_store(store_name).get(record.key)
            if other is None and inner:
                return []
            return [record.with_key_value(record.key, joiner(record.value, other))]

        kind = "KSTREAM-JOIN" if inner else "KSTREAM-LEFTJOIN"
        return KStream(self._builder, self._attach(kind, _lookup, consumes_store=store_name))

    def _attach(
        self,
        kind: str,
        step: Step,
        *,
        consumes_store: str | None = None,
        emits_store: str | None = None,
        emits_topic: str | None = None,
    ) -> ProcessorNode:
        consumes = [f"node:{self._node.name}"]
        if consumes_store is not None:
            consumes.append(f"store:{consumes_store}")
        emits: list[str] = []
        if emits_store is not None:
            emits.append(f"store:{emits_store}")
        if emits_topic is not None:
            emits.append(f"topic:{emits_topic}")
        node = self._builder._new_node(kind, step, consumes=consumes, emits=emits)
        self._node.children.append(node)
        return node


class KGroupedStream:
    # Records grouped by their current key; null keys are skipped by every aggregation.
    def __init__(self, builder: TopologyBuilder, stream: KStream) -> None:
        self._builder = builder
        self._stream = stream

    def aggregate(
        self,
        initializer: Callable[[], object],
        aggregator: Callable[[object, object, object], object],
        store_name: str,
    ) -> KTable:
        self._builder.add_store(store_name, windowed=False)

        def _aggregate(record: Record, ctx: ExecutionContext) -> Iterable[Record]:
            if record.key is None or record.value is None:
                return []
            store = ctx.kv_store(store_name)
            current = store.get(record.key)
            if current is None:
                current = initializer()
            updated = aggregator(record.key, record.value, current)
            store.set(record.key, updated)
            return [record.with_key_value(record.key, updated)]

        node = self._stream._attach("KSTREAM-AGGREGATE", _aggregate, emits_store=store_name)
        return KTable(self._builder, node, store_name)

    def reduce(self, reducer: Callable[[object, object], object], store_name: str) -> KTable:
        self._builder.add_store(store_name, windowed=False)

        def _reduce(record: Record, ctx: ExecutionContext) -> Iterable[Record]:
            if record.key is None or record.value is None:
                return []
            store = ctx.kv_store(store_name)
            current = store.get(record.key)
            updated = record.value if current is None else reducer(current, record.value)
            store.set(record.key, updated)
            return [record.with_key_value(record.key, updated)]

        node = self._stream._attach("KSTREAM-REDUCE", _reduce, emits_store=store_name)
        return KTable(self._builder, node, store_name)

    def count(self, store_name: str) -> KTable:
        return self.aggregate(lambda: 0, lambda key, value, total: total + 1, store_name)

    def windowed_by(self, windows: TimeWindows) -> TimeWindowedKStream:
        return TimeWindowedKStream(self._builder, self._stream, windows)


class TimeWindowedKStream:
    # Grouped stream bucketed by the windows containing each record's timestamp.
    def __init__(self, builder: TopologyBuilder, stream: KStream, windows: TimeWindows) -> None:
        self._builder = builder
        self._stream = stream
        self._windows = windows

    def aggregate(
        self,
        initializer: Callable[[], object],
        aggregator: Callable[[object, object, object], object],
        store_name: str,
    ) -> KTable:
        self._builder.add_store(store_name, windowed=True)
        windows = self._windows

        def _aggregate(record: Record, ctx: ExecutionContext) -> Iterable[Record]:
            if record.key is None or record.value is None or record.timestamp is None:
                return []
            store = ctx.window_store(store_name)
            out: list[Record] = []
            for start in windows.window_starts(record.timestamp):
                current = store.get(record.key, start)
                if current is None:
                    current = initializer()
                updated = aggregator(record.key, record.value, current)
                store.put(record.key, start, updated)
                out.append(record.with_key_value(WindowKey(window_start=start, key=record.key), updated))
            return out

        node = self._stream._attach("KSTREAM-WINDOWED-AGGREGATE", _aggregate, emits_store=store_name)
        return KTable(self._builder, node, store_name)

    def count(self, store_name: str) -> KTable:
        return self.aggregate(lambda: 0, lambda key, value, total: total + 1, store_name)


class KTable:
    # Changelog view of a store; to_stream() forwards every update.
    def __init__(self, builder: TopologyBuilder, node: ProcessorNode, store_name: str) -> None:
        self._builder = builder
        self._node = node
        self.store_name = store_name

    def to_stream(self) -> KStream:
        return KStream(self._builder, self._node)
