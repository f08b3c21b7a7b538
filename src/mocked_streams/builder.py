from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace

from mocked_streams.channels import ChannelRegistry
from mocked_streams.config import effective_config as build_effective_config
from mocked_streams.extractors import read_output, read_output_table, read_state_table, read_window_state_table
from mocked_streams.guards import require_input_present, require_positive_size, require_topology
from mocked_streams.runner import RunResult, run
from stream_runtime.config import StreamsConfig
from stream_runtime.kernel.runner import TopologyDefinition
from stream_runtime.observability.domain.logging import LogSink
from stream_runtime.records import Record
from stream_runtime.serialization.codecs import Codec


@dataclass(frozen=True, slots=True)
class MockedStreams:
    """Chainable, immutable test harness for a stream topology.

    Every configuration call returns a new instance with the added state, so a
    partially configured harness can be shared between assertions. State only
    accumulates: inputs are appended, store names and config overrides are
    merged. Until ``topology(...)`` is called only ``topology(...)`` is legal.

    Each read (``output``, ``output_table``, ``state_table``,
    ``window_state_table``) builds a fresh topology instance, replays all
    accumulated input and discards the instance again; nothing is cached
    between reads.

    Example::

        result = (
            MockedStreams.create()
            .topology(uppercase)
            .input("input", strings, strings, [("x", "v1"), ("y", "v2")])
            .output("output", strings, strings, 2)
        )
    """

    definition: TopologyDefinition | None = None
    channels: ChannelRegistry = field(default_factory=ChannelRegistry)
    store_names: tuple[str, ...] = ()
    overrides: tuple[Mapping[str, object], ...] = ()
    sink: LogSink | None = None

    @classmethod
    def create(cls) -> MockedStreams:
        return cls()

    def topology(self, definition: TopologyDefinition) -> MockedStreams:
        # Calling topology(...) again replaces the previous definition.
        if not callable(definition):
            raise TypeError(f"Topology definition must be callable, got {type(definition).__name__}")
        return replace(self, definition=definition)

    def input(
        self,
        channel: str,
        key_codec: Codec,
        value_codec: Codec,
        records: Iterable[tuple[object, object]],
    ) -> MockedStreams:
        require_topology(self.definition, "input")
        encoded: list[Record] = []
        for index, item in enumerate(records):
            if len(item) != 2:
                raise ValueError(f"input record #{index} must be a (key, value) pair, got {item!r}")
            key, value = item
            encoded.append(Record(key=key_codec.serialize(key), value=value_codec.serialize(value)))
        return replace(self, channels=self.channels.with_records(channel, encoded))

    def input_with_time(
        self,
        channel: str,
        key_codec: Codec,
        value_codec: Codec,
        records: Iterable[tuple[object, object, int]],
    ) -> MockedStreams:
        # Explicit timestamps take precedence over the run's sequence counter.
        require_topology(self.definition, "input_with_time")
        encoded: list[Record] = []
        for index, item in enumerate(records):
            if len(item) != 3:
                raise ValueError(f"input record #{index} must be a (key, value, timestamp) triple, got {item!r}")
            key, value, timestamp = item
            if isinstance(timestamp, bool) or not isinstance(timestamp, int) or timestamp < 0:
                raise ValueError(f"input record #{index} timestamp must be a non-negative int, got {timestamp!r}")
            encoded.append(
                Record(key=key_codec.serialize(key), value=value_codec.serialize(value), timestamp=timestamp)
            )
        return replace(self, channels=self.channels.with_records(channel, encoded))

    def stores(self, names: Iterable[str]) -> MockedStreams:
        require_topology(self.definition, "stores")
        if isinstance(names, str):
            names = [names]
        merged = list(self.store_names)
        for name in names:
            if not isinstance(name, str) or not name:
                raise ValueError(f"Store names must be non-empty strings, got {name!r}")
            if name not in merged:
                merged.append(name)
        return replace(self, store_names=tuple(merged))

    def config(self, overrides: Mapping[str, object]) -> MockedStreams:
        require_topology(self.definition, "config")
        return replace(self, overrides=(*self.overrides, dict(overrides)))

    def log_sink(self, sink: LogSink | None) -> MockedStreams:
        return replace(self, sink=sink)

    def effective_config(self) -> StreamsConfig:
        return build_effective_config(*self.overrides)

    def output(self, channel: str, key_codec: Codec, value_codec: Codec, size: int) -> list[tuple[object, object]]:
        result = self._run("output", size=size)
        return read_output(result, channel, key_codec, value_codec, size)

    def output_table(self, channel: str, key_codec: Codec, value_codec: Codec, size: int) -> dict[object, object]:
        result = self._run("output_table", size=size)
        return read_output_table(result, channel, key_codec, value_codec, size)

    def state_table(self, store_name: str) -> dict[object, object]:
        result = self._run("state_table")
        return read_state_table(result, store_name)

    def window_state_table(
        self,
        store_name: str,
        key: object,
        time_from: int = 0,
        time_to: int | None = None,
    ) -> dict[int, object]:
        result = self._run("window_state_table")
        return read_window_state_table(result, store_name, key, time_from, time_to)

    def _run(self, operation: str, *, size: int | None = None) -> RunResult:
        # All guards run before the topology is instantiated.
        definition = require_topology(self.definition, operation)
        if size is not None:
            require_positive_size(size)
        require_input_present(self.channels)
        return run(definition, self.channels, self.store_names, self.effective_config(), log_sink=self.sink)
