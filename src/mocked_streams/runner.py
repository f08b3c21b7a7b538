from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass, field

from mocked_streams.channels import ChannelRegistry
from stream_runtime.config import StreamsConfig
from stream_runtime.integration.kv_store import StoreSnapshot
from stream_runtime.kernel.runner import TopologyDefinition, TopologyDriver
from stream_runtime.observability.adapters.logging import build_log_sink
from stream_runtime.observability.domain.logging import LogMessage, LogSink
from stream_runtime.records import Record


@dataclass(frozen=True, slots=True)
class RunResult:
    # Everything a single run produced: emitted records per output channel and declared store contents.
    outputs: dict[str, list[Record]] = field(default_factory=dict)
    stores: dict[str, StoreSnapshot] = field(default_factory=dict)

    def output(self, channel: str) -> list[Record]:
        return self.outputs.get(channel, [])


def run(
    topology: TopologyDefinition,
    channels: ChannelRegistry,
    store_names: Iterable[str],
    config: StreamsConfig,
    *,
    log_sink: LogSink | None = None,
) -> RunResult:
    """Execute one fresh pass of the topology over every pending input record.

    Records are fed channel by channel in registration order. The driver is
    closed on every exit path; errors raised by the topology propagate as is.
    """
    store_names = list(store_names)
    owned_sink = None
    if log_sink is None:
        log_sink = owned_sink = build_log_sink(config.log_sink, {"path": config.log_path})
    _log(
        log_sink,
        "info",
        "run.started",
        channels=channels.names(),
        records=channels.total_records(),
        stores=store_names,
    )
    driver: TopologyDriver | None = None
    try:
        driver = TopologyDriver(topology, config, log_sink=log_sink)
        for channel, records in channels.items():
            driver.pipe_all(channel, records)
        result = RunResult(outputs=driver.drain_outputs(), stores=driver.snapshot(store_names))
        _log(
            log_sink,
            "info",
            "run.finished",
            outputs={name: len(records) for name, records in result.outputs.items()},
            stores=sorted(result.stores),
        )
    except Exception as exc:
        _log(log_sink, "error", "run.failed", error_type=type(exc).__name__, error=str(exc))
        raise
    finally:
        if driver is not None:
            driver.close()
        close = getattr(owned_sink, "close", None)
        if close is not None:
            close()
    return result


def _log(sink: LogSink | None, level: str, message: str, **fields: object) -> None:
    if sink is None:
        return
    sink.emit(LogMessage(level=level, message=message, fields=fields))
