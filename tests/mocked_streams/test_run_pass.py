from __future__ import annotations

import json
from pathlib import Path

import pytest

import mocked_streams.runner as runner_module
from mocked_streams import MockedStreams, RunResult, run
from mocked_streams.channels import ChannelRegistry
from mocked_streams.config import effective_config
from stream_runtime.kernel.runner import TopologyDriver
from stream_runtime.kernel.topology import TopologyBuilder
from stream_runtime.observability.adapters.logging import MemoryLogSink, build_log_sink
from stream_runtime.records import Record
from stream_runtime.serialization.codecs import StringCodec

strings = StringCodec()


def merge_two_channels(builder: TopologyBuilder) -> None:
    builder.stream("a", strings, strings).to("out", strings, strings)
    builder.stream("b", strings, strings).to("out", strings, strings)


def exploding(builder: TopologyBuilder) -> None:
    def _fail(key: object, value: object) -> tuple[object, object]:
        raise RuntimeError(f"cannot map {value}")

    builder.stream("in", strings, strings).map(_fail).to("out", strings, strings)


def test_channels_are_fed_one_after_another_in_registration_order() -> None:
    # "b" is registered first, so all of its records precede those of "a".
    output = (
        MockedStreams()
        .topology(merge_two_channels)
        .input("b", strings, strings, [("b1", "1")])
        .input("a", strings, strings, [("a1", "1")])
        .input("b", strings, strings, [("b2", "2")])
        .output("out", strings, strings, 3)
    )
    assert output == [("b1", "1"), ("b2", "2"), ("a1", "1")]


def test_run_returns_outputs_and_requested_stores() -> None:
    # Runner output stays encoded; decoding belongs to the readers.
    channels = ChannelRegistry().with_records("a", [Record(key=b"k", value=b"v")])
    result = run(merge_two_channels, channels, [], effective_config())

    assert isinstance(result, RunResult)
    assert [(r.key, r.value) for r in result.output("out")] == [(b"k", b"v")]
    assert result.output("nothing-here") == []
    assert result.stores == {}


def test_run_logs_start_and_finish() -> None:
    sink = MemoryLogSink()
    (
        MockedStreams()
        .topology(merge_two_channels)
        .log_sink(sink)
        .input("a", strings, strings, [("k", "v")])
        .output("out", strings, strings, 1)
    )

    started = sink.by_message("run.started")
    finished = sink.by_message("run.finished")
    assert len(started) == 1
    assert started[0].fields["channels"] == ["a"]
    assert started[0].fields["records"] == 1
    assert len(finished) == 1
    assert finished[0].fields["outputs"] == {"out": 1}
    assert sink.by_message("run.failed") == []


def test_topology_errors_propagate_unchanged_and_are_logged() -> None:
    # User callback errors surface as raised, after run.failed is emitted.
    sink = MemoryLogSink()
    harness = MockedStreams().topology(exploding).log_sink(sink).input("in", strings, strings, [("k", "v")])

    with pytest.raises(RuntimeError, match="cannot map v"):
        harness.output("out", strings, strings, 1)

    failed = sink.by_message("run.failed")
    assert len(failed) == 1
    assert failed[0].level == "error"
    assert failed[0].fields["error_type"] == "RuntimeError"
    assert sink.by_message("run.finished") == []


def test_unconsumed_channel_is_logged_not_rejected() -> None:
    sink = MemoryLogSink()
    output = (
        MockedStreams()
        .topology(merge_two_channels)
        .log_sink(sink)
        .input("a", strings, strings, [("k", "v")])
        .input("unknown", strings, strings, [("k", "v")])
        .output("out", strings, strings, 5)
    )
    assert output == [("k", "v")]
    assert [m.fields["topic"] for m in sink.by_message("record.unconsumed")] == ["unknown"]


def test_jsonl_sink_from_config(tmp_path: Path) -> None:
    log_path = tmp_path / "logs" / "run.jsonl"
    (
        MockedStreams()
        .topology(merge_two_channels)
        .config({"log.sink": "jsonl", "log.path": str(log_path)})
        .input("a", strings, strings, [("k", "v")])
        .output("out", strings, strings, 1)
    )

    lines = [json.loads(line) for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert [line["message"] for line in lines] == ["run.started", "run.finished"]


def test_failed_run_releases_driver_and_owned_sink(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    # The driver and the jsonl sink built from config are closed on the error path too.
    sinks: list[object] = []
    drivers: list[TopologyDriver] = []

    def _recording_sink(kind: str, settings: dict[str, object]):
        sink = build_log_sink(kind, settings)
        sinks.append(sink)
        return sink

    class _RecordingDriver(TopologyDriver):
        def __init__(self, *args: object, **kwargs: object) -> None:
            super().__init__(*args, **kwargs)
            drivers.append(self)

    monkeypatch.setattr(runner_module, "build_log_sink", _recording_sink)
    monkeypatch.setattr(runner_module, "TopologyDriver", _RecordingDriver)
    log_path = tmp_path / "failed.jsonl"
    harness = (
        MockedStreams()
        .topology(exploding)
        .config({"log.sink": "jsonl", "log.path": str(log_path)})
        .input("in", strings, strings, [("k", "v")])
    )

    with pytest.raises(RuntimeError, match="cannot map v"):
        harness.output("out", strings, strings, 1)

    assert len(sinks) == 1 and sinks[0].closed
    assert len(drivers) == 1 and drivers[0].closed
    messages = [json.loads(line)["message"] for line in log_path.read_text(encoding="utf-8").splitlines()]
    assert messages == ["run.started", "run.failed"]
