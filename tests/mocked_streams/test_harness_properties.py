from __future__ import annotations

from mocked_streams import MockedStreams
from stream_runtime.kernel.topology import TimeWindows, TopologyBuilder
from stream_runtime.serialization.codecs import IntegerCodec, StringCodec

strings = StringCodec()
ints = IntegerCodec()


def uppercase(builder: TopologyBuilder) -> None:
    builder.stream("in", strings, strings).map_values(str.upper).to("out", strings, strings)


def lowercase(builder: TopologyBuilder) -> None:
    builder.stream("in", strings, strings).map_values(str.lower).to("out", strings, strings)


def counting(builder: TopologyBuilder) -> None:
    builder.stream("in", strings, strings).group_by_key().count("counts")


def sequence_windows(builder: TopologyBuilder) -> None:
    builder.stream("in", strings, strings).group_by_key().windowed_by(TimeWindows.of(2)).count("windows")


def test_chained_calls_leave_the_original_untouched() -> None:
    base = MockedStreams().topology(uppercase)
    with_input = base.input("in", strings, strings, [("k", "Va")])
    with_store = with_input.stores(["counts"])

    assert base.channels.total_records() == 0
    assert with_input.store_names == ()
    assert with_store.store_names == ("counts",)
    assert with_input.output("out", strings, strings, 1) == [("k", "VA")]


def test_last_topology_wins() -> None:
    output = (
        MockedStreams()
        .topology(uppercase)
        .topology(lowercase)
        .input("in", strings, strings, [("k", "Va")])
        .output("out", strings, strings, 1)
    )
    assert output == [("k", "va")]


def test_every_read_starts_from_fresh_state() -> None:
    # A second read replays input into new stores instead of reusing the old ones.
    harness = (
        MockedStreams().topology(counting).input("in", strings, strings, [("a", "1"), ("a", "2")]).stores("counts")
    )

    first = harness.state_table("counts")
    second = harness.state_table("counts")
    assert first == second == {"a": 2}


def test_repeated_reads_are_identical() -> None:
    harness = MockedStreams().topology(uppercase).input("in", strings, strings, [("x", "a"), ("y", "b")])
    assert harness.output("out", strings, strings, 2) == harness.output("out", strings, strings, 2)


def test_records_without_time_get_sequential_timestamps() -> None:
    # Timestamps 0, 1, 2 span the tumbling windows starting at 0 and 2.
    harness = (
        MockedStreams()
        .topology(sequence_windows)
        .input("in", strings, strings, [("k", "a"), ("k", "b"), ("k", "c")])
        .stores(["windows"])
    )
    assert harness.window_state_table("windows", "k") == {0: 2, 2: 1}


def test_stores_are_deduplicated_and_accept_a_single_name() -> None:
    harness = MockedStreams().topology(counting).stores("counts").stores(["counts", "other"])
    assert harness.store_names == ("counts", "other")


def test_effective_config_merges_overrides_in_order() -> None:
    harness = (
        MockedStreams()
        .topology(counting)
        .config({"application.id": "first", "custom.key": 1})
        .config({"application.id": "second"})
    )
    config = harness.effective_config()
    assert config.application_id == "second"
    assert config.extra_properties() == {"custom.key": 1}


class _ValueAsTime:
    def extract(self, record, previous: int) -> int:
        return int(record.value)


def test_field_name_config_overrides_reach_the_run() -> None:
    # A custom extractor passed by field name replaces the default one.
    harness = (
        MockedStreams()
        .topology(sequence_windows)
        .input("in", strings, strings, [("k", "10"), ("k", "11"), ("k", "20")])
        .stores(["windows"])
        .config({"application_id": "mine", "timestamp_extractor": _ValueAsTime})
    )
    assert harness.effective_config().application_id == "mine"
    assert harness.window_state_table("windows", "k") == {10: 2, 20: 1}


def test_config_properties_reach_process_operators() -> None:
    # Extra config keys are visible to context-aware operators.
    def tagging(builder: TopologyBuilder) -> None:
        (
            builder.stream("in", strings, strings)
            .process(lambda key, value, ctx: [(key, f"{ctx.properties['tag']}:{value}")])
            .to("out", strings, strings)
        )

    output = (
        MockedStreams()
        .topology(tagging)
        .config({"tag": "t1"})
        .input("in", strings, strings, [("k", "v")])
        .output("out", strings, strings, 1)
    )
    assert output == [("k", "t1:v")]
