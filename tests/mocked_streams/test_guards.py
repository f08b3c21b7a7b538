from __future__ import annotations

import pytest

from mocked_streams.channels import ChannelRegistry
from mocked_streams.errors import ExpectedOutputIsEmpty, MockedStreamsError, NoInputSpecified, TopologyNotSpecified
from mocked_streams.guards import require_input_present, require_positive_size, require_topology
from stream_runtime.records import Record


def test_require_input_present_counts_records_not_channels() -> None:
    # A registered channel without records is not input.
    with pytest.raises(NoInputSpecified):
        require_input_present(ChannelRegistry())
    with pytest.raises(NoInputSpecified):
        require_input_present(ChannelRegistry().with_records("in", []))
    require_input_present(ChannelRegistry().with_records("in", [Record(b"k", b"v")]))


@pytest.mark.parametrize("size", [-5, -1, 0])
def test_require_positive_size_rejects_non_positive(size: int) -> None:
    with pytest.raises(ExpectedOutputIsEmpty) as excinfo:
        require_positive_size(size)
    assert excinfo.value.size == size


def test_require_positive_size_accepts_one() -> None:
    require_positive_size(1)


def test_require_topology_names_the_operation() -> None:
    with pytest.raises(TopologyNotSpecified, match="output"):
        require_topology(None, "output")

    def definition(builder: object) -> None:
        return None

    assert require_topology(definition, "output") is definition


def test_harness_errors_share_a_base_class() -> None:
    assert issubclass(NoInputSpecified, MockedStreamsError)
    assert issubclass(ExpectedOutputIsEmpty, MockedStreamsError)
    assert issubclass(TopologyNotSpecified, MockedStreamsError)
