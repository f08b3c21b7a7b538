from __future__ import annotations

from mocked_streams.channels import ChannelRegistry
from mocked_streams.errors import ExpectedOutputIsEmpty, NoInputSpecified, TopologyNotSpecified
from stream_runtime.kernel.runner import TopologyDefinition


def require_topology(topology: TopologyDefinition | None, operation: str) -> TopologyDefinition:
    if topology is None:
        raise TopologyNotSpecified(operation)
    return topology


def require_input_present(channels: ChannelRegistry) -> None:
    # Channels registered with an empty record list do not count as input.
    if channels.total_records() == 0:
        raise NoInputSpecified()


def require_positive_size(size: int) -> None:
    if size <= 0:
        raise ExpectedOutputIsEmpty(size)
