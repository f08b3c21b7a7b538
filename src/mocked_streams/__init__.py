from mocked_streams.builder import MockedStreams
from mocked_streams.channels import ChannelRegistry
from mocked_streams.config import DEFAULT_CONFIG, config_from_yaml, merge_config
from mocked_streams.errors import (
    ExpectedOutputIsEmpty,
    MockedStreamsError,
    NoInputSpecified,
    TopologyNotSpecified,
)
from mocked_streams.runner import RunResult, run

__all__ = [
    "MockedStreams",
    "ChannelRegistry",
    "DEFAULT_CONFIG",
    "config_from_yaml",
    "merge_config",
    "ExpectedOutputIsEmpty",
    "MockedStreamsError",
    "NoInputSpecified",
    "TopologyNotSpecified",
    "RunResult",
    "run",
]
