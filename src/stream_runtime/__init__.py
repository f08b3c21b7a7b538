from stream_runtime.config import ConfigError, StreamsConfig, load_streams_config
from stream_runtime.kernel import KStream, KTable, TimeWindows, TopologyBuilder, TopologyDriver
from stream_runtime.records import Record, WindowKey

__all__ = [
    "ConfigError",
    "StreamsConfig",
    "load_streams_config",
    "KStream",
    "KTable",
    "TimeWindows",
    "TopologyBuilder",
    "TopologyDriver",
    "Record",
    "WindowKey",
]
