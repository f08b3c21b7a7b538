from .loader import flatten_properties, load_yaml_config
from .models import ConfigError, StreamsConfig, load_streams_config

__all__ = ["ConfigError", "StreamsConfig", "flatten_properties", "load_streams_config", "load_yaml_config"]
