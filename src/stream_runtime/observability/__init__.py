from .adapters import JsonlLogSink, MemoryLogSink, StdoutLogSink, build_log_sink
from .domain import LogMessage, LogSink

__all__ = [
    "LogMessage",
    "LogSink",
    "JsonlLogSink",
    "MemoryLogSink",
    "StdoutLogSink",
    "build_log_sink",
]
