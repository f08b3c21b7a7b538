from .logging import JsonlLogSink, MemoryLogSink, StdoutLogSink, build_log_sink, log_jsonl, log_stdout

__all__ = [
    "JsonlLogSink",
    "MemoryLogSink",
    "StdoutLogSink",
    "build_log_sink",
    "log_jsonl",
    "log_stdout",
]
