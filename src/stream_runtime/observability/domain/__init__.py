from .logging import LogMessage, LogSink

__all__ = ["LogMessage", "LogSink"]
