from __future__ import annotations

import json
from pathlib import Path

from stream_runtime.observability.domain.logging import LogMessage, LogSink


class StdoutLogSink:
    # Minimal structured log sink printing one compact JSON object per line.
    def emit(self, message: LogMessage) -> None:
        print(json.dumps(_log_to_dict(message), separators=(",", ":"), ensure_ascii=False, default=str))


class JsonlLogSink:
    # File-backed structured log sink.
    def __init__(self, path: Path) -> None:
        self._path = path
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._file = self._path.open("a", encoding="utf-8")

    @property
    def closed(self) -> bool:
        return self._file.closed

    def emit(self, message: LogMessage) -> None:
        payload = json.dumps(_log_to_dict(message), separators=(",", ":"), ensure_ascii=False, default=str)
        self._file.write(payload + "\n")
        self._file.flush()

    def close(self) -> None:
        self._file.close()


class MemoryLogSink:
    # Collects messages in memory so tests can assert on them.
    def __init__(self) -> None:
        self.messages: list[LogMessage] = []

    def emit(self, message: LogMessage) -> None:
        self.messages.append(message)

    def by_message(self, text: str) -> list[LogMessage]:
        return [item for item in self.messages if item.message == text]


def log_stdout(settings: dict[str, object]) -> StdoutLogSink:
    _ = settings
    return StdoutLogSink()


def log_jsonl(settings: dict[str, object]) -> JsonlLogSink:
    path = settings.get("path")
    if not isinstance(path, str) or not path:
        raise ValueError("log.path must be a non-empty string for the jsonl sink")
    return JsonlLogSink(Path(path))


def build_log_sink(kind: str, settings: dict[str, object]) -> LogSink | None:
    # "none" disables logging; the other kinds map to the sinks above.
    if kind == "none":
        return None
    if kind == "stdout":
        return log_stdout(settings)
    if kind == "jsonl":
        return log_jsonl(settings)
    raise ValueError(f"Unknown log sink kind '{kind}'")


def _log_to_dict(message: LogMessage) -> dict[str, object]:
    return {
        "level": message.level,
        "message": message.message,
        "timestamp": message.timestamp.isoformat().replace("+00:00", "Z"),
        "fields": message.fields,
    }
