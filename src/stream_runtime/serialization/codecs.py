from __future__ import annotations

import json
import struct
from typing import Protocol, runtime_checkable


class CodecError(ValueError):
    # Raised when a payload cannot be encoded or decoded by the selected codec.
    pass


class UnknownCodecError(KeyError):
    pass


@runtime_checkable
class Codec(Protocol):
    # Codecs turn keys/values into channel bytes and back; None is a tombstone both ways.
    def serialize(self, obj: object) -> bytes | None:
        raise NotImplementedError("Codec is a port; use a concrete codec.")

    def deserialize(self, data: bytes | None) -> object:
        raise NotImplementedError("Codec is a port; use a concrete codec.")


class StringCodec:
    def __init__(self, encoding: str = "utf-8") -> None:
        self._encoding = encoding

    def serialize(self, obj: object) -> bytes | None:
        if obj is None:
            return None
        if not isinstance(obj, str):
            raise CodecError(f"StringCodec expects str, got {type(obj).__name__}")
        return obj.encode(self._encoding)

    def deserialize(self, data: bytes | None) -> object:
        if data is None:
            return None
        return data.decode(self._encoding)


class _StructCodec:
    # Fixed-width big-endian numeric codecs.
    _format = ""
    _kind: type = int

    def serialize(self, obj: object) -> bytes | None:
        if obj is None:
            return None
        if isinstance(obj, bool) or not isinstance(obj, self._kind):
            raise CodecError(f"{type(self).__name__} expects {self._kind.__name__}, got {type(obj).__name__}")
        try:
            return struct.pack(self._format, obj)
        except struct.error as exc:
            raise CodecError(f"{type(self).__name__} cannot encode {obj!r}: {exc}") from exc

    def deserialize(self, data: bytes | None) -> object:
        if data is None:
            return None
        expected = struct.calcsize(self._format)
        if len(data) != expected:
            raise CodecError(f"{type(self).__name__} expects {expected} bytes, got {len(data)}")
        return struct.unpack(self._format, data)[0]


class IntegerCodec(_StructCodec):
    _format = ">i"
    _kind = int


class LongCodec(_StructCodec):
    _format = ">q"
    _kind = int


class DoubleCodec(_StructCodec):
    _format = ">d"
    _kind = float

    def serialize(self, obj: object) -> bytes | None:
        # Integers are accepted and widened, matching float arithmetic in topologies.
        if isinstance(obj, int) and not isinstance(obj, bool):
            obj = float(obj)
        return super().serialize(obj)


class BytesCodec:
    def serialize(self, obj: object) -> bytes | None:
        if obj is None:
            return None
        if not isinstance(obj, (bytes, bytearray, memoryview)):
            raise CodecError(f"BytesCodec expects bytes, got {type(obj).__name__}")
        return bytes(obj)

    def deserialize(self, data: bytes | None) -> object:
        return data


class JsonCodec:
    # Compact, key-sorted JSON so equal objects always encode to equal bytes.
    def serialize(self, obj: object) -> bytes | None:
        if obj is None:
            return None
        try:
            return json.dumps(obj, separators=(",", ":"), sort_keys=True, ensure_ascii=False).encode("utf-8")
        except (TypeError, ValueError) as exc:
            raise CodecError(f"JsonCodec cannot encode {type(obj).__name__}: {exc}") from exc

    def deserialize(self, data: bytes | None) -> object:
        if data is None:
            return None
        try:
            return json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise CodecError(f"JsonCodec cannot decode payload: {exc}") from exc


_CODECS: dict[str, type] = {
    "string": StringCodec,
    "integer": IntegerCodec,
    "long": LongCodec,
    "double": DoubleCodec,
    "bytes": BytesCodec,
    "json": JsonCodec,
}


def codec_for(name: str) -> Codec:
    # Resolve a codec by its config name ("string", "integer", ...).
    try:
        factory = _CODECS[name]
    except KeyError:
        raise UnknownCodecError(f"Unknown codec '{name}', expected one of {sorted(_CODECS)}") from None
    return factory()


def codec_names() -> list[str]:
    return sorted(_CODECS)
