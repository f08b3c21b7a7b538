from .codecs import (
    BytesCodec,
    Codec,
    CodecError,
    DoubleCodec,
    IntegerCodec,
    JsonCodec,
    LongCodec,
    StringCodec,
    UnknownCodecError,
    codec_for,
    codec_names,
)

__all__ = [
    "BytesCodec",
    "Codec",
    "CodecError",
    "DoubleCodec",
    "IntegerCodec",
    "JsonCodec",
    "LongCodec",
    "StringCodec",
    "UnknownCodecError",
    "codec_for",
    "codec_names",
]
