"""Encoding of header maps, property paths and raw strings."""

from __future__ import annotations

import struct
from collections.abc import Iterable, Sequence
from itertools import chain

_U32 = struct.Struct("<I")

Pair = tuple[str, str]


def _encode(text: str | bytes) -> bytes:
    if isinstance(text, (bytes, bytearray, memoryview)):
        return bytes(text)
    return text.encode("utf-8", "surrogateescape")


def decode_string(data: bytes | bytearray | memoryview | None) -> str:
    """Decode raw bytes handed over by the host into a string."""
    if data is None:
        return ""
    return bytes(data).decode("utf-8", "surrogateescape")


def deserialize_map(data: bytes | bytearray | memoryview) -> list[Pair]:
    """Decode a serialized header map into a list of (key, value) pairs."""
    raw = bytes(data)
    try:
        (count,) = _U32.unpack_from(raw, 0)
        sizes = struct.unpack_from(f"<{2 * count}I", raw, _U32.size)
    except struct.error as exc:
        raise ValueError("malformed map: truncated size table") from exc

    offset = _U32.size * (1 + 2 * count)
    fields = []
    for size in sizes:
        end = offset + size
        if end > len(raw):
            raise ValueError("malformed map: truncated data")
        fields.append(decode_string(raw[offset:end]))
        offset = end + 1
    it = iter(fields)
    return list(zip(it, it))


def serialize_map(pairs: Iterable[Sequence[str | bytes]]) -> bytes:
    """Encode (key, value) pairs into the host's header map layout."""
    encoded = [(_encode(key), _encode(value)) for key, value in pairs]
    header = struct.pack(
        f"<I{2 * len(encoded)}I",
        len(encoded),
        *chain.from_iterable((len(key), len(value)) for key, value in encoded),
    )
    body = b"".join(key + b"\0" + value + b"\0" for key, value in encoded)
    return header + body


def serialize_property_path(path: Iterable[str | bytes]) -> bytes:
    """Join property path segments with NUL separators."""
    return b"\0".join(_encode(segment) for segment in path)