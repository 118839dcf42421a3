"""Reading and writing the host's header maps and byte buffers."""

from __future__ import annotations

from collections.abc import Iterable, Sequence

from .abi import BufferType, MapType, NotFoundError
from .host import current_host
from .serde import decode_string, deserialize_map, serialize_map

MAX_INT32 = 2**31 - 1

Pair = tuple[str, str]


def _optional(data: bytes | bytearray | memoryview | None) -> bytes | None:
    return bytes(data) if data else None


def get_map(map_type: MapType) -> list[Pair]:
    """Return every (key, value) pair of a host map."""
    raw = current_host().get_header_map_pairs(map_type)
    if raw is None:
        raise NotFoundError()
    return deserialize_map(raw)


def set_map(map_type: MapType, pairs: Iterable[Sequence[str]]) -> None:
    """Replace a whole host map with pairs."""
    current_host().set_header_map_pairs(map_type, serialize_map(pairs))


def get_map_value(map_type: MapType, key: str) -> str:
    """Return the first value stored for key in a host map."""
    return decode_string(current_host().get_header_map_value(map_type, key))


def remove_map_value(map_type: MapType, key: str) -> None:
    """Remove every value for key from a host map."""
    current_host().remove_header_map_value(map_type, key)


def replace_map_value(map_type: MapType, key: str, value: str) -> None:
    """Replace the first value for key in a host map."""
    current_host().replace_header_map_value(map_type, key, value)


def add_map_value(map_type: MapType, key: str, value: str) -> None:
    """Add a value for key to a host map."""
    current_host().add_header_map_value(map_type, key, value)


def get_buffer(buffer_type: BufferType, start: int, max_size: int) -> bytes:
    """Return up to max_size bytes of a host buffer, beginning at start."""
    data = current_host().get_buffer_bytes(buffer_type, start, max_size)
    if data is None:
        raise NotFoundError()
    return bytes(data)


def append_to_buffer(buffer_type: BufferType, data: bytes) -> None:
    """Append data to the end of a host buffer."""
    current_host().set_buffer_bytes(buffer_type, MAX_INT32, 0, _optional(data))


def prepend_to_buffer(buffer_type: BufferType, data: bytes) -> None:
    """Insert data at the start of a host buffer."""
    current_host().set_buffer_bytes(buffer_type, 0, 0, _optional(data))


def replace_buffer(buffer_type: BufferType, data: bytes) -> None:
    """Replace the whole content of a host buffer with data."""
    current_host().set_buffer_bytes(buffer_type, 0, MAX_INT32, _optional(data))