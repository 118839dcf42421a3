"""Host calls for configuration, queues, TCP data, shared data, properties and logs."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any

from .abi import BufferType, LogLevel, StreamType
from .access import (
    MAX_INT32,
    append_to_buffer,
    get_buffer,
    prepend_to_buffer,
    replace_buffer,
)
from .host import current_host
from .serde import deserialize_map, serialize_property_path

Pair = tuple[str, str]


def _bytes_or_empty(data: bytes | bytearray | memoryview | None) -> bytes:
    return bytes(data) if data is not None else b""


def _optional(data: bytes | bytearray | memoryview | None) -> bytes | None:
    return bytes(data) if data else None


def get_vm_configuration() -> bytes:
    """Return the VM configuration; usable while the VM starts."""
    return get_buffer(BufferType.VM_CONFIGURATION, 0, MAX_INT32)


def get_plugin_configuration() -> bytes:
    """Return the plugin configuration; usable while the plugin starts."""
    return get_buffer(BufferType.PLUGIN_CONFIGURATION, 0, MAX_INT32)


def set_tick_period_milliseconds(millis: int) -> None:
    """Set the interval between ticks of the active plugin context."""
    current_host().set_tick_period_milliseconds(millis)


def set_effective_context(context_id: int) -> None:
    """Make context_id the context that later host calls act on."""
    current_host().set_effective_context(context_id)


def register_shared_queue(name: str) -> int:
    """Register a shared queue for the active plugin context and return its id."""
    return current_host().register_shared_queue(name)


def resolve_shared_queue(vm_id: str, queue_name: str) -> int:
    """Return the id of the queue named queue_name in VM vm_id."""
    return current_host().resolve_shared_queue(vm_id, queue_name)


def enqueue_shared_queue(queue_id: int, data: bytes) -> None:
    """Put data on a shared queue."""
    if not data:
        raise ValueError("data must not be empty")
    current_host().enqueue_shared_queue(queue_id, bytes(data))


def dequeue_shared_queue(queue_id: int) -> bytes:
    """Take the next item from a shared queue."""
    return _bytes_or_empty(current_host().dequeue_shared_queue(queue_id))


def plugin_done() -> None:
    """Signal that a plugin pending deletion has finished."""
    current_host().done()


def get_downstream_data(start: int, max_size: int) -> bytes:
    """Return up to max_size bytes of buffered downstream data from start."""
    return get_buffer(BufferType.DOWNSTREAM_DATA, start, max_size)


def append_downstream_data(data: bytes) -> None:
    """Append data to the buffered downstream data."""
    append_to_buffer(BufferType.DOWNSTREAM_DATA, data)


def prepend_downstream_data(data: bytes) -> None:
    """Prepend data to the buffered downstream data."""
    prepend_to_buffer(BufferType.DOWNSTREAM_DATA, data)


def replace_downstream_data(data: bytes) -> None:
    """Replace the buffered downstream data."""
    replace_buffer(BufferType.DOWNSTREAM_DATA, data)


def get_upstream_data(start: int, max_size: int) -> bytes:
    """Return up to max_size bytes of buffered upstream data from start."""
    return get_buffer(BufferType.UPSTREAM_DATA, start, max_size)


def append_upstream_data(data: bytes) -> None:
    """Append data to the buffered upstream data."""
    append_to_buffer(BufferType.UPSTREAM_DATA, data)


def prepend_upstream_data(data: bytes) -> None:
    """Prepend data to the buffered upstream data."""
    prepend_to_buffer(BufferType.UPSTREAM_DATA, data)


def replace_upstream_data(data: bytes) -> None:
    """Replace the buffered upstream data."""
    replace_buffer(BufferType.UPSTREAM_DATA, data)


def continue_tcp_stream() -> None:
    """Resume a paused TCP connection."""
    # Hosts only implement continuing through the downstream stream type.
    current_host().continue_stream(StreamType.DOWNSTREAM)


def close_downstream() -> None:
    """Close the downstream TCP connection."""
    current_host().close_stream(StreamType.DOWNSTREAM)


def close_upstream() -> None:
    """Close the upstream TCP connection."""
    current_host().close_stream(StreamType.UPSTREAM)


def get_shared_data(key: str) -> tuple[bytes, int]:
    """Return the value stored under key and its CAS for later updates."""
    value, cas = current_host().get_shared_data(key)
    return _bytes_or_empty(value), cas


def set_shared_data(key: str, data: bytes, cas: int) -> None:
    """Store data under key; a non-zero cas must match the current one."""
    current_host().set_shared_data(key, _optional(data), cas)


def get_property(path: Sequence[str]) -> bytes:
    """Return the raw value of the host property at path."""
    if not path:
        raise ValueError("path must not be empty")
    raw = current_host().get_property(serialize_property_path(path))
    return _bytes_or_empty(raw)


def get_property_map(path: Sequence[str]) -> list[Pair]:
    """Return a map-typed host property as (key, value) pairs."""
    return deserialize_map(get_property(path))


def set_property(path: Sequence[str], data: bytes) -> None:
    """Set the host property at path."""
    if not path:
        raise ValueError("path must not be empty")
    if not data:
        raise ValueError("data must not be empty")
    current_host().set_property(serialize_property_path(path), bytes(data))


def call_foreign_function(func_name: str, param: bytes) -> bytes:
    """Call a host-specific function by name."""
    return _bytes_or_empty(current_host().call_foreign_function(func_name, _optional(param)))


def _log(level: LogLevel, message: str) -> None:
    current_host().log(level, message)


def log_trace(msg: str) -> None:
    """Log msg at trace level."""
    _log(LogLevel.TRACE, msg)


def log_tracef(fmt: str, *args: Any) -> None:
    """Format with %-style arguments and log at trace level."""
    _log(LogLevel.TRACE, fmt % args)


def log_debug(msg: str) -> None:
    """Log msg at debug level."""
    _log(LogLevel.DEBUG, msg)


def log_debugf(fmt: str, *args: Any) -> None:
    """Format with %-style arguments and log at debug level."""
    _log(LogLevel.DEBUG, fmt % args)


def log_info(msg: str) -> None:
    """Log msg at info level."""
    _log(LogLevel.INFO, msg)


def log_infof(fmt: str, *args: Any) -> None:
    """Format with %-style arguments and log at info level."""
    _log(LogLevel.INFO, fmt % args)


def log_warn(msg: str) -> None:
    """Log msg at warn level."""
    _log(LogLevel.WARN, msg)


def log_warnf(fmt: str, *args: Any) -> None:
    """Format with %-style arguments and log at warn level."""
    _log(LogLevel.WARN, fmt % args)


def log_error(msg: str) -> None:
    """Log msg at error level."""
    _log(LogLevel.ERROR, msg)


def log_errorf(fmt: str, *args: Any) -> None:
    """Format with %-style arguments and log at error level."""
    _log(LogLevel.ERROR, fmt % args)


def log_critical(msg: str) -> None:
    """Log msg at critical level."""
    _log(LogLevel.CRITICAL, msg)


def log_criticalf(fmt: str, *args: Any) -> None:
    """Format with %-style arguments and log at critical level."""
    _log(LogLevel.CRITICAL, fmt % args)