"""The host interface that plugin code calls into, and its registration."""

from __future__ import annotations

import threading
from types import TracebackType
from typing import Any

from .abi import BufferType, LogLevel, MapType, MetricType, StreamType


class Host:
    """Host calls available to a plugin.

    This base host accepts every call, records it in ``calls`` as a
    ``(method name, arguments)`` pair and returns empty results. Subclass it
    to emulate a real proxy. Errors are reported by raising the exceptions
    from :mod:`proxywasm.abi`. Header maps and property paths travel in their
    serialized byte form.
    """

    @property
    def calls(self) -> list[tuple[str, tuple[Any, ...]]]:
        """Every call made on this host so far, oldest first."""
        return vars(self).setdefault("_calls", [])

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))

    def log(self, level: LogLevel, message: str) -> None:
        """Emit a log message."""
        self._record("log", level, message)

    def send_local_response(
        self,
        status_code: int,
        status_detail: bytes | None,
        body: bytes | None,
        headers: bytes,
        grpc_status: int,
    ) -> None:
        """Reply to the downstream directly."""
        self._record(
            "send_local_response", status_code, status_detail, body, headers, grpc_status
        )

    def get_shared_data(self, key: str) -> tuple[bytes | None, int]:
        """Return the value stored under key and its CAS."""
        self._record("get_shared_data", key)
        return None, 0

    def set_shared_data(self, key: str, value: bytes | None, cas: int) -> None:
        """Store value under key, checking cas unless it is zero."""
        self._record("set_shared_data", key, value, cas)

    def register_shared_queue(self, name: str) -> int:
        """Register a shared queue and return its id."""
        self._record("register_shared_queue", name)
        return 0

    def resolve_shared_queue(self, vm_id: str, name: str) -> int:
        """Return the id of a queue registered by another VM."""
        self._record("resolve_shared_queue", vm_id, name)
        return 0

    def dequeue_shared_queue(self, queue_id: int) -> bytes | None:
        """Take the next item from a queue."""
        self._record("dequeue_shared_queue", queue_id)
        return None

    def enqueue_shared_queue(self, queue_id: int, value: bytes) -> None:
        """Put an item on a queue."""
        self._record("enqueue_shared_queue", queue_id, value)

    def get_header_map_value(self, map_type: MapType, key: str) -> bytes:
        """Return the first value for key in a map."""
        self._record("get_header_map_value", map_type, key)
        return b""

    def add_header_map_value(self, map_type: MapType, key: str, value: str) -> None:
        """Add a value for key to a map."""
        self._record("add_header_map_value", map_type, key, value)

    def replace_header_map_value(
        self, map_type: MapType, key: str, value: str
    ) -> None:
        """Replace the first value for key in a map."""
        self._record("replace_header_map_value", map_type, key, value)

    def remove_header_map_value(self, map_type: MapType, key: str) -> None:
        """Remove every value for key from a map."""
        self._record("remove_header_map_value", map_type, key)

    def get_header_map_pairs(self, map_type: MapType) -> bytes | None:
        """Return a whole map, serialized."""
        self._record("get_header_map_pairs", map_type)
        return None

    def set_header_map_pairs(self, map_type: MapType, data: bytes) -> None:
        """Replace a whole map with serialized pairs."""
        self._record("set_header_map_pairs", map_type, data)

    def get_buffer_bytes(
        self, buffer_type: BufferType, start: int, max_size: int
    ) -> bytes | None:
        """Return up to max_size bytes of a buffer from start."""
        self._record("get_buffer_bytes", buffer_type, start, max_size)
        return None

    def set_buffer_bytes(
        self,
        buffer_type: BufferType,
        start: int,
        max_size: int,
        data: bytes | None,
    ) -> None:
        """Replace max_size bytes of a buffer at start with data."""
        self._record("set_buffer_bytes", buffer_type, start, max_size, data)

    def continue_stream(self, stream_type: StreamType) -> None:
        """Resume a paused stream."""
        self._record("continue_stream", stream_type)

    def close_stream(self, stream_type: StreamType) -> None:
        """Close a stream."""
        self._record("close_stream", stream_type)

    def http_call(
        self,
        upstream: str,
        headers: bytes,
        body: bytes | None,
        trailers: bytes,
        timeout: int,
    ) -> int:
        """Dispatch an HTTP call and return its callout id."""
        self._record("http_call", upstream, headers, body, trailers, timeout)
        return 0

    def call_foreign_function(self, name: str, param: bytes | None) -> bytes | None:
        """Call a host-specific function."""
        self._record("call_foreign_function", name, param)
        return None

    def set_tick_period_milliseconds(self, period: int) -> None:
        """Set the tick interval for the active plugin context."""
        self._record("set_tick_period_milliseconds", period)

    def set_effective_context(self, context_id: int) -> None:
        """Make context_id the context subsequent calls act on."""
        self._record("set_effective_context", context_id)

    def done(self) -> None:
        """Signal that a pending plugin has finished."""
        self._record("done")

    def define_metric(self, metric_type: MetricType, name: str) -> int:
        """Define a metric and return its id."""
        self._record("define_metric", metric_type, name)
        return 0

    def increment_metric(self, metric_id: int, offset: int) -> None:
        """Add offset to a metric."""
        self._record("increment_metric", metric_id, offset)

    def record_metric(self, metric_id: int, value: int) -> None:
        """Record a value for a metric."""
        self._record("record_metric", metric_id, value)

    def get_metric(self, metric_id: int) -> int:
        """Return the current value of a metric."""
        self._record("get_metric", metric_id)
        return 0

    def get_property(self, path: bytes) -> bytes | None:
        """Return the property at a serialized path."""
        self._record("get_property", path)
        return None

    def set_property(self, path: bytes, value: bytes) -> None:
        """Set the property at a serialized path."""
        self._record("set_property", path, value)


_lock = threading.Lock()
_current: Host = Host()


class HostRegistration:
    """Handle for an installed host; restores the previous one on release."""

    def __init__(self, previous: Host) -> None:
        self._previous = previous
        self._released = False

    def release(self) -> None:
        """Reinstate the host that was active before registration."""
        global _current
        with _lock:
            if not self._released:
                _current = self._previous
                self._released = True

    def __enter__(self) -> HostRegistration:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()


def register_host(host: Host) -> HostRegistration:
    """Install host as the active host until the registration is released."""
    global _current
    with _lock:
        previous = _current
        _current = host
    return HostRegistration(previous)


def current_host() -> Host:
    """Return the active host."""
    return _current