"""Enumerations and error types shared by the host interface."""

from __future__ import annotations

from enum import IntEnum


class BufferType(IntEnum):
    """Buffers the host exposes to the plugin."""

    HTTP_REQUEST_BODY = 0
    HTTP_RESPONSE_BODY = 1
    DOWNSTREAM_DATA = 2
    UPSTREAM_DATA = 3
    HTTP_CALL_RESPONSE_BODY = 4
    GRPC_RECEIVE_BUFFER = 5
    VM_CONFIGURATION = 6
    PLUGIN_CONFIGURATION = 7
    CALL_DATA = 8


class LogLevel(IntEnum):
    """Log levels understood by the host."""

    TRACE = 0
    DEBUG = 1
    INFO = 2
    WARN = 3
    ERROR = 4
    CRITICAL = 5
    MAX = 6

    def __str__(self) -> str:
        if self is LogLevel.MAX:
            raise ValueError("invalid log level")
        return self.name.lower()


class MapType(IntEnum):
    """Header and trailer maps the host exposes to the plugin."""

    HTTP_REQUEST_HEADERS = 0
    HTTP_REQUEST_TRAILERS = 1
    HTTP_RESPONSE_HEADERS = 2
    HTTP_RESPONSE_TRAILERS = 3
    HTTP_CALL_RESPONSE_HEADERS = 6
    HTTP_CALL_RESPONSE_TRAILERS = 7


class MetricType(IntEnum):
    """Kinds of metrics a plugin can define."""

    COUNTER = 0
    GAUGE = 1
    HISTOGRAM = 2


class StreamType(IntEnum):
    """Streams that can be continued or closed."""

    REQUEST = 0
    RESPONSE = 1
    DOWNSTREAM = 2
    UPSTREAM = 3


class Status(IntEnum):
    """Status codes returned by host calls."""

    OK = 0
    NOT_FOUND = 1
    BAD_ARGUMENT = 2
    EMPTY = 7
    CAS_MISMATCH = 8
    INTERNAL_FAILURE = 10
    UNIMPLEMENTED = 12


class ProxyWasmError(Exception):
    """Base class for errors reported by the host."""

    status: Status | None = None
    default_message = "error returned by host"

    def __init__(self, message: str | None = None) -> None:
        super().__init__(message if message is not None else self.default_message)


class NotFoundError(ProxyWasmError):
    """The requested item does not exist."""

    status = Status.NOT_FOUND
    default_message = "error status returned by host: not found"


class BadArgumentError(ProxyWasmError):
    """The host rejected an argument."""

    status = Status.BAD_ARGUMENT
    default_message = "error status returned by host: bad argument"


class EmptyError(ProxyWasmError):
    """The requested queue or buffer is empty."""

    status = Status.EMPTY
    default_message = "error status returned by host: empty"


class CasMismatchError(ProxyWasmError):
    """The compare-and-swap value did not match."""

    status = Status.CAS_MISMATCH
    default_message = "error status returned by host: cas mismatch"


class InternalFailureError(ProxyWasmError):
    """The host failed internally."""

    status = Status.INTERNAL_FAILURE
    default_message = "error status returned by host: internal failure"


class UnimplementedError(ProxyWasmError):
    """The host does not implement the call."""

    status = Status.UNIMPLEMENTED
    default_message = "error status returned by host: unimplemented"


_ERRORS: dict[Status, type[ProxyWasmError]] = {
    cls.status: cls
    for cls in (
        NotFoundError,
        BadArgumentError,
        EmptyError,
        CasMismatchError,
        InternalFailureError,
        UnimplementedError,
    )
}


def status_to_error(status: int) -> ProxyWasmError | None:
    """Return the error for a status code, or None when it is OK."""
    try:
        known = Status(status)
    except ValueError:
        return ProxyWasmError(f"unknown status code: {int(status)}")
    if known is Status.OK:
        return None
    return _ERRORS[known]()


def raise_for_status(status: int) -> None:
    """Raise the error matching a status code unless it is OK."""
    error = status_to_error(status)
    if error is not None:
        raise error