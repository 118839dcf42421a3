"""HTTP header, body and trailer access, HTTP callouts and local replies."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence

from .abi import BufferType, MapType, StreamType
from .access import (
    add_map_value,
    append_to_buffer,
    get_buffer,
    get_map,
    get_map_value,
    prepend_to_buffer,
    remove_map_value,
    replace_buffer,
    replace_map_value,
    set_map,
)
from .host import current_host
from .serde import serialize_map
from .vmstate import register_http_callout

Pair = tuple[str, str]
Pairs = Iterable[Sequence[str]]
HttpCallResponseCallback = Callable[[int, int, int], None]


def dispatch_http_call(
    cluster: str,
    headers: Pairs,
    body: bytes | None,
    trailers: Pairs,
    timeout_milliseconds: int,
    callback: HttpCallResponseCallback,
) -> int:
    """Send an HTTP request to a cluster and return the callout id.

    ``callback(num_headers, body_size, num_trailers)`` runs when the response
    arrives; the HTTP call response accessors are usable inside it.
    """
    callout_id = current_host().http_call(
        cluster,
        serialize_map(headers),
        bytes(body) if body else None,
        serialize_map(trailers),
        timeout_milliseconds,
    )
    register_http_callout(callout_id, callback)
    return callout_id


def get_http_call_response_headers() -> list[Pair]:
    """Return the headers of the HTTP callout response."""
    return get_map(MapType.HTTP_CALL_RESPONSE_HEADERS)


def get_http_call_response_body(start: int, max_size: int) -> bytes:
    """Return up to max_size bytes of the HTTP callout response body."""
    return get_buffer(BufferType.HTTP_CALL_RESPONSE_BODY, start, max_size)


def get_http_call_response_trailers() -> list[Pair]:
    """Return the trailers of the HTTP callout response."""
    return get_map(MapType.HTTP_CALL_RESPONSE_TRAILERS)


def get_http_request_headers() -> list[Pair]:
    """Return all request headers."""
    return get_map(MapType.HTTP_REQUEST_HEADERS)


def replace_http_request_headers(headers: Pairs) -> None:
    """Replace all request headers."""
    set_map(MapType.HTTP_REQUEST_HEADERS, headers)


def get_http_request_header(key: str) -> str:
    """Return the first value of a request header."""
    return get_map_value(MapType.HTTP_REQUEST_HEADERS, key)


def remove_http_request_header(key: str) -> None:
    """Remove a request header."""
    remove_map_value(MapType.HTTP_REQUEST_HEADERS, key)


def replace_http_request_header(key: str, value: str) -> None:
    """Replace the first value of a request header."""
    replace_map_value(MapType.HTTP_REQUEST_HEADERS, key, value)


def add_http_request_header(key: str, value: str) -> None:
    """Add a value to a request header."""
    add_map_value(MapType.HTTP_REQUEST_HEADERS, key, value)


def get_http_request_body(start: int, max_size: int) -> bytes:
    """Return up to max_size bytes of the request body from start."""
    return get_buffer(BufferType.HTTP_REQUEST_BODY, start, max_size)


def append_http_request_body(data: bytes) -> None:
    """Append data to the request body."""
    append_to_buffer(BufferType.HTTP_REQUEST_BODY, data)


def prepend_http_request_body(data: bytes) -> None:
    """Prepend data to the request body."""
    prepend_to_buffer(BufferType.HTTP_REQUEST_BODY, data)


def replace_http_request_body(data: bytes) -> None:
    """Replace the request body with data."""
    replace_buffer(BufferType.HTTP_REQUEST_BODY, data)


def get_http_request_trailers() -> list[Pair]:
    """Return all request trailers."""
    return get_map(MapType.HTTP_REQUEST_TRAILERS)


def replace_http_request_trailers(trailers: Pairs) -> None:
    """Replace all request trailers."""
    set_map(MapType.HTTP_REQUEST_TRAILERS, trailers)


def get_http_request_trailer(key: str) -> str:
    """Return the first value of a request trailer."""
    return get_map_value(MapType.HTTP_REQUEST_TRAILERS, key)


def remove_http_request_trailer(key: str) -> None:
    """Remove every value of a request trailer."""
    remove_map_value(MapType.HTTP_REQUEST_TRAILERS, key)


def replace_http_request_trailer(key: str, value: str) -> None:
    """Replace the first value of a request trailer."""
    replace_map_value(MapType.HTTP_REQUEST_TRAILERS, key, value)


def add_http_request_trailer(key: str, value: str) -> None:
    """Add a value to a request trailer."""
    add_map_value(MapType.HTTP_REQUEST_TRAILERS, key, value)


def resume_http_request() -> None:
    """Resume a paused request."""
    current_host().continue_stream(StreamType.REQUEST)


def get_http_response_headers() -> list[Pair]:
    """Return all response headers."""
    return get_map(MapType.HTTP_RESPONSE_HEADERS)


def replace_http_response_headers(headers: Pairs) -> None:
    """Replace all response headers."""
    set_map(MapType.HTTP_RESPONSE_HEADERS, headers)


def get_http_response_header(key: str) -> str:
    """Return the first value of a response header."""
    return get_map_value(MapType.HTTP_RESPONSE_HEADERS, key)


def remove_http_response_header(key: str) -> None:
    """Remove every value of a response header."""
    remove_map_value(MapType.HTTP_RESPONSE_HEADERS, key)


def replace_http_response_header(key: str, value: str) -> None:
    """Replace the first value of a response header."""
    replace_map_value(MapType.HTTP_RESPONSE_HEADERS, key, value)


def add_http_response_header(key: str, value: str) -> None:
    """Add a value to a response header."""
    add_map_value(MapType.HTTP_RESPONSE_HEADERS, key, value)


def get_http_response_body(start: int, max_size: int) -> bytes:
    """Return up to max_size bytes of the response body from start."""
    return get_buffer(BufferType.HTTP_RESPONSE_BODY, start, max_size)


def append_http_response_body(data: bytes) -> None:
    """Append data to the response body."""
    append_to_buffer(BufferType.HTTP_RESPONSE_BODY, data)


def prepend_http_response_body(data: bytes) -> None:
    """Prepend data to the response body."""
    prepend_to_buffer(BufferType.HTTP_RESPONSE_BODY, data)


def replace_http_response_body(data: bytes) -> None:
    """Replace the response body with data."""
    replace_buffer(BufferType.HTTP_RESPONSE_BODY, data)


def get_http_response_trailers() -> list[Pair]:
    """Return all response trailers."""
    return get_map(MapType.HTTP_RESPONSE_TRAILERS)


def replace_http_response_trailers(trailers: Pairs) -> None:
    """Replace all response trailers."""
    set_map(MapType.HTTP_RESPONSE_TRAILERS, trailers)


def get_http_response_trailer(key: str) -> str:
    """Return the first value of a response trailer."""
    return get_map_value(MapType.HTTP_RESPONSE_TRAILERS, key)


def remove_http_response_trailer(key: str) -> None:
    """Remove every value of a response trailer."""
    remove_map_value(MapType.HTTP_RESPONSE_TRAILERS, key)


def replace_http_response_trailer(key: str, value: str) -> None:
    """Replace the first value of a response trailer."""
    replace_map_value(MapType.HTTP_RESPONSE_TRAILERS, key, value)


def add_http_response_trailer(key: str, value: str) -> None:
    """Add a value to a response trailer."""
    add_map_value(MapType.HTTP_RESPONSE_TRAILERS, key, value)


def resume_http_response() -> None:
    """Resume a paused response."""
    current_host().continue_stream(StreamType.RESPONSE)


def send_http_response(
    status_code: int, headers: Pairs, body: bytes | None, grpc_status: int
) -> None:
    """Reply to the downstream directly; grpc_status is -1 for non-gRPC streams.

    After calling this, the handler must pause further processing.
    """
    current_host().send_local_response(
        status_code,
        None,
        bytes(body) if body else None,
        serialize_map(headers),
        grpc_status,
    )