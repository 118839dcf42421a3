"""Entry points the host calls for TCP and HTTP stream events."""

from __future__ import annotations

from contextlib import suppress
from typing import Any

from .abi import ProxyWasmError
from .host import current_host
from .lifecycle import timed
from .vmstate import current_state


def _tcp(context_id: int, event: str) -> Any:
    state = current_state()
    try:
        context = state.tcp_contexts[context_id]
    except KeyError:
        raise LookupError(f"invalid context id {context_id} on {event}") from None
    state.set_active_context_id(context_id)
    return context


def _http(context_id: int, event: str) -> Any:
    state = current_state()
    try:
        context = state.http_contexts[context_id]
    except KeyError:
        raise LookupError(f"invalid context id {context_id} on {event}") from None
    state.set_active_context_id(context_id)
    return context


@timed("proxy_on_new_connection")
def proxy_on_new_connection(context_id: int) -> Any:
    """Tell a TCP context that a new connection was opened."""
    return _tcp(context_id, "proxy_on_new_connection").on_new_connection()


@timed("proxy_on_downstream_data")
def proxy_on_downstream_data(context_id: int, data_size: int, end_of_stream: bool) -> Any:
    """Deliver downstream data to a TCP context."""
    ctx = _tcp(context_id, "proxy_on_downstream_data")
    return ctx.on_downstream_data(data_size, end_of_stream)


@timed("proxy_on_downstream_connection_close")
def proxy_on_downstream_connection_close(context_id: int, peer_type: int) -> None:
    """Tell a TCP context that the downstream connection closed."""
    _tcp(context_id, "proxy_on_downstream_connection_close").on_downstream_close(
        peer_type
    )


@timed("proxy_on_upstream_data")
def proxy_on_upstream_data(context_id: int, data_size: int, end_of_stream: bool) -> Any:
    """Deliver upstream data to a TCP context."""
    ctx = _tcp(context_id, "proxy_on_upstream_data")
    return ctx.on_upstream_data(data_size, end_of_stream)


@timed("proxy_on_upstream_connection_close")
def proxy_on_upstream_connection_close(context_id: int, peer_type: int) -> None:
    """Tell a TCP context that the upstream connection closed."""
    _tcp(context_id, "proxy_on_upstream_connection_close").on_upstream_close(peer_type)


@timed("proxy_on_request_headers")
def proxy_on_request_headers(context_id: int, num_headers: int, end_of_stream: bool) -> Any:
    """Deliver request headers to an HTTP context."""
    ctx = _http(context_id, "proxy_on_request_headers")
    return ctx.on_http_request_headers(num_headers, end_of_stream)


@timed("proxy_on_request_body")
def proxy_on_request_body(context_id: int, body_size: int, end_of_stream: bool) -> Any:
    """Deliver request body data to an HTTP context."""
    ctx = _http(context_id, "proxy_on_request_body")
    return ctx.on_http_request_body(body_size, end_of_stream)


@timed("proxy_on_request_trailers")
def proxy_on_request_trailers(context_id: int, num_trailers: int) -> Any:
    """Deliver request trailers to an HTTP context."""
    ctx = _http(context_id, "proxy_on_request_trailers")
    return ctx.on_http_request_trailers(num_trailers)


@timed("proxy_on_response_headers")
def proxy_on_response_headers(context_id: int, num_headers: int, end_of_stream: bool) -> Any:
    """Deliver response headers to an HTTP context."""
    ctx = _http(context_id, "proxy_on_response_headers")
    return ctx.on_http_response_headers(num_headers, end_of_stream)


@timed("proxy_on_response_body")
def proxy_on_response_body(context_id: int, body_size: int, end_of_stream: bool) -> Any:
    """Deliver response body data to an HTTP context."""
    ctx = _http(context_id, "proxy_on_response_body")
    return ctx.on_http_response_body(body_size, end_of_stream)


@timed("proxy_on_response_trailers")
def proxy_on_response_trailers(context_id: int, num_trailers: int) -> Any:
    """Deliver response trailers to an HTTP context."""
    ctx = _http(context_id, "proxy_on_response_trailers")
    return ctx.on_http_response_trailers(num_trailers)


@timed("proxy_on_http_call_response")
def proxy_on_http_call_response(
    plugin_context_id: int,
    callout_id: int,
    num_headers: int,
    body_size: int,
    num_trailers: int,
) -> None:
    """Run the callback of a finished HTTP callout, if its caller still exists."""
    state = current_state()
    root = state.plugin_contexts.get(plugin_context_id)
    if root is None:
        raise LookupError(
            f"http call response on invalid plugin context {plugin_context_id}"
        )
    pending = root.http_callbacks.get(callout_id)
    if pending is None:
        raise LookupError(f"invalid callout id {callout_id}")

    caller = pending.caller_context_id
    state.set_active_context_id(caller)
    del root.http_callbacks[callout_id]

    # The caller may have been deleted before the response arrived; running the
    # callback then would trigger events for a context that no longer exists.
    if caller in state.context_id_to_root_id:
        with suppress(ProxyWasmError):
            current_host().set_effective_context(caller)
        pending.callback(num_headers, body_size, num_trailers)