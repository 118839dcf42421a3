"""Entry points the host calls over the life of the VM and its plugins."""

from __future__ import annotations

import time
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Any

from .abi import LogLevel
from .host import current_host
from .vmstate import PluginContextState, current_state

ABI_VERSION = "0.2.0"

_record_timing = False


def set_timing(enabled: bool) -> None:
    """Turn logging of how long each entry point takes on or off."""
    global _record_timing
    _record_timing = bool(enabled)


def _format_duration(seconds: float) -> str:
    if seconds < 1e-3:
        return f"{seconds * 1e6:.3f}µs"
    if seconds < 1:
        return f"{seconds * 1e3:.3f}ms"
    return f"{seconds:.3f}s"


@contextmanager
def timed(name: str) -> Iterator[None]:
    """Log at debug level how long the block took, when timing is enabled."""
    if not _record_timing:
        yield
        return
    start = time.perf_counter()
    try:
        yield
    finally:
        elapsed = time.perf_counter() - start
        current_host().log(LogLevel.DEBUG, f"{name} took {_format_duration(elapsed)}")


def _plugin(context_id: int, event: str) -> PluginContextState:
    try:
        return current_state().plugin_contexts[context_id]
    except KeyError:
        raise LookupError(f"invalid context id {context_id} on {event}") from None


@timed("proxy_abi_version")
def proxy_abi_version() -> str:
    """Return the ABI version the plugin speaks."""
    return ABI_VERSION


@timed("proxy_on_memory_allocate")
def proxy_on_memory_allocate(size: int) -> bytearray:
    """Allocate a zeroed buffer for the host to fill."""
    return bytearray(size)


@timed("proxy_on_vm_start")
def proxy_on_vm_start(root_context_id: int, vm_configuration_size: int) -> Any:
    """Start the VM context."""
    return current_state().vm_context.on_vm_start(vm_configuration_size)


@timed("proxy_on_configure")
def proxy_on_configure(plugin_context_id: int, plugin_configuration_size: int) -> Any:
    """Start the plugin context with its configuration."""
    root = _plugin(plugin_context_id, "proxy_on_configure")
    current_state().set_active_context_id(plugin_context_id)
    return root.context.on_plugin_start(plugin_configuration_size)


@timed("proxy_on_context_create")
def proxy_on_context_create(context_id: int, plugin_context_id: int) -> None:
    """Create a plugin context, or an HTTP or TCP context under a plugin."""
    state = current_state()
    if plugin_context_id == 0:
        state.create_plugin_context(context_id)
    elif state.create_http_context(context_id, plugin_context_id):
        pass
    elif state.create_tcp_context(context_id, plugin_context_id):
        pass
    else:
        raise LookupError(
            f"invalid context id {context_id} on proxy_on_context_create"
        )


@timed("proxy_on_log")
def proxy_on_log(context_id: int) -> None:
    """Tell a TCP or HTTP context that its stream is done."""
    state = current_state()
    if context_id in state.tcp_contexts:
        state.set_active_context_id(context_id)
        state.tcp_contexts[context_id].on_stream_done()
    elif context_id in state.http_contexts:
        state.set_active_context_id(context_id)
        state.http_contexts[context_id].on_http_stream_done()


@timed("proxy_on_done")
def proxy_on_done(context_id: int) -> bool:
    """Ask a plugin context whether it can be deleted now."""
    state = current_state()
    root = state.plugin_contexts.get(context_id)
    if root is None:
        return True
    state.set_active_context_id(context_id)
    return root.context.on_plugin_done()


@timed("proxy_on_delete")
def proxy_on_delete(context_id: int) -> None:
    """Forget a context."""
    state = current_state()
    state.context_id_to_root_id.pop(context_id, None)
    for contexts in (state.tcp_contexts, state.http_contexts, state.plugin_contexts):
        if context_id in contexts:
            del contexts[context_id]
            return
    raise LookupError(f"invalid context id {context_id} on proxy_on_delete")


@timed("proxy_on_queue_ready")
def proxy_on_queue_ready(context_id: int, queue_id: int) -> None:
    """Tell a plugin context that an item arrived on a queue."""
    root = _plugin(context_id, "proxy_on_queue_ready")
    current_state().set_active_context_id(context_id)
    root.context.on_queue_ready(queue_id)


@timed("proxy_on_tick")
def proxy_on_tick(plugin_context_id: int) -> None:
    """Deliver a timer tick to a plugin context."""
    root = _plugin(plugin_context_id, "proxy_on_tick")
    current_state().set_active_context_id(plugin_context_id)
    root.context.on_tick()