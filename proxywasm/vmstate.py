"""Bookkeeping of the VM, plugin, HTTP and TCP contexts created by the host."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass, field
from typing import Any

HttpCallResponseCallback = Callable[[int, int, int], None]


@dataclass
class HttpCallback:
    """A pending HTTP callout and the context that dispatched it."""

    callback: HttpCallResponseCallback
    caller_context_id: int


@dataclass
class PluginContextState:
    """A plugin context together with its pending HTTP callouts."""

    context: Any
    http_callbacks: dict[int, HttpCallback] = field(default_factory=dict)


@dataclass
class VMState:
    """All contexts living in one VM and the currently active context id."""

    vm_context: Any = None
    plugin_contexts: dict[int, PluginContextState] = field(default_factory=dict)
    http_contexts: dict[int, Any] = field(default_factory=dict)
    tcp_contexts: dict[int, Any] = field(default_factory=dict)
    context_id_to_root_id: dict[int, int] = field(default_factory=dict)
    active_context_id: int = 0

    def create_plugin_context(self, context_id: int) -> None:
        """Ask the VM context for a new plugin context and store it."""
        if self.vm_context is None:
            raise RuntimeError("VM context is not set")
        context = self.vm_context.new_plugin_context(context_id)
        self.plugin_contexts[context_id] = PluginContextState(context)
        # A plugin context is its own root, so it can dispatch HTTP calls too.
        self.context_id_to_root_id[context_id] = context_id

    def create_tcp_context(self, context_id: int, plugin_context_id: int) -> bool:
        """Create a TCP context; return False if the plugin does not make them."""
        root = self._plugin_root(plugin_context_id)
        if context_id in self.tcp_contexts:
            raise ValueError(f"context id duplicated: {context_id}")
        context = _call_factory(root.context, "new_tcp_context", context_id)
        if context is None:
            return False
        self.context_id_to_root_id[context_id] = plugin_context_id
        self.tcp_contexts[context_id] = context
        return True

    def create_http_context(self, context_id: int, plugin_context_id: int) -> bool:
        """Create an HTTP context; return False if the plugin does not make them."""
        root = self._plugin_root(plugin_context_id)
        if context_id in self.http_contexts:
            raise ValueError(f"context id duplicated: {context_id}")
        context = _call_factory(root.context, "new_http_context", context_id)
        if context is None:
            return False
        self.context_id_to_root_id[context_id] = plugin_context_id
        self.http_contexts[context_id] = context
        return True

    def register_http_callout(
        self, callout_id: int, callback: HttpCallResponseCallback
    ) -> None:
        """Remember callback for callout_id under the active context's root."""
        caller = self.active_context_id
        root_id = self.context_id_to_root_id.get(caller)
        if root_id is None or root_id not in self.plugin_contexts:
            raise LookupError(f"no plugin context for active context id {caller}")
        self.plugin_contexts[root_id].http_callbacks[callout_id] = HttpCallback(
            callback, caller
        )

    def set_active_context_id(self, context_id: int) -> None:
        """Mark context_id as the context currently being served."""
        self.active_context_id = context_id

    def _plugin_root(self, plugin_context_id: int) -> PluginContextState:
        try:
            return self.plugin_contexts[plugin_context_id]
        except KeyError:
            raise LookupError(
                f"invalid plugin context id: {plugin_context_id}"
            ) from None


def _call_factory(context: Any, name: str, context_id: int) -> Any:
    factory = getattr(context, name, None)
    return factory(context_id) if factory is not None else None


_state = VMState()


def current_state() -> VMState:
    """Return the state of this VM."""
    return _state


def reset_state() -> VMState:
    """Discard every context and start from an empty state."""
    global _state
    _state = VMState()
    return _state


def set_vm_context(vm_context: Any) -> None:
    """Install the VM context that creates plugin contexts."""
    _state.vm_context = vm_context


def register_http_callout(callout_id: int, callback: HttpCallResponseCallback) -> None:
    """Remember callback for an HTTP callout made by the active context."""
    _state.register_http_callout(callout_id, callback)


def get_active_context_id() -> int:
    """Return the id of the context currently being served."""
    return _state.active_context_id


def set_active_context_id(context_id: int) -> None:
    """Set the id of the context currently being served."""
    _state.set_active_context_id(context_id)