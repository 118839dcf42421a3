# proxywasm

A plugin-side SDK for the Proxy-Wasm ABI. A plugin consists of context
objects: a VM context, plugin contexts, and per-stream HTTP or TCP contexts.
The host drives them through the `proxy_on_*` entry points. The plugin calls
back into the host through the functions in this package, and those functions
reach whichever `Host` object is registered.

## Installing

```
pip install proxywasm
```

## Modules

- `proxywasm.abi`: the enumerations `BufferType`, `LogLevel`, `MapType`,
  `MetricType`, `StreamType` and `Status`, plus the exceptions rooted at
  `ProxyWasmError`: `NotFoundError`, `BadArgumentError`, `EmptyError`,
  `CasMismatchError`, `InternalFailureError` and `UnimplementedError`.
  `status_to_error(status)` returns the exception for a status code, or `None`
  for `Status.OK`. `raise_for_status(status)` raises that exception. A code
  that is not known gives a plain `ProxyWasmError("unknown status code: N")`.
- `proxywasm.serde`: the wire encoding. `serialize_map(pairs)` and
  `deserialize_map(data)` convert header maps. Malformed input raises
  `ValueError`. `serialize_property_path(path)` joins segments with NUL bytes.
  `decode_string(data)` decodes raw host bytes.
- `proxywasm.host`: the `Host` class, together with `register_host(host)` and
  `current_host()`. `register_host` returns a handle whose `release()` restores
  the host that was active before. The handle also works as a context manager.
- `proxywasm.vmstate`: context bookkeeping. It provides `VMState`,
  `PluginContextState`, `HttpCallback`, `current_state()`, `reset_state()`,
  `set_vm_context(vm_context)`, `register_http_callout(...)`, and
  `get_active_context_id()` / `set_active_context_id(...)`.
- `proxywasm.lifecycle`: the VM and plugin entry points: `proxy_abi_version`,
  `proxy_on_memory_allocate`, `proxy_on_vm_start`, `proxy_on_configure`,
  `proxy_on_context_create`, `proxy_on_log`, `proxy_on_done`,
  `proxy_on_delete`, `proxy_on_queue_ready` and `proxy_on_tick`.
  `set_timing(True)` makes each entry point log its duration at debug level
  through the host.
- `proxywasm.streams`: the TCP and HTTP stream entry points, for example
  `proxy_on_new_connection`, `proxy_on_request_headers` and
  `proxy_on_http_call_response`.
- `proxywasm.access`: lower-level access to host header maps (`get_map`,
  `set_map`, `get_map_value`, and so on) and host buffers (`get_buffer`,
  `append_to_buffer`, `prepend_to_buffer`, `replace_buffer`).
- `proxywasm.http`: request and response headers, bodies and trailers.
  It also covers `dispatch_http_call` with its response accessors, the
  resume functions, and `send_http_response`.
- `proxywasm.hostcall`: VM and plugin configuration, the tick period, the
  effective context, shared queues, shared data, TCP data and streams,
  properties, foreign functions, and logging (`log_info`, `log_infof`, and so
  on; the `f` variants use `%`-style formatting).
- `proxywasm.metrics`: `define_counter_metric`, `define_gauge_metric` and
  `define_histogram_metric`. They return `MetricCounter` (`increment`,
  `value`), `MetricGauge` (`add`, `value`) and `MetricHistogram` (`record`,
  `value`). A host error raised by any of them keeps its type, and its message
  is prefixed with what was being done.

## Contexts

Context objects are duck-typed. The entry points call these methods when they
exist:

- VM context: `on_vm_start(size)` and `new_plugin_context(id)`.
- Plugin context: `on_plugin_start(size)`, `on_plugin_done()`,
  `on_queue_ready(queue_id)`, `on_tick()`, and optionally
  `new_http_context(id)` / `new_tcp_context(id)`.
- HTTP context: `on_http_request_headers`, `on_http_request_body`,
  `on_http_request_trailers`, `on_http_response_headers`,
  `on_http_response_body`, `on_http_response_trailers` and
  `on_http_stream_done`.
- TCP context: `on_new_connection`, `on_downstream_data`,
  `on_downstream_close`, `on_upstream_data`, `on_upstream_close` and
  `on_stream_done`.

An entry point called with an unknown context id raises `LookupError`.

## Example

```python
from proxywasm import host, http, lifecycle, streams, vmstate


class Filter:
    def on_http_request_headers(self, num_headers, end_of_stream):
        http.add_http_request_header("x-seen", "1")
        return "continue"


class Plugin:
    def on_plugin_start(self, size):
        return True

    def new_http_context(self, context_id):
        return Filter()


class VM:
    def on_vm_start(self, size):
        return True

    def new_plugin_context(self, context_id):
        return Plugin()


recorder = host.Host()
with host.register_host(recorder):
    vmstate.set_vm_context(VM())
    lifecycle.proxy_on_vm_start(0, 0)
    lifecycle.proxy_on_context_create(1, 0)   # plugin context
    lifecycle.proxy_on_configure(1, 0)
    lifecycle.proxy_on_context_create(2, 1)   # HTTP context under plugin 1
    streams.proxy_on_request_headers(2, 0, False)

print(recorder.calls)
```

## The host

The base `Host` accepts every call. It records each one in `calls` as a pair
of method name and arguments, and returns empty results (`None`, `0` or
`b""`). It never raises. To emulate a real proxy, subclass it and override the
methods you need. Report failures by raising the exceptions from
`proxywasm.abi`, which pass straight through to the plugin.

A few cases are reported by the package itself:

- `get_map` and `get_buffer` raise `NotFoundError` when the host returns
  `None`.
- `get_property` and `set_property` raise `ValueError` for an empty path.
- `set_property` and `enqueue_shared_queue` raise `ValueError` for empty data.

## What this package does not do

It contains no proxy and no WebAssembly runtime, and it has no command-line
tool. Shared data, queues, metrics, headers and buffers all exist only in the
`Host` you register. With the base `Host`, calls are recorded and nothing is
stored.

## Running the tests

```
pip install -e .[test]
pytest
```