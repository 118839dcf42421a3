"""Plugin-side SDK for the Proxy-Wasm ABI: entry points, host calls, encoding and metrics."""

__version__ = "0.1.0"

__all__ = [
    "abi",
    "serde",
    "host",
    "vmstate",
    "lifecycle",
    "access",
    "streams",
    "http",
    "hostcall",
    "metrics",
]