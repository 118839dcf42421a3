"""Counter, gauge and histogram metrics kept by the host."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass

from .abi import MetricType, ProxyWasmError
from .host import current_host

_U64 = 1 << 64
_I64_LIMIT = 1 << 63


def _to_int64(value: int) -> int:
    value %= _U64
    return value - _U64 if value >= _I64_LIMIT else value


@contextmanager
def _annotate(message: str) -> Iterator[None]:
    try:
        yield
    except ProxyWasmError as exc:
        raise type(exc)(f"{message}: {exc}") from exc


@dataclass(frozen=True)
class MetricCounter:
    """A counter metric; create it with define_counter_metric."""

    metric_id: int

    def value(self) -> int:
        """Return the current count."""
        with _annotate(f"get metric of {self.metric_id}"):
            return current_host().get_metric(self.metric_id) % _U64

    def increment(self, offset: int) -> None:
        """Increase the count by offset."""
        with _annotate(f"increment {self.metric_id} by {offset}"):
            current_host().increment_metric(self.metric_id, _to_int64(offset))


@dataclass(frozen=True)
class MetricGauge:
    """A gauge metric; create it with define_gauge_metric."""

    metric_id: int

    def value(self) -> int:
        """Return the current, signed value."""
        with _annotate(f"get metric of {self.metric_id}"):
            return _to_int64(current_host().get_metric(self.metric_id))

    def add(self, offset: int) -> None:
        """Add a possibly negative offset to the gauge."""
        with _annotate(f"adding {self.metric_id} by {offset}"):
            current_host().increment_metric(self.metric_id, offset)


@dataclass(frozen=True)
class MetricHistogram:
    """A histogram metric; create it with define_histogram_metric."""

    metric_id: int

    def value(self) -> int:
        """Return the current value."""
        with _annotate(f"get metric of {self.metric_id}"):
            return current_host().get_metric(self.metric_id) % _U64

    def record(self, value: int) -> None:
        """Record a value."""
        with _annotate(f"recording {self.metric_id}"):
            current_host().record_metric(self.metric_id, value)


def _define(metric_type: MetricType, name: str) -> int:
    with _annotate(f"define metric of name {name}"):
        return current_host().define_metric(metric_type, name)


def define_counter_metric(name: str) -> MetricCounter:
    """Define, or look up, the counter called name."""
    return MetricCounter(_define(MetricType.COUNTER, name))


def define_gauge_metric(name: str) -> MetricGauge:
    """Define, or look up, the gauge called name."""
    return MetricGauge(_define(MetricType.GAUGE, name))


def define_histogram_metric(name: str) -> MetricHistogram:
    """Define, or look up, the histogram called name."""
    return MetricHistogram(_define(MetricType.HISTOGRAM, name))