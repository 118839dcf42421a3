import pytest

from proxywasm.abi import BadArgumentError, MetricType
from proxywasm.host import Host, register_host
from proxywasm.metrics import (
    MetricCounter,
    MetricGauge,
    MetricHistogram,
    define_counter_metric,
    define_gauge_metric,
    define_histogram_metric,
)


class MetricHost(Host):
    def __init__(self):
        self.id_to_value = {}
        self.id_to_type = {}
        self.name_to_id = {}

    def define_metric(self, metric_type, name):
        if name not in self.name_to_id:
            metric_id = len(self.name_to_id)
            self.name_to_id[name] = metric_id
            self.id_to_value[metric_id] = 0
            self.id_to_type[metric_id] = metric_type
        return self.name_to_id[name]

    def increment_metric(self, metric_id, offset):
        if metric_id not in self.id_to_value:
            raise BadArgumentError()
        self.id_to_value[metric_id] = (self.id_to_value[metric_id] + offset) % (1 << 64)

    def record_metric(self, metric_id, value):
        if metric_id not in self.id_to_value:
            raise BadArgumentError()
        self.id_to_value[metric_id] = value

    def get_metric(self, metric_id):
        if metric_id not in self.id_to_value:
            raise BadArgumentError()
        return self.id_to_value[metric_id]


@pytest.fixture
def host():
    h = MetricHost()
    with register_host(h):
        yield h


@pytest.mark.parametrize("name, offset", [("requests", 100)])
def test_counter(host, name, offset):
    metric = define_counter_metric(name)
    metric.increment(offset)
    assert metric.value() == offset
    assert host.id_to_type[metric.metric_id] == MetricType.COUNTER


@pytest.mark.parametrize("name, offset", [("rate", -50)])
def test_gauge(host, name, offset):
    metric = define_gauge_metric(name)
    metric.add(offset)
    assert metric.value() == offset
    assert host.id_to_type[metric.metric_id] == MetricType.GAUGE


@pytest.mark.parametrize("name, value", [("request count", 10000)])
def test_histogram(host, name, value):
    metric = define_histogram_metric(name)
    metric.record(value)
    assert metric.value() == value
    assert host.id_to_type[metric.metric_id] == MetricType.HISTOGRAM


def test_same_name_same_metric(host):
    first = define_counter_metric("hits")
    first.increment(3)
    second = define_counter_metric("hits")
    second.increment(4)
    assert second == first
    assert first.value() == 7


def test_unknown_metric_raises(host):
    with pytest.raises(BadArgumentError, match="get metric of 99"):
        MetricCounter(99).value()
    with pytest.raises(BadArgumentError):
        MetricGauge(99).add(1)
    with pytest.raises(BadArgumentError):
        MetricHistogram(99).record(1)