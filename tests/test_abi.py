import pytest

from proxywasm.abi import (
    BadArgumentError,
    BufferType,
    CasMismatchError,
    EmptyError,
    InternalFailureError,
    LogLevel,
    MapType,
    MetricType,
    NotFoundError,
    ProxyWasmError,
    Status,
    StreamType,
    UnimplementedError,
    raise_for_status,
    status_to_error,
)


def test_ok_status_has_no_error():
    assert status_to_error(Status.OK) is None
    assert status_to_error(0) is None


@pytest.mark.parametrize(
    "status, error_type",
    [
        (Status.NOT_FOUND, NotFoundError),
        (Status.BAD_ARGUMENT, BadArgumentError),
        (Status.EMPTY, EmptyError),
        (Status.CAS_MISMATCH, CasMismatchError),
        (Status.INTERNAL_FAILURE, InternalFailureError),
        (Status.UNIMPLEMENTED, UnimplementedError),
    ],
)
def test_known_status_maps_to_error(status, error_type):
    error = status_to_error(int(status))
    assert type(error) is error_type
    assert error.status == status
    with pytest.raises(error_type):
        raise_for_status(status)


def test_unknown_status_code():
    error = status_to_error(99)
    assert type(error) is ProxyWasmError
    assert str(error) == "unknown status code: 99"
    with pytest.raises(ProxyWasmError, match="unknown status code: 99"):
        raise_for_status(99)


def test_raise_for_ok_returns_none():
    assert raise_for_status(Status.OK) is None


@pytest.mark.parametrize("status", [s for s in Status if s is not Status.OK])
def test_errors_share_base_class(status):
    error = status_to_error(status)
    assert isinstance(error, ProxyWasmError)
    assert error.status == status


@pytest.mark.parametrize(
    "level, name",
    [
        (LogLevel.TRACE, "trace"),
        (LogLevel.DEBUG, "debug"),
        (LogLevel.INFO, "info"),
        (LogLevel.WARN, "warn"),
        (LogLevel.ERROR, "error"),
        (LogLevel.CRITICAL, "critical"),
    ],
)
def test_log_level_names(level, name):
    assert str(level) == name


def test_log_level_max_has_no_name():
    level = LogLevel(6)
    assert level is LogLevel.MAX
    with pytest.raises(ValueError):
        str(level)


def test_wire_values():
    assert BufferType(7) is BufferType.PLUGIN_CONFIGURATION
    assert MapType(6) is MapType.HTTP_CALL_RESPONSE_HEADERS
    assert MetricType(2) is MetricType.HISTOGRAM
    assert StreamType(3) is StreamType.UPSTREAM
    assert Status(12) is Status.UNIMPLEMENTED
    assert type(status_to_error(12)) is UnimplementedError