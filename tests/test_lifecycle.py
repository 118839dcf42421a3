import pytest

from proxywasm import lifecycle, vmstate
from proxywasm.abi import LogLevel
from proxywasm.host import Host, register_host
from proxywasm.vmstate import PluginContextState


@pytest.fixture(autouse=True)
def fresh_state():
    vmstate.reset_state()
    lifecycle.set_timing(False)
    yield
    vmstate.reset_state()
    lifecycle.set_timing(False)


class ConfigurationPluginContext:
    def __init__(self):
        self.on_plugin_start_called = False

    def on_plugin_start(self, size):
        self.on_plugin_start_called = True
        return True


class ConfigurationVMContext:
    def __init__(self):
        self.on_vm_start_called = False

    def on_vm_start(self, size):
        self.on_vm_start_called = True
        return True

    def new_plugin_context(self, context_id):
        return ConfigurationPluginContext()


def test_configure_unknown_plugin():
    with pytest.raises(LookupError):
        lifecycle.proxy_on_configure(5, 0)


class CreateTcpContext:
    pass


class CreateHttpContext:
    pass


class CreatePluginContext:
    def __init__(self):
        self.cnt = 1

    def new_tcp_context(self, context_id):
        if context_id == 100:
            self.cnt += 100
            return CreateTcpContext()
        return None

    def new_http_context(self, context_id):
        if context_id == 1000:
            self.cnt += 1000
            return CreateHttpContext()
        return None


class CreateVMContext:
    def on_vm_start(self, size):
        return True

    def new_plugin_context(self, context_id):
        return CreatePluginContext()


def test_proxy_on_context_create():
    vmstate.set_vm_context(CreateVMContext())
    state = vmstate.current_state()

    lifecycle.proxy_on_context_create(1, 0)
    assert 1 in state.plugin_contexts
    plugin_context = state.plugin_contexts[1].context
    assert plugin_context.cnt == 1

    lifecycle.proxy_on_context_create(100, 1)
    assert plugin_context.cnt == 101
    assert isinstance(state.tcp_contexts[100], CreateTcpContext)

    lifecycle.proxy_on_context_create(1000, 1)
    assert plugin_context.cnt == 1101
    assert isinstance(state.http_contexts[1000], CreateHttpContext)


def test_proxy_on_context_create_unsupported():
    vmstate.set_vm_context(CreateVMContext())
    lifecycle.proxy_on_context_create(1, 0)
    with pytest.raises(LookupError):
        lifecycle.proxy_on_context_create(5, 1)


class LifecycleContext:
    def __init__(self):
        self.on_done_called = False

    def on_plugin_done(self):
        self.on_done_called = True
        return True

    def on_stream_done(self):
        self.on_done_called = True

    def on_http_stream_done(self):
        self.on_done_called = True


def test_on_done_or_on_log():
    state = vmstate.current_state()

    ctx = LifecycleContext()
    state.http_contexts[1] = ctx
    lifecycle.proxy_on_log(1)
    assert ctx.on_done_called
    assert state.active_context_id == 1

    ctx = LifecycleContext()
    state.tcp_contexts[2] = ctx
    lifecycle.proxy_on_log(2)
    assert ctx.on_done_called
    assert state.active_context_id == 2

    ctx = LifecycleContext()
    state.plugin_contexts[3] = PluginContextState(ctx)
    assert lifecycle.proxy_on_done(3) is True
    assert ctx.on_done_called
    assert state.active_context_id == 3


def test_on_log_ignores_plugin_contexts():
    state = vmstate.current_state()
    ctx = LifecycleContext()
    state.plugin_contexts[3] = PluginContextState(ctx)
    lifecycle.proxy_on_log(3)
    assert not ctx.on_done_called
    assert state.active_context_id == 0


def test_on_done_unknown_context_returns_true():
    assert lifecycle.proxy_on_done(99) is True
    assert vmstate.get_active_context_id() == 0


def test_on_delete():
    state = vmstate.current_state()
    state.http_contexts[1] = LifecycleContext()
    state.tcp_contexts[2] = LifecycleContext()
    state.plugin_contexts[3] = PluginContextState(LifecycleContext())
    state.context_id_to_root_id.update({1: 3, 2: 3, 3: 3})

    lifecycle.proxy_on_delete(1)
    lifecycle.proxy_on_delete(2)
    lifecycle.proxy_on_delete(3)
    assert state.http_contexts == {}
    assert state.tcp_contexts == {}
    assert state.plugin_contexts == {}
    assert state.context_id_to_root_id == {}


def test_on_delete_unknown_context():
    with pytest.raises(LookupError):
        lifecycle.proxy_on_delete(7)


class QueueContext:
    def __init__(self):
        self.queue_id = None

    def on_queue_ready(self, queue_id):
        self.queue_id = queue_id


def test_queue_ready():
    state = vmstate.current_state()
    ctx = QueueContext()
    state.plugin_contexts[100] = PluginContextState(ctx)
    lifecycle.proxy_on_queue_ready(100, 10)
    assert ctx.queue_id == 10
    assert state.active_context_id == 100


def test_queue_ready_unknown_context():
    with pytest.raises(LookupError):
        lifecycle.proxy_on_queue_ready(100, 10)


class TimerContext:
    def __init__(self):
        self.ticks = 0

    def on_tick(self):
        self.ticks += 1


def test_on_tick():
    state = vmstate.current_state()
    ctx = TimerContext()
    state.plugin_contexts[100] = PluginContextState(ctx)
    lifecycle.proxy_on_tick(100)
    assert ctx.ticks == 1
    assert state.active_context_id == 100


def test_on_tick_unknown_context():
    with pytest.raises(LookupError):
        lifecycle.proxy_on_tick(100)


class RecordingHost(Host):
    def __init__(self):
        self.logs = []

    def log(self, level, message):
        self.logs.append((level, message))


def test_timing_logs_when_enabled():
    host = RecordingHost()
    with register_host(host):
        lifecycle.set_timing(True)
        lifecycle.proxy_abi_version()
    assert len(host.logs) == 1
    level, message = host.logs[0]
    assert level == LogLevel.DEBUG
    assert message.startswith("proxy_abi_version took ")


def test_timing_silent_when_disabled():
    host = RecordingHost()
    with register_host(host):
        lifecycle.proxy_abi_version()
        with lifecycle.timed("block"):
            pass
    assert host.logs == []


def test_timed_block_logs_name():
    host = RecordingHost()
    with register_host(host):
        lifecycle.set_timing(True)
        with lifecycle.timed("block"):
            pass
    assert [m.split(" took ")[0] for _, m in host.logs] == ["block"]