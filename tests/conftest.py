from __future__ import annotations

from io import StringIO
from typing import Iterator

import pytest
from rich.console import Console

from lib_log_window import runtime
from lib_log_window.application import SubjectProxy, SubjectRegistry
from lib_log_window.runtime import _composition

from tests.fakes import DiagnosticRecorder, FakeLauncher, ListenerBox, ManualClock, RuntimeWiring


@pytest.fixture
def record_console() -> Console:
    return Console(file=StringIO(), record=True, width=120, color_system="truecolor", force_terminal=True)


@pytest.fixture
def launcher() -> FakeLauncher:
    return FakeLauncher()


@pytest.fixture
def listeners() -> ListenerBox:
    return ListenerBox()


@pytest.fixture
def clock() -> ManualClock:
    return ManualClock()


@pytest.fixture
def diagnostics() -> DiagnosticRecorder:
    return DiagnosticRecorder()


@pytest.fixture
def make_proxy(launcher: FakeLauncher, listeners: ListenerBox, clock: ManualClock, diagnostics: DiagnosticRecorder):
    created: list[SubjectProxy] = []

    def factory(subject: str, **overrides: object) -> SubjectProxy:
        options: dict[str, object] = {
            "launcher": launcher,
            "listener_factory": listeners,
            "connect_timeout": 0.2,
            "clock": clock,
            "pid": 4242,
            "diagnostic": diagnostics,
        }
        options.update(overrides)
        proxy = SubjectProxy(subject, **options)  # type: ignore[arg-type]
        created.append(proxy)
        return proxy

    yield factory
    for proxy in created:
        proxy.dispose()


@pytest.fixture
def make_registry(make_proxy, diagnostics: DiagnosticRecorder):
    created: list[SubjectRegistry] = []

    def factory(**overrides: object) -> SubjectRegistry:
        options: dict[str, object] = {"proxy_factory": make_proxy, "diagnostic": diagnostics}
        options.update(overrides)
        registry = SubjectRegistry(**options)  # type: ignore[arg-type]
        created.append(registry)
        return registry

    yield factory
    for registry in created:
        registry.shutdown()


@pytest.fixture(autouse=True)
def cradle_runtime() -> Iterator[None]:
    try:
        yield
    finally:
        runtime.shutdown()


@pytest.fixture
def wiring(monkeypatch: pytest.MonkeyPatch) -> RuntimeWiring:
    for name in ("LOG_WINDOW_ENABLED", "LOG_WINDOW_SUBJECTS", "LOG_WINDOW_TERMINAL", "LOG_WINDOW_MAX_SUBJECTS"):
        monkeypatch.delenv(name, raising=False)
    state = RuntimeWiring()
    monkeypatch.setattr(_composition, "SubprocessViewerLauncher", state.launcher_factory)
    monkeypatch.setattr(_composition, "_open_listener", state.open_listener)
    return state
