from __future__ import annotations

import os
import time

import psutil
import pytest

import lib_log_window as logwin
from lib_log_window.adapters import viewer_command
from lib_log_window.adapters.parent_watch import find_process
from tests.fakes import DiagnosticRecorder, wait_for
from tests.os_markers import POSIX_ONLY

pytestmark = [POSIX_ONLY, pytest.mark.e2e]

# Backgrounds the viewer and exits at once, like emulators that hand windows to a server.
DETACHING_TERMINAL = "sh -c '\"$0\" \"$@\" >/dev/null 2>&1 &'"


@pytest.fixture(autouse=True)
def _plain_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in ("LOG_WINDOW_ENABLED", "LOG_WINDOW_SUBJECTS", "LOG_WINDOW_TERMINAL", "LOG_WINDOW_MAX_SUBJECTS"):
        monkeypatch.delenv(name, raising=False)


def _viewer_pids(recorder: DiagnosticRecorder) -> list[int]:
    return [int(payload["pid"]) for name, payload in list(recorder.events) if name == "viewer_started"]  # type: ignore[arg-type]


def test_headless_viewer_is_restarted_after_being_killed() -> None:
    recorder = DiagnosticRecorder()
    registry = logwin.init(subjects=["e2e"], terminal="none", connect_timeout=30.0, diagnostic_hook=recorder)
    proxy = registry.proxy("e2e")

    assert proxy is not None and proxy.connected
    assert logwin.post("e2e", "hello\n", "green")

    first = _viewer_pids(recorder)[0]
    psutil.Process(first).kill()

    assert wait_for(lambda: proxy.generation == 2 and proxy.connected, timeout=40.0)
    assert logwin.post("e2e", "again\n", "yellow")
    second = _viewer_pids(recorder)[-1]
    assert second != first
    assert "viewer_exited" in recorder.names()

    logwin.shutdown()

    assert not psutil.pid_exists(second)


def test_viewer_slower_than_connect_timeout_still_connects() -> None:
    recorder = DiagnosticRecorder()
    registry = logwin.init(subjects=["slow"], terminal="none", connect_timeout=0.05, diagnostic_hook=recorder)
    proxy = registry.proxy("slow")

    assert proxy is not None
    assert wait_for(lambda: proxy.connected, timeout=30.0)
    assert logwin.post("slow", "late but here\n", "cyan")
    assert proxy.generation == 1
    assert "viewer_connect_timeout" in recorder.names()
    assert "write_failed" not in recorder.names()


def test_detaching_terminal_keeps_a_single_viewer_generation() -> None:
    recorder = DiagnosticRecorder()
    registry = logwin.init(subjects=["detached"], terminal=DETACHING_TERMINAL, connect_timeout=30.0, diagnostic_hook=recorder)
    proxy = registry.proxy("detached")

    assert proxy is not None and proxy.connected
    time.sleep(3.0)

    assert len(_viewer_pids(recorder)) == 1
    assert proxy.generation == 1 and proxy.connected
    assert logwin.post("detached", "still one window\n", "green")

    logwin.shutdown()

    command = viewer_command(os.getpid(), "detached")
    assert wait_for(lambda: find_process(command) is None, timeout=10.0)
