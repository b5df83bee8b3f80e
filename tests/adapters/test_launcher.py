from __future__ import annotations

import os
import subprocess
import sys
import threading

import pytest

from lib_log_window.adapters import SubprocessViewerLauncher, UnixChannelListener, channel_address, viewer_command
from lib_log_window.adapters import launcher as launcher_module
from lib_log_window.adapters.launcher import SubprocessViewer, detect_terminal
from lib_log_window.domain import ViewerUnavailableError, connection_key
from tests.os_markers import OS_AGNOSTIC, POSIX_ONLY

DETACHING_TERMINAL = "sh -c '\"$0\" \"$@\" >/dev/null 2>&1 &'"


@OS_AGNOSTIC
def test_viewer_command_runs_the_package_module() -> None:
    assert viewer_command(12, "net") == [sys.executable, "-m", "lib_log_window", "viewer", "12", "net"]


@OS_AGNOSTIC
def test_headless_launcher_is_always_available() -> None:
    launcher = SubprocessViewerLauncher(terminal="none")

    assert launcher.available
    assert launcher.headless
    assert launcher.build_argv(12, "net") == viewer_command(12, "net")


@POSIX_ONLY
def test_custom_terminal_prefix_expands_title() -> None:
    launcher = SubprocessViewerLauncher(terminal="env TITLE={title}")

    assert launcher.build_argv(12, "net")[:2] == ["env", "TITLE=12: net"]
    assert launcher.build_argv(12, "net")[2:] == viewer_command(12, "net")


@OS_AGNOSTIC
def test_missing_terminal_makes_launcher_unavailable() -> None:
    launcher = SubprocessViewerLauncher(terminal="no-such-terminal-emulator -e")

    assert not launcher.available
    with pytest.raises(ViewerUnavailableError):
        launcher.launch(12, "net")


@OS_AGNOSTIC
def test_detect_terminal_skips_missing_executables() -> None:
    assert detect_terminal([("no-such-terminal-emulator", "-e")]) is None


@POSIX_ONLY
def test_launch_starts_process_with_headless_streams() -> None:
    launcher = SubprocessViewerLauncher(terminal="none", python="true")

    viewer = launcher.launch(12, "net")

    assert viewer.wait(5.0) == 0
    assert viewer.poll() == 0
    viewer.terminate()


@POSIX_ONLY
def test_launch_failure_raises_viewer_unavailable() -> None:
    launcher = SubprocessViewerLauncher(terminal="none", python="/nonexistent/python")

    with pytest.raises(ViewerUnavailableError):
        launcher.launch(12, "net")


@POSIX_ONLY
def test_terminate_stops_and_reaps_a_running_viewer() -> None:
    viewer = SubprocessViewer(subprocess.Popen(["sleep", "30"]))

    viewer.terminate()

    assert viewer.poll() is not None


@OS_AGNOSTIC
def test_auto_detect_without_any_terminal_is_unavailable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setattr(launcher_module.shutil, "which", lambda name: None)

    launcher = SubprocessViewerLauncher()

    assert not launcher.available
    with pytest.raises(ViewerUnavailableError):
        launcher.build_argv(12, "net")


@POSIX_ONLY
def test_terminal_exiting_normally_is_not_followed() -> None:
    launcher = SubprocessViewerLauncher(terminal="true")

    viewer = launcher.launch(12, "net")

    assert viewer.wait(10.0) == 0
    assert viewer.detached_pid is None


@POSIX_ONLY
def test_detaching_terminal_is_followed_to_the_viewer() -> None:
    subject = "detached"
    listener = UnixChannelListener(channel_address(connection_key(os.getpid(), subject)))
    viewer = SubprocessViewerLauncher(terminal=DETACHING_TERMINAL).launch(os.getpid(), subject)
    waiter = threading.Thread(target=viewer.wait, daemon=True)
    try:
        writer = listener.accept(15.0)
        waiter.start()
        waiter.join(1.0)

        assert waiter.is_alive()
        assert viewer.detached_pid not in (None, viewer.pid)
        assert viewer.poll() is None
        writer.close()
        waiter.join(15.0)
        assert not waiter.is_alive()
    finally:
        viewer.terminate()
        listener.close()
