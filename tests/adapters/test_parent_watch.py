from __future__ import annotations

import os
import subprocess
import threading

from lib_log_window.adapters import ParentWatch, is_alive, process_name
from tests.os_markers import OS_AGNOSTIC, POSIX_ONLY


@OS_AGNOSTIC
def test_current_process_is_alive_and_named() -> None:
    assert is_alive(os.getpid())
    assert process_name(os.getpid())


@POSIX_ONLY
def test_unknown_pid_is_dead_and_named_by_number() -> None:
    child = subprocess.Popen(["true"])
    child.wait()

    assert not is_alive(child.pid)
    assert process_name(child.pid) == str(child.pid)


@POSIX_ONLY
def test_parent_watch_fires_once_process_exits() -> None:
    child = subprocess.Popen(["sleep", "30"])
    fired = threading.Event()
    watch = ParentWatch(child.pid, fired.set, interval=0.02)
    watch.start()
    try:
        assert not fired.wait(0.1)
        child.kill()
        child.wait()
        assert fired.wait(2.0)
    finally:
        watch.stop()


@OS_AGNOSTIC
def test_stopped_watch_never_fires() -> None:
    fired = threading.Event()
    watch = ParentWatch(os.getpid(), fired.set, interval=0.02)
    watch.start()
    watch.stop()

    assert not fired.wait(0.1)
