from __future__ import annotations

import os
import subprocess
import threading


from lib_log_window.adapters import UnixChannelListener, channel_address
from lib_log_window.domain import ConsoleColor, LogRecord, connection_key, encode_record
from lib_log_window.viewer import run_viewer
from tests.fakes import RecordingConsole
from tests.os_markers import POSIX_ONLY

pytestmark = [POSIX_ONLY]


def test_viewer_renders_until_producer_closes_channel() -> None:
    subject = f"viewer-test-{os.getpid()}"
    listener = UnixChannelListener(channel_address(connection_key(os.getpid(), subject)))
    console = RecordingConsole()
    codes: list[int] = []
    worker = threading.Thread(target=lambda: codes.append(run_viewer(os.getpid(), subject, connect_timeout=5.0, console=console)))
    worker.start()
    try:
        writer = listener.accept(timeout=5.0)
        writer.write_line(encode_record(LogRecord(ConsoleColor.YELLOW, ConsoleColor.BLACK, "retrying")))
        writer.close()
        worker.join(timeout=5.0)
    finally:
        listener.close()

    assert codes == [0]
    assert console.titles[0].endswith(f": {subject}")
    assert console.records[-1] == LogRecord(ConsoleColor.YELLOW, ConsoleColor.BLACK, "retrying")


def test_viewer_without_producer_channel_fails() -> None:
    console = RecordingConsole()

    assert run_viewer(os.getpid(), "nobody-listens", connect_timeout=0.1, console=console) == 1


def test_viewer_for_vanished_producer_exits_cleanly() -> None:
    child = subprocess.Popen(["true"])
    child.wait()
    console = RecordingConsole()

    assert run_viewer(child.pid, "net", connect_timeout=0.1, console=console) == 0
    assert console.titles == [f"{child.pid}: net"]


def test_viewer_stops_when_producer_dies() -> None:
    producer = subprocess.Popen(["sleep", "30"])
    subject = "orphan"
    listener = UnixChannelListener(channel_address(connection_key(producer.pid, subject)))
    codes: list[int] = []
    worker = threading.Thread(
        target=lambda: codes.append(run_viewer(producer.pid, subject, connect_timeout=5.0, console=RecordingConsole(), watch_interval=0.02)),
    )
    worker.start()
    try:
        writer = listener.accept(timeout=5.0)
        producer.kill()
        producer.wait()
        worker.join(timeout=5.0)
        writer.close()
    finally:
        listener.close()

    assert codes == [0]
