"""Process lookups for viewers and the producer they show.

A viewer must never outlive the process it shows. :class:`ParentWatch` polls
the producer's pid on a daemon thread and fires a callback once it is gone,
covering producers that were killed before they could tear their viewers down.
:func:`find_process` lets the launcher follow viewers whose terminal detached.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Sequence

import psutil


LOGGER = logging.getLogger(__name__)


def process_name(pid: int) -> str:
    """Return the executable name of ``pid`` or the pid itself when unknown."""

    try:
        return psutil.Process(pid).name()
    except (psutil.NoSuchProcess, psutil.AccessDenied, psutil.ZombieProcess):
        return str(pid)


def find_process(cmdline: Sequence[str], *, created_after: float = 0.0, exclude: int | None = None) -> psutil.Process | None:
    """Return a running process whose command line equals ``cmdline``.

    Processes started before ``created_after`` (epoch seconds) and the pid
    ``exclude`` are skipped.
    """

    wanted = list(cmdline)
    for process in psutil.process_iter(["pid", "cmdline", "create_time"]):
        info = process.info
        if info["pid"] == exclude or (info["create_time"] or 0.0) < created_after:
            continue
        if info["cmdline"] == wanted:
            return process
    return None


def is_alive(pid: int) -> bool:
    """Return ``True`` while ``pid`` exists and is not a zombie."""

    try:
        return psutil.Process(pid).status() != psutil.STATUS_ZOMBIE
    except psutil.NoSuchProcess:
        return False
    except psutil.AccessDenied:
        return True


class ParentWatch:
    """Invoke ``on_exit`` once the watched process disappears."""

    def __init__(self, pid: int, on_exit: Callable[[], None], *, interval: float = 0.5) -> None:
        self._pid = pid
        self._on_exit = on_exit
        self._interval = interval
        self._stop_event = threading.Event()
        self._thread: threading.Thread | None = None

    def start(self) -> None:
        """Start polling on a daemon thread if not already running."""
        if self._thread is not None and self._thread.is_alive():
            return
        self._stop_event.clear()
        self._thread = threading.Thread(target=self._run, name=f"parent-watch-{self._pid}", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop_event.set()

    def _run(self) -> None:
        while not self._stop_event.wait(self._interval):
            if not is_alive(self._pid):
                LOGGER.info("Producer pid=%s is gone; closing viewer", self._pid)
                self._on_exit()
                return


__all__ = ["ParentWatch", "find_process", "is_alive", "process_name"]
