"""Spawn viewer processes in their own console windows.

Purpose
-------
Turn ``(producer pid, subject)`` into a running ``lib_log_window viewer``
process, wrapped in a terminal emulator or run headless.

Contents
--------
* :data:`TERMINAL_TEMPLATES` – emulators probed in order.
* :class:`SubprocessViewerLauncher` – implementation of the launcher port.
* :class:`SubprocessViewer` – :class:`subprocess.Popen` behind the process port.

System Role
-----------
Decides availability: when no launcher can be located the facility reports
itself unavailable and stays silent. Only POSIX hosts are supported; the
channel needs Unix domain sockets, so Windows never reaches a launch.
"""

from __future__ import annotations

import logging
import os
import shlex
import shutil
import subprocess
import sys
import time
from pathlib import Path
from typing import Sequence

import psutil

from lib_log_window.application.ports.launcher import ViewerLauncherPort, ViewerProcessPort
from lib_log_window.domain.errors import ViewerUnavailableError

from .parent_watch import find_process


LOGGER = logging.getLogger(__name__)

HEADLESS = "none"
"""Terminal setting that runs viewers without a window (output discarded)."""

TERMINAL_TEMPLATES: tuple[tuple[str, ...], ...] = (
    ("x-terminal-emulator", "-T", "{title}", "-e"),
    ("xterm", "-T", "{title}", "-e"),
    ("konsole", "--nofork", "-e"),
    ("alacritty", "-t", "{title}", "-e"),
)

_TERMINATE_GRACE = 2.0
_DETACH_WINDOW = 5.0
"""A terminal exiting this soon after launch may have handed its window to a server."""
_LOCATE_TIMEOUT = 3.0
_LOCATE_INTERVAL = 0.1
_PACKAGE_ROOT = Path(__file__).resolve().parents[2]


def viewer_command(pid: int, subject: str, *, python: str | None = None) -> list[str]:
    """Return the argv that starts a viewer for ``subject`` of process ``pid``.

    Examples
    --------
    >>> viewer_command(7, "net", python="py")
    ['py', '-m', 'lib_log_window', 'viewer', '7', 'net']
    """

    return [python or sys.executable, "-m", "lib_log_window", "viewer", str(pid), subject]


def detect_terminal(templates: Sequence[Sequence[str]] = TERMINAL_TEMPLATES) -> tuple[str, ...] | None:
    """Return the first template whose executable is on ``PATH``."""

    for template in templates:
        if shutil.which(template[0]):
            return tuple(template)
    return None


class SubprocessViewer(ViewerProcessPort):
    """Viewer process handle backed by :class:`subprocess.Popen`.

    When ``viewer_argv`` is given the launched process is a terminal wrapping
    that command. Some emulators (gnome-terminal behind ``x-terminal-emulator``)
    hand the window to a server and exit at once; if the terminal ends within
    a few seconds of launch while a process running ``viewer_argv`` is alive,
    :meth:`wait`, :meth:`poll` and :meth:`terminate` follow that process.
    """

    def __init__(self, process: subprocess.Popen[bytes], *, viewer_argv: Sequence[str] | None = None) -> None:
        self._process = process
        self._viewer_argv = list(viewer_argv) if viewer_argv is not None else None
        self._launched_at = time.monotonic()
        self._created_after = time.time() - 1.0
        self._terminating = False
        self._detached: psutil.Process | None = None

    @property
    def pid(self) -> int:
        return self._process.pid

    @property
    def detached_pid(self) -> int | None:
        """Pid of the followed viewer once its terminal detached."""
        return None if self._detached is None else self._detached.pid

    def wait(self, timeout: float | None = None) -> int | None:
        code = self._process.wait(timeout)
        detached = self._locate_detached()
        if detached is None:
            return code
        LOGGER.debug("Terminal pid=%s detached; following viewer pid=%s", self._process.pid, detached.pid)
        try:
            viewer_code = detached.wait(timeout)
        except psutil.NoSuchProcess:
            return code
        except psutil.TimeoutExpired as exc:
            raise subprocess.TimeoutExpired(self._viewer_argv or [], timeout or 0.0) from exc
        return code if viewer_code is None else viewer_code

    def poll(self) -> int | None:
        code = self._process.poll()
        if code is not None and self._detached is not None and self._detached.is_running():
            return None
        return code

    def terminate(self) -> None:
        """Terminate, escalate to kill after a grace period, then reap."""
        self._terminating = True
        if self._detached is not None:
            _terminate_detached(self._detached)
        if self._process.poll() is not None:
            return
        try:
            self._process.terminate()
            self._process.wait(_TERMINATE_GRACE)
        except subprocess.TimeoutExpired:
            LOGGER.warning("Viewer pid=%s ignored terminate; killing", self._process.pid)
            self._process.kill()
            self._process.wait(_TERMINATE_GRACE)
        except ProcessLookupError:
            pass

    def _locate_detached(self) -> psutil.Process | None:
        if self._viewer_argv is None or self._terminating:
            return None
        if time.monotonic() - self._launched_at > _DETACH_WINDOW:
            return None
        deadline = time.monotonic() + _LOCATE_TIMEOUT
        while not self._terminating:
            found = find_process(self._viewer_argv, created_after=self._created_after, exclude=self._process.pid)
            if found is not None:
                self._detached = found
                return found
            if time.monotonic() >= deadline:
                return None
            time.sleep(_LOCATE_INTERVAL)
        return None


def _terminate_detached(process: psutil.Process) -> None:
    try:
        process.terminate()
        process.wait(_TERMINATE_GRACE)
    except psutil.TimeoutExpired:
        LOGGER.warning("Viewer pid=%s ignored terminate; killing", process.pid)
        process.kill()
    except psutil.NoSuchProcess:
        pass


class SubprocessViewerLauncher(ViewerLauncherPort):
    """Launch viewers, optionally inside a terminal emulator.

    Parameters
    ----------
    terminal:
        ``None`` auto-detects from :data:`TERMINAL_TEMPLATES`, :data:`HEADLESS`
        runs the viewer without a window, any other string is a command prefix
        such as ``"xterm -T {title} -e"``.
    python:
        Interpreter used for the viewer; defaults to :data:`sys.executable`.

    Examples
    --------
    >>> launcher = SubprocessViewerLauncher(terminal="none")
    >>> launcher.available
    True
    >>> launcher.build_argv(7, "net")[-3:]
    ['viewer', '7', 'net']
    """

    def __init__(self, *, terminal: str | None = None, python: str | None = None) -> None:
        self._python = python
        self._headless = terminal is not None and terminal.strip().lower() == HEADLESS
        self._prefix: tuple[str, ...] | None
        if self._headless:
            self._prefix = ()
        elif terminal is not None:
            parts = tuple(shlex.split(terminal))
            self._prefix = parts if parts and shutil.which(parts[0]) else None
        else:
            self._prefix = detect_terminal()

    @property
    def available(self) -> bool:
        return self._prefix is not None

    @property
    def headless(self) -> bool:
        return self._headless

    def require(self) -> None:
        """Raise :class:`ViewerUnavailableError` when no launcher was located."""
        if not self.available:
            raise ViewerUnavailableError("no terminal emulator found to host viewer windows")

    def build_argv(self, pid: int, subject: str) -> list[str]:
        """Return the full argv (terminal prefix plus viewer command)."""
        self.require()
        assert self._prefix is not None
        title = f"{pid}: {subject}"
        prefix = [part.replace("{title}", title) for part in self._prefix]
        return prefix + viewer_command(pid, subject, python=self._python)

    def launch(self, pid: int, subject: str) -> SubprocessViewer:
        argv = self.build_argv(pid, subject)
        kwargs: dict[str, object] = {"stdin": subprocess.DEVNULL, "env": _viewer_env()}
        if self._headless:
            kwargs["stdout"] = subprocess.DEVNULL
            kwargs["stderr"] = subprocess.DEVNULL
        try:
            process = subprocess.Popen(argv, **kwargs)  # type: ignore[call-overload]
        except OSError as exc:
            raise ViewerUnavailableError(f"cannot start viewer {argv[0]!r}: {exc}") from exc
        LOGGER.debug("Launched viewer pid=%s for subject %r", process.pid, subject)
        wrapped = argv[len(self._prefix) :] if self._prefix else None
        return SubprocessViewer(process, viewer_argv=wrapped)


def _viewer_env() -> dict[str, str]:
    """Return the environment for viewers, keeping this package importable."""
    pythonpath = os.pathsep.join(filter(None, [str(_PACKAGE_ROOT), os.environ.get("PYTHONPATH")]))
    return os.environ | {"PYTHONPATH": pythonpath}


__all__ = [
    "HEADLESS",
    "TERMINAL_TEMPLATES",
    "SubprocessViewer",
    "SubprocessViewerLauncher",
    "detect_terminal",
    "viewer_command",
]
