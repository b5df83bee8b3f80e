"""Viewer process entry: connect, watch the producer, render.

Purpose
-------
Everything the ``lib_log_window viewer PID SUBJECT`` command does once its
arguments are parsed.

Contents
--------
* :func:`run_viewer` – compose channel reader, Rich console, renderer, and
  parent watch, then render until the session ends.

System Role
-----------
Runs in the child process launched by a :class:`SubjectProxy`. The session
ends when the producer closes the channel or disappears.
"""

from __future__ import annotations

import logging

from lib_log_window.adapters import ParentWatch, RichConsoleAdapter, channel_address, connect_channel, is_alive, process_name
from lib_log_window.application import Renderer
from lib_log_window.application.ports import ConsolePort
from lib_log_window.domain import ChannelError, connection_key


LOGGER = logging.getLogger(__name__)


def run_viewer(
    pid: int,
    subject: str,
    *,
    connect_timeout: float = 5.0,
    console: ConsolePort | None = None,
    watch_interval: float = 0.5,
) -> int:
    """Render ``subject`` records sent by process ``pid``; return an exit code.

    Returns ``0`` after a normal end of session and ``1`` when the producer
    channel could not be reached.
    """

    adapter = console if console is not None else RichConsoleAdapter()
    adapter.set_title(f"{process_name(pid)}: {subject}")
    if not is_alive(pid):
        LOGGER.info("Producer pid=%s is not running; nothing to show", pid)
        return 0

    address = channel_address(connection_key(pid, subject))
    try:
        reader = connect_channel(address, timeout=connect_timeout)
    except ChannelError as exc:
        LOGGER.warning("Viewer for subject %r could not connect: %s", subject, exc)
        return 1

    renderer = Renderer(reader, adapter)
    watch = ParentWatch(pid, renderer.stop, interval=watch_interval)
    watch.start()
    try:
        renderer.run()
    finally:
        watch.stop()
        reader.close()
    LOGGER.debug(
        "Viewer for subject %r done: rendered=%s overwritten=%s discarded=%s",
        subject,
        renderer.rendered,
        renderer.overwritten,
        renderer.discarded,
    )
    return 0


__all__ = ["run_viewer"]
