"""Per-subject proxy owning one viewer process and its channel.

Purpose
-------
Keep exactly one live ``(viewer process, channel)`` pair per subject, restart
it whenever the viewer exits, and forward records without ever letting a
channel failure reach the caller.

Contents
--------
* :class:`ProxyState` – lifecycle states exposed for inspection and tests.
* :class:`SubjectProxy` – start/post/dispose implementation.

System Role
-----------
Created and owned by :class:`lib_log_window.application.registry.SubjectRegistry`.
``start`` is the only blocking call (bounded by ``connect_timeout``); ``post``
holds the write lock only for a throttle check and one bounded socket send.

Alignment Notes
---------------
Threading follows the queue adapter idiom: daemon watcher threads, guarded
diagnostic hooks, and module-level ``logging`` for operator-facing messages.
"""

from __future__ import annotations

import logging
import os
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass, replace
from enum import Enum
from typing import Any

from lib_log_window.application.diagnostics import DiagnosticHook, emit_diagnostic
from lib_log_window.application.ports import (
    ChannelListenerPort,
    ChannelWriterPort,
    MonotonicClock,
    ViewerLauncherPort,
    ViewerProcessPort,
)
from lib_log_window.domain import (
    ChannelError,
    ChannelTimeoutError,
    LogRecord,
    LogWindowError,
    connection_key,
    encode_record,
    validate_subject,
)


LOGGER = logging.getLogger(__name__)

ListenerFactory = Callable[[str], ChannelListenerPort]
"""Build a listening endpoint for a connection key."""


class ProxyState(Enum):
    """Lifecycle of a subject proxy."""

    UNINITIALIZED = "uninitialized"
    STARTING = "starting"
    CONNECTED = "connected"
    DISCONNECTED = "disconnected"
    DISPOSED = "disposed"


@dataclass(slots=True, frozen=True)
class _ViewerSession:
    """Resources of one viewer generation; ``writer`` is set once connected."""

    generation: int
    listener: ChannelListenerPort
    process: ViewerProcessPort
    writer: ChannelWriterPort | None = None


class SubjectProxy:
    """Own the viewer lifecycle for a single subject.

    Parameters
    ----------
    subject:
        Subject name shown in the viewer and used for the connection key.
    launcher:
        Port starting viewer processes.
    listener_factory:
        Callable returning a bound :class:`ChannelListenerPort` for a key.
    connect_timeout:
        Seconds ``start`` waits for the viewer to connect. A viewer that
        misses it is still accepted in the background; posts are dropped
        until it connects or exits.
    clock:
        Monotonic clock used for throttling.
    pid:
        Producer process id passed to viewers; defaults to :func:`os.getpid`.
    diagnostic:
        Optional ``(name, payload)`` hook for lifecycle events.
    """

    def __init__(
        self,
        subject: str,
        *,
        launcher: ViewerLauncherPort,
        listener_factory: ListenerFactory,
        connect_timeout: float | None = 5.0,
        clock: MonotonicClock = time.monotonic,
        pid: int | None = None,
        diagnostic: DiagnosticHook = None,
    ) -> None:
        self._subject = validate_subject(subject)
        self._launcher = launcher
        self._listener_factory = listener_factory
        self._connect_timeout = connect_timeout
        self._clock = clock
        self._pid = os.getpid() if pid is None else pid
        self._key = connection_key(self._pid, subject)
        self._diagnostic = diagnostic
        self._lifecycle_lock = threading.Lock()
        self._write_lock = threading.Lock()
        self._state = ProxyState.UNINITIALIZED
        self._session: _ViewerSession | None = None
        self._pending: _ViewerSession | None = None
        self._generation = 0
        self._last_accepted: float | None = None

    @property
    def subject(self) -> str:
        return self._subject

    @property
    def key(self) -> str:
        """Connection key shared with the viewer."""
        return self._key

    @property
    def state(self) -> ProxyState:
        return self._state

    @property
    def connected(self) -> bool:
        return self._state is ProxyState.CONNECTED

    @property
    def generation(self) -> int:
        """Number of viewer generations started so far."""
        return self._generation

    def start(self) -> None:
        """Replace any current viewer with a fresh, connected one.

        Blocks until the viewer connects or ``connect_timeout`` elapses.
        Never raises for launch or channel failures; those are logged and
        reported through the diagnostic hook.
        """
        with self._lifecycle_lock:
            with self._write_lock:
                if self._state is ProxyState.DISPOSED:
                    return
                self._generation += 1
                generation = self._generation
                previous, self._session = self._session, None
                self._state = ProxyState.STARTING
            if previous is not None:
                self._teardown(previous)
            self._start_generation(generation)

    def post(self, record: LogRecord, min_interval: float = 0.0) -> bool:
        """Forward ``record`` unless throttled; return ``True`` when forwarded.

        ``min_interval`` (seconds) throttles against the last *accepted*
        post. A forwarded record whose write fails is dropped silently.
        """
        events: list[tuple[str, dict[str, Any]]] = []
        with self._write_lock:
            if self._state is ProxyState.DISPOSED:
                return False
            if min_interval > 0 and self._last_accepted is not None:
                elapsed = self._clock() - self._last_accepted
                if elapsed < min_interval:
                    events.append(("post_throttled", {"subject": self._subject, "elapsed": elapsed}))
                    forwarded = False
                else:
                    forwarded = True
            else:
                forwarded = True
            if forwarded:
                failure = self._write(record)
                if failure is not None:
                    events.append(("write_failed", {"subject": self._subject, "reason": failure}))
                self._last_accepted = self._clock()
        for name, payload in events:
            emit_diagnostic(self._diagnostic, name, payload)
        return forwarded

    def dispose(self) -> None:
        """Stop the viewer for good; safe to call repeatedly.

        The state flips to ``DISPOSED`` before anything is torn down so the
        exit watcher of the killed viewer does not restart it.
        """
        with self._write_lock:
            previous = self._state
            if previous is ProxyState.DISPOSED:
                return
            self._state = ProxyState.DISPOSED
            session, self._session = self._session, None
            pending = self._pending
        if previous is ProxyState.UNINITIALIZED:
            return
        if pending is not None:
            self._close_quietly("listener", pending.listener.close)
        with self._lifecycle_lock:
            if session is not None:
                self._teardown(session)
        emit_diagnostic(self._diagnostic, "proxy_disposed", {"subject": self._subject})

    def _start_generation(self, generation: int) -> None:
        try:
            listener = self._listener_factory(self._key)
        except (ChannelError, OSError) as exc:
            self._fail_start(generation, "viewer_launch_failed", exc)
            return
        try:
            process = self._launcher.launch(self._pid, self._subject)
        except (LogWindowError, OSError) as exc:
            self._close_quietly("listener", listener.close)
            self._fail_start(generation, "viewer_launch_failed", exc)
            return

        session = _ViewerSession(generation=generation, listener=listener, process=process)
        with self._write_lock:
            disposed = self._state is ProxyState.DISPOSED
            if not disposed:
                self._pending = session
        if disposed:
            self._teardown(session)
            return
        self._watch(process, generation)
        emit_diagnostic(self._diagnostic, "viewer_started", {"subject": self._subject, "pid": process.pid, "generation": generation})
        LOGGER.info("Started viewer pid=%s for subject %r (generation %s)", process.pid, self._subject, generation)

        timed_out = False
        try:
            session = replace(session, writer=listener.accept(self._connect_timeout))
        except ChannelTimeoutError as exc:
            timed_out = True
            LOGGER.warning("Viewer for subject %r did not connect yet: %s", self._subject, exc)
            emit_diagnostic(self._diagnostic, "viewer_connect_timeout", {"subject": self._subject, "timeout": self._connect_timeout})
        except ChannelError as exc:
            LOGGER.debug("Viewer connect for subject %r aborted: %s", self._subject, exc)

        with self._write_lock:
            self._pending = None
            install = self._state is not ProxyState.DISPOSED and generation == self._generation
            if install:
                self._session = session
                if session.writer is not None:
                    self._state = ProxyState.CONNECTED
        if not install:
            self._teardown(session)
        elif timed_out:
            self._accept_late(session)

    def _accept_late(self, session: _ViewerSession) -> None:
        """Keep accepting on ``session``'s listener until a viewer connects or teardown closes it."""

        def accept() -> None:
            try:
                writer = session.listener.accept(None)
            except (ChannelError, OSError) as exc:
                LOGGER.debug("Late accept for subject %r ended: %s", self._subject, exc)
                return
            with self._write_lock:
                current = self._session
                install = (
                    self._state is not ProxyState.DISPOSED
                    and current is not None
                    and current.generation == session.generation
                    and current.writer is None
                )
                if install:
                    self._session = replace(current, writer=writer)
                    self._state = ProxyState.CONNECTED
            if not install:
                self._close_quietly("writer", writer.close)
                return
            LOGGER.info("Viewer for subject %r connected late (generation %s)", self._subject, session.generation)
            emit_diagnostic(self._diagnostic, "viewer_connected_late", {"subject": self._subject, "generation": session.generation})

        thread = threading.Thread(target=accept, name=f"viewer-accept-{self._subject}", daemon=True)
        thread.start()

    def _fail_start(self, generation: int, name: str, exc: BaseException) -> None:
        LOGGER.warning("Could not start viewer for subject %r: %s", self._subject, exc)
        emit_diagnostic(self._diagnostic, name, {"subject": self._subject, "exception": repr(exc)})
        with self._write_lock:
            if self._state is not ProxyState.DISPOSED and generation == self._generation:
                self._state = ProxyState.DISCONNECTED

    def _watch(self, process: ViewerProcessPort, generation: int) -> None:
        """Restart the viewer when ``process`` exits, unless superseded."""

        def wait_for_exit() -> None:
            try:
                code = process.wait()
            except Exception as exc:  # noqa: BLE001
                LOGGER.error("Waiting for viewer of subject %r failed", self._subject, exc_info=exc)
                return
            self._on_viewer_exit(generation, code)

        thread = threading.Thread(target=wait_for_exit, name=f"viewer-watch-{self._subject}", daemon=True)
        thread.start()

    def _on_viewer_exit(self, generation: int, code: int | None) -> None:
        with self._write_lock:
            if self._state is ProxyState.DISPOSED or generation != self._generation:
                return
            self._state = ProxyState.DISCONNECTED
        LOGGER.info("Viewer for subject %r exited with %s; restarting", self._subject, code)
        emit_diagnostic(self._diagnostic, "viewer_exited", {"subject": self._subject, "code": code, "generation": generation})
        self.start()

    def _write(self, record: LogRecord) -> str | None:
        """Write under the held write lock; return a failure reason or ``None``."""
        session = self._session
        if session is None or session.writer is None:
            return "not_connected"
        try:
            session.writer.write_line(encode_record(record))
        except OSError as exc:
            # A partial send leaves a fragment on the wire; nothing may follow it.
            LOGGER.debug("Dropped record for subject %r and closed its channel: %s", self._subject, exc)
            self._session = replace(session, writer=None)
            self._state = ProxyState.DISCONNECTED
            self._close_quietly("writer", session.writer.close)
            return repr(exc)
        return None

    def _teardown(self, session: _ViewerSession) -> None:
        """Release a session; every step runs even if an earlier one fails."""
        if session.writer is not None:
            self._close_quietly("writer", session.writer.close)
        self._close_quietly("listener", session.listener.close)
        self._close_quietly("process", session.process.terminate)

    def _close_quietly(self, label: str, action: Callable[[], None]) -> None:
        try:
            action()
        except Exception as exc:  # noqa: BLE001
            LOGGER.warning("Teardown of %s for subject %r failed", label, self._subject, exc_info=exc)

    def __repr__(self) -> str:
        return f"SubjectProxy(subject={self._subject!r}, state={self._state.value})"


__all__ = ["ListenerFactory", "ProxyState", "SubjectProxy"]
