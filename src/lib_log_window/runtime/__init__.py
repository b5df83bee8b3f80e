"""Runtime façade over the process-wide subject registry.

Purpose
-------
Expose a stable entry point (``init``, ``enable``, ``post``, ``shutdown``, …)
so host applications do not wire proxies and adapters themselves.

Contents
--------
* ``init`` – composition root; registers ``shutdown`` with :mod:`atexit`.
* ``enable`` / ``disable`` / ``toggle`` / ``contains`` – subject management.
* ``post`` / ``log`` / ``log_line`` – never-raising record submission.
* ``start_logging`` / ``stop_logging`` – global switch.
* ``shutdown`` – deterministic, repeatable teardown.
* ``summary_info`` – metadata banner used by the CLI.

System Role
-----------
Outer shell of the package. Every call except ``init`` and
``current_registry`` is a silent no-op before ``init`` so instrumentation can
stay in code paths that run without a configured facility.
"""

from __future__ import annotations

import atexit
import logging
from dataclasses import dataclass
from datetime import timedelta
from typing import Callable, Iterable

from lib_log_window.application import SubjectRegistry
from lib_log_window.application.diagnostics import DiagnosticHook
from lib_log_window.application.registry import ColorLike
from lib_log_window.domain import ConsoleColor, ViewerUnavailableError

from ._composition import build_runtime
from ._settings import RuntimeSettings, build_runtime_settings
from ._state import LoggingRuntime, clear_runtime, current_runtime, is_initialised, peek_runtime, set_runtime


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RuntimeSnapshot:
    """Immutable view over the active runtime."""

    available: bool
    enabled: bool
    wildcard: bool
    subjects: tuple[str, ...]
    terminal: str | None
    connect_timeout: float


__all__ = [
    "LoggingRuntime",
    "RuntimeSettings",
    "RuntimeSnapshot",
    "contains",
    "current_registry",
    "disable",
    "enable",
    "init",
    "inspect_runtime",
    "is_available",
    "is_initialised",
    "log",
    "log_line",
    "post",
    "shutdown",
    "start_logging",
    "stop_logging",
    "summary_info",
    "toggle",
]


def init(
    *,
    enabled: bool = True,
    subjects: Iterable[str] | None = None,
    terminal: str | None = None,
    connect_timeout: float = 5.0,
    write_timeout: float = 0.25,
    max_subjects: int | None = 16,
    diagnostic_hook: DiagnosticHook = None,
    strict: bool = False,
) -> SubjectRegistry:
    """Compose the runtime and install it as the process-wide singleton.

    Inputs
    ------
    enabled:
        Initial global switch (``LOG_WINDOW_ENABLED``).
    subjects:
        Subjects to open right away; ``"*"`` switches wildcard mode on
        (``LOG_WINDOW_SUBJECTS``, comma separated).
    terminal:
        Terminal command prefix, ``"none"`` for headless viewers, ``None`` to
        auto-detect (``LOG_WINDOW_TERMINAL``).
    connect_timeout, write_timeout:
        Bounded waits in seconds for a viewer to connect and for one record
        send (``LOG_WINDOW_CONNECT_TIMEOUT`` / ``LOG_WINDOW_WRITE_TIMEOUT``).
    max_subjects:
        Cap on concurrently open subjects (``LOG_WINDOW_MAX_SUBJECTS``).
    diagnostic_hook:
        Callback receiving lifecycle events; exceptions it raises are logged.
    strict:
        Raise :class:`ViewerUnavailableError` instead of degrading to no-ops
        when no viewer can be launched.

    Outputs
    -------
    The installed :class:`SubjectRegistry`, for hosts that prefer passing it
    around explicitly.

    Side Effects
    ------------
    Raises :class:`RuntimeError` when already initialised and
    :class:`ValueError` for invalid environment overrides. Spawns viewers for
    the initial subjects and registers :func:`shutdown` with :mod:`atexit`.
    """

    if is_initialised():
        raise RuntimeError(
            "lib_log_window.init() cannot be called twice without shutdown(); call lib_log_window.shutdown() first",
        )
    settings = build_runtime_settings(
        enabled=enabled,
        subjects=subjects,
        terminal=terminal,
        connect_timeout=connect_timeout,
        write_timeout=write_timeout,
        max_subjects=max_subjects,
        diagnostic_hook=diagnostic_hook,
    )
    runtime = build_runtime(settings)
    if strict and not runtime.registry.available:
        runtime.registry.shutdown()
        raise ViewerUnavailableError("console windows are not available on this host")
    set_runtime(runtime)
    atexit.register(shutdown)
    return runtime.registry


def current_registry() -> SubjectRegistry:
    """Return the installed registry; raises :class:`RuntimeError` before ``init``."""

    return current_runtime().registry


def is_available() -> bool:
    """Return ``True`` when initialised and viewers can be launched."""

    runtime = peek_runtime()
    return runtime is not None and runtime.registry.available


def enable(subject: str) -> None:
    registry = _registry()
    if registry is not None:
        registry.enable(subject)


def disable(subject: str) -> None:
    registry = _registry()
    if registry is not None:
        registry.disable(subject)


def toggle(subject: str) -> None:
    registry = _registry()
    if registry is not None:
        registry.toggle(subject)


def contains(subject: str) -> bool:
    registry = _registry()
    return registry is not None and registry.contains(subject)


def start_logging() -> None:
    registry = _registry()
    if registry is not None:
        registry.start_logging()


def stop_logging(clear: bool = False) -> None:
    registry = _registry()
    if registry is not None:
        registry.stop_logging(clear)


def post(
    subject: str,
    text: str,
    fore: ColorLike = ConsoleColor.GRAY,
    back: ColorLike = ConsoleColor.BLACK,
    min_interval: float | timedelta | None = 0.0,
    on_post: Callable[[], None] | None = None,
) -> bool:
    """Send ``text`` to ``subject``; see :meth:`SubjectRegistry.post`."""

    registry = _registry()
    if registry is None:
        return False
    return registry.post(subject, text, fore, back, min_interval, on_post)


def log(
    subject: str,
    text: str,
    fore: ColorLike = ConsoleColor.GRAY,
    back: ColorLike = ConsoleColor.BLACK,
    *,
    min_interval: float | timedelta | None = 0.0,
    on_post: Callable[[], None] | None = None,
) -> bool:
    return post(subject, text, fore, back, min_interval, on_post)


def log_line(
    subject: str,
    text: str,
    fore: ColorLike = ConsoleColor.GRAY,
    back: ColorLike = ConsoleColor.BLACK,
    *,
    min_interval: float | timedelta | None = 0.0,
    on_post: Callable[[], None] | None = None,
) -> bool:
    return post(subject, f"{text}\n", fore, back, min_interval, on_post)


def shutdown() -> None:
    """Close every viewer and clear the singleton; safe to call repeatedly."""

    runtime = clear_runtime()
    if runtime is None:
        return
    atexit.unregister(shutdown)
    runtime.registry.shutdown()


def inspect_runtime() -> RuntimeSnapshot:
    """Return a read-only snapshot of the current runtime state."""

    runtime = current_runtime()
    registry = runtime.registry
    return RuntimeSnapshot(
        available=registry.available,
        enabled=registry.enabled,
        wildcard=registry.wildcard,
        subjects=tuple(registry.subjects()),
        terminal=runtime.settings.terminal,
        connect_timeout=runtime.settings.connect_timeout,
    )


def summary_info() -> str:
    """Return the metadata banner used by the CLI entry point.

    Outputs
    -------
    str
        Multi-line banner ending with a newline.
    """

    from .. import __init__conf__

    lines: list[str] = []

    def _capture(text: str) -> None:
        lines.append(text)

    __init__conf__.print_info(writer=_capture)
    return "".join(lines)


def _registry() -> SubjectRegistry | None:
    runtime = peek_runtime()
    if runtime is None:
        LOGGER.debug("lib_log_window.init() has not been called; ignoring call")
        return None
    return runtime.registry
