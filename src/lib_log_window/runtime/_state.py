"""Runtime state container and access helpers."""

from __future__ import annotations

from dataclasses import dataclass
from threading import RLock

from lib_log_window.adapters import SubprocessViewerLauncher
from lib_log_window.application import SubjectRegistry

from ._settings import RuntimeSettings


@dataclass(slots=True)
class LoggingRuntime:
    """Aggregate of live collaborators assembled by the composition root."""

    registry: SubjectRegistry
    launcher: SubprocessViewerLauncher
    settings: RuntimeSettings


_STATE: LoggingRuntime | None = None
_STATE_LOCK = RLock()


def set_runtime(runtime: LoggingRuntime) -> None:
    """Install ``runtime`` as the active singleton."""

    with _STATE_LOCK:
        global _STATE
        _STATE = runtime


def clear_runtime() -> LoggingRuntime | None:
    """Remove and return the active runtime if present."""

    with _STATE_LOCK:
        global _STATE
        runtime, _STATE = _STATE, None
        return runtime


def current_runtime() -> LoggingRuntime:
    """Return the active runtime or raise when uninitialised."""

    with _STATE_LOCK:
        if _STATE is None:
            raise RuntimeError("lib_log_window.init() must be called before using the registry")
        return _STATE


def peek_runtime() -> LoggingRuntime | None:
    """Return the active runtime or ``None``."""

    with _STATE_LOCK:
        return _STATE


def is_initialised() -> bool:
    """Return ``True`` when :func:`lib_log_window.init` has been called."""

    with _STATE_LOCK:
        return _STATE is not None


__all__ = [
    "LoggingRuntime",
    "clear_runtime",
    "current_runtime",
    "is_initialised",
    "peek_runtime",
    "set_runtime",
]
