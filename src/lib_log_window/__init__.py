"""Public package surface for per-subject console log windows.

Typical use::

    import lib_log_window as logwin

    logwin.init(subjects=["net"])
    logwin.log_line("net", "connected", logwin.ConsoleColor.GREEN)
    logwin.shutdown()

Every posting call is a silent no-op when the facility is unavailable,
stopped, or the subject is not enabled.
"""

from __future__ import annotations

from .application import ProxyState, Renderer, SubjectProxy, SubjectRegistry
from .domain import WILDCARD, ConsoleColor, LogRecord, LogWindowError, ViewerUnavailableError
from .runtime import (
    RuntimeSnapshot,
    contains,
    current_registry,
    disable,
    enable,
    init,
    inspect_runtime,
    is_available,
    is_initialised,
    log,
    log_line,
    post,
    shutdown,
    start_logging,
    stop_logging,
    summary_info,
    toggle,
)

__all__ = [
    "WILDCARD",
    "ConsoleColor",
    "LogRecord",
    "LogWindowError",
    "ProxyState",
    "Renderer",
    "RuntimeSnapshot",
    "SubjectProxy",
    "SubjectRegistry",
    "ViewerUnavailableError",
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
