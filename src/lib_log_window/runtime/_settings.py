"""Runtime settings resolved from ``init`` arguments and the environment.

Environment variables win over keyword arguments so operators can reconfigure
an instrumented program without touching its code. Invalid values raise
:class:`ValueError` naming the offending variable.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Iterable

from lib_log_window.application.diagnostics import DiagnosticHook


@dataclass(frozen=True, slots=True)
class RuntimeSettings:
    """Fully resolved configuration consumed by :func:`build_runtime`."""

    enabled: bool = True
    subjects: tuple[str, ...] = ()
    terminal: str | None = None
    connect_timeout: float = 5.0
    write_timeout: float = 0.25
    max_subjects: int | None = 16
    diagnostic_hook: DiagnosticHook = None


def build_runtime_settings(
    *,
    enabled: bool = True,
    subjects: Iterable[str] | None = None,
    terminal: str | None = None,
    connect_timeout: float = 5.0,
    write_timeout: float = 0.25,
    max_subjects: int | None = 16,
    diagnostic_hook: DiagnosticHook = None,
) -> RuntimeSettings:
    """Merge keyword arguments with ``LOG_WINDOW_*`` overrides.

    Examples
    --------
    >>> import os
    >>> _ = os.environ.pop("LOG_WINDOW_SUBJECTS", None)
    >>> build_runtime_settings(subjects=["net", "db"]).subjects
    ('net', 'db')
    """

    resolved_subjects = _env_subjects("LOG_WINDOW_SUBJECTS", tuple(subjects or ()))
    return RuntimeSettings(
        enabled=_env_bool("LOG_WINDOW_ENABLED", enabled),
        subjects=resolved_subjects,
        terminal=os.getenv("LOG_WINDOW_TERMINAL", terminal),
        connect_timeout=_env_positive_float("LOG_WINDOW_CONNECT_TIMEOUT", connect_timeout),
        write_timeout=_env_positive_float("LOG_WINDOW_WRITE_TIMEOUT", write_timeout),
        max_subjects=_env_max_subjects("LOG_WINDOW_MAX_SUBJECTS", max_subjects),
        diagnostic_hook=diagnostic_hook,
    )


def _env_bool(name: str, default: bool) -> bool:
    """Return the boolean value of an environment variable with fallback.

    Examples
    --------
    >>> import os
    >>> _ = os.environ.pop('LOG_WINDOW_EXAMPLE_BOOL', None)
    >>> _env_bool('LOG_WINDOW_EXAMPLE_BOOL', default=True)
    True
    >>> os.environ['LOG_WINDOW_EXAMPLE_BOOL'] = 'off'
    >>> _env_bool('LOG_WINDOW_EXAMPLE_BOOL', default=True)
    False
    >>> _ = os.environ.pop('LOG_WINDOW_EXAMPLE_BOOL')
    """
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def _env_positive_float(name: str, default: float) -> float:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        value = float(default)
    else:
        try:
            value = float(raw)
        except ValueError as exc:
            raise ValueError(f"{name} must be a number of seconds, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _env_max_subjects(name: str, default: int | None) -> int | None:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        value = default
    elif raw.strip().lower() in {"none", "unlimited"}:
        return None
    else:
        try:
            value = int(raw)
        except ValueError as exc:
            raise ValueError(f"{name} must be an integer, got {raw!r}") from exc
    if value is not None and value <= 0:
        raise ValueError(f"{name} must be positive, got {value}")
    return value


def _env_subjects(name: str, default: tuple[str, ...]) -> tuple[str, ...]:
    """Parse a comma-separated subject list, dropping blanks and duplicates.

    Examples
    --------
    >>> import os
    >>> os.environ['LOG_WINDOW_EXAMPLE_SUBJECTS'] = 'net, *,net,,db'
    >>> _env_subjects('LOG_WINDOW_EXAMPLE_SUBJECTS', ())
    ('net', '*', 'db')
    >>> _ = os.environ.pop('LOG_WINDOW_EXAMPLE_SUBJECTS')
    """
    raw = os.getenv(name)
    candidates: Iterable[str] = default if raw is None else raw.split(",")
    seen: dict[str, None] = {}
    for item in candidates:
        subject = item.strip()
        if subject:
            seen.setdefault(subject, None)
    return tuple(seen)


__all__ = ["DiagnosticHook", "RuntimeSettings", "build_runtime_settings"]
