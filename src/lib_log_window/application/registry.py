"""Subject registry: the facade application code talks to.

Purpose
-------
Map subject names to :class:`SubjectProxy` instances, apply the wildcard and
global enable switches, and route posts without ever raising into the caller.

Contents
--------
* :class:`SubjectRegistry` – enable/disable/toggle/post/shutdown.
* :func:`coerce_color` / :func:`coerce_interval` – input normalisation.

System Role
-----------
Explicitly constructed by :func:`lib_log_window.init` (or directly by hosts
that prefer to pass it around). The subject map is the only structure shared
between application threads; creation is single-winner, so a subject never
gets two viewers even when many threads post to it at once.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from datetime import timedelta

from lib_log_window.application.diagnostics import DiagnosticHook, emit_diagnostic
from lib_log_window.application.proxy import SubjectProxy
from lib_log_window.domain import ConsoleColor, LogRecord, is_wildcard


LOGGER = logging.getLogger(__name__)

ProxyFactory = Callable[[str], SubjectProxy]
"""Create an unstarted proxy for a subject."""

ColorLike = ConsoleColor | int | str


def coerce_color(value: ColorLike) -> ConsoleColor:
    """Normalise enum members, wire ordinals, and names into :class:`ConsoleColor`.

    Examples
    --------
    >>> coerce_color("yellow") is ConsoleColor.YELLOW
    True
    >>> coerce_color(2) is ConsoleColor.DARK_GREEN
    True
    """
    if isinstance(value, ConsoleColor):
        return value
    if isinstance(value, bool):
        raise TypeError("console color must not be a bool")
    if isinstance(value, int):
        return ConsoleColor.from_ordinal(value)
    if isinstance(value, str):
        return ConsoleColor.from_name(value)
    raise TypeError(f"unsupported console color: {value!r}")


def coerce_interval(value: float | timedelta | None) -> float:
    """Return ``value`` in seconds; ``None`` means no throttling.

    Examples
    --------
    >>> coerce_interval(timedelta(milliseconds=250))
    0.25
    >>> coerce_interval(None)
    0.0
    """
    if value is None:
        return 0.0
    if isinstance(value, timedelta):
        return value.total_seconds()
    return float(value)


class SubjectRegistry:
    """Process-scoped map of subjects to viewer proxies.

    Parameters
    ----------
    proxy_factory:
        Builds an unstarted :class:`SubjectProxy`; construction must not open
        resources because losing candidates are discarded.
    available:
        ``False`` turns every operation into a silent no-op (no viewer can be
        launched on this host).
    enabled:
        Initial state of the global switch (see :meth:`start_logging`).
    max_subjects:
        Upper bound on concurrently registered subjects; ``None`` for no cap.
    diagnostic:
        Optional hook receiving ``subject_limit_reached`` events.
    """

    def __init__(
        self,
        proxy_factory: ProxyFactory,
        *,
        available: bool = True,
        enabled: bool = True,
        max_subjects: int | None = 16,
        diagnostic: DiagnosticHook = None,
    ) -> None:
        self._proxy_factory = proxy_factory
        self._available = available
        self._enabled = enabled
        self._max_subjects = max_subjects
        self._diagnostic = diagnostic
        self._proxies: dict[str, SubjectProxy] = {}
        self._refused: set[str] = set()
        self._lock = threading.Lock()
        self._wildcard = False

    @property
    def available(self) -> bool:
        return self._available

    @property
    def enabled(self) -> bool:
        return self._enabled

    @property
    def wildcard(self) -> bool:
        return self._wildcard

    def start_logging(self) -> None:
        """Turn the global switch on."""
        self._enabled = True

    def stop_logging(self, clear: bool = False) -> None:
        """Turn the global switch off; ``clear`` also closes every viewer."""
        self._enabled = False
        if clear:
            self.shutdown()

    def enable(self, subject: str) -> None:
        """Open a viewer for ``subject`` (or switch wildcard mode on for ``"*"``)."""
        if not self._active() or not _usable(subject):
            return
        if is_wildcard(subject):
            self._wildcard = True
            return
        self._ensure(subject)

    def disable(self, subject: str) -> None:
        """Close ``subject``'s viewer (or switch wildcard mode off for ``"*"``).

        Subjects created while wildcard mode was on stay open.
        """
        if not self._active() or not _usable(subject):
            return
        if is_wildcard(subject):
            self._wildcard = False
            return
        with self._lock:
            proxy = self._proxies.pop(subject, None)
        if proxy is not None:
            proxy.dispose()

    def toggle(self, subject: str) -> None:
        """Flip ``subject`` between open and closed, or flip wildcard mode."""
        if not self._active() or not _usable(subject):
            return
        if is_wildcard(subject):
            self._wildcard = not self._wildcard
            return
        created: SubjectProxy | None = None
        with self._lock:
            removed = self._proxies.pop(subject, None)
            if removed is None and self._has_room():
                created = self._proxy_factory(subject)
                self._proxies[subject] = created
                self._refused.discard(subject)
        if removed is not None:
            removed.dispose()
        elif created is not None:
            created.start()
        else:
            self._note_limit(subject)

    def contains(self, subject: str) -> bool:
        with self._lock:
            return subject in self._proxies

    def subjects(self) -> list[str]:
        """Return the registered subjects in sorted order."""
        with self._lock:
            return sorted(self._proxies)

    def proxy(self, subject: str) -> SubjectProxy | None:
        """Return the proxy registered for ``subject``, if any."""
        with self._lock:
            return self._proxies.get(subject)

    def post(
        self,
        subject: str,
        text: str,
        fore: ColorLike = ConsoleColor.GRAY,
        back: ColorLike = ConsoleColor.BLACK,
        min_interval: float | timedelta | None = 0.0,
        on_post: Callable[[], None] | None = None,
    ) -> bool:
        """Send ``text`` to ``subject``'s viewer; return ``True`` when forwarded.

        Silent no-op when the facility is unavailable or stopped, when the
        subject is neither registered nor covered by wildcard mode, when the
        post is throttled by ``min_interval``, or when the inputs are unusable.
        ``on_post`` runs only for forwarded records.
        """
        if not self._active() or not _usable(subject) or is_wildcard(subject):
            return False
        try:
            record = LogRecord(coerce_color(fore), coerce_color(back), str(text))
            interval = coerce_interval(min_interval)
        except (TypeError, ValueError) as exc:
            LOGGER.debug("Ignoring post to subject %r: %s", subject, exc)
            return False

        proxy = self.proxy(subject)
        if proxy is None:
            if not self._wildcard:
                return False
            proxy = self._ensure(subject)
            if proxy is None:
                return False

        forwarded = proxy.post(record, interval)
        if forwarded and on_post is not None:
            on_post()
        return forwarded

    def log(
        self,
        subject: str,
        text: str,
        fore: ColorLike = ConsoleColor.GRAY,
        back: ColorLike = ConsoleColor.BLACK,
        *,
        min_interval: float | timedelta | None = 0.0,
        on_post: Callable[[], None] | None = None,
    ) -> bool:
        """Alias of :meth:`post` with keyword-only throttle options."""
        return self.post(subject, text, fore, back, min_interval, on_post)

    def log_line(
        self,
        subject: str,
        text: str,
        fore: ColorLike = ConsoleColor.GRAY,
        back: ColorLike = ConsoleColor.BLACK,
        *,
        min_interval: float | timedelta | None = 0.0,
        on_post: Callable[[], None] | None = None,
    ) -> bool:
        """Like :meth:`log` but terminates ``text`` with a newline."""
        return self.post(subject, f"{text}\n", fore, back, min_interval, on_post)

    def shutdown(self) -> None:
        """Remove and dispose every proxy; repeatable."""
        with self._lock:
            proxies = list(self._proxies.values())
            self._proxies.clear()
        for proxy in proxies:
            proxy.dispose()

    def _active(self) -> bool:
        return self._available and self._enabled

    def _ensure(self, subject: str) -> SubjectProxy | None:
        """Return the proxy for ``subject``, creating and starting it once."""
        with self._lock:
            existing = self._proxies.get(subject)
            full = existing is None and not self._has_room()
        if existing is not None:
            return existing
        if full:
            self._note_limit(subject)
            return None
        candidate = self._proxy_factory(subject)
        with self._lock:
            winner = self._proxies.get(subject)
            if winner is None and self._has_room():
                self._proxies[subject] = candidate
                self._refused.discard(subject)
                winner = candidate
        if winner is candidate:
            candidate.start()
            return candidate
        candidate.dispose()
        if winner is None:
            self._note_limit(subject)
        return winner

    def _has_room(self) -> bool:
        return self._max_subjects is None or len(self._proxies) < self._max_subjects

    def _note_limit(self, subject: str) -> None:
        """Warn once per refused subject until it gets a viewer."""
        with self._lock:
            if subject in self._refused:
                return
            self._refused.add(subject)
        LOGGER.warning("Subject %r not opened: limit of %s subjects reached", subject, self._max_subjects)
        emit_diagnostic(self._diagnostic, "subject_limit_reached", {"subject": subject, "max_subjects": self._max_subjects})


def _usable(subject: object) -> bool:
    return isinstance(subject, str) and bool(subject)


__all__ = ["ColorLike", "ProxyFactory", "SubjectRegistry", "coerce_color", "coerce_interval"]
