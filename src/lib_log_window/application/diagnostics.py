"""Diagnostic hook plumbing shared by proxies and the registry."""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import Any, Optional

LOGGER = logging.getLogger(__name__)

DiagnosticHook = Optional[Callable[[str, dict[str, Any]], None]]
"""Callback receiving ``(event_name, payload)`` for lifecycle telemetry."""


def emit_diagnostic(hook: DiagnosticHook, name: str, payload: dict[str, Any]) -> None:
    """Invoke ``hook`` while guarding against callback failures.

    Examples
    --------
    >>> seen = []
    >>> emit_diagnostic(lambda n, p: seen.append((n, p)), "viewer_started", {"subject": "net"})
    >>> seen
    [('viewer_started', {'subject': 'net'})]
    >>> emit_diagnostic(None, "ignored", {})
    """

    if hook is None:
        return
    try:
        hook(name, payload)
    except Exception as exc:  # noqa: BLE001
        LOGGER.error("Diagnostic hook raised while reporting %s", name, exc_info=exc)


__all__ = ["DiagnosticHook", "emit_diagnostic"]
