"""Application layer: proxies, registry, and renderer built on the ports."""

from __future__ import annotations

from .diagnostics import DiagnosticHook, emit_diagnostic
from .proxy import ProxyState, SubjectProxy
from .registry import SubjectRegistry, coerce_color, coerce_interval
from .renderer import Renderer

__all__ = [
    "DiagnosticHook",
    "ProxyState",
    "Renderer",
    "SubjectProxy",
    "SubjectRegistry",
    "coerce_color",
    "coerce_interval",
    "emit_diagnostic",
]
