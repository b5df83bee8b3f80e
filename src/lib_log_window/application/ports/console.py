"""Console port describing how a viewer paints records.

Purpose
-------
Define the abstraction the renderer writes through, keeping Rich (or any other
terminal library) out of the application layer.

Contents
--------
* :class:`ConsolePort` – runtime-checkable protocol with ``apply`` and
  ``set_title``.
"""

from __future__ import annotations

from typing import Protocol, runtime_checkable

from lib_log_window.domain.records import LogRecord


@runtime_checkable
class ConsolePort(Protocol):
    """Render records to an interactive console."""

    def apply(self, record: LogRecord) -> None:
        """Set the record's colours and write its text."""

    def set_title(self, title: str) -> None:
        """Label the console window."""


__all__ = ["ConsolePort"]
