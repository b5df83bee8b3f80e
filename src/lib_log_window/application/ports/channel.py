"""Ports describing both ends of a subject channel.

Purpose
-------
Let the proxy (listening side) and the renderer (connecting side) depend on
narrow protocols instead of sockets, so tests can swap in fakes.

Contents
--------
* :class:`ChannelWriterPort` – accepted outbound stream owned by a proxy.
* :class:`ChannelListenerPort` – bound endpoint waiting for a viewer.
* :class:`ChannelReaderPort` – viewer-side stream yielding wire lines.
"""

from __future__ import annotations

from typing import Iterator, Protocol, runtime_checkable


@runtime_checkable
class ChannelWriterPort(Protocol):
    """Outbound half of a connected channel."""

    def write_line(self, line: str) -> None:
        """Send ``line`` followed by a newline; raise :class:`OSError` on failure."""

    def close(self) -> None:
        """Release the connection."""


@runtime_checkable
class ChannelListenerPort(Protocol):
    """Endpoint bound to a connection key, waiting for one viewer."""

    @property
    def address(self) -> str:
        """Filesystem or platform address the viewer connects to."""

    def accept(self, timeout: float | None) -> ChannelWriterPort:
        """Block until the viewer connects; raise ``ChannelTimeoutError`` on timeout."""

    def close(self) -> None:
        """Stop listening and remove the endpoint."""


@runtime_checkable
class ChannelReaderPort(Protocol):
    """Inbound half used by the viewer."""

    def lines(self) -> Iterator[str]:
        """Yield wire lines (without terminators) until the channel closes."""

    def close(self) -> None:
        """Release the connection."""


__all__ = ["ChannelListenerPort", "ChannelReaderPort", "ChannelWriterPort"]
