"""Error taxonomy for the console window logging facility.

None of these escape the public posting API; they travel between adapters and
the proxy/renderer, which handle them locally.
"""

from __future__ import annotations


class LogWindowError(RuntimeError):
    """Base class for failures raised inside the facility."""


class ViewerUnavailableError(LogWindowError):
    """The viewer cannot be launched on this host (permanent)."""


class ChannelError(LogWindowError):
    """A channel endpoint failed to connect or accept (transient)."""


class ChannelTimeoutError(ChannelError):
    """The peer did not connect within the bounded wait."""


class RecordDecodeError(LogWindowError, ValueError):
    """A wire line could not be decoded into a record."""


__all__ = [
    "ChannelError",
    "ChannelTimeoutError",
    "LogWindowError",
    "RecordDecodeError",
    "ViewerUnavailableError",
]
