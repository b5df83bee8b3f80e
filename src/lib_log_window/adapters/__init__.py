"""Adapter implementations for channels, viewer launching, and consoles."""

from __future__ import annotations

from .channel import (
    UnixChannelListener,
    UnixChannelReader,
    UnixChannelWriter,
    channel_address,
    channel_supported,
    connect_channel,
)
from .console import RichConsoleAdapter
from .launcher import HEADLESS, SubprocessViewer, SubprocessViewerLauncher, viewer_command
from .parent_watch import ParentWatch, is_alive, process_name

__all__ = [
    "HEADLESS",
    "ParentWatch",
    "RichConsoleAdapter",
    "SubprocessViewer",
    "SubprocessViewerLauncher",
    "UnixChannelListener",
    "UnixChannelReader",
    "UnixChannelWriter",
    "channel_address",
    "channel_supported",
    "connect_channel",
    "is_alive",
    "process_name",
    "viewer_command",
]
