"""Ports (protocols) the application layer depends on."""

from __future__ import annotations

from .channel import ChannelListenerPort, ChannelReaderPort, ChannelWriterPort
from .console import ConsolePort
from .launcher import ViewerLauncherPort, ViewerProcessPort
from .time import MonotonicClock

__all__ = [
    "ChannelListenerPort",
    "ChannelReaderPort",
    "ChannelWriterPort",
    "ConsolePort",
    "MonotonicClock",
    "ViewerLauncherPort",
    "ViewerProcessPort",
]
