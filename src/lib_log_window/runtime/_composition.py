"""Runtime composition helpers wiring adapters into the registry.

Purpose
-------
Translate :class:`RuntimeSettings` into a live :class:`LoggingRuntime`: one
launcher, a listener factory bound to the configured timeouts, and a
:class:`SubjectRegistry` whose proxies share them.

System Role
-----------
Keeps adapters out of the application layer; ``lib_log_window.runtime``
exposes only the facade.
"""

from __future__ import annotations

import logging
import os
from functools import partial

from lib_log_window.adapters import SubprocessViewerLauncher, UnixChannelListener, channel_address, channel_supported
from lib_log_window.application import SubjectProxy, SubjectRegistry
from lib_log_window.application.ports import ChannelListenerPort

from ._settings import RuntimeSettings
from ._state import LoggingRuntime


LOGGER = logging.getLogger(__name__)


def build_runtime(settings: RuntimeSettings, *, launcher: SubprocessViewerLauncher | None = None) -> LoggingRuntime:
    """Assemble the runtime and open the subjects listed in ``settings``."""

    launcher = launcher if launcher is not None else SubprocessViewerLauncher(terminal=settings.terminal)
    available = launcher.available and channel_supported()
    if not available:
        LOGGER.warning("Console windows unavailable: no viewer launcher or no Unix domain sockets on this host")

    pid = os.getpid()
    listener_factory = partial(_open_listener, write_timeout=settings.write_timeout)

    def proxy_factory(subject: str) -> SubjectProxy:
        return SubjectProxy(
            subject,
            launcher=launcher,
            listener_factory=listener_factory,
            connect_timeout=settings.connect_timeout,
            pid=pid,
            diagnostic=settings.diagnostic_hook,
        )

    registry = SubjectRegistry(
        proxy_factory,
        available=available,
        enabled=settings.enabled,
        max_subjects=settings.max_subjects,
        diagnostic=settings.diagnostic_hook,
    )
    for subject in settings.subjects:
        registry.enable(subject)
    return LoggingRuntime(registry=registry, launcher=launcher, settings=settings)


def _open_listener(key: str, *, write_timeout: float) -> ChannelListenerPort:
    return UnixChannelListener(channel_address(key), write_timeout=write_timeout)


__all__ = ["build_runtime"]
