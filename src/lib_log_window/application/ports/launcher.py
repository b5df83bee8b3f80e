"""Port for spawning and supervising viewer processes."""

from __future__ import annotations

from typing import Protocol, runtime_checkable


@runtime_checkable
class ViewerProcessPort(Protocol):
    """Handle to one running viewer."""

    @property
    def pid(self) -> int: ...

    def wait(self, timeout: float | None = None) -> int | None:
        """Block until the viewer exits and return its exit code."""

    def poll(self) -> int | None:
        """Return the exit code, or ``None`` while running."""

    def terminate(self) -> None:
        """Ask the viewer to stop; must tolerate an already exited process."""


@runtime_checkable
class ViewerLauncherPort(Protocol):
    """Start viewer processes for ``(producer pid, subject)`` pairs."""

    @property
    def available(self) -> bool:
        """``True`` when viewers can be launched on this host."""

    def launch(self, pid: int, subject: str) -> ViewerProcessPort:
        """Start a viewer connecting back to ``pid``'s channel for ``subject``."""


__all__ = ["ViewerLauncherPort", "ViewerProcessPort"]
