"""Demonstration helper used by the ``demo`` CLI command.

Opens one window per subject, posts a handful of coloured lines to each, and
tears everything down again, so operators can check that their terminal
setup works before instrumenting a real program.
"""

from __future__ import annotations

import time
from typing import Any, Sequence

from lib_log_window import runtime
from lib_log_window.domain import ConsoleColor

DEMO_PALETTE: tuple[tuple[ConsoleColor, ConsoleColor], ...] = (
    (ConsoleColor.GREEN, ConsoleColor.BLACK),
    (ConsoleColor.YELLOW, ConsoleColor.BLACK),
    (ConsoleColor.CYAN, ConsoleColor.BLACK),
    (ConsoleColor.WHITE, ConsoleColor.DARK_RED),
)


def run_demo(
    *,
    subjects: Sequence[str] = ("net", "db"),
    count: int = 5,
    interval: float = 0.5,
    terminal: str | None = None,
    hold: float = 1.0,
) -> dict[str, Any]:
    """Post ``count`` sample lines to every subject and report what happened.

    Returns a summary with ``available``, ``subjects`` and ``forwarded``
    (records per subject that reached the proxy).
    """

    if runtime.is_initialised():
        raise RuntimeError("run_demo() needs its own runtime; call lib_log_window.shutdown() first")
    registry = runtime.init(subjects=subjects, terminal=terminal)
    forwarded = {subject: 0 for subject in subjects}
    try:
        for index in range(count):
            fore, back = DEMO_PALETTE[index % len(DEMO_PALETTE)]
            for subject in subjects:
                if registry.log_line(subject, f"[{subject}] demo line {index + 1}/{count}", fore, back):
                    forwarded[subject] += 1
            time.sleep(interval)
        time.sleep(hold)
        return {
            "available": registry.available,
            "subjects": registry.subjects(),
            "forwarded": forwarded,
        }
    finally:
        runtime.shutdown()


__all__ = ["DEMO_PALETTE", "run_demo"]
