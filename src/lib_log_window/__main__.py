"""Module entry point so ``python -m lib_log_window`` (and every viewer window) works.

Viewer processes are started as ``python -m lib_log_window viewer PID SUBJECT``;
this module only forwards to :func:`lib_log_window.cli.main`.
"""

from __future__ import annotations

from .cli import main

if __name__ == "__main__":
    raise SystemExit(main())
