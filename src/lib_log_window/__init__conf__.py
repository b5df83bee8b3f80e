"""Static package metadata surfaced by the CLI ``info`` command.

Keep the values in sync with ``pyproject.toml``.
"""

from __future__ import annotations

from typing import Callable

name = "lib_log_window"
title = "Colored per-subject log windows fed over local channels"
version = "0.1.0"
homepage = ""
author = "bitranox"
author_email = "bitranox@gmail.com"
shell_command = "lib_log_window"


def print_info(writer: Callable[[str], None] | None = None) -> None:
    """Emit the metadata banner through ``writer`` (defaults to ``print``).

    Examples
    --------
    >>> lines = []
    >>> print_info(writer=lines.append)
    >>> lines[0]
    'Info for lib_log_window:\\n'
    """

    fields = [
        ("name", name),
        ("title", title),
        ("version", version),
        ("homepage", homepage),
        ("author", author),
        ("author_email", author_email),
        ("shell_command", shell_command),
    ]
    fields = [(label, value) for label, value in fields if value]
    pad = max(len(label) for label, _ in fields)
    emit = writer if writer is not None else (lambda text: print(text, end=""))
    emit(f"Info for {name}:\n")
    emit("\n")
    for label, value in fields:
        emit(f"    {label:<{pad}} = {value}\n")
