"""Rich-powered console adapter implementing :class:`ConsolePort`.

Purpose
-------
Paint decoded records in the viewer window with their foreground and
background colours.

Contents
--------
* :class:`RichConsoleAdapter` - adapter constructed by the ``viewer`` command.

System Role
-----------
The only human-facing sink; honours ``force_color``/``no_color`` overrides
the same way Rich does for every other console.
"""

from __future__ import annotations

from rich.console import Console

from lib_log_window.application.ports.console import ConsolePort
from lib_log_window.domain.records import LogRecord


class RichConsoleAdapter(ConsolePort):
    """Render records with Rich, one style per record."""

    def __init__(
        self,
        *,
        console: Console | None = None,
        force_color: bool = False,
        no_color: bool = False,
    ) -> None:
        """Configure the console adapter with colour overrides."""
        if console is not None:
            self._console = console
        else:
            self._console = Console(force_terminal=force_color or None, no_color=no_color)
        self._no_color = no_color

    def apply(self, record: LogRecord) -> None:
        """Write ``record.text`` in ``fore on back`` without adding a newline.

        Examples
        --------
        >>> from io import StringIO
        >>> from lib_log_window.domain.colors import ConsoleColor
        >>> console = Console(file=StringIO(), record=True)
        >>> adapter = RichConsoleAdapter(console=console)
        >>> adapter.apply(LogRecord(ConsoleColor.YELLOW, ConsoleColor.BLACK, "retrying"))
        >>> console.export_text()
        'retrying'
        """
        self._console.print(
            record.text,
            style=self.style_for(record),
            end="",
            markup=False,
            highlight=False,
            emoji=False,
            soft_wrap=True,
        )

    def set_title(self, title: str) -> None:
        self._console.set_window_title(title)

    def style_for(self, record: LogRecord) -> str:
        """Return the Rich style string used for ``record``."""
        if self._no_color:
            return ""
        return f"{record.fore.rich_name} on {record.back.rich_name}"


__all__ = ["RichConsoleAdapter"]
