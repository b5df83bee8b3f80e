from __future__ import annotations

import pytest

from lib_log_window.adapters.console.rich_console import RichConsoleAdapter
from lib_log_window.domain import ConsoleColor, LogRecord


def _record(text: str = "retrying") -> LogRecord:
    return LogRecord(ConsoleColor.YELLOW, ConsoleColor.BLACK, text)


def test_rich_console_adapter_writes_text_verbatim(record_console) -> None:
    adapter = RichConsoleAdapter(console=record_console)
    adapter.apply(LogRecord(ConsoleColor.GREEN, ConsoleColor.BLACK, "connected\n"))
    adapter.apply(_record("[bold]not markup[/bold] :smile:"))
    output = record_console.export_text()
    assert output == "connected\n[bold]not markup[/bold] :smile:"


def test_rich_console_adapter_applies_record_colours(record_console) -> None:
    adapter = RichConsoleAdapter(console=record_console)
    adapter.apply(_record())
    output = record_console.export_text(styles=True)
    assert "retrying" in output
    assert "\x1b[" in output


def test_rich_console_adapter_respects_no_color(record_console) -> None:
    adapter = RichConsoleAdapter(console=record_console, no_color=True)
    adapter.apply(_record())
    assert adapter.style_for(_record()) == ""
    assert record_console.export_text(styles=True) == "retrying"


@pytest.mark.parametrize(
    ("fore", "back", "style"),
    [
        (ConsoleColor.YELLOW, ConsoleColor.BLACK, "bright_yellow on black"),
        (ConsoleColor.WHITE, ConsoleColor.DARK_RED, "bright_white on red"),
        (ConsoleColor.GRAY, ConsoleColor.DARK_BLUE, "white on blue"),
    ],
)
def test_style_for_maps_palette_to_rich_names(fore: ConsoleColor, back: ConsoleColor, style: str) -> None:
    adapter = RichConsoleAdapter(no_color=False)
    assert adapter.style_for(LogRecord(fore, back, "x")) == style


def test_set_title_is_harmless_off_terminal(record_console) -> None:
    adapter = RichConsoleAdapter(console=record_console)
    adapter.set_title("python: net")
