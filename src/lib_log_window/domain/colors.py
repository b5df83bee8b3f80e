"""Console colour palette shared by producers and viewers.

Purpose
-------
Pin the sixteen-colour console palette to stable ordinals so both ends of a
channel agree on what ``fore`` and ``back`` mean on the wire.

Contents
--------
* :class:`ConsoleColor` enum with conversion helpers and Rich style names.
* ``_RICH_NAMES`` constant mapping palette members to Rich colour names.

System Role
-----------
Domain value type consumed by the codec (ordinals) and by the Rich console
adapter (style names).
"""

from __future__ import annotations

from enum import Enum


class ConsoleColor(Enum):
    """Conventional 16-colour console palette keyed by wire ordinal."""

    BLACK = 0
    DARK_BLUE = 1
    DARK_GREEN = 2
    DARK_CYAN = 3
    DARK_RED = 4
    DARK_MAGENTA = 5
    DARK_YELLOW = 6
    GRAY = 7
    DARK_GRAY = 8
    BLUE = 9
    GREEN = 10
    CYAN = 11
    RED = 12
    MAGENTA = 13
    YELLOW = 14
    WHITE = 15

    @property
    def rich_name(self) -> str:
        """Return the Rich colour name used when painting this member."""

        return _RICH_NAMES[self]

    @classmethod
    def from_name(cls, name: str) -> "ConsoleColor":
        """Resolve ``name`` case-insensitively (``dark-red``, ``DarkRed``, ``dark_red``)."""
        normalized = name.strip().replace("-", "_").upper()
        if normalized in cls.__members__:
            return cls[normalized]
        compact = {member.name.replace("_", ""): member for member in cls}
        try:
            return compact[normalized.replace("_", "")]
        except KeyError as exc:
            raise ValueError(f"Unknown console color: {name!r}") from exc

    @classmethod
    def from_ordinal(cls, value: int) -> "ConsoleColor":
        """Return the member encoded on the wire as ``value``."""
        try:
            return cls(value)
        except ValueError as exc:
            raise ValueError(f"Console color ordinal out of range: {value}") from exc


_RICH_NAMES = {
    ConsoleColor.BLACK: "black",
    ConsoleColor.DARK_BLUE: "blue",
    ConsoleColor.DARK_GREEN: "green",
    ConsoleColor.DARK_CYAN: "cyan",
    ConsoleColor.DARK_RED: "red",
    ConsoleColor.DARK_MAGENTA: "magenta",
    ConsoleColor.DARK_YELLOW: "yellow",
    ConsoleColor.GRAY: "white",
    ConsoleColor.DARK_GRAY: "bright_black",
    ConsoleColor.BLUE: "bright_blue",
    ConsoleColor.GREEN: "bright_green",
    ConsoleColor.CYAN: "bright_cyan",
    ConsoleColor.RED: "bright_red",
    ConsoleColor.MAGENTA: "bright_magenta",
    ConsoleColor.YELLOW: "bright_yellow",
    ConsoleColor.WHITE: "bright_white",
}
# Standard ANSI colour names understood by rich.style.Style.parse.


__all__ = ["ConsoleColor"]
