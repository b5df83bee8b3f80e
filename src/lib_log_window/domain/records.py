"""Domain record travelling from a producer to a viewer window.

Purpose
-------
Provide the immutable ``(fore, back, text)`` triple posted to a subject.

Contents
--------
* :class:`LogRecord` frozen dataclass.

System Role
-----------
Sits in the domain layer; the codec serialises it and the console adapter
paints it.
"""

from __future__ import annotations

from dataclasses import dataclass

from .colors import ConsoleColor


@dataclass(slots=True, frozen=True)
class LogRecord:
    """Immutable coloured chunk of text posted to a subject.

    Attributes
    ----------
    fore:
        Foreground :class:`ConsoleColor` applied before writing ``text``.
    back:
        Background :class:`ConsoleColor` applied before writing ``text``.
    text:
        Payload written verbatim; may contain newlines and commas.

    Examples
    --------
    >>> LogRecord(ConsoleColor.GREEN, ConsoleColor.BLACK, "ok").text
    'ok'
    """

    fore: ConsoleColor
    back: ConsoleColor
    text: str

    def __post_init__(self) -> None:
        if not isinstance(self.fore, ConsoleColor) or not isinstance(self.back, ConsoleColor):
            raise TypeError("fore and back must be ConsoleColor members")
        if not isinstance(self.text, str):
            raise TypeError("text must be a string")


__all__ = ["LogRecord"]
