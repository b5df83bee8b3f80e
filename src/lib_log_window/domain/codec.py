"""Line codec for records crossing a subject channel.

Purpose
-------
Serialise a :class:`LogRecord` into one newline-free line and back again.

Contents
--------
* :func:`encode_record` – ``fore,back,base64(utf-8 text)``.
* :func:`decode_record` – strict inverse raising :class:`RecordDecodeError`.

System Role
-----------
Domain-level wire format shared by proxies and viewers. Base64 keeps newlines
and commas inside the text away from the line and field delimiters.
"""

from __future__ import annotations

import base64
import binascii

from .colors import ConsoleColor
from .errors import RecordDecodeError
from .records import LogRecord


def encode_record(record: LogRecord) -> str:
    """Return the wire line for ``record`` without its terminator.

    Examples
    --------
    >>> encode_record(LogRecord(ConsoleColor.GREEN, ConsoleColor.BLACK, "hi"))
    '10,0,aGk='
    """

    payload = base64.b64encode(record.text.encode("utf-8")).decode("ascii")
    return f"{record.fore.value},{record.back.value},{payload}"


def decode_record(line: str) -> LogRecord:
    """Parse a wire line produced by :func:`encode_record`.

    Examples
    --------
    >>> decode_record("14,0,cmV0cnlpbmc=\\n").text
    'retrying'
    >>> decode_record("99,0,")
    Traceback (most recent call last):
    ...
    lib_log_window.domain.errors.RecordDecodeError: Console color ordinal out of range: 99
    """

    parts = line.rstrip("\r\n").split(",", 2)
    if len(parts) != 3:
        raise RecordDecodeError(f"expected 'fore,back,payload', got {len(parts)} field(s)")
    fore_raw, back_raw, payload = parts
    fore = _decode_color(fore_raw)
    back = _decode_color(back_raw)
    try:
        text = base64.b64decode(payload, validate=True).decode("utf-8")
    except (binascii.Error, UnicodeDecodeError) as exc:
        raise RecordDecodeError(f"invalid payload: {exc}") from exc
    return LogRecord(fore, back, text)


def _decode_color(raw: str) -> ConsoleColor:
    try:
        return ConsoleColor.from_ordinal(int(raw))
    except ValueError as exc:
        raise RecordDecodeError(str(exc)) from exc


__all__ = ["decode_record", "encode_record"]
