from __future__ import annotations

import pytest

from lib_log_window.domain import ConsoleColor, LogRecord, RecordDecodeError, decode_record, encode_record
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


@pytest.mark.parametrize(
    "text",
    [
        "",
        "plain",
        "two\nlines\n",
        "commas, inside, text",
        "carriage\r\nreturn",
        "ünïcødé ✓ 日本",
    ],
)
def test_encoded_record_decodes_to_identical_record(text: str) -> None:
    record = LogRecord(ConsoleColor.DARK_CYAN, ConsoleColor.DARK_RED, text)

    line = encode_record(record)

    assert "\n" not in line
    assert decode_record(line) == record


def test_encoded_line_carries_wire_ordinals() -> None:
    line = encode_record(LogRecord(ConsoleColor.YELLOW, ConsoleColor.BLACK, "retrying"))

    assert line == "14,0,cmV0cnlpbmc="


def test_decode_accepts_trailing_terminator() -> None:
    record = decode_record("10,0,aGk=\r\n")

    assert record == LogRecord(ConsoleColor.GREEN, ConsoleColor.BLACK, "hi")


@pytest.mark.parametrize(
    "line",
    [
        "",
        "garbage",
        "10,0",
        "x,0,aGk=",
        "10,16,aGk=",
        "-1,0,aGk=",
        "10,0,not base64!",
        "10,0,//79",
    ],
)
def test_malformed_lines_raise_record_decode_error(line: str) -> None:
    with pytest.raises(RecordDecodeError):
        decode_record(line)


def test_record_decode_error_is_a_value_error() -> None:
    with pytest.raises(ValueError):
        decode_record("10,0")
