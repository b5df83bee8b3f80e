from __future__ import annotations

import pytest

from lib_log_window.domain import WILDCARD, ConsoleColor, LogRecord, connection_key, is_wildcard, validate_subject
from tests.os_markers import OS_AGNOSTIC

pytestmark = [OS_AGNOSTIC]


def test_record_is_immutable() -> None:
    record = LogRecord(ConsoleColor.GRAY, ConsoleColor.BLACK, "x")

    with pytest.raises(AttributeError):
        record.text = "y"  # type: ignore[misc]


def test_record_rejects_non_palette_colours() -> None:
    with pytest.raises(TypeError):
        LogRecord(10, ConsoleColor.BLACK, "x")  # type: ignore[arg-type]


def test_record_rejects_non_string_text() -> None:
    with pytest.raises(TypeError):
        LogRecord(ConsoleColor.GRAY, ConsoleColor.BLACK, b"x")  # type: ignore[arg-type]


def test_wildcard_is_star() -> None:
    assert WILDCARD == "*"
    assert is_wildcard("*")
    assert not is_wildcard("net")


@pytest.mark.parametrize("subject", ["", None, 3])
def test_validate_subject_rejects_empty_and_non_strings(subject: object) -> None:
    with pytest.raises(ValueError):
        validate_subject(subject)


def test_connection_key_combines_pid_and_subject() -> None:
    assert connection_key(1234, "net") == "PID_1234-net"
