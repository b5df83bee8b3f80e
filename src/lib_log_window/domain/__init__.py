"""Domain values and containers used by the console window facility."""

from __future__ import annotations

from .codec import decode_record, encode_record
from .colors import ConsoleColor
from .errors import (
    ChannelError,
    ChannelTimeoutError,
    LogWindowError,
    RecordDecodeError,
    ViewerUnavailableError,
)
from .mailbox import Mailbox
from .records import LogRecord
from .subjects import WILDCARD, connection_key, is_wildcard, validate_subject

__all__ = [
    "WILDCARD",
    "ChannelError",
    "ChannelTimeoutError",
    "ConsoleColor",
    "LogRecord",
    "LogWindowError",
    "Mailbox",
    "RecordDecodeError",
    "ViewerUnavailableError",
    "connection_key",
    "decode_record",
    "encode_record",
    "is_wildcard",
    "validate_subject",
]
