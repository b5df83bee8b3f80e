"""Subject naming rules and connection-key derivation."""

from __future__ import annotations

WILDCARD = "*"
"""Reserved token toggling wildcard mode; never registered as a subject."""


def is_wildcard(subject: str) -> bool:
    """Return ``True`` when ``subject`` is the reserved wildcard token."""

    return subject == WILDCARD


def validate_subject(subject: object) -> str:
    """Return ``subject`` when it names a usable channel.

    Examples
    --------
    >>> validate_subject("net")
    'net'
    >>> validate_subject("")
    Traceback (most recent call last):
    ...
    ValueError: subject must be a non-empty string
    """

    if not isinstance(subject, str) or not subject:
        raise ValueError("subject must be a non-empty string")
    return subject


def connection_key(pid: int, subject: str) -> str:
    """Derive the key both channel ends use to find each other.

    Examples
    --------
    >>> connection_key(42, "net")
    'PID_42-net'
    """

    return f"PID_{pid}-{subject}"


__all__ = ["WILDCARD", "connection_key", "is_wildcard", "validate_subject"]
