"""Unix domain socket channel between a proxy and its viewer.

Purpose
-------
Give every subject a private local byte stream. The proxy binds and listens,
the viewer connects, and newline-terminated records flow one way.

Contents
--------
* :func:`channel_address` – deterministic socket path for a connection key.
* :func:`channel_supported` – platform guard used for availability checks.
* :class:`UnixChannelListener` / :class:`UnixChannelWriter` – producer side.
* :func:`connect_channel` / :class:`UnixChannelReader` – viewer side.

System Role
-----------
Implements the channel ports. Connect and accept waits are bounded; failures
surface as :class:`ChannelError` so the proxy can treat them as transient.
"""

from __future__ import annotations

import hashlib
import logging
import os
import socket
import tempfile
import time
from pathlib import Path
from typing import Iterator

from lib_log_window.application.ports.channel import ChannelListenerPort, ChannelReaderPort, ChannelWriterPort
from lib_log_window.domain.errors import ChannelError, ChannelTimeoutError


LOGGER = logging.getLogger(__name__)

SOCKET_DIR_NAME = "lib_log_window"
_POLL_SLICE = 0.1


def channel_supported() -> bool:
    """Return ``True`` when the interpreter offers Unix domain sockets."""

    return hasattr(socket, "AF_UNIX")


def channel_address(key: str, *, directory: str | Path | None = None) -> str:
    """Return the socket path both ends derive from ``key``.

    The file name is a digest of the key so arbitrary subject names stay
    filesystem safe and within the Unix socket path limit.

    Examples
    --------
    >>> channel_address("PID_1-net", directory="/tmp/x")
    '/tmp/x/PID_1-28615dd4366f2ddcb683.sock'
    """

    base = Path(directory) if directory is not None else Path(tempfile.gettempdir()) / SOCKET_DIR_NAME
    prefix = key.split("-", 1)[0]
    digest = hashlib.sha1(key.encode("utf-8")).hexdigest()[:20]
    return str(base / f"{prefix}-{digest}.sock")


class UnixChannelWriter(ChannelWriterPort):
    """Connected outbound stream with a bounded send timeout."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock

    def write_line(self, line: str) -> None:
        """Send ``line`` plus a newline; raises :class:`OSError` on failure."""
        self._sock.sendall(f"{line}\n".encode("utf-8"))

    def close(self) -> None:
        """Shut down and close the socket, ignoring peers that already left."""
        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        self._sock.close()


class UnixChannelListener(ChannelListenerPort):
    """Listening endpoint accepting exactly one viewer.

    Examples
    --------
    >>> import tempfile
    >>> with tempfile.TemporaryDirectory() as tmp:
    ...     listener = UnixChannelListener(channel_address("PID_1-doc", directory=tmp))
    ...     listener.close()
    """

    def __init__(self, address: str, *, write_timeout: float | None = 0.25) -> None:
        self._address = address
        self._write_timeout = write_timeout
        self._closed = False
        path = Path(address)
        path.parent.mkdir(mode=0o700, parents=True, exist_ok=True)
        if path.exists():
            path.unlink()
        self._sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            self._sock.bind(address)
            self._sock.listen(1)
        except OSError as exc:
            self._sock.close()
            raise ChannelError(f"cannot listen on {address}: {exc}") from exc

    @property
    def address(self) -> str:
        return self._address

    def accept(self, timeout: float | None) -> UnixChannelWriter:
        """Wait for the viewer to connect.

        The wait is sliced so a concurrent :meth:`close` ends it promptly.
        """
        deadline = None if timeout is None else time.monotonic() + timeout
        while True:
            if self._closed:
                raise ChannelError(f"listener on {self._address} closed while waiting")
            slice_timeout = _POLL_SLICE
            if deadline is not None:
                remaining = deadline - time.monotonic()
                if remaining <= 0:
                    raise ChannelTimeoutError(f"no viewer connected to {self._address} within {timeout}s")
                slice_timeout = min(slice_timeout, remaining)
            try:
                self._sock.settimeout(slice_timeout)
                conn, _ = self._sock.accept()
            except socket.timeout:
                continue
            except OSError as exc:
                raise ChannelError(f"accept failed on {self._address}: {exc}") from exc
            conn.settimeout(self._write_timeout)
            return UnixChannelWriter(conn)

    def close(self) -> None:
        if self._closed:
            return
        self._closed = True
        try:
            self._sock.close()
        finally:
            try:
                os.unlink(self._address)
            except FileNotFoundError:
                pass
            except OSError as exc:
                LOGGER.warning("Could not remove channel socket %s", self._address, exc_info=exc)


class UnixChannelReader(ChannelReaderPort):
    """Inbound stream yielding wire lines until the producer hangs up."""

    def __init__(self, sock: socket.socket) -> None:
        self._sock = sock

    def lines(self) -> Iterator[str]:
        stream = self._sock.makefile("r", encoding="utf-8", errors="replace", newline="\n")
        try:
            for raw in stream:
                yield raw.rstrip("\r\n")
        except OSError as exc:
            LOGGER.debug("Channel read ended: %s", exc)
        finally:
            stream.close()

    def close(self) -> None:
        try:
            self._sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
        self._sock.close()


def connect_channel(address: str, *, timeout: float = 5.0, retry_interval: float = 0.05) -> UnixChannelReader:
    """Connect to the producer listening on ``address``.

    Retries while the socket file is missing or refusing connections, since
    the viewer may start before the producer has bound the endpoint.
    """

    deadline = time.monotonic() + timeout
    while True:
        sock = socket.socket(socket.AF_UNIX, socket.SOCK_STREAM)
        try:
            sock.settimeout(max(0.01, deadline - time.monotonic()))
            sock.connect(address)
        except (FileNotFoundError, ConnectionRefusedError) as exc:
            sock.close()
            if time.monotonic() >= deadline:
                raise ChannelTimeoutError(f"producer channel {address} not reachable within {timeout}s") from exc
            time.sleep(retry_interval)
            continue
        except socket.timeout as exc:
            sock.close()
            raise ChannelTimeoutError(f"producer channel {address} not reachable within {timeout}s") from exc
        except OSError as exc:
            sock.close()
            raise ChannelError(f"cannot connect to {address}: {exc}") from exc
        sock.settimeout(None)
        return UnixChannelReader(sock)


__all__ = [
    "SOCKET_DIR_NAME",
    "UnixChannelListener",
    "UnixChannelReader",
    "UnixChannelWriter",
    "channel_address",
    "channel_supported",
    "connect_channel",
]
