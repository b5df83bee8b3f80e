"""Viewer-side renderer: reader thread plus lossy render loop.

Purpose
-------
Paint whatever the producer sent most recently without letting a slow
console stall the channel.

Contents
--------
* :class:`Renderer` – owns the :class:`Mailbox` between the reader thread
  and the render loop.

System Role
-----------
Runs inside the viewer process started by the ``viewer`` CLI command. The
reader overwrites the mailbox with every raw line; the render loop takes the
newest line, decodes it, and applies it. Intermediate lines are lost when the
console falls behind, malformed lines are discarded.
"""

from __future__ import annotations

import logging
import threading

from lib_log_window.application.ports import ChannelReaderPort, ConsolePort
from lib_log_window.domain import Mailbox, RecordDecodeError, decode_record


LOGGER = logging.getLogger(__name__)


class Renderer:
    """Decouple channel reading from console painting.

    Parameters
    ----------
    reader:
        Connected channel yielding wire lines.
    console:
        Port receiving decoded records.
    poll_interval:
        Longest time the render loop waits on an empty mailbox before
        re-checking its stop conditions.
    """

    def __init__(
        self,
        reader: ChannelReaderPort,
        console: ConsolePort,
        *,
        mailbox: Mailbox[str] | None = None,
        poll_interval: float = 0.05,
    ) -> None:
        self._reader = reader
        self._console = console
        self._mailbox: Mailbox[str] = mailbox if mailbox is not None else Mailbox()
        self._poll_interval = poll_interval
        self._stop_event = threading.Event()
        self._reader_done = threading.Event()
        self._reader_thread: threading.Thread | None = None
        self.rendered = 0
        self.discarded = 0

    @property
    def mailbox(self) -> Mailbox[str]:
        return self._mailbox

    @property
    def overwritten(self) -> int:
        """Lines replaced in the mailbox before the render loop took them."""
        return self._mailbox.overwritten

    def start_reader(self) -> None:
        """Start the daemon thread feeding the mailbox."""
        if self._reader_thread is not None and self._reader_thread.is_alive():
            return
        self._reader_done.clear()
        self._reader_thread = threading.Thread(target=self._read, name="viewer-reader", daemon=True)
        self._reader_thread.start()

    def stop(self) -> None:
        """Ask :meth:`run` to return and unblock the reader."""
        self._stop_event.set()
        self._reader.close()

    def render_pending(self, timeout: float | None = 0.0) -> bool:
        """Take the newest line, if any, and paint it; return ``True`` when painted."""
        line = self._mailbox.take(timeout)
        if line is None:
            return False
        try:
            record = decode_record(line)
        except RecordDecodeError as exc:
            self.discarded += 1
            LOGGER.debug("Discarded malformed line: %s", exc)
            return False
        self._console.apply(record)
        self.rendered += 1
        return True

    def run(self) -> int:
        """Render until stopped or the channel closes; return records painted."""
        self.start_reader()
        while not self._stop_event.is_set():
            if self._reader_done.is_set() and self._mailbox.peek() is None:
                break
            self.render_pending(self._poll_interval)
        return self.rendered

    def _read(self) -> None:
        try:
            for line in self._reader.lines():
                self._mailbox.put(line)
        finally:
            self._reader_done.set()


__all__ = ["Renderer"]
