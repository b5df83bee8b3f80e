"""Single-slot mailbox where the newest item always wins.

Purpose
-------
Decouple a fast reader from a slow renderer without queueing: every ``put``
overwrites the pending item, every ``take`` empties the slot.

Contents
--------
* :class:`Mailbox` – lock-guarded slot plus a wake-up event.

System Role
-----------
Connects the viewer's reader thread with its render loop. Losing intermediate
items under backpressure is the intended behaviour; only the latest pending
item is guaranteed to be taken eventually.
"""

from __future__ import annotations

import threading
from typing import Generic, TypeVar

T = TypeVar("T")


class Mailbox(Generic[T]):
    """Hold at most one pending item, replacing it on every put.

    Examples
    --------
    >>> box = Mailbox()
    >>> box.put("first")
    False
    >>> box.put("second")
    True
    >>> box.take(timeout=0)
    'second'
    >>> box.take(timeout=0) is None
    True
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._ready = threading.Event()
        self._item: T | None = None
        self._overwritten = 0

    def put(self, item: T) -> bool:
        """Store ``item`` and return ``True`` when it replaced an untaken one."""

        with self._lock:
            replaced = self._item is not None
            if replaced:
                self._overwritten += 1
            self._item = item
            self._ready.set()
        return replaced

    def take(self, timeout: float | None = None) -> T | None:
        """Swap the slot for empty and return what it held.

        Waits up to ``timeout`` seconds for an item when the slot is empty;
        ``None`` waits indefinitely and ``0`` polls.
        """

        if timeout is None:
            self._ready.wait()
        elif timeout > 0:
            self._ready.wait(timeout)
        with self._lock:
            item = self._item
            self._item = None
            self._ready.clear()
        return item

    def peek(self) -> T | None:
        """Return the pending item without clearing it."""

        with self._lock:
            return self._item

    @property
    def overwritten(self) -> int:
        """Number of items replaced before anyone took them."""

        return self._overwritten


__all__ = ["Mailbox"]
