# core/debounce.py

"""
Coalescing scheduler for deferred persistence writes.

`DebouncedWriter` keeps at most one pending timer per logical key (e.g. a student's mark
record). Scheduling a key that is already pending cancels the old timer and starts a new
one, so a burst of edits produces a single write once input pauses.

The payload is supplied as a zero-argument callable and is only evaluated when the timer
fires, which means the write always carries the latest in-memory state for the key rather
than a snapshot taken at schedule time.

Write failures are logged and swallowed: in-memory state stays authoritative and the next
edit to the same key carries the latest value anyway.

Timers are created through an injectable factory. The default wraps `threading.Timer`;
tests substitute a manually driven clock.
"""

from __future__ import annotations

import logging
import threading
from typing import Any, Callable, Protocol

from core.config import DEFAULT_DEBOUNCE_MS

logger = logging.getLogger(__name__)


class TimerHandle(Protocol):
    def cancel(self) -> None: ...


TimerFactory = Callable[[float, Callable[[], None]], TimerHandle]
WriteSink = Callable[[str, Any], None]


def threading_timer_factory(delay_seconds: float, callback: Callable[[], None]) -> TimerHandle:
    timer = threading.Timer(delay_seconds, callback)
    timer.daemon = True
    timer.start()
    return timer


class DebouncedWriter:
    """
    Per-key last-write-wins scheduler.

    Attributes:
        sink (WriteSink): Called as `sink(key, payload)` when a key's timer fires.
        delay_ms (int): Default delay applied when `schedule()` is not given one.

    Notes:
        - A fired write is never cancelled; cancellation only affects pending timers.
        - After `close()` any further `schedule()` call is ignored.
    """

    def __init__(
        self,
        sink: WriteSink,
        delay_ms: int = DEFAULT_DEBOUNCE_MS,
        timer_factory: TimerFactory = threading_timer_factory,
    ):
        self._sink = sink
        self._delay_ms = delay_ms
        self._timer_factory = timer_factory
        self._pending: dict[str, tuple[TimerHandle, Callable[[], Any], object]] = {}
        self._lock = threading.Lock()
        self._closed = False

    # === properties ===

    @property
    def delay_ms(self) -> int:
        return self._delay_ms

    @property
    def is_closed(self) -> bool:
        return self._closed

    def pending_keys(self) -> list[str]:
        with self._lock:
            return list(self._pending)

    def has_pending(self, key: str | None = None) -> bool:
        with self._lock:
            return bool(self._pending) if key is None else key in self._pending

    # === scheduling ===

    def schedule(
        self,
        key: str,
        payload_thunk: Callable[[], Any],
        delay_ms: int | None = None,
    ) -> None:
        """
        Schedules a deferred write for `key`, replacing any pending write for the same key.

        Args:
            key (str): The logical record key, also passed to the sink.
            payload_thunk (Callable[[], Any]): Produces the payload at fire time.
            delay_ms (int | None): Delay before writing. Defaults to `self.delay_ms`.
        """
        delay = self._delay_ms if delay_ms is None else delay_ms

        with self._lock:
            if self._closed:
                logger.debug("Ignoring write for '%s' scheduled after close", key)
                return

            previous = self._pending.pop(key, None)
            if previous is not None:
                previous[0].cancel()

            # identifies this scheduling so a superseded timer cannot write
            token = object()
            timer = self._timer_factory(delay / 1000.0, lambda: self._fire(key, token))
            self._pending[key] = (timer, payload_thunk, token)

    def flush(self, key: str | None = None) -> int:
        """
        Writes pending payloads immediately instead of waiting for their timers.

        Args:
            key (str | None): Only flush this key. Flushes every pending key if None.

        Returns:
            int: The number of writes attempted.
        """
        with self._lock:
            keys = list(self._pending) if key is None else [key]
            due = []

            for k in keys:
                entry = self._pending.pop(k, None)
                if entry is None:
                    continue

                entry[0].cancel()
                due.append((k, entry[1]))

        for k, thunk in due:
            self._write(k, thunk)

        return len(due)

    def cancel(self, key: str) -> bool:
        with self._lock:
            entry = self._pending.pop(key, None)

        if entry is None:
            return False

        entry[0].cancel()
        return True

    def cancel_all(self) -> int:
        with self._lock:
            entries = list(self._pending.values())
            self._pending.clear()

        for timer, _, _ in entries:
            timer.cancel()

        if entries:
            logger.debug("Cancelled %d pending writes", len(entries))

        return len(entries)

    def close(self, flush: bool = False) -> None:
        """Tears down the writer, flushing or dropping whatever is still pending."""
        if flush:
            self.flush()
        self.cancel_all()

        with self._lock:
            self._closed = True

    # === helper methods ===

    def _fire(self, key: str, token: object) -> None:
        with self._lock:
            entry = self._pending.get(key)

            if entry is None or entry[2] is not token:
                return

            del self._pending[key]

        self._write(key, entry[1])

    def _write(self, key: str, payload_thunk: Callable[[], Any]) -> None:
        try:
            payload = payload_thunk()
            self._sink(key, payload)

        except Exception:
            logger.exception("Deferred write for '%s' failed; keeping in-memory state", key)

        else:
            logger.debug("Deferred write for '%s' completed", key)
