"""WatchDispatcher: single-consumer queue for watch notifications.

Coordination clients deliver watch notifications on their own event
thread. A strategy never re-evaluates membership on that thread; its watch
callback only submits the notification here, and one consumer (a daemon
thread, or the test calling drain()) runs the handler for each item in
submission order.
"""

from __future__ import annotations

import logging
import queue
import threading
from typing import TYPE_CHECKING, Generic, TypeVar

if TYPE_CHECKING:
    from collections.abc import Callable

logger = logging.getLogger(__name__)

T = TypeVar("T")

_STOP = object()


class WatchDispatcher(Generic[T]):
    """Serializes handling of watch notifications for one strategy instance.

    Thread safety:
        submit() may be called from any thread. Items are handled one at a
        time, in order, by whichever consumer is active. drain() must not be
        used while the consumer thread is running.

    Example:
        >>> handled = []
        >>> dispatcher = WatchDispatcher(handled.append, name="demo", autostart=False)
        >>> dispatcher.submit("fire")
        >>> dispatcher.drain()
        1
        >>> handled
        ['fire']
    """

    def __init__(
        self,
        handler: Callable[[T], None],
        name: str,
        on_error: Callable[[T, Exception], None] | None = None,
        autostart: bool = True,
    ) -> None:
        """Initialize the dispatcher.

        Args:
            handler: Called once per submitted item.
            name: Used for the consumer thread name and log messages.
            on_error: Called with the item and exception when handler raises.
            autostart: Start the consumer thread on first ensure_started().
        """
        self._handler = handler
        self._name = name
        self._on_error = on_error
        self.autostart = autostart
        self._queue: queue.Queue[object] = queue.Queue()
        self._thread: threading.Thread | None = None
        self._lock = threading.Lock()
        self._closed = False

    @property
    def pending(self) -> int:
        """Approximate number of queued, unhandled items."""
        return self._queue.qsize()

    @property
    def running(self) -> bool:
        """True while the consumer thread is alive."""
        return self._thread is not None and self._thread.is_alive()

    @property
    def closed(self) -> bool:
        """True once stop() was called."""
        return self._closed

    def submit(self, item: T) -> None:
        """Queue an item for handling. Never blocks, never runs the handler."""
        self._queue.put(item)

    def ensure_started(self) -> None:
        """Start the consumer thread if autostart is enabled and stop() was not called."""
        if self.autostart:
            self.start()

    def start(self) -> None:
        """Start the daemon consumer thread.

        No-op if already running or once stop() was called.
        """
        with self._lock:
            if self._closed or self.running:
                return
            self._thread = threading.Thread(
                target=self._run, name=f"zkelect-watch-{self._name}", daemon=True
            )
            self._thread.start()

    def stop(self, timeout: float | None = 5.0) -> None:
        """Stop the consumer thread after it handles already queued items.

        The dispatcher stays closed: later start() calls do nothing. drain()
        still works.
        """
        with self._lock:
            self._closed = True
            thread = self._thread
            self._thread = None
        if thread is None:
            return
        self._queue.put(_STOP)
        thread.join(timeout)

    def drain(self) -> int:
        """Handle every queued item on the calling thread.

        Items submitted by the handler itself are handled too.

        Returns:
            Number of items handled.
        """
        handled = 0
        while True:
            try:
                item = self._queue.get_nowait()
            except queue.Empty:
                return handled
            if item is _STOP:
                continue
            self._dispatch(item)  # type: ignore[arg-type]
            handled += 1

    def _run(self) -> None:
        while True:
            item = self._queue.get()
            if item is _STOP:
                return
            self._dispatch(item)  # type: ignore[arg-type]

    def _dispatch(self, item: T) -> None:
        try:
            self._handler(item)
        except Exception as exc:
            logger.exception("Watch handler for %s failed", self._name)
            if self._on_error is not None:
                self._on_error(item, exc)
