"""Cancellable debounce timer owned by a single editing session"""

import threading
from typing import Callable

import structlog


logger = structlog.get_logger()


class Debouncer:
    """Run `callback` once, `delay` seconds after the last schedule() call.

    Each schedule() replaces the pending timer; cancel() drops it without
    running the callback.
    """

    def __init__(self, delay: float, callback: Callable[[], None]):
        self.delay = delay
        self.callback = callback
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def schedule(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self.delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def cancel(self) -> bool:
        """Drop the pending run. Returns True if one was pending."""
        with self._lock:
            timer, self._timer = self._timer, None
        if timer is None:
            return False
        timer.cancel()
        return True

    def _fire(self) -> None:
        with self._lock:
            if self._timer is None or self._timer is not threading.current_thread():
                return
            self._timer = None
        try:
            self.callback()
        except Exception:
            logger.exception("debounced_callback_failed")
