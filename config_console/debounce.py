"""
config_console.debounce
~~~~~~~~~~~~~~~~~~~~~~~
Per-key trailing-edge debouncing.

A burst of ``push(key, value)`` calls for the same key results in exactly one
``callback(key, value)`` with the last value, ``delay`` seconds after the
final push.  Keys are independent of each other.
"""
from __future__ import annotations

import threading
from typing import Any, Callable, Hashable

Callback = Callable[[Hashable, Any], None]
TimerFactory = Callable[[float, Callable[[], None]], Any]


class KeyedDebouncer:
    """
    Args:
        delay: Quiescence window in seconds.
        callback: Invoked as ``callback(key, value)`` when a key settles.
        timer_factory: Builds a startable, cancellable timer; defaults to
            :class:`threading.Timer`.
    """

    def __init__(
        self,
        delay: float,
        callback: Callback,
        timer_factory: TimerFactory = threading.Timer,
    ) -> None:
        self.delay = delay
        self._callback = callback
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._values: dict[Hashable, Any] = {}
        self._timers: dict[Hashable, Any] = {}

    def push(self, key: Hashable, value: Any) -> None:
        """Replace the pending value for *key* and restart its timer."""
        with self._lock:
            timer = self._timers.pop(key, None)
            if timer is not None:
                timer.cancel()
            self._values[key] = value
            timer = self._timer_factory(self.delay, lambda: self._fire(key, timer))
            self._timers[key] = timer
        timer.start()

    def _fire(self, key: Hashable, timer: Any) -> None:
        with self._lock:
            # a later push replaced this timer
            if self._timers.get(key) is not timer:
                return
            del self._timers[key]
            value = self._values.pop(key)
        self._callback(key, value)

    def _take(self, key: Hashable) -> tuple[bool, Any]:
        with self._lock:
            timer = self._timers.pop(key, None)
            if timer is not None:
                timer.cancel()
            if key not in self._values:
                return False, None
            return True, self._values.pop(key)

    def flush(self, key: Hashable) -> bool:
        """Deliver the pending value for *key* now. Returns ``False`` if none."""
        found, value = self._take(key)
        if found:
            self._callback(key, value)
        return found

    def flush_all(self) -> None:
        for key in self.pending():
            self.flush(key)

    def cancel(self, key: Hashable) -> None:
        """Drop the pending value for *key* without delivering it."""
        self._take(key)

    def cancel_all(self) -> None:
        for key in self.pending():
            self.cancel(key)

    def pending(self) -> list[Hashable]:
        with self._lock:
            return list(self._values)
