"""
config_console.widgets
~~~~~~~~~~~~~~~~~~~~~~
A text input that keeps its own buffer and reports changes as messages.

The parent view never writes into the input while the user is typing; it
listens on a :class:`MessageChannel` for ``input-change`` messages instead.
"""
from __future__ import annotations

import threading
from typing import Any, Callable

import structlog

from .debounce import KeyedDebouncer, TimerFactory

logger = structlog.get_logger(__name__)

INPUT_CHANGE = "input-change"

Listener = Callable[[dict], None]


class MessageChannel:
    """Minimal publish/subscribe bus between a widget and its host."""

    def __init__(self) -> None:
        self._listeners: list[Listener] = []
        self._lock = threading.Lock()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register *listener*; returns a function that unsubscribes it."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def post(self, message: dict) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            listener(message)


class IsolatedInput:
    """
    Args:
        input_id: Identifier echoed in every message (usually the item id).
        channel: Where ``input-change`` messages are posted.
        value: Initial text.
        delay: Debounce window for typed changes, in seconds.
        timer_factory: Passed to the debouncer.
    """

    def __init__(
        self,
        input_id: Any,
        channel: MessageChannel,
        value: str = "",
        delay: float = 0.3,
        timer_factory: TimerFactory = threading.Timer,
    ) -> None:
        self.input_id = input_id
        self.channel = channel
        self.value = value
        self.focused = False
        self._relay = KeyedDebouncer(delay, self._post, timer_factory=timer_factory)

    def _post(self, input_id: Any, value: str) -> None:
        self.channel.post({"type": INPUT_CHANGE, "id": input_id, "value": value})

    def focus(self) -> None:
        self.focused = True

    def blur(self) -> None:
        """Leave the input and relay the current value without waiting."""
        self.focused = False
        self._relay.cancel(self.input_id)
        self._post(self.input_id, self.value)

    def type(self, value: str) -> None:
        """The user changed the text to *value*."""
        self.value = value
        self._relay.push(self.input_id, value)

    def set_value(self, value: str) -> bool:
        """
        Apply a value coming from outside.

        Ignored while the input has focus so a re-render cannot overwrite
        what the user is typing.  Returns ``True`` when the value was applied.
        """
        if self.focused:
            logger.debug("external_value_ignored", input_id=self.input_id)
            return False
        self.value = value
        return True

    def dispose(self) -> None:
        self._relay.cancel_all()
