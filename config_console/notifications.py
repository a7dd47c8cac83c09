"""
config_console.notifications
~~~~~~~~~~~~~~~~~~~~~~~~~~~~
User-facing notifications (the console's toast messages).
"""
from __future__ import annotations

from dataclasses import dataclass

import structlog

logger = structlog.get_logger(__name__)

INFO = "info"
SUCCESS = "success"
ERROR = "error"


@dataclass(frozen=True)
class Notification:
    level: str
    message: str


class Notifier:
    """Collects notifications until a consumer drains them."""

    def __init__(self) -> None:
        self._items: list[Notification] = []

    def notify(self, level: str, message: str) -> Notification:
        note = Notification(level, message)
        self._items.append(note)
        log = logger.error if level == ERROR else logger.info
        log("notification", level=level, message=message)
        return note

    def info(self, message: str) -> Notification:
        return self.notify(INFO, message)

    def success(self, message: str) -> Notification:
        return self.notify(SUCCESS, message)

    def error(self, message: str) -> Notification:
        return self.notify(ERROR, message)

    @property
    def items(self) -> list[Notification]:
        return list(self._items)

    def last(self) -> Notification | None:
        return self._items[-1] if self._items else None

    def drain(self) -> list[Notification]:
        """Return every pending notification and clear the queue."""
        items, self._items = self._items, []
        return items
