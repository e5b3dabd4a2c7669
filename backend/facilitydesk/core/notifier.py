"""User-facing notifications (the dashboard's toasts).

Keeps a bounded history and fans each notification out to listeners,
which is how the websocket broadcaster learns about them.
"""

import logging
import time
from collections import deque
from dataclasses import dataclass, field
from enum import Enum
from typing import Callable

logger = logging.getLogger(__name__)


class Level(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"
    WARNING = "warning"


@dataclass(frozen=True)
class Notification:
    level: Level
    title: str
    message: str
    created_at: float = field(default_factory=time.time)

    def to_dict(self) -> dict:
        return {
            "level": self.level.value,
            "title": self.title,
            "message": self.message,
            "created_at": self.created_at,
        }


class Notifier:
    def __init__(self, history: int = 50):
        self._history: deque[Notification] = deque(maxlen=history)
        self._listeners: list[Callable[[Notification], None]] = []

    def add_listener(self, callback: Callable[[Notification], None]) -> None:
        self._listeners.append(callback)

    def remove_listener(self, callback: Callable[[Notification], None]) -> None:
        if callback in self._listeners:
            self._listeners.remove(callback)

    def push(self, level: Level, title: str, message: str) -> Notification:
        note = Notification(level=level, title=title, message=message)
        self._history.append(note)
        for callback in list(self._listeners):
            try:
                callback(note)
            except Exception:
                logger.exception("Notification listener failed")
        return note

    def success(self, message: str, title: str = "Success") -> Notification:
        return self.push(Level.SUCCESS, title, message)

    def error(self, title: str, message: str) -> Notification:
        return self.push(Level.ERROR, title, message)

    def info(self, message: str, title: str = "Information") -> Notification:
        return self.push(Level.INFO, title, message)

    def warning(self, message: str, title: str = "Warning") -> Notification:
        return self.push(Level.WARNING, title, message)

    def recent(self, limit: int | None = None) -> list[Notification]:
        """Newest first."""
        items = list(reversed(self._history))
        return items[:limit] if limit is not None else items
