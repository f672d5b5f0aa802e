"""
Toast notifications.

Controllers report outcomes here instead of raising. The API drains pending
notifications into each response so the UI can show them.
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Optional

from loguru import logger


class Level(str, Enum):
    SUCCESS = "success"
    ERROR = "error"


@dataclass
class Notification:
    level: Level
    title: str
    description: Optional[str] = None
    created_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    def to_dict(self) -> dict:
        return {
            "level": self.level.value,
            "title": self.title,
            "description": self.description,
            "created_at": self.created_at.isoformat(),
        }


class Notifier:
    """Collects notifications until they are drained."""

    def __init__(self, max_pending: int = 50):
        self.max_pending = max_pending
        self._pending: list[Notification] = []

    def success(self, title: str, description: Optional[str] = None) -> Notification:
        logger.info(f"{title}" + (f": {description}" if description else ""))
        return self._push(Notification(Level.SUCCESS, title, description))

    def error(self, title: str, description: Optional[str] = None) -> Notification:
        logger.warning(f"{title}" + (f": {description}" if description else ""))
        return self._push(Notification(Level.ERROR, title, description))

    def _push(self, notification: Notification) -> Notification:
        self._pending.append(notification)
        del self._pending[:-self.max_pending]
        return notification

    @property
    def pending(self) -> list[Notification]:
        return list(self._pending)

    def drain(self) -> list[Notification]:
        drained, self._pending = self._pending, []
        return drained
