"""
Notify sink that writes to the structured log and keeps a short history.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone

from frontdesk.dialer.interface import NotificationLevel, NotifySink
from frontdesk.prospects.models import ScoredProspect
from frontdesk.shared.logging import get_logger

logger = get_logger(__name__)

_LOG_LEVELS = {
    NotificationLevel.INFO: logging.INFO,
    NotificationLevel.SUCCESS: logging.INFO,
    NotificationLevel.WARNING: logging.WARNING,
    NotificationLevel.ERROR: logging.ERROR,
}


@dataclass(frozen=True)
class Notification:
    message: str
    level: NotificationLevel
    created_at: datetime


class LoggingNotifier(NotifySink):
    def __init__(self, history_size: int = 100) -> None:
        self._notifications: deque[Notification] = deque(maxlen=history_size)
        self._highlighted: deque[str] = deque(maxlen=history_size)

    @property
    def notifications(self) -> list[Notification]:
        return list(self._notifications)

    @property
    def highlighted(self) -> list[str]:
        return list(self._highlighted)

    async def highlight(self, prospect: ScoredProspect) -> None:
        self._highlighted.append(prospect.key)
        logger.info(
            "Prospect highlighted",
            extra={"prospect_id": prospect.key, "score": prospect.score},
        )

    async def notify(self, message: str, level: NotificationLevel = NotificationLevel.INFO) -> None:
        level = NotificationLevel(level)
        self._notifications.append(
            Notification(message=message, level=level, created_at=datetime.now(timezone.utc))
        )
        logger.log(_LOG_LEVELS[level], message, extra={"notification_level": level.value})

    def clear(self) -> None:
        self._notifications.clear()
        self._highlighted.clear()
