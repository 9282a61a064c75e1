"""User-facing status notices."""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

logger = logging.getLogger(__name__)

PRIORITIES_UPDATED = "Priorities updated."
STREAKS_UPDATED = "Streaks updated."
UPDATE_FAILED_NOTICE = "Daily update failed; see the log for details."

_LEVELS = {"info": logging.INFO, "warning": logging.WARNING, "error": logging.ERROR}


@dataclass(frozen=True)
class Notice:
    message: str
    level: str
    timestamp: str

    def to_dict(self) -> dict[str, Any]:
        return {"message": self.message, "level": self.level, "timestamp": self.timestamp}


class NoticeBoard:
    """Keeps the most recent notices in memory and echoes them to the log."""

    def __init__(self, maxlen: int = 100) -> None:
        self._notices: deque[Notice] = deque(maxlen=maxlen)

    def post(self, message: str, level: str = "info") -> Notice:
        if level not in _LEVELS:
            raise ValueError(f"Unknown notice level: {level}")
        notice = Notice(
            message=message,
            level=level,
            timestamp=datetime.now(timezone.utc).isoformat(),
        )
        self._notices.append(notice)
        logger.log(_LEVELS[level], "notice: %s", message)
        return notice

    def recent(self, limit: int = 20) -> list[Notice]:
        if limit <= 0:
            return []
        return list(self._notices)[-limit:]
