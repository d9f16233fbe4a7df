"""Transient user-facing notices.

Engines never raise past their boundary; instead they post a short notice
(the dashboard shows these as dismissable toasts) and return a sentinel.
"""

import logging
from datetime import UTC, datetime
from enum import Enum

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class NoticeLevel(str, Enum):
    """Severity of a notice."""

    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"


class Notice(BaseModel):
    """A single transient notice."""

    level: NoticeLevel = Field(..., description="Notice severity")
    message: str = Field(..., description="User-facing text")
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))


class NoticeBoard:
    """Ordered collector of notices for one session or request."""

    def __init__(self) -> None:
        self._notices: list[Notice] = []

    def post(self, level: NoticeLevel, message: str) -> Notice:
        notice = Notice(level=level, message=message)
        self._notices.append(notice)
        logger.debug("Notice posted", extra={"level": level.value, "notice": message})
        return notice

    def success(self, message: str) -> Notice:
        return self.post(NoticeLevel.SUCCESS, message)

    def error(self, message: str) -> Notice:
        return self.post(NoticeLevel.ERROR, message)

    def info(self, message: str) -> Notice:
        return self.post(NoticeLevel.INFO, message)

    @property
    def notices(self) -> list[Notice]:
        return list(self._notices)

    @property
    def latest_error(self) -> Notice | None:
        """Most recent error notice, if any."""
        for notice in reversed(self._notices):
            if notice.level == NoticeLevel.ERROR:
                return notice
        return None

    def drain(self) -> list[Notice]:
        """Return all notices and clear the board."""
        drained, self._notices = self._notices, []
        return drained
