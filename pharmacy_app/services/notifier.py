"""Fire-and-forget user notices."""

from __future__ import annotations

import logging
from enum import Enum

from PyQt6.QtCore import QObject, pyqtSignal

logger = logging.getLogger(__name__)


class NoticeLevel(str, Enum):
    SUCCESS = "success"
    ERROR = "error"
    INFO = "info"
    WARNING = "warning"


class Notifier(QObject):
    notice_posted = pyqtSignal(str, str)

    def post(self, level: NoticeLevel, text: str) -> None:
        logger.debug("Notice (%s): %s", level.value, text)
        self.notice_posted.emit(level.value, text)

    def success(self, text: str) -> None:
        self.post(NoticeLevel.SUCCESS, text)

    def error(self, text: str) -> None:
        self.post(NoticeLevel.ERROR, text)

    def info(self, text: str) -> None:
        self.post(NoticeLevel.INFO, text)

    def warning(self, text: str) -> None:
        self.post(NoticeLevel.WARNING, text)
