"""
notifier.py – Operator notifications (the dashboard's toast messages).

Every notification is logged at a matching level and kept in memory so the
CLI and tests can inspect what the operator was told.
"""

import logging
from dataclasses import dataclass

logger = logging.getLogger(__name__)

_LEVELS = {
    "success": logging.INFO,
    "info": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


@dataclass(frozen=True)
class Notification:
    level: str
    message: str


class Notifier:
    def __init__(self):
        self.history: list[Notification] = []

    def notify(self, level: str, message: str) -> None:
        self.history.append(Notification(level, message))
        logger.log(_LEVELS.get(level, logging.INFO), "%s", message)

    def success(self, message: str) -> None:
        self.notify("success", message)

    def info(self, message: str) -> None:
        self.notify("info", message)

    def warning(self, message: str) -> None:
        self.notify("warning", message)

    def error(self, message: str) -> None:
        self.notify("error", message)

    def messages(self, level: str = None) -> list[str]:
        return [n.message for n in self.history if level is None or n.level == level]

    def clear(self) -> None:
        self.history.clear()
