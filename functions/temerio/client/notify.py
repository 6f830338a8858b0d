"""
User-facing notifications.

The client library never talks to a UI toolkit directly; it hands messages to
a Notifier. LoggingNotifier writes them to the log, RecordingNotifier also
keeps them so a front end (or a test) can render them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def error(self, message: str, description: Optional[str] = None) -> None:
        ...

    def warning(self, message: str, description: Optional[str] = None) -> None:
        ...

    def info(self, message: str, description: Optional[str] = None) -> None:
        ...

    def success(self, message: str, description: Optional[str] = None) -> None:
        ...


def _format(message: str, description: Optional[str]) -> str:
    return f"{message}: {description}" if description else message


class LoggingNotifier:
    def error(self, message: str, description: Optional[str] = None) -> None:
        logger.error(_format(message, description))

    def warning(self, message: str, description: Optional[str] = None) -> None:
        logger.warning(_format(message, description))

    def info(self, message: str, description: Optional[str] = None) -> None:
        logger.info(_format(message, description))

    def success(self, message: str, description: Optional[str] = None) -> None:
        logger.info(_format(message, description))


@dataclass
class Notification:
    level: str
    message: str
    description: Optional[str] = None


@dataclass
class RecordingNotifier(LoggingNotifier):
    notifications: list[Notification] = field(default_factory=list)

    def error(self, message: str, description: Optional[str] = None) -> None:
        self.notifications.append(Notification("error", message, description))
        super().error(message, description)

    def warning(self, message: str, description: Optional[str] = None) -> None:
        self.notifications.append(Notification("warning", message, description))
        super().warning(message, description)

    def info(self, message: str, description: Optional[str] = None) -> None:
        self.notifications.append(Notification("info", message, description))
        super().info(message, description)

    def success(self, message: str, description: Optional[str] = None) -> None:
        self.notifications.append(Notification("success", message, description))
        super().success(message, description)


class NullNotifier:
    """Drops everything. Used where the caller reports failures itself."""

    def error(self, message: str, description: Optional[str] = None) -> None:
        pass

    def warning(self, message: str, description: Optional[str] = None) -> None:
        pass

    def info(self, message: str, description: Optional[str] = None) -> None:
        pass

    def success(self, message: str, description: Optional[str] = None) -> None:
        pass
