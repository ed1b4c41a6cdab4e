"""User-visible notification sinks."""

from __future__ import annotations

import logging
from typing import Protocol

logger = logging.getLogger("taskboard.notifications")


class Notifier(Protocol):
    """Fire-and-forget channel for messages shown to the user."""

    def error(self, message: str) -> None: ...


class LoggingNotifier:
    def error(self, message: str) -> None:
        logger.warning("notify level=error message=%s", message)


class CollectingNotifier:
    """Keeps messages in arrival order so a caller can hand them to the client."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def error(self, message: str) -> None:
        logger.warning("notify level=error message=%s", message)
        self.messages.append(message)
