"""Sink for transient, dismissible notices shown to the player."""

import logging
from collections import deque
from typing import Protocol

logger = logging.getLogger(__name__)


class Notifier(Protocol):
    def notify(self, message: str) -> None: ...


class LoggingNotifier:
    """Default sink: logs the notice and remembers the most recent ones."""

    def __init__(self, keep: int = 20) -> None:
        self.messages: deque[str] = deque(maxlen=keep)

    def notify(self, message: str) -> None:
        logger.warning(message)
        self.messages.append(message)
