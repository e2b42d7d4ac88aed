"""
User-facing notification channel.

Components that need to surface out-of-band errors take a Notifier
argument instead of reaching for a global.
"""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)

SEVERITY_LEVELS = {
    "info": logging.INFO,
    "success": logging.INFO,
    "warning": logging.WARNING,
    "error": logging.ERROR,
}


class Notifier(Protocol):
    def notify(self, severity: str, message: str) -> None: ...


class LoggingNotifier:
    """Notifier that writes messages to the application log."""

    def __init__(self, log: logging.Logger = logger):
        self.log = log

    def notify(self, severity: str, message: str) -> None:
        self.log.log(SEVERITY_LEVELS.get(severity, logging.INFO), message)


class CollectingNotifier:
    """Notifier that keeps messages in memory, for callers that render them later."""

    def __init__(self):
        self.messages: list[tuple[str, str]] = []

    def notify(self, severity: str, message: str) -> None:
        self.messages.append((severity, message))
