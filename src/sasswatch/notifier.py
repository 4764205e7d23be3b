"""Pluggable notification, status and output protocols for sasswatch.

Allows the lifecycle manager to decouple from any UI. Hosts (the Textual app,
an editor bridge, tests) provide their own implementations.
"""

import logging
from typing import Protocol

logger = logging.getLogger(__name__)


class WatchNotifier(Protocol):
    """Protocol for user notifications - host can provide custom implementation."""

    def info(self, message: str) -> None:
        """Informational message."""
        ...

    def warning(self, message: str) -> None:
        """Warning message."""
        ...

    def error(self, message: str) -> None:
        """Error message."""
        ...


class StatusReporter(Protocol):
    """Receives the active watch count after every mutating operation."""

    def update(self, count: int) -> None:
        """Render the indicator: hidden at zero, otherwise the count."""
        ...


class OutputLog(Protocol):
    """Textual sink for the watcher list (an output pane or channel)."""

    def append_line(self, text: str) -> None:
        ...


def format_status(count: int) -> str | None:
    """Status indicator text for count, or None when it should be hidden."""
    if count > 0:
        return f"Sass Watchers: {count}"
    return None


class NoOpNotifier:
    """Silent no-op notifier - default for embedded mode."""

    def info(self, message: str) -> None:
        """Do nothing."""
        pass

    def warning(self, message: str) -> None:
        """Do nothing."""
        pass

    def error(self, message: str) -> None:
        """Do nothing."""
        pass


class LoggingNotifier:
    """Implementation using stdlib logging - for headless runs and debugging."""

    def info(self, message: str) -> None:
        logger.info(message)

    def warning(self, message: str) -> None:
        logger.warning(message)

    def error(self, message: str) -> None:
        logger.error(message)


class NoOpStatus:
    """Status reporter that renders nothing."""

    def update(self, count: int) -> None:
        pass


class LoggingStatus:
    """Status reporter that logs indicator changes."""

    def __init__(self) -> None:
        self.text: str | None = None

    def update(self, count: int) -> None:
        text = format_status(count)
        if text != self.text:
            logger.info(text or "Sass Watchers: hidden")
        self.text = text


class LoggingOutput:
    """OutputLog writing each line through stdlib logging."""

    def append_line(self, text: str) -> None:
        logger.info(text)
