"""Textual adapters for the sasswatch notifier, status and output protocols."""

from pathlib import Path

from textual.app import App
from textual.widgets import Label, ListItem, Log, Static

from sasswatch.notifier import format_status


class WatchItem(ListItem):
    """List row for one watched directory."""

    def __init__(self, directory: Path, handle: int):
        super().__init__(Label(f"{directory}  [dim]#{handle}[/dim]"))
        self.directory = directory
        self.handle = handle


class AppNotifier:
    """WatchNotifier implemented with Textual toasts."""

    def __init__(self, app: App):
        self.app = app

    def info(self, message: str) -> None:
        self.app.notify(message, severity="information")

    def warning(self, message: str) -> None:
        self.app.notify(message, severity="warning")

    def error(self, message: str) -> None:
        self.app.notify(message, severity="error", timeout=10)


class StatusLine:
    """StatusReporter driving a Static: hidden at zero, otherwise the count."""

    def __init__(self, widget: Static):
        self.widget = widget

    def update(self, count: int) -> None:
        text = format_status(count)
        self.widget.display = text is not None
        if text is not None:
            self.widget.update(text)


class LogOutput:
    """OutputLog writing into a Textual Log pane."""

    def __init__(self, log: Log):
        self.log = log

    def append_line(self, text: str) -> None:
        self.log.write_line(text)
