"""Textual TUI for watching and compiling sass directories.

Layout:
- Input to add a directory watch
- List of watched directories (highlight + `u` to unwatch)
- Output log pane (watcher listings, compile results)
- Status line showing the active watch count, hidden when nothing is watched
"""

import asyncio
import logging
from pathlib import Path

from textual.app import App, ComposeResult
from textual.binding import Binding
from textual.widgets import Footer, Header, Input, ListView, Log, Static

from textual_sasswatch.controller import SassWatchController
from textual_sasswatch.widgets import AppNotifier, LogOutput, StatusLine, WatchItem

logger = logging.getLogger(__name__)


class SassWatchApp(App):
    """TUI shell around SassWatchController."""

    TITLE = "sasswatch"
    BINDINGS = [
        Binding("u", "unwatch_selected", "Unwatch"),
        Binding("l", "list_watchers", "List"),
        Binding("c", "clear_all", "Clear all"),
        Binding("r", "relaunch", "Relaunch"),
        Binding("R", "reload_config", "Reload config"),
        Binding("v", "show_version", "Version"),
        Binding("q", "quit", "Quit"),
    ]

    CSS = """
    Screen {
        layout: vertical;
    }

    #watch-input {
        margin: 0 0 1 0;
    }

    #watch-list {
        height: 1fr;
        border: solid $accent;
    }

    #output-log {
        height: 10;
        border: solid $panel;
    }

    #status {
        height: 1;
        background: $accent;
        padding: 0 1;
    }
    """

    def __init__(self, config_path: str | Path = "sasswatch.toml", root: str | Path | None = None, **kwargs):
        """Initialize app.

        Args:
            config_path: Path to sasswatch.toml
            root: Project root (defaults to the config file's directory)
        """
        super().__init__(**kwargs)
        self.config_path = Path(config_path)
        self.root = Path(root) if root is not None else None
        self.controller: SassWatchController | None = None
        self.watch_list: ListView | None = None
        self.output_log: Log | None = None

    def compose(self) -> ComposeResult:
        """Compose app layout."""
        yield Header()

        status = Static(id="status")
        status.display = False
        self.output_log = Log(id="output-log")
        self.watch_list = ListView(id="watch-list")

        try:
            self.controller = SassWatchController(
                self.config_path,
                root=self.root,
                notifier=AppNotifier(self),
                status=StatusLine(status),
                output=LogOutput(self.output_log),
            )
            self.controller.on_watch_changed = lambda watched: self.call_later(self._rebuild_watch_list)
            self.controller.on_compiled = self._on_compiled

            yield Input(placeholder="Directory to watch (relative to project root)", id="watch-input")
            yield self.watch_list
            yield self.output_log
        except Exception as e:
            # Fatal config error
            logger.error(f"Failed to initialize app: {e}")
            yield Static(f"❌ Configuration Error: {e}")

        yield status
        yield Footer()

    async def on_mount(self) -> None:
        """Attach controller to the event loop and relaunch persisted watches."""
        if not self.controller:
            logger.error("Controller not initialized")
            return

        self.controller.attach(asyncio.get_running_loop())
        await self.controller.start()

    async def on_unmount(self) -> None:
        """Stop every watch."""
        if self.controller:
            await self.controller.detach()

    async def _rebuild_watch_list(self) -> None:
        if self.watch_list is None or self.controller is None:
            return
        await self.watch_list.clear()
        for directory, handle in self.controller.watched.items():
            await self.watch_list.append(WatchItem(directory, handle))

    def _on_compiled(self, source: Path, written: list[Path]) -> None:
        if self.output_log is not None:
            names = ", ".join(p.name for p in written)
            self.output_log.write_line(f"Compiled {source} -> {names}")

    async def on_input_submitted(self, event: Input.Submitted) -> None:
        """Watch the submitted directory."""
        value = event.value.strip()
        if not value or self.controller is None:
            return
        event.input.value = ""

        directory = Path(value)
        if not directory.is_absolute() and self.controller.roots.active is not None:
            directory = self.controller.roots.active / directory
        await self.controller.watch(directory)

    async def action_unwatch_selected(self) -> None:
        if self.controller is None or self.watch_list is None:
            return
        item = self.watch_list.highlighted_child
        if not isinstance(item, WatchItem):
            self.notify("No watched directory selected", severity="warning")
            return
        await self.controller.unwatch(item.directory)

    def action_list_watchers(self) -> None:
        if self.controller:
            self.controller.list_watchers()

    async def action_clear_all(self) -> None:
        if self.controller:
            await self.controller.clear_all()

    async def action_relaunch(self) -> None:
        if self.controller:
            await self.controller.relaunch()

    async def action_reload_config(self) -> None:
        if self.controller:
            await self.controller.reload_config()

    async def action_show_version(self) -> None:
        if self.controller:
            await self.controller.compiler_version()
