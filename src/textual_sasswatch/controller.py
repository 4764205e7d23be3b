"""Non-Textual controller for sass watching and compiling. Primary embed point."""

import asyncio
import logging
from pathlib import Path
from typing import Callable, Optional

from sasswatch.compiler import SassCompiler
from sasswatch.config import load_compiler_config
from sasswatch.errors import CompileError
from sasswatch.file_watcher import WatchdogSubscriber
from sasswatch.lifecycle import WatchLifecycle
from sasswatch.models import CompilerConfig
from sasswatch.notifier import LoggingOutput, NoOpNotifier, NoOpStatus, OutputLog, StatusReporter, WatchNotifier
from sasswatch.paths import ProjectRoots
from sasswatch.persistence import PersistenceBridge
from sasswatch.settings import SettingsStore
from sasswatch.watchers import WatchSubscriber

logger = logging.getLogger(__name__)


class SassWatchController:
    """Non-Textual controller wiring the watch lifecycle to a host.

    Stable methods: attach(), detach(), start(), watch(), unwatch(),
    relaunch(), clear_all(), list_watchers(), set_active_root(),
    compile_file(). Internal methods (_on_source_changed, etc.) may change.
    """

    def __init__(
        self,
        config_path: str | Path,
        root: str | Path | None = None,
        notifier: WatchNotifier | None = None,
        status: StatusReporter | None = None,
        output: OutputLog | None = None,
        settings: SettingsStore | None = None,
        subscriber: WatchSubscriber | None = None,
        compiler: SassCompiler | None = None,
    ):
        """Initialize controller.

        Args:
            config_path: Path to sasswatch.toml
            root: Project root (defaults to the config file's directory)
            notifier: Optional notification handler (defaults to NoOpNotifier - silent)
            status: Status indicator receiving the watch count
            output: Sink for the watcher listing (defaults to logging)
            settings: Settings store (defaults to the root's workspace settings)
            subscriber: Watch subscriber (defaults to a watchdog subscriber created on attach)
            compiler: Sass compiler (defaults to one built from config)
        """
        self.config_path = Path(config_path)
        self.notifier = notifier or NoOpNotifier()
        self.status = status or NoOpStatus()
        self.output = output or LoggingOutput()
        self._loop: Optional[asyncio.AbstractEventLoop] = None
        self._subscriber = subscriber

        root = Path(root) if root is not None else self.config_path.parent
        self.roots = ProjectRoots([root], active=root)
        self.settings = settings or SettingsStore.for_root(root)

        try:
            self.config: CompilerConfig = load_compiler_config(self.config_path, self.settings)
        except Exception as e:
            logger.error(f"Failed to load config from {self.config_path}: {e}")
            raise

        self.compiler = compiler or SassCompiler.from_config(self.config)
        self.persistence = PersistenceBridge(self.settings, self.notifier)
        self.lifecycle: WatchLifecycle | None = None

        # Outbound events (host wires these)
        self.on_watch_changed: Callable[[dict[Path, int]], None] | None = None
        self.on_compiled: Callable[[Path, list[Path]], None] | None = None

    def attach(self, loop: asyncio.AbstractEventLoop) -> None:
        """Attach to a running event loop and build the lifecycle manager.

        Idempotent - a second call is a no-op.
        """
        if self._loop is not None:
            return  # Already attached

        if not loop.is_running():
            raise RuntimeError(
                "Event loop must be running before attach(). "
                "Call attach() from within on_mount() or after loop started."
            )

        self._loop = loop
        if self._subscriber is None:
            self._subscriber = WatchdogSubscriber(loop, self._on_source_changed)

        self.lifecycle = WatchLifecycle(
            subscriber=self._subscriber,
            persistence=self.persistence,
            roots=self.roots,
            notifier=self.notifier,
            status=self,
        )

    async def detach(self) -> None:
        """Stop every watch and release the subscriber."""
        if self.lifecycle is not None:
            await self.lifecycle.shutdown()
            self.lifecycle = None
        if self._subscriber is not None:
            try:
                self._subscriber.close()
            except Exception as e:
                logger.error(f"Error closing watch subscriber: {e}")
        self._loop = None

    def _require_lifecycle(self) -> WatchLifecycle:
        if self.lifecycle is None:
            raise RuntimeError("Controller not attached to event loop. Call attach() first.")
        return self.lifecycle

    # StatusReporter, relayed to the host
    def update(self, count: int) -> None:
        self.status.update(count)
        if self.on_watch_changed:
            self.on_watch_changed(self.watched)

    @property
    def watched(self) -> dict[Path, int]:
        """Snapshot of active watches (empty before attach)."""
        if self.lifecycle is None:
            return {}
        return self.lifecycle.watched()

    async def start(self) -> list[Path]:
        """Relaunch the persisted watch set for the active root."""
        return await self.relaunch()

    async def watch(self, srcdir: str | Path) -> None:
        config = self.config
        self._adopt(config, await self._require_lifecycle().watch(srcdir, config))

    async def unwatch(self, srcdir: str | Path) -> None:
        config = self.config
        self._adopt(config, await self._require_lifecycle().unwatch(srcdir, config))

    def _adopt(self, before: CompilerConfig, after: CompilerConfig) -> None:
        # Only the watch set changes; other fields may have been reloaded meanwhile
        if after is not before:
            self.config = self.config.with_watch_directories(list(after.watch_directories))

    async def relaunch(self) -> list[Path]:
        return await self._require_lifecycle().relaunch(self.config)

    async def clear_all(self) -> int:
        return await self._require_lifecycle().clear_all(self.config)

    def list_watchers(self, log: OutputLog | None = None) -> int:
        return self._require_lifecycle().list_watchers(log or self.output)

    async def reload_config(self) -> None:
        """Reload configuration from disk and relaunch the watch set."""
        try:
            self.config = load_compiler_config(self.config_path, self.settings)
            self.compiler = SassCompiler.from_config(self.config)
            self.notifier.info("Configuration reloaded")
        except Exception as e:
            logger.error(f"Failed to reload config: {e}")
            self.notifier.error(f"Failed to reload config: {e}")
            return
        if self.lifecycle is not None:
            await self.lifecycle.relaunch(self.config)

    async def set_active_root(self, root: str | Path | None) -> list[Path]:
        """Switch the active project root and reconcile the watch set.

        The new root's workspace settings supply the watch set. With no
        root every watch is cleared.
        """
        self.roots.set_active(root)
        if root is not None:
            self.settings = SettingsStore.for_root(root, self.settings.global_path)
            self.persistence.store = self.settings
            self.config = self.persistence.load(self.config.with_watch_directories([]))
        return await self.relaunch()

    async def compile_file(self, path: str | Path) -> list[Path]:
        """Compile one source file, notifying the host on failure.

        Returns:
            Written CSS files (empty on failure or for partials)
        """
        path = Path(path)
        root = self.roots.get_project_root(path) or self.roots.active or path.parent
        try:
            written = await self.compiler.compile_document(path, root, self.config)
        except CompileError as e:
            diagnostic = e.diagnostic
            logger.error(f"Error compiling {path}: {diagnostic.format()}")
            self.notifier.error(
                f"Error compiling scss file {path.name}: {diagnostic.line}:{diagnostic.column} {diagnostic.message}"
            )
            return []

        if written and self.on_compiled:
            self.on_compiled(path, written)
        return written

    def _on_source_changed(self, path: Path):
        """Handle a debounced source change (called on the event loop)."""
        logger.debug(f"Recompiling after change: {path}")
        return self.compile_file(path)

    async def compiler_version(self) -> str:
        """Report the sass compiler version."""
        try:
            version = await self.compiler.version()
        except CompileError as e:
            self.notifier.error(f"{e}")
            return ""
        self.notifier.info(f"Uses sass compiler: {version}")
        return version
