"""Directory watch lifecycle manager.

Each directory moves Unwatched -> Watching -> Unwatched. A failure while
starting a watch leaves the directory Unwatched; a failure while stopping one
is logged and the entry is still dropped from the registry.

All collaborator failures are caught here and turned into notifications.
Nothing raised by the subscriber or the settings store escapes an operation.
"""

import asyncio
import logging
from pathlib import Path

from sasswatch.models import CompilerConfig
from sasswatch.notifier import NoOpNotifier, NoOpStatus, OutputLog, StatusReporter, WatchNotifier
from sasswatch.paths import ProjectRoots, resolve, resolve_all
from sasswatch.persistence import PersistenceBridge
from sasswatch.registry import WatchRegistry
from sasswatch.watchers import WatchSubscriber

logger = logging.getLogger(__name__)


class WatchLifecycle:
    """Starts, stops, persists and relaunches directory watches.

    Owns the WatchRegistry for its whole lifetime. Hosts construct one per
    process and pass it to their command handlers; call shutdown() on exit.
    """

    def __init__(
        self,
        subscriber: WatchSubscriber,
        persistence: PersistenceBridge,
        roots: ProjectRoots,
        notifier: WatchNotifier | None = None,
        status: StatusReporter | None = None,
    ):
        """Initialize lifecycle manager.

        Args:
            subscriber: Watch-subscription collaborator
            persistence: Bridge used to save the watch set after watch/unwatch
            roots: Project roots used to resolve directories
            notifier: User notification sink (defaults to silent)
            status: Status indicator receiving the watch count
        """
        self.subscriber = subscriber
        self.persistence = persistence
        self.roots = roots
        self.notifier = notifier or NoOpNotifier()
        self.status = status or NoOpStatus()
        self._registry = WatchRegistry()
        self._save_lock = asyncio.Lock()

    # Read-only views

    def watched(self) -> dict[Path, int]:
        """Snapshot of directory -> handle for every active watch."""
        return self._registry.list()

    def is_watching(self, directory: str | Path) -> bool:
        return directory in self._registry

    @property
    def count(self) -> int:
        return self._registry.size()

    def _refresh_status(self) -> None:
        self.status.update(self._registry.size())

    def _resolve(self, srcdir: str | Path) -> Path | None:
        path = Path(srcdir)
        if not path.is_absolute():
            active = self.roots.active
            if active is None:
                logger.debug(f"No active project root for {srcdir}, ignoring")
                return None
            path = resolve(active, path)
        if self.roots.get_project_root(path) is None:
            logger.debug(f"No project root for {srcdir}, ignoring")
            return None
        return path

    async def _persist(self, config: CompilerConfig) -> tuple[CompilerConfig, bool]:
        # Snapshot under the lock so the last write always carries the latest registry
        async with self._save_lock:
            directories = self._registry.directories()
            saved = await self.persistence.write(directories)
        return config.with_watch_directories(directories), saved

    # Commands

    async def watch(self, srcdir: str | Path, config: CompilerConfig) -> CompilerConfig:
        """Start watching srcdir and persist the new watch set.

        Returns:
            Config carrying the updated watch set, or config unchanged when nothing changed
        """
        directory = self._resolve(srcdir)
        if directory is None:
            return config

        if directory in self._registry:
            self.notifier.info(f"Already watching directory {directory}")
            self._refresh_status()
            return config

        try:
            handle = await self.subscriber.start_watch(directory, config)
        except Exception as e:
            logger.error(f"Failed to watch {directory}: {e}")
            self.notifier.error(f"{e}")
            return config

        if directory in self._registry:
            # A concurrent watch of the same directory got there first
            self.notifier.info(f"Already watching directory {directory}")
            self._refresh_status()
            return config

        self._registry.add(directory, handle)
        self._refresh_status()
        config, saved = await self._persist(config)
        if saved:
            self.notifier.info(f"About to watch directory {directory}")
        return config

    async def unwatch(self, srcdir: str | Path, config: CompilerConfig) -> CompilerConfig:
        """Stop watching srcdir and persist the reduced watch set.

        Returns:
            Config carrying the updated watch set, or config unchanged when nothing changed
        """
        directory = self._resolve(srcdir)
        if directory is None:
            return config

        try:
            await self.subscriber.stop_watch(directory, config)
        except Exception as e:
            logger.warning(f"Error stopping watch on {directory}: {e}")

        if not self._registry.remove(directory):
            self.notifier.warning(f"Unable to clear watch for directory {directory}.")
            return config

        self._refresh_status()
        config, saved = await self._persist(config)
        if saved:
            self.notifier.info(f"Directory {directory} unwatched now.")
        return config

    def list_watchers(self, log: OutputLog) -> int:
        """Write every (directory, handle) pair to log and report the count."""
        watch_list = self._registry.list()
        count = len(watch_list)
        if count == 0:
            self.notifier.info("No watchers defined.")
            return 0

        log.append_line(f"******************* {count} watchers begin *********")
        for directory, handle in watch_list.items():
            log.append_line(f"{directory} -> {handle} ( watch id )")
        log.append_line(f"******************* {count} watchers *********")
        self.notifier.info(f"Having {count} watchers. Check the output log for more details.")
        return count

    async def _teardown(self, directory: Path, config: CompilerConfig) -> None:
        try:
            await self.subscriber.stop_watch(directory, config)
        except Exception as e:
            logger.warning(f"Error stopping watch on {directory}: {e}")

    async def stop(self, directory: str | Path, config: CompilerConfig | None = None) -> bool:
        """Tear down one watch without touching persisted settings.

        Returns:
            True if directory was registered and has been removed
        """
        entry = self._registry.get(directory)
        if entry is None:
            return False
        await self._teardown(entry.directory, config or CompilerConfig())
        self._registry.remove(entry.directory)
        self._refresh_status()
        return True

    async def _stop_all(self, config: CompilerConfig) -> None:
        directories = self._registry.directories()
        await asyncio.gather(*(self._teardown(d, config) for d in directories))
        self._registry.clear()

    async def clear_all(self, config: CompilerConfig | None = None) -> int:
        """Stop every active watch.

        Returns:
            Number of watches cleared
        """
        count = self._registry.size()
        if count == 0:
            return 0

        self.notifier.info(f"Clearing {count} sass watchers")
        await self._stop_all(config or CompilerConfig())
        self._refresh_status()
        return count

    async def _relaunch_one(self, directory: Path, config: CompilerConfig) -> bool:
        try:
            handle = await self.subscriber.start_watch(directory, config)
        except Exception as e:
            logger.error(f"Failed to relaunch watch on {directory}: {e}")
            self.notifier.error(f"Failed to watch {directory}: {e}")
            return False

        self._registry.add(directory, handle)
        self._refresh_status()
        return True

    async def relaunch(self, config: CompilerConfig) -> list[Path]:
        """Re-establish the configured watch set for the active project root.

        Without an active root every watch is cleared instead. Each directory
        is started as an independent task; one failing does not affect the others.

        Returns:
            Directories watched after the relaunch, in configured order
        """
        root = self.roots.active
        if root is None:
            await self.clear_all(config)
            return []

        await self._stop_all(config)

        directories = list(dict.fromkeys(resolve_all(root, config.watch_directories)))
        logger.info(f"Relaunching {len(directories)} watchers for {root}")
        results = await asyncio.gather(*(self._relaunch_one(d, config) for d in directories))

        self._refresh_status()
        return [d for d, ok in zip(directories, results) if ok]

    async def shutdown(self) -> None:
        """Stop every watch; call once when the host exits."""
        await self.clear_all()
