"""Bridge between the watch registry and durable settings."""

import logging
from collections.abc import Iterable
from pathlib import Path

from sasswatch.errors import SettingsError
from sasswatch.models import CompilerConfig
from sasswatch.notifier import NoOpNotifier, WatchNotifier
from sasswatch.settings import SettingsStore

logger = logging.getLogger(__name__)

WATCH_DIRECTORIES_KEY = "watchDirectories"


class PersistenceBridge:
    """Saves the watched directory list and reloads it on startup.

    The in-memory registry is the authority: a failed save is reported but
    never rolls back a watch or unwatch that already took effect.
    """

    def __init__(self, store: SettingsStore, notifier: WatchNotifier | None = None):
        self.store = store
        self.notifier = notifier or NoOpNotifier()

    async def write(self, directories: Iterable[str | Path]) -> bool:
        """Write directories to the workspace settings.

        Returns:
            True on success; a failure is logged and notified as an error
        """
        values = [str(d) for d in directories]
        try:
            await self.store.update(WATCH_DIRECTORIES_KEY, values, is_global=False)
        except SettingsError as e:
            logger.error(f"Failed to persist watch directories: {e}")
            self.notifier.error(f"Failed to update watchDirectories {e}")
            return False
        logger.info(f"Updated watchDirectories to {values}")
        return True

    async def save(self, config: CompilerConfig, directories: Iterable[str | Path]) -> CompilerConfig:
        """Persist directories as the watch set.

        Returns:
            Copy of config carrying the new watch set, whether or not the write succeeded
        """
        directories = list(directories)
        await self.write(directories)
        return config.with_watch_directories(directories)

    def load(self, config: CompilerConfig) -> CompilerConfig:
        """Overlay the stored watch set onto config, if one was saved."""
        stored = self.store.get(WATCH_DIRECTORIES_KEY)
        if not isinstance(stored, list):
            if stored is not None:
                logger.warning(f"Ignoring malformed {WATCH_DIRECTORIES_KEY}: {stored!r}")
            return config
        return config.with_watch_directories([str(d) for d in stored if isinstance(d, str)])
