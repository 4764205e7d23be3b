"""Watch subscriber implementation using watchdog."""

import asyncio
import inspect
import itertools
import logging
import os
from pathlib import Path
from threading import Lock, Timer

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer
from watchdog.observers.api import ObservedWatch

from sasswatch.errors import WatchError
from sasswatch.models import CompilerConfig
from sasswatch.watchers import ChangeCallback

logger = logging.getLogger(__name__)


class _DebouncedHandler(FileSystemEventHandler):
    """Debounced file system event handler for one watched directory."""

    def __init__(
        self,
        directory: Path,
        loop: asyncio.AbstractEventLoop,
        on_change: ChangeCallback,
        debounce_ms: int,
        extensions: tuple[str, ...],
        ignore_dirs: tuple[str, ...] = (),
    ):
        """Initialize handler.

        Args:
            directory: Watched directory (events are filtered relative to it)
            loop: Event loop the callback is scheduled on
            on_change: Callback receiving the changed file path
            debounce_ms: Debounce delay in milliseconds
            extensions: Source suffixes to react to
            ignore_dirs: Directory names to skip
        """
        self.directory = directory
        self.loop = loop
        self.on_change = on_change
        self.debounce_ms = debounce_ms
        self.extensions = extensions
        self.ignore_dirs = ignore_dirs
        self._timers: dict[Path, Timer] = {}
        self._lock = Lock()
        self._tasks: set[asyncio.Task] = set()

    def _matches_filters(self, path: Path) -> bool:
        """Check if path is a source file outside ignored directories."""
        if path.suffix not in self.extensions:
            return False

        try:
            relative = path.relative_to(self.directory)
        except ValueError:
            return False

        return not any(part in self.ignore_dirs for part in relative.parts[:-1])

    def _schedule(self, path: Path) -> None:
        """Schedule the change callback after the debounce delay."""
        with self._lock:
            timer = self._timers.pop(path, None)
            if timer:
                timer.cancel()

            timer = Timer(self.debounce_ms / 1000.0, self._fire, args=(path,))
            timer.daemon = True
            self._timers[path] = timer
            timer.start()

    def _fire(self, path: Path) -> None:
        with self._lock:
            self._timers.pop(path, None)
        try:
            self.loop.call_soon_threadsafe(self._dispatch, path)
        except RuntimeError as e:
            # Loop already closed during shutdown
            logger.debug(f"Dropped change for {path}: {e}")

    def _dispatch(self, path: Path) -> None:
        """Run the callback on the event loop."""
        try:
            result = self.on_change(path)
            if inspect.isawaitable(result):
                task = self.loop.create_task(result)
                self._tasks.add(task)
                task.add_done_callback(lambda t: self._task_done(t, path))
        except Exception as e:
            logger.error(f"Change handler failed for {path}: {e}")

    def _task_done(self, task: asyncio.Task, path: Path) -> None:
        self._tasks.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            logger.error(f"Change handler failed for {path}: {error}")

    def cancel(self) -> None:
        """Cancel pending timers."""
        with self._lock:
            for timer in self._timers.values():
                timer.cancel()
            self._timers.clear()

    def _handle(self, raw_path: str | bytes) -> None:
        path = Path(os.fsdecode(raw_path))
        if self._matches_filters(path):
            logger.debug(f"Source change detected: {path}")
            self._schedule(path)

    def on_modified(self, event: FileSystemEvent) -> None:
        """Handle file modification events."""
        if event.is_directory:
            return
        self._handle(event.src_path)

    def on_created(self, event: FileSystemEvent) -> None:
        """Handle file creation events."""
        if event.is_directory:
            return
        self._handle(event.src_path)

    def on_moved(self, event: FileSystemEvent) -> None:
        """Handle renames into a watched source name (editors saving atomically)."""
        if event.is_directory:
            return
        self._handle(event.dest_path)


class WatchdogSubscriber:
    """Watch subscriber sharing one watchdog observer across directories."""

    def __init__(self, loop: asyncio.AbstractEventLoop, on_change: ChangeCallback):
        """Initialize subscriber.

        Args:
            loop: Event loop for scheduling change callbacks
            on_change: Callback receiving each changed source file
        """
        self.loop = loop
        self.on_change = on_change
        self.observer = Observer()
        self._handles = itertools.count(1)
        self._watches: dict[Path, tuple[int, ObservedWatch, _DebouncedHandler]] = {}

    def _ensure_started(self) -> None:
        if not self.observer.is_alive():
            self.observer.start()
            logger.debug("Watchdog observer started")

    async def start_watch(self, directory: Path, config: CompilerConfig) -> int:
        """Begin watching directory recursively.

        Returns:
            Handle identifying the subscription

        Raises:
            WatchError: If directory is missing, not a directory, or cannot be scheduled
        """
        directory = Path(directory)
        existing = self._watches.get(directory)
        if existing:
            return existing[0]

        if not directory.exists():
            raise WatchError(f"Directory does not exist: {directory}")
        if not directory.is_dir():
            raise WatchError(f"Not a directory: {directory}")

        handler = _DebouncedHandler(
            directory=directory,
            loop=self.loop,
            on_change=self.on_change,
            debounce_ms=config.debounce_ms,
            extensions=config.extensions,
            ignore_dirs=config.ignore_dirs,
        )

        try:
            self._ensure_started()
            watch = self.observer.schedule(handler, str(directory), recursive=True)
        except OSError as e:
            raise WatchError(f"Unable to watch {directory}: {e}") from e

        handle = next(self._handles)
        self._watches[directory] = (handle, watch, handler)
        logger.info(f"Watching {directory} (handle {handle}, debounce: {config.debounce_ms}ms)")
        return handle

    async def stop_watch(self, directory: Path, config: CompilerConfig) -> None:
        """Stop watching directory.

        Raises:
            WatchError: If directory is not being watched
        """
        directory = Path(directory)
        subscription = self._watches.pop(directory, None)
        if subscription is None:
            raise WatchError(f"Directory {directory} is not being watched")

        handle, watch, handler = subscription
        handler.cancel()
        try:
            self.observer.unschedule(watch)
        except (KeyError, OSError) as e:
            # Emitter already gone (directory deleted); the subscription is still released
            logger.warning(f"Error unscheduling {directory}: {e}")
        logger.info(f"Stopped watching {directory} (handle {handle})")

    def is_watching(self, directory: Path) -> bool:
        return Path(directory) in self._watches

    def close(self) -> None:
        """Stop the observer and cancel pending timers."""
        for _, _, handler in self._watches.values():
            handler.cancel()
        self._watches.clear()

        if self.observer.is_alive():
            self.observer.stop()
            self.observer.join(timeout=2.0)
            logger.info("Stopped watchdog observer")
