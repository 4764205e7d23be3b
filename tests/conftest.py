"""Pytest configuration and fixtures."""

import asyncio
import sys
from pathlib import Path

import pytest

# Add src directory to Python path for imports
src_path = Path(__file__).parent.parent / "src"
sys.path.insert(0, str(src_path))

from sasswatch.errors import SettingsError, WatchError  # noqa: E402
from sasswatch.lifecycle import WatchLifecycle  # noqa: E402
from sasswatch.notifier import format_status  # noqa: E402
from sasswatch.paths import ProjectRoots  # noqa: E402
from sasswatch.persistence import PersistenceBridge  # noqa: E402


class FakeSubscriber:
    """In-memory watch subscriber.

    Directories in `failing` refuse to start. With `strict_stop`, stopping an
    unknown directory raises like the watchdog subscriber does.
    """

    def __init__(self, failing=(), delays=None, strict_stop=False):
        self.failing = {Path(d) for d in failing}
        self.delays = {Path(d): v for d, v in (delays or {}).items()}
        self.strict_stop = strict_stop
        self.active: dict[Path, int] = {}
        self.started: list[Path] = []
        self.stopped: list[Path] = []
        self.closed = False
        self._next = 100

    async def start_watch(self, directory, config):
        directory = Path(directory)
        await asyncio.sleep(self.delays.get(directory, 0))
        if directory in self.failing:
            raise WatchError(f"Directory does not exist: {directory}")
        self._next += 1
        self.active[directory] = self._next
        self.started.append(directory)
        return self._next

    async def stop_watch(self, directory, config):
        directory = Path(directory)
        if directory not in self.active and self.strict_stop:
            raise WatchError(f"Directory {directory} is not being watched")
        self.active.pop(directory, None)
        self.stopped.append(directory)

    def close(self):
        self.closed = True


class RecordingNotifier:
    """Notifier capturing (level, message) pairs."""

    def __init__(self):
        self.messages: list[tuple[str, str]] = []

    def info(self, message):
        self.messages.append(("info", message))

    def warning(self, message):
        self.messages.append(("warning", message))

    def error(self, message):
        self.messages.append(("error", message))

    def of(self, level):
        return [m for lvl, m in self.messages if lvl == level]


class RecordingStatus:
    """Status reporter remembering every count it was given."""

    def __init__(self):
        self.counts: list[int] = []

    def update(self, count):
        self.counts.append(count)

    @property
    def text(self):
        return format_status(self.counts[-1]) if self.counts else None


class RecordingLog:
    def __init__(self):
        self.lines: list[str] = []

    def append_line(self, text):
        self.lines.append(text)


class MemoryStore:
    """Settings store kept in a dict.

    Set `fail` to make writes raise. `delays` maps a written list (as a
    tuple) to seconds the write takes.
    """

    def __init__(self, data=None, fail=False, delays=None):
        self.data = dict(data or {})
        self.fail = fail
        self.delays = delays or {}
        self.updates: list[tuple[str, object, bool]] = []

    def get(self, key, default=None):
        return self.data.get(key, default)

    async def update(self, key, value, is_global=False):
        self.updates.append((key, value, is_global))
        await asyncio.sleep(self.delays.get(tuple(value), 0))
        if self.fail:
            raise SettingsError(f"Failed to write {key}: disk full")
        self.data[key] = value


@pytest.fixture
def subscriber():
    return FakeSubscriber()


@pytest.fixture
def notifier():
    return RecordingNotifier()


@pytest.fixture
def status():
    return RecordingStatus()


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def roots():
    return ProjectRoots(["/proj"], active="/proj")


@pytest.fixture
def lifecycle(subscriber, store, roots, notifier, status):
    """Lifecycle manager wired to in-memory collaborators, rooted at /proj."""
    return WatchLifecycle(
        subscriber=subscriber,
        persistence=PersistenceBridge(store, notifier),
        roots=roots,
        notifier=notifier,
        status=status,
    )
