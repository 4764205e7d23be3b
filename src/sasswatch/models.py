"""Shared data models for sasswatch."""

from dataclasses import dataclass, field, replace
from pathlib import Path

DEFAULT_EXTENSIONS = (".scss", ".sass")


@dataclass(frozen=True)
class WatchEntry:
    """One active directory watch."""

    directory: Path
    """Absolute directory path (unique key in the registry)."""

    handle: int
    """Opaque token issued by the subscriber, used for reporting and teardown."""


@dataclass(frozen=True)
class CompilerConfig:
    """Snapshot of compiler and watch settings.

    Passed by value into lifecycle operations. Operations that change the
    watch set return an updated copy instead of mutating this one.
    """

    watch_directories: tuple[str, ...] = ()
    """Persisted watch set. Entries may be relative to the project root."""

    include_path: tuple[str, ...] = ()
    """Extra load paths handed to the compiler."""

    sass_working_directory: str | None = None
    """Compiler working directory, defaults to the project root."""

    minify: bool = True
    """Also emit a compressed `.min.css` next to the expanded output."""

    extensions: tuple[str, ...] = DEFAULT_EXTENSIONS
    """Source suffixes whose changes trigger recompilation."""

    ignore_dirs: tuple[str, ...] = field(default=("node_modules", ".git", ".sass-cache"))
    """Directory names skipped by the file watcher."""

    debounce_ms: int = 300
    """Debounce delay for file events in milliseconds."""

    sass_executable: str = "sass"
    """Name or path of the sass binary."""

    def with_watch_directories(self, directories: list[str | Path]) -> "CompilerConfig":
        """Return a copy carrying a new watch set."""
        return replace(self, watch_directories=tuple(str(d) for d in directories))
