"""In-memory registry of active directory watches."""

from pathlib import Path

from sasswatch.models import WatchEntry


class WatchRegistry:
    """Mapping of absolute directory -> WatchEntry.

    The single source of truth for what is being watched right now. Owned by
    WatchLifecycle; other components only see snapshots. Every operation is
    total and none of them raise.
    """

    def __init__(self) -> None:
        self._entries: dict[Path, WatchEntry] = {}

    def add(self, directory: str | Path, handle: int) -> WatchEntry:
        """Insert or replace the entry for directory."""
        entry = WatchEntry(directory=Path(directory), handle=handle)
        self._entries[entry.directory] = entry
        return entry

    def remove(self, directory: str | Path) -> bool:
        """Remove directory if present.

        Returns:
            True if an entry was removed, False if directory was not registered
        """
        return self._entries.pop(Path(directory), None) is not None

    def get(self, directory: str | Path) -> WatchEntry | None:
        return self._entries.get(Path(directory))

    def directories(self) -> list[Path]:
        return list(self._entries)

    def size(self) -> int:
        return len(self._entries)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)

    def __contains__(self, directory: object) -> bool:
        if not isinstance(directory, (str, Path)):
            return False
        return Path(directory) in self._entries

    # Defined last: the name shadows the builtin inside the class body
    def list(self) -> dict[Path, int]:
        """Snapshot of directory -> handle, in insertion order."""
        return {directory: entry.handle for directory, entry in self._entries.items()}
