"""Path resolution against project roots."""

import logging
from collections.abc import Iterable
from pathlib import Path

logger = logging.getLogger(__name__)


def resolve(root: str | Path, entry: str | Path) -> Path:
    """Resolve a configured entry against the project root.

    Args:
        root: Project root directory
        entry: Absolute path, or a path relative to root

    Returns:
        entry unchanged when absolute, otherwise root joined with entry
    """
    path = Path(entry)
    if path.is_absolute():
        return path
    return Path(root) / path


def resolve_all(root: str | Path, entries: Iterable[str | Path]) -> list[Path]:
    """Resolve each entry against root, preserving order."""
    return [resolve(root, entry) for entry in entries]


class ProjectRoots:
    """Workspace roots known to the host, plus the currently active one.

    The active root is read on every relaunch; it is owned by the host
    (editor state, CLI flag) and only tracked here.
    """

    def __init__(self, roots: Iterable[str | Path] = (), active: str | Path | None = None):
        """Initialize roots.

        Args:
            roots: Workspace root directories
            active: Active root, must be one of roots when given
        """
        self._roots: list[Path] = [Path(r) for r in roots]
        self._active: Path | None = None
        self._cleared = False
        if active is not None:
            self.set_active(active)

    @property
    def roots(self) -> list[Path]:
        """Known roots, in registration order."""
        return list(self._roots)

    @property
    def active(self) -> Path | None:
        """Active root, or the only root when exactly one is known.

        None after set_active(None), even with a single known root.
        """
        if self._cleared:
            return None
        if self._active is not None:
            return self._active
        if len(self._roots) == 1:
            return self._roots[0]
        return None

    def set_active(self, root: str | Path | None) -> None:
        """Change the active root, registering it when unknown."""
        if root is None:
            self._active = None
            self._cleared = True
            logger.debug("Active project root cleared")
            return
        root = Path(root)
        if root not in self._roots:
            self._roots.append(root)
        self._active = root
        self._cleared = False
        logger.debug(f"Active project root set to {root}")

    def get_project_root(self, path: str | Path) -> Path | None:
        """Find the deepest known root containing path.

        Relative paths are resolved against the active root first.

        Returns:
            The containing root, or None when path is outside every root
        """
        path = Path(path)
        if not path.is_absolute():
            active = self.active
            if active is None:
                return None
            path = active / path

        best: Path | None = None
        for root in self._roots:
            if path == root or root in path.parents:
                if best is None or len(root.parts) > len(best.parts):
                    best = root
        return best
