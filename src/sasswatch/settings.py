"""Persistent JSON settings store with workspace and global scopes.

Workspace settings live next to the project in `.sasswatch/settings.json`;
global settings live in the user config directory. Reads are forgiving:
a missing or malformed file reads as empty. Writes raise SettingsError.
"""

import asyncio
import json
import logging
from pathlib import Path
from typing import Any

from platformdirs import user_config_dir

from sasswatch.errors import SettingsError

logger = logging.getLogger(__name__)

APP_NAME = "sasswatch"
SETTINGS_FILENAME = "settings.json"
WORKSPACE_SETTINGS_DIR = ".sasswatch"
GLOBAL_SETTINGS_PATH = Path(user_config_dir(APP_NAME, appauthor=False)) / SETTINGS_FILENAME


def _read_json(path: Path) -> dict[str, Any]:
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except FileNotFoundError:
        return {}
    except (OSError, ValueError) as e:
        logger.warning(f"Ignoring unreadable settings file {path}: {e}")
        return {}
    return data if isinstance(data, dict) else {}


class SettingsStore:
    """Key/value settings, looked up in workspace scope then global scope."""

    def __init__(self, workspace_path: str | Path | None, global_path: str | Path | None = None):
        """Initialize store.

        Args:
            workspace_path: Workspace settings file (None disables the scope)
            global_path: Global settings file (defaults to the user config dir)
        """
        self.workspace_path = Path(workspace_path) if workspace_path else None
        self.global_path = Path(global_path) if global_path else GLOBAL_SETTINGS_PATH

    @classmethod
    def for_root(cls, root: str | Path, global_path: str | Path | None = None) -> "SettingsStore":
        """Store whose workspace scope lives under root."""
        return cls(Path(root) / WORKSPACE_SETTINGS_DIR / SETTINGS_FILENAME, global_path)

    def _path(self, is_global: bool) -> Path:
        if is_global or self.workspace_path is None:
            return self.global_path
        return self.workspace_path

    def get(self, key: str, default: Any = None) -> Any:
        """Read key, preferring workspace scope over global scope."""
        for path in (self.workspace_path, self.global_path):
            if path is None:
                continue
            data = _read_json(path)
            if key in data:
                return data[key]
        return default

    def has(self, key: str) -> bool:
        sentinel = object()
        return self.get(key, sentinel) is not sentinel

    def _write(self, key: str, value: Any, is_global: bool) -> None:
        path = self._path(is_global)
        data = _read_json(path)
        data[key] = value
        try:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
        except (OSError, TypeError, ValueError) as e:
            raise SettingsError(f"Failed to write {key} to {path}: {e}") from e

    async def update(self, key: str, value: Any, is_global: bool = False) -> None:
        """Write key in the chosen scope without blocking the event loop.

        Raises:
            SettingsError: If the settings file cannot be written
        """
        await asyncio.to_thread(self._write, key, value, is_global)
        logger.debug(f"Settings updated: {key} ({'global' if is_global else 'workspace'})")
