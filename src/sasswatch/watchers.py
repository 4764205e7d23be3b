"""Abstract watch-subscription protocol for file watching implementations."""

from collections.abc import Awaitable, Callable
from pathlib import Path
from typing import Protocol

from sasswatch.models import CompilerConfig

ChangeCallback = Callable[[Path], Awaitable[None] | None]
"""Called on the event loop with the path of a changed source file."""


class WatchSubscriber(Protocol):
    """Protocol for watch-subscription implementations.

    Both operations may raise; callers convert failures into notifications.
    """

    async def start_watch(self, directory: Path, config: CompilerConfig) -> int:
        """Begin watching directory and return an opaque handle.

        Raises:
            WatchError: If the directory cannot be watched
        """
        ...

    async def stop_watch(self, directory: Path, config: CompilerConfig) -> None:
        """Stop watching directory.

        Raises:
            WatchError: If directory is not being watched
        """
        ...

    def close(self) -> None:
        """Release every subscription and background resource."""
        ...
