#!/usr/bin/env python3
"""
Example: Headless Watching
Shows how to use SassWatchController without the TUI.

This example demonstrates:
- Attaching the controller to your own event loop
- Relaunching the persisted watch set
- Reacting to watch-count changes and finished compiles
- Switching the active project root at runtime
"""

import asyncio
import logging
import sys
from pathlib import Path

from sasswatch.notifier import LoggingNotifier, LoggingOutput

try:
    from textual_sasswatch import SassWatchController
except ImportError:
    print("Error: Install textual-sasswatch first: pip install textual-sasswatch")
    sys.exit(1)


class BuildMonitor:
    """Keeps a project's styles compiled while another tool runs."""

    def __init__(self, config_path: str):
        self.controller = SassWatchController(
            config_path,
            notifier=LoggingNotifier(),
            output=LoggingOutput(),
        )
        self.compiled: list[Path] = []

    async def setup(self) -> None:
        self.controller.attach(asyncio.get_running_loop())
        self.controller.on_watch_changed = self._on_watch_changed
        self.controller.on_compiled = self._on_compiled

        watched = await self.controller.start()
        print(f"✓ Watching {len(watched)} directories")

    def _on_watch_changed(self, watched: dict[Path, int]) -> None:
        print(f"Watch set: {', '.join(str(d) for d in watched) or '(empty)'}")

    def _on_compiled(self, source: Path, written: list[Path]) -> None:
        self.compiled.extend(written)
        print(f"Compiled {source.name} -> {', '.join(p.name for p in written)}")

    async def switch_project(self, root: str) -> None:
        await self.controller.set_active_root(root)

    async def teardown(self) -> None:
        await self.controller.detach()


async def main(config_path: str, seconds: float) -> None:
    monitor = BuildMonitor(config_path)
    await monitor.setup()
    try:
        await asyncio.sleep(seconds)
    finally:
        await monitor.teardown()
    print(f"Wrote {len(monitor.compiled)} CSS files")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    asyncio.run(main(sys.argv[1] if len(sys.argv) > 1 else "sasswatch.toml", 60.0))
