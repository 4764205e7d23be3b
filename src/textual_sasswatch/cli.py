"""CLI entry point for sasswatch-tui: auto-generates default config and launches the TUI."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path

from sasswatch.notifier import LoggingNotifier, LoggingOutput, LoggingStatus
from textual_sasswatch import __version__
from textual_sasswatch.controller import SassWatchController

# Default config template for a typical front-end project
DEFAULT_CONFIG_TEMPLATE = """\
# Auto-generated sasswatch.toml

[compiler]
include_path = ["node_modules"]
sass_working_directory = "."
minify = true
sass_executable = "sass"

[watch]
directories = []
extensions = [".scss", ".sass"]
ignore_dirs = ["node_modules", ".git", ".sass-cache"]
debounce_ms = 300
"""


def create_default_config(config_path: Path) -> bool:
    """
    Create a default sasswatch.toml if it doesn't exist.

    Args:
        config_path: Path where config should be created

    Returns:
        True if config was created, False if it already exists

    Raises:
        PermissionError: If unable to write to the directory
        OSError: If other file system errors occur
    """
    if config_path.exists():
        return False

    config_path.parent.mkdir(parents=True, exist_ok=True)
    config_path.write_text(DEFAULT_CONFIG_TEMPLATE)
    return True


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    """
    Parse command-line arguments.

    Returns:
        Parsed arguments namespace
    """
    parser = argparse.ArgumentParser(
        prog="sasswatch-tui",
        description="Watch SASS/SCSS directories and compile them to CSS.",
        epilog="Examples:\n"
        "  sasswatch-tui                        # Auto-create sasswatch.toml and launch\n"
        "  sasswatch-tui --config site.toml     # Use custom config\n"
        "  sasswatch-tui --headless             # Relaunch persisted watches without the TUI\n"
        "  sasswatch-tui --version              # Show version",
        formatter_class=argparse.RawDescriptionHelpFormatter,
    )

    parser.add_argument(
        "-c",
        "--config",
        default="sasswatch.toml",
        help="Path to config file (default: sasswatch.toml)",
    )

    parser.add_argument(
        "--root",
        default=None,
        help="Project root (default: directory containing the config file)",
    )

    parser.add_argument(
        "--headless",
        action="store_true",
        help="Run without the TUI, logging notifications to stderr",
    )

    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        help="Enable debug logging",
    )

    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )

    return parser.parse_args(argv)


async def run_headless(config_path: Path, root: Path | None = None, stop: asyncio.Event | None = None) -> None:
    """Relaunch persisted watches and keep them alive until stop is set or the task is cancelled."""
    controller = SassWatchController(
        config_path,
        root=root,
        notifier=LoggingNotifier(),
        status=LoggingStatus(),
        output=LoggingOutput(),
    )
    controller.attach(asyncio.get_running_loop())
    stop = stop or asyncio.Event()
    try:
        await controller.start()
        controller.list_watchers()
        await stop.wait()
    finally:
        await controller.detach()


def main() -> None:
    """
    Main entry point for sasswatch-tui CLI.

    Handles:
    - Argument parsing
    - Auto-creation of sasswatch.toml
    - Launching SassWatchApp or the headless runner
    - Error handling and exit codes
    """
    args = parse_args()

    config_path = Path(args.config).resolve()
    root = Path(args.root).resolve() if args.root else None

    try:
        if create_default_config(config_path):
            print(f"Created default config at: {config_path}")

        if not config_path.exists():
            print(f"Error: Config file not found: {config_path}", file=sys.stderr)
            sys.exit(1)

        if args.headless:
            logging.basicConfig(
                level=logging.DEBUG if args.verbose else logging.INFO,
                format="%(asctime)s %(levelname)s %(name)s: %(message)s",
            )
            asyncio.run(run_headless(config_path, root))
        else:
            from textual_sasswatch.app import SassWatchApp

            app = SassWatchApp(config_path=config_path, root=root)
            app.run()

    except KeyboardInterrupt:
        # Gracefully handle Ctrl+C
        sys.exit(130)
    except (PermissionError, OSError) as e:
        print(f"Error: Failed to create config: {e}", file=sys.stderr)
        sys.exit(1)
    except Exception as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
