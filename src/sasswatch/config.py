"""Configuration parsing for sasswatch."""

import logging
from pathlib import Path

try:
    import tomllib
except ImportError:
    import tomli as tomllib  # type: ignore

from sasswatch.errors import ConfigError
from sasswatch.models import DEFAULT_EXTENSIONS, CompilerConfig
from sasswatch.persistence import PersistenceBridge
from sasswatch.settings import SettingsStore

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "sasswatch.toml"


def _string_tuple(raw: dict, key: str, default: tuple[str, ...] = ()) -> tuple[str, ...]:
    value = raw.get(key, default)
    if isinstance(value, str):
        return (value,)
    if not isinstance(value, (list, tuple)) or not all(isinstance(v, str) for v in value):
        raise ConfigError(f"'{key}' must be a list of strings, got {value!r}")
    return tuple(value)


def parse_compiler_config(raw: dict) -> CompilerConfig:
    """Build a CompilerConfig from parsed TOML tables.

    Raises:
        ConfigError: If a value has the wrong type
    """
    compiler = raw.get("compiler", {})
    watch = raw.get("watch", {})

    debounce_ms = watch.get("debounce_ms", 300)
    if not isinstance(debounce_ms, int) or debounce_ms < 0:
        raise ConfigError(f"'debounce_ms' must be a non-negative integer, got {debounce_ms!r}")

    working_directory = compiler.get("sass_working_directory")
    if working_directory is not None and not isinstance(working_directory, str):
        raise ConfigError(f"'sass_working_directory' must be a string, got {working_directory!r}")

    return CompilerConfig(
        watch_directories=_string_tuple(watch, "directories"),
        include_path=_string_tuple(compiler, "include_path"),
        sass_working_directory=working_directory,
        minify=bool(compiler.get("minify", True)),
        extensions=_string_tuple(watch, "extensions", DEFAULT_EXTENSIONS),
        ignore_dirs=_string_tuple(watch, "ignore_dirs", ("node_modules", ".git", ".sass-cache")),
        debounce_ms=debounce_ms,
        sass_executable=str(compiler.get("sass_executable", "sass")),
    )


def load_compiler_config(path: str | Path, store: SettingsStore | None = None) -> CompilerConfig:
    """Load configuration from a TOML file.

    Args:
        path: Path to sasswatch.toml
        store: Optional settings store whose persisted watch set overrides the file

    Returns:
        CompilerConfig snapshot

    Raises:
        FileNotFoundError: If the file does not exist
        ConfigError: If the file cannot be parsed
    """
    path = Path(path)

    if not path.exists():
        raise FileNotFoundError(
            f"Config file not found: {path}\nRun 'sasswatch-tui' without arguments to auto-create a default config."
        )

    try:
        with open(path, "rb") as f:
            raw = tomllib.load(f)
    except (OSError, tomllib.TOMLDecodeError) as e:
        raise ConfigError(f"Failed to parse config file {path}: {e}") from e

    config = parse_compiler_config(raw)
    if store is not None:
        config = PersistenceBridge(store).load(config)

    logger.debug(f"Loaded config from {path}: {len(config.watch_directories)} watch directories")
    return config
