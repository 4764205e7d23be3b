"""sasswatch: SASS/SCSS directory watch lifecycle and compiler wrapper."""

__version__ = "0.1.0"

# Models
from sasswatch.models import CompilerConfig, WatchEntry

# Errors
from sasswatch.errors import (
    CompileDiagnostic,
    CompileError,
    ConfigError,
    SassWatchError,
    SettingsError,
    WatchError,
)

# Core
from sasswatch.paths import ProjectRoots, resolve, resolve_all
from sasswatch.registry import WatchRegistry
from sasswatch.lifecycle import WatchLifecycle
from sasswatch.persistence import PersistenceBridge
from sasswatch.settings import SettingsStore

# Config
from sasswatch.config import load_compiler_config

__all__ = [
    "__version__",
    # Models
    "CompilerConfig",
    "WatchEntry",
    # Errors
    "SassWatchError",
    "WatchError",
    "SettingsError",
    "ConfigError",
    "CompileError",
    "CompileDiagnostic",
    # Core
    "ProjectRoots",
    "resolve",
    "resolve_all",
    "WatchRegistry",
    "WatchLifecycle",
    "PersistenceBridge",
    "SettingsStore",
    # Config
    "load_compiler_config",
]
