"""Exception hierarchy for sasswatch."""

from dataclasses import dataclass


class SassWatchError(Exception):
    """Base class for all sasswatch errors."""


class WatchError(SassWatchError):
    """A watch subscription could not be started or stopped."""


class SettingsError(SassWatchError):
    """The settings store could not be read or written."""


class ConfigError(SassWatchError):
    """The project configuration file could not be parsed."""


@dataclass
class CompileDiagnostic:
    """Location and message reported by the sass compiler."""

    file: str
    """File the error was reported in (may be empty when unknown)."""

    line: int
    """1-based line number, 0 when unknown."""

    column: int
    """1-based column number, 0 when unknown."""

    message: str
    """Formatted compiler message."""

    def format(self) -> str:
        """Render as `file line:column message`, dropping unknown parts."""
        location = f"{self.line}:{self.column}" if self.line else ""
        parts = [part for part in (self.file, location, self.message) if part]
        return " ".join(parts)


class CompileError(SassWatchError):
    """The sass compiler rejected an input file."""

    def __init__(self, diagnostic: CompileDiagnostic):
        super().__init__(diagnostic.format())
        self.diagnostic = diagnostic
