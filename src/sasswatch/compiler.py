"""Thin async wrapper around the dart-sass command line compiler."""

import asyncio
import logging
import re
from pathlib import Path

from sasswatch.errors import CompileDiagnostic, CompileError
from sasswatch.models import CompilerConfig
from sasswatch.paths import resolve, resolve_all

logger = logging.getLogger(__name__)

# Stack frame line, e.g. "  styles/main.scss 3:10  root stylesheet"
_FRAME_RE = re.compile(r"^\s*(?P<file>\S.*?) (?P<line>\d+):(?P<column>\d+)\s{2,}\S")


def parse_diagnostic(stderr: str) -> CompileDiagnostic:
    """Extract the first error message and location from sass stderr output."""
    message = ""
    file, line, column = "", 0, 0
    for raw in stderr.splitlines():
        if not message and raw.startswith("Error: "):
            message = raw[len("Error: "):].strip()
            continue
        match = _FRAME_RE.match(raw)
        if match and not file:
            file = match.group("file")
            line = int(match.group("line"))
            column = int(match.group("column"))

    if not message:
        message = stderr.strip().splitlines()[0] if stderr.strip() else "sass exited with an error"
    return CompileDiagnostic(file=file, line=line, column=column, message=message)


def output_paths(input_path: Path) -> tuple[Path, Path]:
    """Expanded and minified output paths written next to input_path."""
    return (
        input_path.with_name(f"{input_path.stem}.css"),
        input_path.with_name(f"{input_path.stem}.min.css"),
    )


class SassCompiler:
    """Compiles single SASS/SCSS files by running the sass executable."""

    def __init__(self, executable: str = "sass", minify: bool = True):
        self.executable = executable
        self.minify = minify

    @classmethod
    def from_config(cls, config: CompilerConfig) -> "SassCompiler":
        return cls(executable=config.sass_executable, minify=config.minify)

    def build_command(self, input_path: Path, output: Path, include_paths: list[Path], compressed: bool) -> list[str]:
        """Build the sass argument vector for one output file."""
        command = [self.executable, f"--style={'compressed' if compressed else 'expanded'}", "--no-error-css"]
        command += [f"--load-path={p}" for p in include_paths]
        command += [str(input_path), str(output)]
        return command

    async def _run(self, command: list[str], cwd: Path) -> None:
        logger.debug(f"Running: {' '.join(command)}")
        try:
            process = await asyncio.create_subprocess_exec(
                *command,
                cwd=str(cwd),
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise CompileError(
                CompileDiagnostic(file="", line=0, column=0, message=f"Unable to run {self.executable}: {e}")
            ) from e

        _, stderr = await process.communicate()
        if process.returncode != 0:
            raise CompileError(parse_diagnostic(stderr.decode(errors="replace")))

    async def compile(self, input_path: str | Path, cwd: str | Path, include_paths: list[Path]) -> list[Path]:
        """Compile input_path to CSS next to it.

        Partials (names starting with "_") are not compiled on their own.

        Returns:
            Written output files, empty for partials

        Raises:
            CompileError: If sass rejects the input or cannot be started
        """
        input_path = Path(input_path)
        if input_path.name.startswith("_"):
            logger.debug(f"Skipping partial {input_path}")
            return []

        output, compressed_output = output_paths(input_path)
        await self._run(self.build_command(input_path, output, include_paths, compressed=False), Path(cwd))
        logger.info(f"Compiled {input_path} to {output}")
        written = [output]

        if self.minify:
            await self._run(
                self.build_command(input_path, compressed_output, include_paths, compressed=True), Path(cwd)
            )
            logger.info(f"Compiled {input_path} to {compressed_output}")
            written.append(compressed_output)

        return written

    async def compile_document(self, input_path: str | Path, root: Path, config: CompilerConfig) -> list[Path]:
        """Compile with include paths and working directory resolved against root."""
        include_paths = resolve_all(root, config.include_path)
        cwd = resolve(root, config.sass_working_directory or root)
        return await self.compile(input_path, cwd, include_paths)

    async def version(self) -> str:
        """Return the sass compiler version string."""
        try:
            process = await asyncio.create_subprocess_exec(
                self.executable,
                "--version",
                stdout=asyncio.subprocess.PIPE,
                stderr=asyncio.subprocess.PIPE,
            )
        except OSError as e:
            raise CompileError(
                CompileDiagnostic(file="", line=0, column=0, message=f"Unable to run {self.executable}: {e}")
            ) from e
        stdout, _ = await process.communicate()
        return stdout.decode(errors="replace").strip()
