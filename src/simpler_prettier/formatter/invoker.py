"""Build and run the formatter command line."""

from __future__ import annotations

from pathlib import Path

from simpler_prettier.config.schema import FormatterConfig
from simpler_prettier.logging import get_logger
from simpler_prettier.terminal.protocol import ProcessSpawner
from simpler_prettier.terminal.result import ProcessResult
from simpler_prettier.workspace.package_manager import PackageManager, command_prefix

log = get_logger("formatter")

PROJECT_TARGET = "."


class FormatterInvoker:
    """Runs the formatter for one file or the whole workspace.

    The command is ``<package manager prefix> <binary> [extra args] <write flag> <target>``,
    launched with the workspace root as working directory. Every run returns a
    ProcessResult; deciding whether a failed run is an error is left to the caller.
    """

    def __init__(
        self,
        spawner: ProcessSpawner,
        workspace_root: Path,
        package_manager: PackageManager,
        config: FormatterConfig | None = None,
    ) -> None:
        self._spawner = spawner
        self._workspace_root = workspace_root
        self._package_manager = package_manager
        self._config = config or FormatterConfig()

    @property
    def package_manager(self) -> PackageManager:
        return self._package_manager

    def build_command(self, target: str) -> list[str]:
        """Full argv for formatting target (a file path or ".")."""
        return [
            *command_prefix(self._package_manager),
            self._config.binary,
            *self._config.extra_args,
            self._config.write_flag,
            target,
        ]

    async def format_file(self, path: str | Path) -> ProcessResult:
        """Format a single file in place."""
        log.info("Formatting document %s", path)
        return await self._run(str(path))

    async def format_project(self) -> ProcessResult:
        """Format every file the formatter picks up under the workspace root."""
        log.info("Formatting project %s", self._workspace_root)
        return await self._run(PROJECT_TARGET)

    async def _run(self, target: str) -> ProcessResult:
        argv = self.build_command(target)
        result = await self._spawner.spawn(
            argv[0],
            args=argv[1:],
            cwd=str(self._workspace_root),
            timeout=self._config.timeout,
            on_stdout=lambda line: log.info("%s", line),
            on_stderr=lambda line: log.warning("%s", line),
        )
        if result.success:
            log.info("Formatter exited with status %s (%.0fms)", result.exit_code, result.duration_ms)
        else:
            log.warning(
                "Formatter exited with status %s (%s): %s",
                result.exit_code,
                result.status,
                result.command,
            )
        return result
