"""Process spawner protocol."""

from __future__ import annotations

from collections.abc import Callable
from typing import Protocol

from simpler_prettier.terminal.result import ProcessResult

LineCallback = Callable[[str], None]


class ProcessSpawner(Protocol):
    """Protocol for launching external processes.

    Implementations:
    - SubprocessSpawner: local asyncio subprocess
    - test doubles that record the command lines they receive
    """

    async def spawn(
        self,
        command: str,
        args: list[str] | None = None,
        cwd: str | None = None,
        env: dict[str, str] | None = None,
        timeout: float | None = None,
        on_stdout: LineCallback | None = None,
        on_stderr: LineCallback | None = None,
    ) -> ProcessResult:
        """Run a process to completion.

        Args:
            command: The binary to execute (e.g., "npx", "bun").
            args: Optional list of arguments.
            cwd: Working directory. If None, uses the spawner's default.
            env: Additional environment variables to set.
            timeout: Timeout in seconds. None means no timeout.
            on_stdout: Called with each line written to stdout.
            on_stderr: Called with each line written to stderr.

        Returns:
            ProcessResult with exit code, output, and status.
        """
        ...
