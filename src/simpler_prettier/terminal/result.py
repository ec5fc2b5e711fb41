"""Process execution result dataclass."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ProcessResult:
    """Result of a spawned process.

    Attributes:
        command: The command that was executed (including args).
        exit_code: Process exit code (0 = success), or None if killed/timeout.
        stdout: Captured standard output.
        stderr: Captured standard error.
        status: Execution status - "ok", "error", "timeout", or "killed".
        signal: Signal name if process was killed by signal (e.g., "SIGKILL").
        duration_ms: Execution duration in milliseconds.
    """

    command: str
    exit_code: int | None
    stdout: str
    stderr: str
    status: str  # "ok", "error", "timeout", "killed"
    signal: str | None
    duration_ms: float

    @property
    def success(self) -> bool:
        """True if the process completed with exit code 0."""
        return self.exit_code == 0

    def __repr__(self) -> str:
        if self.success:
            return f"<ProcessResult ok, {self.duration_ms:.0f}ms>"
        return f"<ProcessResult {self.status}, exit={self.exit_code}>"
