"""Process spawning for the external formatter."""

from simpler_prettier.terminal.protocol import LineCallback, ProcessSpawner
from simpler_prettier.terminal.result import ProcessResult
from simpler_prettier.terminal.subprocess_executor import SubprocessSpawner

__all__ = [
    "LineCallback",
    "ProcessResult",
    "ProcessSpawner",
    "SubprocessSpawner",
]
