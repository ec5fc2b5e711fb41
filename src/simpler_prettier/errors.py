"""Exceptions raised by simpler-prettier."""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from simpler_prettier.terminal.result import ProcessResult


class SimplerPrettierError(Exception):
    """Base class for errors raised by this package."""

    pass


class FormatterError(SimplerPrettierError):
    """The formatter process failed to launch, exited non-zero, or timed out."""

    def __init__(self, result: ProcessResult) -> None:
        self.result = result
        detail = result.stderr.strip().splitlines()[-1] if result.stderr.strip() else ""
        message = f"{result.command!r} failed ({result.status}, exit={result.exit_code})"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class UnknownCommandError(SimplerPrettierError):
    """A command id was invoked that nothing registered."""

    pass
