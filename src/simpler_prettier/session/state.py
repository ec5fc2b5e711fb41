"""Per-session state: the re-entrancy guard and what activation resolved."""

from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

from simpler_prettier.session.errors import ErrorReporter
from simpler_prettier.workspace.package_manager import DEFAULT_PACKAGE_MANAGER, PackageManager


class FormattingGuard:
    """Tracks whether the extension is currently formatting or saving.

    Saves that happen while the guard is held were caused by the extension
    itself and must not trigger another format. The guard is only changed
    through hold(), which always restores the previous depth on exit.
    """

    def __init__(self) -> None:
        self._depth = 0

    @property
    def active(self) -> bool:
        return self._depth > 0

    @property
    def depth(self) -> int:
        return self._depth

    @contextmanager
    def hold(self) -> Iterator[None]:
        self._depth += 1
        try:
            yield
        finally:
            self._depth -= 1

    def __repr__(self) -> str:
        return f"<FormattingGuard active={self.active} depth={self._depth}>"


@dataclass
class SessionState:
    """Everything one running extension instance owns."""

    reporter: ErrorReporter
    guard: FormattingGuard = field(default_factory=FormattingGuard)
    workspace_path: Path | None = None
    package_manager: PackageManager = DEFAULT_PACKAGE_MANAGER
    active: bool = False
