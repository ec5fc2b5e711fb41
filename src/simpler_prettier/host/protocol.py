"""Editor host capabilities the extension depends on.

The extension never talks to an editor directly. It receives a Host that can
report document events, register commands, save documents and show errors, so
the same logic runs under the local polling host, an editor bridge, or a test
double.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Protocol


@dataclass
class Document:
    """A document open in the host.

    Attributes:
        path: Backing file, or None for an untitled buffer.
        text: Unsaved buffer contents; None when the file on disk is current.
    """

    path: Path | None
    text: str | None = None

    @property
    def is_untitled(self) -> bool:
        return self.path is None


DocumentCallback = Callable[[Document], Awaitable[None]]
CommandCallback = Callable[..., Awaitable[Any]]
Unregister = Callable[[], None]


class Host(Protocol):
    """Capability set provided by the editor environment."""

    @property
    def workspace_path(self) -> Path | None:
        """Root directory of the open workspace, if any."""
        ...

    @property
    def active_document(self) -> Document | None:
        """Document that currently has focus, if any."""
        ...

    def on_document_added(self, callback: DocumentCallback) -> Unregister:
        """Call callback whenever a document is opened."""
        ...

    def on_document_saved(self, callback: DocumentCallback) -> Unregister:
        """Call callback after a document is saved."""
        ...

    def register_command(self, command_id: str, callback: CommandCallback) -> Unregister:
        """Expose callback to the host's command palette under command_id."""
        ...

    async def save_document(self, document: Document) -> None:
        """Persist document; saved callbacks run before this returns."""
        ...

    def show_error(self, message: str) -> None:
        """Show an error notification to the user."""
        ...
