"""Filesystem-backed host for running outside an editor.

Any editor that writes files to disk becomes the "editor": the polling watcher
reports new files as added documents and modified files as saved documents.
"""

from __future__ import annotations

from pathlib import Path
from typing import Any

from rich.console import Console

from simpler_prettier.config.schema import WatchConfig
from simpler_prettier.errors import UnknownCommandError
from simpler_prettier.host.protocol import CommandCallback, Document, DocumentCallback, Unregister
from simpler_prettier.logging import get_logger
from simpler_prettier.watching.watcher import FileChangeEvent, FileWatcher

log = get_logger("host")


class LocalHost:
    """Host implementation driven by on-disk changes.

    After each batch of events is dispatched the watcher re-baselines, so
    files rewritten by the formatter are not reported as new saves.
    """

    def __init__(
        self,
        root: Path,
        watch_config: WatchConfig | None = None,
        console: Console | None = None,
    ) -> None:
        self._root = root
        config = watch_config or WatchConfig()
        self._watcher = FileWatcher(
            root,
            patterns=config.patterns,
            ignore_patterns=config.ignore_patterns,
            poll_interval=config.poll_interval,
            max_files=config.max_files,
        )
        self._console = console or Console(stderr=True)

        self._added_callbacks: list[DocumentCallback] = []
        self._saved_callbacks: list[DocumentCallback] = []
        self._commands: dict[str, CommandCallback] = {}
        self._active_document: Document | None = None

        self.errors: list[str] = []

    @property
    def workspace_path(self) -> Path | None:
        return self._root

    @property
    def active_document(self) -> Document | None:
        return self._active_document

    @property
    def watcher(self) -> FileWatcher:
        return self._watcher

    @property
    def commands(self) -> list[str]:
        return sorted(self._commands)

    def set_active_document(self, path: str | Path | None) -> Document | None:
        """Focus the document at path (relative to the workspace), or clear focus."""
        if path is None:
            self._active_document = None
            return None
        p = Path(path)
        if not p.is_absolute():
            p = self._root / p
        self._active_document = Document(path=p)
        return self._active_document

    # -- registration ------------------------------------------------------

    def on_document_added(self, callback: DocumentCallback) -> Unregister:
        return self._subscribe(self._added_callbacks, callback)

    def on_document_saved(self, callback: DocumentCallback) -> Unregister:
        return self._subscribe(self._saved_callbacks, callback)

    def register_command(self, command_id: str, callback: CommandCallback) -> Unregister:
        if command_id in self._commands:
            log.warning("Command %s registered twice; replacing", command_id)
        self._commands[command_id] = callback

        def unregister() -> None:
            if self._commands.get(command_id) is callback:
                del self._commands[command_id]

        return unregister

    @staticmethod
    def _subscribe(callbacks: list[DocumentCallback], callback: DocumentCallback) -> Unregister:
        callbacks.append(callback)

        def unregister() -> None:
            if callback in callbacks:
                callbacks.remove(callback)

        return unregister

    # -- host operations ---------------------------------------------------

    async def save_document(self, document: Document) -> None:
        """Write buffered text (if any) and fire the saved callbacks."""
        if document.path is None:
            log.warning("Cannot save an untitled document")
            return

        if document.text is not None:
            document.path.write_text(document.text, encoding="utf-8")
            document.text = None
        self._watcher.mark(document.path)

        await self._dispatch(self._saved_callbacks, document)

    def show_error(self, message: str) -> None:
        self.errors.append(message)
        self._console.print(f"[bold red]error:[/bold red] {message}")

    async def run_command(self, command_id: str, *args: Any) -> Any:
        """Invoke a registered command as the command palette would."""
        callback = self._commands.get(command_id)
        if callback is None:
            raise UnknownCommandError(f"Unknown command: {command_id}")
        log.debug("Running command %s", command_id)
        return await callback(*args)

    # -- watching ----------------------------------------------------------

    async def handle_changes(self, events: list[FileChangeEvent]) -> None:
        """Turn a batch of file changes into document events."""
        for event in events:
            if event.change_type == "deleted":
                continue
            document = Document(path=event.path)
            if event.change_type == "created":
                await self._dispatch(self._added_callbacks, document)
            else:
                self._active_document = document
                await self._dispatch(self._saved_callbacks, document)

        self._watcher.rebaseline()

    async def watch(self) -> None:
        """Poll the workspace until stop() or cancellation."""
        await self._watcher.start(self.handle_changes)

    def stop(self) -> None:
        self._watcher.stop()

    async def _dispatch(self, callbacks: list[DocumentCallback], document: Document) -> None:
        for callback in list(callbacks):
            try:
                await callback(document)
            except Exception as e:
                log.error("Error in document callback for %s: %s", document.path, e)
