"""The format-on-save extension: activation, save handling and commands."""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable, Coroutine
from pathlib import Path
from typing import Any

from simpler_prettier.config.schema import Config
from simpler_prettier.errors import FormatterError
from simpler_prettier.formatter.invoker import FormatterInvoker
from simpler_prettier.host.protocol import CommandCallback, Document, Host, Unregister
from simpler_prettier.logging import get_logger
from simpler_prettier.session.errors import ErrorReporter
from simpler_prettier.session.state import FormattingGuard, SessionState
from simpler_prettier.terminal.protocol import ProcessSpawner
from simpler_prettier.terminal.result import ProcessResult
from simpler_prettier.terminal.subprocess_executor import SubprocessSpawner
from simpler_prettier.workspace.package_manager import PackageManager, resolve_package_manager
from simpler_prettier.workspace.validator import validate_setup

log = get_logger("session")

FORMAT_DOCUMENT = "formatDocument"
FORMAT_PROJECT = "formatProject"
SAVE_WITHOUT_FORMATTING = "saveWithoutFormatting"

COMMAND_IDS = (FORMAT_DOCUMENT, FORMAT_PROJECT, SAVE_WITHOUT_FORMATTING)


class PrettierExtension:
    """Formats documents with Prettier when the host saves them.

    Lifecycle:
        ext = PrettierExtension(host, config)
        if ext.activate():
            ...  # host delivers save events and command invocations
        await ext.deactivate()

    On each save of a named document the saved file is formatted, then the
    whole project. Both runs happen under the session's FormattingGuard, so
    saves caused by the formatting (or by saveWithoutFormatting) are ignored.

    With ``formatter.wait`` enabled (the default) each run is awaited and a
    failed run raises FormatterError; otherwise runs start in the background
    and failures are reported when they finish.
    """

    def __init__(
        self,
        host: Host,
        config: Config | None = None,
        spawner: ProcessSpawner | None = None,
    ) -> None:
        self._host = host
        self._config = config or Config()
        self._spawner = spawner
        self._invoker: FormatterInvoker | None = None
        self.state = SessionState(reporter=ErrorReporter(host.show_error))

        self._registrations: list[Unregister] = []
        self._background: set[asyncio.Task[ProcessResult]] = set()

    @property
    def guard(self) -> FormattingGuard:
        return self.state.guard

    @property
    def reporter(self) -> ErrorReporter:
        return self.state.reporter

    @property
    def package_manager(self) -> PackageManager:
        return self.state.package_manager

    @property
    def invoker(self) -> FormatterInvoker | None:
        return self._invoker

    @property
    def is_active(self) -> bool:
        return self.state.active

    # -- lifecycle ---------------------------------------------------------

    def activate(self) -> bool:
        """Validate the workspace and hook into the host.

        Returns False, leaving the host untouched, when the workspace has no
        package.json or no Prettier config.
        """
        if self.state.active:
            return True

        root = self._host.workspace_path
        if root is None or not validate_setup(root):
            log.info("Required files not found, not activating")
            return False

        workspace = Path(root)
        self.state.workspace_path = workspace
        self.state.package_manager = resolve_package_manager(
            workspace, self._config.package_manager
        )
        log.info("Project looks good (package manager: %s)", self.state.package_manager.value)

        spawner = self._spawner or SubprocessSpawner(default_cwd=str(workspace))
        self._invoker = FormatterInvoker(
            spawner,
            workspace,
            self.state.package_manager,
            self._config.formatter,
        )

        self._registrations.append(self._host.on_document_added(self._handle_document_added))
        self._registrations.append(self._host.on_document_saved(self.handle_save))
        for command_id, func in (
            (FORMAT_DOCUMENT, self.format_document),
            (FORMAT_PROJECT, self.format_project),
            (SAVE_WITHOUT_FORMATTING, self.save_without_formatting),
        ):
            self._registrations.append(
                self._host.register_command(command_id, self._reporting(func))
            )

        self.state.active = True
        return True

    async def deactivate(self) -> None:
        """Unregister from the host and cancel formatter runs still in flight."""
        for unregister in reversed(self._registrations):
            try:
                unregister()
            except Exception as e:
                log.warning("Error unregistering from host: %s", e)
        self._registrations.clear()

        pending = list(self._background)
        for task in pending:
            task.cancel()
        if pending:
            await asyncio.gather(*pending, return_exceptions=True)
        self._background.clear()

        self.state.active = False
        log.debug("Deactivated")

    async def drain(self) -> None:
        """Wait for background formatter runs to finish."""
        while self._background:
            await asyncio.gather(*list(self._background), return_exceptions=True)

    # -- events ------------------------------------------------------------

    async def _handle_document_added(self, document: Document) -> None:
        log.debug("Tracking document %s", document.path or "<untitled>")

    async def handle_save(self, document: Document) -> None:
        """Format the saved file, then the project.

        Ignored while the guard is held or when the document is untitled.
        Errors are reported, never raised to the host.
        """
        if self.guard.active or document.is_untitled:
            log.debug("Skipping save of %s", document.path or "<untitled>")
            return

        log.debug("Save trigger for %s", document.path)
        with self.guard.hold():
            try:
                await self.format_document(document)
                if self._config.formatter.format_project_on_save:
                    await self.format_project()
            except Exception as e:
                self.reporter.report(e)

    # -- commands ----------------------------------------------------------

    async def format_document(self, document: Document | None = None) -> ProcessResult | None:
        """Format document, or the host's active document when none is given."""
        if document is None:
            document = self._host.active_document
        if document is None or document.path is None:
            return None

        invoker = self._require_invoker()
        with self.guard.hold():
            return await self._run(invoker.format_file(document.path))

    async def format_project(self) -> ProcessResult | None:
        """Format the whole workspace."""
        invoker = self._require_invoker()
        with self.guard.hold():
            return await self._run(invoker.format_project())

    async def save_without_formatting(self) -> bool:
        """Save the active document without triggering a format."""
        log.info("Saving without formatting")
        document = self._host.active_document
        if document is None:
            return False

        with self.guard.hold():
            await self._host.save_document(document)
        return True

    # -- helpers -----------------------------------------------------------

    def _require_invoker(self) -> FormatterInvoker:
        if self._invoker is None:
            raise RuntimeError("Extension is not active")
        return self._invoker

    async def _run(
        self, run: Coroutine[Any, Any, ProcessResult]
    ) -> ProcessResult | None:
        if self._config.formatter.wait:
            result = await run
            if not result.success:
                raise FormatterError(result)
            return result

        task = asyncio.create_task(run)
        self._background.add(task)
        task.add_done_callback(self._on_background_done)
        return None

    def _on_background_done(self, task: asyncio.Task[ProcessResult]) -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        error = task.exception()
        if error is not None:
            self.reporter.report(error)
            return
        result = task.result()
        if not result.success:
            self.reporter.report(FormatterError(result))

    def _reporting(self, func: Callable[..., Awaitable[Any]]) -> CommandCallback:
        """Wrap a command so failures go to the error reporter."""

        async def command(*args: Any) -> Any:
            try:
                return await func(*args)
            except Exception as e:
                self.reporter.report(e)
                return None

        command.__name__ = getattr(func, "__name__", "command")
        return command
