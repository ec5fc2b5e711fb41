"""Root pytest configuration and shared test doubles."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from simpler_prettier.host.protocol import CommandCallback, Document, DocumentCallback
from simpler_prettier.logging import reset_logging
from simpler_prettier.terminal.protocol import LineCallback
from simpler_prettier.terminal.result import ProcessResult

pytest_plugins = ("pytest_asyncio",)


class FakeHost:
    """In-memory host that records everything the extension asks of it."""

    def __init__(self, root: Path | None) -> None:
        self.workspace_path = root
        self.active_document: Document | None = None
        self.added_callbacks: list[DocumentCallback] = []
        self.saved_callbacks: list[DocumentCallback] = []
        self.commands: dict[str, CommandCallback] = {}
        self.errors: list[str] = []
        self.saves: list[Document] = []

    def on_document_added(self, callback: DocumentCallback) -> Callable[[], None]:
        self.added_callbacks.append(callback)
        return lambda: self.added_callbacks.remove(callback)

    def on_document_saved(self, callback: DocumentCallback) -> Callable[[], None]:
        self.saved_callbacks.append(callback)
        return lambda: self.saved_callbacks.remove(callback)

    def register_command(self, command_id: str, callback: CommandCallback) -> Callable[[], None]:
        self.commands[command_id] = callback
        return lambda: self.commands.pop(command_id, None)

    async def save_document(self, document: Document) -> None:
        self.saves.append(document)
        await self.fire_saved(document)

    def show_error(self, message: str) -> None:
        self.errors.append(message)

    async def fire_saved(self, document: Document) -> None:
        for callback in list(self.saved_callbacks):
            await callback(document)

    async def run(self, command_id: str, *args: Any) -> Any:
        return await self.commands[command_id](*args)


class RecordingSpawner:
    """Process spawner that records argv instead of running anything.

    Set ``exit_code`` to simulate a failing formatter, or ``error`` to make
    spawn() raise.
    """

    def __init__(self, exit_code: int = 0) -> None:
        self.exit_code = exit_code
        self.error: Exception | None = None
        self.calls: list[list[str]] = []
        self.cwds: list[str | None] = []
        self.timeouts: list[float | None] = []

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
        argv = [command, *(args or [])]
        self.calls.append(argv)
        self.cwds.append(cwd)
        self.timeouts.append(timeout)
        if self.error is not None:
            raise self.error
        if on_stdout is not None:
            on_stdout(f"{argv[-1]} 5ms")
        return ProcessResult(
            command=" ".join(argv),
            exit_code=self.exit_code,
            stdout="",
            stderr="" if self.exit_code == 0 else "[error] No parser could be inferred",
            status="ok" if self.exit_code == 0 else "error",
            signal=None,
            duration_ms=1.0,
        )


@pytest.fixture(scope="session")
def anyio_backend():
    """Set anyio backend to asyncio."""
    return "asyncio"


@pytest.fixture
def make_workspace(tmp_path: Path) -> Callable[..., Path]:
    """Create a workspace under tmp_path containing the given (empty) files."""

    def _make(*names: str) -> Path:
        for name in names:
            path = tmp_path / name
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_text("{}\n" if name.endswith(".json") else "")
        return tmp_path

    return _make


@pytest.fixture
def eligible_workspace(make_workspace: Callable[..., Path]) -> Path:
    """package.json + .prettierrc + bun.lockb + one source file."""
    root = make_workspace("package.json", ".prettierrc", "bun.lockb")
    (root / "src").mkdir()
    (root / "src" / "index.ts").write_text("const a = 1\n")
    return root


@pytest.fixture
def make_host() -> type[FakeHost]:
    return FakeHost


@pytest.fixture
def fake_host(eligible_workspace: Path) -> FakeHost:
    return FakeHost(eligible_workspace)


@pytest.fixture
def spawner() -> RecordingSpawner:
    return RecordingSpawner()


@pytest.fixture(autouse=True)
def clean_logging():
    """Drop handlers a CLI run attached so levels do not leak between tests."""
    yield
    reset_logging()
