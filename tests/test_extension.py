"""Tests for PrettierExtension: activation, save handling and commands."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from simpler_prettier.config.schema import Config, FormatterConfig
from simpler_prettier.errors import FormatterError
from simpler_prettier.host.protocol import Document
from simpler_prettier.session import (
    COMMAND_IDS,
    ERROR_MESSAGE,
    FORMAT_DOCUMENT,
    FORMAT_PROJECT,
    SAVE_WITHOUT_FORMATTING,
    PrettierExtension,
)
from simpler_prettier.workspace.package_manager import PackageManager


@pytest.fixture
def extension(fake_host, spawner) -> PrettierExtension:
    ext = PrettierExtension(fake_host, spawner=spawner)
    assert ext.activate()
    return ext


def _doc(root: Path, name: str = "src/index.ts") -> Document:
    return Document(path=root / name)


class TestActivation:
    def test_activates_on_eligible_workspace(self, fake_host, spawner) -> None:
        ext = PrettierExtension(fake_host, spawner=spawner)

        assert ext.activate() is True
        assert ext.is_active
        assert ext.package_manager is PackageManager.BUN
        assert ext.state.workspace_path == fake_host.workspace_path
        assert set(fake_host.commands) == set(COMMAND_IDS)
        assert len(fake_host.saved_callbacks) == 1
        assert len(fake_host.added_callbacks) == 1

    def test_does_not_activate_without_config(self, make_workspace, make_host, spawner) -> None:
        host = make_host(make_workspace("package.json"))
        ext = PrettierExtension(host, spawner=spawner)

        assert ext.activate() is False
        assert not ext.is_active
        assert host.commands == {}
        assert host.saved_callbacks == []

    def test_does_not_activate_without_workspace(self, make_host, spawner) -> None:
        ext = PrettierExtension(make_host(None), spawner=spawner)
        assert ext.activate() is False

    def test_activate_is_idempotent(self, extension, fake_host) -> None:
        assert extension.activate() is True
        assert len(fake_host.saved_callbacks) == 1

    def test_configured_package_manager(self, fake_host, spawner) -> None:
        ext = PrettierExtension(fake_host, Config(package_manager="pnpm"), spawner=spawner)
        ext.activate()
        assert ext.package_manager is PackageManager.PNPM

    @pytest.mark.asyncio
    async def test_deactivate_unregisters(self, extension, fake_host) -> None:
        await extension.deactivate()

        assert not extension.is_active
        assert fake_host.commands == {}
        assert fake_host.saved_callbacks == []
        assert fake_host.added_callbacks == []


class TestSaveInterceptor:
    @pytest.mark.asyncio
    async def test_save_formats_file_then_project(self, extension, fake_host, spawner) -> None:
        doc = _doc(fake_host.workspace_path)

        await fake_host.fire_saved(doc)

        assert spawner.calls == [
            ["bun", "x", "prettier", "--write", str(doc.path)],
            ["bun", "x", "prettier", "--write", "."],
        ]
        assert all(cwd == str(fake_host.workspace_path) for cwd in spawner.cwds)
        assert not extension.guard.active

    @pytest.mark.asyncio
    async def test_untitled_document_is_ignored(self, extension, fake_host, spawner) -> None:
        await fake_host.fire_saved(Document(path=None))
        assert spawner.calls == []

    @pytest.mark.asyncio
    async def test_save_while_formatting_is_ignored(self, extension, fake_host, spawner) -> None:
        with extension.guard.hold():
            await fake_host.fire_saved(_doc(fake_host.workspace_path))
        assert spawner.calls == []

    @pytest.mark.asyncio
    async def test_saves_caused_by_formatting_are_ignored(
        self, extension, fake_host, spawner
    ) -> None:
        doc = _doc(fake_host.workspace_path)
        record = spawner.spawn

        # The formatter rewriting the file makes the host report another save
        async def spawn_and_resave(command, args=None, **kwargs):
            await fake_host.fire_saved(doc)
            return await record(command, args, **kwargs)

        spawner.spawn = spawn_and_resave
        await fake_host.fire_saved(doc)

        assert len(spawner.calls) == 2

    @pytest.mark.asyncio
    async def test_project_format_can_be_disabled(self, fake_host, spawner) -> None:
        config = Config(formatter=FormatterConfig(format_project_on_save=False))
        ext = PrettierExtension(fake_host, config, spawner=spawner)
        ext.activate()

        await fake_host.fire_saved(_doc(fake_host.workspace_path))

        assert len(spawner.calls) == 1
        assert spawner.calls[0][-1].endswith("index.ts")

    @pytest.mark.asyncio
    async def test_spawn_failure_releases_guard(self, extension, fake_host, spawner) -> None:
        spawner.error = FileNotFoundError("bun")
        doc = _doc(fake_host.workspace_path)

        await fake_host.fire_saved(doc)

        assert extension.guard.active is False
        assert extension.guard.depth == 0
        assert fake_host.errors == [ERROR_MESSAGE]

        # Later saves are not blocked
        spawner.error = None
        spawner.calls.clear()
        await fake_host.fire_saved(doc)
        assert len(spawner.calls) == 2

    @pytest.mark.asyncio
    async def test_failed_exit_is_reported_once(self, extension, fake_host, spawner) -> None:
        spawner.exit_code = 2
        doc = _doc(fake_host.workspace_path)

        await fake_host.fire_saved(doc)
        await fake_host.fire_saved(doc)
        await fake_host.fire_saved(doc)

        # File run fails, so the project run is skipped each time
        assert len(spawner.calls) == 3
        assert fake_host.errors == [ERROR_MESSAGE]
        assert extension.reporter.has_warned


class TestCommands:
    @pytest.mark.asyncio
    async def test_format_document_uses_active_document(
        self, extension, fake_host, spawner
    ) -> None:
        fake_host.active_document = _doc(fake_host.workspace_path)

        await fake_host.run(FORMAT_DOCUMENT)

        assert spawner.calls == [
            ["bun", "x", "prettier", "--write", str(fake_host.active_document.path)]
        ]

    @pytest.mark.asyncio
    async def test_format_document_with_explicit_document(
        self, extension, fake_host, spawner
    ) -> None:
        doc = _doc(fake_host.workspace_path, "README.md")
        result = await fake_host.run(FORMAT_DOCUMENT, doc)
        assert result.success
        assert spawner.calls[0][-1] == str(doc.path)

    @pytest.mark.asyncio
    async def test_format_document_without_active_document(
        self, extension, fake_host, spawner
    ) -> None:
        assert await fake_host.run(FORMAT_DOCUMENT) is None
        assert spawner.calls == []

    @pytest.mark.asyncio
    async def test_format_project(self, extension, fake_host, spawner) -> None:
        await fake_host.run(FORMAT_PROJECT)
        assert spawner.calls == [["bun", "x", "prettier", "--write", "."]]
        assert not extension.guard.active

    @pytest.mark.asyncio
    async def test_command_errors_are_reported(self, extension, fake_host, spawner) -> None:
        spawner.exit_code = 1
        assert await fake_host.run(FORMAT_PROJECT) is None
        assert fake_host.errors == [ERROR_MESSAGE]

    @pytest.mark.asyncio
    async def test_direct_call_raises_formatter_error(self, extension, spawner) -> None:
        spawner.exit_code = 1
        with pytest.raises(FormatterError) as exc_info:
            await extension.format_project()
        assert exc_info.value.result.exit_code == 1
        assert "No parser could be inferred" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_save_without_formatting(self, extension, fake_host, spawner) -> None:
        fake_host.active_document = _doc(fake_host.workspace_path)

        saved = await fake_host.run(SAVE_WITHOUT_FORMATTING)

        assert saved is True
        assert fake_host.saves == [fake_host.active_document]
        assert spawner.calls == []
        assert not extension.guard.active

    @pytest.mark.asyncio
    async def test_save_without_formatting_no_document(
        self, extension, fake_host, spawner
    ) -> None:
        assert await fake_host.run(SAVE_WITHOUT_FORMATTING) is False
        assert fake_host.saves == []

    @pytest.mark.asyncio
    async def test_format_before_activation_fails(self, fake_host, spawner) -> None:
        ext = PrettierExtension(fake_host, spawner=spawner)
        with pytest.raises(RuntimeError):
            await ext.format_project()


class TestBackgroundRuns:
    @pytest.fixture
    def background(self, fake_host, spawner) -> PrettierExtension:
        config = Config(formatter=FormatterConfig(wait=False))
        ext = PrettierExtension(fake_host, config, spawner=spawner)
        ext.activate()
        return ext

    @pytest.mark.asyncio
    async def test_save_starts_both_runs(self, background, fake_host, spawner) -> None:
        await fake_host.fire_saved(_doc(fake_host.workspace_path))
        await background.drain()

        assert [argv[-1] for argv in spawner.calls] == [
            str(fake_host.workspace_path / "src" / "index.ts"),
            ".",
        ]
        assert not background.guard.active

    @pytest.mark.asyncio
    async def test_background_failure_is_reported(self, background, fake_host, spawner) -> None:
        spawner.exit_code = 2
        await fake_host.fire_saved(_doc(fake_host.workspace_path))
        await background.drain()
        # Let done callbacks run
        await asyncio.sleep(0)

        assert fake_host.errors == [ERROR_MESSAGE]

    @pytest.mark.asyncio
    async def test_deactivate_cancels_pending_runs(self, background, fake_host, spawner) -> None:
        started = asyncio.Event()
        release = asyncio.Event()

        async def slow_spawn(command, args=None, **kwargs):
            started.set()
            await release.wait()
            raise AssertionError("should have been cancelled")

        spawner.spawn = slow_spawn
        await fake_host.run(FORMAT_PROJECT)
        await started.wait()

        await background.deactivate()

        assert fake_host.errors == []


class TestEndToEnd:
    @pytest.mark.asyncio
    async def test_bun_workspace_save(self, make_workspace, make_host, spawner) -> None:
        root = make_workspace("package.json", ".prettierrc", "bun.lockb", "src/app.tsx")
        host = make_host(root)
        ext = PrettierExtension(host, spawner=spawner)

        assert ext.activate() is True
        assert ext.package_manager is PackageManager.BUN

        doc = Document(path=root / "src" / "app.tsx")
        await host.fire_saved(doc)

        assert len(spawner.calls) == 2
        file_run, project_run = spawner.calls
        assert str(doc.path) in file_run
        assert "." in project_run
        assert file_run[:3] == ["bun", "x", "prettier"]
        assert host.errors == []
