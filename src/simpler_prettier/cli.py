"""Command-line interface for simpler-prettier."""

from __future__ import annotations

import argparse
import asyncio
from collections.abc import Sequence
from pathlib import Path

from rich.console import Console
from rich.table import Table

from simpler_prettier import __version__
from simpler_prettier.config import Config, load_config
from simpler_prettier.host.local import LocalHost
from simpler_prettier.logging import get_logger, setup_logging
from simpler_prettier.session.extension import COMMAND_IDS, PrettierExtension
from simpler_prettier.workspace import (
    MANIFEST_FILENAME,
    command_prefix,
    file_exists,
    find_config_file,
    resolve_package_manager,
    validate_setup,
)

log = get_logger("cli")

console = Console(stderr=True)


def create_parser() -> argparse.ArgumentParser:
    """Create the argument parser."""
    parser = argparse.ArgumentParser(
        prog="simpler-prettier",
        description="Run Prettier on save and on demand for JavaScript workspaces",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "-v", "--verbose",
        action="count",
        default=0,
        help="Increase verbosity (can be repeated)",
    )
    parser.add_argument(
        "-q", "--quiet",
        action="store_true",
        help="Only log errors",
    )
    parser.add_argument(
        "--root",
        type=Path,
        help="Workspace root (default: current directory)",
    )
    parser.add_argument(
        "--config",
        type=Path,
        help="Extra config file, applied after user and project config",
    )

    subparsers = parser.add_subparsers(dest="mode", help="Operating mode")

    subparsers.add_parser(
        "check",
        help="Report whether the workspace is eligible and which package manager is used",
    )

    run_parser = subparsers.add_parser(
        "run",
        help="Run one extension command",
    )
    run_parser.add_argument(
        "command",
        choices=COMMAND_IDS,
        help="Command id",
    )
    run_parser.add_argument(
        "path",
        nargs="?",
        type=Path,
        help="Document to make active (relative to the workspace root)",
    )

    subparsers.add_parser(
        "watch",
        help="Format files as they are saved until interrupted",
    )

    return parser


def _apply_verbosity(config: Config, verbose: int, quiet: bool) -> None:
    if quiet:
        config.logging.verbose = 0
    elif verbose:
        config.logging.verbose = min(2 + verbose, 4)


def check_workspace(root: Path, config: Config) -> int:
    """Print the eligibility report; 0 when the workspace can be formatted."""
    eligible = validate_setup(root)
    config_file = find_config_file(root)
    manager = resolve_package_manager(root, config.package_manager)

    table = Table(title=f"Workspace {root}")
    table.add_column("Check", style="bold")
    table.add_column("Result")
    table.add_row(
        MANIFEST_FILENAME,
        "[green]found[/green]" if file_exists(root / MANIFEST_FILENAME) else "[red]missing[/red]",
    )
    table.add_row(
        "Prettier config",
        f"[green]{config_file.name}[/green]" if config_file else "[red]missing[/red]",
    )
    table.add_row("Package manager", manager.value)
    table.add_row(
        "Command",
        " ".join([*command_prefix(manager), config.formatter.binary, config.formatter.write_flag]),
    )
    console.print(table)

    if eligible:
        console.print("[green]Workspace is eligible for formatting[/green]")
        return 0
    console.print("[red]Workspace is not eligible: need package.json and a Prettier config[/red]")
    return 1


async def run_command(root: Path, config: Config, command_id: str, path: Path | None) -> int:
    """Activate against the local host and invoke one command."""
    host = LocalHost(root, config.watch, console=console)
    extension = PrettierExtension(host, config)
    if not extension.activate():
        console.print("[red]Workspace is not eligible; nothing to do[/red]")
        return 1

    if path is not None:
        host.set_active_document(path)

    try:
        await host.run_command(command_id)
        await extension.drain()
    finally:
        await extension.deactivate()

    return 1 if extension.reporter.has_warned else 0


async def watch_workspace(root: Path, config: Config) -> int:
    """Activate against the local host and format on save until cancelled."""
    host = LocalHost(root, config.watch, console=console)
    extension = PrettierExtension(host, config)
    if not extension.activate():
        console.print("[red]Workspace is not eligible; nothing to watch[/red]")
        return 1

    console.print(
        f"[dim]Watching {root} with {extension.package_manager.value} (Ctrl+C to stop)[/dim]"
    )
    try:
        await host.watch()
    finally:
        await extension.deactivate()
    return 0


def run_cli(args: Sequence[str]) -> int:
    """Run the CLI with the given arguments."""
    parser = create_parser()
    parsed = parser.parse_args(args)

    if parsed.mode is None:
        parser.print_help()
        return 1

    root = (parsed.root or Path.cwd()).resolve()
    config = load_config(workspace_root=root, config_path=parsed.config)
    _apply_verbosity(config, parsed.verbose, parsed.quiet)
    setup_logging(config.logging)

    if parsed.mode == "check":
        return check_workspace(root, config)
    elif parsed.mode == "run":
        return asyncio.run(run_command(root, config, parsed.command, parsed.path))
    elif parsed.mode == "watch":
        try:
            return asyncio.run(watch_workspace(root, config))
        except KeyboardInterrupt:
            console.print("[dim]Stopped[/dim]")
            return 0
    else:
        parser.print_help()
        return 1
