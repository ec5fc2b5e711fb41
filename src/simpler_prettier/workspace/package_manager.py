"""Package manager detection from lock files."""

from __future__ import annotations

from enum import Enum
from pathlib import Path

from simpler_prettier.logging import get_logger
from simpler_prettier.workspace.validator import file_exists

log = get_logger("workspace")


class PackageManager(Enum):
    """Package managers whose exec prefix can launch the formatter."""

    BUN = "bun"
    PNPM = "pnpm"
    NPM = "npm"


# Checked in order; the first lock file present wins
LOCK_FILES: tuple[tuple[str, PackageManager], ...] = (
    ("bun.lockb", PackageManager.BUN),
    ("pnpm-lock.yaml", PackageManager.PNPM),
    ("package-lock.json", PackageManager.NPM),
)

DEFAULT_PACKAGE_MANAGER = PackageManager.NPM

_COMMAND_PREFIXES: dict[PackageManager, tuple[str, ...]] = {
    PackageManager.BUN: ("bun", "x"),
    PackageManager.PNPM: ("pnpm", "exec"),
    PackageManager.NPM: ("npx",),
}


def detect_package_manager(root: str | Path) -> PackageManager:
    """Infer the package manager from the first lock file found at the root."""
    root_path = Path(root)
    for lock_file, manager in LOCK_FILES:
        if file_exists(root_path / lock_file):
            log.debug("Found %s, using %s", lock_file, manager.value)
            return manager
    return DEFAULT_PACKAGE_MANAGER


def command_prefix(manager: PackageManager | str) -> list[str]:
    """Argv prefix that runs a locally installed binary through the manager.

    Unknown managers fall back to npx.
    """
    if isinstance(manager, str):
        try:
            manager = PackageManager(manager.lower())
        except ValueError:
            return list(_COMMAND_PREFIXES[DEFAULT_PACKAGE_MANAGER])
    return list(_COMMAND_PREFIXES.get(manager, _COMMAND_PREFIXES[DEFAULT_PACKAGE_MANAGER]))


def resolve_package_manager(root: str | Path, override: str | None = None) -> PackageManager:
    """Use a configured package manager if valid, else detect from lock files."""
    if override:
        try:
            return PackageManager(override.lower())
        except ValueError:
            log.warning(
                "Unknown package manager %r in config; detecting from lock files", override
            )
    return detect_package_manager(root)
