"""Workspace eligibility checks.

A workspace is eligible for formatting when it has a package.json at its root
and at least one Prettier configuration file next to it.
"""

from __future__ import annotations

from pathlib import Path

from simpler_prettier.logging import get_logger

log = get_logger("workspace")

MANIFEST_FILENAME = "package.json"

CONFIG_FILENAMES: tuple[str, ...] = (
    ".prettierrc",
    ".prettierrc.json",
    ".prettierrc.yml",
    ".prettierrc.yaml",
    ".prettierrc.json5",
    ".prettierrc.js",
    ".prettierrc.cjs",
    "prettier.config.js",
    "prettier.config.cjs",
)


def file_exists(path: str | Path) -> bool:
    """True if path is a regular file; False on any filesystem error."""
    try:
        return Path(path).is_file()
    except OSError as e:
        log.debug("Cannot stat %s: %s", path, e)
        return False


def find_config_file(root: str | Path) -> Path | None:
    """Return the first recognized Prettier config file at the root, if any."""
    root_path = Path(root)
    for name in CONFIG_FILENAMES:
        candidate = root_path / name
        if file_exists(candidate):
            return candidate
    return None


def validate_setup(root: str | Path | None) -> bool:
    """Check that the workspace has a manifest and a Prettier config.

    Never raises: filesystem errors are logged and treated as "not eligible".
    """
    if root is None:
        log.info("No workspace path; nothing to validate")
        return False

    try:
        manifest = Path(root) / MANIFEST_FILENAME
        log.debug("Validating workspace %s", root)
        if not file_exists(manifest):
            log.debug("Missing %s", manifest)
            return False

        config_file = find_config_file(root)
        if config_file is None:
            log.debug("No Prettier config file in %s", root)
            return False

        log.debug("Found %s", config_file.name)
        return True
    except Exception:
        log.exception("Error validating setup")
        return False
