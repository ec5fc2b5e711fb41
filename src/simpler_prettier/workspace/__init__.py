"""Workspace inspection: eligibility and package manager detection."""

from simpler_prettier.workspace.package_manager import (
    LOCK_FILES,
    PackageManager,
    command_prefix,
    detect_package_manager,
    resolve_package_manager,
)
from simpler_prettier.workspace.validator import (
    CONFIG_FILENAMES,
    MANIFEST_FILENAME,
    file_exists,
    find_config_file,
    validate_setup,
)

__all__ = [
    "CONFIG_FILENAMES",
    "LOCK_FILES",
    "MANIFEST_FILENAME",
    "PackageManager",
    "command_prefix",
    "detect_package_manager",
    "file_exists",
    "find_config_file",
    "resolve_package_manager",
    "validate_setup",
]
