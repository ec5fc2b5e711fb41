"""Configuration schema dataclasses for simpler-prettier.

Defines the structure of configuration at all levels (user, project).
All fields have defaults so partial configs merge together.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class FormatterConfig:
    """How the external formatter is invoked.

    Example config.yaml:
        formatter:
          binary: prettier
          extra_args: ["--log-level", "warn"]
          timeout: 60
          wait: true
    """

    binary: str = "prettier"
    write_flag: str = "--write"
    extra_args: list[str] = field(default_factory=list)  # Inserted before the write flag
    timeout: float | None = None  # Seconds; None waits forever
    wait: bool = True  # Await each run; False starts runs in the background
    format_project_on_save: bool = True  # Also format "." after the saved file


@dataclass
class WatchConfig:
    """Polling watcher used by the local host to detect saves."""

    poll_interval: float = 1.0  # Seconds between polling cycles
    patterns: list[str] = field(
        default_factory=lambda: [
            "**/*.js",
            "**/*.jsx",
            "**/*.ts",
            "**/*.tsx",
            "**/*.mjs",
            "**/*.cjs",
            "**/*.json",
            "**/*.css",
            "**/*.scss",
            "**/*.md",
            "**/*.yaml",
            "**/*.yml",
            "**/*.html",
            "**/*.vue",
            "**/*.svelte",
        ]
    )
    ignore_patterns: list[str] = field(
        default_factory=lambda: [
            "**/node_modules/**",
            "**/.git/**",
            "dist/**",
            "build/**",
            "coverage/**",
            ".next/**",
        ]
    )
    max_files: int = 5000  # Stop registering files past this count


@dataclass
class LoggingConfig:
    """Logging configuration."""

    level: str | None = None  # DEBUG, INFO, WARNING, ERROR
    verbose: int | None = None  # 0-4, overrides level
    file: str | None = None  # Log file path


@dataclass
class Config:
    """Root configuration object."""

    formatter: FormatterConfig = field(default_factory=FormatterConfig)
    watch: WatchConfig = field(default_factory=WatchConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)
    package_manager: str | None = None  # "bun", "pnpm", "npm"; None detects from lock files

    # Unknown top-level keys, kept for forward compatibility
    extra: dict[str, Any] = field(default_factory=dict)
