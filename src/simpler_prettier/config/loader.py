"""Configuration file loading.

Handles:
- YAML file parsing
- Environment variable overrides
- Conversion from dict to typed Config dataclass
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any

import yaml

from simpler_prettier.config.merge import merge_configs
from simpler_prettier.config.paths import get_config_paths
from simpler_prettier.config.schema import (
    Config,
    FormatterConfig,
    LoggingConfig,
    WatchConfig,
)

# Module logger (may not be configured yet at import time)
_log = logging.getLogger("simpler_prettier.config")

_KNOWN_KEYS = {"formatter", "watch", "logging", "package_manager"}


def load_yaml_file(path: Path) -> dict[str, Any]:
    """Load a YAML file, returning empty dict if not found or invalid."""
    if not path.exists():
        return {}

    try:
        with open(path, encoding="utf-8") as f:
            data = yaml.safe_load(f)
            return data if isinstance(data, dict) else {}
    except yaml.YAMLError as e:
        _log.warning("Invalid YAML in %s: %s", path, e)
        return {}
    except PermissionError:
        _log.debug("Permission denied reading %s", path)
        return {}
    except OSError as e:
        _log.warning("Error reading %s: %s", path, e)
        return {}


def env_overrides() -> dict[str, Any]:
    """Build config dict from environment variables (highest priority)."""
    overrides: dict[str, Any] = {}

    log_path = os.environ.get("SIMPLER_PRETTIER_LOG")
    if log_path:
        overrides["logging"] = {"file": log_path}

    manager = os.environ.get("SIMPLER_PRETTIER_PACKAGE_MANAGER")
    if manager:
        overrides["package_manager"] = manager

    return overrides


def _str_list(value: Any, default: list[str]) -> list[str]:
    if not isinstance(value, list):
        return list(default)
    return [str(v) for v in value]


def dict_to_config(data: dict[str, Any]) -> Config:
    """Convert merged dict to typed Config dataclass."""
    fmt_data = data.get("formatter") or {}
    fmt_defaults = FormatterConfig()
    timeout = fmt_data.get("timeout")
    formatter = FormatterConfig(
        binary=str(fmt_data.get("binary", fmt_defaults.binary)),
        write_flag=str(fmt_data.get("write_flag", fmt_defaults.write_flag)),
        extra_args=_str_list(fmt_data.get("extra_args"), fmt_defaults.extra_args),
        timeout=float(timeout) if timeout is not None else None,
        wait=bool(fmt_data.get("wait", fmt_defaults.wait)),
        format_project_on_save=bool(
            fmt_data.get("format_project_on_save", fmt_defaults.format_project_on_save)
        ),
    )

    watch_data = data.get("watch") or {}
    watch_defaults = WatchConfig()
    watch = WatchConfig(
        poll_interval=float(watch_data.get("poll_interval", watch_defaults.poll_interval)),
        patterns=_str_list(watch_data.get("patterns"), watch_defaults.patterns),
        ignore_patterns=_str_list(
            watch_data.get("ignore_patterns"), watch_defaults.ignore_patterns
        ),
        max_files=int(watch_data.get("max_files", watch_defaults.max_files)),
    )

    log_data = data.get("logging") or {}
    logging_config = LoggingConfig(
        level=log_data.get("level"),
        verbose=log_data.get("verbose"),
        file=log_data.get("file"),
    )

    manager = data.get("package_manager")

    extra = {k: v for k, v in data.items() if k not in _KNOWN_KEYS}

    return Config(
        formatter=formatter,
        watch=watch,
        logging=logging_config,
        package_manager=str(manager).lower() if manager else None,
        extra=extra,
    )


def load_config(
    workspace_root: str | Path | None = None,
    config_path: Path | None = None,
) -> Config:
    """Load and merge config from all sources.

    Priority order (highest to lowest):
    1. Environment variables
    2. Explicit config file (--config)
    3. Project config (<workspace>/.simpler-prettier.yaml)
    4. User config (~/.config/simpler-prettier/config.yaml or %APPDATA%)

    Args:
        workspace_root: Project directory for project-level config.
        config_path: Optional extra config file given on the command line.
    """
    configs: list[dict[str, Any]] = []

    paths = get_config_paths(workspace_root)
    if config_path is not None:
        paths.append(config_path)

    for path in paths:
        config_data = load_yaml_file(path)
        if config_data:
            _log.debug("Loaded config from %s", path)
            configs.append(config_data)

    env_config = env_overrides()
    if env_config:
        configs.append(env_config)

    return dict_to_config(merge_configs(*configs))
