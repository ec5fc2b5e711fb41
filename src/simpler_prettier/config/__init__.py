"""Configuration management for simpler-prettier.

Provides layered YAML-based configuration with:
- User-level config (~/.config/simpler-prettier/ or %APPDATA%)
- Project-level config (<workspace>/.simpler-prettier.yaml)
- Environment variable overrides (highest priority)

Example usage:
    from simpler_prettier.config import load_config

    config = load_config(workspace_root="/path/to/project")
    print(config.formatter.binary)
"""

from simpler_prettier.config.loader import dict_to_config, load_config
from simpler_prettier.config.paths import (
    get_config_paths,
    get_project_config_path,
    get_user_config_path,
)
from simpler_prettier.config.schema import (
    Config,
    FormatterConfig,
    LoggingConfig,
    WatchConfig,
)

__all__ = [
    "Config",
    "load_config",
    "dict_to_config",
    "FormatterConfig",
    "WatchConfig",
    "LoggingConfig",
    "get_config_paths",
    "get_user_config_path",
    "get_project_config_path",
]
