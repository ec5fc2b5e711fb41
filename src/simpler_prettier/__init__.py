"""simpler-prettier: run Prettier on save, picking the project's package manager."""

__version__ = "0.1.0"

# Public API
from simpler_prettier.config import Config, load_config
from simpler_prettier.errors import FormatterError, SimplerPrettierError, UnknownCommandError
from simpler_prettier.formatter import FormatterInvoker
from simpler_prettier.host import Document, Host, LocalHost
from simpler_prettier.session import (
    ErrorReporter,
    FormattingGuard,
    PrettierExtension,
    SessionState,
)
from simpler_prettier.terminal import ProcessResult, ProcessSpawner, SubprocessSpawner
from simpler_prettier.workspace import (
    PackageManager,
    command_prefix,
    detect_package_manager,
    validate_setup,
)

__all__ = [
    # Extension
    "PrettierExtension",
    "SessionState",
    "FormattingGuard",
    "ErrorReporter",
    # Host
    "Host",
    "Document",
    "LocalHost",
    # Workspace
    "PackageManager",
    "validate_setup",
    "detect_package_manager",
    "command_prefix",
    # Formatter / processes
    "FormatterInvoker",
    "ProcessResult",
    "ProcessSpawner",
    "SubprocessSpawner",
    # Config
    "Config",
    "load_config",
    # Errors
    "SimplerPrettierError",
    "FormatterError",
    "UnknownCommandError",
]
