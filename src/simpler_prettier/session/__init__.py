"""Extension session: save interception, commands, guard and error reporting."""

from simpler_prettier.session.errors import ERROR_MESSAGE, ErrorReporter
from simpler_prettier.session.extension import (
    COMMAND_IDS,
    FORMAT_DOCUMENT,
    FORMAT_PROJECT,
    SAVE_WITHOUT_FORMATTING,
    PrettierExtension,
)
from simpler_prettier.session.state import FormattingGuard, SessionState

__all__ = [
    "COMMAND_IDS",
    "ERROR_MESSAGE",
    "ErrorReporter",
    "FORMAT_DOCUMENT",
    "FORMAT_PROJECT",
    "FormattingGuard",
    "PrettierExtension",
    "SAVE_WITHOUT_FORMATTING",
    "SessionState",
]
