"""Error reporting with a single user notification per session."""

from __future__ import annotations

from collections.abc import Callable

from simpler_prettier.logging import get_logger

log = get_logger("session")

ERROR_MESSAGE = (
    "Prettier encountered an error. Please ensure Prettier is installed in your project. "
    "Check the Extension Console for details."
)


class ErrorReporter:
    """Logs every error and notifies the user only the first time.

    report() never raises, so it is safe to call from any event handler.
    """

    def __init__(self, notify: Callable[[str], None], message: str = ERROR_MESSAGE) -> None:
        self._notify = notify
        self._message = message
        self._has_warned = False

    @property
    def has_warned(self) -> bool:
        return self._has_warned

    def report(self, error: BaseException | str) -> None:
        if isinstance(error, BaseException):
            log.error("Prettier error: %s", error, exc_info=error)
        else:
            log.error("Prettier error: %s", error)

        if self._has_warned:
            return
        self._has_warned = True

        try:
            self._notify(self._message)
        except Exception as e:
            log.error("Could not show error notification: %s", e)

    def reset(self) -> None:
        """Allow the next error to notify again."""
        self._has_warned = False
