"""Polling file watcher used by the local host to detect saves."""

from simpler_prettier.watching.watcher import (
    FileChangeEvent,
    FileWatcher,
    WatchedFile,
)

__all__ = [
    "FileChangeEvent",
    "FileWatcher",
    "WatchedFile",
]
