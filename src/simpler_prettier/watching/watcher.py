"""Workspace file watching using polling.

Polling is preferred over native file watchers for cross-platform reliability
and to avoid extra dependencies. Each poll rescans the workspace for files
matching the configured globs and compares modification times and sizes with
the previous snapshot.
"""

from __future__ import annotations

import asyncio
import fnmatch
import os
import time
from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from pathlib import Path

from simpler_prettier.logging import TRACE, get_logger

log = get_logger("watching")


@dataclass
class WatchedFile:
    """Snapshot of a watched file's state."""

    path: Path
    mtime: float
    size: int


@dataclass
class FileChangeEvent:
    """Represents a detected file change."""

    path: Path
    change_type: str  # "modified", "created", "deleted"
    old_mtime: float | None
    new_mtime: float | None
    timestamp: float = field(default_factory=time.time)


def matches(rel_path: str, pattern: str) -> bool:
    """Glob match on a POSIX relative path; a leading "**/" also matches the root."""
    if fnmatch.fnmatch(rel_path, pattern):
        return True
    return pattern.startswith("**/") and fnmatch.fnmatch(rel_path, pattern[3:])


class FileWatcher:
    """Watches a workspace tree for file changes using polling.

    Example:
        watcher = FileWatcher(Path("/project"), patterns=["**/*.ts"])

        async def on_change(events: list[FileChangeEvent]) -> None:
            for event in events:
                print(f"{event.change_type}: {event.path}")

        await watcher.start(on_change)
    """

    def __init__(
        self,
        root: Path,
        patterns: list[str],
        ignore_patterns: list[str] | None = None,
        poll_interval: float = 1.0,
        max_files: int = 5000,
    ) -> None:
        self._root = root
        self._patterns = list(patterns)
        self._ignore_patterns = list(ignore_patterns or [])
        self._poll_interval = max(0.1, poll_interval)
        self._max_files = max_files

        self._snapshot: dict[Path, WatchedFile] = {}
        self._running = False
        self._warned_max = False

    @property
    def poll_interval(self) -> float:
        return self._poll_interval

    @property
    def watched_count(self) -> int:
        return len(self._snapshot)

    @property
    def running(self) -> bool:
        return self._running

    def _is_ignored(self, rel_path: str) -> bool:
        return any(matches(rel_path, p) for p in self._ignore_patterns)

    def _is_watched(self, rel_path: str) -> bool:
        return any(matches(rel_path, p) for p in self._patterns) and not self._is_ignored(
            rel_path
        )

    def scan(self) -> dict[Path, WatchedFile]:
        """Stat every matching file under the root."""
        found: dict[Path, WatchedFile] = {}

        for dirpath, dirnames, filenames in os.walk(self._root):
            rel_dir = Path(dirpath).relative_to(self._root).as_posix()
            prefix = "" if rel_dir == "." else rel_dir + "/"

            # Prune ignored directories in place so os.walk skips them
            dirnames[:] = [d for d in dirnames if not self._is_ignored(f"{prefix}{d}/")]

            for name in filenames:
                rel_path = f"{prefix}{name}"
                if not self._is_watched(rel_path):
                    continue
                if len(found) >= self._max_files:
                    if not self._warned_max:
                        log.warning(
                            "More than %d files match; ignoring the rest", self._max_files
                        )
                        self._warned_max = True
                    return found

                path = Path(dirpath) / name
                try:
                    stat = path.stat()
                except OSError as e:
                    log.debug("Error checking %s: %s", path, e)
                    continue
                found[path] = WatchedFile(path=path, mtime=stat.st_mtime, size=stat.st_size)

        return found

    def rebaseline(self) -> None:
        """Accept the current state of the tree without reporting changes."""
        self._snapshot = self.scan()

    def mark(self, path: Path) -> None:
        """Accept the current state of a single file."""
        try:
            stat = path.stat()
        except OSError:
            self._snapshot.pop(path, None)
            return
        self._snapshot[path] = WatchedFile(path=path, mtime=stat.st_mtime, size=stat.st_size)

    def check_changes(self) -> list[FileChangeEvent]:
        """Rescan and return changes since the previous snapshot."""
        current = self.scan()
        events: list[FileChangeEvent] = []

        for path, watched in self._snapshot.items():
            now = current.get(path)
            if now is None:
                events.append(
                    FileChangeEvent(
                        path=path,
                        change_type="deleted",
                        old_mtime=watched.mtime,
                        new_mtime=None,
                    )
                )
            elif now.mtime != watched.mtime or now.size != watched.size:
                events.append(
                    FileChangeEvent(
                        path=path,
                        change_type="modified",
                        old_mtime=watched.mtime,
                        new_mtime=now.mtime,
                    )
                )

        for path, now in current.items():
            if path not in self._snapshot:
                events.append(
                    FileChangeEvent(
                        path=path,
                        change_type="created",
                        old_mtime=None,
                        new_mtime=now.mtime,
                    )
                )

        self._snapshot = current
        log.log(TRACE, "Polled %d files, %d changes", len(current), len(events))
        return events

    async def start(
        self,
        callback: Callable[[list[FileChangeEvent]], Awaitable[None]],
    ) -> None:
        """Poll until stop() is called or the task is cancelled.

        Args:
            callback: Awaited with each non-empty batch of changes.
        """
        if self._running:
            log.warning("FileWatcher already running")
            return

        self._running = True
        self.rebaseline()
        log.info(
            "Watching %d files under %s (interval: %.1fs)",
            self.watched_count,
            self._root,
            self._poll_interval,
        )

        try:
            while self._running:
                await asyncio.sleep(self._poll_interval)
                events = self.check_changes()
                if not events:
                    continue
                try:
                    await callback(events)
                except Exception as e:
                    log.error("Error in file change callback: %s", e)
        except asyncio.CancelledError:
            log.info("FileWatcher cancelled")
            raise
        finally:
            self._running = False

    def stop(self) -> None:
        """Stop the polling loop after the current cycle."""
        self._running = False
