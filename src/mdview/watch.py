"""File watching for live reload, backed by watchdog."""

from __future__ import annotations

import logging
import os
from typing import Any, Callable

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

logger = logging.getLogger(__name__)


class _FileChangeHandler(FileSystemEventHandler):
    """Forward change events that touch one file."""

    def __init__(self, path: str, on_change: Callable[[], None]) -> None:
        super().__init__()
        self._path = path
        self._on_change = on_change

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in ("modified", "created", "moved", "closed"):
            return
        paths = [event.src_path, getattr(event, "dest_path", "")]
        if any(p and os.path.abspath(os.fsdecode(p)) == self._path for p in paths):
            logger.debug("%s: %s", event.event_type, self._path)
            self._on_change()


class FileWatcher:
    """Watch a single file and call *on_change* from the observer thread.

    The parent directory is watched rather than the file itself so that
    editors which save by writing a new file and renaming it over the old
    one are still noticed.
    """

    def __init__(self, path: str, on_change: Callable[[], None]) -> None:
        self.path = os.path.abspath(path)
        self._on_change = on_change
        self._observer: Any = None

    @property
    def running(self) -> bool:
        return self._observer is not None

    def start(self) -> None:
        if self._observer is not None:
            return
        directory = os.path.dirname(self.path)
        self._observer = Observer()
        self._observer.schedule(_FileChangeHandler(self.path, self._on_change), directory, recursive=False)
        self._observer.start()
        logger.info("Watching %s for changes", self.path)

    def stop(self) -> None:
        if self._observer is None:
            return
        self._observer.stop()
        self._observer.join()
        self._observer = None
