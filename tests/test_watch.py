"""Tests for mdview.watch -- watchdog-backed file watching."""

from __future__ import annotations

from pathlib import Path

from watchdog.events import (
    DirModifiedEvent,
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
)

from mdview.watch import FileWatcher, _FileChangeHandler


class TestFileChangeHandler:
    def _handler(self, path: Path) -> tuple[_FileChangeHandler, list[int]]:
        calls: list[int] = []
        return _FileChangeHandler(str(path), lambda: calls.append(1)), calls

    def test_modification_of_watched_file(self, tmp_path: Path) -> None:
        target = tmp_path / "doc.md"
        handler, calls = self._handler(target)
        handler.dispatch(FileModifiedEvent(str(target)))
        assert calls == [1]

    def test_other_files_ignored(self, tmp_path: Path) -> None:
        handler, calls = self._handler(tmp_path / "doc.md")
        handler.dispatch(FileModifiedEvent(str(tmp_path / "other.md")))
        assert calls == []

    def test_directory_events_ignored(self, tmp_path: Path) -> None:
        handler, calls = self._handler(tmp_path / "doc.md")
        handler.dispatch(DirModifiedEvent(str(tmp_path)))
        assert calls == []

    def test_created_counts(self, tmp_path: Path) -> None:
        target = tmp_path / "doc.md"
        handler, calls = self._handler(target)
        handler.dispatch(FileCreatedEvent(str(target)))
        assert calls == [1]

    def test_atomic_save_rename_counts(self, tmp_path: Path) -> None:
        target = tmp_path / "doc.md"
        handler, calls = self._handler(target)
        handler.dispatch(FileMovedEvent(str(tmp_path / ".doc.md.swp"), str(target)))
        assert calls == [1]

    def test_deletion_ignored(self, tmp_path: Path) -> None:
        target = tmp_path / "doc.md"
        handler, calls = self._handler(target)
        handler.dispatch(FileDeletedEvent(str(target)))
        assert calls == []


class TestFileWatcher:
    def test_start_and_stop(self, tmp_path: Path) -> None:
        target = tmp_path / "doc.md"
        target.write_text("# hi\n", encoding="utf-8")
        watcher = FileWatcher(str(target), lambda: None)
        watcher.start()
        try:
            assert watcher.running
        finally:
            watcher.stop()
        assert not watcher.running

    def test_stop_without_start(self, tmp_path: Path) -> None:
        watcher = FileWatcher(str(tmp_path / "doc.md"), lambda: None)
        watcher.stop()
        assert not watcher.running

    def test_path_is_absolute(self) -> None:
        watcher = FileWatcher("relative.md", lambda: None)
        assert Path(watcher.path).is_absolute()
