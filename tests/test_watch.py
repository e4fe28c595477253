"""Tests for watch mode functionality."""

import os
import signal
import time
from pathlib import Path
from threading import Thread

import pytest
from watchdog.events import (
    FileCreatedEvent,
    FileDeletedEvent,
    FileModifiedEvent,
    FileMovedEvent,
    DirCreatedEvent,
)

from scrapdown.adapters.scrapbox_parser import ScrapboxParser
from scrapdown.config import InputConfig, ScrapdownConfig
from scrapdown.runtime import Runtime
from scrapdown.watch import DebounceHandler, apply_batch, watch_directory


@pytest.fixture
def runtime():
    """Runtime with default settings."""
    return Runtime(parser=ScrapboxParser(), config=ScrapdownConfig())


def _handler(root: Path, batches: list, debounce_ms: int = 0) -> DebounceHandler:
    return DebounceHandler(
        root, "*.txt", lambda changed, deleted: batches.append((changed, deleted)), debounce_ms
    )


def test_handler_collects_and_flushes(tmp_path):
    """Test events are batched and cleared on flush."""
    batches: list = []
    handler = _handler(tmp_path, batches)

    handler.on_created(FileCreatedEvent(str(tmp_path / "a.txt")))
    handler.on_modified(FileModifiedEvent(str(tmp_path / "b.txt")))
    handler.on_deleted(FileDeletedEvent(str(tmp_path / "c.txt")))
    handler.flush()

    assert batches == [
        ({tmp_path / "a.txt", tmp_path / "b.txt"}, {tmp_path / "c.txt"})
    ]
    assert not handler.changed and not handler.deleted

    # Nothing pending: no new batch
    handler.flush()
    assert len(batches) == 1


def test_events_during_batch_go_to_next_batch(tmp_path):
    """Test an event arriving while a batch is processed is kept for the next one."""
    batches: list = []
    handler = None

    def on_batch(changed, deleted):
        batches.append((set(changed), set(deleted)))
        if len(batches) == 1:
            handler.on_created(FileCreatedEvent(str(tmp_path / "late.txt")))

    handler = DebounceHandler(tmp_path, "*.txt", on_batch, 0)
    handler.on_created(FileCreatedEvent(str(tmp_path / "a.txt")))
    handler.flush()
    handler.flush()

    assert batches == [({tmp_path / "a.txt"}, set()), ({tmp_path / "late.txt"}, set())]


def test_handler_filters_paths(tmp_path):
    """Test non-matching, hidden, swap and directory events are ignored."""
    batches: list = []
    handler = _handler(tmp_path, batches)

    handler.on_created(FileCreatedEvent(str(tmp_path / "a.md")))
    handler.on_created(FileCreatedEvent(str(tmp_path / ".a.txt")))
    handler.on_modified(FileModifiedEvent(str(tmp_path / "a.txt.swp")))
    handler.on_created(DirCreatedEvent(str(tmp_path / "dir.txt")))
    handler.flush()

    assert batches == []


def test_handler_move(tmp_path):
    """Test renames count as delete plus change."""
    batches: list = []
    handler = _handler(tmp_path, batches)

    handler.on_moved(FileMovedEvent(str(tmp_path / "old.txt"), str(tmp_path / "new.txt")))
    handler.flush()

    assert batches == [({tmp_path / "new.txt"}, {tmp_path / "old.txt"})]


def test_handler_delete_then_recreate(tmp_path):
    """Test the last event for a path wins."""
    batches: list = []
    handler = _handler(tmp_path, batches)

    path = tmp_path / "a.txt"
    handler.on_deleted(FileDeletedEvent(str(path)))
    handler.on_created(FileCreatedEvent(str(path)))
    handler.flush()

    assert batches == [({path}, set())]


def test_debounce_window(tmp_path):
    """Test check_and_flush waits for the debounce window."""
    batches: list = []
    handler = _handler(tmp_path, batches, debounce_ms=10_000)

    handler.on_created(FileCreatedEvent(str(tmp_path / "a.txt")))
    handler.check_and_flush()
    assert batches == []

    handler.debounce_ms = 0
    time.sleep(0.01)
    handler.check_and_flush()
    assert len(batches) == 1


def test_apply_batch(tmp_path, runtime):
    """Test converting changed files and removing outputs of deleted ones."""
    src = tmp_path / "src"
    out = tmp_path / "out"
    src.mkdir()
    (src / "a.txt").write_text("[** A]", encoding="utf-8")
    stale = out / "gone.md"
    stale.parent.mkdir()
    stale.write_text("old")

    counts = apply_batch(
        runtime, src, out, {src / "a.txt", src / "missing.txt"}, {src / "gone.txt"}
    )

    assert counts == {"converted": 1, "removed": 1, "failed": 0}
    assert (out / "a.md").read_text(encoding="utf-8") == "## A\n"
    assert not stale.exists()


def _wait_for(predicate, timeout: float = 5.0) -> bool:
    deadline = time.time() + timeout
    while time.time() < deadline:
        if predicate():
            return True
        time.sleep(0.05)
    return predicate()


def _read(path: Path) -> str | None:
    return path.read_text(encoding="utf-8") if path.exists() else None


def test_watch_directory_subdirectory_pattern(tmp_path):
    """Test the watch loop converts, follows edits below root and stops on SIGTERM."""
    src = tmp_path / "src"
    out = tmp_path / "out"
    notes = src / "notes"
    notes.mkdir(parents=True)
    (notes / "a.txt").write_text("[** A]", encoding="utf-8")
    (src / "top.txt").write_text("[** Top]", encoding="utf-8")

    config = ScrapdownConfig(input=InputConfig(glob="notes/*.txt"))
    runtime = Runtime(parser=ScrapboxParser(), config=config)
    seen: dict[str, bool] = {}

    def edit_then_stop():
        try:
            seen["initial"] = _wait_for(lambda: _read(out / "notes" / "a.md") == "## A\n")
            # Give the observer time to start after the initial conversion
            time.sleep(0.5)
            (notes / "a.txt").write_text("[*** B]", encoding="utf-8")
            (notes / "b.txt").write_text("#new", encoding="utf-8")
            seen["updated"] = _wait_for(
                lambda: _read(out / "notes" / "a.md") == "# B\n"
                and _read(out / "notes" / "b.md") == "[#new](#new.md)\n"
            )
        finally:
            os.kill(os.getpid(), signal.SIGTERM)

    before = signal.getsignal(signal.SIGTERM)
    worker = Thread(target=edit_then_stop)
    worker.start()
    try:
        code = watch_directory(src, out, runtime, debounce_ms=50, quiet=True)
    finally:
        worker.join()

    assert code == 0
    assert seen == {"initial": True, "updated": True}
    # Outside the pattern
    assert not (out / "top.md").exists()
    assert signal.getsignal(signal.SIGTERM) is before


def test_watch_directory_rejects_file(tmp_path, runtime, capsys):
    """Test watching something that is not a directory fails."""
    doc = tmp_path / "a.txt"
    doc.write_text("x")

    assert watch_directory(doc, tmp_path / "out", runtime, quiet=True) == 1
    assert "Not a directory" in capsys.readouterr().err
