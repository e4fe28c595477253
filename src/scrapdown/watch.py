"""Watch mode for scrapdown - re-convert documents as they change."""

import json
import logging
import signal
import sys
import time
from collections.abc import Callable
from pathlib import Path
from typing import Any

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from .errors import InputNotFoundError
from .locate import locate_inputs, matches, output_path_for
from .runtime import Runtime

logger = logging.getLogger(__name__)

BatchCallback = Callable[[set[Path], set[Path]], None]


class DebounceHandler(FileSystemEventHandler):
    """File system event handler with debouncing."""

    def __init__(self, root: Path, pattern: str, on_batch: BatchCallback, debounce_ms: int = 150):
        super().__init__()
        self.root = root
        self.pattern = pattern
        self.on_batch = on_batch
        self.debounce_ms = debounce_ms

        # Track pending changes by path
        self.changed: set[Path] = set()
        self.deleted: set[Path] = set()
        self.last_event_time = 0.0

    def _accept(self, raw_path: Any) -> Path | None:
        path = Path(str(raw_path))
        if not matches(path, self.root, self.pattern):
            return None
        return path

    def _mark_changed(self, path: Path) -> None:
        self.deleted.discard(path)
        self.changed.add(path)
        self.last_event_time = time.time()

    def _mark_deleted(self, path: Path) -> None:
        self.changed.discard(path)
        self.deleted.add(path)
        self.last_event_time = time.time()

    def on_created(self, event: FileSystemEvent) -> None:
        """Handle file creation."""
        if event.is_directory:
            return
        path = self._accept(event.src_path)
        if path:
            self._mark_changed(path)

    def on_modified(self, event: FileSystemEvent) -> None:
        """Handle file modification."""
        if event.is_directory:
            return
        path = self._accept(event.src_path)
        if path:
            self._mark_changed(path)

    def on_deleted(self, event: FileSystemEvent) -> None:
        """Handle file deletion."""
        if event.is_directory:
            return
        path = self._accept(event.src_path)
        if path:
            self._mark_deleted(path)

    def on_moved(self, event: FileSystemEvent) -> None:
        """Handle renames (many editors save through a temp file)."""
        if event.is_directory:
            return
        src = self._accept(event.src_path)
        if src:
            self._mark_deleted(src)
        dest = self._accept(event.dest_path)
        if dest:
            self._mark_changed(dest)

    def check_and_flush(self) -> None:
        """Check if debounce period has elapsed and flush if so."""
        if not (self.changed or self.deleted):
            return

        elapsed = (time.time() - self.last_event_time) * 1000
        if elapsed >= self.debounce_ms:
            self.flush()

    def flush(self) -> None:
        """Process accumulated events."""
        if not (self.changed or self.deleted):
            return

        # Events arriving from here on belong to the next batch
        changed, self.changed = self.changed, set()
        deleted, self.deleted = self.deleted, set()

        if self.on_batch:
            self.on_batch(changed, deleted)


def apply_batch(
    runtime: Runtime,
    root: Path,
    out_dir: Path,
    changed: set[Path],
    deleted: set[Path],
) -> dict[str, int]:
    """Convert changed documents and remove outputs of deleted ones."""
    counts = {"converted": 0, "removed": 0, "failed": 0}

    for src in sorted(changed):
        if not src.exists():
            continue
        try:
            runtime.convert_file(src, output_path_for(src, root, out_dir))
            counts["converted"] += 1
        except (OSError, UnicodeDecodeError) as e:
            logger.warning("Failed to convert %s: %s", src, e)
            counts["failed"] += 1

    for src in sorted(deleted):
        dest = output_path_for(src, root, out_dir)
        if dest.exists():
            dest.unlink()
            counts["removed"] += 1

    return counts


def watch_directory(
    src_dir: Path,
    out_dir: Path,
    runtime: Runtime,
    debounce_ms: int = 150,
    quiet: bool = False,
    json_output: bool = False,
) -> int:
    """
    Watch a directory and re-convert documents when they change.

    Args:
        src_dir: Directory holding the source documents
        out_dir: Directory receiving the Markdown files
        runtime: Runtime used for conversion
        debounce_ms: Debounce window in milliseconds
        quiet: Suppress output
        json_output: Output JSON events instead of human-readable

    Returns:
        Exit code
    """
    if not src_dir.is_dir():
        print(f"Error: Not a directory: {src_dir}", file=sys.stderr)
        return 1

    pattern = runtime.config.input.glob

    # Initial full conversion
    try:
        initial = set(locate_inputs(src_dir, pattern))
    except InputNotFoundError:
        initial = set()
    counts = apply_batch(runtime, src_dir, out_dir, initial, set())
    if not quiet and not json_output:
        print(f"Initial conversion complete: {counts['converted']} documents")

    running = True

    def handle_batch(changed: set[Path], deleted: set[Path]) -> None:
        """Handle a batch of changes."""
        start_time = time.time()
        counts = apply_batch(runtime, src_dir, out_dir, changed, deleted)
        duration_ms = int((time.time() - start_time) * 1000)

        if json_output:
            event = {
                "type": "batch",
                "changed": sorted(str(p) for p in changed),
                "deleted": sorted(str(p) for p in deleted),
                "failed": counts["failed"],
                "duration_ms": duration_ms,
            }
            print(json.dumps(event), flush=True)
        elif not quiet:
            print(
                f"Converted: ~{counts['converted']} -{counts['removed']} ({duration_ms}ms)",
                flush=True,
            )

    # Set up signal handlers for graceful shutdown
    def signal_handler(signum: int, frame: Any) -> None:
        nonlocal running
        running = False
        if not quiet and not json_output:
            print("\nShutting down...", flush=True)

    previous_handlers = {
        signum: signal.signal(signum, signal_handler) for signum in (signal.SIGINT, signal.SIGTERM)
    }

    handler = DebounceHandler(src_dir, pattern, handle_batch, debounce_ms)
    observer = Observer()
    # matches() filters events, so every subdirectory is watched
    observer.schedule(handler, str(src_dir), recursive=True)

    if not quiet and not json_output:
        print(f"Watching {src_dir} -> {out_dir} (debounce: {debounce_ms}ms)", flush=True)
        print("Press Ctrl+C to stop", flush=True)

    observer.start()

    try:
        while running:
            time.sleep(0.1)
            handler.check_and_flush()
    finally:
        # Flush any pending events before shutdown
        handler.flush()
        observer.stop()
        observer.join()
        for signum, previous in previous_handlers.items():
            if previous is not None:
                signal.signal(signum, previous)

    if not quiet and not json_output:
        print("Watch stopped", flush=True)

    return 0
