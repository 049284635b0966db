"""Filesystem watcher — forwards watchdog events to the workspace orchestrator."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Iterable
from concurrent.futures import Future
from pathlib import Path

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from guardscan.workspace.orchestrator import WorkspaceScanner

logger = logging.getLogger(__name__)


class WorkspaceEventHandler(FileSystemEventHandler):
    """Runs on the observer thread; scans happen on the orchestrator's loop."""

    def __init__(self, scanner: WorkspaceScanner, loop: asyncio.AbstractEventLoop) -> None:
        super().__init__()
        self._scanner = scanner
        self._loop = loop

    def _submit(self, coro) -> Future:
        future = asyncio.run_coroutine_threadsafe(coro, self._loop)
        future.add_done_callback(_log_failure)
        return future

    def on_created(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._submit(self._scanner.on_file_created(_path(event.src_path)))

    def on_modified(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._submit(self._scanner.on_file_changed(_path(event.src_path)))

    def on_deleted(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._submit(self._scanner.on_file_deleted(_path(event.src_path)))

    def on_moved(self, event: FileSystemEvent) -> None:
        if event.is_directory:
            return
        self._submit(self._scanner.on_file_deleted(_path(event.src_path)))
        # A move onto a path counts as a change to that path
        self._submit(self._scanner.on_file_changed(_path(event.dest_path)))


def _path(raw: str | bytes) -> str:
    return raw.decode() if isinstance(raw, bytes) else raw


def _log_failure(future: Future) -> None:
    if future.cancelled():
        return
    exc = future.exception()
    if exc is not None:
        logger.error("Watch event handling failed: %s", exc)


def start_watching(
    scanner: WorkspaceScanner,
    roots: Iterable[str | Path],
    loop: asyncio.AbstractEventLoop,
) -> Observer:
    """Schedule recursive watches on *roots* and start the observer thread."""
    handler = WorkspaceEventHandler(scanner, loop)
    observer = Observer()
    for root in roots:
        observer.schedule(handler, str(root), recursive=True)
        logger.debug("Watching %s", root)
    observer.start()
    return observer
