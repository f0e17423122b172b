"""Rebuild stylesheets whenever a watched source changes."""

from __future__ import annotations

import logging
import os
import threading
import time
from collections.abc import Callable
from typing import Any

from watchdog.events import FileSystemEvent, FileSystemEventHandler
from watchdog.observers import Observer

from stylepipe.config import Settings
from stylepipe.discovery import matches
from stylepipe.pipeline import BuildReport, build, log_report

logger = logging.getLogger(__name__)


class SourceChangeHandler(FileSystemEventHandler):
    """Forward file events inside the source glob to the watcher."""

    def __init__(self, watcher: StyleWatcher):
        super().__init__()
        self.watcher = watcher

    def on_any_event(self, event: FileSystemEvent) -> None:
        if event.is_directory or event.event_type not in {
            "created",
            "modified",
            "deleted",
            "moved",
        }:
            return
        paths = [event.src_path, getattr(event, "dest_path", "")]
        for raw in paths:
            if not raw:
                continue
            path = os.fsdecode(raw)
            if self.watcher.is_watched(path):
                self.watcher.notify(path)
                return


class StyleWatcher:
    """Long-lived handle over the watchdog observer and the rebuild worker.

    Builds run one at a time on the worker thread. Changes that land while a
    build is running are coalesced into a single follow-up build.
    """

    def __init__(
        self,
        settings: Settings,
        build: Callable[[Settings], BuildReport] = build,
        observer: Any | None = None,
        on_build: Callable[[BuildReport], None] = log_report,
    ):
        self.settings = settings
        self._build = build
        self._on_build = on_build
        self.observer = observer if observer is not None else Observer()
        self.handler = SourceChangeHandler(self)
        self.builds = 0
        self.error: Exception | None = None

        self._lock = threading.Lock()
        self._wake = threading.Event()
        self._stopping = threading.Event()
        self._last_event = 0.0
        self._worker: threading.Thread | None = None

    def is_watched(self, path: str) -> bool:
        return matches(path, self.settings.source_dir, self.settings.source_glob)

    def notify(self, path: str) -> None:
        logger.debug("Change detected: %s", path)
        with self._lock:
            self._last_event = time.monotonic()
        self._wake.set()

    def start(self) -> None:
        source_dir = self.settings.source_dir
        if not source_dir.is_dir():
            raise FileNotFoundError(f"Missing SCSS source directory: {source_dir}")

        if self.settings.build_on_start:
            self._wake.set()

        self.observer.schedule(self.handler, str(source_dir), recursive=True)
        self.observer.start()
        self._worker = threading.Thread(
            target=self._run, name="stylepipe-watch", daemon=True
        )
        self._worker.start()
        logger.info(
            "Watching %s/%s for changes", source_dir, self.settings.source_glob
        )

    def stop(self) -> None:
        self._stopping.set()
        self._wake.set()
        self.observer.stop()

    def join(self, timeout: float | None = None) -> None:
        self.observer.join(timeout)
        if self._worker is not None:
            self._worker.join(timeout)

    def __enter__(self) -> StyleWatcher:
        self.start()
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.stop()
        self.join()

    def run_forever(self) -> None:
        """Watch until interrupted (Ctrl+C)."""
        self.start()
        try:
            while not self._stopping.is_set():
                time.sleep(1)
        except KeyboardInterrupt:
            logger.info("Stopping watch process")
        finally:
            self.stop()
            self.join()
        if self.error is not None:
            raise self.error

    def _settle(self) -> None:
        # wait until no event has arrived for watch_debounce seconds
        quiet = self.settings.watch_debounce
        while not self._stopping.is_set():
            with self._lock:
                remaining = self._last_event + quiet - time.monotonic()
            if remaining <= 0:
                return
            time.sleep(remaining)

    def _run(self) -> None:
        while True:
            self._wake.wait()
            if self._stopping.is_set():
                return
            self._settle()
            if self._stopping.is_set():
                return
            self._wake.clear()
            try:
                report = self._build(self.settings)
            except Exception as exc:
                logger.exception("Build aborted; stopping watcher")
                self.error = exc
                self.stop()
                return
            self.builds += 1
            try:
                self._on_build(report)
            except Exception:
                # the build itself finished; keep watching
                logger.exception("Build report handler failed")
