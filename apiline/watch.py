"""Change notifications for the workflow definition file."""
from __future__ import annotations

import logging
import queue
import threading
from pathlib import Path
from typing import Optional, Protocol

logger = logging.getLogger(__name__)


class ChangeSignal(Protocol):
    """Non-blocking source of "definition changed" events."""

    def poll(self) -> bool:  # pragma: no cover - protocol definition
        ...


class FileChangeSignal:
    """Watches a file's modification time on a background thread.

    The watcher thread only posts events onto a queue; :meth:`poll` is called
    from the interactive loop and drains every pending event at once, so a
    burst of writes turns into a single reload.
    """

    def __init__(self, path: Path, interval: float = 0.5) -> None:
        self.path = path
        self.interval = interval
        self._events: "queue.SimpleQueue[None]" = queue.SimpleQueue()
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._last_mtime = self._current_mtime()

    def start(self) -> None:
        if self._thread is not None:
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="apiline-watch", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        if self._thread is None:
            return
        self._stop.set()
        self._thread.join(timeout=self.interval * 2)
        self._thread = None

    def scan_once(self) -> bool:
        """Compare the modification time once and post an event when it moved."""
        current = self._current_mtime()
        if current is None or current == self._last_mtime:
            return False
        self._last_mtime = current
        self.notify()
        return True

    def notify(self) -> None:
        self._events.put(None)

    def poll(self) -> bool:
        changed = False
        while True:
            try:
                self._events.get_nowait()
            except queue.Empty:
                return changed
            changed = True

    def _run(self) -> None:
        while not self._stop.wait(self.interval):
            try:
                self.scan_once()
            except OSError as exc:
                logger.warning("error checking %s: %s", self.path, exc)

    def _current_mtime(self) -> Optional[float]:
        try:
            return self.path.stat().st_mtime
        except FileNotFoundError:
            return None

    def __enter__(self) -> "FileChangeSignal":
        self.start()
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.stop()


__all__ = ["ChangeSignal", "FileChangeSignal"]
