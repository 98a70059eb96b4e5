from __future__ import annotations

import logging
import threading
from typing import Dict

from PySide6.QtCore import QRunnable, QThreadPool

from ecohero.core.errors import StorageError
from ecohero.core.state import PlayerState
from ecohero.core.storage import ProgressFile

logger = logging.getLogger(__name__)


class _WriteTask(QRunnable):
    def __init__(self, writer: SnapshotWriter, generation: int, snapshot: PlayerState) -> None:
        super().__init__()
        self.setAutoDelete(False)
        self._writer = writer
        self._generation = generation
        self._snapshot = snapshot

    def run(self) -> None:
        self._writer._write(self._generation, self._snapshot)


class SnapshotWriter:
    """Writes progress snapshots off the UI thread.

    A single worker thread runs writes in the order they were enqueued. Each
    snapshot is tagged with a generation number; when a write comes up while
    a newer snapshot is already queued it is skipped, so the file can only
    move forward in time. Failures are logged and left for the next write to
    supersede.
    """

    def __init__(self, storage: ProgressFile) -> None:
        self._storage = storage
        self._pool = QThreadPool()
        self._pool.setMaxThreadCount(1)
        self._lock = threading.Lock()
        self._generation = 0
        self._written_generation = 0
        self._pending: Dict[int, _WriteTask] = {}

    @property
    def generation(self) -> int:
        return self._generation

    @property
    def written_generation(self) -> int:
        """Generation of the last snapshot that reached disk (0 if none)."""
        return self._written_generation

    def enqueue(self, snapshot: PlayerState) -> int:
        """Queue ``snapshot`` for writing. The caller must not mutate it afterwards."""
        with self._lock:
            self._generation += 1
            generation = self._generation
            task = _WriteTask(self, generation, snapshot)
            self._pending[generation] = task
        self._pool.start(task)
        return generation

    def cancel_pending(self) -> None:
        """Make every queued snapshot stale so none of them is written."""
        with self._lock:
            self._generation += 1

    def flush(self, timeout_ms: int = -1) -> bool:
        """Block until queued writes finish. Returns False on timeout."""
        return self._pool.waitForDone(timeout_ms)

    def _write(self, generation: int, snapshot: PlayerState) -> None:
        try:
            with self._lock:
                if generation < self._generation:
                    logger.debug("Skipping stale progress snapshot %d (latest %d)", generation, self._generation)
                    return
            try:
                self._storage.save(snapshot)
            except StorageError as e:
                logger.warning("%s", e)
                return
            with self._lock:
                self._written_generation = max(self._written_generation, generation)
        finally:
            with self._lock:
                self._pending.pop(generation, None)
