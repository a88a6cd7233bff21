# src/brnch/core/saver.py

from __future__ import annotations

import logging
import queue
import threading
from collections.abc import Callable

from ..errors import BrnchError, PersistenceError
from ..tasks.task_models import Task
from .ports import TaskRepo

logger = logging.getLogger(__name__)

ErrorCallback = Callable[[PersistenceError], None]


class BackgroundSaver:
    """
    Serialized, fire-and-forget task list saves.

    Design goals:
    - The edit path never blocks on disk: submit() only enqueues a snapshot.
    - One worker thread consumes a FIFO queue, so saves reach the store in issue order
      and two saves never interleave (the last submitted snapshot is what ends up stored).
    - The first failure is kept in `error`, reported once through `on_error`, and every
      save still queued behind it is dropped: the session is expected to stop.

    With background=False every submit() saves inline and raises on failure (tests, and
    environments where a thread is unwanted).
    """

    def __init__(
        self,
        repo: TaskRepo,
        *,
        on_error: ErrorCallback | None = None,
        background: bool = True,
    ) -> None:
        self._repo = repo
        self._on_error = on_error
        self.background = bool(background)
        self.error: PersistenceError | None = None
        self.saved_count = 0

        self._queue: queue.Queue[list[Task] | None] | None = None
        self._worker: threading.Thread | None = None
        self._stop_requested = False

        if not self.background:
            return

        self._queue = queue.Queue()

        def save_worker() -> None:
            logger.debug("Save worker thread started.")
            assert self._queue is not None

            while True:
                item = self._queue.get()
                try:
                    if item is None:
                        logger.debug("Save worker received stop signal.")
                        return
                    if self.error is not None:
                        logger.debug("Dropping queued save after an earlier failure.")
                        continue
                    self._save(item)
                except PersistenceError:
                    # Recorded and reported in _save(); the worker keeps draining.
                    pass
                except Exception as exc:
                    logger.exception("Unexpected error in save worker.")
                    self._fail(PersistenceError(f"Unexpected save error: {exc}"))
                finally:
                    self._queue.task_done()

        self._worker = threading.Thread(target=save_worker, name="brnch-saver", daemon=True)
        self._worker.start()

    def _save(self, tasks: list[Task]) -> None:
        try:
            self._repo.save(tasks)
        except PersistenceError as exc:
            self._fail(exc)
            raise
        except BrnchError as exc:
            err = PersistenceError(str(exc))
            self._fail(err)
            raise err from exc
        self.saved_count += 1

    def _fail(self, err: PersistenceError) -> None:
        if self.error is not None:
            return
        self.error = err
        logger.error("Saving tasks failed: %s", err)
        if self._on_error is not None:
            try:
                self._on_error(err)
            except Exception:
                logger.exception("Save error callback failed.")

    def submit(self, tasks: list[Task]) -> None:
        """Queue (or, without a worker, perform) a save of this snapshot."""
        snapshot = [t.copy() for t in tasks]
        if self._queue is None:
            if self.error is not None:
                raise self.error
            self._save(snapshot)
            return
        if self._stop_requested:
            raise PersistenceError("Saver is shut down.")
        self._queue.put(snapshot)

    def flush(self) -> None:
        """Block until every queued save has been processed (no-op inline or without a worker)."""
        if self._queue is None or self._worker is None or not self._worker.is_alive():
            return
        self._queue.join()

    def shutdown(self) -> None:
        """Drain pending saves and stop the worker. Idempotent."""
        if self._queue is None or self._stop_requested:
            return
        self._stop_requested = True

        logger.debug("Stopping save worker...")
        self._queue.put(None)

        # The stop signal is queued last: joining the thread drains every pending save,
        # and returns at once if the worker already died.
        if self._worker is not None:
            self._worker.join()
        leftover = self._queue.qsize()
        if leftover:
            # The stop signal itself is still queued.
            logger.warning("Save worker exited early; %d queued save(s) dropped.", leftover - 1)
        logger.debug("Save worker stopped (saved=%d).", self.saved_count)
