# src/brnch/tasks/task_store.py

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Iterable
from pathlib import Path
from typing import Any

from ..core.scope import Scope, scope_from_key
from ..errors import BrnchError, CorruptRecord, PersistenceError, StoreUnavailable
from ..storage.kv_store import KVStore
from .task_models import Task

logger = logging.getLogger(__name__)

DB_FILENAME = "brnch.db"


class TaskStore:
    """
    Task list persistence for one scope.

    The whole list is one JSON record under the scope key:
    - save() replaces the record in a single update transaction (never a partial merge)
    - load() reads it in a single view transaction; a missing record is an empty list
    - a malformed record raises CorruptRecord and is left untouched on disk

    A secondary index over the project's key pattern is (re)registered on open,
    so every branch of the project that has a record can be enumerated.
    """

    def __init__(self, kv: KVStore, scope: Scope) -> None:
        self._kv = kv
        self.scope = scope

    @classmethod
    def open(cls, storage_dir: str | Path, project: str, branch: str) -> TaskStore:
        scope = Scope(project=project, branch=branch)
        storage_dir = Path(storage_dir)
        try:
            storage_dir.mkdir(parents=True, exist_ok=True)
        except OSError as exc:
            raise StoreUnavailable(f"Cannot create data directory {storage_dir}: {exc}") from exc

        kv = KVStore.open(storage_dir / DB_FILENAME)
        try:
            kv.create_index(scope.index_name, scope.project_pattern)
        except (sqlite3.Error, BrnchError) as exc:
            kv.close()
            raise StoreUnavailable(f"Cannot register index for {scope}: {exc}") from exc

        logger.info("TaskStore ready db=%s scope=%s key=%s", kv.path, scope, scope.key)
        return cls(kv, scope)

    @property
    def key(self) -> str:
        return self.scope.key

    @property
    def closed(self) -> bool:
        return self._kv.closed

    # ---- serialization ----

    @staticmethod
    def encode(tasks: Iterable[Task]) -> str:
        return json.dumps([t.to_dict(order=i) for i, t in enumerate(tasks)], ensure_ascii=False)

    def decode(self, raw: str) -> list[Task]:
        try:
            data: Any = json.loads(raw)
        except ValueError as exc:
            raise CorruptRecord(self.key, f"invalid JSON ({exc})") from exc
        if not isinstance(data, list):
            raise CorruptRecord(self.key, f"expected a JSON array, got {type(data).__name__}")

        tasks: list[Task] = []
        for i, entry in enumerate(data):
            try:
                tasks.append(Task.from_dict(entry))
            except ValueError as exc:
                raise CorruptRecord(self.key, f"entry {i}: {exc}") from exc
        return tasks

    # ---- public API ----

    def save(self, tasks: Iterable[Task]) -> None:
        tasks = list(tasks)
        try:
            payload = self.encode(tasks)
        except (TypeError, ValueError) as exc:
            raise PersistenceError(f"Cannot serialize tasks for {self.scope}: {exc}") from exc

        try:
            with self._kv.update() as tx:
                tx.set(self.key, payload)
        except (sqlite3.Error, BrnchError) as exc:
            raise PersistenceError(f"Saving tasks for {self.scope} failed: {exc}") from exc
        logger.debug("Tasks saved key=%s count=%d", self.key, len(tasks))

    def load(self) -> list[Task]:
        try:
            with self._kv.view() as tx:
                raw = tx.get(self.key)
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"Loading tasks for {self.scope} failed: {exc}") from exc

        if raw is None:
            logger.info("No stored tasks for key=%s; starting empty.", self.key)
            return []
        tasks = self.decode(raw)
        logger.info("Tasks loaded key=%s count=%d", self.key, len(tasks))
        return tasks

    def list_branches(self) -> list[str]:
        """Branches of this scope's project that have a stored task list (sorted)."""
        try:
            with self._kv.view() as tx:
                keys = tx.keys(self.scope.index_name)
        except (sqlite3.Error, KeyError) as exc:
            raise StoreUnavailable(f"Listing branches for {self.scope.project} failed: {exc}") from exc

        branches: list[str] = []
        for key in keys:
            scope = scope_from_key(key)
            if scope is not None and scope.project == self.scope.project:
                branches.append(scope.branch)
        return sorted(branches)

    def close(self) -> None:
        self._kv.close()
