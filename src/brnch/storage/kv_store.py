# src/brnch/storage/kv_store.py

from __future__ import annotations

import contextlib
import logging
import sqlite3
import threading
from collections.abc import Iterator
from pathlib import Path

from ..errors import PersistenceError, StoreUnavailable

logger = logging.getLogger(__name__)


class Tx:
    """
    One transaction against the store.

    Obtained only through KVStore.view() / KVStore.update(); writes on a read-only
    transaction raise PersistenceError.
    """

    def __init__(self, conn: sqlite3.Connection, *, writable: bool) -> None:
        self._conn = conn
        self._writable = writable

    def get(self, key: str) -> str | None:
        row = self._conn.execute("SELECT value FROM kv WHERE key = ?", (key,)).fetchone()
        return None if row is None else str(row["value"])

    def set(self, key: str, value: str) -> str | None:
        """Write `value` under `key`; returns the replaced value (None if the key was new)."""
        self._require_writable()
        previous = self.get(key)
        self._conn.execute(
            "INSERT INTO kv(key, value) VALUES (?, ?) "
            "ON CONFLICT(key) DO UPDATE SET value = excluded.value",
            (key, value),
        )
        return previous

    def delete(self, key: str) -> bool:
        self._require_writable()
        cur = self._conn.execute("DELETE FROM kv WHERE key = ?", (key,))
        return cur.rowcount == 1

    def keys(self, index: str) -> list[str]:
        """Keys matching the pattern registered under `index`, in ascending string order."""
        row = self._conn.execute(
            "SELECT pattern FROM kv_indexes WHERE name = ?", (index,)
        ).fetchone()
        if row is None:
            raise KeyError(f"Unknown index: {index}")
        cur = self._conn.execute(
            "SELECT key FROM kv WHERE key GLOB ? ORDER BY key ASC", (row["pattern"],)
        )
        return [str(r["key"]) for r in cur.fetchall()]

    def create_index(self, name: str, pattern: str) -> None:
        self._require_writable()
        self._conn.execute(
            "INSERT INTO kv_indexes(name, pattern, kind) VALUES (?, ?, 'string') "
            "ON CONFLICT(name) DO UPDATE SET pattern = excluded.pattern, kind = excluded.kind",
            (name, pattern),
        )

    def indexes(self) -> dict[str, str]:
        rows = self._conn.execute("SELECT name, pattern FROM kv_indexes ORDER BY name").fetchall()
        return {str(r["name"]): str(r["pattern"]) for r in rows}

    def _require_writable(self) -> None:
        if not self._writable:
            raise PersistenceError("Write attempted in a read-only transaction.")


class KVStore:
    """
    Embedded, file-backed key/value store on a single SQLite file.

    - string keys -> string values (table `kv`)
    - named secondary indexes over key glob patterns (table `kv_indexes`, `*` and `?`)
    - view() / update() transactions; update() commits on success, rolls back on error

    Thread-safety:
    - one connection per open store, shared across threads
    - an internal lock makes every transaction exclusive
    """

    def __init__(self, conn: sqlite3.Connection, path: Path) -> None:
        self._conn: sqlite3.Connection | None = conn
        self._path = path
        self._lock = threading.RLock()

    @classmethod
    def open(cls, path: str | Path) -> KVStore:
        path = Path(path)
        try:
            conn = sqlite3.connect(
                str(path), timeout=30.0, check_same_thread=False, isolation_level=None
            )
        except sqlite3.Error as exc:
            raise StoreUnavailable(f"Cannot open store file {path}: {exc}") from exc

        conn.row_factory = sqlite3.Row
        store = cls(conn, path)
        try:
            store._configure_conn(conn)
            store._ensure_schema()
        except sqlite3.Error as exc:
            store.close()
            raise StoreUnavailable(f"Cannot initialize store file {path}: {exc}") from exc

        logger.info("KVStore ready db=%s", path)
        return store

    @property
    def path(self) -> Path:
        return self._path

    @property
    def closed(self) -> bool:
        return self._conn is None

    @staticmethod
    def _configure_conn(conn: sqlite3.Connection) -> None:
        with contextlib.suppress(sqlite3.Error):
            conn.execute("PRAGMA journal_mode=WAL")

    def _ensure_schema(self) -> None:
        with self.update() as tx:
            tx._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv (
                    key TEXT PRIMARY KEY,
                    value TEXT NOT NULL
                )
                """
            )
            tx._conn.execute(
                """
                CREATE TABLE IF NOT EXISTS kv_indexes (
                    name TEXT PRIMARY KEY,
                    pattern TEXT NOT NULL,
                    kind TEXT NOT NULL DEFAULT 'string'
                )
                """
            )

    def _require_conn(self) -> sqlite3.Connection:
        if self._conn is None:
            raise StoreUnavailable(f"Store {self._path} is closed.")
        return self._conn

    # ---- transactions ----

    @contextlib.contextmanager
    def view(self) -> Iterator[Tx]:
        with self._lock:
            conn = self._require_conn()
            conn.execute("BEGIN")
            try:
                yield Tx(conn, writable=False)
            finally:
                conn.execute("ROLLBACK")

    @contextlib.contextmanager
    def update(self) -> Iterator[Tx]:
        with self._lock:
            conn = self._require_conn()
            conn.execute("BEGIN IMMEDIATE")
            try:
                yield Tx(conn, writable=True)
                conn.execute("COMMIT")
            except BaseException:
                # COMMIT itself may fail (busy/disk full); never leave a transaction open.
                if conn.in_transaction:
                    with contextlib.suppress(sqlite3.Error):
                        conn.execute("ROLLBACK")
                raise

    # ---- indexes ----

    def create_index(self, name: str, pattern: str) -> None:
        """Register (or re-register) a string index over keys matching `pattern`."""
        with self.update() as tx:
            tx.create_index(name, pattern)
        logger.debug("KVStore index registered name=%s pattern=%s", name, pattern)

    def indexes(self) -> dict[str, str]:
        with self.view() as tx:
            return tx.indexes()

    def close(self) -> None:
        with self._lock:
            if self._conn is None:
                return
            try:
                self._conn.close()
            finally:
                self._conn = None
            logger.info("KVStore closed db=%s", self._path)
