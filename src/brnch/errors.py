# src/brnch/errors.py

"""
Error taxonomy.

- ScopeUnavailable: not inside a git work tree, or HEAD is detached.
- StoreUnavailable: the data directory or the backing file cannot be opened.
- PersistenceError: a save transaction failed (terminates the editing session).
- CorruptRecord: a stored task list cannot be parsed (never auto-erased).
"""

from __future__ import annotations


class BrnchError(Exception):
    """Base class for every error reported to the user."""


class ScopeUnavailable(BrnchError):
    pass


class StoreUnavailable(BrnchError):
    pass


class PersistenceError(BrnchError):
    pass


class CorruptRecord(BrnchError):
    def __init__(self, key: str, reason: str) -> None:
        super().__init__(f"Stored task list {key!r} is corrupt: {reason}")
        self.key = key
        self.reason = reason
