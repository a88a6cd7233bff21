# src/brnch/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The editing session depends on Protocols instead of concrete implementations.
This keeps the store and the git inspector swappable and makes testing easier.
"""

from collections.abc import Iterable
from typing import Protocol

from ..tasks.task_models import Task


class TaskRepo(Protocol):
    """Whole-list persistence for one scope (see tasks.task_store.TaskStore)."""

    def load(self) -> list[Task]: ...
    def save(self, tasks: Iterable[Task]) -> None: ...
    def close(self) -> None: ...


class SourceControl(Protocol):
    """
    Read-only view of the repository the tool runs in.

    Both calls raise ScopeUnavailable outside a work tree; branch_name() also raises
    on a detached HEAD.
    """

    def project_name(self) -> str: ...
    def branch_name(self) -> str: ...


class SaveSink(Protocol):
    """Where the session sends list snapshots after each mutation."""

    def submit(self, tasks: list[Task]) -> None: ...
