# tests/fakes.py

from __future__ import annotations

import curses
from collections.abc import Iterable
from dataclasses import dataclass, field

from brnch.errors import PersistenceError, ScopeUnavailable
from brnch.tasks.task_models import Task


class InMemoryTaskRepo:
    """
    Deterministic TaskRepo for unit tests.

    - Keeps every saved snapshot (in order) for assertions
    - load() returns a copy of the initial list
    """

    def __init__(self, tasks: Iterable[Task] | None = None) -> None:
        self.initial = [t.copy() for t in (tasks or [])]
        self.saves: list[list[Task]] = []
        self.closed = False

    @property
    def last_saved(self) -> list[Task] | None:
        return self.saves[-1] if self.saves else None

    def load(self) -> list[Task]:
        return [t.copy() for t in self.initial]

    def save(self, tasks: Iterable[Task]) -> None:
        self.saves.append([t.copy() for t in tasks])

    def close(self) -> None:
        self.closed = True


class FailingTaskRepo(InMemoryTaskRepo):
    """Repo whose saves start failing after `fail_after` successful ones."""

    def __init__(self, tasks: Iterable[Task] | None = None, *, fail_after: int = 0) -> None:
        super().__init__(tasks)
        self.fail_after = fail_after
        self.attempts = 0

    def save(self, tasks: Iterable[Task]) -> None:
        self.attempts += 1
        if self.attempts > self.fail_after:
            raise PersistenceError("disk full")
        super().save(tasks)


@dataclass(slots=True)
class FakeInspector:
    """SourceControl stand-in; set `error` to simulate a missing repo or detached HEAD."""

    project: str = "demo"
    branch: str = "main"
    error: str | None = None

    def project_name(self) -> str:
        if self.error:
            raise ScopeUnavailable(self.error)
        return self.project

    def branch_name(self) -> str:
        if self.error:
            raise ScopeUnavailable(self.error)
        return self.branch


@dataclass(slots=True)
class RecordingSink:
    """SaveSink that only records submitted snapshots."""

    submitted: list[list[Task]] = field(default_factory=list)

    def submit(self, tasks: list[Task]) -> None:
        self.submitted.append([t.copy() for t in tasks])


class FakeScreen:
    """
    Minimal curses window stand-in for driving the front end.

    `keys` is the scripted get_wch() input:
    - str / int items are returned as keys
    - None simulates the poll timeout (curses.error)
    - a callable is invoked, then treated as a timeout (lets a test wait on a thread)

    Running out of keys raises AssertionError so a loop that should have stopped fails
    the test instead of hanging it.
    """

    def __init__(self, keys, size: tuple[int, int] = (24, 80)) -> None:
        self.keys = list(keys)
        self.size = size
        self.timeout_ms: int | None = None
        self.drawn: list[str] = []

    def get_wch(self):
        if not self.keys:
            raise AssertionError("scripted input exhausted")
        key = self.keys.pop(0)
        if key is None:
            raise curses.error("no input")
        if callable(key):
            key()
            raise curses.error("no input")
        return key

    def getmaxyx(self) -> tuple[int, int]:
        return self.size

    def timeout(self, ms: int) -> None:
        self.timeout_ms = ms

    def addnstr(self, y: int, x: int, text: str, n: int, attr: int = 0) -> None:
        self.drawn.append(text[:n])

    def keypad(self, flag: bool) -> None: ...
    def erase(self) -> None: ...
    def hline(self, *args) -> None: ...
    def refresh(self) -> None: ...
    def move(self, y: int, x: int) -> None: ...
    def clrtoeol(self) -> None: ...
