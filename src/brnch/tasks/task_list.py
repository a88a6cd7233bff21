# src/brnch/tasks/task_list.py

"""
Ordered two-level task list with a cursor.

Every editing method is total (safe on an empty list, out-of-range indexes are no-ops)
and returns True only when the list itself changed, so the caller knows whether a save
is needed. Cursor-only moves return False.

Cursor range is 0..n; n ("append position") only appears transiently on an empty list.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator

from .task_models import Task, TaskLevel


class TaskList:
    def __init__(self, tasks: Iterable[Task] | None = None, cursor: int = 0) -> None:
        self._tasks: list[Task] = list(tasks or [])
        self.cursor = max(0, min(int(cursor), max(0, len(self._tasks) - 1)))

    def __len__(self) -> int:
        return len(self._tasks)

    def __iter__(self) -> Iterator[Task]:
        # Copies: callers never hold references that can drift from the list.
        return iter(self.snapshot())

    def __getitem__(self, index: int) -> Task:
        return self._tasks[index].copy()

    def _in_range(self, c: int) -> bool:
        return 0 <= c < len(self._tasks)

    def snapshot(self) -> list[Task]:
        return [t.copy() for t in self._tasks]

    def selected(self) -> Task | None:
        if not self._in_range(self.cursor):
            return None
        return self._tasks[self.cursor].copy()

    # ---- cursor ----

    def move_cursor_up(self) -> bool:
        if self.cursor > 0:
            self.cursor -= 1
        return False

    def move_cursor_down(self) -> bool:
        if self.cursor < len(self._tasks) - 1:
            self.cursor += 1
        return False

    # ---- reorder ----

    def move_task_up(self, c: int) -> bool:
        if not self._in_range(c) or c == 0:
            return False
        self._tasks[c - 1], self._tasks[c] = self._tasks[c], self._tasks[c - 1]
        self.cursor = c - 1
        return True

    def move_task_down(self, c: int) -> bool:
        if not self._in_range(c) or c == len(self._tasks) - 1:
            return False
        self._tasks[c + 1], self._tasks[c] = self._tasks[c], self._tasks[c + 1]
        self.cursor = c + 1
        return True

    # ---- per-task edits ----

    def set_level(self, c: int, level: TaskLevel) -> bool:
        if not self._in_range(c):
            return False
        level = TaskLevel(level)
        if self._tasks[c].level == level:
            return False
        self._tasks[c].level = level
        return True

    def toggle_checked(self, c: int) -> bool:
        if not self._in_range(c):
            return False
        self._tasks[c].checked = not self._tasks[c].checked
        return True

    def set_text(self, c: int, text: str) -> bool:
        if not self._in_range(c) or self._tasks[c].text == text:
            return False
        self._tasks[c].text = text
        return True

    # ---- structure ----

    def delete_at(self, c: int) -> bool:
        if not self._in_range(c):
            return False
        del self._tasks[c]
        if self.cursor > len(self._tasks) - 1:
            self.cursor = max(0, len(self._tasks) - 1)
        return True

    def insert_at(self, c: int, text: str) -> bool:
        """Insert after the task at `c`, or append when `c` is the append position."""
        n = len(self._tasks)
        c = max(0, min(int(c), n))
        task = Task(text=text)
        if c == n:
            self._tasks.append(task)
            self.cursor = n
        else:
            self.cursor = c + 1
            self._tasks.insert(self.cursor, task)
        return True
