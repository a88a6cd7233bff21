# src/brnch/tasks/task_models.py

from __future__ import annotations

from dataclasses import dataclass, replace
from enum import IntEnum
from typing import Any


class TaskLevel(IntEnum):
    """
    Nesting depth of a task.

    Notes:
    - only two levels exist; SUB is an indentation/grouping hint, not a parent link.
    - the integer value is what gets persisted.
    """

    TOP = 1
    SUB = 2

    @classmethod
    def from_db(cls, raw: Any) -> TaskLevel:
        # bool is an int subclass; reject it so `true` never reads as level 1.
        if isinstance(raw, bool) or not isinstance(raw, int):
            raise ValueError(f"level must be 1 or 2, got {raw!r}")
        return cls(raw)


@dataclass(slots=True)
class Task:
    text: str
    checked: bool = False
    level: TaskLevel = TaskLevel.TOP

    def copy(self) -> Task:
        return replace(self)

    def to_dict(self, order: int) -> dict[str, Any]:
        return {
            "text": self.text,
            "checked": self.checked,
            "level": int(self.level),
            "order": order,
        }

    @staticmethod
    def from_dict(d: Any) -> Task:
        """Strict parse of one stored element; raises ValueError on any shape problem."""
        if not isinstance(d, dict):
            raise ValueError(f"task entry must be an object, got {type(d).__name__}")
        if "text" not in d:
            raise ValueError("task entry is missing required field: text")
        text = d["text"]
        if not isinstance(text, str):
            raise ValueError(f"text must be a string, got {type(text).__name__}")
        checked = d.get("checked", False)
        if not isinstance(checked, bool):
            raise ValueError(f"checked must be a boolean, got {checked!r}")
        level = TaskLevel.from_db(d.get("level", int(TaskLevel.TOP)))
        return Task(text=text, checked=checked, level=level)
