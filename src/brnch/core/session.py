# src/brnch/core/session.py

from __future__ import annotations

"""
Editing session.

Binds the task list to persistence with one rule: every intent that changed the list
is immediately followed by a save of the full resulting list. Loading happens once,
in EditingSession.start(), before any editing.

Intents are named user actions, not key codes; the front end maps keys to intents.
The session is a small state machine:

- NORMAL: navigation, reorder, relevel, toggle, delete, begin_insert / begin_update
- INSERT: commit_input(text) inserts after the selected task, cancel_input discards
- UPDATE: commit_input(text) replaces the selected task's text, cancel_input discards

Intents not valid in the current mode are ignored (return False).
"""

import logging
from enum import StrEnum

from ..errors import PersistenceError
from ..tasks.task_list import TaskList
from ..tasks.task_models import Task, TaskLevel
from .ports import SaveSink, TaskRepo

logger = logging.getLogger(__name__)


class Mode(StrEnum):
    NORMAL = "normal"
    INSERT = "insert"
    UPDATE = "update"


class Intent(StrEnum):
    CURSOR_UP = "cursor_up"
    CURSOR_DOWN = "cursor_down"
    MOVE_UP = "move_up"
    MOVE_DOWN = "move_down"
    LEVEL_TOP = "level_top"
    LEVEL_SUB = "level_sub"
    TOGGLE = "toggle"
    DELETE = "delete"
    BEGIN_INSERT = "begin_insert"
    BEGIN_UPDATE = "begin_update"
    COMMIT_INPUT = "commit_input"
    CANCEL_INPUT = "cancel_input"


_NORMAL_INTENTS = frozenset(
    {
        Intent.CURSOR_UP,
        Intent.CURSOR_DOWN,
        Intent.MOVE_UP,
        Intent.MOVE_DOWN,
        Intent.LEVEL_TOP,
        Intent.LEVEL_SUB,
        Intent.TOGGLE,
        Intent.DELETE,
        Intent.BEGIN_INSERT,
        Intent.BEGIN_UPDATE,
    }
)
_INPUT_INTENTS = frozenset({Intent.COMMIT_INPUT, Intent.CANCEL_INPUT})


class EditingSession:
    def __init__(self, task_list: TaskList, saver: SaveSink) -> None:
        self.tasks = task_list
        self.mode = Mode.NORMAL
        self._saver = saver
        self.error: PersistenceError | None = None

    @classmethod
    def start(cls, repo: TaskRepo, saver: SaveSink) -> EditingSession:
        """Load the scope's list once (errors propagate: startup failures are fatal)."""
        tasks = repo.load()
        logger.info("Editing session started with %d task(s).", len(tasks))
        return cls(TaskList(tasks), saver)

    @property
    def failed(self) -> bool:
        return self.error is not None

    def fail(self, err: PersistenceError) -> None:
        """Mark the session as terminated by a save failure (safe from any thread)."""
        if self.error is None:
            self.error = err

    def input_seed(self) -> str:
        """Initial text for the input line: the selected task's text in UPDATE mode."""
        if self.mode is Mode.UPDATE:
            selected = self.tasks.selected()
            return selected.text if selected is not None else ""
        return ""

    def view(self) -> list[Task]:
        return self.tasks.snapshot()

    # ---- dispatch ----

    def apply(self, intent: Intent, text: str | None = None) -> bool:
        """Apply one intent; returns True when the list changed (and a save was issued)."""
        if self.failed:
            return False

        allowed = _NORMAL_INTENTS if self.mode is Mode.NORMAL else _INPUT_INTENTS
        if intent not in allowed:
            logger.debug("Ignoring intent %s in mode %s.", intent, self.mode)
            return False

        changed = self._dispatch(intent, text)
        if changed:
            self._persist()
        return changed

    def _dispatch(self, intent: Intent, text: str | None) -> bool:
        tl = self.tasks
        c = tl.cursor

        if intent is Intent.CURSOR_UP:
            return tl.move_cursor_up()
        if intent is Intent.CURSOR_DOWN:
            return tl.move_cursor_down()
        if intent is Intent.MOVE_UP:
            return tl.move_task_up(c)
        if intent is Intent.MOVE_DOWN:
            return tl.move_task_down(c)
        if intent is Intent.LEVEL_TOP:
            return tl.set_level(c, TaskLevel.TOP)
        if intent is Intent.LEVEL_SUB:
            return tl.set_level(c, TaskLevel.SUB)
        if intent is Intent.TOGGLE:
            return tl.toggle_checked(c)
        if intent is Intent.DELETE:
            return tl.delete_at(c)

        if intent is Intent.BEGIN_INSERT:
            self.mode = Mode.INSERT
            return False
        if intent is Intent.BEGIN_UPDATE:
            if tl.selected() is None:
                return False
            self.mode = Mode.UPDATE
            return False
        if intent is Intent.CANCEL_INPUT:
            self.mode = Mode.NORMAL
            return False

        # COMMIT_INPUT; blank input, or an update that left the text as seeded, is a cancel.
        seed = self.input_seed()
        mode, self.mode = self.mode, Mode.NORMAL
        if mode is Mode.UPDATE and text == seed:
            return False
        value = (text or "").strip()
        if not value:
            return False
        if mode is Mode.INSERT:
            return tl.insert_at(c, value)
        return tl.set_text(c, value)

    def _persist(self) -> None:
        try:
            self._saver.submit(self.tasks.snapshot())
        except PersistenceError as exc:
            self.fail(exc)
