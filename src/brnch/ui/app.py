# src/brnch/ui/app.py

"""
Curses front end.

Layout:
- header: "project :: branch" (plus how many other branches of the project have tasks)
- task list: one fragment per task from render_task(), scrolled to keep the cursor visible
- footer: key help, or an inline input line while inserting/updating

The app owns no task state: it reads session.view() to draw and sends intents back.
Keys are read with get_wch() and a poll timeout, so a save failure reported by the
saver thread ends the loop without waiting for another keypress.
"""

from __future__ import annotations

import curses
import logging
import os

from ..core.scope import Scope
from ..core.session import EditingSession, Intent, Mode
from ..logging_setup import console_muted
from .keymap import QUIT_KEYS, intent_for_key
from .line_editor import EditResult, LineEditor
from .render import FOOTER_HELP, INPUT_HELP, Style, render_header, render_task

logger = logging.getLogger(__name__)

POLL_MS = 200


class TaskListApp:
    def __init__(self, stdscr, session: EditingSession, scope: Scope, other_branches: int = 0):
        self.stdscr = stdscr
        self.session = session
        self.header = render_header(scope.project, scope.branch, other_branches)
        self.scroll = 0

        curses.curs_set(0)
        self.stdscr.keypad(True)
        self.stdscr.timeout(POLL_MS)
        self.height, self.width = self.stdscr.getmaxyx()

        if curses.has_colors():
            curses.start_color()
            try:
                curses.use_default_colors()
            except curses.error:
                pass
            curses.init_pair(1, curses.COLOR_GREEN, -1)
            curses.init_pair(2, curses.COLOR_CYAN, -1)
            self.COL_CHECKED = curses.color_pair(1) | curses.A_DIM
            self.COL_HEADER = curses.color_pair(2) | curses.A_BOLD
        else:
            self.COL_CHECKED = curses.A_DIM
            self.COL_HEADER = curses.A_BOLD

    def _attrs(self, style: Style) -> int:
        if style is Style.SELECTED:
            return curses.A_REVERSE
        if style is Style.CHECKED:
            return self.COL_CHECKED
        return curses.A_NORMAL

    def _read_key(self) -> str | int | None:
        """Next key from get_wch(), or None when the poll timeout expired."""
        try:
            return self.stdscr.get_wch()
        except curses.error:
            return None

    # ---- rendering ----

    def draw(self) -> None:
        self.stdscr.erase()
        self.height, self.width = self.stdscr.getmaxyx()
        width = max(1, self.width - 1)

        self.stdscr.addnstr(0, 0, self.header, width, self.COL_HEADER)

        tasks = self.session.view()
        cursor = self.session.tasks.cursor
        fragments = [
            render_task(t.text, t.checked, t.level, i == cursor, width) for i, t in enumerate(tasks)
        ]

        top = 2
        rows = max(1, self.height - top - 2)

        # Keep the selected fragment fully visible.
        starts: list[int] = []
        offset = 0
        for frag in fragments:
            starts.append(offset)
            offset += len(frag.lines)
        if fragments:
            sel = min(cursor, len(fragments) - 1)
            sel_start = starts[sel]
            sel_end = sel_start + len(fragments[sel].lines)
            if sel_start < self.scroll:
                self.scroll = sel_start
            elif sel_end > self.scroll + rows:
                self.scroll = max(0, sel_end - rows)
        else:
            self.scroll = 0
            self.stdscr.addnstr(top, 1, "No tasks yet. Press i to add one.", width - 1, curses.A_DIM)

        for frag, start in zip(fragments, starts):
            attrs = self._attrs(frag.style)
            for j, line in enumerate(frag.lines):
                y = top + start + j - self.scroll
                if top <= y < top + rows:
                    self.stdscr.addnstr(y, 0, line, width, attrs)

        help_text = INPUT_HELP if self.session.mode is not Mode.NORMAL else FOOTER_HELP
        self.stdscr.hline(self.height - 2, 0, curses.ACS_HLINE, self.width)
        self.stdscr.addnstr(self.height - 1, 0, help_text, width, curses.A_DIM)
        self.stdscr.refresh()

    def _draw_input(self, label: str, editor: LineEditor) -> None:
        y = self.height - 1
        field = max(1, self.width - len(label) - 1)
        visible, col = editor.view(field)

        self.stdscr.move(y, 0)
        self.stdscr.clrtoeol()
        self.stdscr.addnstr(y, 0, label, max(1, self.width - 1), curses.A_BOLD)
        self.stdscr.addnstr(y, len(label), visible, field)
        self.stdscr.move(y, min(len(label) + col, self.width - 1))
        self.stdscr.refresh()

    # ---- input ----

    def prompt(self, label: str, initial: str = "") -> str | None:
        """Inline text input on the footer line (Enter submits, ESC cancels)."""
        editor = LineEditor(initial)
        curses.curs_set(1)
        try:
            while not self.session.failed:
                self._draw_input(label, editor)
                key = self._read_key()
                if key is None:
                    continue
                if key == curses.KEY_RESIZE:
                    self.draw()
                    continue

                result = editor.feed(key)
                if result is EditResult.SUBMIT:
                    return editor.text
                if result is EditResult.CANCEL:
                    return None
            return None
        finally:
            curses.curs_set(0)

    def _edit_line(self) -> None:
        label = "new task: " if self.session.mode is Mode.INSERT else "update task: "
        text = self.prompt(label, self.session.input_seed())
        if text is None:
            self.session.apply(Intent.CANCEL_INPUT)
        else:
            self.session.apply(Intent.COMMIT_INPUT, text)

    # ---- main loop ----

    def run(self) -> None:
        while not self.session.failed:
            self.draw()
            if self.session.mode is not Mode.NORMAL:
                self._edit_line()
                continue

            key = self._read_key()
            if key is None or key == curses.KEY_RESIZE:
                continue
            ch = ord(key) if isinstance(key, str) else key
            if ch in QUIT_KEYS:
                logger.debug("Quit key received.")
                return

            intent = intent_for_key(ch)
            if intent is not None:
                self.session.apply(intent)

        logger.info("Session stopped after a save failure.")


def run_app(session: EditingSession, scope: Scope, other_branches: int = 0) -> None:
    # Short ESC delay so cancel in the input line feels immediate.
    os.environ.setdefault("ESCDELAY", "25")

    def _main(stdscr) -> None:
        try:
            TaskListApp(stdscr, session, scope, other_branches).run()
        except KeyboardInterrupt:
            logger.debug("KeyboardInterrupt in curses loop.")

    # stderr belongs to curses until wrapper() restores the terminal.
    with console_muted():
        curses.wrapper(_main)
