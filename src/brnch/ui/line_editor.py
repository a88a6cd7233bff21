# src/brnch/ui/line_editor.py

"""
Single-line text editor state for the input line.

Keeps a plain Python str buffer plus a cursor, fed one key at a time as returned by
curses `get_wch()` (a str for characters, an int for function keys). Nothing here
touches the terminal, so any Unicode text survives an edit untouched.

Newlines already in the text are kept in the buffer and only shown as "↵".
"""

from __future__ import annotations

import curses
from enum import StrEnum

NEWLINE_MARK = "↵"

_SUBMIT = {"\n", "\r", curses.KEY_ENTER}
_CANCEL = {"\x1b"}
_BACKSPACE = {"\x7f", "\x08", curses.KEY_BACKSPACE}


class EditResult(StrEnum):
    CONTINUE = "continue"
    SUBMIT = "submit"
    CANCEL = "cancel"


class LineEditor:
    def __init__(self, text: str = "") -> None:
        self._buf = text
        self.pos = len(text)

    @property
    def text(self) -> str:
        return self._buf

    def feed(self, key: str | int) -> EditResult:
        if key in _SUBMIT:
            return EditResult.SUBMIT
        if key in _CANCEL:
            return EditResult.CANCEL

        buf, pos = self._buf, self.pos
        if key in _BACKSPACE:
            if pos > 0:
                self._buf = buf[: pos - 1] + buf[pos:]
                self.pos -= 1
        elif key == curses.KEY_DC or key == "\x04":
            self._buf = buf[:pos] + buf[pos + 1 :]
        elif key == curses.KEY_LEFT:
            self.pos = max(0, pos - 1)
        elif key == curses.KEY_RIGHT:
            self.pos = min(len(buf), pos + 1)
        elif key in (curses.KEY_HOME, "\x01"):
            self.pos = 0
        elif key in (curses.KEY_END, "\x05"):
            self.pos = len(buf)
        elif key == "\x15":  # ctrl+u
            self._buf = buf[pos:]
            self.pos = 0
        elif isinstance(key, str) and key.isprintable():
            self._buf = buf[:pos] + key + buf[pos:]
            self.pos += len(key)
        return EditResult.CONTINUE

    def view(self, width: int) -> tuple[str, int]:
        """Visible slice for a field `width` cells wide, and the cursor column inside it."""
        width = max(1, width)
        shown = self._buf.replace("\n", NEWLINE_MARK)
        start = max(0, self.pos - width + 1)
        return shown[start : start + width], self.pos - start
