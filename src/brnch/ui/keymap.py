# src/brnch/ui/keymap.py

"""Key -> intent tables for the curses front end (NORMAL mode only; input mode is a line editor)."""

from __future__ import annotations

import curses

from ..core.session import Intent

QUIT_KEYS = frozenset({ord("q"), 3})  # q, ctrl+c

NORMAL_KEYS: dict[int, Intent] = {
    ord("k"): Intent.CURSOR_UP,
    curses.KEY_UP: Intent.CURSOR_UP,
    ord("j"): Intent.CURSOR_DOWN,
    curses.KEY_DOWN: Intent.CURSOR_DOWN,
    ord("K"): Intent.MOVE_UP,
    ord("J"): Intent.MOVE_DOWN,
    ord("H"): Intent.LEVEL_TOP,
    ord("L"): Intent.LEVEL_SUB,
    ord(" "): Intent.TOGGLE,
    ord("d"): Intent.DELETE,
    ord("i"): Intent.BEGIN_INSERT,
    ord("u"): Intent.BEGIN_UPDATE,
}


def intent_for_key(ch: int) -> Intent | None:
    return NORMAL_KEYS.get(ch)
