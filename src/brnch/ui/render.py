# src/brnch/ui/render.py

"""
Pure rendering projection for tasks.

render_task() receives (text, checked, level, is_selected) and returns a TaskFragment:
wrapped display lines plus a style token. It never sees or mutates the task list;
the curses front end maps style tokens to attributes.

Layout per task:
- one space of indent per level, then a glyph: "●" top-level, "○" sub-task, "✓" checked
- text wraps to the available width; continuation lines align under the text
"""

from __future__ import annotations

import textwrap
from dataclasses import dataclass
from enum import StrEnum

from ..tasks.task_models import TaskLevel

GLYPH_TOP = "●"
GLYPH_SUB = "○"
GLYPH_CHECKED = "✓"

FOOTER_HELP = "i: new task  u: update task  space: toggle  d: delete  HJKL: move task  q: quit"
INPUT_HELP = "enter: save  esc: cancel"


class Style(StrEnum):
    NORMAL = "normal"
    CHECKED = "checked"
    SELECTED = "selected"


@dataclass(frozen=True, slots=True)
class TaskFragment:
    lines: tuple[str, ...]
    style: Style
    glyph: str


def task_glyph(checked: bool, level: TaskLevel) -> str:
    if checked:
        return GLYPH_CHECKED
    return GLYPH_TOP if level == TaskLevel.TOP else GLYPH_SUB


def task_style(checked: bool, is_selected: bool) -> Style:
    if is_selected:
        return Style.SELECTED
    if checked:
        return Style.CHECKED
    return Style.NORMAL


def render_task(
    text: str,
    checked: bool,
    level: TaskLevel,
    is_selected: bool,
    width: int = 80,
) -> TaskFragment:
    glyph = task_glyph(checked, level)
    prefix = f"{' ' * int(level)}{glyph} "
    avail = max(8, width - len(prefix))

    body: list[str] = []
    for raw in (text.splitlines() or [""]):
        body.extend(textwrap.wrap(raw, width=avail, drop_whitespace=True) or [""])

    pad = " " * len(prefix)
    lines = [prefix + body[0], *(pad + line for line in body[1:])]
    return TaskFragment(lines=tuple(lines), style=task_style(checked, is_selected), glyph=glyph)


def render_header(project: str, branch: str, other_branches: int = 0) -> str:
    header = f"{project} :: {branch}"
    if other_branches:
        noun = "branch" if other_branches == 1 else "branches"
        header += f"  (+{other_branches} {noun} with tasks)"
    return header


def render_unsaved(tasks) -> str:
    """Plain-text checklist printed to stderr when a save failure ends the session."""
    out: list[str] = []
    for t in tasks:
        mark = "[x]" if t.checked else "[ ]"
        indent = "  " * (int(t.level) - 1)
        first, *rest = t.text.splitlines() or [""]
        out.append(f"{indent}{mark} {first}")
        out.extend(f"{indent}    {line}" for line in rest)
    return "\n".join(out)
