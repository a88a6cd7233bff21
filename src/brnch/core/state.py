# src/brnch/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field

from ..tasks.task_store import TaskStore
from .saver import BackgroundSaver
from .scope import Scope
from .session import EditingSession


@dataclass
class AppState:
    # Settings live on the state so the front end and shutdown path can read them.
    settings: object

    scope: Scope
    store: TaskStore
    saver: BackgroundSaver
    session: EditingSession

    # Other branches of the same project that already have a stored list.
    other_branches: list[str] = field(default_factory=list)
