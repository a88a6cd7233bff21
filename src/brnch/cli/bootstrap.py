# src/brnch/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- asks source control which (project, branch) is active,
- opens the one task store for that scope,
- wires the background saver and the editing session into AppState.

Everything here may raise BrnchError; main() reports it and exits before the UI starts.
"""

from __future__ import annotations

import logging

from ..config import get_settings
from ..core.ports import SourceControl
from ..core.saver import BackgroundSaver
from ..core.session import EditingSession
from ..core.state import AppState
from ..errors import BrnchError, PersistenceError
from ..git_ops import GitInspector
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def create_initial_state(*, settings=None, inspector: SourceControl | None = None) -> AppState:
    """
    Create AppState for the current working directory.

    Settings and the inspector are injectable for tests; by default the cached settings
    and a GitInspector rooted at the process cwd are used.
    """
    if settings is None:
        settings = get_settings()
    if inspector is None:
        inspector = GitInspector()

    project = inspector.project_name()
    branch = inspector.branch_name()
    logger.info("Scope: %s :: %s", project, branch)

    store = TaskStore.open(settings.data_dir, project, branch)
    session: EditingSession | None = None

    def _on_save_error(err: PersistenceError) -> None:
        if session is not None:
            session.fail(err)

    saver = BackgroundSaver(
        store,
        on_error=_on_save_error,
        background=getattr(settings, "background_save", True),
    )

    try:
        session = EditingSession.start(store, saver)
    except BrnchError:
        saver.shutdown()
        store.close()
        raise

    try:
        others = [b for b in store.list_branches() if b != branch]
    except BrnchError:
        logger.warning("Could not list other branches of %s.", project, exc_info=True)
        others = []

    return AppState(
        settings=settings,
        scope=store.scope,
        store=store,
        saver=saver,
        session=session,
        other_branches=others,
    )


def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    try:
        state.saver.shutdown()
    except Exception:
        logger.exception("Failed to drain pending saves.")

    try:
        state.store.close()
    except Exception:
        logger.debug("Task store close failed.", exc_info=True)
