# src/brnch/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState for the current repository and branch, then runs
the curses front end in the main thread. Saves run on the saver thread.

Exit status:
- 0: normal quit (pending saves drained)
- 1: startup failure (not a repo, detached HEAD, store unavailable, corrupt record)
     or a save failure during the session (the unsaved list is printed to stderr)
"""

from __future__ import annotations

import logging
import sys

from ..cli.bootstrap import create_initial_state, shutdown_state
from ..config import get_settings
from ..errors import BrnchError
from ..logging_setup import setup_logging
from ..ui.app import run_app
from ..ui.render import render_unsaved

logger = logging.getLogger(__name__)


def _report(message: str) -> None:
    print(f"brnch: {message}", file=sys.stderr)


def main() -> int:
    settings = get_settings()

    # choose console log level from settings.log_level
    level_name = str(getattr(settings, "log_level", "WARNING")).upper()
    console_level = getattr(logging, level_name, logging.WARNING)

    try:
        setup_logging(log_dir=settings.log_dir, console_level=console_level)
    except OSError as exc:
        _report(f"cannot set up logging in {settings.log_dir}: {exc}")
        return 1

    logger.info("Starting %s...", getattr(settings, "app_name", "brnch"))

    try:
        state = create_initial_state(settings=settings)
    except BrnchError as exc:
        logger.error("Startup failed: %s", exc)
        _report(str(exc))
        return 1

    try:
        run_app(state.session, state.scope, len(state.other_branches))
    finally:
        shutdown_state(state)

    err = state.session.error or state.saver.error
    if err is not None:
        _report(f"{err}")
        _report("unsaved tasks:")
        print(render_unsaved(state.session.view()), file=sys.stderr)
        return 1

    logger.info("Bye.")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
