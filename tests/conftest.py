# tests/conftest.py

from __future__ import annotations

from pathlib import Path
from types import SimpleNamespace

import pytest

from brnch.tasks.task_store import TaskStore


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with the bootstrap and CLI.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the developer's environment and .env file.
    """
    return SimpleNamespace(
        app_name="brnch",
        log_level="WARNING",
        # Paths (tmp per test run)
        data_dir=tmp_path / "data",
        log_dir=tmp_path / "logs",
        # Saves inline so tests can assert right after an intent.
        background_save=False,
    )


@pytest.fixture()
def store(settings: SimpleNamespace):
    """
    Real SQLite-backed TaskStore for project "demo", branch "main".

    Persistence correctness is part of what we want to test, so no fake here.
    """
    s = TaskStore.open(settings.data_dir, "demo", "main")
    yield s
    s.close()
