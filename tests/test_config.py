# tests/test_config.py

from __future__ import annotations

from pathlib import Path

import pytest

from brnch.config import Settings

_VARS = (
    "BRNCH_APP_NAME",
    "BRNCH_LOG_LEVEL",
    "BRNCH_DATA_DIR",
    "BRNCH_LOG_DIR",
    "BRNCH_BACKGROUND_SAVE",
    "XDG_DATA_HOME",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for name in _VARS:
        monkeypatch.delenv(name, raising=False)


def test_defaults_follow_xdg_layout(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("XDG_DATA_HOME", str(tmp_path / "share"))

    s = Settings.from_env()

    assert s.app_name == "brnch"
    assert s.log_level == "WARNING"
    assert s.data_dir == tmp_path / "share" / "brnch"
    assert s.log_dir == s.data_dir
    assert s.background_save is True


def test_without_xdg_uses_local_share(monkeypatch: pytest.MonkeyPatch) -> None:
    s = Settings.from_env()

    assert s.data_dir == Path.home() / ".local" / "share" / "brnch"


def test_env_overrides(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("BRNCH_DATA_DIR", str(tmp_path / "d"))
    monkeypatch.setenv("BRNCH_LOG_DIR", str(tmp_path / "l"))
    monkeypatch.setenv("BRNCH_LOG_LEVEL", "debug")
    monkeypatch.setenv("BRNCH_BACKGROUND_SAVE", "off")

    s = Settings.from_env()

    assert s.data_dir == tmp_path / "d"
    assert s.log_dir == tmp_path / "l"
    assert s.log_level == "DEBUG"
    assert s.background_save is False
