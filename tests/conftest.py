# tests/conftest.py
from __future__ import annotations

import pytest

from logroll.config import ENV_OVERRIDES


@pytest.fixture(autouse=True)
def _isolate_config(monkeypatch: pytest.MonkeyPatch, tmp_path_factory: pytest.TempPathFactory):
    """
    Keep the developer's own logroll config out of every test: clear LOGROLL_*
    overrides and point XDG_CONFIG_HOME at an empty directory.
    """
    for var in (*ENV_OVERRIDES, "LOGROLL_CONFIG", "LOGROLL_DEBUG"):
        monkeypatch.delenv(var, raising=False)
    monkeypatch.setenv("XDG_CONFIG_HOME", str(tmp_path_factory.mktemp("xdg")))
    yield


@pytest.fixture
def log_file(tmp_path):
    """An active log file with a little content, as found before a rollover."""
    p = tmp_path / "logs" / "app.log"
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_bytes(b"hello\n")
    return p
