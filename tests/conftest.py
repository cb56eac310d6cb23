from __future__ import annotations

import os
from pathlib import Path

import pytest

from vibe.config import get_settings


@pytest.fixture(autouse=True)
def isolated_settings(tmp_path_factory: pytest.TempPathFactory, monkeypatch: pytest.MonkeyPatch):
    """Keep the developer's VIBE_* variables and config file out of the tests."""

    for key in list(os.environ):
        if key.startswith("VIBE_"):
            monkeypatch.delenv(key)
    config_dir = tmp_path_factory.mktemp("config")
    monkeypatch.setenv("VIBE_CONFIG_FILE", str(config_dir / "config.yaml"))
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def home(tmp_path: Path) -> Path:
    path = tmp_path / "home"
    path.mkdir()
    return path


@pytest.fixture
def repo(tmp_path: Path) -> Path:
    path = tmp_path / "src" / "myrepo"
    path.mkdir(parents=True)
    return path
