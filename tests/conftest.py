"""Shared fixtures."""

from pathlib import Path

import pytest

from memo.db import MemoStore


@pytest.fixture(autouse=True)
def fake_home(tmp_path: Path, monkeypatch) -> Path:
    """Point the home directory at a scratch dir so ~/.memo is never touched."""
    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.setenv("NO_COLOR", "1")
    return home


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    return tmp_path / "data" / "memo.sqlite"


@pytest.fixture
def store(db_path: Path) -> MemoStore:
    return MemoStore(db_path)
