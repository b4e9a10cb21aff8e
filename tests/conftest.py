"""Pytest configuration and shared fixtures."""

import sys
import time
from datetime import datetime, timezone
from pathlib import Path

import pytest

# Ensure src directory is in Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from todo_recur.config import ConfigModel, save_config  # noqa: E402
from todo_recur.store import TaskStore  # noqa: E402


@pytest.fixture
def local_timezone(monkeypatch):
    """Setter that switches the process-local timezone for one test."""
    def _set(name):
        monkeypatch.setenv("TZ", name)
        time.tzset()
    return _set


@pytest.fixture(autouse=True)
def utc_local_time(monkeypatch, local_timezone):
    """Run every test with UTC as the local timezone."""
    local_timezone("UTC")
    yield
    monkeypatch.undo()
    time.tzset()


# Friday 2024-03-15
FIXED_NOW = datetime(2024, 3, 15, 9, 30, tzinfo=timezone.utc)


@pytest.fixture
def fixed_now():
    return FIXED_NOW


@pytest.fixture
def store():
    """Empty store whose clock is pinned to FIXED_NOW."""
    return TaskStore(clock=lambda: FIXED_NOW)


@pytest.fixture
def config_file(tmp_path):
    """Config file pointing the CLI at a temporary data directory."""
    config = ConfigModel(data_dir=str(tmp_path / "data"))
    return save_config(config, tmp_path / "config.yaml")
