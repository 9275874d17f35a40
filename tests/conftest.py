"""Shared fixtures."""

import logging

import pytest


@pytest.fixture(autouse=True)
def restore_logging():
    """Undo setup_logging() calls made by CLI tests."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    for handler in list(root.handlers):
        if handler not in handlers:
            root.removeHandler(handler)
            handler.close()
    for handler in handlers:
        if handler not in root.handlers:
            root.addHandler(handler)
    root.setLevel(level)


@pytest.fixture
def data_file(tmp_path, monkeypatch):
    """Point TASK_DATA_PATH at a fresh file and return its path."""
    path = tmp_path / "data.txt"
    monkeypatch.setenv("TASK_DATA_PATH", str(path))
    monkeypatch.delenv("TASK_LOG_LEVEL", raising=False)
    return path
