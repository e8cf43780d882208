import fcntl
from contextlib import contextmanager

import pytest

from taskpoints.config import Settings, StorageSettings
from taskpoints.manager import TaskManager


@pytest.fixture
def settings(tmp_path):
    """Settings pointing both data files into an isolated directory"""
    return Settings(
        storage=StorageSettings(
            todo_file=str(tmp_path / "todo.json"),
            reward_file=str(tmp_path / "rewards.json"),
        )
    )


@pytest.fixture
def manager(settings):
    return TaskManager(settings)


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    for name in (
        "TASKPOINTS_TODO_FILE",
        "TASKPOINTS_REWARD_FILE",
        "TASKPOINTS_TASK_POINTS",
        "TASKPOINTS_REWARD_PRICE",
    ):
        monkeypatch.delenv(name, raising=False)


@contextmanager
def held_lock(lock_path, exclusive=True):
    """Hold a flock on lock_path the way a second process would"""
    with open(lock_path, "a") as handle:
        fcntl.flock(handle.fileno(), fcntl.LOCK_EX if exclusive else fcntl.LOCK_SH)
        try:
            yield
        finally:
            fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


@pytest.fixture
def hold_lock():
    return held_lock
