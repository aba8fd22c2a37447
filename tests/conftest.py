"""Pytest fixtures for the task list tests."""

from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from tasklist.config import Settings
from tasklist.main import create_app
from tasklist.persistence import MemoryStorage, TaskPersistence
from tasklist.session import TaskSession


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing storage at a per-test directory."""
    return Settings(storage_path=tmp_path / "storage.json", log_level="WARNING")


@pytest.fixture
def storage() -> MemoryStorage:
    """Storage that already holds an empty task list, so no seeding happens."""
    return MemoryStorage({"tasks": "[]"})


@pytest.fixture
def session(storage: MemoryStorage) -> TaskSession:
    """An initialised session over in-memory storage."""
    session = TaskSession(TaskPersistence(storage))
    session.on_init()
    return session


@pytest.fixture
def client(settings: Settings, storage: MemoryStorage) -> Iterator[TestClient]:
    """Create a test client for the API, starting from an empty task list."""
    app = create_app(settings, storage=storage)
    with TestClient(app) as client:
        yield client
