"""Pytest fixtures for the Brain API tests."""

import base64
from collections.abc import Iterator
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from brain.config import Settings, get_settings
from brain.main import app, get_store
from brain.store import TaskStore

USERNAME = "brain"
PASSWORD = "correct horse"


def basic_auth(username: str, password: str) -> str:
    """Build an ``Authorization`` header value for HTTP Basic."""
    token = base64.b64encode(f"{username}:{password}".encode()).decode()
    return f"Basic {token}"


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing at a temporary task directory."""
    return Settings(username=USERNAME, password=PASSWORD, tasks_dir=tmp_path / "tasks")


@pytest.fixture
def store(settings: Settings) -> TaskStore:
    """An empty task store."""
    store = TaskStore(settings.tasks_dir)
    store.ensure_directory()
    return store


@pytest.fixture
def anonymous_client(settings: Settings, store: TaskStore) -> Iterator[TestClient]:
    """A test client that sends no credentials."""
    app.dependency_overrides[get_settings] = lambda: settings
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def client(anonymous_client: TestClient) -> TestClient:
    """A test client authenticated with the configured credentials."""
    anonymous_client.headers["Authorization"] = basic_auth(USERNAME, PASSWORD)
    return anonymous_client
