"""Shared fixtures: a fresh SQLite database per test."""

from pathlib import Path
from typing import Iterator

import pytest
from fastapi.testclient import TestClient
from sqlmodel import Session

from task_api.api.dependencies import get_database
from task_api.db.session import Database
from task_api.main import app


@pytest.fixture
def database(tmp_path: Path) -> Iterator[Database]:
    """Database backed by a throwaway SQLite file."""
    db = Database(f"sqlite:///{tmp_path / 'tasks.db'}")
    db.init()
    yield db
    db.dispose()


@pytest.fixture
def session(database: Database) -> Iterator[Session]:
    with database.session() as session:
        yield session


@pytest.fixture
def client(database: Database) -> Iterator[TestClient]:
    """TestClient wired to the per-test database."""
    app.dependency_overrides[get_database] = lambda: database
    yield TestClient(app)
    app.dependency_overrides.clear()
