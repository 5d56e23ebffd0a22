"""Pytest configuration and fixtures."""

from collections.abc import Callable, Generator
from typing import Any, Optional

import pytest
from fastapi.testclient import TestClient

from registervault.config import Settings
from registervault.data.category_repo import CategoryRepo
from registervault.data.entry_repo import EntryRepo
from registervault.data.user_repo import UserRepo
from registervault.db import database
from registervault.db.database import init_db
from registervault.main import app
from registervault.service.category_service import CategoryService
from registervault.service.entry_editor import EntryEditor
from registervault.service.read_model import VocabularyReadModel
from registervault.web import dependencies


@pytest.fixture(autouse=True)
def fresh_db(tmp_path, monkeypatch) -> Generator[None, None, None]:
    """Point the store at a fresh SQLite file for each test."""
    monkeypatch.setattr(database, "settings", Settings(DB_PATH=tmp_path / "test.db"))
    init_db()
    # The web layer's cache is process-wide; user ids restart with each database.
    dependencies.read_model.invalidate_all()
    yield
    dependencies.read_model.invalidate_all()


@pytest.fixture
def user_id() -> int:
    return UserRepo().create_user(username="alice", password_hash="unused").id


@pytest.fixture
def other_user_id() -> int:
    return UserRepo().create_user(username="bob", password_hash="unused").id


@pytest.fixture
def read_model() -> VocabularyReadModel:
    return VocabularyReadModel(EntryRepo())


@pytest.fixture
def category_service(read_model: VocabularyReadModel) -> CategoryService:
    return CategoryService(CategoryRepo(), read_model)


@pytest.fixture
def make_editor(
    read_model: VocabularyReadModel, category_service: CategoryService
) -> Callable[[Optional[int]], EntryEditor]:
    def _make(user: Optional[int]) -> EntryEditor:
        return EntryEditor(EntryRepo(), category_service, read_model, user)

    return _make


@pytest.fixture
def client() -> Generator[TestClient, Any, None]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def auth_client(client: TestClient) -> TestClient:
    """A client holding a session cookie for a freshly registered user."""
    response = client.post(
        "/register",
        data={"username": "carol", "password": "secret123"},
        follow_redirects=False,
    )
    assert response.status_code == 303
    return client
