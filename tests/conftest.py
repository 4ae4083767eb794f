"""Pytest configuration and fixtures for the Task Tracker API.

Every test gets its own SQLite file under ``tmp_path``; the shared
``settings`` object is pointed at it before the schema is migrated.
"""

from typing import Callable, Dict

import pytest
from fastapi.testclient import TestClient

from task_tracker_api.app.core.config import settings
from task_tracker_api.app.core.db import get_cursor, init_db
from task_tracker_api.app.core.security import create_access_token
from task_tracker_api.app.main import app


@pytest.fixture(autouse=True)
def database(tmp_path, monkeypatch) -> str:
    """Fresh, migrated database for each test."""
    db_file = str(tmp_path / "tasks.db")
    monkeypatch.setattr(settings, "database_url", db_file)
    init_db()
    return db_file


@pytest.fixture
def client() -> TestClient:
    """HTTP client against the FastAPI app."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def create_user() -> Callable[..., int]:
    """Insert a user row and return its ID."""

    def _create(email: str, disabled: bool = False) -> int:
        with get_cursor() as cursor:
            cursor.execute(
                "INSERT INTO users (email, disabled) VALUES (?, ?)",
                (email, 1 if disabled else 0),
            )
            return cursor.lastrowid

    return _create


@pytest.fixture
def auth_headers(create_user) -> Callable[[str], Dict[str, str]]:
    """Provision a user (if needed) and return Authorization headers for it."""
    known: Dict[str, int] = {}

    def _headers(email: str) -> Dict[str, str]:
        if email not in known:
            known[email] = create_user(email)
        token = create_access_token({"sub": email})
        return {"Authorization": f"Bearer {token}"}

    return _headers


@pytest.fixture
def alice(auth_headers) -> Dict[str, str]:
    return auth_headers("alice@example.com")


@pytest.fixture
def bob(auth_headers) -> Dict[str, str]:
    return auth_headers("bob@example.com")


@pytest.fixture
def task_payload() -> Dict[str, str]:
    return {
        "title": "Write report",
        "description": "Q3 summary",
        "due_date": "2024-08-01",
        "status": "NOT_STARTED",
    }
