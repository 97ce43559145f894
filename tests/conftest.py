# tests/conftest.py
from __future__ import annotations

from collections.abc import Callable, Iterator
from itertools import count
from typing import Any

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from chapter_registry_api.app.core.db import Database, init_db
from chapter_registry_api.app.main import create_app

_USER_COUNTER = count(1)


@pytest.fixture()
def database(tmp_path) -> Database:
    """A fresh, migrated SQLite database per test."""
    db = Database(str(tmp_path / "chapter_registry_test.db"))
    init_db(db)
    return db


@pytest.fixture()
def app(database: Database) -> FastAPI:
    return create_app(database)


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture()
def create_user(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Register a user through the API and return its stored record."""

    def _create(email: str | None = None, google_user_id: str | None = None, role: str = "user") -> dict[str, Any]:
        n = next(_USER_COUNTER)
        response = client.post(
            "/api/users/create",
            json={
                "GoogleUserId": google_user_id or f"google-{n}",
                "Email": email or f"warrior{n}@example.com",
                "Role": role,
            },
        )
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


@pytest.fixture()
def create_chapter(client: TestClient) -> Callable[..., dict[str, Any]]:
    """Create a chapter through the API and return the created record."""

    def _create(name: str, description: str = "A chapter", created_by: str = "u1") -> dict[str, Any]:
        response = client.post(
            "/api/chapters",
            json={
                "Chapter_Name": name,
                "Chapter_Description": description,
                "Created_By": created_by,
            },
        )
        assert response.status_code == 201, response.text
        return response.json()

    return _create


@pytest.fixture()
def create_membership(client: TestClient) -> Callable[..., dict[str, Any]]:
    def _create(user_id: str, chapter_id: str, warrior_name: str, rank: str | None = None) -> dict[str, Any]:
        body = {"User_ID": user_id, "Chapter_Id": chapter_id, "Warrior_Name": warrior_name}
        if rank is not None:
            body["Chapter_Rank"] = rank
        response = client.post("/api/memberships/create", json=body)
        assert response.status_code == 201, response.text
        return response.json()["data"]

    return _create


@pytest.fixture()
def broken_store(database: Database, monkeypatch: pytest.MonkeyPatch) -> Database:
    """Make every read through the gateway fail."""

    def _fail(*args: Any, **kwargs: Any) -> Any:
        raise RuntimeError("store unavailable")

    monkeypatch.setattr(database, "fetch_one", _fail)
    monkeypatch.setattr(database, "fetch_all", _fail)
    return database
