"""Tests for the chapter endpoints."""

import re

import pytest
from fastapi import status

from chapter_registry_api.app.api.dependencies import get_chapter_service
from chapter_registry_api.app.services.chapter_service import ChapterService

CHAPTER_ID_RE = re.compile(r"^[a-z0-9]{6}$")


def test_create_chapter(client) -> None:
    r = client.post(
        "/api/chapters",
        json={"Chapter_Name": "Alpha", "Chapter_Description": "d", "Created_By": "u1"},
    )
    assert r.status_code == status.HTTP_201_CREATED
    chapter = r.json()
    assert CHAPTER_ID_RE.match(chapter["Chapter_Id"])
    assert chapter["ID"] == 1
    assert chapter["Chapter_Name"] == "Alpha"
    assert chapter["Chapter_Description"] == "d"
    assert chapter["Created_By"] == "u1"
    assert chapter["Status"] == "pending"


def test_chapter_numeric_ids_increment(create_chapter) -> None:
    first = create_chapter("Alpha")
    second = create_chapter("Beta")
    assert (first["ID"], second["ID"]) == (1, 2)
    assert first["Chapter_Id"] != second["Chapter_Id"]


def test_generated_ids_are_lowercase_alphanumeric(create_chapter) -> None:
    for n in range(20):
        assert CHAPTER_ID_RE.match(create_chapter(f"Chapter {n}")["Chapter_Id"])


def test_chapter_name_conflict_ignores_case(client, create_chapter) -> None:
    create_chapter("Alpha")
    r = client.post(
        "/api/chapters",
        json={"Chapter_Name": "alpha", "Chapter_Description": "d", "Created_By": "u1"},
    )
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json() == {"error": "Chapter name already exists (case-insensitive)"}


def test_create_chapter_validation_errors(client) -> None:
    r = client.post("/api/chapters", json={"Chapter_Name": "   ", "Created_By": "u1"})
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    errors = {item["field"]: item["message"] for item in r.json()["errors"]}
    assert errors == {
        "Chapter_Name": "Chapter name is required",
        "Chapter_Description": "Chapter description is required",
    }


def test_create_chapter_empty_body_reports_wire_names(client) -> None:
    r = client.post("/api/chapters", json={})
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json() == {
        "errors": [
            {"field": "Chapter_Name", "message": "Chapter name is required"},
            {"field": "Chapter_Description", "message": "Chapter description is required"},
            {"field": "Created_By", "message": "Created by is required"},
        ]
    }


def test_create_chapter_trims_text(create_chapter) -> None:
    chapter = create_chapter("  Gamma  ", description="  desc ")
    assert chapter["Chapter_Name"] == "Gamma"
    assert chapter["Chapter_Description"] == "desc"


def test_generated_id_collision_fails_without_retry(app, client, database) -> None:
    app.dependency_overrides[get_chapter_service] = lambda: ChapterService(
        database, id_factory=lambda: "abc123"
    )
    try:
        first = client.post(
            "/api/chapters",
            json={"Chapter_Name": "Alpha", "Chapter_Description": "d", "Created_By": "u1"},
        )
        assert first.status_code == status.HTTP_201_CREATED
        assert first.json()["Chapter_Id"] == "abc123"

        second = client.post(
            "/api/chapters",
            json={"Chapter_Name": "Beta", "Chapter_Description": "d", "Created_By": "u1"},
        )
        assert second.status_code == status.HTTP_400_BAD_REQUEST
        assert second.json() == {"error": "Generated chapter ID already exists, please try again"}
    finally:
        app.dependency_overrides.clear()

    assert client.get("/api/chapters/count").json() == {"total": 1}


def test_list_chapters_paginates_by_name(client, create_chapter) -> None:
    names = [f"Chapter {letter}" for letter in "JIHGFEDCBA"]
    for name in names:
        create_chapter(name)

    r = client.get("/api/chapters", params={"page": 1, "limit": 2})
    assert r.status_code == status.HTTP_200_OK
    body = r.json()
    assert [c["Chapter_Name"] for c in body["chapters"]] == ["Chapter A", "Chapter B"]
    assert set(body["chapters"][0]) == {"Chapter_Id", "Chapter_Name"}
    assert body["pagination"] == {"total": 10, "page": 1, "limit": 2, "totalPages": 5}

    r = client.get("/api/chapters", params={"page": 3, "limit": 4})
    assert [c["Chapter_Name"] for c in r.json()["chapters"]] == ["Chapter I", "Chapter J"]
    assert r.json()["pagination"]["totalPages"] == 3


def test_list_chapters_past_the_end(client, create_chapter) -> None:
    for n in range(3):
        create_chapter(f"Chapter {n}")
    r = client.get("/api/chapters", params={"page": 9, "limit": 2})
    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {
        "chapters": [],
        "pagination": {"total": 3, "page": 9, "limit": 2, "totalPages": 2},
    }


@pytest.mark.parametrize("params", [{}, {"page": "abc", "limit": "xyz"}, {"page": "0", "limit": "-5"}])
def test_list_chapters_defaults(client, params) -> None:
    r = client.get("/api/chapters", params=params)
    assert r.status_code == status.HTTP_200_OK
    assert r.json()["pagination"] == {"total": 0, "page": 1, "limit": 50, "totalPages": 0}


def test_list_chapters_store_failure(client, broken_store) -> None:
    r = client.get("/api/chapters")
    assert r.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert r.json() == {"error": "Failed to fetch chapters"}


def test_count_chapters(client, create_chapter) -> None:
    assert client.get("/api/chapters/count").json() == {"total": 0}
    create_chapter("Alpha")
    create_chapter("Beta")
    r = client.get("/api/chapters/count")
    assert r.status_code == status.HTTP_200_OK
    assert r.json() == {"total": 2}


def test_count_chapters_store_failure(client, broken_store) -> None:
    r = client.get("/api/chapters/count")
    assert r.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert r.json() == {"error": "Failed to get chapter count"}


def test_check_name(client, create_chapter) -> None:
    create_chapter("Test Chapter")

    taken = client.get("/api/chapters/check-name", params={"Chapter_Name": "TEST chapter"})
    assert taken.status_code == status.HTTP_200_OK
    assert taken.json() == {"exists": True, "message": "Chapter name already exists"}

    free = client.get("/api/chapters/check-name", params={"Chapter_Name": "New Chapter"})
    assert free.json() == {"exists": False, "message": "Chapter name is available"}


def test_check_name_requires_parameter(client) -> None:
    r = client.get("/api/chapters/check-name")
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json() == {"error": "Chapter name is required"}


def test_check_name_store_failure(client, broken_store) -> None:
    r = client.get("/api/chapters/check-name", params={"Chapter_Name": "x"})
    assert r.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert r.json() == {"error": "Failed to check chapter name"}


def test_get_chapter_by_id(client, create_chapter) -> None:
    created = create_chapter("Alpha", description="first", created_by="u9")
    r = client.get(f"/api/chapters/{created['Chapter_Id']}")
    assert r.status_code == status.HTTP_200_OK
    body = r.json()
    assert body["success"] is True
    data = body["data"]
    assert data["ID"] == created["ID"]
    assert data["Chapter_Id"] == created["Chapter_Id"]
    assert data["Chapter_Name"] == "Alpha"
    assert data["Chapter_Description"] == "first"
    assert data["Created_By"] == "u9"
    assert data["Status"] == "pending"
    assert data["CreatedAt"] == created["CreatedAt"]


def test_get_chapter_not_found(client) -> None:
    r = client.get("/api/chapters/zzzzzz")
    assert r.status_code == status.HTTP_404_NOT_FOUND
    assert r.json() == {"error": "Chapter not found"}


def test_get_chapter_blank_id(client) -> None:
    r = client.get("/api/chapters/%20")
    assert r.status_code == status.HTTP_400_BAD_REQUEST
    assert r.json() == {"error": "Chapter ID is required"}


def test_get_chapter_store_failure(client, broken_store) -> None:
    r = client.get("/api/chapters/abc123")
    assert r.status_code == status.HTTP_500_INTERNAL_SERVER_ERROR
    assert r.json() == {"error": "Failed to fetch chapter"}
