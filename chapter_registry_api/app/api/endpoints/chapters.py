"""
Chapter endpoints.

Listing with pagination, count, name availability, lookup by
``Chapter_Id`` and creation.  Failures answer ``{"error": ...}``;
malformed creation payloads are rejected by the validation handler
with ``{"errors": [...]}``.

The static paths (``/count``, ``/check-name``) are declared before
``/{chapter_id}`` so they are not captured as an id.
"""

from typing import Optional

from fastapi import APIRouter, Depends, Query, status
from fastapi.responses import JSONResponse

from chapter_registry_api.app.api import responses
from chapter_registry_api.app.api.dependencies import get_chapter_service
from chapter_registry_api.app.schemas.chapter import ChapterCreate
from chapter_registry_api.app.services.chapter_service import (
    DEFAULT_PAGE,
    DEFAULT_PAGE_SIZE,
    ChapterService,
)

router = APIRouter()


def _positive_int(value: Optional[str], default: int) -> int:
    """Parse a query value leniently; anything unusable falls back to ``default``."""
    try:
        parsed = int(value) if value is not None else default
    except ValueError:
        return default
    return parsed if parsed > 0 else default


@router.get("")
async def list_chapters(
    page: Optional[str] = Query(None),
    limit: Optional[str] = Query(None),
    service: ChapterService = Depends(get_chapter_service),
) -> JSONResponse:
    """Return a page of chapters (``Chapter_Id`` and ``Chapter_Name``) ordered by name.

    ``page`` defaults to 1 and ``limit`` to 50.
    """
    try:
        result = await service.list_chapters(
            page=_positive_int(page, DEFAULT_PAGE),
            limit=_positive_int(limit, DEFAULT_PAGE_SIZE),
        )
    except Exception as exc:
        return responses.from_exception(exc, "Failed to fetch chapters", responses.error)
    return responses.payload(result)


@router.get("/count")
async def count_chapters(service: ChapterService = Depends(get_chapter_service)) -> JSONResponse:
    try:
        total = await service.count_chapters()
    except Exception as exc:
        return responses.from_exception(exc, "Failed to get chapter count", responses.error)
    return responses.payload({"total": total})


@router.get("/check-name")
async def check_chapter_name(
    chapter_name: Optional[str] = Query(None, alias="Chapter_Name"),
    service: ChapterService = Depends(get_chapter_service),
) -> JSONResponse:
    """Report whether a chapter name is already used, ignoring case."""
    try:
        result = await service.check_name(chapter_name)
    except Exception as exc:
        return responses.from_exception(exc, "Failed to check chapter name", responses.error)
    return responses.payload(result)


@router.get("/{chapter_id}")
async def get_chapter(
    chapter_id: str,
    service: ChapterService = Depends(get_chapter_service),
) -> JSONResponse:
    try:
        chapter = await service.get_chapter(chapter_id)
    except Exception as exc:
        return responses.from_exception(exc, "Failed to fetch chapter", responses.error)
    return responses.success(chapter)


@router.post("", status_code=status.HTTP_201_CREATED)
async def create_chapter(
    chapter_in: ChapterCreate,
    service: ChapterService = Depends(get_chapter_service),
) -> JSONResponse:
    """Create a chapter with a generated six-character ``Chapter_Id``."""
    try:
        chapter = await service.create_chapter(chapter_in)
    except Exception as exc:
        return responses.from_exception(exc, "Failed to create chapter", responses.error)
    return responses.payload(chapter, status.HTTP_201_CREATED)
