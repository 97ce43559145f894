"""
Service layer for chapters.

Chapters are created with a random six-character ``Chapter_Id`` and a
name that must be unique regardless of case.  When the generated id
collides with an existing one the request fails instead of drawing a
new id; the caller is expected to retry.

All queries use parameterized statements.
"""

from __future__ import annotations

import logging
import math
import sqlite3
from typing import Callable, Optional

from ..core.db import Database
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..schemas.chapter import (
    Chapter,
    ChapterCreate,
    ChapterNameCheck,
    ChapterPage,
    ChapterSummary,
    Pagination,
    generate_chapter_id,
)
from ..schemas.common import to_storage, utcnow

logger = logging.getLogger(__name__)

DEFAULT_PAGE = 1
DEFAULT_PAGE_SIZE = 50

NAME_TAKEN_MESSAGE = "Chapter name already exists (case-insensitive)"
ID_TAKEN_MESSAGE = "Generated chapter ID already exists, please try again"


class ChapterService:
    """Create, list and look up chapters."""

    def __init__(self, db: Database, id_factory: Callable[[], str] = generate_chapter_id) -> None:
        self.db = db
        self.id_factory = id_factory

    async def create_chapter(self, data: ChapterCreate) -> Chapter:
        """Insert a new chapter and return the created record.

        The name check runs before the id check, so a duplicate name is
        always reported as such.  The numeric ``ID`` is the current
        maximum plus one rather than left to the store.
        """
        chapter_id = self.id_factory()

        if self._name_exists(data.chapter_name):
            logger.info("Rejected duplicate chapter name %r", data.chapter_name)
            raise ConflictError(NAME_TAKEN_MESSAGE)

        if self.db.fetch_one("SELECT Chapter_Id FROM chapters WHERE Chapter_Id = ?", (chapter_id,)):
            logger.warning("Generated chapter id %s already exists", chapter_id)
            raise ConflictError(ID_TAKEN_MESSAGE)

        row = self.db.fetch_one("SELECT ID FROM chapters ORDER BY ID DESC LIMIT 1")
        next_id = (row["ID"] if row else 0) + 1

        now = utcnow()
        chapter = Chapter(
            id=next_id,
            chapter_id=chapter_id,
            chapter_name=data.chapter_name,
            chapter_description=data.chapter_description,
            created_by=data.created_by,
            status="pending",
            created_at=now,
            updated_at=now,
        )
        try:
            self.db.execute(
                """
                INSERT INTO chapters (
                    ID, Chapter_Id, Chapter_Name, Chapter_Description,
                    Created_By, Status, CreatedAt, UpdatedAt
                ) VALUES (?, ?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    chapter.id,
                    chapter.chapter_id,
                    chapter.chapter_name,
                    chapter.chapter_description,
                    chapter.created_by,
                    chapter.status,
                    to_storage(chapter.created_at),
                    to_storage(chapter.updated_at),
                ),
            )
        except sqlite3.IntegrityError as exc:
            # Lost a race on the name, the generated id or the numeric id.
            if self._name_exists(data.chapter_name):
                raise ConflictError(NAME_TAKEN_MESSAGE) from exc
            raise ConflictError(ID_TAKEN_MESSAGE) from exc

        logger.info("Created chapter %s (%s)", chapter.chapter_id, chapter.chapter_name)
        return chapter

    async def list_chapters(self, page: int = DEFAULT_PAGE, limit: int = DEFAULT_PAGE_SIZE) -> ChapterPage:
        """Return one page of chapters ordered by name.

        A page past the end yields an empty list; ``total`` and
        ``totalPages`` always describe the whole table.
        """
        offset = (page - 1) * limit
        total = await self.count_chapters()
        rows = self.db.fetch_all(
            """
            SELECT Chapter_Id, Chapter_Name
            FROM chapters
            ORDER BY Chapter_Name
            LIMIT ? OFFSET ?
            """,
            (limit, offset),
        )
        return ChapterPage(
            chapters=[ChapterSummary.model_validate(row) for row in rows],
            pagination=Pagination(
                total=total,
                page=page,
                limit=limit,
                total_pages=math.ceil(total / limit),
            ),
        )

    async def count_chapters(self) -> int:
        row = self.db.fetch_one("SELECT COUNT(*) AS total FROM chapters")
        return int(row["total"]) if row else 0

    async def check_name(self, chapter_name: Optional[str]) -> ChapterNameCheck:
        """Report whether a chapter name is taken, ignoring case."""
        if not chapter_name:
            raise ValidationError("Chapter name is required")
        if self._name_exists(chapter_name):
            return ChapterNameCheck(exists=True, message="Chapter name already exists")
        return ChapterNameCheck(exists=False, message="Chapter name is available")

    async def get_chapter(self, chapter_id: str) -> Chapter:
        """Retrieve a chapter by its public ``Chapter_Id``."""
        if not chapter_id or not chapter_id.strip():
            raise ValidationError("Chapter ID is required")
        row = self.db.fetch_one(
            """
            SELECT ID, Chapter_Id, Chapter_Name, Chapter_Description,
                   Created_By, Status, CreatedAt, UpdatedAt
            FROM chapters
            WHERE Chapter_Id = ?
            """,
            (chapter_id,),
        )
        if not row:
            raise NotFoundError("Chapter not found")
        return Chapter.model_validate(row)

    def _name_exists(self, chapter_name: str) -> bool:
        row = self.db.fetch_one(
            "SELECT Chapter_Name FROM chapters WHERE LOWER(Chapter_Name) = LOWER(?)",
            (chapter_name,),
        )
        return row is not None
