"""
Business logic for chapter memberships.

Creating a membership runs a fixed sequence of checks, each failing
with its own error before anything is written:

1. the user exists,
2. the chapter exists,
3. the user is not already a member of that chapter,
4. no membership anywhere uses the same warrior name (case-insensitive).

Warrior names are unique across all chapters, not per chapter.  The
availability check uses the same global rule.
"""

from __future__ import annotations

import logging
import sqlite3
from typing import List, Optional

from ..core.db import Database
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..schemas.common import to_storage, utcnow
from ..schemas.membership import (
    DEFAULT_RANK,
    Membership,
    MembershipCreate,
    UserMembership,
    WarriorNameCheck,
)

logger = logging.getLogger(__name__)

ALREADY_MEMBER_MESSAGE = "User is already a member of this chapter"
WARRIOR_NAME_TAKEN_MESSAGE = "Warrior name is already taken"


class MembershipService:
    """Create and list memberships."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def create_membership(self, data: MembershipCreate) -> Membership:
        if not data.user_id or not data.chapter_id or not data.warrior_name:
            raise ValidationError(
                "Missing required fields: User_ID, Chapter_Id, and Warrior_Name are required"
            )

        self._require_user(data.user_id)
        self._require_chapter(data.chapter_id)

        if self.db.fetch_one(
            "SELECT ID FROM memberships WHERE User_ID = ? AND Chapter_Id = ?",
            (data.user_id, data.chapter_id),
        ):
            raise ConflictError(ALREADY_MEMBER_MESSAGE)

        if self._warrior_name_exists(data.warrior_name):
            logger.info("Rejected taken warrior name %r", data.warrior_name)
            raise ConflictError(WARRIOR_NAME_TAKEN_MESSAGE)

        now = utcnow()
        membership = Membership(
            user_id=data.user_id,
            chapter_id=data.chapter_id,
            chapter_rank=data.chapter_rank or DEFAULT_RANK,
            chapter_status="pending",
            warrior_name=data.warrior_name,
            created_at=now,
            updated_at=now,
        )
        try:
            self.db.execute(
                """
                INSERT INTO memberships (
                    User_ID, Chapter_Id, Chapter_Rank, Chapter_Status,
                    Warrior_Name, CreatedAt, UpdatedAt
                ) VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    membership.user_id,
                    membership.chapter_id,
                    membership.chapter_rank,
                    membership.chapter_status,
                    membership.warrior_name,
                    to_storage(membership.created_at),
                    to_storage(membership.updated_at),
                ),
            )
        except sqlite3.IntegrityError as exc:
            # Concurrent request won the race; report the rule it broke.
            if self._warrior_name_exists(data.warrior_name):
                raise ConflictError(WARRIOR_NAME_TAKEN_MESSAGE) from exc
            raise ConflictError(ALREADY_MEMBER_MESSAGE) from exc

        row = self.db.fetch_one(
            "SELECT * FROM memberships WHERE User_ID = ? AND Chapter_Id = ?",
            (data.user_id, data.chapter_id),
        )
        logger.info(
            "User %s joined chapter %s as %r", data.user_id, data.chapter_id, data.warrior_name
        )
        return Membership.model_validate(row)

    async def list_by_chapter(self, chapter_id: str) -> List[Membership]:
        """Return the chapter's memberships ordered by warrior name."""
        self._require_chapter(chapter_id)
        rows = self.db.fetch_all(
            """
            SELECT m.*
            FROM memberships m
            WHERE m.Chapter_Id = ?
            ORDER BY m.Warrior_Name
            """,
            (chapter_id,),
        )
        return [Membership.model_validate(row) for row in rows]

    async def list_by_user(self, user_id: str) -> List[UserMembership]:
        """Return the user's memberships with chapter details, ordered by chapter name."""
        self._require_user(user_id)
        rows = self.db.fetch_all(
            """
            SELECT m.*, c.Chapter_Name, c.Chapter_Description
            FROM memberships m
            JOIN chapters c ON m.Chapter_Id = c.Chapter_Id
            WHERE m.User_ID = ?
            ORDER BY c.Chapter_Name
            """,
            (user_id,),
        )
        return [UserMembership.model_validate(row) for row in rows]

    async def check_warrior_name(self, warrior_name: Optional[str]) -> WarriorNameCheck:
        if not warrior_name:
            raise ValidationError("Missing required field: warriorName is required")
        return WarriorNameCheck(
            is_available=not self._warrior_name_exists(warrior_name),
            warrior_name=warrior_name,
        )

    def _require_user(self, user_id: str) -> None:
        if not self.db.fetch_one("SELECT ID FROM users WHERE User_ID = ?", (user_id,)):
            raise NotFoundError("User not found")

    def _require_chapter(self, chapter_id: str) -> None:
        if not self.db.fetch_one("SELECT ID FROM chapters WHERE Chapter_Id = ?", (chapter_id,)):
            raise NotFoundError("Chapter not found")

    def _warrior_name_exists(self, warrior_name: str) -> bool:
        row = self.db.fetch_one(
            "SELECT Warrior_Name FROM memberships WHERE LOWER(Warrior_Name) = LOWER(?)",
            (warrior_name,),
        )
        return row is not None
