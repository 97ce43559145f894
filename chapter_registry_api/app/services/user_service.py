"""
Business logic for users.

Users are registered from a Google identity and receive a public
``User_ID`` (UUID) on creation.  E‑mail and Google user id must each
be unique; both are checked before the insert and backed by unique
indices in the schema.
"""

import logging
import re
import sqlite3

from ..core.db import Database
from ..core.exceptions import ConflictError, NotFoundError, ValidationError
from ..schemas.common import to_storage, utcnow
from ..schemas.user import User, UserCreate, UserIdLookup
from .identifiers import UserIdentifier, classify_identifier

logger = logging.getLogger(__name__)

EMAIL_PATTERN = re.compile(r"[^\s@]+@[^\s@]+\.[^\s@]+")

USER_EXISTS_MESSAGE = "User with this email or GoogleUserId already exists"


class UserService:
    """Create, delete and look up users."""

    def __init__(self, db: Database) -> None:
        self.db = db

    async def create_user(self, data: UserCreate) -> User:
        """Register a new user and return the stored record.

        Raises ``ValidationError`` for missing fields or a malformed
        e‑mail and ``ConflictError`` when the e‑mail or the Google user
        id is already registered.
        """
        if not data.google_user_id or not data.email or not data.role:
            raise ValidationError(
                "Missing required fields: GoogleUserId, Email, and Role are required"
            )
        if not EMAIL_PATTERN.fullmatch(data.email):
            raise ValidationError("Invalid email format")

        existing = self.db.fetch_one(
            "SELECT ID FROM users WHERE Email = ? OR GoogleUserId = ?",
            (data.email, data.google_user_id),
        )
        if existing:
            logger.info("Rejected duplicate user %s", data.email)
            raise ConflictError(USER_EXISTS_MESSAGE)

        now = utcnow()
        user = User(
            google_user_id=data.google_user_id,
            email=data.email,
            role=data.role,
            status="pending",
            created_at=now,
            updated_at=now,
        )
        try:
            self.db.execute(
                """
                INSERT INTO users (User_ID, GoogleUserId, Email, Role, Status, CreatedAt, UpdatedAt)
                VALUES (?, ?, ?, ?, ?, ?, ?)
                """,
                (
                    user.user_id,
                    user.google_user_id,
                    user.email,
                    user.role,
                    user.status,
                    to_storage(user.created_at),
                    to_storage(user.updated_at),
                ),
            )
        except sqlite3.IntegrityError as exc:
            # A concurrent registration passed the check above first.
            raise ConflictError(USER_EXISTS_MESSAGE) from exc

        row = self.db.fetch_one("SELECT * FROM users WHERE User_ID = ?", (user.user_id,))
        logger.info("Registered user %s (%s)", user.user_id, user.email)
        return User.model_validate(row)

    async def delete_user(self, identifier: str) -> UserIdentifier:
        """Delete the user matching ``identifier``.

        The identifier may be an e‑mail, a ``User_ID`` or a Google user
        id (see ``classify_identifier``).  The user's memberships are
        removed first so the foreign keys on ``memberships`` hold.
        Raises ``NotFoundError`` if no user matches.
        """
        resolved = classify_identifier(identifier)
        column = resolved.kind.column
        row = self.db.fetch_one(
            f"SELECT User_ID FROM users WHERE {column} = ?",
            (resolved.value,),
        )
        if not row:
            raise NotFoundError("User not found")

        with self.db.cursor() as cursor:
            cursor.execute("DELETE FROM memberships WHERE User_ID = ?", (row["User_ID"],))
            cursor.execute(f"DELETE FROM users WHERE {column} = ?", (resolved.value,))
        logger.info("Deleted user %s by %s", row["User_ID"], resolved.kind.name.lower())
        return resolved

    async def get_user_id(self, google_user_id: str | None) -> UserIdLookup:
        """Return the public ``User_ID`` for a Google user id."""
        if not google_user_id:
            raise ValidationError("GoogleUserId is required")
        row = self.db.fetch_one(
            "SELECT User_ID FROM users WHERE GoogleUserId = ?",
            (google_user_id,),
        )
        if not row:
            raise NotFoundError("User not found")
        return UserIdLookup.model_validate(row)
