"""
SQLite persistence gateway and schema initialisation.

``Database`` wraps a SQLite file and executes parameterized
statements against it, returning rows as plain dictionaries.  One
instance is created by the application factory and handed to each
service; nothing in the service layer opens connections on its own.

``init_db`` applies the versioned migrations stored in ``MIGRATIONS``
and then runs the additive column checks that upgrade databases
created before a column existed.  Both steps are idempotent.
"""

import logging
import os
import sqlite3
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Dict, Iterator, List, Optional, Sequence

from .config import settings
from .exceptions import InternalError

logger = logging.getLogger(__name__)

Row = Dict[str, Any]


def resolve_database_path(database_url: str) -> str:
    """Compute the path to the SQLite database file.

    Absolute paths are used as is; relative paths are resolved against
    the project root (the directory holding the ``chapter_registry_api``
    package).
    """
    if os.path.isabs(database_url):
        return database_url
    base_dir = Path(__file__).resolve().parent.parent.parent.parent
    return str((base_dir / database_url).resolve())


class Database:
    """Executes parameterized SQL against a SQLite file."""

    def __init__(self, path: Optional[str] = None) -> None:
        self.path = resolve_database_path(path or settings.database_url)

    def connect(self) -> sqlite3.Connection:
        """Open a new connection with ``Row`` access and foreign keys on.

        Foreign key support is disabled by default in SQLite and must be
        turned on per connection, otherwise the ``REFERENCES`` clauses
        on ``memberships`` are silently ignored.
        """
        conn = sqlite3.connect(self.path)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA foreign_keys = ON")
        return conn

    @contextmanager
    def cursor(self) -> Iterator[sqlite3.Cursor]:
        """Yield a cursor; commit on success, roll back on error, always close."""
        conn = self.connect()
        try:
            yield conn.cursor()
            conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            conn.close()

    @contextmanager
    def _guard(self, sql: str) -> Iterator[None]:
        # Integrity errors carry meaning for the caller (uniqueness races);
        # every other store failure is reported as an internal error.
        try:
            yield
        except sqlite3.IntegrityError:
            raise
        except sqlite3.Error as exc:
            logger.error("Statement failed: %s (%s)", " ".join(sql.split()), exc)
            raise InternalError("Database error") from exc

    def fetch_all(self, sql: str, params: Sequence[Any] = ()) -> List[Row]:
        with self._guard(sql), self.cursor() as cursor:
            rows = cursor.execute(sql, tuple(params)).fetchall()
            return [dict(row) for row in rows]

    def fetch_one(self, sql: str, params: Sequence[Any] = ()) -> Optional[Row]:
        with self._guard(sql), self.cursor() as cursor:
            row = cursor.execute(sql, tuple(params)).fetchone()
            return dict(row) if row is not None else None

    def execute(self, sql: str, params: Sequence[Any] = ()) -> Optional[int]:
        """Run a single write statement and return ``lastrowid``."""
        with self._guard(sql), self.cursor() as cursor:
            cursor.execute(sql, tuple(params))
            return cursor.lastrowid

    def execute_script(self, sql: str) -> None:
        with self._guard(sql), self.cursor() as cursor:
            cursor.executescript(sql)


# Each entry is (version, script).  Append new migrations with an
# incremented version number; never edit an applied one.
MIGRATIONS: List[tuple[int, str]] = [
    # Migration 1: initial schema
    (
        1,
        """
        CREATE TABLE IF NOT EXISTS users (
            ID INTEGER PRIMARY KEY AUTOINCREMENT,
            User_ID TEXT NOT NULL UNIQUE,
            GoogleUserId TEXT NOT NULL,
            Email TEXT NOT NULL,
            Role TEXT NOT NULL,
            Status TEXT NOT NULL DEFAULT 'pending',
            CreatedAt DATETIME NOT NULL,
            UpdatedAt DATETIME NOT NULL
        );

        CREATE TABLE IF NOT EXISTS chapters (
            ID INTEGER PRIMARY KEY AUTOINCREMENT,
            Chapter_Id TEXT NOT NULL UNIQUE,
            Chapter_Name TEXT NOT NULL,
            Chapter_Description TEXT NOT NULL,
            Created_By TEXT NOT NULL,
            Status TEXT NOT NULL DEFAULT 'pending',
            CreatedAt DATETIME NOT NULL,
            UpdatedAt DATETIME NOT NULL
        );

        CREATE TABLE IF NOT EXISTS memberships (
            ID INTEGER PRIMARY KEY AUTOINCREMENT,
            User_ID TEXT NOT NULL,
            Chapter_Id TEXT NOT NULL,
            Chapter_Rank TEXT NOT NULL DEFAULT 'member',
            Chapter_Status TEXT NOT NULL DEFAULT 'pending',
            Warrior_Name TEXT NOT NULL,
            CreatedAt DATETIME NOT NULL,
            UpdatedAt DATETIME NOT NULL,
            FOREIGN KEY (User_ID) REFERENCES users(User_ID),
            FOREIGN KEY (Chapter_Id) REFERENCES chapters(Chapter_Id),
            UNIQUE (User_ID, Chapter_Id)
        );
        """,
    ),
    # Migration 2: lookup indices for membership listings
    (
        2,
        """
        CREATE INDEX IF NOT EXISTS idx_memberships_user_id ON memberships(User_ID);
        CREATE INDEX IF NOT EXISTS idx_memberships_chapter_id ON memberships(Chapter_Id);
        """,
    ),
    # Migration 3: store-level uniqueness for the checks done by the
    # services, so two concurrent creations cannot both succeed.
    (
        3,
        """
        CREATE UNIQUE INDEX IF NOT EXISTS users_email_unique ON users(Email);
        CREATE UNIQUE INDEX IF NOT EXISTS users_google_user_id_unique ON users(GoogleUserId);
        CREATE UNIQUE INDEX IF NOT EXISTS chapters_name_lower_unique ON chapters(LOWER(Chapter_Name));
        CREATE UNIQUE INDEX IF NOT EXISTS memberships_warrior_name_lower_unique
            ON memberships(LOWER(Warrior_Name));
        """,
    ),
]


def _column_names(cursor: sqlite3.Cursor, table: str) -> set[str]:
    return {row["name"] for row in cursor.execute(f"PRAGMA table_info({table})").fetchall()}


def _upgrade_columns(cursor: sqlite3.Cursor) -> None:
    """Add columns missing from tables created by older releases."""
    user_columns = _column_names(cursor, "users")
    if "User_ID" not in user_columns:
        cursor.execute("ALTER TABLE users ADD COLUMN User_ID TEXT")
        # SQLite cannot add NOT NULL/UNIQUE to an existing column; the
        # unique index gives the same guarantee.  It must exist before
        # any UPDATE on users, because memberships.User_ID references
        # this column and foreign keys are on.
        cursor.execute(
            "CREATE UNIQUE INDEX IF NOT EXISTS users_user_id_unique ON users(User_ID)"
        )
        rows = cursor.execute("SELECT ID FROM users WHERE User_ID IS NULL").fetchall()
        for row in rows:
            cursor.execute(
                "UPDATE users SET User_ID = ? WHERE ID = ?",
                (str(uuid.uuid4()), row["ID"]),
            )
        logger.info("Added User_ID column to users table (%d rows back-filled)", len(rows))

    if "Status" not in user_columns:
        cursor.execute(
            "ALTER TABLE users ADD COLUMN Status TEXT NOT NULL DEFAULT 'pending'"
        )
        logger.info("Added Status column to users table")

    if "Status" not in _column_names(cursor, "chapters"):
        cursor.execute(
            "ALTER TABLE chapters ADD COLUMN Status TEXT NOT NULL DEFAULT 'pending'"
        )
        logger.info("Added Status column to chapters table")


@contextmanager
def _transaction(conn: sqlite3.Connection) -> Iterator[sqlite3.Cursor]:
    # Requires ``conn`` in autocommit mode (isolation_level None) so the
    # explicit BEGIN also covers DDL statements.
    cursor = conn.cursor()
    cursor.execute("BEGIN")
    try:
        yield cursor
    except Exception:
        cursor.execute("ROLLBACK")
        raise
    cursor.execute("COMMIT")


def init_db(database: Database) -> None:
    """Initialise the database and apply pending migrations.

    Creates the ``migrations`` table if it does not exist, applies any
    migration newer than the recorded version, then runs the additive
    column checks.  Each migration and its version row are committed
    together, so a failing migration leaves no partial schema behind.
    Safe to call on every start.
    """
    conn = database.connect()
    conn.isolation_level = None
    try:
        conn.execute("CREATE TABLE IF NOT EXISTS migrations (version INTEGER PRIMARY KEY)")
        row = conn.execute("SELECT MAX(version) AS version FROM migrations").fetchone()
        current_version = row["version"] if row and row["version"] is not None else 0

        for version, sql in MIGRATIONS:
            if version <= current_version:
                continue
            with _transaction(conn) as cursor:
                for statement in _split_statements(sql):
                    cursor.execute(statement)
                cursor.execute("INSERT INTO migrations (version) VALUES (?)", (version,))
            logger.info("Applied migration %s", version)
            current_version = version

        with _transaction(conn) as cursor:
            _upgrade_columns(cursor)
    finally:
        conn.close()
    logger.info("Database tables initialized successfully at %s", database.path)


def _split_statements(script: str) -> List[str]:
    # executescript() commits before running, which would end the
    # migration's transaction; statements are executed one by one.
    return [statement.strip() for statement in script.split(";") if statement.strip()]
