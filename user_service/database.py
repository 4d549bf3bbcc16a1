"""SQLite-backed persistence for users."""
from __future__ import annotations

import sqlite3
from contextlib import contextmanager
from datetime import datetime, timezone
from pathlib import Path
from typing import Iterator, List, Optional

from .models import User


def _ensure_directory(path: Path) -> None:
    path.parent.mkdir(parents=True, exist_ok=True)


def resolve_database_path(env_value: Optional[str]) -> Path:
    """Resolve the on-disk path for the application database."""

    if env_value:
        return Path(env_value).expanduser().resolve(strict=False)
    base_dir = Path(__file__).resolve().parent.parent / "data"
    return (base_dir / "users.sqlite3").resolve(strict=False)


def _current_timestamp() -> datetime:
    return datetime.now(timezone.utc)


def _serialize_datetime(value: datetime) -> str:
    return value.isoformat()


def _parse_datetime(value: str) -> datetime:
    return datetime.fromisoformat(value)


# SQLite stores integers as signed 64-bit values.
SQLITE_MIN_INTEGER = -(2**63)
SQLITE_MAX_INTEGER = 2**63 - 1


def _fits_sqlite_integer(value: int) -> bool:
    return SQLITE_MIN_INTEGER <= value <= SQLITE_MAX_INTEGER


class UserRepository:
    """Key-based access to the ``users`` table over a single connection."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def find_by_id(self, user_id: int) -> Optional[User]:
        if not _fits_sqlite_integer(user_id):
            return None
        row = self._conn.execute("SELECT * FROM users WHERE id = ?", (user_id,)).fetchone()
        if row is None:
            return None
        return self._row_to_user(row)

    def find_all(self) -> List[User]:
        rows = self._conn.execute("SELECT * FROM users ORDER BY id").fetchall()
        return [self._row_to_user(row) for row in rows]

    def save(self, user: User) -> User:
        """Insert ``user`` when it has no id yet, otherwise update it.

        Inserts assign ``id`` and ``created_at``. Updates only touch the
        name, email and age columns.
        """

        if user.id is None:
            created_at = _current_timestamp()
            cursor = self._conn.execute(
                "INSERT INTO users (name, email, age, created_at) VALUES (?, ?, ?, ?)",
                (user.name, user.email, user.age, _serialize_datetime(created_at)),
            )
            user.id = int(cursor.lastrowid)
            user.created_at = created_at
            return user

        cursor = self._conn.execute(
            "UPDATE users SET name = ?, email = ?, age = ? WHERE id = ?",
            (user.name, user.email, user.age, user.id),
        )
        if cursor.rowcount == 0:
            raise RuntimeError(f"User {user.id} vanished before it could be updated")

        refreshed = self.find_by_id(user.id)
        if refreshed is None:  # pragma: no cover - guarded by the rowcount check
            raise RuntimeError(f"Failed to load user {user.id} after update")
        return refreshed

    def delete_by_id(self, user_id: int) -> None:
        if not _fits_sqlite_integer(user_id):
            return
        self._conn.execute("DELETE FROM users WHERE id = ?", (user_id,))

    @staticmethod
    def _row_to_user(row: sqlite3.Row) -> User:
        return User(
            id=int(row["id"]),
            name=str(row["name"]),
            email=str(row["email"]),
            age=int(row["age"]),
            created_at=_parse_datetime(str(row["created_at"])),
        )


class Database:
    """Simple wrapper around SQLite for persisting users."""

    def __init__(self, path: Path) -> None:
        _ensure_directory(path)
        self._path = path

    @property
    def path(self) -> Path:
        return self._path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._path, check_same_thread=False)
        conn.row_factory = sqlite3.Row
        return conn

    def initialize(self) -> None:
        """Create the required tables if they do not already exist."""

        with self._connect() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS users (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    name TEXT NOT NULL,
                    email TEXT NOT NULL,
                    age INTEGER NOT NULL CHECK (age > 0),
                    created_at TEXT NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_users_email ON users(email);
                """
            )

    @contextmanager
    def unit_of_work(self) -> Iterator[UserRepository]:
        """Yield a repository whose changes commit together.

        The transaction commits when the block exits normally and rolls back
        if it raises.
        """

        conn = self._connect()
        try:
            with conn:
                yield UserRepository(conn)
        finally:
            conn.close()


__all__ = [
    "SQLITE_MAX_INTEGER",
    "SQLITE_MIN_INTEGER",
    "Database",
    "UserRepository",
    "resolve_database_path",
]
