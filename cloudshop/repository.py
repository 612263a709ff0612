"""SQLite-backed storage for users, listings and categories."""

from __future__ import annotations

import logging
import os
import sqlite3
from datetime import datetime
from pathlib import Path

from cloudshop.domain import Category, Listing, User, go_layout_to_strftime

logger = logging.getLogger(__name__)


class RepositoryError(Exception):
    """Raised when a storage operation fails or finds nothing."""


class CategoryNotFoundError(RepositoryError, LookupError):
    """Raised when a category is not stored."""

    def __init__(self, message: str = "category not found") -> None:
        super().__init__(message)


_SCHEMA = (
    (
        "users table",
        """
        CREATE TABLE IF NOT EXISTS users (
            username TEXT PRIMARY KEY
        )
        """,
    ),
    (
        "listings table",
        """
        CREATE TABLE IF NOT EXISTS listings (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            title TEXT NOT NULL,
            description TEXT NOT NULL,
            price REAL NOT NULL,
            username TEXT NOT NULL,
            category TEXT NOT NULL,
            created_at TIMESTAMP NOT NULL,
            FOREIGN KEY (username) REFERENCES users(username)
        )
        """,
    ),
    (
        "categories table",
        """
        CREATE TABLE IF NOT EXISTS categories (
            category TEXT PRIMARY KEY,
            count INTEGER NOT NULL
        )
        """,
    ),
    ("category index", "CREATE INDEX IF NOT EXISTS idx_listings_category ON listings(category)"),
    ("username index", "CREATE INDEX IF NOT EXISTS idx_listings_username ON listings(username)"),
    ("category count index", "CREATE INDEX IF NOT EXISTS idx_categories_count ON categories(count)"),
)


def init_db(db_path: str | os.PathLike[str]) -> sqlite3.Connection:
    """Create a fresh database at db_path, replacing any existing file."""
    path = Path(db_path)
    if path.exists():
        path.unlink()
    try:
        path.parent.mkdir(parents=True, exist_ok=True)
    except OSError as exc:
        raise RepositoryError(f"failed to create database directory: {exc}") from exc

    try:
        conn = sqlite3.connect(str(path), isolation_level=None)
    except sqlite3.Error as exc:
        raise RepositoryError(f"failed to open database: {exc}") from exc

    try:
        for description, statement in _SCHEMA:
            try:
                conn.execute(statement)
            except sqlite3.Error as exc:
                raise RepositoryError(f"failed to create {description}: {exc}") from exc
    except RepositoryError as exc:
        conn.close()
        raise RepositoryError(f"failed to create tables: {exc}") from exc

    logger.info("Database tables created successfully")
    return conn


def _parse_timestamp(value: object) -> datetime | None:
    if isinstance(value, datetime):
        return value
    try:
        return datetime.fromisoformat(str(value))
    except ValueError:
        return None


def _output_format() -> str:
    return go_layout_to_strftime(os.environ.get("OUTPUT_TIME_FORMAT", ""))


class UserRepository:
    """Stores registered users."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def create(self, user: User) -> None:
        try:
            self._conn.execute("INSERT INTO users (username) VALUES (?)", (user.username,))
        except sqlite3.Error as exc:
            raise RepositoryError("Error - user already existing") from exc

    def get(self, username: str) -> User:
        row = self._conn.execute(
            "SELECT username FROM users WHERE username = ?", (username,)
        ).fetchone()
        if row is None:
            raise RepositoryError("Error - user not found")
        return User(username=row[0])

    def remove(self, user: User) -> bool:
        """Delete a user; return whether the statement succeeded."""
        try:
            self._conn.execute("DELETE FROM users WHERE username = ?", (user.username,))
        except sqlite3.Error:
            return False
        return True


class CategoryRepository:
    """Keeps a per-category listing count for fast lookups."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn

    def create(self, category: Category) -> None:
        """Insert a category, or bump its count if it already exists."""
        try:
            self._conn.execute(
                """
                INSERT INTO categories (category, count)
                VALUES (?, ?)
                ON CONFLICT(category) DO UPDATE SET count = count + 1
                """,
                (category.name, category.count),
            )
        except sqlite3.Error as exc:
            raise RepositoryError(f"failed to create category: {exc}") from exc

    def get(self, name: str) -> Category:
        try:
            row = self._conn.execute(
                "SELECT category, count FROM categories WHERE category = ?", (name,)
            ).fetchone()
        except sqlite3.Error as exc:
            raise RepositoryError(f"[ERROR] failed to get category: {exc}") from exc
        if row is None:
            raise CategoryNotFoundError()
        return Category(name=row[0], count=row[1])

    def increment(self, name: str) -> None:
        try:
            self._conn.execute(
                "UPDATE categories SET count = count + 1 WHERE category = ?", (name,)
            )
        except sqlite3.Error as exc:
            raise RepositoryError(f"failed to increment category count: {exc}") from exc

    def decrement(self, name: str) -> None:
        try:
            self._conn.execute(
                "UPDATE categories SET count = count - 1 WHERE category = ?", (name,)
            )
        except sqlite3.Error as exc:
            raise RepositoryError(f"failed to decrement category count: {exc}") from exc

    def remove(self, name: str) -> None:
        try:
            self._conn.execute("DELETE FROM categories WHERE category = ?", (name,))
        except sqlite3.Error as exc:
            raise RepositoryError(f"failed to remove category: {exc}") from exc

    def top_categories(self) -> list[str]:
        """Return every category sharing the highest count, in name order."""
        try:
            rows = self._conn.execute(
                "SELECT category FROM categories "
                "WHERE count = (SELECT MAX(count) FROM categories) "
                "ORDER BY category ASC"
            ).fetchall()
        except sqlite3.Error as exc:
            raise RepositoryError(f"Cannot get top category, err: {exc}") from exc
        if not rows:
            raise RepositoryError("Have no category")
        return [row[0] for row in rows]


class ListingRepository:
    """Stores listings; public ids are row ids shifted by start_idx."""

    _COLUMNS = "title, description, price, created_at, username, category"

    def __init__(self, conn: sqlite3.Connection, start_idx: int = 0) -> None:
        self._conn = conn
        self._start_idx = start_idx

    def create(self, listing: Listing) -> int:
        """Store a listing and return its public id."""
        try:
            cursor = self._conn.execute(
                "INSERT INTO listings (username, title, description, price, category, created_at) "
                "VALUES (?, ?, ?, ?, ?, ?)",
                (
                    listing.username,
                    listing.title,
                    listing.description,
                    listing.price,
                    listing.category,
                    listing.creation_time,
                ),
            )
        except sqlite3.Error as exc:
            raise RepositoryError(str(exc)) from exc
        return cursor.lastrowid + self._start_idx

    def owner(self, listing_id: int) -> str:
        row = self._conn.execute(
            "SELECT username FROM listings WHERE id = ?", (listing_id - self._start_idx,)
        ).fetchone()
        if row is None:
            raise RepositoryError("listing not found")
        return row[0]

    def remove(self, username: str, listing_id: int) -> None:
        """Delete a listing owned by username."""
        try:
            cursor = self._conn.execute(
                "DELETE FROM listings WHERE id = ? AND username = ?",
                (listing_id - self._start_idx, username),
            )
        except sqlite3.Error as exc:
            raise RepositoryError(str(exc)) from exc
        if cursor.rowcount == 0:
            raise RepositoryError("listing does not exist")

    def _listing_from_row(self, row: tuple, created: datetime) -> Listing:
        title, description, price, _, username, category = row
        return Listing(
            title=title,
            description=description,
            price=int(price),
            username=username,
            creation_time=created.strftime(_output_format()),
            category=category,
        )

    def get(self, listing_id: int) -> Listing:
        try:
            row = self._conn.execute(
                f"SELECT {self._COLUMNS} FROM listings WHERE id = ?",
                (listing_id - self._start_idx,),
            ).fetchone()
        except sqlite3.Error as exc:
            raise RepositoryError(f"[ERROR] - unknown error, err: {exc}") from exc
        if row is None:
            raise RepositoryError("listing not found")
        created = _parse_timestamp(row[3])
        if created is None:
            raise RepositoryError(f"[ERROR] - unknown error, err: bad timestamp {row[3]!r}")
        return self._listing_from_row(row, created)

    def by_category(self, category: str) -> list[Listing]:
        """Return the category's listings, newest first."""
        try:
            rows = self._conn.execute(
                f"SELECT {self._COLUMNS} FROM listings WHERE category = ? "
                "ORDER BY created_at DESC",
                (category,),
            ).fetchall()
        except sqlite3.Error as exc:
            raise RepositoryError(f"[ERROR] {exc}") from exc
        if not rows:
            raise RepositoryError("Error - category not found")
        return [
            self._listing_from_row(row, _parse_timestamp(row[3]) or datetime(1, 1, 1))
            for row in rows
        ]