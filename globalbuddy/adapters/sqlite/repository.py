"""
SQLite Repository - Community and post storage.

Features:
- Async operations via aiosqlite
- Newest-first listings (the order ranking ties fall back to)
- JSON-encoded tag lists
"""

from __future__ import annotations

import json
import logging
import uuid
from pathlib import Path
from typing import Any

import aiosqlite

from globalbuddy.config.errors import StorageError

logger = logging.getLogger(__name__)

__all__ = ["SQLiteRepository"]

# Rows inserted within the same second keep insertion order, newest first
_NEWEST_FIRST = "ORDER BY created_at DESC, rowid DESC"


def _new_id() -> str:
    return uuid.uuid4().hex


def _row_to_dict(row: aiosqlite.Row) -> dict[str, Any]:
    data = dict(row)
    if "tags" in data:
        data["tags"] = json.loads(data["tags"]) if data["tags"] else []
    return data


class SQLiteRepository:
    """
    SQLite repository for communities and posts.

    Example:
        >>> repo = SQLiteRepository("data/globalbuddy.db")
        >>> await repo.initialize()
        >>> post_id = await repo.insert_post(community_id, "lihua", "曼谷租房攻略", "...")
        >>> recent = await repo.list_recent_posts(50)
    """

    def __init__(self, db_path: str | Path) -> None:
        """
        Initialize repository.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self._connection: aiosqlite.Connection | None = None

    async def _get_connection(self) -> aiosqlite.Connection:
        """Get or create database connection."""
        if self._connection is None:
            try:
                self._connection = await aiosqlite.connect(str(self.db_path))
            except (aiosqlite.Error, OSError) as e:
                raise StorageError(
                    f"Cannot open database: {self.db_path}",
                    details={"reason": str(e)},
                ) from e
            self._connection.row_factory = aiosqlite.Row
        return self._connection

    async def initialize(self) -> None:
        """Initialize database schema."""
        conn = await self._get_connection()

        await conn.executescript("""
            -- Communities
            CREATE TABLE IF NOT EXISTS communities (
                id TEXT PRIMARY KEY,
                title TEXT NOT NULL,
                description TEXT,
                country TEXT NOT NULL,
                language TEXT,
                tags TEXT,
                created_by TEXT,
                created_at TEXT DEFAULT CURRENT_TIMESTAMP
            );

            -- Posts
            CREATE TABLE IF NOT EXISTS posts (
                id TEXT PRIMARY KEY,
                community_id TEXT NOT NULL,
                author_id TEXT NOT NULL,
                title TEXT NOT NULL,
                body TEXT NOT NULL,
                tags TEXT,
                category TEXT,
                created_at TEXT DEFAULT CURRENT_TIMESTAMP,
                updated_at TEXT DEFAULT CURRENT_TIMESTAMP,
                FOREIGN KEY (community_id) REFERENCES communities(id)
            );

            -- Indexes
            CREATE INDEX IF NOT EXISTS idx_posts_created_at ON posts(created_at);
            CREATE INDEX IF NOT EXISTS idx_posts_community ON posts(community_id);
            CREATE INDEX IF NOT EXISTS idx_communities_country ON communities(country);
        """)

        await conn.commit()
        logger.info("Database initialized: %s", self.db_path)

    async def insert_community(
        self,
        title: str,
        country: str,
        description: str | None = None,
        language: str | None = None,
        tags: list[str] | None = None,
        created_by: str | None = None,
    ) -> str:
        """
        Insert a community.

        Returns:
            Community ID
        """
        conn = await self._get_connection()
        community_id = _new_id()

        await conn.execute(
            """
            INSERT INTO communities (id, title, description, country, language, tags, created_by)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                community_id,
                title,
                description or "",
                country,
                language,
                json.dumps(tags or [], ensure_ascii=False),
                created_by,
            ),
        )

        await conn.commit()
        return community_id

    async def insert_post(
        self,
        community_id: str,
        author_id: str,
        title: str,
        body: str,
        tags: list[str] | None = None,
        category: str | None = None,
    ) -> str:
        """
        Insert a post.

        Returns:
            Post ID
        """
        conn = await self._get_connection()
        post_id = _new_id()

        await conn.execute(
            """
            INSERT INTO posts (id, community_id, author_id, title, body, tags, category)
            VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                post_id,
                community_id,
                author_id,
                title,
                body,
                json.dumps(tags or [], ensure_ascii=False),
                category,
            ),
        )

        await conn.commit()
        return post_id

    async def get_post(self, post_id: str) -> dict[str, Any] | None:
        """Get post by ID."""
        conn = await self._get_connection()

        cursor = await conn.execute("SELECT * FROM posts WHERE id = ?", (post_id,))
        row = await cursor.fetchone()

        if row:
            return _row_to_dict(row)
        return None

    async def get_community(self, community_id: str) -> dict[str, Any] | None:
        """Get community by ID."""
        conn = await self._get_connection()

        cursor = await conn.execute(
            "SELECT * FROM communities WHERE id = ?", (community_id,)
        )
        row = await cursor.fetchone()

        if row:
            return _row_to_dict(row)
        return None

    async def list_posts(self, limit: int | None = None) -> list[dict[str, Any]]:
        """
        List posts, newest first.

        Args:
            limit: Maximum posts (all when None)
        """
        conn = await self._get_connection()

        if limit is None:
            cursor = await conn.execute(f"SELECT * FROM posts {_NEWEST_FIRST}")
        else:
            cursor = await conn.execute(
                f"SELECT * FROM posts {_NEWEST_FIRST} LIMIT ?", (limit,)
            )

        rows = await cursor.fetchall()
        return [_row_to_dict(row) for row in rows]

    async def list_recent_posts(self, limit: int) -> list[dict[str, Any]]:
        """The most recently created posts, newest first."""
        return await self.list_posts(limit=limit)

    async def list_communities(
        self,
        country: str | None = None,
        language: str | None = None,
    ) -> list[dict[str, Any]]:
        """
        List communities, newest first.

        Args:
            country: Only communities in this country
            language: Only communities in this language or without one
        """
        conn = await self._get_connection()

        conditions = []
        params: list[Any] = []
        if country:
            conditions.append("country = ?")
            params.append(country)
        if language:
            conditions.append("(language = ? OR language IS NULL)")
            params.append(language)

        sql = "SELECT * FROM communities"
        if conditions:
            sql += " WHERE " + " AND ".join(conditions)
        sql += f" {_NEWEST_FIRST}"

        cursor = await conn.execute(sql, params)
        rows = await cursor.fetchall()
        return [_row_to_dict(row) for row in rows]

    async def list_community_posts(self, community_id: str) -> list[dict[str, Any]]:
        """Posts of one community, newest first."""
        conn = await self._get_connection()

        cursor = await conn.execute(
            f"SELECT * FROM posts WHERE community_id = ? {_NEWEST_FIRST}",
            (community_id,),
        )
        rows = await cursor.fetchall()
        return [_row_to_dict(row) for row in rows]

    async def count_posts(self) -> int:
        """Get total post count."""
        conn = await self._get_connection()
        cursor = await conn.execute("SELECT COUNT(*) FROM posts")
        row = await cursor.fetchone()
        return row[0] if row else 0

    async def clear(self) -> None:
        """Delete all posts and communities."""
        conn = await self._get_connection()
        await conn.executescript("DELETE FROM posts; DELETE FROM communities;")
        await conn.commit()

    async def close(self) -> None:
        """Close database connection."""
        if self._connection:
            await self._connection.close()
            self._connection = None
