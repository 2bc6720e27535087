import json
import sqlite3
from collections.abc import Iterable
from datetime import datetime
from typing import Any
from uuid import UUID

from src.domain.entities import Author, BlockType, ContentBlock, Post
from src.domain.errors import StorageFailureError

# SQLite's default host-parameter limit is 999 on older builds
_IN_CHUNK = 500


# Helper to convert sqlite rows to dicts
def dict_factory(cursor: sqlite3.Cursor, row: Any) -> dict[str, Any]:
    d = {}
    for idx, col in enumerate(cursor.description):
        d[col[0]] = row[idx]
    return d


def _casefold(value: str | None) -> str | None:
    return value.casefold() if value is not None else None


def _connect(db_path: str) -> sqlite3.Connection:
    conn = sqlite3.connect(db_path)
    conn.row_factory = dict_factory
    conn.execute("PRAGMA foreign_keys = ON;")
    # SQLite's lower()/LIKE only fold ASCII
    conn.create_function("py_casefold", 1, _casefold, deterministic=True)
    return conn


def _open_db(db_path: str) -> sqlite3.Connection:
    try:
        return _connect(db_path)
    except sqlite3.Error as e:
        raise StorageFailureError(f"Could not open database: {e}") from e


def _chunks(values: list[str], size: int = _IN_CHUNK) -> Iterable[list[str]]:
    for start in range(0, len(values), size):
        yield values[start : start + size]


class SQLitePostRepo:
    def __init__(self, db_path: str):
        self.db_path = db_path

    def _open(self) -> sqlite3.Connection:
        return _open_db(self.db_path)

    # --- Writes ---

    def create_post_with_blocks(self, post: Post) -> UUID:
        """Insert the post row and every block in one transaction."""
        conn = self._open()

        try:
            conn.execute(
                """
                INSERT INTO posts (
                    id, title, cover_image_url, published, author_id, created_at
                ) VALUES (?, ?, ?, ?, ?, ?)
            """,
                (
                    str(post.id),
                    post.title,
                    post.cover_image_url,
                    1 if post.published else 0,
                    str(post.author_id),
                    post.created_at.isoformat(),
                ),
            )
            for block in post.blocks:
                self._insert_block(conn, post.id, block)

            conn.commit()
            return post.id
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageFailureError(f"Could not store post {post.id}: {e}") from e
        finally:
            conn.close()

    def _insert_block(self, conn: sqlite3.Connection, post_id: UUID, block: ContentBlock) -> None:
        conn.execute(
            """
            INSERT INTO content_blocks (id, post_id, "order", block_type, data_json)
            VALUES (?, ?, ?, ?, ?)
        """,
            (block.id, str(post_id), block.order, block.block_type, json.dumps(block.data_json)),
        )

    def delete_post(self, post_id: UUID) -> None:
        conn = self._open()

        try:
            # Blocks first, for databases created without ON DELETE CASCADE
            conn.execute("DELETE FROM content_blocks WHERE post_id = ?", (str(post_id),))
            conn.execute("DELETE FROM posts WHERE id = ?", (str(post_id),))
            conn.commit()
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageFailureError(f"Could not delete post {post_id}: {e}") from e
        finally:
            conn.close()

    # --- Reads ---

    def _row_to_post(self, row: dict[str, Any], blocks: list[ContentBlock] | None = None) -> Post:
        return Post(
            id=UUID(row["id"]),
            title=row["title"],
            cover_image_url=row["cover_image_url"],
            published=bool(row["published"]),
            author_id=UUID(row["author_id"]),
            created_at=datetime.fromisoformat(row["created_at"]),
            blocks=blocks or [],
        )

    def _row_to_block(self, row: dict[str, Any]) -> ContentBlock:
        try:
            data = json.loads(row["data_json"])
        except (TypeError, ValueError):
            # Corrupt payloads are left for the render pipeline to skip
            data = {}
        return ContentBlock(
            id=str(row["id"]),
            order=row["order"],
            block_type=row["block_type"],
            data_json=data if isinstance(data, dict) else {},
        )

    def find_post_by_id(self, post_id: UUID) -> Post | None:
        conn = self._open()
        try:
            row = conn.execute("SELECT * FROM posts WHERE id = ?", (str(post_id),)).fetchone()
            if not row:
                return None

            block_rows = conn.execute(
                'SELECT * FROM content_blocks WHERE post_id = ? ORDER BY "order" ASC',
                (str(post_id),),
            ).fetchall()

            return self._row_to_post(row, [self._row_to_block(b) for b in block_rows])
        except sqlite3.Error as e:
            raise StorageFailureError(f"Could not load post {post_id}: {e}") from e
        finally:
            conn.close()

    def _find_posts(self, where: list[str], params: list[Any], search: str | None) -> list[Post]:
        query = "SELECT p.* FROM posts p LEFT JOIN authors a ON a.id = p.author_id WHERE 1=1"
        for clause in where:
            query += f" AND {clause}"

        if search:
            query += (
                " AND (instr(py_casefold(p.title), ?) > 0"
                " OR instr(py_casefold(coalesce(a.display_name, '')), ?) > 0)"
            )
            needle = search.casefold()
            params = [*params, needle, needle]

        query += " ORDER BY p.created_at DESC, p.rowid DESC"

        conn = self._open()
        try:
            rows = conn.execute(query, params).fetchall()
            return [self._row_to_post(r) for r in rows]
        except sqlite3.Error as e:
            raise StorageFailureError(f"Could not list posts: {e}") from e
        finally:
            conn.close()

    def find_published_posts(self, search: str | None = None) -> list[Post]:
        """Published posts (metadata only), newest first."""
        return self._find_posts(["p.published = 1"], [], search)

    def find_posts_by_author(self, author_id: UUID, search: str | None = None) -> list[Post]:
        """Every post by one author (metadata only), newest first."""
        return self._find_posts(["p.author_id = ?"], [str(author_id)], search)

    def find_first_paragraphs(self, post_ids: Iterable[UUID]) -> dict[UUID, ContentBlock]:
        ids = [str(pid) for pid in post_ids]
        if not ids:
            return {}

        result: dict[UUID, ContentBlock] = {}
        conn = self._open()
        try:
            for chunk in _chunks(ids):
                placeholders = ",".join("?" for _ in chunk)
                rows = conn.execute(
                    f"""
                    SELECT b.* FROM content_blocks b
                    WHERE b.block_type = ?
                      AND b.post_id IN ({placeholders})
                      AND b."order" = (
                          SELECT MIN(b2."order") FROM content_blocks b2
                          WHERE b2.post_id = b.post_id AND b2.block_type = ?
                      )
                """,
                    [BlockType.PARAGRAPH.value, *chunk, BlockType.PARAGRAPH.value],
                ).fetchall()
                for row in rows:
                    result[UUID(row["post_id"])] = self._row_to_block(row)
            return result
        except sqlite3.Error as e:
            raise StorageFailureError(f"Could not load excerpts: {e}") from e
        finally:
            conn.close()

    def count_posts(self) -> int:
        conn = self._open()
        try:
            row = conn.execute("SELECT COUNT(*) AS n FROM posts").fetchone()
            return int(row["n"])
        except sqlite3.Error as e:
            raise StorageFailureError(f"Could not count posts: {e}") from e
        finally:
            conn.close()


class SQLiteAuthorRepo:
    """Local mirror of author identity (display name, avatar) for listings."""

    def __init__(self, db_path: str):
        self.db_path = db_path

    def _open(self) -> sqlite3.Connection:
        return _open_db(self.db_path)

    def _row_to_author(self, row: dict[str, Any]) -> Author:
        return Author(
            id=UUID(row["id"]),
            display_name=row["display_name"] or "",
            avatar_ref=row["avatar_ref"],
        )

    def save(self, author: Author) -> Author:
        conn = self._open()
        try:
            conn.execute(
                """
                INSERT INTO authors (id, display_name, avatar_ref) VALUES (?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    display_name=excluded.display_name,
                    avatar_ref=excluded.avatar_ref
            """,
                (str(author.id), author.display_name, author.avatar_ref),
            )
            conn.commit()
            return author
        except sqlite3.Error as e:
            conn.rollback()
            raise StorageFailureError(f"Could not save author {author.id}: {e}") from e
        finally:
            conn.close()

    def get_by_id(self, author_id: UUID) -> Author | None:
        conn = self._open()
        try:
            row = conn.execute(
                "SELECT * FROM authors WHERE id = ?", (str(author_id),)
            ).fetchone()
            return self._row_to_author(row) if row else None
        except sqlite3.Error as e:
            raise StorageFailureError(f"Could not load author {author_id}: {e}") from e
        finally:
            conn.close()

    def get_many(self, author_ids: Iterable[UUID]) -> dict[UUID, Author]:
        ids = [str(a) for a in author_ids]
        if not ids:
            return {}

        conn = self._open()
        try:
            authors: dict[UUID, Author] = {}
            for chunk in _chunks(ids):
                placeholders = ",".join("?" for _ in chunk)
                rows = conn.execute(
                    f"SELECT * FROM authors WHERE id IN ({placeholders})", chunk
                ).fetchall()
                for row in rows:
                    author = self._row_to_author(row)
                    authors[author.id] = author
            return authors
        except sqlite3.Error as e:
            raise StorageFailureError(f"Could not load authors: {e}") from e
        finally:
            conn.close()
