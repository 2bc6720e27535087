"""
Preview component port definitions.
"""

from __future__ import annotations

from collections.abc import Iterable
from typing import Protocol
from uuid import UUID

from src.domain.entities import Author, ContentBlock, Post


class PostQueryPort(Protocol):
    """Listing queries. Returned posts carry metadata only (no blocks)."""

    def find_published_posts(self, search: str | None = None) -> list[Post]:
        """Published posts, newest first. ``search`` matches title or author name."""
        ...

    def find_posts_by_author(self, author_id: UUID, search: str | None = None) -> list[Post]:
        """All of one author's posts, newest first."""
        ...

    def find_first_paragraphs(self, post_ids: Iterable[UUID]) -> dict[UUID, ContentBlock]:
        """Lowest-ordered PARAGRAPH block per post; posts without one are absent."""
        ...


class AuthorRepoPort(Protocol):
    def get_many(self, author_ids: Iterable[UUID]) -> dict[UUID, Author]:
        """Known authors keyed by id."""
        ...
