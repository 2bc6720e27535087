"""
Render component port definitions.
"""

from __future__ import annotations

from typing import Protocol
from uuid import UUID

from src.domain.entities import Post


class PostRepoPort(Protocol):
    """Read access to stored posts."""

    def find_post_by_id(self, post_id: UUID) -> Post | None:
        """Get a post with its blocks, or None if it does not exist."""
        ...
