"""Publish component port definitions - protocols for dependencies."""

from datetime import datetime
from typing import Protocol
from uuid import UUID

from src.domain.entities import ContentBlock, Post


class PostRepoPort(Protocol):
    """Protocol for the transactional post store."""

    def create_post_with_blocks(self, post: Post) -> UUID:
        """Persist the post row and all of its blocks as one atomic write.

        Raises StorageFailureError (and persists nothing) on any failure.
        """
        ...

    def find_post_by_id(self, post_id: UUID) -> Post | None:
        """Retrieve a post with its blocks in order."""
        ...

    def delete_post(self, post_id: UUID) -> None:
        """Remove a post and its blocks."""
        ...


class BlockValidatorPort(Protocol):
    """Protocol for block schema validation."""

    def validate(self, block: ContentBlock) -> None:
        """Raise a ValidationFailure if the block is not acceptable."""
        ...


class ClockPort(Protocol):
    """Protocol for time operations."""

    def now(self) -> datetime:
        """Return current UTC time."""
        ...
