"""Publish component models - frozen dataclass inputs and outputs."""

from dataclasses import dataclass
from typing import Literal
from uuid import UUID

from src.domain.entities import Post, ValidatedPayload

CommitFailure = Literal["unauthenticated", "validation_failed", "storage_failure"]
DeleteFailure = Literal["unauthenticated", "not_found", "forbidden", "storage_failure"]


@dataclass(frozen=True)
class PublishValidationError:
    """Validation error details for publish operations."""

    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class CommitInput:
    """Input for the atomic create-post-with-blocks operation."""

    payload: ValidatedPayload
    author_id: UUID | None


@dataclass(frozen=True)
class CommitOutput:
    """Output for the atomic create-post-with-blocks operation."""

    post_id: UUID | None
    failure: CommitFailure | None
    errors: list[PublishValidationError]
    success: bool

    @property
    def retryable(self) -> bool:
        return self.failure == "storage_failure"


@dataclass(frozen=True)
class DeleteInput:
    """Input for deleting a post."""

    post_id: UUID
    principal_id: UUID | None


@dataclass(frozen=True)
class DeleteOutput:
    """Output for deleting a post. ``post`` is the removed aggregate on success."""

    post: Post | None
    failure: DeleteFailure | None
    errors: list[PublishValidationError]
    success: bool
