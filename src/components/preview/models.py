"""
Preview component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from uuid import UUID


@dataclass(frozen=True)
class PreviewError:
    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class PreviewConfig:
    excerpt_length: int = 150
    ellipsis: str = "..."


DEFAULT_PREVIEW_CONFIG = PreviewConfig()


@dataclass(frozen=True)
class AuthorDisplay:
    """How a listing shows its author: an avatar URL, or else initials."""

    display_name: str
    avatar_url: str | None
    initials: str


@dataclass(frozen=True)
class PreviewDTO:
    post_id: UUID
    title: str
    created_at: datetime
    cover_image_url: str | None
    published: bool
    excerpt: str
    author: AuthorDisplay


@dataclass(frozen=True)
class ListPreviewsInput:
    search: str | None = None
    # When set, list this author's posts (drafts included) instead of the public feed
    author_only: UUID | None = None


@dataclass(frozen=True)
class PreviewListOutput:
    items: list[PreviewDTO]
    errors: list[PreviewError]
    success: bool
    failure: str | None = None
