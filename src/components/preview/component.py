"""
Preview component - lightweight post summaries for feeds and dashboards.

Invariants:
- Excerpt comes from the first PARAGRAPH block in order, not the first block
- The ellipsis is added only when the text was actually truncated
- Avatars are exposed only as absolute http(s) URLs; otherwise initials
- Projections are recomputed per request and never cached
"""

from __future__ import annotations

import logging
from urllib.parse import urlparse

from src.domain.entities import Author, ContentBlock, Post
from src.domain.errors import StorageFailureError

from .models import (
    DEFAULT_PREVIEW_CONFIG,
    AuthorDisplay,
    ListPreviewsInput,
    PreviewConfig,
    PreviewDTO,
    PreviewError,
    PreviewListOutput,
)
from .ports import AuthorRepoPort, PostQueryPort

logger = logging.getLogger(__name__)


def make_excerpt(text: str, limit: int = 150, ellipsis: str = "...") -> str:
    if len(text) <= limit:
        return text
    return text[:limit] + ellipsis


def compute_initials(display_name: str) -> str:
    """'Ada Lovelace' -> 'AL'. Empty names give ''."""
    initials = "".join(token[0] for token in display_name.split())
    return initials.upper()[:2]


def is_absolute_http_url(value: str | None) -> bool:
    if not value:
        return False
    parsed = urlparse(value)
    return parsed.scheme in ("http", "https") and bool(parsed.netloc)


def author_display(author: Author | None) -> AuthorDisplay:
    if author is None:
        return AuthorDisplay(display_name="", avatar_url=None, initials="")

    if is_absolute_http_url(author.avatar_ref):
        return AuthorDisplay(
            display_name=author.display_name,
            avatar_url=author.avatar_ref,
            initials="",
        )

    return AuthorDisplay(
        display_name=author.display_name,
        avatar_url=None,
        initials=compute_initials(author.display_name),
    )


def project(
    post: Post,
    first_paragraph: ContentBlock | None,
    author: Author | None,
    *,
    config: PreviewConfig = DEFAULT_PREVIEW_CONFIG,
) -> PreviewDTO:
    """Summarize a post for listings."""
    excerpt = ""
    if first_paragraph is not None:
        text = first_paragraph.data_json.get("text")
        if isinstance(text, str):
            excerpt = make_excerpt(text, config.excerpt_length, config.ellipsis)

    return PreviewDTO(
        post_id=post.id,
        title=post.title,
        created_at=post.created_at,
        cover_image_url=post.cover_image_url,
        published=post.published,
        excerpt=excerpt,
        author=author_display(author),
    )


# --- Component Entry Points ---


def run_list(
    inp: ListPreviewsInput,
    *,
    repo: PostQueryPort,
    author_repo: AuthorRepoPort,
    config: PreviewConfig = DEFAULT_PREVIEW_CONFIG,
) -> PreviewListOutput:
    """
    List post previews.

    Args:
        inp: Search term and optional author restriction.
        repo: Listing queries.
        author_repo: Author identity lookup.
        config: Excerpt settings.

    Returns:
        PreviewListOutput, newest post first, or a storage_failure error.
    """
    search = inp.search.strip() if inp.search else None

    try:
        if inp.author_only is not None:
            posts = repo.find_posts_by_author(inp.author_only, search=search or None)
        else:
            posts = repo.find_published_posts(search or None)

        paragraphs = repo.find_first_paragraphs([p.id for p in posts])
        authors = author_repo.get_many({p.author_id for p in posts})
    except StorageFailureError as e:
        logger.exception("Listing posts failed")
        return PreviewListOutput(
            items=[],
            errors=[PreviewError(code=e.code, message=e.message, field=e.field)],
            success=False,
            failure="storage_failure",
        )

    items = [
        project(p, paragraphs.get(p.id), authors.get(p.author_id), config=config) for p in posts
    ]
    return PreviewListOutput(items=items, errors=[], success=True)
