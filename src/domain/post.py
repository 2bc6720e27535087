"""
Post aggregate rules.

A post is created whole (metadata plus every block, ordered 1..N) or not at
all, and only its author may delete it.
"""

from collections.abc import Sequence
from datetime import datetime
from uuid import UUID, uuid4

from src.domain.blocks import BlockValidator, is_upload_incomplete
from src.domain.entities import BlockType, ContentBlock, Post
from src.domain.errors import (
    DomainError,
    EmptyTitleError,
    ForbiddenError,
    IncompleteUploadError,
    InvalidBlockTypeError,
    NoBlocksError,
    NotFoundError,
    ValidationFailure,
)


def collect_post_errors(
    title: str | None,
    blocks: Sequence[ContentBlock],
    validator: BlockValidator | None = None,
) -> list[DomainError]:
    """
    All reasons a post could not be created, most fundamental first.

    Order: no blocks, incomplete uploads, invalid blocks, empty title.
    """
    errors: list[DomainError] = []

    if not blocks:
        errors.append(NoBlocksError())

    for block in blocks:
        if is_upload_incomplete(block):
            errors.append(IncompleteUploadError(block.id))

    for block in blocks:
        if validator is not None:
            try:
                validator.validate(block)
            except ValidationFailure as e:
                errors.append(e)
        elif BlockType.parse(block.block_type) is None:
            errors.append(InvalidBlockTypeError(block.block_type))

    if not title or not title.strip():
        errors.append(EmptyTitleError())

    return errors


def create_post(
    title: str,
    cover_image_url: str | None,
    author_id: UUID,
    published: bool,
    blocks: Sequence[ContentBlock],
    *,
    now: datetime,
    validator: BlockValidator | None = None,
) -> Post:
    """
    Build a new Post aggregate.

    Raises the first error from collect_post_errors. On success every block
    gets a fresh id and order = 1..N in the given iteration order.
    """
    errors = collect_post_errors(title, blocks, validator)
    if errors:
        raise errors[0]

    ordered = [
        block.model_copy(update={"id": str(uuid4()), "order": position}, deep=True)
        for position, block in enumerate(blocks, start=1)
    ]

    return Post(
        id=uuid4(),
        title=title.strip(),
        cover_image_url=cover_image_url or None,
        published=published,
        author_id=author_id,
        created_at=now,
        blocks=ordered,
    )


def ensure_can_delete(post: Post | None, principal_id: UUID) -> Post:
    """Only the author may delete a post."""
    if post is None:
        raise NotFoundError("Post not found", field="post_id")
    if post.author_id != principal_id:
        raise ForbiddenError("Only the author can delete this post", field="principal_id")
    return post


def referenced_asset_urls(post: Post) -> list[str]:
    urls: list[str] = []
    if post.cover_image_url:
        urls.append(post.cover_image_url)
    for block in post.blocks:
        if BlockType.parse(block.block_type) == BlockType.IMAGE:
            url = block.data_json.get("url")
            if url:
                urls.append(url)
    return urls
