"""
Render component - map a stored block sequence to display instructions.

Invariants:
- One instruction per block, in ascending stored order (ties keep input order)
- Unknown or corrupt blocks become SkipInstruction; rendering never raises
- List items are emitted one by one; grouping is left to the presentation layer
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterable

from pydantic import ValidationError

from src.domain.entities import (
    BlockType,
    CodeData,
    ContentBlock,
    ImageData,
    TextData,
)
from src.domain.errors import StorageFailureError

from .models import (
    CodeInstruction,
    HeadingInstruction,
    ImageInstruction,
    ListItemInstruction,
    ParagraphInstruction,
    RenderInstruction,
    RenderPostInput,
    RenderPostOutput,
    RenderValidationError,
    SkipInstruction,
)
from .ports import PostRepoPort

logger = logging.getLogger(__name__)


def render_heading_one(block: ContentBlock) -> RenderInstruction:
    text = TextData.model_validate(block.data_json).text
    return HeadingInstruction(block.id, block.order, level=1, text=text)


def render_heading_two(block: ContentBlock) -> RenderInstruction:
    text = TextData.model_validate(block.data_json).text
    return HeadingInstruction(block.id, block.order, level=2, text=text)


def render_paragraph(block: ContentBlock) -> RenderInstruction:
    text = TextData.model_validate(block.data_json).text
    return ParagraphInstruction(block.id, block.order, text=text)


def render_list_item(block: ContentBlock) -> RenderInstruction:
    text = TextData.model_validate(block.data_json).text
    return ListItemInstruction(block.id, block.order, text=text)


def render_code(block: ContentBlock) -> RenderInstruction:
    code = CodeData.model_validate(block.data_json).code
    return CodeInstruction(block.id, block.order, code=code)


def render_image(block: ContentBlock) -> RenderInstruction:
    image = ImageData.model_validate(block.data_json)
    if not image.url:
        return _skip(block, "image has no url")
    return ImageInstruction(
        block.id,
        block.order,
        url=image.url,
        caption=image.caption or "",
        alt=image.alt or "",
    )


# Total over the closed BlockType set
BLOCK_RENDERERS: dict[BlockType, Callable[[ContentBlock], RenderInstruction]] = {
    BlockType.HEADING_ONE: render_heading_one,
    BlockType.HEADING_TWO: render_heading_two,
    BlockType.PARAGRAPH: render_paragraph,
    BlockType.LIST_ITEM: render_list_item,
    BlockType.CODE: render_code,
    BlockType.IMAGE: render_image,
}


def render_block(block: ContentBlock) -> RenderInstruction:
    """Render a single block."""
    block_type = BlockType.parse(block.block_type)
    if block_type is None:
        return _skip(block, "unrecognized block type")

    try:
        return BLOCK_RENDERERS[block_type](block)
    except ValidationError:
        return _skip(block, "payload does not match block type")


def _skip(block: ContentBlock, reason: str) -> SkipInstruction:
    logger.warning(
        "Skipping block %s (type=%r, order=%d): %s",
        block.id,
        block.block_type,
        block.order,
        reason,
    )
    return SkipInstruction(block.id, block.order, block_type=str(block.block_type), reason=reason)


def render(blocks: Iterable[ContentBlock]) -> list[RenderInstruction]:
    """Render blocks in stored order."""
    ordered = sorted(blocks, key=lambda b: b.order)
    return [render_block(b) for b in ordered]


# --- Component Entry Points ---


def run_render_post(inp: RenderPostInput, *, repo: PostRepoPort) -> RenderPostOutput:
    """
    Load a post and render its body.

    Args:
        inp: Post id and the viewing principal (if any).
        repo: Post repository port.

    Returns:
        RenderPostOutput with instructions, or a not_found / storage_failure error.
    """
    try:
        post = repo.find_post_by_id(inp.post_id)
    except StorageFailureError as e:
        logger.exception("Loading post %s failed", inp.post_id)
        return RenderPostOutput(
            post=None,
            instructions=[],
            errors=[RenderValidationError(code=e.code, message=e.message, field=e.field)],
            success=False,
            failure="storage_failure",
        )

    if post is None or (not post.published and post.author_id != inp.viewer_id):
        return RenderPostOutput(
            post=None,
            instructions=[],
            errors=[
                RenderValidationError(
                    code="not_found",
                    message="Post not found",
                    field="post_id",
                )
            ],
            success=False,
            failure="not_found",
        )

    return RenderPostOutput(
        post=post,
        instructions=render(post.blocks),
        errors=[],
        success=True,
    )
