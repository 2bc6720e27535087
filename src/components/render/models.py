"""
Render component input/output models.

One instruction shape per block type, plus SkipInstruction for blocks that
can no longer be rendered.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import ClassVar
from uuid import UUID

from src.domain.entities import Post


@dataclass(frozen=True)
class RenderValidationError:
    code: str
    message: str
    field: str | None = None


# --- Instructions ---


@dataclass(frozen=True)
class RenderInstruction:
    kind: ClassVar[str] = "block"

    block_id: str
    order: int


@dataclass(frozen=True)
class HeadingInstruction(RenderInstruction):
    kind: ClassVar[str] = "heading"

    level: int
    text: str


@dataclass(frozen=True)
class ParagraphInstruction(RenderInstruction):
    kind: ClassVar[str] = "paragraph"

    text: str


@dataclass(frozen=True)
class ImageInstruction(RenderInstruction):
    kind: ClassVar[str] = "image"

    url: str
    caption: str = ""
    alt: str = ""


@dataclass(frozen=True)
class CodeInstruction(RenderInstruction):
    kind: ClassVar[str] = "code"

    code: str


@dataclass(frozen=True)
class ListItemInstruction(RenderInstruction):
    kind: ClassVar[str] = "list_item"

    text: str


@dataclass(frozen=True)
class SkipInstruction(RenderInstruction):
    kind: ClassVar[str] = "skip"

    block_type: str
    reason: str


# --- Entry point I/O ---


@dataclass(frozen=True)
class RenderPostInput:
    post_id: UUID
    # Unpublished posts are only visible to their author
    viewer_id: UUID | None = None


@dataclass(frozen=True)
class RenderPostOutput:
    post: Post | None
    instructions: list[RenderInstruction]
    errors: list[RenderValidationError]
    success: bool
    # "not_found" or "storage_failure" when success is False
    failure: str | None = None
