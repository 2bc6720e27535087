from dataclasses import asdict
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, Field

from src.components.preview import PreviewDTO
from src.components.render import RenderInstruction
from src.domain.entities import PayloadBlock, Post, ValidatedPayload


# --- Content Blocks ---
class BlockRequest(BaseModel):
    # Plain string so unknown types reach the validator and come back as reasons
    type: str
    data: dict[str, Any] = Field(default_factory=dict)


# --- Posts ---
class PostCreateRequest(BaseModel):
    title: str = ""
    cover_image_url: str | None = None
    published: bool = True
    blocks: list[BlockRequest] = []

    def to_payload(self) -> ValidatedPayload:
        return ValidatedPayload(
            title=self.title,
            cover_image_url=self.cover_image_url,
            published=self.published,
            blocks=[
                PayloadBlock(order=i, block_type=b.type, data=b.data)
                for i, b in enumerate(self.blocks, start=1)
            ],
        )


class PostCreatedResponse(BaseModel):
    id: UUID


class ErrorReason(BaseModel):
    code: str
    message: str
    field: str | None = None


class AuthorDisplayResponse(BaseModel):
    display_name: str
    avatar_url: str | None = None
    initials: str


class PreviewResponse(BaseModel):
    id: UUID
    title: str
    created_at: datetime
    cover_image_url: str | None = None
    published: bool
    excerpt: str
    author: AuthorDisplayResponse

    @classmethod
    def from_dto(cls, dto: PreviewDTO) -> "PreviewResponse":
        return cls(
            id=dto.post_id,
            title=dto.title,
            created_at=dto.created_at,
            cover_image_url=dto.cover_image_url,
            published=dto.published,
            excerpt=dto.excerpt,
            author=AuthorDisplayResponse(**asdict(dto.author)),
        )


def instruction_to_dict(instruction: RenderInstruction) -> dict[str, Any]:
    return {"kind": instruction.kind, **asdict(instruction)}


class RenderedPostResponse(BaseModel):
    id: UUID
    title: str
    cover_image_url: str | None = None
    published: bool
    author_id: UUID
    created_at: datetime
    blocks: list[dict[str, Any]]

    @classmethod
    def from_render(
        cls, post: Post, instructions: list[RenderInstruction]
    ) -> "RenderedPostResponse":
        return cls(
            id=post.id,
            title=post.title,
            cover_image_url=post.cover_image_url,
            published=post.published,
            author_id=post.author_id,
            created_at=post.created_at,
            blocks=[instruction_to_dict(i) for i in instructions],
        )


# --- Assets ---
class AssetUploadResponse(BaseModel):
    url: str
