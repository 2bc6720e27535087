from datetime import UTC, datetime
from enum import Enum
from typing import Any
from uuid import UUID, uuid4

from pydantic import BaseModel, Field

# --- Block types ---


class BlockType(str, Enum):
    HEADING_ONE = "HEADING_ONE"
    HEADING_TWO = "HEADING_TWO"
    PARAGRAPH = "PARAGRAPH"
    IMAGE = "IMAGE"
    CODE = "CODE"
    LIST_ITEM = "LIST_ITEM"

    @classmethod
    def parse(cls, value: Any) -> "BlockType | None":
        """Return the member for a stored discriminator, or None if unrecognised."""
        if isinstance(value, cls):
            return value
        try:
            return cls(value)
        except ValueError:
            return None


TEXT_BLOCK_TYPES = frozenset(
    {BlockType.HEADING_ONE, BlockType.HEADING_TWO, BlockType.PARAGRAPH, BlockType.LIST_ITEM}
)

# --- Typed payloads ---


class TextData(BaseModel):
    text: str


class ImageData(BaseModel):
    url: str | None = None
    caption: str | None = ""
    alt: str | None = ""


class CodeData(BaseModel):
    code: str


def payload_model(block_type: BlockType) -> type[BaseModel]:
    if block_type in TEXT_BLOCK_TYPES:
        return TextData
    if block_type == BlockType.IMAGE:
        return ImageData
    return CodeData


def empty_payload(block_type: BlockType) -> dict[str, Any]:
    """Data a freshly appended block starts with."""
    if block_type == BlockType.IMAGE:
        return {"url": "", "caption": "", "alt": ""}
    if block_type == BlockType.CODE:
        return {"code": ""}
    return {"text": ""}


# --- Content ---


class ContentBlock(BaseModel):
    id: str = Field(default_factory=lambda: str(uuid4()))
    # 1..N once persisted; 0 means "not yet ordered"
    order: int = 0
    # Kept as a plain string so stored types that are no longer recognised still load
    block_type: str
    data_json: dict[str, Any] = Field(default_factory=dict)


class Post(BaseModel):
    id: UUID = Field(default_factory=uuid4)
    title: str
    cover_image_url: str | None = None
    published: bool = True
    author_id: UUID
    created_at: datetime = Field(default_factory=lambda: datetime.now(UTC))
    blocks: list[ContentBlock] = Field(default_factory=list)


# --- Authors (external identity, read-only here) ---


class Author(BaseModel):
    id: UUID
    display_name: str = ""
    avatar_ref: str | None = None


# --- Submission payload ---


class PayloadBlock(BaseModel):
    order: int = 0
    block_type: str
    data: dict[str, Any] = Field(default_factory=dict)


class ValidatedPayload(BaseModel):
    title: str
    cover_image_url: str | None = None
    published: bool = True
    blocks: list[PayloadBlock] = Field(default_factory=list)

    def to_blocks(self) -> list[ContentBlock]:
        return [
            ContentBlock(order=b.order, block_type=b.block_type, data_json=dict(b.data))
            for b in self.blocks
        ]
