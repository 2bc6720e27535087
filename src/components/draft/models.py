"""
Draft component models.

Draft state is mutable and lives only inside one DraftHandle; submission
results are frozen dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any

from src.domain.entities import BlockType, ValidatedPayload

# Upload target for the post's cover image (not a block)
COVER = "cover"


class UploadState(str, Enum):
    """idle -> uploading -> resolved | failed; any state may start a new upload."""

    IDLE = "idle"
    UPLOADING = "uploading"
    RESOLVED = "resolved"
    FAILED = "failed"


@dataclass
class UploadSlot:
    """Upload progress for one slot; orthogonal to the slot's text fields."""

    state: UploadState = UploadState.IDLE
    started_at: datetime | None = None

    @property
    def is_uploading(self) -> bool:
        return self.state == UploadState.UPLOADING

    @property
    def is_resolved(self) -> bool:
        return self.state == UploadState.RESOLVED


@dataclass
class DraftBlock:
    id: str
    block_type: BlockType
    data: dict[str, Any]
    upload: UploadSlot = field(default_factory=UploadSlot)


@dataclass
class CoverSlot:
    url: str = ""
    upload: UploadSlot = field(default_factory=UploadSlot)


@dataclass(frozen=True)
class DraftValidationError:
    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class SubmitOutput:
    payload: ValidatedPayload | None
    blocks_dropped: list[str]
    errors: list[DraftValidationError]
    success: bool
