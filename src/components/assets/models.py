"""
Assets component input/output models.
"""

from __future__ import annotations

from dataclasses import dataclass
from uuid import UUID


@dataclass(frozen=True)
class AssetValidationError:
    code: str
    message: str
    field: str | None = None


@dataclass(frozen=True)
class AssetMetadata:
    """What the store is told about the bytes it keeps."""

    filename: str
    content_type: str
    size_bytes: int
    owner_id: UUID | None = None


@dataclass(frozen=True)
class UploadInput:
    data: bytes
    filename: str
    content_type: str
    owner_id: UUID | None = None


@dataclass(frozen=True)
class UploadOutput:
    url: str | None
    errors: list[AssetValidationError]
    success: bool

    @property
    def retryable(self) -> bool:
        return any(e.code == "storage_failure" for e in self.errors)
