"""
Assets component - image upload validation and storage.

Deletes are best-effort: a failed delete is logged and never blocks the
operation it is cleaning up after.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable

from src.domain.errors import StorageFailureError

from .models import AssetMetadata, AssetValidationError, UploadInput, UploadOutput
from .ports import AssetStorePort, RulesPort

logger = logging.getLogger(__name__)

DEFAULT_MAX_UPLOAD_BYTES = 5 * 1024 * 1024
DEFAULT_ALLOWED_MIME_TYPES = [
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
]


def validate_upload(
    content_type: str,
    size_bytes: int,
    *,
    rules: RulesPort | None = None,
) -> list[AssetValidationError]:
    """Check MIME type and size against the configured allow-list."""
    allowed = rules.get_allowed_mime_types() if rules else DEFAULT_ALLOWED_MIME_TYPES
    max_bytes = rules.get_max_upload_bytes() if rules else DEFAULT_MAX_UPLOAD_BYTES
    errors: list[AssetValidationError] = []

    base_type = content_type.split(";")[0].strip().lower()
    if base_type not in allowed:
        errors.append(
            AssetValidationError(
                code="invalid_file_type",
                message=f"File type '{content_type}' is not allowed",
                field="content_type",
            )
        )

    if size_bytes <= 0:
        errors.append(
            AssetValidationError(code="empty_file", message="No file uploaded", field="file")
        )
    elif size_bytes > max_bytes:
        errors.append(
            AssetValidationError(
                code="file_too_large",
                message=f"File too large ({size_bytes} > {max_bytes} bytes)",
                field="file",
            )
        )

    return errors


# --- Component Entry Points ---


def run_upload(
    inp: UploadInput,
    *,
    store: AssetStorePort,
    rules: RulesPort | None = None,
) -> UploadOutput:
    """
    Validate and store an uploaded image.

    Args:
        inp: File bytes and declared metadata.
        store: Asset store port.
        rules: Upload limits (defaults apply when omitted).

    Returns:
        UploadOutput with the stored URL or errors.
    """
    errors = validate_upload(inp.content_type, len(inp.data), rules=rules)
    if errors:
        return UploadOutput(url=None, errors=errors, success=False)

    metadata = AssetMetadata(
        filename=inp.filename,
        content_type=inp.content_type,
        size_bytes=len(inp.data),
        owner_id=inp.owner_id,
    )
    try:
        url = store.store(inp.data, metadata)
    except StorageFailureError as e:
        logger.exception("Storing upload %s failed", inp.filename)
        return UploadOutput(
            url=None,
            errors=[AssetValidationError(code=e.code, message=e.message, field="file")],
            success=False,
        )

    logger.info("Stored upload %s (%d bytes) at %s", inp.filename, len(inp.data), url)
    return UploadOutput(url=url, errors=[], success=True)


def discard_assets(urls: Iterable[str], *, store: AssetStorePort) -> int:
    """Delete assets by URL, best effort. Returns how many deletes succeeded."""
    deleted = 0
    for url in urls:
        try:
            store.delete(url)
            deleted += 1
        except Exception:
            logger.warning("Failed to delete asset %s", url, exc_info=True)
    return deleted
