"""
Assets API routes.

Image upload for draft blocks and covers, and serving of the stored bytes.
"""

import mimetypes
from uuid import UUID

from fastapi import APIRouter, Depends, File, HTTPException, UploadFile, status
from fastapi.responses import Response

from src.adapters.fs.filestore import FileSystemStore
from src.api.deps import get_file_store, get_publishing_service, require_principal_id
from src.api.schemas import AssetUploadResponse
from src.services.publishing import PublishingService

router = APIRouter()
public_router = APIRouter()

# Keys are fresh uuids, so stored bytes never change
CACHE_CONTROL_IMMUTABLE = "public, max-age=31536000, immutable"


@router.post("", response_model=AssetUploadResponse, status_code=status.HTTP_201_CREATED)
def upload_asset(
    file: UploadFile = File(...),
    principal_id: UUID = Depends(require_principal_id),
    service: PublishingService = Depends(get_publishing_service),
) -> AssetUploadResponse:
    """Upload an image and return the URL to put in a block or cover."""
    # One byte past the limit is enough for validation to reject it
    content = file.file.read(service.rules.uploads.max_upload_bytes + 1)
    mime_type = file.content_type or "application/octet-stream"

    result = service.upload_asset(
        data=content,
        filename=file.filename or "unnamed",
        content_type=mime_type,
        owner_id=principal_id,
    )

    if not result.success or result.url is None:
        err = result.errors[0]
        status_code = 503 if result.retryable else 400
        raise HTTPException(status_code=status_code, detail=err.message)

    return AssetUploadResponse(url=result.url)


@public_router.get("/{key}")
def get_asset(
    key: str,
    storage: FileSystemStore = Depends(get_file_store),
) -> Response:
    """Serve stored image bytes."""
    try:
        data = storage.get(key)
    except (FileNotFoundError, ValueError) as e:
        raise HTTPException(status_code=404, detail="Asset not found") from e

    media_type = mimetypes.guess_type(key)[0] or "application/octet-stream"
    return Response(
        content=data,
        media_type=media_type,
        headers={"Cache-Control": CACHE_CONTROL_IMMUTABLE},
    )
