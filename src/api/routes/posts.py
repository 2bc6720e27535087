"""
Posts API routes.

Publish, list, render and delete posts. Component failure kinds map onto HTTP
status codes in one place (``FAILURE_STATUS``).
"""

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status

from src.api.deps import get_current_principal_id, get_publishing_service, require_principal_id
from src.api.schemas import (
    ErrorReason,
    PostCreatedResponse,
    PostCreateRequest,
    PreviewResponse,
    RenderedPostResponse,
)
from src.services.publishing import PublishingService

router = APIRouter()

FAILURE_STATUS: dict[str, int] = {
    "validation_failed": status.HTTP_400_BAD_REQUEST,
    "unauthenticated": status.HTTP_401_UNAUTHORIZED,
    "forbidden": status.HTTP_403_FORBIDDEN,
    "not_found": status.HTTP_404_NOT_FOUND,
    "storage_failure": status.HTTP_503_SERVICE_UNAVAILABLE,
}


def _raise_for_failure(failure: str | None, errors: list[Any]) -> None:
    status_code = FAILURE_STATUS.get(failure or "", status.HTTP_400_BAD_REQUEST)
    reasons = [
        ErrorReason(code=e.code, message=e.message, field=e.field).model_dump() for e in errors
    ]
    raise HTTPException(status_code=status_code, detail=reasons)


@router.post("", response_model=PostCreatedResponse, status_code=status.HTTP_201_CREATED)
def create_post(
    req: PostCreateRequest,
    principal_id: UUID = Depends(require_principal_id),
    service: PublishingService = Depends(get_publishing_service),
) -> PostCreatedResponse:
    """Publish a post with all its blocks in one transaction."""
    result = service.publish(req.to_payload(), principal_id)
    if not result.success or result.post_id is None:
        _raise_for_failure(result.failure, result.errors)

    return PostCreatedResponse(id=result.post_id)  # type: ignore[arg-type]


@router.get("", response_model=list[PreviewResponse])
def list_posts(
    search: str | None = Query(None, description="Title or author name, case-insensitive"),
    service: PublishingService = Depends(get_publishing_service),
) -> list[PreviewResponse]:
    """List published post previews, newest first."""
    result = service.list_previews(search=search)
    if not result.success:
        _raise_for_failure(result.failure, result.errors)
    return [PreviewResponse.from_dto(item) for item in result.items]


@router.get("/mine", response_model=list[PreviewResponse])
def list_my_posts(
    search: str | None = Query(None),
    principal_id: UUID = Depends(require_principal_id),
    service: PublishingService = Depends(get_publishing_service),
) -> list[PreviewResponse]:
    """List the caller's own posts, drafts included."""
    result = service.list_previews(search=search, author_only=principal_id)
    if not result.success:
        _raise_for_failure(result.failure, result.errors)
    return [PreviewResponse.from_dto(item) for item in result.items]


@router.get("/{post_id}", response_model=RenderedPostResponse)
def get_post(
    post_id: UUID,
    viewer_id: UUID | None = Depends(get_current_principal_id),
    service: PublishingService = Depends(get_publishing_service),
) -> RenderedPostResponse:
    result = service.render_post(post_id, viewer_id=viewer_id)
    if not result.success or result.post is None:
        _raise_for_failure(result.failure or "not_found", result.errors)

    return RenderedPostResponse.from_render(result.post, result.instructions)


@router.delete("/{post_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_post(
    post_id: UUID,
    principal_id: UUID = Depends(require_principal_id),
    service: PublishingService = Depends(get_publishing_service),
) -> Response:
    """Delete a post. Only its author may do this."""
    result = service.delete_post(post_id, principal_id)
    if not result.success:
        _raise_for_failure(result.failure, result.errors)

    return Response(status_code=status.HTTP_204_NO_CONTENT)
