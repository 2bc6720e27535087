"""
Draft component - client-side authoring state for a new post.

A DraftHandle is owned by exactly one authoring session and passed around
explicitly; there is no shared or global draft state.

Upload slots (every image block, plus the cover) follow:
- idle | resolved | failed -> uploading   (begin_image_upload)
- uploading -> resolved, url set          (complete_image_upload)
- uploading -> failed, url cleared        (fail_image_upload, abandon_stale_uploads)

Results that arrive for a slot that is no longer uploading are ignored.
submit() is the serialization point: it refuses while any slot is uploading.
"""

from __future__ import annotations

import copy
import logging
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import UUID, uuid4

from src.domain.blocks import is_upload_incomplete
from src.domain.entities import (
    BlockType,
    ContentBlock,
    PayloadBlock,
    ValidatedPayload,
    empty_payload,
)
from src.domain.errors import (
    EmptyTitleError,
    InvalidBlockTypeError,
    NoBlocksError,
    PendingUploadsError,
    ValidationFailure,
)

from .models import (
    COVER,
    CoverSlot,
    DraftBlock,
    DraftValidationError,
    SubmitOutput,
    UploadSlot,
    UploadState,
)
from .ports import BlockValidatorPort, ClockPort

logger = logging.getLogger(__name__)


class DraftHandle:
    """In-progress post owned by one authoring session."""

    def __init__(
        self,
        author_id: UUID,
        *,
        clock: ClockPort | None = None,
        validator: BlockValidatorPort | None = None,
        id_factory: Callable[[], str] | None = None,
    ) -> None:
        self.author_id = author_id
        self.title = ""
        self.published = True
        self.cover = CoverSlot()
        self.blocks: list[DraftBlock] = []
        self._clock = clock
        self._validator = validator
        self._new_id = id_factory or (lambda: str(uuid4()))

    def _now(self) -> datetime:
        return self._clock.now() if self._clock else datetime.now(UTC)

    # --- Metadata ---

    def set_title(self, title: str) -> None:
        self.title = title

    def set_published(self, published: bool) -> None:
        self.published = published

    def set_cover_image_url(self, url: str | None) -> None:
        """Set the cover URL directly (e.g. an already hosted image)."""
        self.cover.url = url or ""

    # --- Blocks ---

    def get_block(self, block_id: str) -> DraftBlock | None:
        for block in self.blocks:
            if block.id == block_id:
                return block
        return None

    def append_block(self, block_type: BlockType | str) -> DraftBlock:
        parsed = BlockType.parse(block_type)
        if parsed is None:
            raise InvalidBlockTypeError(block_type)

        block = DraftBlock(id=self._new_id(), block_type=parsed, data=empty_payload(parsed))
        self.blocks.append(block)
        return block

    def update_block_data(self, block_id: str, data: dict[str, Any]) -> bool:
        """Replace a block's payload. Unknown ids are a no-op."""
        block = self.get_block(block_id)
        if block is None:
            return False

        new_data = dict(data)
        if block.block_type == BlockType.IMAGE and block.upload.is_uploading:
            # The upload owns the url until it resolves
            new_data["url"] = block.data.get("url", "")
        block.data = new_data
        return True

    def delete_block(self, block_id: str) -> bool:
        before = len(self.blocks)
        self.blocks = [b for b in self.blocks if b.id != block_id]
        return len(self.blocks) != before

    # --- Uploads ---

    def _slot(self, slot: str) -> UploadSlot | None:
        if slot == COVER:
            return self.cover.upload
        block = self.get_block(slot)
        if block is None:
            return None
        if block.block_type != BlockType.IMAGE:
            raise InvalidBlockTypeError(block.block_type)
        return block.upload

    def _set_url(self, slot: str, url: str) -> None:
        if slot == COVER:
            self.cover.url = url
            return
        block = self.get_block(slot)
        if block is not None:
            block.data = {**block.data, "url": url}

    def begin_image_upload(self, slot: str) -> bool:
        upload = self._slot(slot)
        if upload is None:
            return False
        upload.state = UploadState.UPLOADING
        upload.started_at = self._now()
        return True

    def complete_image_upload(self, slot: str, url: str) -> bool:
        upload = self._slot(slot)
        if upload is None or not upload.is_uploading:
            logger.debug("Ignoring upload result for inactive slot %s", slot)
            return False
        self._set_url(slot, url)
        upload.state = UploadState.RESOLVED
        upload.started_at = None
        return True

    def fail_image_upload(self, slot: str) -> bool:
        upload = self._slot(slot)
        if upload is None or not upload.is_uploading:
            return False
        self._set_url(slot, "")
        upload.state = UploadState.FAILED
        upload.started_at = None
        return True

    def pending_uploads(self) -> list[str]:
        pending = [COVER] if self.cover.upload.is_uploading else []
        pending.extend(b.id for b in self.blocks if b.upload.is_uploading)
        return pending

    def abandon_stale_uploads(self, max_age: timedelta) -> list[str]:
        """Fail every upload that has been running longer than max_age."""
        now = self._now()
        abandoned: list[str] = []
        for slot in self.pending_uploads():
            upload = self._slot(slot)
            if upload and upload.started_at and now - upload.started_at > max_age:
                self.fail_image_upload(slot)
                abandoned.append(slot)

        if abandoned:
            logger.info("Abandoned %d stale upload(s): %s", len(abandoned), abandoned)
        return abandoned

    # --- Submission ---

    def submit(self) -> SubmitOutput:
        """
        Produce the payload to publish, without changing the draft.

        Image blocks that never received an upload are dropped and reported
        in blocks_dropped rather than failing the whole submission.
        """
        if not self.title or not self.title.strip():
            return _failed(EmptyTitleError())

        if not self.blocks:
            return _failed(NoBlocksError())

        pending = self.pending_uploads()
        if pending:
            return _failed(PendingUploadsError(pending))

        kept: list[ContentBlock] = []
        dropped: list[str] = []
        for block in self.blocks:
            content = ContentBlock(
                id=block.id,
                block_type=block.block_type.value,
                data_json=copy.deepcopy(block.data),
            )
            if is_upload_incomplete(content):
                dropped.append(block.id)
            else:
                kept.append(content)

        if dropped:
            logger.info("Dropping %d image block(s) without an upload", len(dropped))

        if not kept:
            return SubmitOutput(
                payload=None,
                blocks_dropped=dropped,
                errors=[
                    DraftValidationError(
                        code="no_blocks",
                        message="Every block was an image without an upload",
                        field="blocks",
                    )
                ],
                success=False,
            )

        errors: list[DraftValidationError] = []
        if self._validator is not None:
            for content in kept:
                try:
                    self._validator.validate(content)
                except ValidationFailure as e:
                    errors.append(
                        DraftValidationError(code=e.code, message=e.message, field=e.field)
                    )
        if errors:
            return SubmitOutput(payload=None, blocks_dropped=dropped, errors=errors, success=False)

        payload = ValidatedPayload(
            title=self.title.strip(),
            cover_image_url=self.cover.url or None,
            published=self.published,
            blocks=[
                PayloadBlock(order=position, block_type=c.block_type, data=c.data_json)
                for position, c in enumerate(kept, start=1)
            ],
        )
        return SubmitOutput(payload=payload, blocks_dropped=dropped, errors=[], success=True)


def _failed(e: ValidationFailure) -> SubmitOutput:
    return SubmitOutput(
        payload=None,
        blocks_dropped=[],
        errors=[DraftValidationError(code=e.code, message=e.message, field=e.field)],
        success=False,
    )


def compose_new_post(
    author_id: UUID,
    *,
    clock: ClockPort | None = None,
    validator: BlockValidatorPort | None = None,
) -> DraftHandle:
    return DraftHandle(author_id, clock=clock, validator=validator)
