"""
Draft component unit tests.

Tests for block editing, upload slot transitions and submission.
"""

from __future__ import annotations

from datetime import UTC, datetime, timedelta
from pathlib import Path
from uuid import UUID, uuid4

import pytest

from src.components.draft import COVER, DraftHandle, UploadState, compose_new_post
from src.domain.blocks import BlockValidator
from src.domain.entities import BlockType
from src.domain.errors import InvalidBlockTypeError
from src.rules.loader import load_rules

# --- Mock Implementations ---


class MockClockPort:
    """Mock clock for deterministic testing."""

    def __init__(self, fixed_time: datetime | None = None) -> None:
        self._time = fixed_time or datetime(2024, 6, 15, 12, 0, 0, tzinfo=UTC)

    def now(self) -> datetime:
        return self._time

    def advance(self, delta: timedelta) -> None:
        self._time = self._time + delta


# --- Fixtures ---


@pytest.fixture
def clock() -> MockClockPort:
    return MockClockPort()


@pytest.fixture
def author_id() -> UUID:
    return uuid4()


@pytest.fixture
def validator() -> BlockValidator:
    rules = load_rules(Path("rules.yaml").resolve())
    return BlockValidator(rules.blocks)


@pytest.fixture
def draft(author_id: UUID, clock: MockClockPort) -> DraftHandle:
    return DraftHandle(author_id, clock=clock)


def _paragraph(draft: DraftHandle, text: str) -> str:
    block = draft.append_block(BlockType.PARAGRAPH)
    draft.update_block_data(block.id, {"text": text})
    return block.id


# --- Editing ---


class TestEditing:
    def test_append_block_uses_type_appropriate_empty_payload(self, draft: DraftHandle) -> None:
        heading = draft.append_block("HEADING_ONE")
        image = draft.append_block(BlockType.IMAGE)
        code = draft.append_block(BlockType.CODE)

        assert heading.data == {"text": ""}
        assert image.data == {"url": "", "caption": "", "alt": ""}
        assert code.data == {"code": ""}
        assert [b.id for b in draft.blocks] == [heading.id, image.id, code.id]

    def test_append_unknown_type_raises(self, draft: DraftHandle) -> None:
        with pytest.raises(InvalidBlockTypeError):
            draft.append_block("QUOTE")
        assert draft.blocks == []

    def test_update_unknown_id_is_noop(self, draft: DraftHandle) -> None:
        block_id = _paragraph(draft, "Hi")

        assert draft.update_block_data("missing", {"text": "x"}) is False
        assert draft.get_block(block_id).data == {"text": "Hi"}

    def test_delete_block(self, draft: DraftHandle) -> None:
        first = _paragraph(draft, "one")
        second = _paragraph(draft, "two")

        assert draft.delete_block(first) is True
        assert draft.delete_block(first) is False
        assert [b.id for b in draft.blocks] == [second]

    def test_compose_new_post_returns_empty_draft(self, author_id: UUID) -> None:
        draft = compose_new_post(author_id)
        assert draft.author_id == author_id
        assert draft.title == ""
        assert draft.blocks == []
        assert draft.published is True


# --- Uploads ---


class TestUploads:
    def test_upload_lifecycle_sets_url(self, draft: DraftHandle) -> None:
        image = draft.append_block(BlockType.IMAGE)

        assert draft.begin_image_upload(image.id) is True
        assert image.upload.state == UploadState.UPLOADING
        assert draft.pending_uploads() == [image.id]

        assert draft.complete_image_upload(image.id, "/assets/a.png") is True
        assert image.upload.state == UploadState.RESOLVED
        assert image.data["url"] == "/assets/a.png"
        assert draft.pending_uploads() == []

    def test_failed_upload_clears_url(self, draft: DraftHandle) -> None:
        image = draft.append_block(BlockType.IMAGE)
        draft.begin_image_upload(image.id)
        draft.complete_image_upload(image.id, "/assets/old.png")

        draft.begin_image_upload(image.id)
        assert draft.fail_image_upload(image.id) is True
        assert image.data["url"] == ""
        assert image.upload.state == UploadState.FAILED

    def test_late_result_for_idle_slot_is_ignored(self, draft: DraftHandle) -> None:
        image = draft.append_block(BlockType.IMAGE)
        draft.begin_image_upload(image.id)
        draft.fail_image_upload(image.id)

        assert draft.complete_image_upload(image.id, "/assets/late.png") is False
        assert image.data["url"] == ""

    def test_upload_on_non_image_block_raises(self, draft: DraftHandle) -> None:
        block_id = _paragraph(draft, "text")
        with pytest.raises(InvalidBlockTypeError):
            draft.begin_image_upload(block_id)

    def test_metadata_edit_during_upload_keeps_url(self, draft: DraftHandle) -> None:
        image = draft.append_block(BlockType.IMAGE)
        draft.begin_image_upload(image.id)

        draft.update_block_data(image.id, {"url": "ignored", "caption": "A cat", "alt": "cat"})
        draft.complete_image_upload(image.id, "/assets/cat.png")

        assert image.data == {"url": "/assets/cat.png", "caption": "A cat", "alt": "cat"}

    def test_cover_upload(self, draft: DraftHandle) -> None:
        draft.begin_image_upload(COVER)
        assert draft.pending_uploads() == [COVER]

        draft.complete_image_upload(COVER, "/assets/cover.jpg")
        assert draft.cover.url == "/assets/cover.jpg"

    def test_abandon_stale_uploads(self, draft: DraftHandle, clock: MockClockPort) -> None:
        old = draft.append_block(BlockType.IMAGE)
        draft.begin_image_upload(old.id)
        clock.advance(timedelta(minutes=11))
        fresh = draft.append_block(BlockType.IMAGE)
        draft.begin_image_upload(fresh.id)

        abandoned = draft.abandon_stale_uploads(timedelta(minutes=10))

        assert abandoned == [old.id]
        assert draft.pending_uploads() == [fresh.id]
        assert old.upload.state == UploadState.FAILED

    def test_retry_after_failure_resolves(self, draft: DraftHandle) -> None:
        image = draft.append_block(BlockType.IMAGE)
        assert image.upload.state == UploadState.IDLE

        draft.begin_image_upload(image.id)
        draft.fail_image_upload(image.id)
        assert draft.begin_image_upload(image.id) is True
        draft.complete_image_upload(image.id, "/assets/retry.png")

        assert image.upload.is_resolved
        assert image.data["url"] == "/assets/retry.png"


# --- Submission ---


class TestSubmit:
    def test_submit_orders_blocks(self, draft: DraftHandle) -> None:
        draft.set_title("  Hello  ")
        _paragraph(draft, "first")
        heading = draft.append_block(BlockType.HEADING_TWO)
        draft.update_block_data(heading.id, {"text": "second"})

        result = draft.submit()

        assert result.success
        assert result.payload is not None
        assert result.payload.title == "Hello"
        assert result.payload.cover_image_url is None
        assert [(b.order, b.block_type) for b in result.payload.blocks] == [
            (1, "PARAGRAPH"),
            (2, "HEADING_TWO"),
        ]

    def test_submit_requires_title(self, draft: DraftHandle) -> None:
        _paragraph(draft, "body")
        result = draft.submit()
        assert not result.success
        assert result.errors[0].code == "title_required"

    def test_submit_requires_blocks(self, draft: DraftHandle) -> None:
        draft.set_title("Empty")
        result = draft.submit()
        assert result.errors[0].code == "no_blocks"

    def test_submit_refuses_while_uploading(self, draft: DraftHandle) -> None:
        draft.set_title("Uploading")
        image = draft.append_block(BlockType.IMAGE)
        draft.begin_image_upload(image.id)

        result = draft.submit()

        assert not result.success
        assert result.errors[0].code == "pending_uploads"

    def test_unuploaded_image_is_dropped_and_reported(self, draft: DraftHandle) -> None:
        draft.set_title("Pictures")
        image = draft.append_block(BlockType.IMAGE)
        _paragraph(draft, "caption text")

        result = draft.submit()

        assert result.success
        assert result.blocks_dropped == [image.id]
        assert [b.block_type for b in result.payload.blocks] == ["PARAGRAPH"]
        assert result.payload.blocks[0].order == 1

    def test_only_unuploaded_images_gives_no_blocks(self, draft: DraftHandle) -> None:
        draft.set_title("Pictures")
        image = draft.append_block(BlockType.IMAGE)

        result = draft.submit()

        assert not result.success
        assert result.blocks_dropped == [image.id]
        assert result.errors[0].code == "no_blocks"

    def test_submit_is_idempotent(self, draft: DraftHandle) -> None:
        draft.set_title("Twice")
        _paragraph(draft, "same")
        draft.append_block(BlockType.IMAGE)

        first = draft.submit()
        second = draft.submit()

        assert first.payload == second.payload
        assert first.blocks_dropped == second.blocks_dropped
        assert len(draft.blocks) == 2

    def test_submit_runs_validator(self, author_id: UUID, validator: BlockValidator) -> None:
        draft = DraftHandle(author_id, validator=validator)
        draft.set_title("Too long")
        heading = draft.append_block(BlockType.HEADING_ONE)
        draft.update_block_data(heading.id, {"text": "x" * 301})

        result = draft.submit()

        assert not result.success
        assert result.errors[0].code == "invalid_field"
        assert result.errors[0].field == "text"
