from datetime import UTC, datetime
from uuid import uuid4

import pytest

from src.domain.entities import BlockType, ContentBlock, Post, ValidatedPayload
from src.domain.errors import (
    EmptyTitleError,
    ForbiddenError,
    IncompleteUploadError,
    InvalidBlockTypeError,
    NoBlocksError,
    NotFoundError,
)
from src.domain.post import (
    collect_post_errors,
    create_post,
    ensure_can_delete,
    referenced_asset_urls,
)

NOW = datetime(2025, 1, 1, 12, 0, tzinfo=UTC)


def _para(text="Hi there"):
    return ContentBlock(block_type="PARAGRAPH", data_json={"text": text})


def _image(url=""):
    return ContentBlock(block_type="IMAGE", data_json={"url": url, "caption": "", "alt": ""})


def test_block_type_parse():
    assert BlockType.parse("IMAGE") is BlockType.IMAGE
    assert BlockType.parse(BlockType.CODE) is BlockType.CODE
    assert BlockType.parse("image") is None
    assert BlockType.parse(None) is None


def test_create_post_assigns_order_and_fresh_ids():
    blocks = [_para("a"), _image("/assets/x.png"), _para("c")]
    author_id = uuid4()

    post = create_post("  Hello ", "", author_id, True, blocks, now=NOW)

    assert post.title == "Hello"
    assert post.cover_image_url is None
    assert post.author_id == author_id
    assert post.created_at == NOW
    assert [b.order for b in post.blocks] == [1, 2, 3]
    assert [b.data_json for b in post.blocks] == [b.data_json for b in blocks]
    assert {b.id for b in post.blocks}.isdisjoint({b.id for b in blocks})


def test_create_post_does_not_mutate_input():
    blocks = [_para()]
    create_post("Hello", None, uuid4(), True, blocks, now=NOW)
    assert blocks[0].order == 0


def test_empty_blocks_always_no_blocks():
    with pytest.raises(NoBlocksError):
        create_post("", None, uuid4(), True, [], now=NOW)
    with pytest.raises(NoBlocksError):
        create_post("Fine title", None, uuid4(), True, [], now=NOW)


def test_incomplete_image_always_incomplete_upload():
    with pytest.raises(IncompleteUploadError):
        create_post("", None, uuid4(), True, [_para(), _image("")], now=NOW)


def test_empty_title():
    with pytest.raises(EmptyTitleError):
        create_post("   ", None, uuid4(), True, [_para()], now=NOW)


def test_unknown_block_type_without_validator():
    block = ContentBlock(block_type="QUOTE", data_json={"text": "x"})
    with pytest.raises(InvalidBlockTypeError):
        create_post("Hello", None, uuid4(), True, [block], now=NOW)


def test_collect_post_errors_priority():
    errors = collect_post_errors("", [_image(""), _image("")])
    assert [e.code for e in errors] == ["incomplete_upload", "incomplete_upload", "title_required"]


def test_ensure_can_delete():
    post = Post(title="P", author_id=uuid4())

    assert ensure_can_delete(post, post.author_id) is post
    with pytest.raises(ForbiddenError):
        ensure_can_delete(post, uuid4())
    with pytest.raises(NotFoundError):
        ensure_can_delete(None, uuid4())


def test_referenced_asset_urls():
    post = Post(
        title="P",
        author_id=uuid4(),
        cover_image_url="/assets/cover.jpg",
        blocks=[_para(), _image("/assets/a.png"), _image("")],
    )
    assert referenced_asset_urls(post) == ["/assets/cover.jpg", "/assets/a.png"]


def test_validated_payload_to_blocks():
    payload = ValidatedPayload.model_validate(
        {"title": "T", "blocks": [{"order": 1, "block_type": "CODE", "data": {"code": "x"}}]}
    )
    blocks = payload.to_blocks()
    assert blocks[0].block_type == "CODE"
    assert blocks[0].data_json == {"code": "x"}
