"""
Assets component unit tests.
"""

from __future__ import annotations

from uuid import uuid4

import pytest

from src.components.assets import (
    AssetMetadata,
    UploadInput,
    discard_assets,
    run_upload,
    validate_upload,
)
from src.domain.errors import StorageFailureError

PNG_BYTES = b"\x89PNG\r\n\x1a\n" + b"\x00" * 16


class MockAssetStore:
    def __init__(self) -> None:
        self.stored: dict[str, bytes] = {}
        self.fail_store = False
        self.fail_delete: set[str] = set()

    def store(self, data: bytes, metadata: AssetMetadata) -> str:
        if self.fail_store:
            raise StorageFailureError("bucket unavailable")
        url = f"/assets/{len(self.stored)}-{metadata.filename}"
        self.stored[url] = data
        return url

    def delete(self, url: str) -> None:
        if url in self.fail_delete:
            raise StorageFailureError("cannot delete")
        self.stored.pop(url, None)


class MockRules:
    def get_max_upload_bytes(self) -> int:
        return 10

    def get_allowed_mime_types(self) -> list[str]:
        return ["image/png"]


@pytest.fixture
def store() -> MockAssetStore:
    return MockAssetStore()


class TestValidateUpload:
    def test_defaults_accept_common_images(self) -> None:
        assert validate_upload("image/webp", 1024) == []
        assert validate_upload("image/jpeg; charset=binary", 1024) == []

    def test_rejects_other_types(self) -> None:
        errors = validate_upload("application/pdf", 1024)
        assert [e.code for e in errors] == ["invalid_file_type"]

    def test_empty_and_oversized(self) -> None:
        assert validate_upload("image/png", 0)[0].code == "empty_file"
        assert validate_upload("image/png", 5 * 1024 * 1024 + 1)[0].code == "file_too_large"

    def test_configured_limits(self) -> None:
        assert validate_upload("image/png", 11, rules=MockRules())[0].code == "file_too_large"
        assert validate_upload("image/gif", 5, rules=MockRules())[0].code == "invalid_file_type"


class TestRunUpload:
    def test_upload_success(self, store: MockAssetStore) -> None:
        inp = UploadInput(
            data=PNG_BYTES, filename="a.png", content_type="image/png", owner_id=uuid4()
        )
        result = run_upload(inp, store=store)

        assert result.success
        assert store.stored[result.url] == PNG_BYTES

    def test_invalid_upload_is_not_stored(self, store: MockAssetStore) -> None:
        inp = UploadInput(data=b"%PDF", filename="a.pdf", content_type="application/pdf")
        result = run_upload(inp, store=store)

        assert not result.success
        assert result.retryable is False
        assert store.stored == {}

    def test_store_failure_is_retryable(self, store: MockAssetStore) -> None:
        store.fail_store = True
        inp = UploadInput(data=PNG_BYTES, filename="a.png", content_type="image/png")
        result = run_upload(inp, store=store)

        assert not result.success
        assert result.errors[0].code == "storage_failure"
        assert result.retryable is True


class TestDiscardAssets:
    def test_failures_are_logged_not_raised(self, store: MockAssetStore) -> None:
        store.stored = {"/assets/a": b"a", "/assets/b": b"b"}
        store.fail_delete = {"/assets/a"}

        deleted = discard_assets(["/assets/a", "/assets/b"], store=store)

        assert deleted == 1
        assert list(store.stored) == ["/assets/a"]
