"""
Assets component port definitions.
"""

from __future__ import annotations

from typing import Protocol

from .models import AssetMetadata


class AssetStorePort(Protocol):
    """Binary storage that hands back stable URLs."""

    def store(self, data: bytes, metadata: AssetMetadata) -> str:
        """Store bytes and return the URL they are served from.

        Raises StorageFailureError if the bytes could not be written.
        """
        ...

    def delete(self, url: str) -> None:
        """Delete by URL. URLs the store does not own are ignored."""
        ...


class RulesPort(Protocol):
    """Upload limits from rules.yaml."""

    def get_max_upload_bytes(self) -> int: ...

    def get_allowed_mime_types(self) -> list[str]: ...
