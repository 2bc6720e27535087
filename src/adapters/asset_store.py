"""
Local asset store.

Keeps uploaded image bytes in a FileSystemStore under fresh random keys and
serves them from ``<base_url>/<key>``. Only URLs under ``base_url`` are
treated as owned; anything else (external placeholders, CDN links) is left
alone on delete.
"""

from __future__ import annotations

import logging
import mimetypes
from pathlib import PurePosixPath
from uuid import uuid4

from src.adapters.fs.filestore import FileSystemStore
from src.components.assets.models import AssetMetadata
from src.domain.errors import StorageFailureError

logger = logging.getLogger(__name__)

_EXTENSIONS = {
    "image/jpeg": ".jpg",
    "image/jpg": ".jpg",
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}


def extension_for(content_type: str, filename: str = "") -> str:
    base_type = content_type.split(";")[0].strip().lower()
    if base_type in _EXTENSIONS:
        return _EXTENSIONS[base_type]
    guessed = mimetypes.guess_extension(base_type)
    if guessed:
        return guessed
    return PurePosixPath(filename).suffix.lower()


class LocalAssetStore:
    def __init__(self, filestore: FileSystemStore, base_url: str = "/assets"):
        self.filestore = filestore
        self.base_url = base_url.rstrip("/")

    def url_for(self, key: str) -> str:
        return f"{self.base_url}/{key}"

    def key_for(self, url: str) -> str | None:
        """Storage key for a URL this store issued, else None."""
        prefix = f"{self.base_url}/"
        if not url.startswith(prefix):
            return None
        key = url[len(prefix) :]
        if not key or "/" in key:
            return None
        return key

    def store(self, data: bytes, metadata: AssetMetadata) -> str:
        key = f"{uuid4().hex}{extension_for(metadata.content_type, metadata.filename)}"
        try:
            self.filestore.save(key, data)
        except OSError as e:
            raise StorageFailureError(f"Could not store {metadata.filename}: {e}") from e
        return self.url_for(key)

    def delete(self, url: str) -> None:
        key = self.key_for(url)
        if key is None:
            logger.debug("Not deleting foreign asset URL %s", url)
            return
        try:
            self.filestore.delete(key)
        except OSError as e:
            raise StorageFailureError(f"Could not delete {url}: {e}") from e
