"""
Assets component - image upload validation and storage.
"""

from .component import (
    DEFAULT_ALLOWED_MIME_TYPES,
    DEFAULT_MAX_UPLOAD_BYTES,
    discard_assets,
    run_upload,
    validate_upload,
)
from .models import AssetMetadata, AssetValidationError, UploadInput, UploadOutput
from .ports import AssetStorePort, RulesPort

__all__ = [
    # Entry points
    "discard_assets",
    "run_upload",
    "validate_upload",
    # Defaults
    "DEFAULT_ALLOWED_MIME_TYPES",
    "DEFAULT_MAX_UPLOAD_BYTES",
    # Models
    "AssetMetadata",
    "AssetValidationError",
    "UploadInput",
    "UploadOutput",
    # Ports
    "AssetStorePort",
    "RulesPort",
]
