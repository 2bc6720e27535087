"""
Domain error hierarchy.

Every error carries a stable ``code`` so component outputs and the HTTP layer
can report it without string matching. Validation errors are also
``ValueError`` so existing ``except ValueError`` sites keep working.
"""

from __future__ import annotations


class DomainError(Exception):
    code = "domain_error"
    retryable = False

    def __init__(self, message: str, *, field: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.field = field


# --- Input / validation ---


class ValidationFailure(DomainError, ValueError):
    code = "validation_failed"


class InvalidBlockTypeError(ValidationFailure):
    code = "invalid_block_type"

    def __init__(self, block_type: object, *, field: str | None = "block_type") -> None:
        super().__init__(f"Block type '{block_type}' is not allowed.", field=field)
        self.block_type = block_type


class MissingRequiredFieldError(ValidationFailure):
    code = "missing_required_field"


class BlockFieldError(ValidationFailure):
    code = "invalid_field"


class EmptyTitleError(ValidationFailure):
    code = "title_required"

    def __init__(self) -> None:
        super().__init__("Title is required", field="title")


class NoBlocksError(ValidationFailure):
    code = "no_blocks"

    def __init__(self) -> None:
        super().__init__("At least one content block is required", field="blocks")


class IncompleteUploadError(ValidationFailure):
    code = "incomplete_upload"

    def __init__(self, block_id: str | None = None) -> None:
        ref = f" ({block_id})" if block_id else ""
        super().__init__(
            f"Image block{ref} has no uploaded image. Upload it or remove the block.",
            field="blocks",
        )
        self.block_id = block_id


class PendingUploadsError(ValidationFailure):
    code = "pending_uploads"

    def __init__(self, slots: list[str]) -> None:
        super().__init__(
            f"Wait for {len(slots)} upload(s) to finish before submitting", field="uploads"
        )
        self.slots = slots


class TooManyBlocksError(ValidationFailure):
    code = "too_many_blocks"

    def __init__(self, count: int, limit: int) -> None:
        super().__init__(f"Too many blocks ({count} > {limit})", field="blocks")


# --- Authorization / lookup ---


class ForbiddenError(DomainError):
    code = "forbidden"


class NotFoundError(DomainError, LookupError):
    code = "not_found"


# --- Collaborator faults ---


class StorageFailureError(DomainError):
    code = "storage_failure"
    retryable = True
