"""
Draft component - in-session authoring state for a new post.
"""

from .component import DraftHandle, compose_new_post
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

__all__ = [
    # Entry points
    "DraftHandle",
    "compose_new_post",
    # Models
    "COVER",
    "CoverSlot",
    "DraftBlock",
    "DraftValidationError",
    "SubmitOutput",
    "UploadSlot",
    "UploadState",
    # Ports
    "BlockValidatorPort",
    "ClockPort",
]
