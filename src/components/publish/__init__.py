"""Publish component - public API."""

from src.components.publish.component import PublishComponent
from src.components.publish.models import (
    CommitFailure,
    CommitInput,
    CommitOutput,
    DeleteFailure,
    DeleteInput,
    DeleteOutput,
    PublishValidationError,
)
from src.components.publish.ports import BlockValidatorPort, ClockPort, PostRepoPort

__all__ = [
    # Component
    "PublishComponent",
    # Models
    "CommitFailure",
    "CommitInput",
    "CommitOutput",
    "DeleteFailure",
    "DeleteInput",
    "DeleteOutput",
    "PublishValidationError",
    # Ports
    "BlockValidatorPort",
    "ClockPort",
    "PostRepoPort",
]
