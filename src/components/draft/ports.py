"""Draft component port definitions."""

from datetime import datetime
from typing import Protocol

from src.domain.entities import ContentBlock


class ClockPort(Protocol):
    def now(self) -> datetime:
        """Return current UTC time."""
        ...


class BlockValidatorPort(Protocol):
    def validate(self, block: ContentBlock) -> None:
        """Raise a ValidationFailure if the block is not acceptable."""
        ...
