"""
Preview component - post summaries for listings.
"""

from .component import (
    author_display,
    compute_initials,
    is_absolute_http_url,
    make_excerpt,
    project,
    run_list,
)
from .models import (
    DEFAULT_PREVIEW_CONFIG,
    AuthorDisplay,
    ListPreviewsInput,
    PreviewConfig,
    PreviewDTO,
    PreviewError,
    PreviewListOutput,
)
from .ports import AuthorRepoPort, PostQueryPort

__all__ = [
    # Entry points
    "run_list",
    "project",
    # Helpers
    "author_display",
    "compute_initials",
    "is_absolute_http_url",
    "make_excerpt",
    # Models
    "DEFAULT_PREVIEW_CONFIG",
    "AuthorDisplay",
    "ListPreviewsInput",
    "PreviewConfig",
    "PreviewDTO",
    "PreviewError",
    "PreviewListOutput",
    # Ports
    "AuthorRepoPort",
    "PostQueryPort",
]
