"""
Render component - stored blocks to display instructions.
"""

from .component import (
    BLOCK_RENDERERS,
    render,
    render_block,
    run_render_post,
)
from .models import (
    CodeInstruction,
    HeadingInstruction,
    ImageInstruction,
    ListItemInstruction,
    ParagraphInstruction,
    RenderInstruction,
    RenderPostInput,
    RenderPostOutput,
    RenderValidationError,
    SkipInstruction,
)
from .ports import PostRepoPort

__all__ = [
    # Entry points
    "BLOCK_RENDERERS",
    "render",
    "render_block",
    "run_render_post",
    # Instructions
    "CodeInstruction",
    "HeadingInstruction",
    "ImageInstruction",
    "ListItemInstruction",
    "ParagraphInstruction",
    "RenderInstruction",
    "SkipInstruction",
    # Input/output models
    "RenderPostInput",
    "RenderPostOutput",
    "RenderValidationError",
    # Ports
    "PostRepoPort",
]
