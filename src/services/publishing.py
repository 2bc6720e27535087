"""
Publishing service - the operations offered to the HTTP and CLI shells.

Wires the draft, publish, preview, render and assets components to concrete
repositories, the asset store and the clock.
"""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import Protocol
from uuid import UUID

from src.components.assets import (
    AssetStorePort,
    UploadInput,
    UploadOutput,
    discard_assets,
    run_upload,
)
from src.components.draft import DraftHandle, SubmitOutput
from src.components.preview import (
    AuthorRepoPort,
    ListPreviewsInput,
    PostQueryPort,
    PreviewConfig,
    PreviewListOutput,
    run_list,
)
from src.components.publish import (
    ClockPort,
    CommitInput,
    CommitOutput,
    DeleteInput,
    DeleteOutput,
    PostRepoPort,
    PublishComponent,
)
from src.components.render import RenderPostInput, RenderPostOutput, run_render_post
from src.domain.blocks import BlockValidator
from src.domain.entities import ValidatedPayload
from src.domain.post import referenced_asset_urls
from src.rules.models import Rules

logger = logging.getLogger(__name__)


class PostStore(PostRepoPort, PostQueryPort, Protocol):
    """Everything the service needs from post persistence."""


class UploadRulesAdapter:
    """Adapter to map generic Rules to the assets component RulesPort."""

    def __init__(self, rules: Rules):
        self._rules = rules.uploads

    def get_max_upload_bytes(self) -> int:
        return self._rules.max_upload_bytes

    def get_allowed_mime_types(self) -> list[str]:
        return self._rules.allowlist_mime_types


class PublishingService:
    def __init__(
        self,
        post_repo: PostStore,
        author_repo: AuthorRepoPort,
        asset_store: AssetStorePort,
        clock: ClockPort,
        rules: Rules,
    ):
        self.post_repo = post_repo
        self.author_repo = author_repo
        self.asset_store = asset_store
        self.clock = clock
        self.rules = rules
        self.validator = BlockValidator(rules.blocks)
        self.preview_config = PreviewConfig(
            excerpt_length=rules.preview.excerpt_length,
            ellipsis=rules.preview.ellipsis,
        )
        self._publisher = PublishComponent(
            repo=post_repo,
            clock=clock,
            validator=self.validator,
            max_blocks=rules.blocks.max_blocks_per_item,
        )
        self.upload_timeout = timedelta(seconds=rules.drafts.upload_timeout_seconds)

    def compose_new_post(self, author_id: UUID) -> DraftHandle:
        return DraftHandle(author_id, clock=self.clock, validator=self.validator)

    def submit_draft(self, draft: DraftHandle) -> SubmitOutput:
        """Give up on uploads older than the configured timeout, then submit."""
        draft.abandon_stale_uploads(self.upload_timeout)
        return draft.submit()

    def publish(self, payload: ValidatedPayload, author_id: UUID | None) -> CommitOutput:
        return self._publisher.run_commit(CommitInput(payload=payload, author_id=author_id))

    def list_previews(
        self,
        search: str | None = None,
        author_only: UUID | None = None,
    ) -> PreviewListOutput:
        return run_list(
            ListPreviewsInput(search=search, author_only=author_only),
            repo=self.post_repo,
            author_repo=self.author_repo,
            config=self.preview_config,
        )

    def render_post(self, post_id: UUID, viewer_id: UUID | None = None) -> RenderPostOutput:
        return run_render_post(
            RenderPostInput(post_id=post_id, viewer_id=viewer_id), repo=self.post_repo
        )

    def delete_post(self, post_id: UUID, principal_id: UUID | None) -> DeleteOutput:
        result = self._publisher.run_delete(
            DeleteInput(post_id=post_id, principal_id=principal_id)
        )
        if result.success and result.post is not None:
            urls = referenced_asset_urls(result.post)
            if urls:
                removed = discard_assets(urls, store=self.asset_store)
                logger.info("Cleaned up %d/%d asset(s) of post %s", removed, len(urls), post_id)
        return result

    def upload_asset(
        self,
        data: bytes,
        filename: str,
        content_type: str,
        owner_id: UUID | None = None,
    ) -> UploadOutput:
        return run_upload(
            UploadInput(data=data, filename=filename, content_type=content_type, owner_id=owner_id),
            store=self.asset_store,
            rules=UploadRulesAdapter(self.rules),
        )
