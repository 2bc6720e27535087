"""Publish component - atomic post creation and author-only deletion."""

import logging

from src.components.publish.models import (
    CommitInput,
    CommitOutput,
    DeleteInput,
    DeleteOutput,
    PublishValidationError,
)
from src.components.publish.ports import BlockValidatorPort, ClockPort, PostRepoPort
from src.domain.errors import (
    DomainError,
    ForbiddenError,
    NotFoundError,
    StorageFailureError,
    TooManyBlocksError,
)
from src.domain.post import collect_post_errors, create_post, ensure_can_delete

logger = logging.getLogger(__name__)

# Type alias for all supported inputs
PublishInput = CommitInput | DeleteInput
PublishOutput = CommitOutput | DeleteOutput


def _to_error(e: DomainError) -> PublishValidationError:
    return PublishValidationError(code=e.code, message=e.message, field=e.field)


class PublishComponent:
    """Component that turns a submitted payload into a stored post."""

    def __init__(
        self,
        repo: PostRepoPort,
        clock: ClockPort,
        validator: BlockValidatorPort | None = None,
        max_blocks: int | None = None,
    ) -> None:
        self._repo = repo
        self._clock = clock
        self._validator = validator
        self._max_blocks = max_blocks

    def run(self, input_data: PublishInput) -> PublishOutput:
        """Main dispatcher - routes to appropriate handler based on input type."""
        if isinstance(input_data, CommitInput):
            return self.run_commit(input_data)
        elif isinstance(input_data, DeleteInput):
            return self.run_delete(input_data)
        else:
            raise TypeError(f"Unknown input type: {type(input_data)}")

    def run_commit(self, input_data: CommitInput) -> CommitOutput:
        """Validate the payload again and store post + blocks in one transaction."""
        if input_data.author_id is None:
            return CommitOutput(
                post_id=None,
                failure="unauthenticated",
                errors=[
                    PublishValidationError(
                        code="unauthenticated",
                        message="Sign in to publish",
                        field="author_id",
                    )
                ],
                success=False,
            )

        payload = input_data.payload
        blocks = payload.to_blocks()

        # Client-side validation is never trusted
        reasons = collect_post_errors(payload.title, blocks, self._validator)
        if self._max_blocks is not None and len(blocks) > self._max_blocks:
            reasons.append(TooManyBlocksError(len(blocks), self._max_blocks))
        if reasons:
            return CommitOutput(
                post_id=None,
                failure="validation_failed",
                errors=[_to_error(e) for e in reasons],
                success=False,
            )

        post = create_post(
            payload.title,
            payload.cover_image_url,
            input_data.author_id,
            payload.published,
            blocks,
            now=self._clock.now(),
            validator=None,
        )

        try:
            post_id = self._repo.create_post_with_blocks(post)
        except StorageFailureError as e:
            logger.exception("Storing post for author %s failed", input_data.author_id)
            return CommitOutput(
                post_id=None, failure="storage_failure", errors=[_to_error(e)], success=False
            )

        logger.info(
            "Created post %s with %d block(s) for author %s",
            post_id,
            len(post.blocks),
            input_data.author_id,
        )
        return CommitOutput(post_id=post_id, failure=None, errors=[], success=True)

    def run_delete(self, input_data: DeleteInput) -> DeleteOutput:
        """Delete a post if the requesting principal is its author."""
        if input_data.principal_id is None:
            return DeleteOutput(
                post=None,
                failure="unauthenticated",
                errors=[
                    PublishValidationError(
                        code="unauthenticated",
                        message="Sign in to delete posts",
                        field="principal_id",
                    )
                ],
                success=False,
            )

        try:
            post = ensure_can_delete(
                self._repo.find_post_by_id(input_data.post_id), input_data.principal_id
            )
            self._repo.delete_post(post.id)
        except NotFoundError as e:
            return DeleteOutput(
                post=None, failure="not_found", errors=[_to_error(e)], success=False
            )
        except ForbiddenError as e:
            return DeleteOutput(
                post=None, failure="forbidden", errors=[_to_error(e)], success=False
            )
        except StorageFailureError as e:
            logger.exception("Deleting post %s failed", input_data.post_id)
            return DeleteOutput(
                post=None, failure="storage_failure", errors=[_to_error(e)], success=False
            )

        logger.info("Deleted post %s", post.id)
        return DeleteOutput(post=post, failure=None, errors=[], success=True)
