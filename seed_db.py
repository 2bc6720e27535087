"""Seed a local database with one author and a few sample posts."""

import logging
import os
from pathlib import Path
from uuid import UUID

from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteAuthorRepo
from src.app_shell.cli import db_path, fill_draft, get_service
from src.domain.entities import Author

logger = logging.getLogger("seed")

SEED_AUTHOR_ID = UUID("5f0c3a52-8a6e-4c1e-9d7b-2b1a9c4e7f10")

SAMPLE_POSTS = [
    {
        "title": "First Day on Campus: A Survival Guide",
        "cover_image_url": "https://placehold.co/600x400/A8D5E2/FFFFFF?text=Campus+View",
        "published": True,
        "blocks": [
            {
                "type": "PARAGRAPH",
                "data": {
                    "text": "Navigating your first day can be tough. Here are some tips to "
                    "make it a breeze and start your semester right! This is the full "
                    "content of the post, which is longer than the excerpt."
                },
            },
            {"type": "HEADING_TWO", "data": {"text": "Before you arrive"}},
            {"type": "LIST_ITEM", "data": {"text": "Print your timetable"}},
            {"type": "LIST_ITEM", "data": {"text": "Find the nearest coffee"}},
        ],
    },
    {
        "title": "The Best Study Spots in the Library",
        "cover_image_url": "https://placehold.co/600x400/F9A826/FFFFFF?text=Library+Books",
        "published": True,
        "blocks": [
            {"type": "HEADING_ONE", "data": {"text": "Quiet corners"}},
            {
                "type": "PARAGRAPH",
                "data": {
                    "text": "Tired of the noisy dorm? Discover the hidden gems in the "
                    "university library where you can actually get work done. This is "
                    "the full content of the post."
                },
            },
        ],
    },
    {
        "title": "Joining a Club: My Experience (Draft)",
        "published": False,
        "blocks": [
            {
                "type": "PARAGRAPH",
                "data": {
                    "text": "From the coding club to the hiking society, joining a student "
                    "organization was the best decision I ever made. This post is "
                    "currently a draft and should not be visible on the main page."
                },
            },
            {"type": "CODE", "data": {"code": "print('hello, club')"}},
        ],
    },
]


def seed(data_dir: str | None = None) -> None:
    data_dir = data_dir or os.environ.get("BLOCKPRESS_DATA_DIR", "./data")
    Path(data_dir).mkdir(parents=True, exist_ok=True)
    logger.info("Seeding to %s", db_path(data_dir))

    SQLiteMigrator(db_path(data_dir), "migrations").run_migrations()
    service = get_service(data_dir)
    author_repo = SQLiteAuthorRepo(db_path(data_dir))

    if author_repo.get_by_id(SEED_AUTHOR_ID) is not None:
        # Re-runnable: replace the sample author's previous posts
        logger.info("Author %s already seeded, replacing sample posts", SEED_AUTHOR_ID)
        for item in service.list_previews(author_only=SEED_AUTHOR_ID).items:
            service.delete_post(item.post_id, SEED_AUTHOR_ID)
    else:
        author_repo.save(Author(id=SEED_AUTHOR_ID, display_name="Admin User"))
        logger.info("Created author Admin User (ID: %s)", SEED_AUTHOR_ID)

    for doc in SAMPLE_POSTS:
        draft = service.compose_new_post(SEED_AUTHOR_ID)
        fill_draft(draft, doc)

        submitted = service.submit_draft(draft)
        if not submitted.success or submitted.payload is None:
            raise RuntimeError(f"Sample post {doc['title']!r} did not validate: {submitted.errors}")

        result = service.publish(submitted.payload, SEED_AUTHOR_ID)
        if not result.success:
            raise RuntimeError(f"Sample post {doc['title']!r} failed: {result.errors}")
        logger.info("Created post %s", result.post_id)

    logger.info("Seeding finished.")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    seed()
