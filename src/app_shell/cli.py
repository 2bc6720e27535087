import argparse
import json
import logging
import os
import sys
from dataclasses import asdict
from pathlib import Path
from typing import Any
from uuid import UUID

import yaml

from src.adapters.asset_store import LocalAssetStore
from src.adapters.clock import SystemClock
from src.adapters.fs.filestore import FileSystemStore
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteAuthorRepo, SQLitePostRepo
from src.components.draft import DraftHandle
from src.components.render import SkipInstruction
from src.domain.errors import ValidationFailure
from src.rules.loader import load_rules
from src.services.publishing import PublishingService

logger = logging.getLogger("cli")

DATA_DIR = os.environ.get("BLOCKPRESS_DATA_DIR", "./data")
RULES_PATH = os.environ.get("BLOCKPRESS_RULES_PATH", "rules.yaml")
MIGRATIONS_DIR = "migrations"


def db_path(data_dir: str) -> str:
    return str(Path(data_dir) / "blockpress.db")


def get_service(data_dir: str = DATA_DIR, rules_path: str = RULES_PATH) -> PublishingService:
    if not Path(rules_path).exists():
        logger.error("Rules file %s not found.", rules_path)
        sys.exit(1)

    rules = load_rules(Path(rules_path))
    filestore = FileSystemStore(Path(data_dir) / "assets")
    return PublishingService(
        post_repo=SQLitePostRepo(db_path(data_dir)),
        author_repo=SQLiteAuthorRepo(db_path(data_dir)),
        asset_store=LocalAssetStore(
            filestore, base_url=os.environ.get("BLOCKPRESS_ASSET_BASE_URL", "/assets")
        ),
        clock=SystemClock(),
        rules=rules,
    )


def load_document(path: Path) -> dict[str, Any]:
    """Read a post document. JSON is valid YAML, so one parser covers both."""
    with open(path, encoding="utf-8") as f:
        doc = yaml.safe_load(f)
    if not isinstance(doc, dict):
        raise ValueError(f"{path}: expected a mapping with 'title' and 'blocks'")
    return doc


def fill_draft(draft: DraftHandle, doc: dict[str, Any]) -> None:
    draft.set_title(str(doc.get("title") or ""))
    draft.set_published(bool(doc.get("published", True)))
    draft.set_cover_image_url(doc.get("cover_image_url"))
    for entry in doc.get("blocks") or []:
        if not isinstance(entry, dict):
            raise ValueError(f"Block entries must be mappings, got {entry!r}")
        block = draft.append_block(entry.get("type", ""))
        draft.update_block_data(block.id, entry.get("data") or {})


# --- Commands ---


def handle_migrate(args: argparse.Namespace) -> int:
    Path(args.data_dir).mkdir(parents=True, exist_ok=True)
    migrator = SQLiteMigrator(db_path(args.data_dir), MIGRATIONS_DIR)
    applied = migrator.run_migrations()
    print(f"Applied {len(applied)} migration(s).")
    return 0


def handle_publish(service: PublishingService, args: argparse.Namespace) -> int:
    author_id = UUID(args.author)
    draft = service.compose_new_post(author_id)
    try:
        fill_draft(draft, load_document(Path(args.file)))
    except ValidationFailure as e:
        print(f"Error: {e.message}", file=sys.stderr)
        return 1

    submitted = service.submit_draft(draft)
    for block_id in submitted.blocks_dropped:
        print(f"Dropped image block without upload: {block_id}")
    if not submitted.success or submitted.payload is None:
        for err in submitted.errors:
            print(f"Error [{err.code}]: {err.message}", file=sys.stderr)
        return 1

    result = service.publish(submitted.payload, author_id)
    if not result.success:
        for err in result.errors:
            print(f"Error [{err.code}]: {err.message}", file=sys.stderr)
        return 2 if result.retryable else 1

    print(f"Published post {result.post_id}")
    return 0


def handle_list(service: PublishingService, args: argparse.Namespace) -> int:
    author_only = UUID(args.author) if args.author else None
    result = service.list_previews(search=args.search, author_only=author_only)
    if not result.success:
        for err in result.errors:
            print(f"Error [{err.code}]: {err.message}", file=sys.stderr)
        return 2

    for item in result.items:
        flag = "" if item.published else " [draft]"
        byline = item.author.display_name or item.author.initials or "?"
        print(f"{item.post_id}  {item.created_at:%Y-%m-%d}  {item.title}{flag}  ({byline})")
        if item.excerpt:
            print(f"    {item.excerpt}")
    print(f"{len(result.items)} post(s).")
    return 0


def handle_show(service: PublishingService, args: argparse.Namespace) -> int:
    result = service.render_post(UUID(args.post_id), viewer_id=None)
    if not result.success or result.post is None:
        for err in result.errors:
            print(f"Error [{err.code}]: {err.message}", file=sys.stderr)
        return 2 if result.failure == "storage_failure" else 1

    print(f"# {result.post.title}")
    if result.post.cover_image_url:
        print(f"[cover: {result.post.cover_image_url}]")
    for instruction in result.instructions:
        if isinstance(instruction, SkipInstruction):
            continue
        print(json.dumps({"kind": instruction.kind, **asdict(instruction)}, default=str))
    return 0


def handle_delete(service: PublishingService, args: argparse.Namespace) -> int:
    result = service.delete_post(UUID(args.post_id), UUID(args.principal))
    if not result.success:
        for err in result.errors:
            print(f"Error [{err.code}]: {err.message}", file=sys.stderr)
        return 2 if result.failure == "storage_failure" else 1

    print(f"Deleted post {args.post_id}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Blockpress CLI")
    parser.add_argument("--data-dir", default=DATA_DIR, help="Directory for db and assets")
    parser.add_argument("--rules", default=RULES_PATH, help="Path to rules.yaml")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # migrate
    subparsers.add_parser("migrate", help="Apply pending database migrations")

    # publish
    publish_parser = subparsers.add_parser("publish", help="Publish a post from a YAML/JSON file")
    publish_parser.add_argument("file", help="Post document (title, blocks, ...)")
    publish_parser.add_argument("--author", required=True, help="Author UUID")

    # list
    list_parser = subparsers.add_parser("list", help="List post previews")
    list_parser.add_argument("--search", help="Filter by title or author name")
    list_parser.add_argument("--author", help="List this author's posts, drafts included")

    # show
    show_parser = subparsers.add_parser("show", help="Render a published post")
    show_parser.add_argument("post_id")

    # delete
    delete_parser = subparsers.add_parser("delete", help="Delete a post")
    delete_parser.add_argument("post_id")
    delete_parser.add_argument("--principal", required=True, help="UUID of the caller")

    return parser


def main(argv: list[str] | None = None) -> int:
    logging.basicConfig(level=logging.INFO)
    args = build_parser().parse_args(argv)

    if args.command == "migrate":
        return handle_migrate(args)

    service = get_service(args.data_dir, args.rules)
    try:
        if args.command == "publish":
            return handle_publish(service, args)
        elif args.command == "list":
            return handle_list(service, args)
        elif args.command == "show":
            return handle_show(service, args)
        elif args.command == "delete":
            return handle_delete(service, args)
    except ValueError as e:
        # Malformed UUIDs and documents
        logger.error("%s", e)
        return 1
    return 1


if __name__ == "__main__":
    sys.exit(main())
