import os
from datetime import UTC, datetime
from pathlib import Path
from uuid import UUID, uuid4

import pytest

from src.adapters.asset_store import LocalAssetStore
from src.adapters.clock import FixedClock
from src.adapters.fs.filestore import FileSystemStore
from src.adapters.sqlite.migrator import SQLiteMigrator
from src.adapters.sqlite.repos import SQLiteAuthorRepo, SQLitePostRepo
from src.domain.entities import Author
from src.rules.loader import load_rules
from src.rules.models import Rules
from src.services.publishing import PublishingService


@pytest.fixture
def test_data_dir(tmp_path):
    return str(tmp_path)


@pytest.fixture
def rules() -> Rules:
    # Load REAL rules from project root (tests run from project root)
    rules_path = Path("rules.yaml").resolve()
    if not rules_path.exists():
        raise FileNotFoundError(f"Rules not found at {rules_path}")
    return load_rules(rules_path)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(datetime(2025, 1, 1, 12, 0, 0, tzinfo=UTC))


@pytest.fixture
def db_path(test_data_dir) -> str:
    path = os.path.join(test_data_dir, "blockpress.db")
    SQLiteMigrator(path, "migrations").run_migrations()
    return path


@pytest.fixture
def post_repo(db_path) -> SQLitePostRepo:
    return SQLitePostRepo(db_path)


@pytest.fixture
def author_repo(db_path) -> SQLiteAuthorRepo:
    return SQLiteAuthorRepo(db_path)


@pytest.fixture
def asset_store(test_data_dir) -> LocalAssetStore:
    return LocalAssetStore(FileSystemStore(os.path.join(test_data_dir, "assets")))


@pytest.fixture
def author(author_repo) -> Author:
    return author_repo.save(Author(id=uuid4(), display_name="Ada Lovelace"))


@pytest.fixture
def author_id(author) -> UUID:
    return author.id


@pytest.fixture
def service(post_repo, author_repo, asset_store, clock, rules) -> PublishingService:
    """
    A full PublishingService backed by a temporary SQLite DB and file store.
    """
    return PublishingService(
        post_repo=post_repo,
        author_repo=author_repo,
        asset_store=asset_store,
        clock=clock,
        rules=rules,
    )
