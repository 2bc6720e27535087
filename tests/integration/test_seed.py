from seed_db import SEED_AUTHOR_ID, seed
from src.adapters.sqlite.repos import SQLiteAuthorRepo
from src.app_shell.cli import db_path, get_service


def test_seed_creates_author_and_sample_posts(tmp_path):
    data_dir = str(tmp_path / "data")

    seed(data_dir)

    service = get_service(data_dir)
    author = SQLiteAuthorRepo(db_path(data_dir)).get_by_id(SEED_AUTHOR_ID)
    mine = service.list_previews(author_only=SEED_AUTHOR_ID).items
    public = service.list_previews().items

    assert author is not None and author.display_name == "Admin User"
    assert len(mine) == 3
    assert len(public) == 2


def test_seed_is_rerunnable(tmp_path):
    data_dir = str(tmp_path / "data")

    seed(data_dir)
    seed(data_dir)

    service = get_service(data_dir)
    assert len(service.list_previews(author_only=SEED_AUTHOR_ID).items) == 3
