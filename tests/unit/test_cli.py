from uuid import uuid4

import pytest
import yaml

from src.app_shell.cli import main


@pytest.fixture
def data_dir(tmp_path):
    d = tmp_path / "data"
    assert main(["--data-dir", str(d), "migrate"]) == 0
    return d


def _write_doc(tmp_path, doc, name="post.yaml"):
    path = tmp_path / name
    path.write_text(yaml.safe_dump(doc))
    return path


def _publish(tmp_path, data_dir, author_id, capsys, doc):
    path = _write_doc(tmp_path, doc)
    code = main(["--data-dir", str(data_dir), "publish", str(path), "--author", str(author_id)])
    out = capsys.readouterr().out
    return code, out


def test_migrate_is_idempotent(data_dir, capsys):
    assert main(["--data-dir", str(data_dir), "migrate"]) == 0
    assert "Applied 0 migration(s)." in capsys.readouterr().out


def test_publish_list_show_delete(tmp_path, data_dir, capsys):
    author_id = uuid4()
    doc = {
        "title": "From the CLI",
        "blocks": [
            {"type": "HEADING_ONE", "data": {"text": "Intro"}},
            {"type": "PARAGRAPH", "data": {"text": "Written in YAML"}},
            {"type": "IMAGE", "data": {"caption": "never uploaded"}},
        ],
    }

    code, out = _publish(tmp_path, data_dir, author_id, capsys, doc)
    assert code == 0
    assert "Dropped image block without upload" in out
    post_id = out.strip().splitlines()[-1].split()[-1]

    assert main(["--data-dir", str(data_dir), "list", "--search", "cli"]) == 0
    listing = capsys.readouterr().out
    assert "From the CLI" in listing
    assert "Written in YAML" in listing

    assert main(["--data-dir", str(data_dir), "show", post_id]) == 0
    shown = capsys.readouterr().out
    assert "# From the CLI" in shown
    assert '"kind": "heading"' in shown

    denied = main(["--data-dir", str(data_dir), "delete", post_id, "--principal", str(uuid4())])
    assert denied == 1
    capsys.readouterr()

    args = ["--data-dir", str(data_dir), "delete", post_id, "--principal", str(author_id)]
    assert main(args) == 0
    assert main(["--data-dir", str(data_dir), "show", post_id]) == 1


def test_publish_json_document(tmp_path, data_dir, capsys):
    path = tmp_path / "post.json"
    path.write_text('{"title": "JSON", "blocks": [{"type": "CODE", "data": {"code": "x = 1"}}]}')

    args = ["--data-dir", str(data_dir), "publish", str(path), "--author", str(uuid4())]
    assert main(args) == 0


def test_publish_rejects_unknown_block_type(tmp_path, data_dir, capsys):
    doc = {"title": "Bad", "blocks": [{"type": "QUOTE", "data": {"text": "x"}}]}
    code, _ = _publish(tmp_path, data_dir, uuid4(), capsys, doc)
    assert code == 1


def test_publish_without_title(tmp_path, data_dir, capsys):
    doc = {"blocks": [{"type": "PARAGRAPH", "data": {"text": "x"}}]}
    path = _write_doc(tmp_path, doc)

    code = main(["--data-dir", str(data_dir), "publish", str(path), "--author", str(uuid4())])

    assert code == 1
    assert "title_required" in capsys.readouterr().err


def test_list_author_includes_drafts(tmp_path, data_dir, capsys):
    author_id = uuid4()
    doc = {
        "title": "Unlisted",
        "published": False,
        "blocks": [{"type": "PARAGRAPH", "data": {"text": "draft"}}],
    }
    _publish(tmp_path, data_dir, author_id, capsys, doc)

    main(["--data-dir", str(data_dir), "list"])
    assert "Unlisted" not in capsys.readouterr().out

    main(["--data-dir", str(data_dir), "list", "--author", str(author_id)])
    assert "Unlisted [draft]" in capsys.readouterr().out


def test_malformed_uuid(data_dir, capsys):
    assert main(["--data-dir", str(data_dir), "show", "not-a-uuid"]) == 1
