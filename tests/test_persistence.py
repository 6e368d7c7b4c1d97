from pathlib import Path

from sushikoi.persistence.filesystem import FileStorage


def test_file_storage_creates_root(tmp_path: Path) -> None:
    root = tmp_path / "nested" / "data"
    storage = FileStorage(root=root)

    assert root.exists()
    assert root.is_dir()
    assert storage.path_for("orders.v3") == root.resolve() / "orders.v3.json"


def test_file_storage_writes_and_reads_json(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)

    path = storage.write_json("summary", {"hello": "world"})

    assert path.read_text(encoding="utf-8") == '{\n  "hello": "world"\n}'
    assert storage.read_json("summary") == {"hello": "world"}
    assert not list(tmp_path.glob("*.tmp"))


def test_missing_or_corrupt_documents_return_default(tmp_path: Path) -> None:
    storage = FileStorage(root=tmp_path)
    assert storage.read_json("absent", default=[]) == []
    assert storage.modified_at("absent") is None

    storage.path_for("broken").write_text("[1, 2", encoding="utf-8")
    assert storage.read_json("broken", default=[]) == []
    assert storage.modified_at("broken") is not None
