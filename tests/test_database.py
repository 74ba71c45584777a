import json

import pytest

from twitchcmd.shared.database import DocumentStore


@pytest.fixture
def documents(tmp_path):
    store = DocumentStore(tmp_path / "data")
    store.connect()
    yield store
    store.disconnect()


def test_missing_document_is_created(documents):
    doc = documents.document("settings", lambda: {"commands": []})
    assert doc.path.exists()
    assert json.loads(doc.path.read_text(encoding="utf-8")) == {"commands": []}
    assert documents.document("settings") is doc


def test_missing_keys_are_filled(documents):
    path = documents.data_dir / "old.json"
    path.write_text(json.dumps({"extra": 1}), encoding="utf-8")
    doc = documents.document("old", lambda: {"commands": []})
    assert doc.read() == {"extra": 1, "commands": []}


def test_invalid_json_is_rejected(documents):
    (documents.data_dir / "broken.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(ValueError):
        documents.document("broken")


def test_transaction_persists(documents):
    doc = documents.document("items", lambda: {"items": []})
    with doc.transaction() as data:
        data["items"].append("a")
    assert json.loads(doc.path.read_text(encoding="utf-8")) == {"items": ["a"]}
    assert not list(documents.data_dir.glob("*.tmp"))


def test_transaction_rolls_back(documents):
    doc = documents.document("items", lambda: {"items": []})
    with pytest.raises(RuntimeError):
        with doc.transaction() as data:
            data["items"].append("a")
            raise RuntimeError("abort")
    assert doc.read() == {"items": []}
    assert json.loads(doc.path.read_text(encoding="utf-8")) == {"items": []}


def test_read_returns_copy(documents):
    doc = documents.document("items", lambda: {"items": []})
    doc.read()["items"].append("leak")
    assert doc.read() == {"items": []}


def test_health(documents):
    assert documents.check_health() is True
