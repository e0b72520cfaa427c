from __future__ import annotations

import os

from cloudnav.config import DATA_CACHE_KEY
from cloudnav.datamodels import DEFAULT_CATEGORIES, INITIAL_LINKS, Category, Document, Link
from cloudnav.storage import LocalStorage, load_document, save_document


def test_set_get_remove(storage):
    assert storage.get("theme") is None
    storage.set("theme", "dark")
    assert storage.get("theme") == "dark"
    storage.remove("theme")
    assert storage.get("theme") is None
    storage.remove("theme")


def test_corrupt_file_reads_as_missing(storage):
    with open(storage._get_path("broken"), "w") as f:
        f.write("{")
    assert storage.get("broken") is None


def test_keys_cannot_escape_directory(tmp_path):
    storage = LocalStorage(str(tmp_path / "data"))
    path = storage._get_path("../outside")
    assert os.path.dirname(path) == str(tmp_path / "data")


def test_document_round_trip_uses_wire_keys(storage):
    document = Document(
        links=[Link("1", "Example", "https://example.com", "dev", 1234, "desc", "icon.png")],
        categories=[Category("dev", "Development", "Code")],
    )
    save_document(storage, document)

    raw = storage.get(DATA_CACHE_KEY)
    assert raw["links"][0]["categoryId"] == "dev"
    assert raw["links"][0]["createdAt"] == 1234
    assert load_document(storage) == document


def test_missing_lists_fall_back_to_defaults(storage):
    storage.set(DATA_CACHE_KEY, {"links": []})
    document = load_document(storage)
    assert document.links == []
    assert document.categories == DEFAULT_CATEGORIES

    storage.set(DATA_CACHE_KEY, {"categories": []})
    assert load_document(storage).links == INITIAL_LINKS


def test_unparsable_document_is_none(storage):
    storage.set(DATA_CACHE_KEY, ["not", "a", "document"])
    assert load_document(storage) is None

    storage.set(DATA_CACHE_KEY, {"links": [{"title": "missing id"}]})
    assert load_document(storage) is None
