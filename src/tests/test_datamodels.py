from __future__ import annotations

from cloudnav.datamodels import UNCATEGORIZED_NAME, Category, Document, Link


def test_create_assigns_id_and_timestamp():
    first = Link.create("A", "https://a.example")
    second = Link.create("B", "https://b.example")
    assert first.id and second.id and first.id != second.id
    assert first.created_at > 0
    assert first.category_id == "common"


def test_merged_only_touches_editable_fields():
    link = Link("1", "A", "https://a.example", "dev", 10, "desc")
    merged = link.merged({"title": "B", "id": "2", "created_at": 0, "unknown": 1})
    assert merged == Link("1", "B", "https://a.example", "dev", 10, "desc")
    assert link.title == "A"


def test_optional_fields_are_omitted_from_wire_format():
    data = Link("1", "A", "https://a.example", "dev", 10).to_dict()
    assert "description" not in data
    assert "icon" not in data


def test_dangling_category_is_uncategorized():
    document = Document(links=[], categories=[Category("dev", "Development")])
    assert document.category_name("dev") == "Development"
    assert document.category_name("gone") == UNCATEGORIZED_NAME


def test_find_link():
    link = Link("1", "A", "https://a.example", "dev", 10)
    document = Document(links=[link], categories=[])
    assert document.find_link("1") is link
    assert document.find_link("2") is None
