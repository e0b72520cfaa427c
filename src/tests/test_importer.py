from __future__ import annotations

import pytest

from cloudnav.datamodels import DEFAULT_CATEGORY_ID
from cloudnav.importer import ImportParseError, parse_bookmarks, read_bookmark_file

NESTED_EXPORT = """
<!DOCTYPE NETSCAPE-Bookmark-file-1>
<TITLE>Bookmarks</TITLE>
<H1>Bookmarks</H1>
<DL><p>
  <DT><H3>Root Folder</H3>
  <DL><p>
    <DT><A HREF="https://example.com/a" ADD_DATE="1700000000">A</A>
    <DT><H3>Inner Folder</H3>
    <DL><p>
      <DT><A HREF="https://example.com/b" ICON="data:image/png;base64,AAA">B</A>
      <DT><A HREF="https://example.com/c#frag">C</A>
    </DL><p>
  </DL><p>
  <DT><A HREF="https://example.com/root">Root Link</A>
</DL><p>
"""


def test_parse_nested_export():
    result = parse_bookmarks(NESTED_EXPORT)

    assert [link.url for link in result.links] == [
        "https://example.com/a",
        "https://example.com/b",
        "https://example.com/c#frag",
        "https://example.com/root",
    ]
    assert [cat.name for cat in result.categories] == ["Root Folder", "Inner Folder"]

    root, inner = result.categories
    assert result.links[0].category_id == root.id
    assert result.links[1].category_id == inner.id
    assert result.links[2].category_id == inner.id
    assert result.links[3].category_id == DEFAULT_CATEGORY_ID


def test_parse_keeps_dates_and_icons():
    result = parse_bookmarks(NESTED_EXPORT)
    assert result.links[0].created_at == 1700000000 * 1000
    assert result.links[1].icon == "data:image/png;base64,AAA"
    assert result.links[2].icon is None


def test_imported_links_get_unique_ids():
    result = parse_bookmarks(NESTED_EXPORT)
    ids = [link.id for link in result.links]
    assert all(ids)
    assert len(set(ids)) == len(ids)


def test_link_without_title_uses_url():
    html = """
<!DOCTYPE NETSCAPE-Bookmark-file-1>
<DL><p>
  <DT><A HREF="https://example.com/no-title"></A>
  <DT><A>no href</A>
</DL><p>
"""
    result = parse_bookmarks(html)
    assert len(result.links) == 1
    assert result.links[0].title == "https://example.com/no-title"


@pytest.mark.parametrize(
    "html",
    ["", "   ", "<html><body><p>Hello</p></body></html>", "<dl><dt>term</dt></dl>"],
)
def test_unrecognised_files_raise(html):
    with pytest.raises(ImportParseError):
        parse_bookmarks(html)


def test_read_missing_file(tmp_path):
    with pytest.raises(ImportParseError):
        read_bookmark_file(str(tmp_path / "missing.html"))


CHROME_EXPORT = """<!DOCTYPE NETSCAPE-Bookmark-file-1>
<!-- This is an automatically generated file. -->
<META HTTP-EQUIV="Content-Type" CONTENT="text/html; charset=UTF-8">
<TITLE>Bookmarks</TITLE>
<H1>Bookmarks</H1>
<DL><p>
    <DT><H3 ADD_DATE="1700000000" PERSONAL_TOOLBAR_FOLDER="true">Bookmarks bar</H3>
    <DL><p>
        <DT><A HREF="https://a.example/" ADD_DATE="1700000001">A</A>
        <DT><H3>Dev</H3>
        <DL><p>
            <DT><A HREF="https://python.org/">Py</A>
        </DL><p>
        <DT><A HREF="https://b.example/">B</A>
    </DL><p>
    <DT><A HREF="https://top.example/">Top</A>
</DL><p>
"""


def test_parse_chrome_layout_keeps_subfolder_between_links():
    result = parse_bookmarks(CHROME_EXPORT)

    names = {cat.id: cat.name for cat in result.categories}
    placed = [(link.title, names.get(link.category_id, link.category_id)) for link in result.links]
    assert placed == [
        ("A", "Bookmarks bar"),
        ("Py", "Dev"),
        ("B", "Bookmarks bar"),
        ("Top", DEFAULT_CATEGORY_ID),
    ]
    assert [cat.name for cat in result.categories] == ["Bookmarks bar", "Dev"]


def test_empty_folder_is_still_a_category():
    html = """<!DOCTYPE NETSCAPE-Bookmark-file-1>
<H1>Bookmarks</H1>
<DL><p>
    <DT><H3>Empty</H3>
    <DL><p>
    </DL><p>
    <DT><A HREF="https://top.example/">Top</A>
</DL><p>
"""
    result = parse_bookmarks(html)
    assert [cat.name for cat in result.categories] == ["Empty"]
    assert result.links[0].category_id == DEFAULT_CATEGORY_ID
