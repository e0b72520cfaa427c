from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from bs4 import BeautifulSoup, Tag

from .datamodels import DEFAULT_CATEGORY_ID, Category, Link, new_id

logger = logging.getLogger("cloudnav")

NETSCAPE_MARKER = "netscape-bookmark-file"


class CloudNavError(Exception):
    """Base class for errors raised by cloudnav."""


class ImportParseError(CloudNavError):
    """The file is not a recognised browser bookmark export."""


@dataclass
class ImportResult:
    links: List[Link] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)


@dataclass
class _Level:
    """Walk state for one ``<dl>``: the folder heading still waiting for its list."""

    category_id: str
    pending_folder: Optional[str] = None


def _link_from_anchor(anchor: Tag, category_id: str) -> Optional[Link]:
    href = anchor.get("href")
    href = href.strip() if isinstance(href, str) else ""
    if not href:
        return None

    title = anchor.get_text(strip=True) or href
    link = Link.create(title=title, url=href, category_id=category_id)

    add_date = anchor.get("add_date")
    if isinstance(add_date, str) and add_date.isdigit():
        link.created_at = int(add_date) * 1000
    icon = anchor.get("icon")
    if isinstance(icon, str) and icon:
        link.icon = icon
    return link


def _walk(node: Tag, level: _Level, out: ImportResult) -> None:
    # lxml leaves <dt> unclosed, so a folder heading may end up nested in the
    # previous entry's <dt> while its <dl> follows later. Walking in document
    # order pairs each heading with the next list regardless of nesting.
    for child in node.children:
        if not isinstance(child, Tag):
            continue
        name = (child.name or "").lower()
        if name == "a":
            link = _link_from_anchor(child, level.category_id)
            if link is not None:
                out.links.append(link)
        elif name in ("h3", "h2", "h1"):
            level.pending_folder = child.get_text(strip=True)
        elif name == "dl":
            _parse_dl(child, level, out)
        else:
            _walk(child, level, out)


def _parse_dl(dl: Tag, parent: _Level, out: ImportResult) -> None:
    category_id = parent.category_id
    if parent.pending_folder is not None:
        category = Category(id=new_id(), name=parent.pending_folder, icon="Folder")
        out.categories.append(category)
        category_id = category.id
        parent.pending_folder = None
    _walk(dl, _Level(category_id), out)


def parse_bookmarks(html: str) -> ImportResult:
    """Parse a Netscape-format bookmark export into links and categories.

    Every folder becomes a category and each link lands in its innermost
    folder. Links that sit outside any folder go to the default category.
    """
    if not html or not html.strip():
        raise ImportParseError("Bookmark file is empty")

    soup = BeautifulSoup(html, "lxml")
    root = soup.find("dl")
    if not isinstance(root, Tag):
        raise ImportParseError("No bookmark list found; is this a browser bookmark export?")

    looks_exported = NETSCAPE_MARKER in html[:512].lower() or soup.find("h1") is not None
    if not looks_exported:
        raise ImportParseError("File is not a browser bookmark export")

    result = ImportResult()
    _parse_dl(root, _Level(DEFAULT_CATEGORY_ID), result)
    logger.info(
        "Parsed %d links in %d folders from bookmark export",
        len(result.links),
        len(result.categories),
    )
    return result


def read_bookmark_file(path: str) -> ImportResult:
    try:
        with open(path, "r", encoding="utf-8", errors="replace") as f:
            html = f.read()
    except OSError as e:
        raise ImportParseError(f"Could not read {path}: {e}") from e
    return parse_bookmarks(html)
