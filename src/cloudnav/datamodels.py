from __future__ import annotations

import time
import uuid
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List, Optional

ALL_CATEGORIES = "all"
DEFAULT_CATEGORY_ID = "common"
UNCATEGORIZED_NAME = "Uncategorized"


def _now_ms() -> int:
    return int(time.time() * 1000)


def new_id() -> str:
    return uuid.uuid4().hex


class SyncStatus(str, Enum):
    IDLE = "idle"
    SAVING = "saving"
    SAVED = "saved"
    ERROR = "error"


# --- Data models ---
@dataclass
class Category:
    id: str
    name: str
    icon: str = "Folder"

    def to_dict(self) -> Dict[str, Any]:
        return {"id": self.id, "name": self.name, "icon": self.icon}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Category:
        return cls(
            id=str(data["id"]),
            name=str(data.get("name", "")),
            icon=data.get("icon") or "Folder",
        )


@dataclass
class Link:
    id: str
    title: str
    url: str
    category_id: str
    created_at: int
    description: Optional[str] = None
    icon: Optional[str] = None

    EDITABLE_FIELDS = ("title", "url", "category_id", "description", "icon")

    @classmethod
    def create(
        cls,
        title: str,
        url: str,
        category_id: str = DEFAULT_CATEGORY_ID,
        description: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> Link:
        """Build a new link with a fresh identifier and creation time."""
        return cls(
            id=new_id(),
            title=title,
            url=url,
            category_id=category_id,
            created_at=_now_ms(),
            description=description,
            icon=icon,
        )

    def merged(self, fields: Dict[str, Any]) -> Link:
        """Return a copy with ``fields`` applied; id and created_at never change."""
        changes = {k: v for k, v in fields.items() if k in self.EDITABLE_FIELDS}
        return replace(self, **changes)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "url": self.url,
            "categoryId": self.category_id,
            "createdAt": self.created_at,
        }
        if self.description is not None:
            data["description"] = self.description
        if self.icon is not None:
            data["icon"] = self.icon
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Link:
        return cls(
            id=str(data["id"]),
            title=str(data.get("title", "")),
            url=str(data.get("url", "")),
            category_id=str(data.get("categoryId", DEFAULT_CATEGORY_ID)),
            created_at=int(data.get("createdAt") or 0),
            description=data.get("description"),
            icon=data.get("icon"),
        )


DEFAULT_CATEGORIES: List[Category] = [
    Category("common", "Common", "Star"),
    Category("dev", "Development", "Code"),
    Category("design", "Design", "Palette"),
    Category("read", "Reading", "BookOpen"),
    Category("ent", "Entertainment", "Gamepad2"),
    Category("ai", "AI Tools", "Bot"),
]

INITIAL_LINKS: List[Link] = [
    Link("1", "GitHub", "https://github.com", "dev", 0, "Where the world builds software"),
    Link("2", "Python Docs", "https://docs.python.org/3/", "dev", 0, "Official Python documentation"),
    Link("3", "Hacker News", "https://news.ycombinator.com", "read", 0),
]


@dataclass
class Document:
    """The unit of persistence: every cache and remote write carries all of it."""

    links: List[Link] = field(default_factory=list)
    categories: List[Category] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "links": [link.to_dict() for link in self.links],
            "categories": [cat.to_dict() for cat in self.categories],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Document:
        if not isinstance(data, dict):
            raise ValueError("document must be a JSON object")
        raw_links = data.get("links")
        raw_categories = data.get("categories")
        links = (
            [Link.from_dict(item) for item in raw_links]
            if raw_links is not None
            else [replace(link) for link in INITIAL_LINKS]
        )
        categories = (
            [Category.from_dict(item) for item in raw_categories]
            if raw_categories is not None
            else [replace(cat) for cat in DEFAULT_CATEGORIES]
        )
        return cls(links=links, categories=categories)

    def find_link(self, link_id: str) -> Optional[Link]:
        for link in self.links:
            if link.id == link_id:
                return link
        return None

    def category_name(self, category_id: str) -> str:
        for cat in self.categories:
            if cat.id == category_id:
                return cat.name
        return UNCATEGORIZED_NAME


def default_document() -> Document:
    return Document(
        links=[replace(link) for link in INITIAL_LINKS],
        categories=[replace(cat) for cat in DEFAULT_CATEGORIES],
    )
