from __future__ import annotations

import logging
import threading
from concurrent.futures import ThreadPoolExecutor
from enum import Enum
from typing import Any, Callable, Dict, List, Optional

from .config import AUTH_TOKEN_KEY, SAVED_STATUS_SECONDS, THEME_KEY
from .datamodels import (
    ALL_CATEGORIES,
    DEFAULT_CATEGORY_ID,
    Category,
    Document,
    Link,
    SyncStatus,
    default_document,
)
from .importer import read_bookmark_file
from .remote import RemoteStore, WriteResult
from .storage import LocalStorage, load_document, save_document

logger = logging.getLogger("cloudnav")

Listener = Callable[..., None]

EVENTS = ("document_changed", "status_changed", "login_requested", "login_succeeded")

_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="cloudnav-sync")


def _spawn_in_pool(fn: Callable[[], Any]) -> None:
    _executor.submit(fn)


class SessionState(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATING = "authenticating"
    AUTHENTICATED = "authenticated"


class Session:
    """Holds at most one shared-secret token, mirrored in local storage."""

    def __init__(self, storage: LocalStorage):
        self.storage = storage
        self.token: str = ""
        self.state = SessionState.UNAUTHENTICATED

    @property
    def authenticated(self) -> bool:
        return bool(self.token)

    def restore(self) -> None:
        token = self.storage.get(AUTH_TOKEN_KEY)
        if isinstance(token, str) and token:
            self.token = token
            self.state = SessionState.AUTHENTICATED
            logger.info("Restored saved session token")

    def begin(self) -> None:
        self.state = SessionState.AUTHENTICATING

    def accept(self, token: str) -> None:
        self.token = token
        self.state = SessionState.AUTHENTICATED
        self.storage.set(AUTH_TOKEN_KEY, token)

    def reject(self) -> None:
        self.state = (
            SessionState.AUTHENTICATED if self.token else SessionState.UNAUTHENTICATED
        )

    def clear(self) -> None:
        self.token = ""
        self.state = SessionState.UNAUTHENTICATED
        self.storage.remove(AUTH_TOKEN_KEY)


class BookmarkStore:
    """Owns the live document and routes every change through :meth:`mutate`.

    A mutation replaces the in-memory document, writes the whole document to
    local storage and then, when a session token is present, hands the same
    snapshot to a background task that posts it to the remote store. The
    remote outcome only changes the sync status and the session; it never
    touches the document.
    """

    def __init__(
        self,
        remote: RemoteStore,
        storage: LocalStorage,
        spawn: Optional[Callable[[Callable[[], Any]], Any]] = None,
        saved_display_delay: Optional[float] = SAVED_STATUS_SECONDS,
    ):
        self.remote = remote
        self.storage = storage
        self.session = Session(storage)
        self.document = Document()
        self.status = SyncStatus.IDLE
        self.spawn = spawn or _spawn_in_pool
        self.saved_display_delay = saved_display_delay
        self._listeners: Dict[str, List[Listener]] = {name: [] for name in EVENTS}
        self._status_generation = 0

    # --- events ---
    def subscribe(self, event: str, listener: Listener) -> None:
        if event not in self._listeners:
            raise ValueError(f"Unknown event: {event}")
        self._listeners[event].append(listener)

    def _emit(self, event: str, *args: Any) -> None:
        for listener in self._listeners[event]:
            try:
                listener(*args)
            except Exception as e:
                logger.exception("Listener for %s failed: %s", event, e)

    def _set_status(self, status: SyncStatus) -> None:
        self._status_generation += 1
        self.status = status
        self._emit("status_changed", status)
        if status is SyncStatus.SAVED and self.saved_display_delay:
            generation = self._status_generation
            timer = threading.Timer(
                self.saved_display_delay, self._clear_saved_status, args=(generation,)
            )
            timer.daemon = True
            timer.start()

    def _clear_saved_status(self, generation: int) -> None:
        if generation == self._status_generation and self.status is SyncStatus.SAVED:
            self._set_status(SyncStatus.IDLE)

    # --- lifecycle ---
    def initialize(self) -> Document:
        """Load the document once: remote, then local cache, then defaults."""
        self.session.restore()

        document = self.remote.read()
        if document is not None and document.links:
            logger.info("Loaded %d links from remote store", len(document.links))
            self.document = document
            save_document(self.storage, document)
        else:
            if document is None:
                logger.warning("Remote store unavailable, falling back to local cache")
            cached = load_document(self.storage)
            if cached is not None:
                logger.info("Loaded %d links from local cache", len(cached.links))
                self.document = cached
            else:
                logger.info("No usable local cache, starting from defaults")
                self.document = default_document()

        self._emit("document_changed", self.document)
        return self.document

    # --- mutation path ---
    def mutate(self, links: List[Link], categories: List[Category]) -> None:
        document = Document(links=list(links), categories=list(categories))
        self.document = document
        save_document(self.storage, document)
        self._emit("document_changed", document)

        if self.session.authenticated:
            token = self.session.token
            self.spawn(lambda: self._sync(document, token))

    def _sync(self, document: Document, token: str) -> None:
        self._set_status(SyncStatus.SAVING)
        result = self.remote.write(document, token)
        if result is WriteResult.SAVED:
            self._set_status(SyncStatus.SAVED)
        elif result is WriteResult.UNAUTHORIZED:
            if self.session.token == token:
                logger.warning("Stored token was rejected; signing out")
                self.session.clear()
                self._emit("login_requested")
            else:
                logger.info("Ignoring rejection of a token that was already replaced")
            self._set_status(SyncStatus.ERROR)
        else:
            self._set_status(SyncStatus.ERROR)

    def _require_session(self) -> bool:
        if self.session.authenticated:
            return True
        logger.info("Change refused: authentication required")
        self._emit("login_requested")
        return False

    def add_link(
        self,
        title: str,
        url: str,
        category_id: str = DEFAULT_CATEGORY_ID,
        description: Optional[str] = None,
        icon: Optional[str] = None,
    ) -> Optional[Link]:
        if not self._require_session():
            return None
        link = Link.create(
            title=title, url=url, category_id=category_id, description=description, icon=icon
        )
        self.mutate([link] + self.document.links, self.document.categories)
        return link

    def edit_link(self, link_id: str, **fields: Any) -> bool:
        if not self._require_session():
            return False
        if self.document.find_link(link_id) is None:
            logger.info("Edit of unknown link %s leaves the links unchanged", link_id)
        links = [
            link.merged(fields) if link.id == link_id else link
            for link in self.document.links
        ]
        self.mutate(links, self.document.categories)
        return True

    def delete_link(self, link_id: str) -> bool:
        if not self._require_session():
            return False
        links = [link for link in self.document.links if link.id != link_id]
        self.mutate(links, self.document.categories)
        return True

    def import_bookmarks(self, links: List[Link], categories: List[Category]) -> bool:
        """Append imported links and any categories whose name is new."""
        if not self._require_session():
            return False
        merged = list(self.document.categories)
        known_names = {cat.name for cat in merged}
        for cat in categories:
            if cat.name not in known_names:
                merged.append(cat)
                known_names.add(cat.name)
        self.mutate(self.document.links + list(links), merged)
        return True

    def import_file(self, path: str) -> Optional[int]:
        """Import a bookmark export; returns the number of links, or None if refused.

        Raises ImportParseError when the file is not a bookmark export.
        """
        if not self._require_session():
            return None
        result = read_bookmark_file(path)
        self.import_bookmarks(result.links, result.categories)
        return len(result.links)

    # --- session ---
    def login(self, secret: str) -> bool:
        """Prove the secret by writing the current document with it."""
        self.session.begin()
        result = self.remote.write(self.document, secret)
        if result is not WriteResult.SAVED:
            logger.info("Login failed: %s", result.value)
            self.session.reject()
            return False

        self.session.accept(secret)
        logger.info("Login succeeded")
        self._emit("login_succeeded")
        self._set_status(SyncStatus.SAVED)
        return True

    def logout(self) -> None:
        self.session.clear()
        self._set_status(SyncStatus.IDLE)

    # --- read-only views ---
    def filter_links(self, query: str = "", category_id: str = ALL_CATEGORIES) -> List[Link]:
        result = self.document.links
        if category_id != ALL_CATEGORIES:
            result = [link for link in result if link.category_id == category_id]
        q = query.strip().lower()
        if q:
            result = [
                link
                for link in result
                if q in link.title.lower()
                or q in link.url.lower()
                or (link.description and q in link.description.lower())
            ]
        return list(result)

    def category_counts(self) -> Dict[str, int]:
        counts: Dict[str, int] = {}
        for link in self.document.links:
            counts[link.category_id] = counts.get(link.category_id, 0) + 1
        return counts

    # --- preferences ---
    @property
    def theme_mode(self) -> Optional[str]:
        mode = self.storage.get(THEME_KEY)
        return mode if mode in ("light", "dark") else None

    def set_theme_mode(self, mode: str) -> None:
        if mode not in ("light", "dark"):
            raise ValueError(f"Unknown theme mode: {mode}")
        self.storage.set(THEME_KEY, mode)

    def toggle_theme(self, current: Optional[str] = None) -> str:
        current = current or self.theme_mode or "light"
        mode = "light" if current == "dark" else "dark"
        self.set_theme_mode(mode)
        return mode
