from __future__ import annotations

from typing import List, Optional, Tuple

import pytest

from cloudnav.controller import BookmarkStore
from cloudnav.datamodels import DEFAULT_CATEGORIES, Document
from cloudnav.remote import WriteResult
from cloudnav.storage import LocalStorage


class FakeRemote:
    """Stands in for RemoteStore and keeps what was written."""

    def __init__(self, document: Optional[Document] = None):
        self.document = document
        self.write_result = WriteResult.SAVED
        self.writes: List[Tuple[Document, str]] = []

    def read(self) -> Optional[Document]:
        return self.document

    def write(self, document: Document, token: str) -> WriteResult:
        self.writes.append((document, token))
        if self.write_result is WriteResult.SAVED:
            self.document = document
        return self.write_result


@pytest.fixture
def storage(tmp_path):
    return LocalStorage(str(tmp_path / "data"))


@pytest.fixture
def remote():
    return FakeRemote()


@pytest.fixture
def store(remote, storage):
    store = BookmarkStore(remote, storage, spawn=lambda fn: fn(), saved_display_delay=None)
    store.document = Document(links=[], categories=list(DEFAULT_CATEGORIES))
    return store


@pytest.fixture
def signed_in(store):
    store.session.accept("s3cret")
    return store
