from __future__ import annotations

import json
import logging
import os
import re
from typing import Any, Optional

from .config import DATA_CACHE_KEY
from .datamodels import Document

logger = logging.getLogger("cloudnav")

_UNSAFE_KEY_CHARS = re.compile(r"[^A-Za-z0-9_.-]")


class LocalStorage:
    """Key-value store of JSON values, one file per key."""

    def __init__(self, directory: str):
        self.directory = directory
        os.makedirs(self.directory, exist_ok=True)

    def _get_path(self, key: str) -> str:
        safe_key = _UNSAFE_KEY_CHARS.sub("_", key)
        return os.path.join(self.directory, f"{safe_key}.json")

    def get(self, key: str) -> Optional[Any]:
        path = self._get_path(key)
        if not os.path.exists(path):
            return None

        try:
            with open(path, "r", encoding="utf-8") as f:
                value = json.load(f)
            logger.debug("Storage hit for key: %s", key)
            return value
        except (IOError, json.JSONDecodeError) as e:
            logger.warning("Failed to read storage file %s: %s", path, e)
            return None

    def set(self, key: str, value: Any) -> None:
        path = self._get_path(key)
        tmp_path = f"{path}.tmp"
        try:
            with open(tmp_path, "w", encoding="utf-8") as f:
                json.dump(value, f, ensure_ascii=False)
            os.replace(tmp_path, path)
            logger.debug("Storage set for key: %s", key)
        except (IOError, TypeError) as e:
            logger.warning("Failed to write storage file %s: %s", path, e)

    def remove(self, key: str) -> None:
        path = self._get_path(key)
        try:
            if os.path.isfile(path):
                os.unlink(path)
                logger.debug("Storage removed key: %s", key)
        except OSError as e:
            logger.error("Failed to delete storage file %s: %s", path, e)


def save_document(storage: LocalStorage, document: Document) -> None:
    storage.set(DATA_CACHE_KEY, document.to_dict())


def load_document(storage: LocalStorage) -> Optional[Document]:
    """Return the cached document, or None if it is missing or unparsable."""
    data = storage.get(DATA_CACHE_KEY)
    if data is None:
        return None
    try:
        return Document.from_dict(data)
    except (KeyError, TypeError, ValueError) as e:
        logger.warning("Cached document is unreadable, ignoring it: %s", e)
        return None
