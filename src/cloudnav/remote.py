from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

import requests
from requests.adapters import HTTPAdapter
from urllib3.util.retry import Retry

from .config import (
    AUTH_HEADER,
    HTTP_TIMEOUT,
    REQUEST_HEADERS,
    RETRY_ATTEMPTS,
    RETRY_BACKOFF,
    STORAGE_ENDPOINT,
)
from .datamodels import Document

logger = logging.getLogger("cloudnav")


class WriteResult(str, Enum):
    SAVED = "saved"
    UNAUTHORIZED = "unauthorized"
    FAILED = "failed"


class RemoteStore:
    """Client for the single-document storage endpoint."""

    def __init__(self, base_url: str, timeout: float = HTTP_TIMEOUT):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.session = self._create_session()

    @property
    def url(self) -> str:
        return f"{self.base_url}{STORAGE_ENDPOINT}"

    def _create_session(self) -> requests.Session:
        s = requests.Session()
        s.headers.update(REQUEST_HEADERS)
        # Retry only applies to GET; a write is never replayed.
        retries = Retry(
            total=RETRY_ATTEMPTS,
            backoff_factor=RETRY_BACKOFF,
            status_forcelist=[429, 500, 502, 503, 504],
            allowed_methods=frozenset(["GET"]),
            raise_on_status=False,
        )
        adapter = HTTPAdapter(max_retries=retries)
        s.mount("https://", adapter)
        s.mount("http://", adapter)
        return s

    def read(self) -> Optional[Document]:
        """Fetch the stored document. Any failure means "no data"."""
        try:
            logger.debug("Fetching %s", self.url)
            resp = self.session.get(self.url, timeout=self.timeout)
            resp.raise_for_status()
            payload = resp.json()
            if not isinstance(payload, dict) or not isinstance(payload.get("links"), list):
                logger.info("Remote store at %s holds no link list", self.url)
                return None
            document = Document.from_dict(payload)
        except requests.RequestException as e:
            logger.warning("Failed to fetch document from %s: %s", self.url, e)
            return None
        except (KeyError, TypeError, ValueError) as e:
            logger.warning("Remote document from %s is malformed: %s", self.url, e)
            return None
        logger.debug("Fetched %d links from %s", len(document.links), self.url)
        return document

    def write(self, document: Document, token: str) -> WriteResult:
        """Store the full document using ``token`` as the shared secret."""
        try:
            resp = self.session.post(
                self.url,
                json=document.to_dict(),
                headers={AUTH_HEADER: token},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error("Sync to %s failed: %s", self.url, e)
            return WriteResult.FAILED

        if resp.status_code == 401:
            logger.warning("Sync to %s rejected: unauthorized", self.url)
            return WriteResult.UNAUTHORIZED
        if not resp.ok:
            logger.error("Sync to %s failed with HTTP %s", self.url, resp.status_code)
            return WriteResult.FAILED

        logger.debug("Saved %d links to %s", len(document.links), self.url)
        return WriteResult.SAVED
