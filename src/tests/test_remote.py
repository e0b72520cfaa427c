from __future__ import annotations

from unittest.mock import MagicMock, patch

import pytest
import requests

from cloudnav.datamodels import Category, Document, Link
from cloudnav.remote import RemoteStore, WriteResult


@pytest.fixture
def remote_store():
    return RemoteStore("http://nav.test/")


@pytest.fixture
def document():
    return Document(
        links=[Link("1", "Example", "https://example.com", "common", 1000)],
        categories=[Category("common", "Common", "Star")],
    )


def _response(status_code, payload=None):
    resp = MagicMock()
    resp.status_code = status_code
    resp.ok = 200 <= status_code < 300
    resp.json.return_value = payload
    if not resp.ok:
        resp.raise_for_status.side_effect = requests.HTTPError(f"HTTP {status_code}")
    return resp


def test_url_strips_trailing_slash(remote_store):
    assert remote_store.url == "http://nav.test/api/storage"


def test_read_returns_document(remote_store, document):
    with patch.object(remote_store.session, "get") as mock_get:
        mock_get.return_value = _response(200, document.to_dict())
        assert remote_store.read() == document
        mock_get.assert_called_once_with("http://nav.test/api/storage", timeout=remote_store.timeout)


def test_read_failure_status_means_no_data(remote_store):
    with patch.object(remote_store.session, "get") as mock_get:
        mock_get.return_value = _response(404)
        assert remote_store.read() is None


def test_read_transport_error_means_no_data(remote_store):
    with patch.object(remote_store.session, "get") as mock_get:
        mock_get.side_effect = requests.ConnectionError("down")
        assert remote_store.read() is None


def test_read_malformed_body_means_no_data(remote_store):
    with patch.object(remote_store.session, "get") as mock_get:
        mock_get.return_value = _response(200, {"links": [{"title": "no id"}]})
        assert remote_store.read() is None


def test_write_posts_full_document_with_secret(remote_store, document):
    with patch.object(remote_store.session, "post") as mock_post:
        mock_post.return_value = _response(200)
        assert remote_store.write(document, "s3cret") is WriteResult.SAVED

        _, kwargs = mock_post.call_args
        assert mock_post.call_args[0][0] == "http://nav.test/api/storage"
        assert kwargs["json"] == document.to_dict()
        assert kwargs["headers"] == {"x-auth-password": "s3cret"}


@pytest.mark.parametrize(
    "status, expected",
    [
        (401, WriteResult.UNAUTHORIZED),
        (403, WriteResult.FAILED),
        (500, WriteResult.FAILED),
        (204, WriteResult.SAVED),
    ],
)
def test_write_maps_status_codes(remote_store, document, status, expected):
    with patch.object(remote_store.session, "post") as mock_post:
        mock_post.return_value = _response(status)
        assert remote_store.write(document, "s3cret") is expected


def test_write_transport_error_is_failure(remote_store, document):
    with patch.object(remote_store.session, "post") as mock_post:
        mock_post.side_effect = requests.Timeout("slow")
        assert remote_store.write(document, "s3cret") is WriteResult.FAILED
        assert mock_post.call_count == 1


@pytest.mark.parametrize(
    "payload",
    [{}, {"links": None}, {"categories": [{"id": "x", "name": "X"}]}, {"links": "nope"}, []],
)
def test_read_without_link_list_means_no_data(remote_store, payload):
    with patch.object(remote_store.session, "get") as mock_get:
        mock_get.return_value = _response(200, payload)
        assert remote_store.read() is None


def test_read_keeps_an_empty_link_list(remote_store):
    with patch.object(remote_store.session, "get") as mock_get:
        mock_get.return_value = _response(200, {"links": [], "categories": []})
        assert remote_store.read() == Document(links=[], categories=[])
