"""Tests for the requests-based store and document API clients."""

from __future__ import annotations

import json

import pytest
import requests

from docsynth.errors import TransportError
from docsynth.services.document_api import DocumentApiClient
from docsynth.services.object_store import ObjectStoreClient


class DummyResponse:
    def __init__(self, status_code: int = 200, payload=None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = payload
        self.content = json.dumps(payload).encode() if payload is not None else text.encode()
        self.text = text or self.content.decode()

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON")
        return self._payload


@pytest.fixture
def recorded(monkeypatch: pytest.MonkeyPatch):
    calls = []
    responses = []

    def fake_request(method, url, **kwargs):
        calls.append((method, url, kwargs))
        response = responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response

    monkeypatch.setattr(requests, "request", fake_request)
    return calls, responses


def test_upload_returns_server_path(recorded) -> None:
    calls, responses = recorded
    responses.append(DummyResponse(payload={"ServerRelativeUrl": "/sites/docs/Shared Documents/a.docx"}))
    client = ObjectStoreClient("http://store/", token="secret")

    location = client.upload("/sites/docs/Shared Documents/a.docx", b"PK")

    assert location == "/sites/docs/Shared Documents/a.docx"
    method, url, kwargs = calls[0]
    assert (method, url) == ("PUT", "http://store/api/files")
    assert kwargs["params"]["overwrite"] == "true"
    assert kwargs["headers"]["Authorization"] == "Bearer secret"


def test_error_status_raises_transport_error(recorded) -> None:
    _, responses = recorded
    responses.append(DummyResponse(status_code=500, text="boom"))

    with pytest.raises(TransportError) as excinfo:
        ObjectStoreClient("http://store").list_containers()

    assert excinfo.value.status_code == 500


def test_connection_error_raises_transport_error(recorded) -> None:
    _, responses = recorded
    responses.append(requests.ConnectionError("refused"))

    with pytest.raises(TransportError):
        ObjectStoreClient("http://store").read_text("/a.txt")


def test_search_returns_primary_results(recorded) -> None:
    _, responses = recorded
    responses.append(DummyResponse(payload={"PrimarySearchResults": [{"Path": "/a.docx"}, "junk"]}))

    assert ObjectStoreClient("http://store").search("fileextension:docx") == [{"Path": "/a.docx"}]


def test_document_api_resolves_named_drive(recorded) -> None:
    calls, responses = recorded
    responses.append(DummyResponse(payload={"id": "site-1"}))
    responses.append(DummyResponse(payload={"value": [{"name": "Documents", "id": "d-1"}, {"name": "Reports", "id": "d-2"}]}))
    responses.append(DummyResponse(payload={"value": [{"name": "Documents", "id": "d-1"}]}))
    client = DocumentApiClient("http://graph", site_path="sites/docs")

    assert client.resolve_container_id("Reports") == "d-2"
    assert client.resolve_container_id("Missing") == "d-1"
    assert [call[1] for call in calls] == [
        "http://graph/sites/root:/sites/docs",
        "http://graph/sites/site-1/drives",
        "http://graph/sites/site-1/drives",
    ]


def test_document_api_without_drives_raises(recorded) -> None:
    _, responses = recorded
    responses.append(DummyResponse(payload={"id": "site-1"}))
    responses.append(DummyResponse(payload={"value": []}))

    with pytest.raises(TransportError):
        DocumentApiClient("http://graph", site_path="/sites/docs").resolve_container_id("Reports")
