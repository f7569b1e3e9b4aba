"""Shared in-memory collaborators for the pipeline tests."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import pytest

from docsynth.errors import TransportError
from docsynth.services.discovery import DiscoveryService, StrategyState

SITE_PATH = "/sites/docs"


class FakeObjectStore:
    """Content store stub that keeps files in a dict and records every call."""

    def __init__(self, containers: Optional[List[str]] = None) -> None:
        titles = containers if containers is not None else ["Shared Documents", "Reports"]
        self.containers: List[Dict[str, Any]] = [{"Title": title} for title in titles]
        self.files: Dict[str, bytes] = {}
        self.items: Dict[str, List[Dict[str, Any]]] = {}
        self.folders: Dict[str, List[Dict[str, Any]]] = {}
        self.search_results: List[Dict[str, Any]] = []
        self.failing: set[str] = set()
        self.failing_upload_suffixes: set[str] = set()
        self.calls: List[str] = []

    def _record(self, operation: str) -> None:
        self.calls.append(operation)
        if operation in self.failing:
            raise TransportError(f"{operation} failed")

    def count(self, operation: str) -> int:
        return self.calls.count(operation)

    def upload(self, path: str, content: bytes, *, overwrite: bool = True) -> str:
        self._record("upload")
        if any(path.endswith(suffix) for suffix in self.failing_upload_suffixes):
            raise TransportError(f"upload of {path} failed")
        if path in self.files and not overwrite:
            raise TransportError(f"{path} already exists")
        self.files[path] = content
        return path

    def copy(self, source: str, target: str, *, overwrite: bool = True) -> None:
        self._record("copy")
        self.files[target] = self.files[source]

    def delete(self, path: str) -> None:
        self._record("delete")
        self.files.pop(path, None)

    def read_text(self, path: str) -> str:
        self._record("read_text")
        if path not in self.files:
            raise TransportError(f"{path} not found", status_code=404)
        return self.files[path].decode("utf-8")

    def list_folder(self, path: str) -> List[Dict[str, Any]]:
        self._record("list_folder")
        return self.folders.get(path, [])

    def list_containers(self) -> List[Dict[str, Any]]:
        self._record("list_containers")
        return self.containers

    def list_items(self, container: str, *, name_contains: Optional[str] = None) -> List[Dict[str, Any]]:
        self._record("list_items")
        return self.items.get(container, [])

    def search(self, query: str, *, row_limit: int = 500, select_properties=None) -> List[Dict[str, Any]]:
        self._record("search")
        if not isinstance(self.search_results, list):
            return self.search_results
        return self.search_results[:row_limit]


class FakeDocumentApi:
    """Document API stub storing created text files by container id."""

    def __init__(self) -> None:
        self.created: Dict[str, bytes] = {}
        self.fail = False

    def resolve_container_id(self, container_name: str) -> str:
        if self.fail:
            raise TransportError("document API unavailable")
        return f"drive-{container_name}"

    def create_text_file(self, container_id: str, file_name: str, content: bytes) -> str:
        self.created[f"{container_id}/{file_name}"] = content
        return f"https://docs.example/{container_id}/{file_name}"


@pytest.fixture
def store() -> FakeObjectStore:
    return FakeObjectStore()


@pytest.fixture
def document_api() -> FakeDocumentApi:
    return FakeDocumentApi()


@pytest.fixture
def discovery(store: FakeObjectStore) -> DiscoveryService:
    return DiscoveryService(store, site_path=SITE_PATH, state=StrategyState())
