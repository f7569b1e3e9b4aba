"""Client wrapper around the content store REST API."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional

import requests

from docsynth.errors import TransportError

logger = logging.getLogger(__name__)

DOCUMENT_LIBRARY_TEMPLATE = 101


class ObjectStoreClient:
    """Synchronous HTTP client for the content store.

    Paths are server-relative (``/sites/team/Shared Documents/report.docx``).
    """

    def __init__(
        self,
        base_url: str = "http://localhost:8080",
        *,
        token: Optional[str] = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._headers: Dict[str, str] = {"Accept": "application/json"}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"

    # ---------------------------------------------------------------------
    # Helper HTTP methods
    # ---------------------------------------------------------------------
    def _request(
        self,
        method: str,
        path: str,
        *,
        params: Optional[Dict[str, Any]] = None,
        json: Optional[Dict[str, Any]] = None,
        data: Optional[bytes] = None,
    ) -> requests.Response:
        url = f"{self.base_url}{path}"
        try:
            response = requests.request(
                method,
                url,
                params=params,
                json=json,
                data=data,
                headers=self._headers,
                timeout=self.timeout,
            )
        except requests.RequestException as exc:
            raise TransportError(f"Failed to connect to content store at {url}: {exc}") from exc
        if response.status_code >= 400:
            raise TransportError(
                f"Content store {method} {url} failed with status {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        return response

    def _json(self, method: str, path: str, **kwargs: Any) -> Dict[str, Any]:
        response = self._request(method, path, **kwargs)
        if not response.content:
            return {}
        try:
            payload = response.json()
        except ValueError as exc:
            raise TransportError(f"Content store returned invalid JSON for {path}") from exc
        if not isinstance(payload, dict):
            raise TransportError(f"Unexpected payload type from content store for {path}")
        return payload

    @staticmethod
    def _values(payload: Dict[str, Any]) -> List[Dict[str, Any]]:
        values = payload.get("value", [])
        return [item for item in values if isinstance(item, dict)] if isinstance(values, list) else []

    # ------------------------------------------------------------------
    # File operations
    # ------------------------------------------------------------------
    def upload(self, path: str, content: bytes, *, overwrite: bool = True) -> str:
        """Store ``content`` at ``path`` and return the final server-relative path."""

        payload = self._json(
            "PUT",
            "/api/files",
            params={"path": path, "overwrite": str(overwrite).lower()},
            data=content,
        )
        final_path = payload.get("ServerRelativeUrl") or path
        logger.debug("Uploaded %s bytes to %s", len(content), final_path)
        return str(final_path)

    def copy(self, source: str, target: str, *, overwrite: bool = True) -> None:
        self._request(
            "POST",
            "/api/files/copy",
            json={"source": source, "target": target, "overwrite": overwrite},
        )

    def delete(self, path: str) -> None:
        self._request("DELETE", "/api/files", params={"path": path})

    def read_text(self, path: str) -> str:
        response = self._request("GET", "/api/files/content", params={"path": path})
        return response.text

    def list_folder(self, path: str) -> List[Dict[str, Any]]:
        """Return the raw file entries stored directly in ``path``."""

        return self._values(self._json("GET", "/api/folders/files", params={"path": path}))

    # ------------------------------------------------------------------
    # Enumeration
    # ------------------------------------------------------------------
    def list_containers(self) -> List[Dict[str, Any]]:
        """Return raw descriptors of the document libraries of the site."""

        return self._values(
            self._json("GET", "/api/containers", params={"base_template": DOCUMENT_LIBRARY_TEMPLATE})
        )

    def list_items(self, container: str, *, name_contains: Optional[str] = None) -> List[Dict[str, Any]]:
        """Return raw list items of ``container`` with their file information expanded."""

        params: Dict[str, Any] = {"expand": "file"}
        if name_contains:
            params["name_contains"] = name_contains
        return self._values(self._json("GET", f"/api/containers/{container}/items", params=params))

    def search(
        self,
        query: str,
        *,
        row_limit: int = 500,
        select_properties: Optional[List[str]] = None,
    ) -> List[Dict[str, Any]]:
        """Run a search query and return the primary result rows."""

        payload = self._json(
            "POST",
            "/api/search",
            json={
                "query": query,
                "row_limit": row_limit,
                "select_properties": select_properties or [],
                "trim_duplicates": True,
            },
        )
        results = payload.get("PrimarySearchResults", [])
        if not isinstance(results, list):
            return []
        return [row for row in results if isinstance(row, dict)]


__all__ = ["DOCUMENT_LIBRARY_TEMPLATE", "ObjectStoreClient"]
