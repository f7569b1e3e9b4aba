"""Client for the remote document-creation API (drive-style endpoints)."""

from __future__ import annotations

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests

from docsynth.errors import TransportError

logger = logging.getLogger(__name__)


class DocumentApiClient:
    """Create files through the drive API of the content store.

    The drive API addresses containers by opaque ids, so the object-store
    container name has to be mapped with :meth:`resolve_container_id` first.
    """

    def __init__(
        self,
        base_url: str,
        *,
        site_path: str,
        token: Optional[str] = None,
        timeout: float = 30.0,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.site_path = "/" + site_path.strip("/")
        self.timeout = timeout
        self._headers: Dict[str, str] = {"Accept": "application/json"}
        if token:
            self._headers["Authorization"] = f"Bearer {token}"
        self._site_id: Optional[str] = None

    def _call(self, method: str, path: str, *, data: Optional[bytes] = None) -> Dict[str, Any]:
        url = f"{self.base_url}{path}"
        try:
            response = requests.request(method, url, data=data, headers=self._headers, timeout=self.timeout)
        except requests.RequestException as exc:
            raise TransportError(f"Failed to connect to document API at {url}: {exc}") from exc
        if response.status_code >= 400:
            raise TransportError(
                f"Document API {method} {url} failed with status {response.status_code}: {response.text}",
                status_code=response.status_code,
            )
        if not response.content:
            return {}
        try:
            payload = response.json()
        except ValueError as exc:
            raise TransportError(f"Document API returned invalid JSON for {path}") from exc
        return payload if isinstance(payload, dict) else {}

    def site_id(self) -> str:
        if self._site_id is None:
            payload = self._call("GET", f"/sites/root:{quote(self.site_path)}")
            site_id = payload.get("id")
            if not site_id:
                raise TransportError(f"Document API returned no site id for {self.site_path}")
            self._site_id = str(site_id)
        return self._site_id

    def list_containers(self) -> List[Dict[str, Any]]:
        payload = self._call("GET", f"/sites/{self.site_id()}/drives")
        values = payload.get("value", [])
        return [item for item in values if isinstance(item, dict)] if isinstance(values, list) else []

    def resolve_container_id(self, container_name: str) -> str:
        """Map an object-store container name onto a drive id.

        Falls back to the first drive when no name matches.
        """

        drives = self.list_containers()
        for drive in drives:
            if drive.get("name") == container_name and drive.get("id"):
                return str(drive["id"])
        if drives and drives[0].get("id"):
            logger.info("No drive named '%s', using first available drive", container_name)
            return str(drives[0]["id"])
        raise TransportError(f"No drive available to store documents for '{container_name}'")

    def create_text_file(self, container_id: str, file_name: str, content: bytes) -> str:
        """Upload ``content`` as ``file_name`` to the drive root and return its web URL."""

        path = f"/sites/{self.site_id()}/drives/{container_id}/root:/{quote(file_name)}:/content"
        payload = self._call("PUT", path, data=content)
        return str(payload.get("webUrl") or payload.get("name") or file_name)


__all__ = ["DocumentApiClient"]
