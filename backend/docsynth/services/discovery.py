"""Container and document discovery with a sticky search-reliability flag."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from docsynth.errors import DiscoveryError
from docsynth.schemas import DocumentRef

logger = logging.getLogger(__name__)

WORD_DOCUMENT = "Word Document"
SITE_PAGE = "Site Page"
DOCX_PLACEHOLDER = (
    "This is a placeholder for the content of a Word document. "
    "Word documents cannot be read directly as text."
)

_TAG_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"\s+")


@dataclass(slots=True)
class StrategyState:
    """Process-lifetime memo of whether search-based enumeration works.

    Starts optimistic. Once marked unreliable it stays that way for the
    lifetime of the object; construct a new one to start over.
    """

    enumeration_is_reliable: bool = True
    probed: bool = False

    def mark_unreliable(self) -> None:
        self.enumeration_is_reliable = False


def _parse_created(value: Any) -> Optional[datetime]:
    if not value:
        return None
    try:
        return datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    except ValueError:
        return None


def _rows(payload: Any, source: str) -> List[Dict[str, Any]]:
    """Narrow a raw collaborator payload to its mapping rows."""

    if not isinstance(payload, list):
        raise DiscoveryError(f"{source} returned {type(payload).__name__} instead of a list")
    return [row for row in payload if isinstance(row, dict)]


def _last_segment(path: str) -> str:
    parts = path.rstrip("/").split("/")
    return parts[-1] if parts else ""


class DiscoveryService:
    """Enumerate containers and documents of the content store.

    Every public method degrades to a default answer instead of raising.
    """

    TEMPLATE_QUERY = "fileextension:docx"
    SITE_PAGE_QUERY = "contentclass:STS_ListItem_WebPageLibrary"
    SITE_PAGES_CONTAINER = "SitePages"
    SEARCH_PROPERTIES = ["Title", "Path", "FileExtension", "Write", "UniqueId", "ContentTypeId"]

    def __init__(
        self,
        store,
        *,
        site_path: str,
        state: Optional[StrategyState] = None,
        default_container: str = "Shared Documents",
        fallback_containers: Iterable[str] = ("Shared Documents", "Documents", "Dokument"),
        row_limit: int = 500,
    ) -> None:
        self._store = store
        self.site_path = "/" + site_path.strip("/") if site_path.strip("/") else ""
        self.state = state if state is not None else StrategyState()
        self.default_container = default_container
        self.fallback_containers = list(fallback_containers)
        self.row_limit = row_limit

    def folder_path(self, container: str) -> str:
        """Server-relative folder of ``container``."""

        return f"{self.site_path}/{container}"

    # ------------------------------------------------------------------
    # Containers
    # ------------------------------------------------------------------
    def list_containers(self) -> List[str]:
        try:
            raw = _rows(self._store.list_containers(), "Container listing")
        except Exception as exc:
            logger.error("Failed to enumerate containers, using defaults: %s", exc)
            return list(self.fallback_containers)

        names = [str(item.get("Title") or "").strip() for item in raw]
        containers = [name for name in names if name and "/" not in name and "_catalogs" not in name]
        logger.info("Found containers (filtered): %s", containers)

        if not containers:
            containers = list(self.fallback_containers)
        if self.default_container not in containers:
            containers.append(self.default_container)
        return containers

    # ------------------------------------------------------------------
    # Documents
    # ------------------------------------------------------------------
    def find_documents(self, container: str) -> List[DocumentRef]:
        """Return the ``.docx`` files of ``container``.

        Uses the list-item endpoint first and the folder listing when that
        fails. Returns an empty list when both fail.
        """

        try:
            items = _rows(self._store.list_items(container, name_contains=".docx"), f"Items of {container}")
            logger.info("Fetched %s documents from %s", len(items), container)
            return [self._ref_from_item(item, WORD_DOCUMENT) for item in items]
        except Exception as exc:
            logger.info("Listing items of %s failed, trying its folder: %s", container, exc)

        try:
            files = _rows(self._store.list_folder(self.folder_path(container)), f"Folder of {container}")
        except Exception as exc:
            logger.error("Folder listing failed for %s: %s", container, exc)
            return []

        documents = [
            self._ref_from_file(entry)
            for entry in files
            if str(entry.get("Name") or "").lower().endswith(".docx")
        ]
        logger.info("Fetched %s documents from folder of %s", len(documents), container)
        return documents

    def probe_enumeration_reliability(self) -> StrategyState:
        """Issue one test search and remember whether search can be trusted.

        Only a raised error marks search unreliable; an empty result does not.
        """

        try:
            results = self._store.search(self.TEMPLATE_QUERY, row_limit=1)
        except Exception as exc:
            logger.error("Search API failed, falling back to direct enumeration: %s", exc)
            self.state.mark_unreliable()
        else:
            logger.info("Search probe succeeded (%s results)", len(results))
        self.state.probed = True
        logger.info(
            "Enumeration strategy: %s",
            "search when possible" if self.state.enumeration_is_reliable else "direct calls",
        )
        return self.state

    def list_templates(self) -> List[DocumentRef]:
        if not self.state.enumeration_is_reliable:
            logger.info("Search marked unreliable, enumerating containers directly")
            return self._documents_from_containers()

        try:
            documents = self._search(self.TEMPLATE_QUERY, WORD_DOCUMENT)
        except Exception as exc:
            logger.warning("Search failed, switching to direct enumeration: %s", exc)
            self.state.mark_unreliable()
        else:
            if documents:
                logger.info("Search found %s documents", len(documents))
                return documents
            logger.info("Search returned no documents, enumerating containers directly")
        return self._documents_from_containers()

    def list_site_pages(self) -> List[DocumentRef]:
        if self.state.enumeration_is_reliable:
            try:
                pages = self._search(self.SITE_PAGE_QUERY, SITE_PAGE)
            except Exception as exc:
                logger.warning("Search for site pages failed: %s", exc)
            else:
                if pages:
                    return pages
        return self._site_pages_directly()

    def list_reference_materials(self) -> List[DocumentRef]:
        """Site pages followed by the documents of every container."""

        materials: List[DocumentRef] = []
        try:
            materials.extend(self.list_site_pages())
        except Exception as exc:
            logger.warning("Could not get site pages: %s", exc)
        try:
            materials.extend(self.list_templates())
        except Exception as exc:
            logger.warning("Could not get documents: %s", exc)
        return materials

    def read_reference_text(self, url: str) -> str:
        """Return the plain text behind ``url`` for use as generator context."""

        if url.lower().endswith(".docx"):
            return DOCX_PLACEHOLDER
        try:
            content = self._store.read_text(url)
        except Exception as exc:
            logger.error("Failed to read reference %s: %s", url, exc)
            return ""
        return _WHITESPACE_RE.sub(" ", _TAG_RE.sub(" ", content)).strip()

    def read_template_text(self, url: str) -> str:
        """Return the raw text of a non-DOCX template, line structure intact."""

        try:
            return self._store.read_text(url)
        except Exception as exc:
            logger.error("Failed to read template %s: %s", url, exc)
            return ""

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------
    def _search(self, query: str, content_type: str) -> List[DocumentRef]:
        scoped = f"{query} path:{self.site_path}" if self.site_path else query
        rows = _rows(
            self._store.search(scoped, row_limit=self.row_limit, select_properties=self.SEARCH_PROPERTIES),
            "Search",
        )
        return [self._ref_from_search(row, content_type) for row in rows]

    def _documents_from_containers(self) -> List[DocumentRef]:
        containers = self.list_containers()
        logger.info("Fetching documents from %s containers", len(containers))
        documents: List[DocumentRef] = []
        for container in containers:
            documents.extend(self.find_documents(container))
        return documents

    def _site_pages_directly(self) -> List[DocumentRef]:
        try:
            items = _rows(self._store.list_items(self.SITE_PAGES_CONTAINER), "Site pages")
        except Exception as exc:
            logger.error("Direct listing of site pages failed: %s", exc)
            return []
        return [self._ref_from_item(item, SITE_PAGE) for item in items]

    @staticmethod
    def _ref_from_search(row: Dict[str, Any], content_type: str) -> DocumentRef:
        path = str(row.get("Path") or "")
        return DocumentRef(
            id=str(row.get("UniqueId") or "unknown"),
            name=_last_segment(path) or str(row.get("Title") or "") or "Unnamed Document",
            url=path,
            content_type=content_type,
            created=_parse_created(row.get("Write")),
        )

    @staticmethod
    def _ref_from_item(item: Dict[str, Any], content_type: str) -> DocumentRef:
        file_info = item.get("File") if isinstance(item.get("File"), dict) else {}
        if content_type == SITE_PAGE:
            name = item.get("Title") or item.get("FileLeafRef") or "Unnamed Page"
        else:
            name = item.get("FileLeafRef") or "Unnamed Document"
        return DocumentRef(
            id=str(item.get("Id") or "unknown"),
            name=str(name),
            url=str(file_info.get("ServerRelativeUrl") or ""),
            content_type=content_type,
            created=_parse_created(item.get("Created")),
        )

    @staticmethod
    def _ref_from_file(entry: Dict[str, Any]) -> DocumentRef:
        return DocumentRef(
            id=str(entry.get("UniqueId") or "unknown"),
            name=str(entry.get("Name") or "Unnamed Document"),
            url=str(entry.get("ServerRelativeUrl") or ""),
            content_type=WORD_DOCUMENT,
            created=_parse_created(entry.get("TimeCreated") or entry.get("TimeLastModified")),
        )


__all__ = ["DOCX_PLACEHOLDER", "DiscoveryService", "StrategyState"]
