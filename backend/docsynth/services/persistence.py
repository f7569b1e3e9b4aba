"""Three-tier persistence of synthesized documents."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, List, Optional, Sequence

from docsynth.document_models import Document
from docsynth.docx_writer import pack_document
from docsynth.errors import PersistenceError

logger = logging.getLogger(__name__)

TEXT_EXTENSION = "txt"


@dataclass(slots=True)
class StorageTarget:
    """Container chosen for one attempt, resolved right before it runs."""

    container_name: str
    folder_path: str


@dataclass(slots=True)
class PersistenceRequest:
    document_name: str
    raw_text: str
    document: Document
    container_hint: Optional[str] = None
    extension: str = "docx"


@dataclass(slots=True)
class StoredDocument:
    location: str
    tier: str
    degraded: bool


@dataclass(slots=True)
class TierAttempt:
    """Outcome of one tier, kept for logging and error reporting."""

    tier: str
    target: StorageTarget
    location: Optional[str] = None
    error: Optional[BaseException] = None


class PersistenceTier:
    """One storage strategy. ``attempt`` returns the stored location or raises."""

    name = "tier"
    degraded = True

    def attempt(self, request: PersistenceRequest, target: StorageTarget) -> str:
        raise NotImplementedError


class BinaryUploadTier(PersistenceTier):
    """Serialize the tree to DOCX and upload it over any existing file."""

    name = "binary_upload"
    degraded = False

    def __init__(self, store, packer: Callable[[Document], bytes] = pack_document) -> None:
        self._store = store
        self._packer = packer

    def attempt(self, request: PersistenceRequest, target: StorageTarget) -> str:
        payload = self._packer(request.document)
        path = f"{target.folder_path}/{request.document_name}.{request.extension}"
        logger.info("Uploading %s (%s bytes)", path, len(payload))
        return self._store.upload(path, payload, overwrite=True)


class RemoteApiTier(PersistenceTier):
    """Create a plain-text file through the document API."""

    name = "remote_api"

    def __init__(self, api) -> None:
        self._api = api

    def attempt(self, request: PersistenceRequest, target: StorageTarget) -> str:
        container_id = self._api.resolve_container_id(target.container_name)
        file_name = f"{request.document_name}.{TEXT_EXTENSION}"
        logger.info("Creating %s through the document API (container %s)", file_name, container_id)
        created = self._api.create_text_file(container_id, file_name, request.raw_text.encode("utf-8"))
        logger.info("Document API stored %s at %s", file_name, created)
        return f"{target.folder_path}/{file_name}"


class CopyConvertTier(PersistenceTier):
    """Upload the text as a temporary file and copy it to the final name.

    A failed copy returns the temporary file instead of failing. A failed
    cleanup is only logged.
    """

    name = "copy_convert"

    def __init__(self, store) -> None:
        self._store = store

    def attempt(self, request: PersistenceRequest, target: StorageTarget) -> str:
        temp_path = f"{target.folder_path}/{request.document_name}_temp.{TEXT_EXTENSION}"
        logger.info("Creating temporary file %s", temp_path)
        temp_location = self._store.upload(temp_path, request.raw_text.encode("utf-8"), overwrite=True)

        final_path = f"{target.folder_path}/{request.document_name}.{request.extension}"
        try:
            self._store.copy(temp_location, final_path, overwrite=True)
        except Exception as exc:
            logger.error("Could not copy %s to %s, keeping temporary file: %s", temp_location, final_path, exc)
            return temp_location
        logger.info("Copied %s to %s", temp_location, final_path)

        try:
            self._store.delete(temp_location)
        except Exception as exc:
            logger.warning("Could not delete temporary file %s: %s", temp_location, exc)
        return final_path


class DocumentPersister:
    """Try each tier in order until one stores the document."""

    def __init__(self, discovery, tiers: Sequence[PersistenceTier]) -> None:
        if not tiers:
            raise ValueError("At least one persistence tier is required")
        self._discovery = discovery
        self._tiers = list(tiers)

    @property
    def tiers(self) -> List[PersistenceTier]:
        return list(self._tiers)

    def resolve_target(self, container_hint: Optional[str]) -> StorageTarget:
        requested = container_hint or self._discovery.default_container
        containers = self._discovery.list_containers()
        container = requested
        if requested not in containers and containers:
            container = containers[0]
            logger.info("Using available container '%s' instead of '%s'", container, requested)
        return StorageTarget(container_name=container, folder_path=self._discovery.folder_path(container))

    def store(self, request: PersistenceRequest) -> StoredDocument:
        attempts: List[TierAttempt] = []
        for tier in self._tiers:
            target = self.resolve_target(request.container_hint)
            try:
                location = tier.attempt(request, target)
            except Exception as exc:
                logger.error("Tier %s failed for '%s': %s", tier.name, request.document_name, exc)
                attempts.append(TierAttempt(tier=tier.name, target=target, error=exc))
                continue

            attempts.append(TierAttempt(tier=tier.name, target=target, location=location))
            if tier.degraded:
                logger.warning("Stored '%s' with degraded tier %s at %s", request.document_name, tier.name, location)
            else:
                logger.info("Stored '%s' at %s", request.document_name, location)
            return StoredDocument(location=location, tier=tier.name, degraded=tier.degraded)

        first_error = attempts[0].error
        logger.error("All attempts to store '%s' failed", request.document_name)
        raise PersistenceError(
            f"Failed to store document '{request.document_name}': {first_error}",
            cause=first_error,
            attempts=attempts,
        ) from first_error


def build_default_tiers(store, api, packer: Callable[[Document], bytes] = pack_document) -> List[PersistenceTier]:
    return [BinaryUploadTier(store, packer), RemoteApiTier(api), CopyConvertTier(store)]


__all__ = [
    "BinaryUploadTier",
    "CopyConvertTier",
    "DocumentPersister",
    "PersistenceRequest",
    "PersistenceTier",
    "RemoteApiTier",
    "StorageTarget",
    "StoredDocument",
    "TierAttempt",
    "build_default_tiers",
]
