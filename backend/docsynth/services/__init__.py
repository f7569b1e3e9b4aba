"""Service layer for the application."""

from docsynth.services.discovery import DiscoveryService, StrategyState
from docsynth.services.document_api import DocumentApiClient
from docsynth.services.object_store import ObjectStoreClient
from docsynth.services.persistence import DocumentPersister, StoredDocument, build_default_tiers
from docsynth.services.synthesizer import DocumentSynthesizer

__all__ = [
    "DiscoveryService",
    "DocumentApiClient",
    "DocumentPersister",
    "DocumentSynthesizer",
    "ObjectStoreClient",
    "StoredDocument",
    "StrategyState",
    "build_default_tiers",
]
