"""Common dependency functions for API routes."""

from functools import lru_cache

from fastapi import Depends

from docsynth.core.config import settings
from docsynth.generation import TextGenerator
from docsynth.services.discovery import DiscoveryService, StrategyState
from docsynth.services.document_api import DocumentApiClient
from docsynth.services.object_store import ObjectStoreClient
from docsynth.services.persistence import DocumentPersister, build_default_tiers
from docsynth.services.synthesizer import DocumentSynthesizer


@lru_cache
def get_object_store() -> ObjectStoreClient:
    return ObjectStoreClient(
        base_url=settings.object_store_url,
        token=settings.object_store_token,
        timeout=settings.request_timeout,
    )


@lru_cache
def get_document_api() -> DocumentApiClient:
    return DocumentApiClient(
        settings.document_api_url,
        site_path=settings.site_path,
        token=settings.object_store_token,
        timeout=settings.request_timeout,
    )


@lru_cache
def get_text_generator() -> TextGenerator:
    return TextGenerator(
        base_url=settings.ollama_base_url,
        model=settings.generation_model,
        timeout=settings.generation_timeout,
    )


@lru_cache
def get_strategy_state() -> StrategyState:
    return StrategyState()


@lru_cache
def get_discovery_service() -> DiscoveryService:
    return DiscoveryService(
        get_object_store(),
        site_path=settings.site_path,
        state=get_strategy_state(),
        default_container=settings.default_container,
        fallback_containers=settings.fallback_containers,
        row_limit=settings.search_row_limit,
    )


def get_synthesizer(
    discovery: DiscoveryService = Depends(get_discovery_service),
    generator: TextGenerator = Depends(get_text_generator),
) -> DocumentSynthesizer:
    persister = DocumentPersister(discovery, build_default_tiers(get_object_store(), get_document_api()))
    return DocumentSynthesizer(
        persister,
        discovery,
        generator=generator,
        extension=settings.document_extension,
    )
