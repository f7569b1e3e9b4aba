"""Endpoints that synthesize, store and discover documents."""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, HTTPException

from docsynth.api.deps import get_synthesizer
from docsynth.errors import GenerationError, PersistenceError
from docsynth.schemas import (
    DocumentListResponse,
    GenerateDocumentRequest,
    StoredDocumentResponse,
    SynthesizeRequest,
)
from docsynth.services.persistence import StoredDocument
from docsynth.services.synthesizer import DocumentSynthesizer

logger = logging.getLogger("docsynth.api.documents")

router = APIRouter(tags=["documents"])


def _to_response(stored: StoredDocument) -> StoredDocumentResponse:
    return StoredDocumentResponse(location=stored.location, tier=stored.tier, degraded=stored.degraded)


@router.post("/documents", response_model=StoredDocumentResponse)
def create_document(
    payload: SynthesizeRequest,
    synthesizer: DocumentSynthesizer = Depends(get_synthesizer),
) -> StoredDocumentResponse:
    try:
        stored = synthesizer.synthesize_and_store(payload.content, payload.document_name, payload.container)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except PersistenceError as exc:
        logger.error("Document '%s' could not be stored: %s", payload.document_name, exc.cause)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return _to_response(stored)


@router.post("/documents/generate", response_model=StoredDocumentResponse)
async def generate_document(
    payload: GenerateDocumentRequest,
    synthesizer: DocumentSynthesizer = Depends(get_synthesizer),
) -> StoredDocumentResponse:
    try:
        stored = await synthesizer.generate_document(
            payload.prompt,
            payload.document_name,
            template_url=payload.template_url,
            reference_urls=payload.reference_urls,
            container_hint=payload.container,
        )
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except GenerationError as exc:
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    except PersistenceError as exc:
        logger.error("Generated document '%s' could not be stored: %s", payload.document_name, exc.cause)
        raise HTTPException(status_code=502, detail=str(exc)) from exc
    return _to_response(stored)


@router.get("/templates", response_model=DocumentListResponse)
def list_templates(synthesizer: DocumentSynthesizer = Depends(get_synthesizer)) -> DocumentListResponse:
    return DocumentListResponse(documents=synthesizer.list_available_templates())


@router.get("/references", response_model=DocumentListResponse)
def list_references(synthesizer: DocumentSynthesizer = Depends(get_synthesizer)) -> DocumentListResponse:
    return DocumentListResponse(documents=synthesizer.list_reference_materials())
