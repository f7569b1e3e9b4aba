"""Caller-facing pipeline: markup text in, stored document location out."""

from __future__ import annotations

import asyncio
import logging
from datetime import date
from typing import Dict, Iterable, List, Optional

from docsynth.document_builder import build_document
from docsynth.errors import GenerationError
from docsynth.schemas import DocumentRef
from docsynth.services.discovery import DiscoveryService
from docsynth.services.persistence import DocumentPersister, PersistenceRequest, StoredDocument

logger = logging.getLogger(__name__)


def render_template(template_text: str, replacements: Dict[str, str]) -> str:
    """Replace every ``{{KEY}}`` placeholder of ``template_text``."""

    rendered = template_text
    for key, value in replacements.items():
        rendered = rendered.replace(f"{{{{{key}}}}}", value)
    return rendered


def validate_document_name(document_name: str) -> str:
    name = document_name.strip()
    if not name:
        raise ValueError("Document name is empty")
    if "/" in name or "\\" in name:
        raise ValueError("Document name must not contain path separators")
    return name


class DocumentSynthesizer:
    """Parse, render and store documents, and expose discovery to callers."""

    def __init__(
        self,
        persister: DocumentPersister,
        discovery: DiscoveryService,
        *,
        generator=None,
        extension: str = "docx",
    ) -> None:
        self._persister = persister
        self._discovery = discovery
        self._generator = generator
        self.extension = extension

    def synthesize_and_store(
        self,
        raw_text: str,
        document_name: str,
        container_hint: Optional[str] = None,
    ) -> StoredDocument:
        """Turn markup text into a stored document.

        Raises :class:`~docsynth.errors.PersistenceError` only when every tier
        failed.
        """

        name = validate_document_name(document_name)
        document = build_document(raw_text)
        logger.info("Synthesizing '%s' from %s blocks", name, len(document))
        request = PersistenceRequest(
            document_name=name,
            raw_text=raw_text,
            document=document,
            container_hint=container_hint,
            extension=self.extension,
        )
        return self._persister.store(request)

    async def generate_document(
        self,
        prompt: str,
        document_name: str,
        *,
        template_url: Optional[str] = None,
        reference_urls: Iterable[str] = (),
        container_hint: Optional[str] = None,
    ) -> StoredDocument:
        """Generate content for ``prompt`` and store it as ``document_name``."""

        if self._generator is None:
            raise GenerationError("No text generator configured")
        if not prompt.strip():
            raise ValueError("Prompt is empty")

        references = await asyncio.to_thread(self._read_references, list(reference_urls))
        content = await self._generator.generate(prompt, references)

        if template_url and not template_url.lower().endswith(".docx"):
            template_text = await asyncio.to_thread(self._discovery.read_template_text, template_url)
            if template_text:
                content = render_template(
                    template_text,
                    {"CONTENT": content, "TITLE": document_name, "DATE": date.today().isoformat()},
                )
            else:
                logger.warning("Template %s is empty or unreadable, using generated content", template_url)

        return await asyncio.to_thread(self.synthesize_and_store, content, document_name, container_hint)

    def _read_references(self, urls: List[str]) -> Dict[str, str]:
        return {url: self._discovery.read_reference_text(url) for url in urls}

    def list_available_templates(self) -> List[DocumentRef]:
        return self._discovery.list_templates()

    def list_reference_materials(self) -> List[DocumentRef]:
        return self._discovery.list_reference_materials()


__all__ = ["DocumentSynthesizer", "render_template", "validate_document_name"]
