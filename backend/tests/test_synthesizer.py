"""End-to-end tests for the synthesizer facade."""

from __future__ import annotations

import asyncio
from datetime import date
from io import BytesIO

import pytest
from docx import Document as open_docx

from docsynth.errors import GenerationError
from docsynth.services.persistence import DocumentPersister, build_default_tiers
from docsynth.services.synthesizer import DocumentSynthesizer, render_template, validate_document_name

FOLDER = "/sites/docs/Shared Documents"


class DummyGenerator:
    """Generator stub that records its inputs and returns canned markup."""

    def __init__(self, reply: str = "## Section\n* point") -> None:
        self.reply = reply
        self.calls = []

    async def generate(self, prompt, reference_texts):
        self.calls.append((prompt, dict(reference_texts)))
        return self.reply


@pytest.fixture
def generator() -> DummyGenerator:
    return DummyGenerator()


@pytest.fixture
def synthesizer(discovery, store, document_api, generator) -> DocumentSynthesizer:
    persister = DocumentPersister(discovery, build_default_tiers(store, document_api))
    return DocumentSynthesizer(persister, discovery, generator=generator)


def test_synthesize_and_store_writes_docx(synthesizer: DocumentSynthesizer, store) -> None:
    stored = synthesizer.synthesize_and_store("# Title\n| A | B |\n|---|---|\n| 1 | 2 |", "  offer ")

    assert stored.location == f"{FOLDER}/offer.docx"
    assert stored.tier == "binary_upload"
    docx_document = open_docx(BytesIO(store.files[stored.location]))
    assert docx_document.paragraphs[0].text == "Title"
    assert docx_document.tables[0].cell(1, 0).text == "1"


@pytest.mark.parametrize("name", ["", "   ", "a/b", "a\\b"])
def test_invalid_document_names(name: str) -> None:
    with pytest.raises(ValueError):
        validate_document_name(name)


def test_invalid_name_stores_nothing(synthesizer: DocumentSynthesizer, store) -> None:
    with pytest.raises(ValueError):
        synthesizer.synthesize_and_store("text", "../escape")

    assert store.files == {}


def test_render_template() -> None:
    rendered = render_template("# {{TITLE}}\n{{CONTENT}}\n{{UNKNOWN}}", {"TITLE": "Offer", "CONTENT": "Body"})

    assert rendered == "# Offer\nBody\n{{UNKNOWN}}"


def test_generate_document_with_references(synthesizer: DocumentSynthesizer, store, generator) -> None:
    store.files["/sites/docs/SitePages/Home.aspx"] = b"<p>Company style</p>"

    stored = asyncio.run(
        synthesizer.generate_document(
            "Write an offer",
            "offer",
            reference_urls=["/sites/docs/SitePages/Home.aspx"],
        )
    )

    assert stored.location == f"{FOLDER}/offer.docx"
    assert generator.calls == [("Write an offer", {"/sites/docs/SitePages/Home.aspx": "Company style"})]
    docx_document = open_docx(BytesIO(store.files[stored.location]))
    assert [p.style.name for p in docx_document.paragraphs] == ["Heading 2", "List Bullet"]


def test_generate_document_fills_text_template(synthesizer: DocumentSynthesizer, store, document_api) -> None:
    store.files["/templates/letter.md"] = b"# {{TITLE}}\n{{DATE}}\n{{CONTENT}}"
    store.failing_upload_suffixes.add(".docx")

    stored = asyncio.run(
        synthesizer.generate_document("Write", "letter", template_url="/templates/letter.md")
    )

    assert stored.tier == "remote_api"
    text = document_api.created["drive-Shared Documents/letter.txt"].decode("utf-8")
    assert text == f"# letter\n{date.today().isoformat()}\n## Section\n* point"


def test_docx_template_is_not_read(synthesizer: DocumentSynthesizer, store) -> None:
    asyncio.run(synthesizer.generate_document("Write", "offer", template_url="/templates/base.docx"))

    assert store.count("read_text") == 0


def test_generate_requires_generator(discovery, store, document_api) -> None:
    persister = DocumentPersister(discovery, build_default_tiers(store, document_api))
    synthesizer = DocumentSynthesizer(persister, discovery)

    with pytest.raises(GenerationError):
        asyncio.run(synthesizer.generate_document("Write", "offer"))


def test_generate_rejects_blank_prompt(synthesizer: DocumentSynthesizer) -> None:
    with pytest.raises(ValueError):
        asyncio.run(synthesizer.generate_document("   ", "offer"))


def test_listing_delegates_to_discovery(synthesizer: DocumentSynthesizer, store) -> None:
    store.items["SitePages"] = [{"Id": 1, "Title": "Home"}]

    assert synthesizer.list_available_templates() == []
    assert [ref.name for ref in synthesizer.list_reference_materials()] == ["Home"]
