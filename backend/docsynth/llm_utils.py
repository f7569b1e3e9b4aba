"""Helper utilities for building generator prompts and reading chat responses."""
from __future__ import annotations

from string import Template
from typing import Any, Mapping

SYSTEM_PROMPT = "You are an assistant that helps create professional content."

_NO_REFERENCES = "No documents explicitly selected for reference."

_USER_PROMPT_TEMPLATE = Template("""
User request: $request

EXPLICITLY REFERENCED MATERIALS:
$references

Please generate content that matches the style and format of our existing documents.
The content should be professional and ready to insert into a Word document.
Use "# ", "## " and "### " for headings, "* " for bullet points, "**" for bold text,
"---" for dividers and "| a | b |" rows for tables.
""")


def build_messages(prompt: str, reference_texts: Mapping[str, str]) -> list[dict[str, str]]:
    """Return chat messages embedding the user request and every reference text."""

    references = "".join(f"\n\nContent from {url}:\n{text}" for url, text in reference_texts.items())
    user_prompt = _USER_PROMPT_TEMPLATE.substitute(
        request=prompt.strip(),
        references=references.strip() or _NO_REFERENCES,
    )
    return [
        {"role": "system", "content": SYSTEM_PROMPT},
        {"role": "user", "content": user_prompt},
    ]


def extract_reply(data: dict[str, Any]) -> str:
    """Return the textual reply from an Ollama chat response."""

    message = data.get("message") if isinstance(data, dict) else None
    if isinstance(message, dict):
        content = message.get("content") or message.get("text")
        if isinstance(content, str):
            return content.strip()
        if isinstance(content, list):
            joined = "\n".join(str(part) for part in content)
            return joined.strip()
    fallback = data.get("response") or data.get("reply") if isinstance(data, dict) else ""
    return str(fallback or "").strip()
