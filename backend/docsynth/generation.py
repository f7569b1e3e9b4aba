from __future__ import annotations

import logging
from typing import Any, Mapping

import httpx

from .errors import GenerationError
from .llm_utils import build_messages, extract_reply

logger = logging.getLogger("docsynth.generation")


class TextGenerator:
    """Минимальный клиент Ollama, генерирующий текст документа."""

    def __init__(self, base_url: str, model: str, timeout: float = 120.0) -> None:
        self.base_url = base_url.rstrip("/")
        self.model = model
        self.timeout = timeout

    async def chat(self, messages: list[dict[str, str]]) -> dict[str, Any]:
        payload = {
            "model": self.model,
            "messages": messages,
            "stream": False,
        }
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            response = await client.post(f"{self.base_url}/api/chat", json=payload)
            response.raise_for_status()
            return response.json()

    async def generate(self, prompt: str, reference_texts: Mapping[str, str]) -> str:
        """Return generated markup for ``prompt`` using ``reference_texts`` as context."""

        messages = build_messages(prompt, reference_texts)
        try:
            raw = await self.chat(messages)
        except httpx.HTTPStatusError as exc:
            logger.error("Ollama returned HTTP %s: %s", exc.response.status_code, exc.response.text)
            raise GenerationError("Text generation returned an error") from exc
        except httpx.HTTPError as exc:
            logger.error("Error talking to Ollama: %s", exc)
            raise GenerationError("Could not reach the text generator") from exc

        reply = extract_reply(raw)
        if not reply:
            raise GenerationError("Text generator returned empty content")
        logger.info("Generated %s characters of content", len(reply))
        logger.debug("Generated content (first 200 chars): %s", reply[:200])
        return reply
