"""Report content generation through an OpenAI chat model."""

from __future__ import annotations

import json
import logging
from typing import Optional

from openai import OpenAI, OpenAIError

from ..config.settings import DEFAULT_MODEL
from ..exceptions import GenerationError

logger = logging.getLogger(__name__)

GENERATOR_PROMPT = " ".join(
    [
        "You generate professional report content based on a user prompt.",
        "Return plain text only. No markdown fences.",
        "Use headings and body text in a structured way (short headings, then paragraphs).",
        "Do not include the title or subtitle unless the prompt explicitly asks.",
    ]
)


class OpenAIContentGenerator:
    """
    Generates plain-text report content.

    Failures raise :class:`GenerationError`; the caller keeps its existing
    content in that case.

    Args:
        api_key: OpenAI API key; ignored when ``client`` is given
        model: Chat model name
        client: Optional preconfigured ``openai.OpenAI`` client
    """

    def __init__(self, api_key: str = "", model: str = DEFAULT_MODEL, client=None) -> None:
        if client is None and api_key:
            client = OpenAI(api_key=api_key)
        self._client = client
        self.model = model

    def generate(self, prompt: str, title: str = "", subtitle: Optional[str] = None) -> str:
        if not prompt or not prompt.strip():
            raise GenerationError("prompt is required")
        if self._client is None:
            raise GenerationError("OPENAI_API_KEY is not configured")
        payload = {"prompt": prompt, "title": title or "", "subtitle": subtitle or ""}
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": GENERATOR_PROMPT},
                    {"role": "user", "content": json.dumps(payload)},
                ],
            )
        except OpenAIError as exc:
            raise GenerationError("Content generation failed", str(exc)) from exc
        content = (response.choices[0].message.content or "").strip()
        if not content:
            raise GenerationError("No content generated")
        logger.info("Generated %d characters of content", len(content))
        return content
