"""
Per-line heading classification for the plain-text PDF path.

The OpenAI-backed classifier is optional; whenever it is unavailable, fails
or returns a label list of the wrong length, the local heuristic is used and
rendering carries on.
"""

from __future__ import annotations

import json
import logging
import re
from typing import List, Optional, Protocol, Sequence

from openai import OpenAI, OpenAIError

from ..config.settings import DEFAULT_MODEL
from ..exceptions import ClassificationError

logger = logging.getLogger(__name__)

LABELS = ("heading", "body", "blank")
MAX_HEADING_CHARS = 60
MAX_HEADING_WORDS = 8
NUMBERED_HEADING = re.compile(r"^(\d+(\.\d+)*|[A-Z]|[IVXLC]+)[).]?\s+")

CLASSIFIER_PROMPT = "\n".join(
    [
        "Classify each line as: heading, body, or blank.",
        "Be STRICT: paragraphs must be labeled body.",
        f"Headings must be short (<= {MAX_HEADING_CHARS} chars and <= {MAX_HEADING_WORDS} words).",
        "Heading rules:",
        "- Numbered headings only, like '1. Introduction' or '2.3 Scope'",
        "If a line is long, has multiple sentences, or reads like a paragraph, label it body.",
        "Return JSON only in this exact shape:",
        '{"labels":["heading","body","blank",...]}',
        "The labels array MUST match the input lines length exactly.",
    ]
)


class HeadingClassifier(Protocol):
    def classify(self, lines: Sequence[str]) -> List[str]: ...


def is_heading_candidate(line: str) -> bool:
    """Short, unpunctuated line starting with a numeric, letter or roman prefix."""
    text = line.strip()
    if not text:
        return False
    if len(text) > MAX_HEADING_CHARS or len(text.split()) > MAX_HEADING_WORDS:
        return False
    if text[-1] in ".!?":
        return False
    return bool(NUMBERED_HEADING.match(text))


class LocalHeadingClassifier:
    """Deterministic heuristic labelling."""

    def classify(self, lines: Sequence[str]) -> List[str]:
        labels = []
        for line in lines:
            if not line.strip():
                labels.append("blank")
            else:
                labels.append("heading" if is_heading_candidate(line) else "body")
        return labels


def normalize_labels(lines: Sequence[str], labels: Sequence[str]) -> List[str]:
    """
    Reconcile service labels with the local rules.

    Blank lines are always ``blank``; a line stays a heading only when the
    service says so and it passes :func:`is_heading_candidate`.
    """
    normalized = []
    for line, label in zip(lines, labels):
        if not line.strip():
            normalized.append("blank")
        elif label == "heading" and is_heading_candidate(line):
            normalized.append("heading")
        else:
            normalized.append("body")
    return normalized


class OpenAIHeadingClassifier:
    """
    Classifier backed by an OpenAI chat model.

    Args:
        api_key: OpenAI API key; ignored when ``client`` is given
        model: Chat model name
        client: Optional preconfigured ``openai.OpenAI`` client
    """

    def __init__(self, api_key: str = "", model: str = DEFAULT_MODEL, client=None) -> None:
        if client is None:
            if not api_key:
                raise ClassificationError("OPENAI_API_KEY is not configured")
            client = OpenAI(api_key=api_key)
        self._client = client
        self.model = model

    def classify(self, lines: Sequence[str]) -> List[str]:
        try:
            response = self._client.chat.completions.create(
                model=self.model,
                messages=[
                    {"role": "system", "content": CLASSIFIER_PROMPT},
                    {"role": "user", "content": json.dumps({"lines": list(lines)})},
                ],
                response_format={"type": "json_object"},
            )
        except OpenAIError as exc:
            raise ClassificationError("Heading classification request failed", str(exc)) from exc
        text = (response.choices[0].message.content or "").strip()
        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise ClassificationError("Classifier returned invalid JSON", text[:80]) from exc
        labels = payload.get("labels") if isinstance(payload, dict) else None
        if not isinstance(labels, list) or len(labels) != len(lines):
            raise ClassificationError(
                "Classifier returned mismatched labels",
                f"expected {len(lines)}, got {len(labels) if isinstance(labels, list) else 'none'}",
            )
        return normalize_labels(lines, [str(label) for label in labels])


def resolve_labels(lines: Sequence[str], classifier: Optional[HeadingClassifier] = None) -> List[str]:
    """
    Label ``lines``, falling back to :class:`LocalHeadingClassifier`.

    Never raises on service failure; the result always has ``len(lines)`` entries.
    """
    local = LocalHeadingClassifier()
    if classifier is None:
        return local.classify(lines)
    try:
        labels = classifier.classify(lines)
    except Exception as exc:
        logger.warning("Heading classification failed, using local heuristic: %s", exc)
        return local.classify(lines)
    if len(labels) != len(lines) or any(label not in LABELS for label in labels):
        logger.warning("Heading classifier returned unusable labels, using local heuristic")
        return local.classify(lines)
    return list(labels)
