"""
Enrichment client for semantic chunking and priming summaries.

Talks to an OpenRouter-compatible chat-completions endpoint. The service is
optional and untrusted: every failure (network, HTTP status, malformed
payload) surfaces as EnrichmentError inside the client and is turned into
"no enrichment" at the public boundary.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional

import httpx

from readall.config import Settings, get_settings
from readall.models.enums import ChunkKind
from readall.services.reconciler import EnrichedItem

logger = logging.getLogger(__name__)

CHUNKING_SYSTEM_PROMPT = """
You are a semantic chunking engine for an RSVP speed reader.
Break the user's text into reading chunks (words, short phrases, idioms, or entities).
Max words per chunk: 5.
Prefer chunking noun phrases together.
Keep punctuation attached to the preceding word.
Output JSON ONLY: { "chunks": [ { "text": string, "kind": "phrase"|"word"|"entity"|"idiom" } ] }
"""

PRIMING_SYSTEM_PROMPT = """
You are an expert reading assistant. Your goal is to "prime" the reader before they start a new text.
Analyze the provided text (which is the beginning of a document) and identify the key themes, main characters, or core arguments.
Output exactly 5 distinct, high-value bullet points.
Output JSON ONLY: { "summary": [ "string", "string", "string", "string", "string" ] }
"""

CHUNKING_TEMPERATURE = 0.1
PRIMING_TEMPERATURE = 0.3

_CODE_FENCE_PATTERN = re.compile(r"```json\s*|\s*```")


class EnrichmentError(Exception):
    """Raised when the enrichment service fails or returns unusable data."""


def extract_json(raw: str) -> Dict[str, Any]:
    """
    Extract a JSON object from possibly messy model output.

    Tries the span between the first '{' and the last '}', then the whole
    text with Markdown code fences removed.

    Raises:
        EnrichmentError: If no JSON object can be parsed.
    """
    start = raw.find("{")
    end = raw.rfind("}")
    if start != -1 and end > start:
        try:
            return json.loads(raw[start:end + 1])
        except json.JSONDecodeError:
            logger.warning("Direct JSON extraction failed, retrying without code fences")

    cleaned = _CODE_FENCE_PATTERN.sub("", raw).strip()
    try:
        parsed = json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise EnrichmentError(f"Failed to parse JSON response: {raw[:50]}...") from e

    if not isinstance(parsed, dict):
        raise EnrichmentError("Expected a JSON object in response")
    return parsed


def parse_enriched_items(payload: Dict[str, Any]) -> List[EnrichedItem]:
    """
    Validate a chunking payload and convert it to EnrichedItem objects.

    Entries without a string ``text`` are skipped; unknown kinds fall back
    to ``word``.

    Raises:
        EnrichmentError: If the ``chunks`` array is missing.
    """
    raw_chunks = payload.get("chunks")
    if not isinstance(raw_chunks, list):
        raise EnrichmentError("Invalid JSON structure: missing chunks array")

    items: List[EnrichedItem] = []
    for entry in raw_chunks:
        if not isinstance(entry, dict) or not isinstance(entry.get("text"), str):
            continue
        try:
            kind = ChunkKind(entry.get("kind", ChunkKind.WORD.value))
        except ValueError:
            kind = ChunkKind.WORD
        items.append(EnrichedItem(text=entry["text"], kind=kind))

    return items


class EnrichmentClient:
    """Client for the chat-completions enrichment service."""

    def __init__(self, api_key: str, settings: Optional[Settings] = None):
        settings = settings or get_settings()
        self._api_key = api_key
        self.url = settings.enrichment_url
        self.model = settings.enrichment_model
        self.timeout = settings.enrichment_timeout_seconds

    @property
    def available(self) -> bool:
        """Whether a credential is configured."""
        return bool(self._api_key)

    async def _complete(self, system_prompt: str, user_text: str, temperature: float) -> str:
        """Send one chat completion and return the message content."""
        if not self._api_key:
            raise EnrichmentError("No API key configured")

        try:
            async with httpx.AsyncClient() as client:
                response = await client.post(
                    self.url,
                    headers={
                        "Authorization": f"Bearer {self._api_key}",
                        "Content-Type": "application/json",
                        "X-Title": "Readall",
                    },
                    json={
                        "model": self.model,
                        "temperature": temperature,
                        "messages": [
                            {"role": "system", "content": system_prompt},
                            {"role": "user", "content": user_text},
                        ],
                    },
                    timeout=self.timeout,
                )
                response.raise_for_status()
                data = response.json()
        except httpx.HTTPError as e:
            raise EnrichmentError(f"Enrichment request failed: {e}") from e
        except ValueError as e:
            raise EnrichmentError("Enrichment response is not JSON") from e

        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError) as e:
            raise EnrichmentError("No content in response") from e

        if not isinstance(content, str) or not content:
            raise EnrichmentError("No content in response")
        return content

    async def chunk_text(self, segment: str) -> List[EnrichedItem]:
        """
        Ask the service to regroup ``segment`` into reading chunks.

        Raises:
            EnrichmentError: On any transport or payload failure.
        """
        content = await self._complete(CHUNKING_SYSTEM_PROMPT, segment, CHUNKING_TEMPERATURE)
        return parse_enriched_items(extract_json(content))

    async def semantic_chunks(self, segment: str) -> List[EnrichedItem]:
        """
        Enrich ``segment``, returning an empty list when enrichment is unavailable.

        Never raises; the deterministic chunks remain in use on failure.
        """
        if not self.available:
            logger.warning("No API key provided, keeping algorithmic chunks")
            return []

        try:
            return await self.chunk_text(segment)
        except EnrichmentError:
            logger.exception("Semantic chunking failed")
            return []

    async def priming_summary(self, text: str) -> Optional[List[str]]:
        """
        Generate a short bullet summary of the beginning of a document.

        Returns:
            The summary points, or None when unavailable or malformed.
        """
        if not self.available or not text:
            return None

        try:
            content = await self._complete(PRIMING_SYSTEM_PROMPT, text, PRIMING_TEMPERATURE)
            payload = extract_json(content)
        except EnrichmentError:
            logger.exception("Priming generation failed")
            return None

        summary = payload.get("summary")
        if not isinstance(summary, list) or not summary:
            return None
        return [str(point) for point in summary]
