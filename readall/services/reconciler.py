"""Merge enrichment output into an existing chunk sequence.

The enrichment service returns phrase groupings as bare ``(text, kind)``
pairs. Offsets are recovered by searching the source text left to right;
anything that cannot be found is dropped rather than inserted, so the
merged sequence only ever contains text that exists in the source.
"""

import logging
from dataclasses import dataclass
from typing import Iterable, List, Sequence

from readall.models.chunk import Chunk
from readall.models.enums import ChunkKind
from readall.services.tokenizer import calculate_focal_index

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EnrichedItem:
    """One chunk as proposed by the enrichment service, without offsets."""

    text: str
    kind: ChunkKind = ChunkKind.WORD


def resolve_enriched(text: str, items: Iterable[EnrichedItem]) -> List[Chunk]:
    """
    Resolve enriched items to offsets in ``text``.

    Each item is matched at its first occurrence at or after the end of the
    previously resolved item, which keeps repeated substrings from matching
    earlier text. Items that are blank or not found are dropped.

    Returns:
        Resolved chunks, ordered and non-overlapping.
    """
    resolved: List[Chunk] = []
    search_from = 0
    dropped = 0

    for item in items:
        if not item.text.strip():
            dropped += 1
            continue

        start = text.find(item.text, search_from)
        if start == -1:
            dropped += 1
            continue

        end = start + len(item.text)
        search_from = end
        resolved.append(
            Chunk(
                text=item.text,
                start=start,
                end=end,
                kind=item.kind,
                focal_index=calculate_focal_index(item.text),
            )
        )

    if dropped:
        logger.info("Dropped %d enriched item(s) not found in source text", dropped)

    return resolved


def reconcile(existing: Sequence[Chunk], resolved: Sequence[Chunk]) -> List[Chunk]:
    """
    Build the merged sequence: resolved prefix, then the untouched tail.

    The tail is every existing chunk starting at or after the end of the
    last resolved chunk (offset 0 when nothing resolved).
    """
    boundary = resolved[-1].end if resolved else 0
    tail = [chunk for chunk in existing if chunk.start >= boundary]
    return [*resolved, *tail]


def merge_enrichment(
    text: str,
    existing: Sequence[Chunk],
    items: Iterable[EnrichedItem],
) -> List[Chunk]:
    """Resolve enriched items against ``text`` and reconcile with ``existing``."""
    return reconcile(existing, resolve_enriched(text, items))
