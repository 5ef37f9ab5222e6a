"""
Deterministic chunker for RSVP reading.

Splits raw text into offset-tagged word chunks in a single left-to-right
scan. Offsets refer to the text exactly as given; no normalization is
applied so that later stages (chapter mapping, enrichment merge) can
address the same source string.

Example usage:
    >>> chunks = tokenize("Hello, world!")
    >>> [(c.text, c.start, c.end) for c in chunks]
    [('Hello,', 0, 6), ('world!', 7, 13)]
"""

import re
from typing import List, Optional, Sequence

from readall.models.chunk import Chunk
from readall.models.enums import ChunkKind

from .constants import APOSTROPHES, TRAILING_PUNCTUATION
from .orp import calculate_focal_index

# 1. Words with apostrophes (ASCII and U+2019) or hyphens, optionally
#    followed by clause/sentence punctuation.
# 2. Any other run of non-whitespace (symbols, numbers, emoji).
_CHUNK_PATTERN = re.compile(
    rf"[\w{re.escape(APOSTROPHES)}\-]+[{re.escape(TRAILING_PUNCTUATION)}]*"
    r"|\S+"
)


def tokenize(text: str) -> List[Chunk]:
    """
    Split text into word chunks with source offsets.

    Args:
        text: The raw document text.

    Returns:
        Chunks ordered by start offset. Empty for empty or whitespace-only input.
    """
    chunks: List[Chunk] = []

    for match in _CHUNK_PATTERN.finditer(text):
        token = match.group(0)
        chunks.append(
            Chunk(
                text=token,
                start=match.start(),
                end=match.end(),
                kind=ChunkKind.WORD,
                focal_index=calculate_focal_index(token),
            )
        )

    return chunks


def find_chunk_at_or_after(chunks: Sequence[Chunk], offset: int) -> Optional[int]:
    """
    Find the index of the first chunk starting at or after a character offset.

    Chunks are ordered by start, so this is a binary search.

    Returns:
        The chunk index, or None if every chunk starts before ``offset``.
    """
    lo, hi = 0, len(chunks)
    while lo < hi:
        mid = (lo + hi) // 2
        if chunks[mid].start < offset:
            lo = mid + 1
        else:
            hi = mid
    return lo if lo < len(chunks) else None


def validate_chunks(text: str, chunks: Sequence[Chunk]) -> None:
    """
    Validate chunk invariants and raise explicit errors on violations.

    Checks that every chunk's offsets address its text in ``text``, that
    chunks are ordered and non-overlapping, and that focal indices are in
    bounds.

    Raises:
        ValueError: On the first violated invariant.
    """
    previous_end = 0
    for index, chunk in enumerate(chunks):
        if not (0 <= chunk.start < chunk.end):
            raise ValueError(f"invalid offsets at chunk {index}: {chunk.start}..{chunk.end}")

        if chunk.start < previous_end:
            raise ValueError(
                f"chunk {index} overlaps previous chunk: start={chunk.start} previous_end={previous_end}"
            )

        extracted = text[chunk.start:chunk.end]
        if extracted != chunk.text:
            raise ValueError(
                "char_offset mismatch: "
                f"expected {chunk.text!r}, got {extracted!r}"
            )

        if not (0 <= chunk.focal_index < len(chunk.text)):
            raise ValueError(f"focal_index out of bounds: focal_index={chunk.focal_index}")

        previous_end = chunk.end
