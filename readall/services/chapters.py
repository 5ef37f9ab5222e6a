"""Chapter/heading extraction and chapter-to-chunk mapping.

Chapters are navigation markers pointing at chunk indices. A table of
contents from document metadata wins when present; otherwise headings are
detected in the plain text. Every document ends up with at least one marker.
"""

import logging
import re
from typing import List, Optional, Sequence

from readall.models.chunk import Chapter, Chunk, TocEntry
from readall.services.tokenizer import find_chunk_at_or_after

logger = logging.getLogger(__name__)

DEFAULT_CHAPTER_TITLE = "Start of Text"
MAX_TITLE_LENGTH = 50

# "Chapter One", "Chapter 1", "Part IV", "Book One", or a bare
# structural keyword. The whole line becomes the title.
_HEADING_PATTERN = re.compile(
    r"(?:^|\n)\s*("
    r"(?:chapter|part|book)\s+(?:[a-z]+|\d+|[ivxlcdm]+).*?"
    r"|(?:prologue|epilogue|introduction|preface|foreword).*?"
    r")(?:\r?\n|$)",
    re.IGNORECASE | re.MULTILINE,
)

# Where reading should start, in priority order: first chapter, prologue,
# introduction. Used to skip front matter on ingestion.
_START_PATTERNS = (
    re.compile(r"(?:^|\n)\s*(?:chapter|part)\s+(?:one|1|i)(?:\s+|$|[.:-])", re.IGNORECASE),
    re.compile(r"(?:^|\n)\s*prologue(?:\s+|$|[.:-])", re.IGNORECASE),
    re.compile(r"(?:^|\n)\s*introduction(?:\s+|$|[.:-])", re.IGNORECASE),
)


def truncate_title(title: str) -> str:
    """Trim a heading line and cap it at 50 characters plus an ellipsis."""
    title = title.strip()
    if len(title) > MAX_TITLE_LENGTH:
        return title[:MAX_TITLE_LENGTH] + "..."
    return title


def _dedupe_consecutive(chapters: List[Chapter]) -> List[Chapter]:
    result: List[Chapter] = []
    for chapter in chapters:
        if result and result[-1].chunk_index == chapter.chunk_index:
            continue
        result.append(chapter)
    return result


def default_chapters() -> List[Chapter]:
    return [Chapter(title=DEFAULT_CHAPTER_TITLE, chunk_index=0)]


def extract_chapters(text: str, chunks: Sequence[Chunk]) -> List[Chapter]:
    """
    Scan the text for chapter headings and map them to chunk indices.

    Args:
        text: The source text the chunks were produced from.
        chunks: Chunk sequence ordered by start offset.

    Returns:
        Chapters strictly increasing in chunk index. A single
        "Start of Text" marker when no heading is found.
    """
    chapters: List[Chapter] = []

    for match in _HEADING_PATTERN.finditer(text):
        chunk_index = find_chunk_at_or_after(chunks, match.start())
        if chunk_index is None:
            continue

        # Several headings can resolve to the same chunk (blank lines, empty headings)
        if chapters and chapters[-1].chunk_index == chunk_index:
            continue

        chapters.append(Chapter(title=truncate_title(match.group(1)), chunk_index=chunk_index))

    if not chapters:
        return default_chapters()

    return chapters


def map_toc_to_chapters(toc: Sequence[TocEntry], chunks: Sequence[Chunk]) -> List[Chapter]:
    """
    Map table-of-contents entries (character offsets) to chunk indices.

    Entries past the last chunk map to chunk 0. The result is sorted by chunk
    index and entries landing on the same chunk keep the first.
    """
    chapters = []
    for entry in toc:
        chunk_index = find_chunk_at_or_after(chunks, entry.offset)
        chapters.append(
            Chapter(
                title=entry.title.strip() or "Untitled",
                chunk_index=0 if chunk_index is None else chunk_index,
            )
        )

    chapters.sort(key=lambda chapter: chapter.chunk_index)
    return _dedupe_consecutive(chapters)


def build_chapters(
    text: str,
    chunks: Sequence[Chunk],
    toc: Optional[Sequence[TocEntry]] = None,
) -> List[Chapter]:
    """Build chapters from the metadata TOC when available, else from headings."""
    if toc:
        chapters = map_toc_to_chapters(toc, chunks)
        if chapters:
            logger.debug("Using metadata table of contents (%d entries)", len(chapters))
            return chapters

    return extract_chapters(text, chunks)


def remap_chapters(
    chapters: Sequence[Chapter],
    old_chunks: Sequence[Chunk],
    new_chunks: Sequence[Chunk],
) -> List[Chapter]:
    """
    Move chapter markers from one chunk sequence to another over the same text.

    Each marker keeps the character offset of the chunk it pointed at and is
    mapped to the first new chunk starting at or after that offset. An offset
    that falls inside the last new chunk maps to that chunk.
    """
    if not new_chunks:
        return default_chapters()

    remapped = []
    for chapter in chapters:
        if 0 <= chapter.chunk_index < len(old_chunks):
            offset = old_chunks[chapter.chunk_index].start
            chunk_index = find_chunk_at_or_after(new_chunks, offset)
            if chunk_index is None:
                chunk_index = len(new_chunks) - 1
        else:
            chunk_index = 0
        remapped.append(Chapter(title=chapter.title, chunk_index=chunk_index))

    return _dedupe_consecutive(remapped) or default_chapters()


def detect_start_index(text: str, chunks: Sequence[Chunk]) -> int:
    """
    Find the chunk where reading should begin, skipping front matter.

    Returns:
        Index of the first chunk at or after the first "Chapter 1",
        "Prologue" or "Introduction" line (in that priority), else 0.
    """
    for pattern in _START_PATTERNS:
        match = pattern.search(text)
        if not match:
            continue

        chunk_index = find_chunk_at_or_after(chunks, match.start())
        if chunk_index is not None:
            logger.info(
                "Detected reading start at chunk %d (pattern: %s)",
                chunk_index,
                pattern.pattern,
            )
            return chunk_index

    return 0


def find_active_chapter(chapters: Sequence[Chapter], index: int) -> Optional[int]:
    """
    Return the position in ``chapters`` of the chapter containing chunk ``index``.

    A chapter is active from its chunk index up to (excluding) the next
    chapter's chunk index.
    """
    active = None
    for position, chapter in enumerate(chapters):
        if chapter.chunk_index > index:
            break
        active = position
    return active
