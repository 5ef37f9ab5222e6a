"""Chunk and chapter value types for RSVP display."""

from dataclasses import dataclass

from readall.models.enums import ChunkKind


@dataclass(frozen=True)
class Chunk:
    """A single display unit.

    Attributes:
        text: The text shown on screen, including attached punctuation.
        start: Character offset of the chunk in the source text.
        end: Exclusive end offset in the source text.
        kind: Word, phrase, entity or idiom.
        focal_index: Index of the fixation character within ``text``.
    """

    text: str
    start: int
    end: int
    kind: ChunkKind = ChunkKind.WORD
    focal_index: int = 0


@dataclass(frozen=True)
class Chapter:
    """Navigation marker pointing at the first chunk of a section."""

    title: str
    chunk_index: int


@dataclass(frozen=True)
class TocEntry:
    """Table-of-contents entry from document metadata, keyed by char offset."""

    title: str
    offset: int
