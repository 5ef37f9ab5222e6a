"""Data models for Readall."""

from readall.models.chunk import Chapter, Chunk, TocEntry
from readall.models.document import Document, DocumentMetadata
from readall.models.enums import (
    ChunkingMode,
    ChunkKind,
    FileType,
    FontFamily,
    FontSize,
    PlaybackStatus,
    Theme,
)
from readall.models.settings import ReaderSettings, clamp_wpm
from readall.models.state import ReaderState

__all__ = [
    "Chunk",
    "Chapter",
    "TocEntry",
    "Document",
    "DocumentMetadata",
    "ReaderSettings",
    "ReaderState",
    "clamp_wpm",
    "ChunkKind",
    "ChunkingMode",
    "FileType",
    "FontFamily",
    "FontSize",
    "PlaybackStatus",
    "Theme",
]
