"""Enums shared by the reader models."""

from enum import Enum


class ChunkKind(str, Enum):
    """Kind of display unit.

    The deterministic tokenizer only produces WORD; the other kinds come
    from the enrichment service.
    """

    WORD = "word"
    PHRASE = "phrase"
    ENTITY = "entity"
    IDIOM = "idiom"


class ChunkingMode(str, Enum):
    """How chunks are produced for a document."""

    ALGORITHMIC = "algorithmic"
    ENRICHED = "enriched"


class FileType(str, Enum):
    """Source file type of an ingested document."""

    TEXT = "text"
    EPUB = "epub"
    PDF = "pdf"


class Theme(str, Enum):
    OLED = "oled"
    SEPIA = "sepia"
    HIGH_CONTRAST = "high-contrast"


class FontFamily(str, Enum):
    SANS = "sans"
    SERIF = "serif"
    MONO = "mono"
    OPENDYSLEXIC = "opendyslexic"
    LEXEND = "lexend"


class FontSize(str, Enum):
    SM = "sm"
    MD = "md"
    LG = "lg"
    XL = "xl"


class PlaybackStatus(str, Enum):
    """Scheduler state."""

    PAUSED = "paused"
    PLAYING = "playing"
