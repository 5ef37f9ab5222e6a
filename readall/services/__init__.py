"""Business logic services for Readall."""

from readall.services.chapters import build_chapters, detect_start_index, extract_chapters
from readall.services.enrichment import EnrichmentClient, EnrichmentError
from readall.services.gestures import GestureController, GestureKind
from readall.services.library import Library, build_document
from readall.services.reconciler import EnrichedItem, merge_enrichment, reconcile
from readall.services.scheduler import LookaheadCache, PlaybackScheduler
from readall.services.session import ReaderSession
from readall.services.storage import DocumentStorage
from readall.services.tokenizer import calculate_chunk_delay, calculate_focal_index, tokenize

__all__ = [
    # Segmentation and pacing
    "tokenize",
    "calculate_focal_index",
    "calculate_chunk_delay",
    "extract_chapters",
    "build_chapters",
    "detect_start_index",
    # Enrichment
    "EnrichedItem",
    "reconcile",
    "merge_enrichment",
    "EnrichmentClient",
    "EnrichmentError",
    # Playback and input
    "LookaheadCache",
    "PlaybackScheduler",
    "GestureController",
    "GestureKind",
    "ReaderSession",
    # Library
    "DocumentStorage",
    "Library",
    "build_document",
]
