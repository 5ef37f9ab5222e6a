"""
Tokenizer package for RSVP text processing.

This package contains modules for chunking text for speed reading:
- tokenizer: deterministic chunker and offset helpers
- orp: focal point (Optimal Recognition Point) calculation
- timing: per-chunk display duration
- text_utils: acronym/abbreviation predicates
- constants: character classes and timing multipliers

Primary usage:
    >>> from readall.services.tokenizer import tokenize, calculate_chunk_delay
    >>> chunks = tokenize("Hello world.")
    >>> calculate_chunk_delay(chunks[1], wpm=300)
    500
"""

from .constants import TOKENIZER_VERSION
from .orp import calculate_focal_index, split_for_display
from .timing import (
    calculate_base_duration_ms,
    calculate_chunk_delay,
    estimate_reading_time_formatted,
    estimate_reading_time_ms,
)
from .tokenizer import find_chunk_at_or_after, tokenize, validate_chunks


def get_tokenizer_version() -> str:
    """Return the current tokenizer version string."""
    return TOKENIZER_VERSION


__all__ = [
    "tokenize",
    "find_chunk_at_or_after",
    "validate_chunks",
    "calculate_focal_index",
    "split_for_display",
    "calculate_base_duration_ms",
    "calculate_chunk_delay",
    "estimate_reading_time_ms",
    "estimate_reading_time_formatted",
    "get_tokenizer_version",
    "TOKENIZER_VERSION",
]
