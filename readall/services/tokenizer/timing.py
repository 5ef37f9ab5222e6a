"""
Display duration calculations for RSVP reading.

This module computes how long each chunk stays on screen for a given
reading rate. Durations are whole milliseconds.

Order of rules (later rules may replace earlier ones):
1. Base duration from WPM.
2. Length modifier (long tokens slower, very short tokens faster).
3. Phrase override for multi-word phrase/idiom chunks.
4. Punctuation: sentence end adds a flat pause, clause marks replace the
   delay with the base at 90% speed. Acronyms, honorifics and digit
   groups are exempt.
"""

import math
from typing import Iterable

from readall.models.chunk import Chunk
from readall.models.enums import ChunkKind

from .constants import (
    CLAUSE_PUNCTUATION,
    CLAUSE_SPEED_FACTOR,
    LONG_WORD_MULTIPLIER,
    LONG_WORD_THRESHOLD,
    MS_PER_MINUTE,
    PHRASE_WORD_MULTIPLIER,
    SENTENCE_END_PAUSE_MS,
    SENTENCE_END_PUNCTUATION,
    SHORT_WORD_MULTIPLIER,
    SHORT_WORD_THRESHOLD,
)
from .text_utils import count_words, get_terminal_punctuation, suppresses_punctuation_pause

_PHRASE_KINDS = {ChunkKind.PHRASE, ChunkKind.IDIOM}


def calculate_base_duration_ms(wpm: int) -> float:
    """
    Calculate the base word display duration from WPM (words per minute).

    Raises:
        ValueError: If wpm is not positive.

    Examples:
        >>> calculate_base_duration_ms(300)
        200.0
    """
    if wpm <= 0:
        raise ValueError(f"WPM must be positive, got {wpm}")

    return MS_PER_MINUTE / wpm


def calculate_chunk_delay(chunk: Chunk, wpm: int) -> int:
    """
    Calculate how long a chunk should be displayed.

    Args:
        chunk: The chunk to time.
        wpm: Target reading speed in words per minute.

    Returns:
        Display duration in whole milliseconds (always > 0).

    Examples:
        >>> calculate_chunk_delay(Chunk("Hello.", 0, 6), 300)
        500
        >>> calculate_chunk_delay(Chunk("Hello,", 0, 6), 300)
        222
    """
    base = calculate_base_duration_ms(wpm)
    delay = base

    token = chunk.text.strip()
    length = len(token)

    if length > LONG_WORD_THRESHOLD:
        delay = base * LONG_WORD_MULTIPLIER
    elif length < SHORT_WORD_THRESHOLD:
        delay = base * SHORT_WORD_MULTIPLIER

    # Phrase pacing replaces the length modifier, it does not compose with it
    if chunk.kind in _PHRASE_KINDS:
        word_count = count_words(token)
        if word_count > 1:
            delay = base * (word_count * PHRASE_WORD_MULTIPLIER)

    terminal = get_terminal_punctuation(token)
    if terminal and not suppresses_punctuation_pause(token):
        if terminal in SENTENCE_END_PUNCTUATION:
            delay += SENTENCE_END_PAUSE_MS
        elif terminal in CLAUSE_PUNCTUATION:
            delay = base / CLAUSE_SPEED_FACTOR

    # Round half up, never below 1 ms
    return max(1, math.floor(delay + 0.5))


def estimate_reading_time_ms(chunks: Iterable[Chunk], wpm: int) -> int:
    """
    Estimate total reading time for a chunk sequence.

    Args:
        chunks: The chunks to read.
        wpm: Target reading speed in words per minute.

    Returns:
        Sum of the chunk display durations in milliseconds.
    """
    return sum(calculate_chunk_delay(chunk, wpm) for chunk in chunks)


def estimate_reading_time_formatted(chunks: Iterable[Chunk], wpm: int) -> str:
    """
    Estimate total reading time and return as formatted string.

    Returns:
        Formatted string like "5 min" or "1 hr 23 min".
    """
    total_ms = estimate_reading_time_ms(chunks, wpm)
    total_minutes = int(total_ms / 1000 / 60)

    if total_minutes < 60:
        return f"{max(1, total_minutes)} min"

    hours = total_minutes // 60
    minutes = total_minutes % 60

    if minutes == 0:
        return f"{hours} hr"

    return f"{hours} hr {minutes} min"
