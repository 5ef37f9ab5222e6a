"""
Tokenizer constants for chunking, focal point and timing heuristics.

This module contains the character classes, abbreviation list and timing
multipliers used by the RSVP engine.
"""

# Tokenizer version - increment when logic changes
TOKENIZER_VERSION = "1.0.0"

# -----------------------------------------------------------------------------
# Character classes
# -----------------------------------------------------------------------------

# Apostrophes allowed inside words: ASCII and right single quotation mark
APOSTROPHES = "'’"

# Punctuation that may trail a word and stays attached to it
TRAILING_PUNCTUATION = ".,!?;:"

# -----------------------------------------------------------------------------
# Focal point
# -----------------------------------------------------------------------------

# Fixation point as a fraction of the token length
FOCAL_RATIO = 0.35

# -----------------------------------------------------------------------------
# Timing
# -----------------------------------------------------------------------------

MS_PER_MINUTE = 60_000

# Length modifiers (trimmed token length)
LONG_WORD_THRESHOLD = 10
LONG_WORD_MULTIPLIER = 1.3
SHORT_WORD_THRESHOLD = 3
SHORT_WORD_MULTIPLIER = 0.9

# Multi-word phrase pacing, per word
PHRASE_WORD_MULTIPLIER = 0.85

# Sentence-final punctuation adds a flat pause (rate independent)
SENTENCE_END_PUNCTUATION = {'.', '!', '?'}
SENTENCE_END_PAUSE_MS = 300

# Clause punctuation replaces the delay with the base at 90% speed
CLAUSE_PUNCTUATION = {',', ';', ':'}
CLAUSE_SPEED_FACTOR = 0.9

# -----------------------------------------------------------------------------
# Abbreviations
# -----------------------------------------------------------------------------

# Honorifics that take a single trailing period (matched case-insensitively)
TITLE_ABBREVIATIONS = ('mr', 'mrs', 'ms', 'dr', 'prof', 'sr', 'jr', 'st')
