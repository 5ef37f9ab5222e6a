"""
Shared text predicates for the tokenizer package.

These functions recognise the structural false positives (acronyms,
honorifics, digit groups) that must not trigger punctuation pauses.
"""

import re
from typing import Optional

from .constants import CLAUSE_PUNCTUATION, SENTENCE_END_PUNCTUATION, TITLE_ABBREVIATIONS

_ACRONYM_PATTERN = re.compile(r"^(?:[A-Za-z]\.)+$")
_ABBREVIATION_PATTERN = re.compile(
    rf"^(?:{'|'.join(TITLE_ABBREVIATIONS)})\.$",
    re.IGNORECASE,
)
_NUMERIC_COMMA_PATTERN = re.compile(r"\d,$")


def is_acronym(token: str) -> bool:
    """
    Check whether a token consists only of letter+period pairs.

    Examples:
        >>> is_acronym("U.S.A.")
        True
        >>> is_acronym("Ph.D.")
        False
    """
    return bool(_ACRONYM_PATTERN.match(token))


def is_abbreviation(token: str) -> bool:
    """
    Check whether a token is a known honorific with one trailing period.

    Examples:
        >>> is_abbreviation("Dr.")
        True
        >>> is_abbreviation("dr..")
        False
    """
    return bool(_ABBREVIATION_PATTERN.match(token))


def is_numeric_comma(token: str) -> bool:
    """
    Check whether a token ends with a digit followed by a comma ("1," in "1,000").
    """
    return bool(_NUMERIC_COMMA_PATTERN.search(token))


def suppresses_punctuation_pause(token: str) -> bool:
    """Return True if trailing punctuation in ``token`` is structural, not prosodic."""
    return is_acronym(token) or is_abbreviation(token) or is_numeric_comma(token)


def get_terminal_punctuation(token: str) -> Optional[str]:
    """
    Get the last character of a token if it is a pause-triggering mark.

    Examples:
        >>> get_terminal_punctuation("hello.")
        '.'
        >>> get_terminal_punctuation("wait;")
        ';'
        >>> get_terminal_punctuation("hello") is None
        True
    """
    if not token:
        return None

    last_char = token[-1]
    if last_char in SENTENCE_END_PUNCTUATION or last_char in CLAUSE_PUNCTUATION:
        return last_char
    return None


def count_words(text: str) -> int:
    """Count whitespace-separated words."""
    return len(text.split())
