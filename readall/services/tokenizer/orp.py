"""ORP (Optimal Recognition Point) calculator for RSVP reading."""

import math
from typing import Tuple

from .constants import FOCAL_RATIO


def calculate_focal_index(text: str) -> int:
    """
    Calculate the fixation character index for a token.

    The ORP sits about 35% into the token. Punctuation is not stripped, so
    the rule applies to the raw token including trailing marks.

    Args:
        text: The token text.

    Returns:
        The 0-indexed focal position (0 for tokens of length <= 1).

    Examples:
        >>> calculate_focal_index("I")
        0
        >>> calculate_focal_index("Hello,")
        2
    """
    length = len(text.strip())
    if length <= 1:
        return 0
    return math.floor(length * FOCAL_RATIO)


def split_for_display(text: str, focal_index: int) -> Tuple[str, str, str]:
    """
    Split a token into three parts for ORP display.

    This is useful for UI rendering where the ORP character is highlighted
    differently from the rest of the token. A focal index of 0 leaves the
    leading part empty.

    Args:
        text: The token to split.
        focal_index: Fixation index, usually from calculate_focal_index().

    Returns:
        Tuple of (before_orp, orp_char, after_orp).

    Example:
        >>> split_for_display("reading", 2)
        ('re', 'a', 'ding')
    """
    if not text:
        return ("", "", "")

    focal_index = max(0, min(focal_index, len(text) - 1))
    return (text[:focal_index], text[focal_index], text[focal_index + 1:])
