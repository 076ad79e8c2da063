"""Terminal display-width helpers for aligned plain-text columns."""

from __future__ import annotations

import unicodedata


def char_display_width(ch: str) -> int:
    """Return terminal column width for one character.

    Combining marks consume no columns and East Asian wide/fullwidth
    characters consume two.
    """
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    return sum(char_display_width(ch) for ch in text)


def pad_to_width(text: str, width: int) -> str:
    """Left-align ``text`` in a field of ``width`` display columns."""
    return text + " " * max(0, width - display_width(text))


__all__ = ["char_display_width", "display_width", "pad_to_width"]
