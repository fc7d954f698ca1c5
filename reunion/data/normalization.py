"""Word normalization shared by the lexicon loaders."""

from __future__ import annotations

import re

WORD_RE = re.compile(r"^[A-Z]+$")


def clean_word(text: str) -> str:
    """Return ``text`` stripped and uppercased, or ``""`` if it is not a plain word.

    Only ASCII letters survive; entries with digits, apostrophes or accented
    characters are rejected outright rather than mangled into another word.
    """

    if not text:
        return ""
    candidate = text.strip().upper()
    if not WORD_RE.match(candidate):
        return ""
    return candidate


__all__ = ["clean_word", "WORD_RE"]
