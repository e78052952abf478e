"""
Text Normalizer
===============
Canonical whitespace form shared by every downstream matcher.
"""

from __future__ import annotations

import re

# Any whitespace except the newline itself
_HORIZONTAL_WS = re.compile(r"[^\S\n]+")
_PADDED_NEWLINE = re.compile(r" ?\n ?")
_BLANK_RUN = re.compile(r"\n{3,}")


def normalize(text: str | None) -> str:
    """
    Collapse whitespace variation into canonical text.

    Carriage returns are dropped, horizontal whitespace runs become one
    space, padding around line breaks is removed, three or more newlines
    become a single blank line, and the result is stripped.
    Idempotent: normalize(normalize(x)) == normalize(x).
    """
    if not text:
        return ""

    text = text.replace("\r", "")
    text = _HORIZONTAL_WS.sub(" ", text)
    text = _PADDED_NEWLINE.sub("\n", text)
    text = _BLANK_RUN.sub("\n\n", text)
    return text.strip()
