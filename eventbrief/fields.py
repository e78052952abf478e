"""
Field Extractors
================
Single-purpose pattern matchers that pull one scalar out of a block.

Every extractor returns the first capture group (or the whole match
when the pattern has no group), stripped, or None when nothing matched.
None is the only "not found" value; an empty match is also None.
"""

from __future__ import annotations

import re
from typing import Iterable, Optional

# ─── Value Patterns ───────────────────────────────────────────────────────────

# "(555) 123-4567", or a looser digit/dash/paren/dot/space run of 7+ chars
PHONE = r"(?:\(\d{3}\)\s?\d{3}-\d{4}|\(?\d[\d().\- ]{5,24}\d)"
# Starts at a token boundary; every run is capped so long tokens scan linearly
EMAIL = r"(?<![^\s:])[^\s@:]{1,64}@[^\s@]{1,253}\.[^\s@]{1,63}"
DATE = r"\d{1,2}/\d{1,2}/\d{4}"

# ─── Labeled Field Patterns ───────────────────────────────────────────────────

BOOKING_NUMBER_PATTERN = re.compile(r"Booking\s*#\s*(\d{5,12})", re.IGNORECASE)

PHONE_PATTERN = re.compile(rf"(?:Phone|Tel|Telephone|Main)\s*:\s*({PHONE})", re.IGNORECASE)
ANY_PHONE_PATTERN = re.compile(PHONE)
OFFICE_PATTERN = re.compile(rf"(?:Office|Work|Direct)\s*:\s*({PHONE})", re.IGNORECASE)
# A possessive "John's Cell:" belongs to someone else
CELL_PATTERN = re.compile(
    rf"(?<!'s )(?<!’s )\b(?:Cell|Mobile)\s*:\s*({PHONE})", re.IGNORECASE
)
EMAIL_PATTERN = re.compile(rf"E-?mail\s*:\s*({EMAIL})", re.IGNORECASE)
ANY_EMAIL_PATTERN = re.compile(EMAIL)

CHECK_IN_PATTERN = re.compile(rf"Check-?\s?in(?:\s+date)?\s*:\s*({DATE})", re.IGNORECASE)
CHECK_OUT_PATTERN = re.compile(rf"Check-?\s?out(?:\s+date)?\s*:\s*({DATE})", re.IGNORECASE)
CONFIRMATION_PATTERN = re.compile(
    r"Confirmation(?:\s+(?:number|no\.?|#))?\s*[:#]?\s*((?=[A-Z-]{0,30}\d)[A-Z0-9][A-Z0-9-]{2,30})\b",
    re.IGNORECASE,
)
ROOM_TYPE_PATTERN = re.compile(r"\bRoom(?:\s+type)?\s*:\s*([^\n]{1,120})", re.IGNORECASE)
RATE_PATTERN = re.compile(r"\bRate\s*:\s*([^\n]{1,80})", re.IGNORECASE)
NIGHTS_LABELED_PATTERN = re.compile(r"\bNights?\s*:\s*(\S{1,10})", re.IGNORECASE)
NIGHTS_STAY_PATTERN = re.compile(r"(\S{1,10})\s{1,3}nights?\s{1,3}stay", re.IGNORECASE)
NOTES_PATTERN = re.compile(r"Confirmation[^\n]{0,200}\n([\s\S]+)$", re.IGNORECASE)

RESERVATION_CODE_PATTERN = re.compile(r"Reservation\s+Code\s*:\s*([A-Z0-9]{1,12})", re.IGNORECASE)
SEAT_PATTERN = re.compile(r"\bSeat(?!s)\s*:?\s*([A-Z0-9]{1,4})\b", re.IGNORECASE)


# ─── Extractors ───────────────────────────────────────────────────────────────


def match_first(text: Optional[str], pattern: re.Pattern) -> Optional[str]:
    """First capture group (or whole match), stripped; None when absent."""
    if not text:
        return None
    m = pattern.search(text)
    if not m:
        return None
    value = m.group(1) if pattern.groups and m.group(1) is not None else m.group(0)
    value = value.strip()
    return value or None


def match_any(text: Optional[str], patterns: Iterable[re.Pattern]) -> Optional[str]:
    """Result of the first pattern that matches."""
    for pattern in patterns:
        value = match_first(text, pattern)
        if value is not None:
            return value
    return None


def parse_int(value: Optional[str]) -> Optional[int]:
    """Integer value of a matched field; None when absent or malformed."""
    if value is None:
        return None
    try:
        number = int(value)
    except ValueError:
        return None
    return number if number >= 0 else None


def digits_only(value: Optional[str]) -> str:
    return re.sub(r"\D", "", value or "")


def extract_booking_number(text: str) -> Optional[str]:
    return match_first(text, BOOKING_NUMBER_PATTERN)


def extract_phone(text: str) -> Optional[str]:
    return match_first(text, PHONE_PATTERN)


def extract_office(text: str) -> Optional[str]:
    return match_first(text, OFFICE_PATTERN)


def extract_cell(text: str) -> Optional[str]:
    return match_first(text, CELL_PATTERN)


def extract_email(text: str) -> Optional[str]:
    """Labeled email first, then any bare address in the block."""
    return match_any(text, (EMAIL_PATTERN, ANY_EMAIL_PATTERN))


def extract_nights(text: str) -> Optional[int]:
    """Number of nights; a non-numeric value ("TBD nights stay") is None."""
    return parse_int(match_any(text, (NIGHTS_LABELED_PATTERN, NIGHTS_STAY_PATTERN)))


def extract_text_until_label(text: str, label: str) -> Optional[str]:
    """
    Free text following `label:` up to the next "Label:" line or the end
    of the block.
    """
    pattern = re.compile(
        rf"{re.escape(label)}\s*:\s*([\s\S]*?)(?=\n[A-Za-z][\w /'-]{{0,40}}:|\Z)",
        re.IGNORECASE,
    )
    return match_first(text, pattern)
