"""
Record Assembler
================
Composes the normalizer, segmenter, and field parsers into one
ParsedBrief.

Flow:
    raw text → normalize → segment_headings →
        header (preamble before CONTACT INFORMATION)
        sites + contacts (label blocks inside CONTACT INFORMATION)
        schedule (SCHEDULE OF EVENTS)
        emergency numbers (EMERGENCY TRAVEL NUMBERS)
    → ConfidenceScorer → ParsedBrief

Every step is a pure function of its input; nothing here raises for
missing or malformed content.
"""

from __future__ import annotations

import logging
import re
from typing import Optional

from . import fields
from .contacts import dedupe_contacts, parse_contacts
from .flights import parse_schedule
from .models import (
    Contact,
    ContactGroup,
    EmergencyTravel,
    Heading,
    HeaderFacts,
    ParsedBrief,
    SectionSpan,
    Site,
    SiteType,
)
from .normalizer import normalize
from .scorer import ConfidenceScorer
from .segmenter import (
    CONTACT_LABELS,
    SITE_LABELS,
    first_heading_offset,
    label_patterns,
    segment_headings,
    slice_labels,
)
from .sites import parse_site

logger = logging.getLogger(__name__)

# ─── Header Patterns ──────────────────────────────────────────────────────────

DIVIDER_PATTERN = re.compile(r"^- ?- ?-[ -]*$", re.MULTILINE)
PAGE_MARKER_PATTERN = re.compile(r"^=+ ?PAGE \d+ ?=+$", re.MULTILINE)

DATE_LINE_PATTERN = re.compile(
    r"\b(?:Monday|Tuesday|Wednesday|Thursday|Friday|Saturday|Sunday)\b"
    r"|\b(?:Jan|Feb|Mar|Apr|May|Jun|Jul|Aug|Sep|Sept|Oct|Nov|Dec)[a-z]*\.?\s+\d{1,2}\b"
    r"|\b\d{1,2}/\d{1,2}/\d{2,4}\b",
    re.IGNORECASE,
)

# Talent, client, event title, date, plus one line of slack
HEADER_WINDOW = 5

_LABEL_PATTERNS = label_patterns([*SITE_LABELS, *CONTACT_LABELS])


# ─── Header ───────────────────────────────────────────────────────────────────


def is_date_line(line: str) -> bool:
    return bool(DATE_LINE_PATTERN.search(line))


def _header_lines(preamble: str) -> list[str]:
    divider = DIVIDER_PATTERN.search(preamble)
    if divider:
        preamble = preamble[divider.end():]

    lines = []
    for line in preamble.split("\n"):
        line = line.strip()
        if (
            not line
            or DIVIDER_PATTERN.match(line)
            or PAGE_MARKER_PATTERN.match(line)
            or fields.BOOKING_NUMBER_PATTERN.search(line)
        ):
            continue
        lines.append(line)
    return lines[:HEADER_WINDOW]


def parse_header(text: str, sections: dict[Heading, list[SectionSpan]]) -> HeaderFacts:
    """
    Talent, client, event title, and date from the lines before the first
    CONTACT INFORMATION heading (or the first heading of any kind).

    Lines are read positionally. When one of them looks like a date it is
    taken as the date and the others fill the remaining fields in order.
    """
    end = first_heading_offset(sections, Heading.CONTACT_INFORMATION)
    if end is None:
        end = first_heading_offset(sections)
    if end is None:
        return HeaderFacts()

    lines = _header_lines(text[:end])
    date_index = next((i for i, line in enumerate(lines) if is_date_line(line)), None)

    if date_index is None:
        positional = lines + [None] * 4
        talent, client, title, date = positional[:4]
    else:
        others = [line for i, line in enumerate(lines) if i != date_index] + [None] * 3
        talent, client, title = others[:3]
        date = lines[date_index]

    return HeaderFacts(
        talent_name=talent,
        client_name=client,
        event_title=title,
        event_date_text=date,
    )


# ─── Contact Information ──────────────────────────────────────────────────────


def parse_contact_information(
    spans: list[SectionSpan],
    trim_unknown_labels: bool = True,
) -> tuple[list[Site], list[Contact]]:
    """Sites and contacts from every CONTACT INFORMATION span."""
    sites: list[Site] = []
    contacts: list[Contact] = []

    for span in spans:
        for block in slice_labels(span.text, _LABEL_PATTERNS, trim_unknown_labels):
            if isinstance(block.category, SiteType):
                sites.append(parse_site(block.category, block.text))
            elif isinstance(block.category, ContactGroup):
                contacts.extend(parse_contacts(block.category, block.text))

    return sites, dedupe_contacts(contacts)


def parse_emergency_travel(spans: list[SectionSpan]) -> Optional[EmergencyTravel]:
    """Phone numbers under EMERGENCY TRAVEL NUMBERS, up to the next page break."""
    if not spans:
        return None

    chunks = []
    for span in spans:
        body = span.text
        marker = PAGE_MARKER_PATTERN.search(body)
        if marker:
            body = body[:marker.start()]
        chunks.append(body.strip().lstrip(":").strip())

    raw = "\n".join(chunk for chunk in chunks if chunk)
    phones = [m.group(0).strip() for m in fields.ANY_PHONE_PATTERN.finditer(raw)]
    return EmergencyTravel(phones=list(dict.fromkeys(phones)), raw=raw)


# ─── Assembly ─────────────────────────────────────────────────────────────────


def assemble(text: str, trim_unknown_labels: bool = True) -> ParsedBrief:
    """Build a ParsedBrief from canonical (already normalized) text."""
    found = segment_headings(text)
    logger.debug(f"Headings found: {[h.value for h in found]}")

    booking_number = fields.extract_booking_number(text)
    header = parse_header(text, found)
    sites, contacts = parse_contact_information(
        found.get(Heading.CONTACT_INFORMATION, []), trim_unknown_labels
    )

    schedule_spans = found.get(Heading.SCHEDULE_OF_EVENTS)
    schedule = parse_schedule(schedule_spans) if schedule_spans else None
    emergency = parse_emergency_travel(found.get(Heading.EMERGENCY_TRAVEL_NUMBERS, []))

    confidence = ConfidenceScorer().score(booking_number, header, sites, contacts)

    return ParsedBrief(
        booking_number=booking_number,
        header=header,
        sites=sites,
        contacts=contacts,
        schedule=schedule,
        emergency_travel=emergency,
        sections={heading: found.get(heading, []) for heading in Heading},
        confidence=confidence,
    )


def parse_event_brief(raw_text: Optional[str], trim_unknown_labels: bool = True) -> ParsedBrief:
    """Normalize raw extracted text and parse it into a ParsedBrief."""
    return assemble(normalize(raw_text), trim_unknown_labels)
