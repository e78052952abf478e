"""
Heading Segmenter & Label-Block Slicer
======================================
Splits canonical text into sections by a closed vocabulary of headings,
then slices a section body into sub-blocks by inline labels.

Both passes use the same strategy: find every occurrence of every
marker, merge them into one offset-ordered sequence, and cut the text
between consecutive occurrences.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Hashable, Optional, Sequence

from .models import ContactGroup, Heading, SectionSpan, SiteType

logger = logging.getLogger(__name__)

# ─── Vocabularies ─────────────────────────────────────────────────────────────

# (heading, spelling) in priority order. A heading may have several
# spellings across template revisions.
HEADING_SPELLINGS: list[tuple[Heading, str]] = [
    (Heading.CONTACT_INFORMATION, "CONTACT INFORMATION"),
    (Heading.SCHEDULE_OF_EVENTS, "SCHEDULE OF EVENTS"),
    (Heading.SCHEDULE_OF_EVENTS, "TRAVEL ITINERARY"),
    (Heading.EVENT_DETAILS, "EVENT DETAILS"),
    (Heading.CLIENT_DETAILS, "CLIENT DETAILS"),
    (Heading.CLIENT_DETAILS, "CLIENT BACKGROUND"),
    (Heading.TALENT_INTRODUCTION, "TALENT INTRODUCTION"),
    (Heading.TALENT_INTRODUCTION, "SPEAKER INTRODUCTION"),
    (Heading.EMERGENCY_TRAVEL_NUMBERS, "EMERGENCY TRAVEL NUMBERS"),
]

# Labels inside CONTACT INFORMATION. Values are label-text regex
# fragments; the trailing colon is added by the slicer.
SITE_LABELS: list[tuple[SiteType, str]] = [
    (SiteType.EVENT, r"EVENT\s*/\s*HOTEL\s+SITE"),
    (SiteType.EVENT, r"EVENT\s+SITE"),
    (SiteType.EVENT, r"EVENT\s+VENUE"),
    (SiteType.HOTEL, r"HOTEL\s+SITE"),
    (SiteType.HOTEL, r"HOTEL\s+INFORMATION"),
]

CONTACT_LABELS: list[tuple[ContactGroup, str]] = [
    (ContactGroup.CLIENT_ONSITE, r"CLIENT\s+ON-?SITE\s+CONTACTS?"),
    (ContactGroup.LAI_ONSITE, r"(?:LAI|LEADING\s+AUTHORITIES)\s+ON-?SITE\s+CONTACTS?"),
    (ContactGroup.LAI_CONTACTS, r"(?:LAI|LEADING\s+AUTHORITIES)\s*CONTACTS?"),
    (ContactGroup.TALENT, r"TALENT\s+CONTACTS?"),
    (ContactGroup.TALENT, r"SPEAKER\s+CONTACTS?"),
]

# An all-caps "LABEL:" at line start, used to trim blocks whose next
# label is not in the vocabulary.
UNKNOWN_LABEL_PATTERN = re.compile(r"^[A-Z][A-Z0-9/&' -]{2,60}:", re.MULTILINE)


# ─── Types ────────────────────────────────────────────────────────────────────


@dataclass(frozen=True)
class Marker:
    """A located heading or label occurrence."""
    key: Hashable
    start: int
    end: int
    rank: int


@dataclass(frozen=True)
class LabelBlock:
    """A slice of a section body that follows one label."""
    category: Hashable
    label: str
    text: str
    start: int
    end: int


def _compile_heading(spelling: str) -> re.Pattern:
    words = r"\s+".join(re.escape(w) for w in spelling.split())
    return re.compile(rf"\b{words}\b", re.IGNORECASE)


def _compile_label(fragment: str) -> re.Pattern:
    return re.compile(rf"(?<![A-Za-z/]){fragment}\s*:", re.IGNORECASE)


_HEADING_PATTERNS = [
    (heading, _compile_heading(spelling))
    for heading, spelling in HEADING_SPELLINGS
]


# ─── Core merge-and-slice ─────────────────────────────────────────────────────


def find_markers(
    text: str,
    patterns: Sequence[tuple[Hashable, re.Pattern]],
) -> list[Marker]:
    """
    Every occurrence of every pattern, ordered by offset.

    Occurrences at the same offset keep vocabulary order.
    """
    markers = [
        Marker(key=key, start=m.start(), end=m.end(), rank=rank)
        for rank, (key, pattern) in enumerate(patterns)
        for m in pattern.finditer(text)
    ]
    markers.sort(key=lambda mk: (mk.start, mk.rank))
    return markers


def _next_boundary(markers: list[Marker], index: int, default: int) -> int:
    """Start of the first later marker that begins at or after this one ends."""
    end = markers[index].end
    for other in markers[index + 1:]:
        if other.start >= end:
            return other.start
    return default


def segment_headings(
    text: str,
    spellings: Optional[Sequence[tuple[Heading, str]]] = None,
) -> dict[Heading, list[SectionSpan]]:
    """
    Map each heading found in `text` to its ordered spans.

    Headings that never occur have no entry. A heading that recurs owns
    one span per occurrence, in document order. Two headings matching at
    the same offset are both recorded and segmented independently.
    """
    if spellings is None:
        patterns = _HEADING_PATTERNS
    else:
        patterns = [(h, _compile_heading(s)) for h, s in spellings]

    markers = find_markers(text, patterns)
    sections: dict[Heading, list[SectionSpan]] = {}

    for i, marker in enumerate(markers):
        stop = _next_boundary(markers, i, len(text))
        span = SectionSpan(
            heading=marker.key,
            heading_start=marker.start,
            start=marker.end,
            end=stop,
            text=text[marker.end:stop],
        )
        sections.setdefault(marker.key, []).append(span)

    logger.debug(
        "Segmented %d heading occurrences into %d sections",
        len(markers), len(sections),
    )
    return sections


def first_span(
    sections: dict[Heading, list[SectionSpan]],
    heading: Heading,
) -> Optional[SectionSpan]:
    spans = sections.get(heading)
    return spans[0] if spans else None


def first_heading_offset(
    sections: dict[Heading, list[SectionSpan]],
    heading: Optional[Heading] = None,
) -> Optional[int]:
    """
    Offset where the first occurrence of `heading` begins (or of any
    heading when `heading` is None). The heading text itself precedes
    the span, so this is the start of the match, not of the span.
    """
    if heading is not None:
        span = first_span(sections, heading)
        return span.heading_start if span else None

    starts = [spans[0].heading_start for spans in sections.values() if spans]
    return min(starts) if starts else None


def label_patterns(
    labels: Sequence[tuple[Hashable, str]],
) -> list[tuple[Hashable, re.Pattern]]:
    return [(category, _compile_label(fragment)) for category, fragment in labels]


def slice_labels(
    text: str,
    labels: Sequence[tuple[Hashable, re.Pattern]],
    trim_unknown_labels: bool = True,
) -> list[LabelBlock]:
    """
    Slice one section body into (category, text) blocks.

    A category may have several label spellings. Overlapping label
    matches resolve to the earliest, then longest, occurrence. With
    `trim_unknown_labels`, a block is also cut at the first all-caps
    "LABEL:" line that the vocabulary did not cover.
    """
    if not text:
        return []

    markers = find_markers(text, labels)
    accepted: list[Marker] = []
    for marker in sorted(markers, key=lambda mk: (mk.start, -(mk.end - mk.start), mk.rank)):
        if accepted and marker.start < accepted[-1].end:
            continue
        accepted.append(marker)

    blocks: list[LabelBlock] = []
    for i, marker in enumerate(accepted):
        stop = accepted[i + 1].start if i + 1 < len(accepted) else len(text)
        if trim_unknown_labels:
            cut = UNKNOWN_LABEL_PATTERN.search(text, marker.end, stop)
            if cut:
                stop = cut.start()
        blocks.append(LabelBlock(
            category=marker.key,
            label=text[marker.start:marker.end],
            text=text[marker.end:stop].strip(),
            start=marker.end,
            end=stop,
        ))

    logger.debug("Sliced %d label blocks", len(blocks))
    return blocks
